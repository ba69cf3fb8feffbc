# backend/voltmanager/config.py
from __future__ import annotations
import os
from pathlib import Path


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Each app instance owns its store: in-memory SQLite unless overridden
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional file or server database
        "sqlite://", #default per-process in-memory store
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Seed fixtures loaded into a fresh store at start-up
    SEED_ON_STARTUP = _env_flag("SEED_ON_STARTUP", True)
    SEED_DATA_DIR = os.environ.get(
        "SEED_DATA_DIR",
        str(Path(__file__).resolve().parent / "seed_data"),
    )

    # Artificial per-request delay, mirrors the dashboard's mock services
    SIMULATED_LATENCY_MS = int(os.environ.get("SIMULATED_LATENCY_MS", "0"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    CORS_ALLOWED_ORIGINS = {
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:4173",
        "http://127.0.0.1:4173",
    }
