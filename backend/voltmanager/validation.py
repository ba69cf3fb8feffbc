from __future__ import annotations
import math
from datetime import datetime
from voltmanager.time_utils import parse_iso_datetime

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Boolean, Float, Integer, JSON, String, Text, DateTime
from sqlalchemy.orm import DeclarativeMeta

from .models import REPAIR_STATUSES, TECHNICIAN_STATUSES, BACKUP_FREQUENCIES


# Maximum price: $9,999,999.99 (999,999,999 cents)
# This prevents database overflow issues and nonsensical prices
MAX_PRICE_CENTS = 999_999_999


class ValidationError(ValueError):
    """400-level input problem."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate SKU)."""


class NotFoundError(LookupError):
    """404-level: the target record does not exist."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    # Integers - strict validation to reject floats and scientific notation
    if isinstance(coltype, Integer):
        # Already an int (but not bool which is a subclass of int)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        # String input - must be plain digits (with optional leading minus)
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValidationError(f"{col.key} must be an integer")
            # Reject scientific notation (e.g., "1e15", "1E10")
            if 'e' in stripped.lower():
                raise ValidationError(f"{col.key} must be a plain integer (scientific notation not allowed)")
            # Reject decimal points (e.g., "12.5")
            if '.' in stripped:
                raise ValidationError(f"{col.key} must be an integer (no decimals)")
            try:
                return int(stripped)
            except ValueError:
                raise ValidationError(f"{col.key} must be an integer")
        # Reject floats explicitly
        if isinstance(value, float):
            raise ValidationError(f"{col.key} must be an integer, not a decimal")
        # Other types
        raise ValidationError(f"{col.key} must be an integer")

    # Floats (hours, confidence)
    if isinstance(coltype, Float):
        if isinstance(value, bool):
            raise ValidationError(f"{col.key} must be a number")
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            try:
                number = float(value.strip())
            except ValueError:
                raise ValidationError(f"{col.key} must be a number")
        else:
            raise ValidationError(f"{col.key} must be a number")
        # Rejects NaN and +/-inf
        if not math.isfinite(number):
            raise ValidationError(f"{col.key} must be a finite number")
        return number

    # Booleans
    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        # fallback: truthiness
        return bool(value)

    # Datetimes (accept ISO-8601 strings; normalize to UTC)
    if isinstance(coltype, DateTime):
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                dt = parse_iso_datetime(value)
            except ValueError:
                raise ValidationError(f"{col.key} must be an ISO-8601 datetime")
            if dt is None:
                raise ValidationError(f"{col.key} must be an ISO-8601 datetime")
            return dt
        raise ValidationError(f"{col.key} must be a datetime")

    # JSON lists are checked by the per-entity rules
    if isinstance(coltype, JSON):
        if not isinstance(value, list):
            raise ValidationError(f"{col.key} must be a list")
        return value

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        return str(value).strip()

    # Default: leave as-is
    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    required = policy.required_on_create or set()
    if not partial:
        missing = sorted(f for f in required if f not in payload)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)

    # Reject unknown / non-writable fields
    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if k not in cols:
            raise ValidationError(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in payload.items():
        col = cols[k]

        # NULL handling
        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[k] = None
            continue

        val = _coerce_value(col, raw)

        # Blank string check for non-nullable text fields
        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank")

        # Max length check for String(n)
        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[k] = val

    return patch


def _check_cents(patch: dict, key: str) -> None:
    if key in patch and patch[key] is not None:
        amount = patch[key]
        if amount < 0:
            raise ValidationError(f"{key} must be >= 0")
        if amount > MAX_PRICE_CENTS:
            raise ValidationError(f"{key} cannot exceed {MAX_PRICE_CENTS} (${MAX_PRICE_CENTS / 100:,.2f})")


def _check_non_negative(patch: dict, key: str) -> None:
    if key in patch and patch[key] is not None and patch[key] < 0:
        raise ValidationError(f"{key} must be >= 0")


def enforce_rules_product(patch: dict) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    _check_cents(patch, "price_cents")
    _check_cents(patch, "cost_cents")
    for key in ("stock", "min_stock", "warranty_months"):
        _check_non_negative(patch, key)


def normalize_parts(parts: list) -> list[dict]:
    """Parts are [{name, price_cents, quantity}] snapshots stored as JSON."""
    cleaned = []
    for part in parts:
        if not isinstance(part, dict):
            raise ValidationError("each part must be an object")
        name = str(part.get("name") or "").strip()
        if not name:
            raise ValidationError("part name is required")
        price = part.get("price_cents", 0)
        quantity = part.get("quantity", 1)
        if isinstance(price, bool) or not isinstance(price, int) or price < 0:
            raise ValidationError("part price_cents must be a non-negative integer")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError("part quantity must be a positive integer")
        cleaned.append({"name": name, "price_cents": price, "quantity": quantity})
    return cleaned


def enforce_rules_repair_order(patch: dict) -> None:
    if "status" in patch and patch["status"] not in REPAIR_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(REPAIR_STATUSES)}")
    _check_non_negative(patch, "time_spent")
    _check_cents(patch, "labor_cost_cents")
    if "parts" in patch:
        patch["parts"] = normalize_parts(patch["parts"])


def enforce_rules_technician(patch: dict) -> None:
    if "status" in patch and patch["status"] not in TECHNICIAN_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(TECHNICIAN_STATUSES)}")
    if "skills" in patch:
        skills = [str(s).strip() for s in patch["skills"]]
        if any(not s for s in skills):
            raise ValidationError("skills cannot contain blank entries")
        patch["skills"] = skills


def enforce_rules_prediction(patch: dict) -> None:
    for key in ("current_stock", "predicted_demand", "suggested_order"):
        _check_non_negative(patch, key)
    if "confidence" in patch:
        confidence = patch["confidence"]
        if confidence < 0 or confidence > 1:
            raise ValidationError("confidence must be between 0 and 1")


def enforce_rules_settings(patch: dict) -> None:
    if "tax_rate_bps" in patch:
        rate = patch["tax_rate_bps"]
        if rate < 0 or rate > 10_000:
            raise ValidationError("tax_rate_bps must be between 0 and 10000")
    if "backup_frequency" in patch and patch["backup_frequency"] not in BACKUP_FREQUENCIES:
        raise ValidationError(f"backup_frequency must be one of: {', '.join(BACKUP_FREQUENCIES)}")
