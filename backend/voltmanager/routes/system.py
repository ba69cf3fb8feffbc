# backend/voltmanager/routes/system.py
"""
System health endpoint.

Reports record-store connectivity and per-collection counts.
"""

import time
from flask import Blueprint, current_app
from ..extensions import db
from ..models import Product, Invoice, RepairOrder, Technician
from voltmanager.time_utils import utcnow, to_utc_z

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """
    Check database connectivity and basic operations.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        details = {
            "products": db.session.query(Product).count(),
            "invoices": db.session.query(Invoice).count(),
            "repair_orders": db.session.query(RepairOrder).count(),
            "technicians": db.session.query(Technician).count(),
        }
        elapsed_ms = (time.time() - start_time) * 1000

        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": details,
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


@system_bp.get("/health")
def health():
    database = check_database_health()
    healthy = database["status"] == "healthy"
    body = {
        "status": "ok" if healthy else "degraded",
        "time": to_utc_z(utcnow()),
        "database": database,
    }
    return body, 200 if healthy else 503
