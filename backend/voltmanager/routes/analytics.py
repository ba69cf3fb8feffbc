# Overview: Flask API routes for analytics and the dashboard summary.

from flask import Blueprint, request, current_app

from ..services import analytics_service
from voltmanager.time_utils import parse_day

analytics_bp = Blueprint("analytics", __name__, url_prefix="/api/analytics")


@analytics_bp.get("")
def analytics_route():
    try:
        return analytics_service.build_analytics()
    except Exception:
        current_app.logger.exception("Failed to load analytics data")
        return {"error": "Failed to load analytics data"}, 500


@analytics_bp.get("/dashboard")
def dashboard_route():
    """Optional ?date=YYYY-MM-DD for the revenue day (default today, UTC)."""
    raw = request.args.get("date")
    try:
        today = parse_day(raw) if raw else None
    except ValueError:
        return {"error": "date must be YYYY-MM-DD"}, 400

    try:
        return analytics_service.build_dashboard(today)
    except Exception:
        current_app.logger.exception("Failed to load dashboard data")
        return {"error": "Failed to load dashboard data"}, 500
