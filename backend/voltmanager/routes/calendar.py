# Overview: Flask API routes for the technician calendar.

from flask import Blueprint, request, current_app

from ..services import schedule_service
from ..validation import ValidationError, NotFoundError
from voltmanager.time_utils import utcnow

calendar_bp = Blueprint("calendar", __name__, url_prefix="/api/calendar")


@calendar_bp.get("/week")
def week_route():
    """Grid for the Monday-start week containing ?date= (default today)."""
    anchor = request.args.get("date") or utcnow().date()
    try:
        return schedule_service.week_board(anchor)
    except ValidationError as e:
        return {"error": str(e)}, 400


@calendar_bp.get("/unassigned")
def unassigned_route():
    items = schedule_service.get_unassigned_orders()
    return {"items": items, "count": len(items)}


@calendar_bp.get("/technicians/<technician_id>/days/<day>")
def technician_day_route(technician_id: str, day: str):
    try:
        items = schedule_service.get_orders_for_technician_and_day(technician_id, day)
    except ValidationError as e:
        return {"error": str(e)}, 400
    return {"items": items, "count": len(items)}


@calendar_bp.post("/orders/<order_id>/move")
def move_order_route(order_id: str):
    """
    Drop an order into a cell.

    Body: {"technician_id": str, "date": "YYYY-MM-DD"} or {"technician_id": null}
    """
    data = request.get_json(silent=True) or {}

    try:
        order = schedule_service.move_order(
            order_id=order_id,
            technician_id=data.get("technician_id"),
            day=data.get("date"),
        )
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except Exception:
        current_app.logger.exception("Failed to update assignment")
        return {"error": "Failed to update assignment"}, 500

    return order, 200


@calendar_bp.post("/orders/<order_id>/time")
def time_spent_route(order_id: str):
    data = request.get_json(silent=True) or {}
    if "time_spent" not in data:
        return {"error": "time_spent required"}, 400

    try:
        order = schedule_service.update_time_spent(order_id=order_id, hours=data["time_spent"])
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return order, 200
