# Overview: Flask API routes for repair orders; parses input and returns JSON responses.

from flask import Blueprint, request, current_app

from ..models import RepairOrder
from ..services import repair_order_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_repair_order,
    ValidationError,
    NotFoundError,
)
from voltmanager.time_utils import parse_iso_datetime

REPAIR_ORDER_POLICY = ModelValidationPolicy(
    writable_fields=set(repair_order_service.REPAIR_ORDER_MUTABLE_FIELDS),
    required_on_create={"customer_name", "device_info", "issue"},
)

repair_orders_bp = Blueprint("repair_orders", __name__, url_prefix="/api/repair-orders")


@repair_orders_bp.get("")
def list_repair_orders():
    """Most recent first. Optional q (id, customer, device, issue) and status."""
    q = request.args.get("q")
    status = request.args.get("status")
    if q or status:
        items = repair_order_service.search_repair_orders(q, status)
    else:
        items = repair_order_service.list_repair_orders()
    return {"items": items, "count": len(items)}


@repair_orders_bp.get("/pending")
def pending_repair_orders():
    items = repair_order_service.get_pending_orders()
    return {"items": items, "count": len(items)}


@repair_orders_bp.get("/<order_id>")
def get_repair_order(order_id: str):
    order = repair_order_service.get_repair_order(order_id)
    if order is None:
        return {"error": "Repair order not found"}, 404
    return order


@repair_orders_bp.post("")
def create_repair_order_route():
    """Create a repair order. Status always starts as pending."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=RepairOrder, payload=payload, policy=REPAIR_ORDER_POLICY, partial=False)
        enforce_rules_repair_order(patch)
        created = repair_order_service.create_repair_order(patch=patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    return created, 201


@repair_orders_bp.patch("/<order_id>")
def update_repair_order_route(order_id: str):
    """
    Partial update. Technician and schedule are not writable here; use
    /assign or the calendar move endpoint.
    """
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=RepairOrder, payload=payload, policy=REPAIR_ORDER_POLICY, partial=True)
        enforce_rules_repair_order(patch)
        updated = repair_order_service.update_repair_order(order_id=order_id, patch=patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return updated, 200


@repair_orders_bp.delete("/<order_id>")
def delete_repair_order_route(order_id: str):
    try:
        repair_order_service.delete_repair_order(order_id=order_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return {"ok": True}, 200


@repair_orders_bp.post("/<order_id>/assign")
def assign_technician_route(order_id: str):
    """
    Assign a technician and scheduled date together.

    Body: {"technician_id": str, "scheduled_date": ISO-8601}
    Body {"technician_id": null} unassigns (clears both fields).
    """
    data = request.get_json(silent=True) or {}
    technician_id = data.get("technician_id")

    try:
        if technician_id is None:
            updated = repair_order_service.unassign_order(order_id=order_id)
        else:
            try:
                scheduled = parse_iso_datetime(data.get("scheduled_date"))
            except ValueError:
                return {"error": "scheduled_date must be an ISO-8601 datetime"}, 400
            updated = repair_order_service.assign_technician(
                order_id=order_id,
                technician_id=technician_id,
                scheduled_date=scheduled,
            )
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except Exception:
        current_app.logger.exception("Failed to assign technician")
        return {"error": "Internal server error"}, 500

    return updated, 200


@repair_orders_bp.post("/<order_id>/time")
def update_time_spent_route(order_id: str):
    """Body: {"time_spent": hours}"""
    data = request.get_json(silent=True) or {}
    if "time_spent" not in data:
        return {"error": "time_spent required"}, 400

    try:
        updated = repair_order_service.update_time_spent(order_id=order_id, hours=data["time_spent"])
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return updated, 200
