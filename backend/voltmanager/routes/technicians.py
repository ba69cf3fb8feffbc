# Overview: Flask API routes for technicians; parses input and returns JSON responses.

from flask import Blueprint, request

from ..models import Technician
from ..services import technician_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_technician,
    ValidationError,
    NotFoundError,
)

TECHNICIAN_POLICY = ModelValidationPolicy(
    writable_fields=set(technician_service.TECHNICIAN_MUTABLE_FIELDS),
    required_on_create={"name"},
)

technicians_bp = Blueprint("technicians", __name__, url_prefix="/api/technicians")


@technicians_bp.get("")
def list_technicians():
    items = technician_service.list_technicians()
    return {"items": items, "count": len(items)}


@technicians_bp.get("/available")
def available_technicians():
    items = technician_service.get_available_technicians()
    return {"items": items, "count": len(items)}


@technicians_bp.get("/<technician_id>")
def get_technician(technician_id: str):
    tech = technician_service.get_technician(technician_id)
    if tech is None:
        return {"error": "Technician not found"}, 404
    return tech


@technicians_bp.post("")
def create_technician_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Technician, payload=payload, policy=TECHNICIAN_POLICY, partial=False)
        enforce_rules_technician(patch)
        created = technician_service.create_technician(patch=patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    return created, 201


@technicians_bp.patch("/<technician_id>")
def update_technician_route(technician_id: str):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Technician, payload=payload, policy=TECHNICIAN_POLICY, partial=True)
        enforce_rules_technician(patch)
        updated = technician_service.update_technician(technician_id=technician_id, patch=patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return updated, 200


@technicians_bp.delete("/<technician_id>")
def delete_technician_route(technician_id: str):
    try:
        technician_service.delete_technician(technician_id=technician_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return {"ok": True}, 200
