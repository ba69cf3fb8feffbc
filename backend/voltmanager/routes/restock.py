# Overview: Flask API routes for restock predictions.

from flask import Blueprint, request, current_app

from ..models import RestockPrediction
from ..services import restock_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_prediction,
    ValidationError,
    NotFoundError,
)

PREDICTION_POLICY = ModelValidationPolicy(
    writable_fields=set(restock_service.PREDICTION_MUTABLE_FIELDS),
)

restock_bp = Blueprint("restock", __name__, url_prefix="/api/restock-predictions")


@restock_bp.get("")
def list_predictions():
    items = restock_service.list_predictions()
    return {"items": items, "count": len(items)}


@restock_bp.post("/generate")
def generate_predictions():
    try:
        items = restock_service.generate_predictions()
    except Exception:
        current_app.logger.exception("Failed to generate predictions")
        return {"error": "Failed to generate predictions"}, 500
    return {"items": items, "count": len(items)}


@restock_bp.get("/<product_id>")
def get_prediction(product_id: str):
    prediction = restock_service.get_prediction(product_id)
    if prediction is None:
        return {"error": "Prediction not found"}, 404
    return prediction


@restock_bp.patch("/<product_id>")
def update_prediction_route(product_id: str):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=RestockPrediction, payload=payload, policy=PREDICTION_POLICY, partial=True)
        enforce_rules_prediction(patch)
        updated = restock_service.update_prediction(product_id=product_id, patch=patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return updated, 200
