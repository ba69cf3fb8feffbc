# Overview: Service-layer operations for restock predictions.

"""
Restock predictions are served as stored. generate_predictions does not
forecast anything from sales history; it returns the current predictions so
callers can treat it as a refresh.
"""
from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import RestockPrediction
from .records import apply_patch, list_records, require_record

PREDICTION_MUTABLE_FIELDS = {"current_stock", "predicted_demand", "suggested_order", "confidence"}

HIGH_CONFIDENCE = 0.8
MEDIUM_CONFIDENCE = 0.6


def confidence_label(confidence: float) -> str:
    if confidence >= HIGH_CONFIDENCE:
        return "High"
    if confidence >= MEDIUM_CONFIDENCE:
        return "Medium"
    return "Low"


def _with_label(row: dict) -> dict:
    row["confidence_label"] = confidence_label(row["confidence"])
    return row


def list_predictions() -> list[dict]:
    return [_with_label(row) for row in list_records(RestockPrediction)]


def get_prediction(product_id: str) -> dict | None:
    prediction = db.session.get(RestockPrediction, product_id)
    return _with_label(prediction.to_dict()) if prediction else None


def generate_predictions() -> list[dict]:
    predictions = list_predictions()
    current_app.logger.info("Restock predictions refreshed (%d rows, stored data)", len(predictions))
    return predictions


def update_prediction(*, product_id: str, patch: dict) -> dict:
    prediction = require_record(RestockPrediction, product_id, "Prediction")
    apply_patch(prediction, patch, PREDICTION_MUTABLE_FIELDS)
    db.session.commit()
    return _with_label(prediction.to_dict())
