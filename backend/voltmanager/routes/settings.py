# Overview: Flask API routes for shop settings and backups.

from flask import Blueprint, request, current_app

from ..models import ShopSettings
from ..services import settings_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_settings,
    ValidationError,
)

SHOP_INFO_POLICY = ModelValidationPolicy(writable_fields=set(settings_service.SHOP_INFO_FIELDS))
NOTIFICATIONS_POLICY = ModelValidationPolicy(writable_fields=set(settings_service.NOTIFICATION_FIELDS))
BACKUP_POLICY = ModelValidationPolicy(writable_fields=set(settings_service.BACKUP_FIELDS))

settings_bp = Blueprint("settings", __name__, url_prefix="/api/settings")


@settings_bp.get("")
def get_settings():
    return settings_service.get_settings()


@settings_bp.patch("")
def update_shop_info():
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=ShopSettings, payload=payload, policy=SHOP_INFO_POLICY, partial=True)
        enforce_rules_settings(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    return settings_service.update_shop_info(patch)


@settings_bp.patch("/notifications")
def update_notifications():
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=ShopSettings, payload=payload, policy=NOTIFICATIONS_POLICY, partial=True)
    except ValidationError as e:
        return {"error": str(e)}, 400
    return settings_service.update_notifications(patch)


@settings_bp.patch("/backup")
def update_backup_preferences():
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=ShopSettings, payload=payload, policy=BACKUP_POLICY, partial=True)
        enforce_rules_settings(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    return settings_service.update_backup_preferences(patch)


@settings_bp.post("/backup")
def run_backup():
    try:
        snapshot = settings_service.run_backup()
    except Exception:
        current_app.logger.exception("Backup failed")
        return {"error": "Backup failed"}, 500
    return snapshot, 201
