# Overview: Shop settings (single row) and data backup snapshots.

from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import ShopSettings, Product, Invoice, RepairOrder, Technician, RestockPrediction
from voltmanager.time_utils import to_utc_z, utcnow
from .records import apply_patch, list_records

SHOP_INFO_FIELDS = {"shop_name", "address", "phone", "email", "tax_rate_bps"}
NOTIFICATION_FIELDS = {
    "notify_low_stock",
    "notify_new_orders",
    "notify_payment_reminders",
    "notify_system_updates",
}
BACKUP_FIELDS = {"auto_backup", "backup_frequency"}


def _get_or_create() -> ShopSettings:
    settings = db.session.query(ShopSettings).order_by(ShopSettings.id.asc()).first()
    if settings is None:
        settings = ShopSettings()
        db.session.add(settings)
        db.session.commit()
    return settings


def get_settings() -> dict:
    return _get_or_create().to_dict()


def _update(patch: dict, allowed: set[str]) -> dict:
    settings = _get_or_create()
    apply_patch(settings, patch, allowed)
    db.session.commit()
    return settings.to_dict()


def update_shop_info(patch: dict) -> dict:
    return _update(patch, SHOP_INFO_FIELDS)


def update_notifications(patch: dict) -> dict:
    return _update(patch, NOTIFICATION_FIELDS)


def update_backup_preferences(patch: dict) -> dict:
    return _update(patch, BACKUP_FIELDS)


def run_backup() -> dict:
    """
    Snapshot every collection and stamp last_backup_at.

    The snapshot uses the same shapes as the API, so it can be fed back to
    the seed loader.
    """
    settings = _get_or_create()
    taken_at = utcnow()

    snapshot = {
        "taken_at": to_utc_z(taken_at),
        "products": list_records(Product),
        "invoices": list_records(Invoice, newest_first=True),
        "repair_orders": list_records(RepairOrder, newest_first=True),
        "technicians": list_records(Technician),
        "restock_predictions": list_records(RestockPrediction),
    }

    settings.last_backup_at = taken_at
    db.session.commit()

    current_app.logger.info(
        "Backup taken: %d products, %d invoices, %d repair orders",
        len(snapshot["products"]), len(snapshot["invoices"]), len(snapshot["repair_orders"]),
    )
    return snapshot
