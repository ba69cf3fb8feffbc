# Overview: Service-layer operations for repair orders; encapsulates business logic and database work.

"""
Repair Order Service

Invariants:
- New orders always start as 'pending'; later status changes are free-form
  among pending / in-progress / completed.
- assigned_technician_id and scheduled_date are written together by
  assign_technician / unassign_order in a single commit. The generic update
  path cannot touch either field, so no order ends up with a technician but
  no date (or the reverse).
- time_spent is hours and never negative.
"""
from __future__ import annotations

import math
from datetime import datetime

from flask import current_app

from ..extensions import db
from ..models import RepairOrder, Technician, REPAIR_STATUSES
from ..validation import NotFoundError, ValidationError
from voltmanager.time_utils import utcnow
from .concurrency import lock_for_update, run_with_retry
from .records import (
    apply_patch,
    delete_record,
    get_record,
    list_records,
    new_record_id,
    next_sequence,
    ordered_query,
    require_record,
)

REPAIR_ORDER_MUTABLE_FIELDS = {
    "customer_name",
    "customer_phone",
    "device_info",
    "issue",
    "status",
    "time_spent",
    "parts",
    "labor_cost_cents",
}


def _get_order_for_update(order_id: str) -> RepairOrder:
    order = lock_for_update(db.session.query(RepairOrder).filter_by(id=order_id)).first()
    if order is None:
        raise NotFoundError("Repair order not found")
    return order


def list_repair_orders() -> list[dict]:
    return list_records(RepairOrder, newest_first=True)


def get_repair_order(order_id: str) -> dict | None:
    return get_record(RepairOrder, order_id)


def create_repair_order(*, patch: dict) -> dict:
    order = RepairOrder(
        id=new_record_id(),
        seq=next_sequence(RepairOrder),
        created_date=utcnow(),
        parts=[],
    )
    apply_patch(order, patch, REPAIR_ORDER_MUTABLE_FIELDS)
    order.status = "pending"

    db.session.add(order)
    db.session.commit()
    return order.to_dict()


def update_repair_order(*, order_id: str, patch: dict) -> dict:
    order = require_record(RepairOrder, order_id, "Repair order")
    apply_patch(order, patch, REPAIR_ORDER_MUTABLE_FIELDS)
    db.session.commit()
    return order.to_dict()


def delete_repair_order(*, order_id: str) -> bool:
    return delete_record(RepairOrder, order_id, "Repair order")


def get_pending_orders() -> list[dict]:
    orders = (
        ordered_query(RepairOrder, newest_first=True)
        .filter(RepairOrder.status == "pending")
        .all()
    )
    return [o.to_dict() for o in orders]


def assign_technician(*, order_id: str, technician_id: str, scheduled_date: datetime) -> dict:
    """
    Bind an order to a technician and a scheduled date in one update.

    Raises:
        NotFoundError: If the order or the technician does not exist
        ValidationError: If scheduled_date is missing
    """
    if not technician_id:
        raise ValidationError("technician_id is required")
    if not isinstance(scheduled_date, datetime):
        raise ValidationError("scheduled_date is required")

    def _op():
        order = _get_order_for_update(order_id)
        require_record(Technician, technician_id, "Technician")
        order.assigned_technician_id = technician_id
        order.scheduled_date = scheduled_date
        db.session.commit()
        return order

    order = run_with_retry(_op)
    current_app.logger.info(
        "Repair order %s assigned to technician %s for %s",
        order.id, technician_id, scheduled_date.date().isoformat(),
    )
    return order.to_dict()


def unassign_order(*, order_id: str) -> dict:
    """Clear technician and scheduled date together."""
    def _op():
        order = _get_order_for_update(order_id)
        order.assigned_technician_id = None
        order.scheduled_date = None
        db.session.commit()
        return order

    order = run_with_retry(_op)
    current_app.logger.info("Repair order %s unassigned", order.id)
    return order.to_dict()


def update_time_spent(*, order_id: str, hours) -> dict:
    if isinstance(hours, bool) or not isinstance(hours, (int, float)):
        raise ValidationError("time_spent must be a number")
    if not math.isfinite(hours):
        raise ValidationError("time_spent must be a finite number")
    if hours < 0:
        raise ValidationError("time_spent must be >= 0")

    order = require_record(RepairOrder, order_id, "Repair order")
    order.time_spent = float(hours)
    db.session.commit()
    return order.to_dict()


def update_status(*, order_id: str, status: str) -> dict:
    if status not in REPAIR_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(REPAIR_STATUSES)}")
    return update_repair_order(order_id=order_id, patch={"status": status})


def search_repair_orders(query: str | None = None, status: str | None = None) -> list[dict]:
    q = ordered_query(RepairOrder, newest_first=True)
    if status and status != "all":
        q = q.filter(RepairOrder.status == status)
    orders = q.all()

    needle = (query or "").strip().lower()
    if needle:
        orders = [
            o for o in orders
            if needle in o.id.lower()
            or needle in o.customer_name.lower()
            or needle in o.device_info.lower()
            or needle in o.issue.lower()
        ]
    return [o.to_dict() for o in orders]
