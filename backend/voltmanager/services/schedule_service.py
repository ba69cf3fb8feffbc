# Overview: Technician calendar; reads and moves repair orders across the week grid.

"""
Schedule Service (calendar)

The calendar is a grid of technicians x days. Orders land in a cell when
they are assigned to the technician and scheduled on that calendar day
(time of day is ignored). Orders with no technician sit in the unassigned
column. Moving an order is a single atomic update of both fields.
"""
from __future__ import annotations

from datetime import date, timedelta

from ..extensions import db
from ..models import RepairOrder, Technician
from ..validation import ValidationError
from voltmanager.time_utils import parse_day, start_of_day
from .records import ordered_query
from . import repair_order_service

DAYS_PER_WEEK = 7


def _day(value) -> date:
    try:
        return parse_day(value)
    except (TypeError, ValueError):
        raise ValidationError("day must be an ISO-8601 date")


def get_week_days(anchor) -> list[date]:
    """The Monday-to-Sunday week containing anchor."""
    day = _day(anchor)
    monday = day - timedelta(days=day.weekday())
    return [monday + timedelta(days=i) for i in range(DAYS_PER_WEEK)]


def get_orders_for_technician_and_day(technician_id: str, day) -> list[dict]:
    start = start_of_day(_day(day))
    end = start + timedelta(days=1)
    orders = (
        ordered_query(RepairOrder, newest_first=True)
        .filter(
            RepairOrder.assigned_technician_id == technician_id,
            RepairOrder.scheduled_date.isnot(None),
            RepairOrder.scheduled_date >= start,
            RepairOrder.scheduled_date < end,
        )
        .all()
    )
    return [o.to_dict() for o in orders]


def get_unassigned_orders() -> list[dict]:
    orders = (
        ordered_query(RepairOrder, newest_first=True)
        .filter(RepairOrder.assigned_technician_id.is_(None))
        .all()
    )
    return [o.to_dict() for o in orders]


def move_order(*, order_id: str, technician_id: str | None, day=None) -> dict:
    """
    Drop an order into a technician/day cell, or into the unassigned column
    when technician_id is None.
    """
    if technician_id is None:
        return repair_order_service.unassign_order(order_id=order_id)

    scheduled = start_of_day(_day(day))
    return repair_order_service.assign_technician(
        order_id=order_id,
        technician_id=technician_id,
        scheduled_date=scheduled,
    )


def update_time_spent(*, order_id: str, hours) -> dict:
    return repair_order_service.update_time_spent(order_id=order_id, hours=hours)


def week_board(anchor) -> dict:
    """Whole calendar view for the week containing anchor."""
    days = get_week_days(anchor)
    technicians = db.session.query(Technician).order_by(Technician.seq.asc()).all()

    rows = []
    for tech in technicians:
        rows.append({
            "technician": tech.to_dict(),
            "days": [
                {
                    "date": d.isoformat(),
                    "orders": get_orders_for_technician_and_day(tech.id, d),
                }
                for d in days
            ],
        })

    return {
        "week_start": days[0].isoformat(),
        "days": [d.isoformat() for d in days],
        "technicians": rows,
        "unassigned": get_unassigned_orders(),
    }
