from __future__ import annotations

from ..extensions import db
from voltmanager.time_utils import to_utc_z

REPAIR_STATUSES = ("pending", "in-progress", "completed")
TECHNICIAN_STATUSES = ("available", "busy", "offline")


class RepairOrder(db.Model):
    """
    Repair ticket for a customer device.

    assigned_technician_id and scheduled_date travel together: the calendar
    sets or clears both in one update. Status changes are free-form.
    """
    __tablename__ = "repair_orders"
    __table_args__ = (
        db.Index("ix_repair_orders_status", "status"),
        db.Index("ix_repair_orders_tech_scheduled", "assigned_technician_id", "scheduled_date"),
    )

    id = db.Column(db.String(36), primary_key=True)
    seq = db.Column(db.Integer, nullable=False, index=True)

    created_date = db.Column(db.DateTime, nullable=False)

    customer_name = db.Column(db.String(255), nullable=False)
    customer_phone = db.Column(db.String(64), nullable=True)
    device_info = db.Column(db.String(255), nullable=False)
    issue = db.Column(db.Text, nullable=False)

    status = db.Column(db.String(16), nullable=False, default="pending")

    # Technician id only, no FK: deleting a technician leaves history intact
    assigned_technician_id = db.Column(db.String(36), nullable=True)
    scheduled_date = db.Column(db.DateTime, nullable=True)

    time_spent = db.Column(db.Float, nullable=False, default=0.0)  # hours

    # [{"name": ..., "price_cents": ..., "quantity": ...}]
    parts = db.Column(db.JSON, nullable=False, default=list)
    labor_cost_cents = db.Column(db.Integer, nullable=False, default=0)

    version_id = db.Column(db.Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<RepairOrder id={self.id} status={self.status!r} tech={self.assigned_technician_id}>"

    @property
    def parts_total_cents(self) -> int:
        return sum(part["price_cents"] * part["quantity"] for part in (self.parts or []))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "created_date": to_utc_z(self.created_date),
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "device_info": self.device_info,
            "issue": self.issue,
            "status": self.status,
            "assigned_technician_id": self.assigned_technician_id,
            "scheduled_date": to_utc_z(self.scheduled_date),
            "time_spent": self.time_spent,
            "parts": [dict(part) for part in (self.parts or [])],
            "parts_total_cents": self.parts_total_cents,
            "labor_cost_cents": self.labor_cost_cents,
            "version_id": self.version_id,
        }


class Technician(db.Model):
    __tablename__ = "technicians"

    id = db.Column(db.String(36), primary_key=True)
    seq = db.Column(db.Integer, nullable=False, index=True)

    name = db.Column(db.String(255), nullable=False)
    skills = db.Column(db.JSON, nullable=False, default=list)
    # Informational only; not derived from assignment load
    status = db.Column(db.String(16), nullable=False, default="available")

    def __repr__(self) -> str:
        return f"<Technician id={self.id} name={self.name!r} status={self.status!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "skills": list(self.skills or []),
            "status": self.status,
        }
