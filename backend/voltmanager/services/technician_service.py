# Overview: Service-layer operations for technicians.

from __future__ import annotations

from ..extensions import db
from ..models import Technician
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

TECHNICIAN_MUTABLE_FIELDS = {"name", "skills", "status"}


def list_technicians() -> list[dict]:
    return list_records(Technician)


def get_technician(technician_id: str) -> dict | None:
    return get_record(Technician, technician_id)


def create_technician(*, patch: dict) -> dict:
    """New technicians always start as available."""
    tech = Technician(id=new_record_id(), seq=next_sequence(Technician), skills=[])
    apply_patch(tech, patch, TECHNICIAN_MUTABLE_FIELDS)
    tech.status = "available"

    db.session.add(tech)
    db.session.commit()
    return tech.to_dict()


def update_technician(*, technician_id: str, patch: dict) -> dict:
    tech = require_record(Technician, technician_id, "Technician")
    apply_patch(tech, patch, TECHNICIAN_MUTABLE_FIELDS)
    db.session.commit()
    return tech.to_dict()


def delete_technician(*, technician_id: str) -> bool:
    return delete_record(Technician, technician_id, "Technician")


def get_available_technicians() -> list[dict]:
    techs = ordered_query(Technician).filter(Technician.status == "available").all()
    return [t.to_dict() for t in techs]
