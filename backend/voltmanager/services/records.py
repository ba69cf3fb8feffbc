# Overview: Shared record-store helpers used by every entity service.

"""
Record store helpers.

Every entity table has a string primary key ``id`` and an integer ``seq``
holding insertion order. Listings read in ``seq`` order (oldest first) or
reversed (newest first). Callers only ever receive ``to_dict()`` snapshots;
model instances never leave the service layer.
"""
from __future__ import annotations

import uuid

from sqlalchemy import func

from ..extensions import db
from ..validation import NotFoundError


def new_record_id() -> str:
    return uuid.uuid4().hex


def next_sequence(model) -> int:
    current = db.session.query(func.max(model.seq)).scalar()
    return int(current or 0) + 1


def ordered_query(model, *, newest_first: bool = False):
    order = model.seq.desc() if newest_first else model.seq.asc()
    return db.session.query(model).order_by(order)


def list_records(model, *, newest_first: bool = False) -> list[dict]:
    return [r.to_dict() for r in ordered_query(model, newest_first=newest_first).all()]


def find_record(model, record_id):
    if record_id is None:
        return None
    return db.session.get(model, record_id)


def require_record(model, record_id, label: str):
    record = find_record(model, record_id)
    if record is None:
        raise NotFoundError(f"{label} not found")
    return record


def get_record(model, record_id) -> dict | None:
    record = find_record(model, record_id)
    return record.to_dict() if record else None


def apply_patch(record, patch: dict, allowed: set[str]) -> None:
    for k, v in patch.items():
        if k not in allowed:
            continue
        setattr(record, k, v)


def delete_record(model, record_id, label: str) -> bool:
    record = require_record(model, record_id, label)
    db.session.delete(record)
    db.session.commit()
    return True
