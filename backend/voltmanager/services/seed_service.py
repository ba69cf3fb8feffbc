# Overview: Loads JSON fixtures into the record store.

"""
Seed loader.

Fixtures are JSON arrays in the same shapes the API returns, one file per
collection. Fixture order is display order: products and technicians are
listed oldest first, invoices and repair orders newest first, so the loader
assigns `seq` accordingly.
"""
from __future__ import annotations

import json
from pathlib import Path

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import (
    Cart,
    CartLine,
    Invoice,
    InvoiceLine,
    Product,
    RepairOrder,
    RestockPrediction,
    Technician,
)
from ..validation import normalize_parts
from voltmanager.time_utils import parse_iso_datetime, utcnow
from .products_service import PRODUCT_MUTABLE_FIELDS
from .restock_service import PREDICTION_MUTABLE_FIELDS
from .technician_service import TECHNICIAN_MUTABLE_FIELDS

SEED_FILES = {
    "products": "products.json",
    "technicians": "technicians.json",
    "invoices": "invoices.json",
    "repair_orders": "repair_orders.json",
    "restock_predictions": "restock_predictions.json",
}

REPAIR_ORDER_SEED_FIELDS = {
    "customer_name",
    "customer_phone",
    "device_info",
    "issue",
    "status",
    "assigned_technician_id",
    "time_spent",
    "labor_cost_cents",
}


class SeedError(Exception):
    """Raised when a fixture file cannot be loaded."""
    pass


def _read(directory: Path, name: str) -> list[dict]:
    path = directory / name
    if not path.exists():
        return []
    try:
        with path.open(encoding="utf-8") as fh:
            rows = json.load(fh)
    except json.JSONDecodeError as exc:
        raise SeedError(f"{name}: invalid JSON ({exc})") from exc
    if not isinstance(rows, list):
        raise SeedError(f"{name}: expected a JSON array")
    return rows


def _pick(row: dict, fields: set[str]) -> dict:
    return {k: row[k] for k in fields if k in row}


def _product(row: dict, seq: int) -> Product:
    return Product(id=str(row["id"]), seq=seq, **_pick(row, PRODUCT_MUTABLE_FIELDS))


def _technician(row: dict, seq: int) -> Technician:
    return Technician(id=str(row["id"]), seq=seq, **_pick(row, TECHNICIAN_MUTABLE_FIELDS))


def _invoice(row: dict, seq: int) -> Invoice:
    items = row.get("items") or []
    subtotal = sum(item["price_cents"] * item["quantity"] for item in items)
    tax = int(row.get("tax_cents", 0))
    invoice = Invoice(
        id=str(row["id"]),
        seq=seq,
        date=parse_iso_datetime(row.get("date")) or utcnow(),
        customer_name=row["customer_name"],
        customer_phone=row.get("customer_phone"),
        subtotal_cents=subtotal,
        tax_cents=tax,
        total_cents=subtotal + tax,
        payment_method=row.get("payment_method") or "Cash",
    )
    for i, item in enumerate(items):
        invoice.lines.append(InvoiceLine(
            line_number=i + 1,
            product_id=str(item["product_id"]),
            name=item["name"],
            price_cents=item["price_cents"],
            quantity=item["quantity"],
        ))
    return invoice


def _repair_order(row: dict, seq: int) -> RepairOrder:
    order = RepairOrder(
        id=str(row["id"]),
        seq=seq,
        created_date=parse_iso_datetime(row.get("created_date")) or utcnow(),
        scheduled_date=parse_iso_datetime(row.get("scheduled_date")),
        parts=normalize_parts(row.get("parts") or []),
        **_pick(row, REPAIR_ORDER_SEED_FIELDS),
    )
    # A half-assigned fixture row is normalized to unassigned
    if order.assigned_technician_id is None or order.scheduled_date is None:
        order.assigned_technician_id = None
        order.scheduled_date = None
    return order


def _prediction(row: dict, seq: int) -> RestockPrediction:
    return RestockPrediction(
        product_id=str(row["product_id"]),
        seq=seq,
        **_pick(row, PREDICTION_MUTABLE_FIELDS),
    )


def store_is_empty() -> bool:
    return all(
        db.session.query(model).first() is None
        for model in (Product, Technician, Invoice, RepairOrder, RestockPrediction)
    )


def clear_store() -> None:
    """Delete every record (schema stays)."""
    for model in (CartLine, Cart, InvoiceLine, Invoice, RepairOrder, RestockPrediction, Technician, Product):
        db.session.query(model).delete()
    db.session.commit()


def load_seed_data(directory: str | Path | None = None) -> dict:
    """
    Load all fixture files from directory (defaults to SEED_DATA_DIR).

    Returns the number of records loaded per collection. Nothing is committed
    unless every file loads.
    """
    base = Path(directory or current_app.config["SEED_DATA_DIR"])
    if not base.is_dir():
        raise SeedError(f"Seed directory not found: {base}")

    builders = {
        "products": (_product, False),
        "technicians": (_technician, False),
        "invoices": (_invoice, True),
        "repair_orders": (_repair_order, True),
        "restock_predictions": (_prediction, False),
    }

    counts = {}
    try:
        for key, filename in SEED_FILES.items():
            build, newest_first = builders[key]
            rows = _read(base, filename)
            total = len(rows)
            for i, row in enumerate(rows):
                seq = total - i if newest_first else i + 1
                db.session.add(build(row, seq))
            counts[key] = total
        db.session.commit()
    except SeedError:
        db.session.rollback()
        raise
    except (KeyError, TypeError, ValueError, IntegrityError) as exc:
        db.session.rollback()
        raise SeedError(f"Invalid fixture data: {exc}") from exc

    current_app.logger.info(
        "Seeded store from %s: %s",
        base, ", ".join(f"{k}={v}" for k, v in counts.items()),
    )
    return counts
