# Overview: Service-layer operations for invoices; encapsulates business logic and database work.

"""
Invoice Service

Invoices are immutable sale records. Totals are computed here, never taken on
trust from the caller:
- subtotal_cents = sum(price_cents * quantity) over the lines
- total_cents = subtotal_cents + tax_cents

Only customer_name, customer_phone and payment_method may be corrected after
creation, so the invariants above hold for the life of the record.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta

from sqlalchemy import func

from ..extensions import db
from ..models import Invoice, InvoiceLine
from ..validation import ValidationError
from voltmanager.time_utils import start_of_day, utcnow
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

INVOICE_MUTABLE_FIELDS = {"customer_name", "customer_phone", "payment_method"}

DEFAULT_PAYMENT_METHOD = "Cash"


def clean_text(value, field: str) -> str:
    """Strip a free-text field; None reads as blank, non-strings are rejected."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value.strip()


def calculate_tax_cents(subtotal_cents: int, rate_bps: int) -> int:
    """Tax on a subtotal, nearest-cent rounding (half-up)."""
    return (subtotal_cents * rate_bps + 5_000) // 10_000


def normalize_items(items) -> list[dict]:
    """Validate line snapshots: [{product_id, name, price_cents, quantity}]."""
    if not isinstance(items, list) or not items:
        raise ValidationError("items must be a non-empty list")

    cleaned = []
    for item in items:
        if not isinstance(item, dict):
            raise ValidationError("each item must be an object")
        product_id = str(item.get("product_id") or "").strip()
        name = str(item.get("name") or "").strip()
        price = item.get("price_cents")
        quantity = item.get("quantity")
        if not product_id:
            raise ValidationError("item product_id is required")
        if not name:
            raise ValidationError("item name is required")
        if isinstance(price, bool) or not isinstance(price, int) or price < 0:
            raise ValidationError("item price_cents must be a non-negative integer")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError("item quantity must be a positive integer")
        cleaned.append({
            "product_id": product_id,
            "name": name,
            "price_cents": price,
            "quantity": quantity,
        })
    return cleaned


def build_invoice(
    *,
    customer_name: str,
    customer_phone: str | None,
    items: list[dict],
    tax_cents: int,
    payment_method: str = DEFAULT_PAYMENT_METHOD,
    invoice_date: datetime | None = None,
) -> Invoice:
    """
    Add an invoice and its lines to the session without committing.

    Lets checkout put invoice creation and stock decrements in one transaction.
    """
    subtotal = sum(item["price_cents"] * item["quantity"] for item in items)

    invoice = Invoice(
        id=new_record_id(),
        seq=next_sequence(Invoice),
        date=invoice_date or utcnow(),
        customer_name=customer_name,
        customer_phone=customer_phone,
        subtotal_cents=subtotal,
        tax_cents=tax_cents,
        total_cents=subtotal + tax_cents,
        payment_method=payment_method or DEFAULT_PAYMENT_METHOD,
    )
    for i, item in enumerate(items):
        invoice.lines.append(InvoiceLine(
            line_number=i + 1,
            product_id=item["product_id"],
            name=item["name"],
            price_cents=item["price_cents"],
            quantity=item["quantity"],
        ))

    db.session.add(invoice)
    db.session.flush()
    return invoice


def create_invoice(
    *,
    customer_name: str,
    items,
    customer_phone: str | None = None,
    tax_cents: int | None = None,
    tax_rate_bps: int | None = None,
    payment_method: str = DEFAULT_PAYMENT_METHOD,
    invoice_date: datetime | None = None,
) -> dict:
    """
    Record an invoice directly (outside the POS cart).

    Either tax_cents or tax_rate_bps must be given.
    """
    customer_name = clean_text(customer_name, "customer_name")
    if not customer_name:
        raise ValidationError("Customer name is required")
    customer_phone = clean_text(customer_phone, "customer_phone") or None
    payment_method = clean_text(payment_method, "payment_method") or DEFAULT_PAYMENT_METHOD

    lines = normalize_items(items)
    subtotal = sum(item["price_cents"] * item["quantity"] for item in lines)

    if tax_cents is None:
        if tax_rate_bps is None:
            raise ValidationError("tax_cents or tax_rate_bps is required")
        tax_cents = calculate_tax_cents(subtotal, tax_rate_bps)
    if isinstance(tax_cents, bool) or not isinstance(tax_cents, int) or tax_cents < 0:
        raise ValidationError("tax_cents must be a non-negative integer")

    invoice = build_invoice(
        customer_name=customer_name,
        customer_phone=customer_phone,
        items=lines,
        tax_cents=tax_cents,
        payment_method=payment_method,
        invoice_date=invoice_date,
    )
    db.session.commit()
    return invoice.to_dict()


def list_invoices() -> list[dict]:
    return list_records(Invoice, newest_first=True)


def get_invoice(invoice_id: str) -> dict | None:
    return get_record(Invoice, invoice_id)


def update_invoice(*, invoice_id: str, patch: dict) -> dict:
    """Administrative correction of customer or payment details."""
    invoice = require_record(Invoice, invoice_id, "Invoice")
    apply_patch(invoice, patch, INVOICE_MUTABLE_FIELDS)
    db.session.commit()
    return invoice.to_dict()


def delete_invoice(*, invoice_id: str) -> bool:
    return delete_record(Invoice, invoice_id, "Invoice")


def get_todays_revenue(today: date | None = None) -> int:
    """Sum of invoice totals dated on `today` (UTC calendar day)."""
    day = today or utcnow().date()
    start = start_of_day(day)
    end = start + timedelta(days=1)
    total = (
        db.session.query(func.coalesce(func.sum(Invoice.total_cents), 0))
        .filter(Invoice.date >= start, Invoice.date < end)
        .scalar()
    )
    return int(total or 0)


def search_invoices(query: str | None = None) -> list[dict]:
    invoices = ordered_query(Invoice, newest_first=True).all()
    needle = (query or "").strip().lower()
    if needle:
        invoices = [
            inv for inv in invoices
            if needle in inv.id.lower()
            or needle in inv.customer_name.lower()
            or needle in (inv.customer_phone or "")
        ]
    return [inv.to_dict() for inv in invoices]
