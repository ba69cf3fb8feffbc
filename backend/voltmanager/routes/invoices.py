# Overview: Flask API routes for invoices; parses input and returns JSON responses.

from flask import Blueprint, request

from ..models import Invoice
from ..services import invoice_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    ValidationError,
    NotFoundError,
)
from voltmanager.time_utils import parse_day, parse_iso_datetime

INVOICE_CORRECTION_POLICY = ModelValidationPolicy(
    writable_fields=set(invoice_service.INVOICE_MUTABLE_FIELDS),
)

invoices_bp = Blueprint("invoices", __name__, url_prefix="/api/invoices")


@invoices_bp.get("")
def list_invoices():
    """Most recent first. Optional q matches id, customer name or phone."""
    q = request.args.get("q")
    items = invoice_service.search_invoices(q) if q else invoice_service.list_invoices()
    return {"items": items, "count": len(items)}


@invoices_bp.get("/revenue/today")
def todays_revenue():
    """Optional ?date=YYYY-MM-DD to ask about another day."""
    raw = request.args.get("date")
    try:
        day = parse_day(raw) if raw else None
    except ValueError:
        return {"error": "date must be YYYY-MM-DD"}, 400

    revenue = invoice_service.get_todays_revenue(day)
    return {"revenue_cents": revenue}


@invoices_bp.get("/<invoice_id>")
def get_invoice(invoice_id: str):
    invoice = invoice_service.get_invoice(invoice_id)
    if invoice is None:
        return {"error": "Invoice not found"}, 404
    return invoice


@invoices_bp.post("")
def create_invoice_route():
    """
    Record an invoice outside the POS cart.

    Body:
    - customer_name: str (required)
    - customer_phone: str (optional)
    - items: [{product_id, name, price_cents, quantity}] (required)
    - tax_cents: int, or tax_rate_bps: int (one required)
    - payment_method: str (default "Cash")
    - date: ISO-8601 (default now)
    """
    data = request.get_json(silent=True) or {}

    try:
        invoice_date = parse_iso_datetime(data["date"]) if data.get("date") else None
    except ValueError:
        return {"error": "date must be an ISO-8601 datetime"}, 400

    try:
        created = invoice_service.create_invoice(
            customer_name=data.get("customer_name"),
            customer_phone=data.get("customer_phone"),
            items=data.get("items"),
            tax_cents=data.get("tax_cents"),
            tax_rate_bps=data.get("tax_rate_bps"),
            payment_method=data.get("payment_method") or invoice_service.DEFAULT_PAYMENT_METHOD,
            invoice_date=invoice_date,
        )
    except ValidationError as e:
        return {"error": str(e)}, 400

    return created, 201


@invoices_bp.patch("/<invoice_id>")
def update_invoice_route(invoice_id: str):
    """Administrative correction: customer_name, customer_phone, payment_method."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Invoice, payload=payload, policy=INVOICE_CORRECTION_POLICY, partial=True)
        updated = invoice_service.update_invoice(invoice_id=invoice_id, patch=patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return updated, 200


@invoices_bp.delete("/<invoice_id>")
def delete_invoice_route(invoice_id: str):
    try:
        invoice_service.delete_invoice(invoice_id=invoice_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return {"ok": True}, 200
