# Overview: Derived figures for the analytics and dashboard screens.

"""
Folds over snapshots (lists of dicts as returned by the entity services).
The fold functions are pure; build_analytics / build_dashboard fetch the
snapshots and assemble the payloads.
"""
from __future__ import annotations

from collections import Counter
from datetime import date

from . import invoice_service, products_service, repair_order_service, restock_service

TOP_PRODUCTS_LIMIT = 5
WELL_STOCKED_FACTOR = 1.5
UNKNOWN_PRODUCT_NAME = "Unknown Product"


def is_low_stock(product: dict) -> bool:
    return product["stock"] <= product["min_stock"]


def revenue_summary(products: list[dict], invoices: list[dict]) -> dict:
    total_revenue = sum(inv["total_cents"] for inv in invoices)
    inventory_value = sum(p["price_cents"] * p["stock"] for p in products)
    inventory_cost = sum(p["cost_cents"] * p["stock"] for p in products)

    if total_revenue > 0:
        margin = (total_revenue - inventory_cost) / total_revenue * 100
    else:
        margin = 0.0

    return {
        "total_revenue_cents": total_revenue,
        "inventory_value_cents": inventory_value,
        "margin_percent": round(margin, 2),
        "low_stock_count": sum(1 for p in products if is_low_stock(p)),
        "total_orders": len(invoices),
    }


def top_selling_products(
    products: list[dict],
    invoices: list[dict],
    limit: int = TOP_PRODUCTS_LIMIT,
) -> list[dict]:
    """Quantity sold per product across all invoice lines, highest first."""
    sold: Counter = Counter()
    for inv in invoices:
        for item in inv["items"]:
            sold[item["product_id"]] += item["quantity"]

    by_id = {p["id"]: p for p in products}
    rows = []
    # Counter.most_common keeps first-seen order among equal counts
    for product_id, quantity in sold.most_common(limit):
        product = by_id.get(product_id)
        rows.append({
            "product_id": product_id,
            "name": product["name"] if product else UNKNOWN_PRODUCT_NAME,
            "product": product,
            "quantity": quantity,
        })
    return rows


def stock_buckets(products: list[dict]) -> dict:
    well = low = out = 0
    for p in products:
        stock, minimum = p["stock"], p["min_stock"]
        if stock > minimum * WELL_STOCKED_FACTOR:
            well += 1
        if 0 < stock <= minimum:
            low += 1
        if stock == 0:
            out += 1
    return {"well_stocked": well, "low_stock": low, "out_of_stock": out}


def build_analytics() -> dict:
    products = products_service.list_products()
    invoices = invoice_service.list_invoices()
    return {
        "summary": revenue_summary(products, invoices),
        "top_products": top_selling_products(products, invoices),
        "stock_status": stock_buckets(products),
        "predictions": restock_service.list_predictions(),
    }


def build_dashboard(today: date | None = None) -> dict:
    products = products_service.list_products()
    pending = repair_order_service.get_pending_orders()
    return {
        "todays_revenue_cents": invoice_service.get_todays_revenue(today),
        "low_stock_count": sum(1 for p in products if is_low_stock(p)),
        "pending_repairs": len(pending),
        "total_products": len(products),
    }
