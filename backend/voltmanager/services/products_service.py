# backend/voltmanager/services/products_service.py
"""
Products Service

Inventory records for the shop floor and the POS.
- list_products keeps insertion order
- create_product and update_product enforce SKU uniqueness
- update_stock is the only path that moves stock by a delta and never lets it
  drop below zero
"""
from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import Product
from ..validation import ConflictError, NotFoundError, ValidationError
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

PRODUCT_MUTABLE_FIELDS = {
    "sku",
    "name",
    "category",
    "price_cents",
    "cost_cents",
    "stock",
    "min_stock",
    "warranty_months",
}

STOCK_FILTERS = ("all", "low", "out")


def _ensure_sku_free(sku: str, *, exclude_id: str | None = None) -> None:
    query = db.session.query(Product).filter(Product.sku == sku)
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    if query.first():
        raise ConflictError("SKU already exists.")


def get_product_for_update(product_id: str) -> Product:
    product = lock_for_update(db.session.query(Product).filter_by(id=product_id)).first()
    if product is None:
        raise NotFoundError("Product not found")
    return product


def list_products() -> list[dict]:
    return list_records(Product)


def get_product(product_id: str) -> dict | None:
    return get_record(Product, product_id)


def create_product(*, patch: dict) -> dict:
    """
    Create product using a validated patch dict.

    Raises:
        ValidationError: If sku is missing
        ConflictError: If SKU already exists
    """
    sku = patch.get("sku")
    if sku is None:
        raise ValidationError("sku is required")
    _ensure_sku_free(sku)

    p = Product(id=new_record_id(), seq=next_sequence(Product))
    apply_patch(p, patch, PRODUCT_MUTABLE_FIELDS)

    db.session.add(p)
    db.session.commit()
    return p.to_dict()


def update_product(*, product_id: str, patch: dict) -> dict:
    """
    Shallow-merge a validated patch onto a product.

    Raises:
        NotFoundError: If no product has product_id
        ConflictError: If new SKU already exists
    """
    p = require_record(Product, product_id, "Product")

    # SKU uniqueness enforcement if changing SKU
    if "sku" in patch and patch["sku"] != p.sku:
        _ensure_sku_free(patch["sku"], exclude_id=p.id)

    apply_patch(p, patch, PRODUCT_MUTABLE_FIELDS)
    db.session.commit()
    return p.to_dict()


def delete_product(*, product_id: str) -> bool:
    return delete_record(Product, product_id, "Product")


def update_stock(*, product_id: str, delta: int) -> dict:
    """
    Adjust on-hand stock by delta (positive receives, negative removes).

    The resulting stock must stay >= 0; otherwise nothing changes.
    """
    if isinstance(delta, bool) or not isinstance(delta, int):
        raise ValidationError("quantity must be an integer")

    def _op():
        p = get_product_for_update(product_id)
        new_stock = p.stock + delta
        if new_stock < 0:
            raise ValidationError(
                f"Insufficient stock for {p.sku}: on hand {p.stock}, requested {-delta}"
            )
        p.stock = new_stock
        db.session.commit()
        return p

    p = run_with_retry(_op)
    current_app.logger.info("Stock adjusted sku=%s delta=%d stock=%d", p.sku, delta, p.stock)
    return p.to_dict()


def get_low_stock_products() -> list[dict]:
    products = (
        ordered_query(Product)
        .filter(Product.stock <= Product.min_stock)
        .all()
    )
    return [p.to_dict() for p in products]


def search_products(
    query: str | None = None,
    category: str | None = None,
    stock_filter: str = "all",
) -> list[dict]:
    """
    Inventory search: case-insensitive substring on name, SKU or category,
    optional exact category, and a stock filter ('all', 'low', 'out').
    """
    if stock_filter not in STOCK_FILTERS:
        raise ValidationError(f"stock filter must be one of: {', '.join(STOCK_FILTERS)}")

    q = ordered_query(Product)
    if category and category != "all":
        q = q.filter(Product.category == category)
    if stock_filter == "low":
        q = q.filter(Product.stock <= Product.min_stock)
    elif stock_filter == "out":
        q = q.filter(Product.stock == 0)

    products = q.all()
    needle = (query or "").strip().lower()
    if needle:
        products = [
            p for p in products
            if needle in p.name.lower()
            or needle in p.sku.lower()
            or needle in p.category.lower()
        ]
    return [p.to_dict() for p in products]


def list_categories() -> list[str]:
    seen: list[str] = []
    for p in ordered_query(Product).all():
        if p.category not in seen:
            seen.append(p.category)
    return seen
