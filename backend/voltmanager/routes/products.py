# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/voltmanager/routes/products.py
"""
Product inventory routes.

- GET    /api/products            list (optional q, category, stock=all|low|out)
- GET    /api/products/low-stock  products at or below min_stock
- GET    /api/products/categories distinct categories, first-seen order
- POST   /api/products            create
- GET    /api/products/<id>       single product
- PATCH  /api/products/<id>       partial update
- DELETE /api/products/<id>       hard delete
- POST   /api/products/<id>/stock adjust stock by {"quantity": delta}
"""
from flask import Blueprint, request, current_app

from ..services import products_service
from ..models import Product
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_product,
    ValidationError,
    ConflictError,
    NotFoundError,
)

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields=set(products_service.PRODUCT_MUTABLE_FIELDS),
    required_on_create={"sku", "name", "category", "price_cents"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    """
    List products in insertion order.

    Query params:
    - q: str (optional) - substring of name, SKU or category
    - category: str (optional) - exact category ("all" means no filter)
    - stock: all|low|out (optional)
    """
    q = request.args.get("q")
    category = request.args.get("category")
    stock_filter = request.args.get("stock", "all")

    if not any([q, category, stock_filter != "all"]):
        items = products_service.list_products()
    else:
        try:
            items = products_service.search_products(q, category, stock_filter)
        except ValidationError as e:
            return {"error": str(e)}, 400

    return {"items": items, "count": len(items)}


@products_bp.get("/low-stock")
def low_stock_products():
    items = products_service.get_low_stock_products()
    return {"items": items, "count": len(items)}


@products_bp.get("/categories")
def list_categories():
    return {"categories": products_service.list_categories()}


@products_bp.get("/<product_id>")
def get_product(product_id: str):
    product = products_service.get_product(product_id)
    if product is None:
        return {"error": "Product not found"}, 404
    return product


@products_bp.post("")
def create_product_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)
        created = products_service.create_product(patch=patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except ConflictError as e:
        return {"error": str(e)}, 409

    return created, 201


@products_bp.patch("/<product_id>")
def update_product_route(product_id: str):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
        enforce_rules_product(patch)
        updated = products_service.update_product(product_id=product_id, patch=patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return updated, 200


@products_bp.delete("/<product_id>")
def delete_product_route(product_id: str):
    try:
        products_service.delete_product(product_id=product_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return {"ok": True}, 200


@products_bp.post("/<product_id>/stock")
def adjust_stock_route(product_id: str):
    """
    Adjust stock by a signed delta.

    Body: {"quantity": int} - positive adds stock, negative removes it
    """
    data = request.get_json(silent=True) or {}
    if "quantity" not in data:
        return {"error": "quantity required"}, 400

    try:
        updated = products_service.update_stock(product_id=product_id, delta=data["quantity"])
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except Exception:
        current_app.logger.exception("Failed to update stock")
        return {"error": "Internal server error"}, 500

    return updated, 200
