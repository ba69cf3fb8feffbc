# Overview: Flask API routes for the POS cart and checkout.

# backend/voltmanager/routes/pos.py
"""
POS routes

- POST   /api/pos/carts                              open a cart
- GET    /api/pos/carts/<id>                         cart with totals
- DELETE /api/pos/carts/<id>                         discard a cart
- POST   /api/pos/carts/<id>/items                   {"product_id", "quantity"?} add one (or n)
- PATCH  /api/pos/carts/<id>/items/<product_id>      {"quantity": n} set, n <= 0 removes
- DELETE /api/pos/carts/<id>/items/<product_id>      remove a line
- DELETE /api/pos/carts/<id>/items                   empty the cart
- POST   /api/pos/carts/<id>/checkout                {"customer_name", "customer_phone"?, "payment_method"?}
"""

from flask import Blueprint, request, jsonify

from ..services import sale_service
from ..services.sale_service import CheckoutError
from ..validation import ValidationError, NotFoundError


pos_bp = Blueprint("pos", __name__, url_prefix="/api/pos")


@pos_bp.post("/carts")
def create_cart_route():
    cart = sale_service.create_cart()
    return jsonify({"cart": cart}), 201


@pos_bp.get("/carts/<cart_id>")
def get_cart_route(cart_id: str):
    cart = sale_service.get_cart(cart_id)
    if cart is None:
        return jsonify({"error": "Cart not found"}), 404
    return jsonify({"cart": cart}), 200


@pos_bp.delete("/carts/<cart_id>")
def delete_cart_route(cart_id: str):
    try:
        sale_service.delete_cart(cart_id)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    return jsonify({"ok": True}), 200


@pos_bp.post("/carts/<cart_id>/items")
def add_item_route(cart_id: str):
    data = request.get_json(silent=True) or {}
    product_id = data.get("product_id")
    if not product_id:
        return jsonify({"error": "product_id required"}), 400

    try:
        cart = sale_service.add_to_cart(
            cart_id=cart_id,
            product_id=product_id,
            quantity=data.get("quantity", 1),
        )
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404

    return jsonify({"cart": cart}), 200


@pos_bp.patch("/carts/<cart_id>/items/<product_id>")
def update_item_route(cart_id: str, product_id: str):
    data = request.get_json(silent=True) or {}
    if "quantity" not in data:
        return jsonify({"error": "quantity required"}), 400

    try:
        cart = sale_service.update_cart_quantity(
            cart_id=cart_id,
            product_id=product_id,
            quantity=data["quantity"],
        )
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404

    return jsonify({"cart": cart}), 200


@pos_bp.delete("/carts/<cart_id>/items/<product_id>")
def remove_item_route(cart_id: str, product_id: str):
    try:
        cart = sale_service.remove_from_cart(cart_id=cart_id, product_id=product_id)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    return jsonify({"cart": cart}), 200


@pos_bp.delete("/carts/<cart_id>/items")
def clear_cart_route(cart_id: str):
    try:
        cart = sale_service.clear_cart(cart_id=cart_id)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    return jsonify({"cart": cart}), 200


@pos_bp.post("/carts/<cart_id>/checkout")
def checkout_route(cart_id: str):
    """
    Create the invoice and decrement stock in one transaction.

    Rejections come back as 400 with the reason; any other failure is rolled
    back and reported as a generic 500.
    """
    data = request.get_json(silent=True) or {}

    try:
        invoice = sale_service.process_payment(
            cart_id=cart_id,
            customer_name=data.get("customer_name"),
            customer_phone=data.get("customer_phone"),
            payment_method=data.get("payment_method") or "Cash",
        )
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except CheckoutError as e:
        return jsonify({"error": str(e)}), 500

    return jsonify({"invoice": invoice}), 201
