"""
POS Sale Service - cart accumulation and checkout

A cart holds one line per product with a snapshot of name and price. Every
quantity change is checked against the product's stock at that moment.

Checkout is one unit of work: stock re-check, invoice creation, stock
decrements and cart clearing commit together or not at all. Rejections
(empty cart, blank customer, stock exceeded) raise ValidationError before
anything is written; any other failure is rolled back and surfaced as a
single CheckoutError.
"""
from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import Cart, CartLine, Product
from ..validation import NotFoundError, ValidationError
from voltmanager.time_utils import utcnow
from .concurrency import run_with_retry
from .invoice_service import DEFAULT_PAYMENT_METHOD, build_invoice, calculate_tax_cents, clean_text
from .products_service import get_product_for_update
from .records import new_record_id, require_record

# Fixed checkout rate. ShopSettings.tax_rate_bps is display configuration
# and is not applied here.
POS_TAX_RATE_BPS = 800


class CheckoutError(Exception):
    """Raised when checkout fails for a reason other than a rejected input."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


def calculate_subtotal(lines) -> int:
    return sum(line["price_cents"] * line["quantity"] for line in lines)


def calculate_tax(subtotal_cents: int) -> int:
    return calculate_tax_cents(subtotal_cents, POS_TAX_RATE_BPS)


def calculate_total(lines) -> int:
    subtotal = calculate_subtotal(lines)
    return subtotal + calculate_tax(subtotal)


def _cart_snapshot(cart: Cart) -> dict:
    data = cart.to_dict()
    subtotal = calculate_subtotal(data["items"])
    tax = calculate_tax(subtotal)
    data.update({
        "subtotal_cents": subtotal,
        "tax_cents": tax,
        "total_cents": subtotal + tax,
        "tax_rate_bps": POS_TAX_RATE_BPS,
    })
    return data


def _require_cart(cart_id: str) -> Cart:
    return require_record(Cart, cart_id, "Cart")


def _find_line(cart: Cart, product_id: str) -> CartLine | None:
    for line in cart.lines:
        if line.product_id == product_id:
            return line
    return None


def create_cart() -> dict:
    cart = Cart(id=new_record_id(), created_at=utcnow())
    db.session.add(cart)
    db.session.commit()
    return _cart_snapshot(cart)


def get_cart(cart_id: str) -> dict | None:
    cart = db.session.get(Cart, cart_id)
    return _cart_snapshot(cart) if cart else None


def delete_cart(cart_id: str) -> bool:
    cart = _require_cart(cart_id)
    db.session.delete(cart)
    db.session.commit()
    return True


def add_to_cart(*, cart_id: str, product_id: str, quantity: int = 1) -> dict:
    """
    Add a product to the cart (or bump its quantity).

    Raises:
        ValidationError: Product is out of stock, or the cart would hold more
            than the product's current stock
        NotFoundError: Unknown cart or product
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError("quantity must be a positive integer")

    cart = _require_cart(cart_id)
    product = require_record(Product, product_id, "Product")

    if product.stock <= 0:
        raise ValidationError("Product is out of stock")

    line = _find_line(cart, product.id)
    if line is not None:
        if line.quantity + quantity > product.stock:
            raise ValidationError("Not enough stock available")
        line.quantity += quantity
    else:
        if quantity > product.stock:
            raise ValidationError("Not enough stock available")
        position = max((l.position for l in cart.lines), default=0) + 1
        cart.lines.append(CartLine(
            position=position,
            product_id=product.id,
            name=product.name,
            price_cents=product.price_cents,
            quantity=quantity,
        ))

    db.session.commit()
    return _cart_snapshot(cart)


def update_cart_quantity(*, cart_id: str, product_id: str, quantity: int) -> dict:
    """Set a line's quantity; zero or less removes the line."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("quantity must be an integer")

    cart = _require_cart(cart_id)
    line = _find_line(cart, product_id)
    if line is None:
        raise NotFoundError("Item not in cart")

    if quantity <= 0:
        cart.lines.remove(line)
        db.session.commit()
        return _cart_snapshot(cart)

    product = require_record(Product, product_id, "Product")
    if quantity > product.stock:
        raise ValidationError("Not enough stock available")

    line.quantity = quantity
    db.session.commit()
    return _cart_snapshot(cart)


def remove_from_cart(*, cart_id: str, product_id: str) -> dict:
    cart = _require_cart(cart_id)
    line = _find_line(cart, product_id)
    if line is None:
        raise NotFoundError("Item not in cart")
    cart.lines.remove(line)
    db.session.commit()
    return _cart_snapshot(cart)


def clear_cart(*, cart_id: str) -> dict:
    cart = _require_cart(cart_id)
    cart.lines.clear()
    db.session.commit()
    return _cart_snapshot(cart)


def process_payment(
    *,
    cart_id: str,
    customer_name: str,
    customer_phone: str | None = None,
    payment_method: str = DEFAULT_PAYMENT_METHOD,
) -> dict:
    """
    Turn the cart into an invoice and take the sold quantities out of stock.

    Returns the created invoice snapshot. The cart is left open and empty.
    """
    customer_name = clean_text(customer_name, "customer_name")
    customer_phone = clean_text(customer_phone, "customer_phone") or None
    payment_method = clean_text(payment_method, "payment_method") or DEFAULT_PAYMENT_METHOD

    def _op():
        cart = _require_cart(cart_id)
        lines = [line.to_dict() for line in cart.lines]

        if not lines:
            raise ValidationError("Cart is empty")
        if not customer_name:
            raise ValidationError("Customer name is required")

        products = []
        for line in lines:
            try:
                product = get_product_for_update(line["product_id"])
            except NotFoundError:
                raise ValidationError(f"{line['name']} is no longer available")
            if product.stock < line["quantity"]:
                raise ValidationError(f"Not enough stock available for {product.name}")
            products.append(product)

        subtotal = calculate_subtotal(lines)
        invoice = build_invoice(
            customer_name=customer_name,
            customer_phone=customer_phone,
            items=lines,
            tax_cents=calculate_tax(subtotal),
            payment_method=payment_method,
        )

        for product, line in zip(products, lines):
            product.stock -= line["quantity"]

        cart.lines.clear()
        db.session.commit()
        return invoice

    try:
        invoice = run_with_retry(_op)
    except (ValidationError, NotFoundError):
        db.session.rollback()
        raise
    except Exception as exc:
        db.session.rollback()
        current_app.logger.exception("Checkout failed for cart %s", cart_id)
        raise CheckoutError("Failed to process payment", details={"cart_id": cart_id}) from exc

    current_app.logger.info(
        "Checkout completed cart=%s invoice=%s total_cents=%d",
        cart_id, invoice.id, invoice.total_cents,
    )
    return invoice.to_dict()
