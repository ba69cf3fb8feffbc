from __future__ import annotations

from ..extensions import db
from voltmanager.time_utils import to_utc_z


class Invoice(db.Model):
    """
    Completed sale.

    Totals are frozen at creation: subtotal_cents is the sum of the line
    totals and total_cents = subtotal_cents + tax_cents. Lines snapshot the
    product name and price, so later product edits never alter an invoice.
    """
    __tablename__ = "invoices"
    __table_args__ = (
        db.Index("ix_invoices_date", "date"),
    )

    id = db.Column(db.String(36), primary_key=True)
    seq = db.Column(db.Integer, nullable=False, index=True)

    date = db.Column(db.DateTime, nullable=False)

    customer_name = db.Column(db.String(255), nullable=False)
    customer_phone = db.Column(db.String(64), nullable=True)

    subtotal_cents = db.Column(db.Integer, nullable=False, default=0)
    tax_cents = db.Column(db.Integer, nullable=False, default=0)
    total_cents = db.Column(db.Integer, nullable=False, default=0)

    payment_method = db.Column(db.String(32), nullable=False, default="Cash")

    lines = db.relationship(
        "InvoiceLine",
        backref="invoice",
        lazy=True,
        order_by="InvoiceLine.line_number",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Invoice id={self.id} customer={self.customer_name!r} total_cents={self.total_cents}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": to_utc_z(self.date),
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "items": [line.to_dict() for line in self.lines],
            "subtotal_cents": self.subtotal_cents,
            "tax_cents": self.tax_cents,
            "total_cents": self.total_cents,
            "payment_method": self.payment_method,
        }


class InvoiceLine(db.Model):
    __tablename__ = "invoice_lines"
    __table_args__ = (
        db.UniqueConstraint("invoice_id", "line_number", name="uq_invoice_lines_number"),
    )

    id = db.Column(db.Integer, primary_key=True)
    invoice_id = db.Column(db.String(36), db.ForeignKey("invoices.id"), nullable=False, index=True)
    line_number = db.Column(db.Integer, nullable=False)

    # By id only; the product may since have been edited or deleted
    product_id = db.Column(db.String(36), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    price_cents = db.Column(db.Integer, nullable=False)
    quantity = db.Column(db.Integer, nullable=False)

    @property
    def line_total_cents(self) -> int:
        return self.price_cents * self.quantity

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price_cents": self.price_cents,
            "quantity": self.quantity,
        }


class Cart(db.Model):
    """
    Open POS cart. One line per product; checkout turns it into an Invoice.
    """
    __tablename__ = "carts"

    id = db.Column(db.String(36), primary_key=True)
    created_at = db.Column(db.DateTime, nullable=False)

    lines = db.relationship(
        "CartLine",
        backref="cart",
        lazy=True,
        order_by="CartLine.position",
        cascade="all, delete-orphan",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "created_at": to_utc_z(self.created_at),
            "items": [line.to_dict() for line in self.lines],
        }


class CartLine(db.Model):
    __tablename__ = "cart_lines"
    __table_args__ = (
        db.UniqueConstraint("cart_id", "product_id", name="uq_cart_lines_product"),
    )

    id = db.Column(db.Integer, primary_key=True)
    cart_id = db.Column(db.String(36), db.ForeignKey("carts.id"), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False)

    product_id = db.Column(db.String(36), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    price_cents = db.Column(db.Integer, nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price_cents": self.price_cents,
            "quantity": self.quantity,
        }
