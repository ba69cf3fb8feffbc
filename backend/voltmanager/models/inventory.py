from __future__ import annotations

from ..extensions import db


class Product(db.Model):
    """
    Product master data.

    Money is stored in cents. Stock is a plain on-hand counter that every
    adjustment keeps at or above zero; the check constraint backs the
    service-level guard.

    SKU is unique across the store. Lookups by SKU go through
    Product.query.filter_by(sku=...).
    """
    __tablename__ = "products"
    __table_args__ = (
        db.UniqueConstraint("sku", name="uq_products_sku"),
        db.CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        db.Index("ix_products_category", "category"),
    )

    id = db.Column(db.String(36), primary_key=True)
    # Insertion order; listings follow it
    seq = db.Column(db.Integer, nullable=False, index=True)

    sku = db.Column(db.String(64), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(64), nullable=False)

    price_cents = db.Column(db.Integer, nullable=False, default=0)
    cost_cents = db.Column(db.Integer, nullable=False, default=0)

    stock = db.Column(db.Integer, nullable=False, default=0)
    min_stock = db.Column(db.Integer, nullable=False, default=0)
    warranty_months = db.Column(db.Integer, nullable=False, default=0)

    version_id = db.Column(db.Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Product id={self.id} sku={self.sku!r} name={self.name!r} stock={self.stock}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sku": self.sku,
            "name": self.name,
            "category": self.category,
            "price_cents": self.price_cents,
            "cost_cents": self.cost_cents,
            "stock": self.stock,
            "min_stock": self.min_stock,
            "warranty_months": self.warranty_months,
            "version_id": self.version_id,
        }


class RestockPrediction(db.Model):
    """
    Demand forecast per product, keyed by product id.

    Predictions come from seed data; nothing recomputes them from sales.
    """
    __tablename__ = "restock_predictions"

    product_id = db.Column(db.String(36), primary_key=True)
    seq = db.Column(db.Integer, nullable=False, index=True)

    current_stock = db.Column(db.Integer, nullable=False, default=0)
    predicted_demand = db.Column(db.Integer, nullable=False, default=0)
    suggested_order = db.Column(db.Integer, nullable=False, default=0)
    confidence = db.Column(db.Float, nullable=False, default=0.0)

    def __repr__(self) -> str:
        return f"<RestockPrediction product_id={self.product_id} confidence={self.confidence}>"

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "current_stock": self.current_stock,
            "predicted_demand": self.predicted_demand,
            "suggested_order": self.suggested_order,
            "confidence": self.confidence,
        }
