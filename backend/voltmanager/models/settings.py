from __future__ import annotations

from ..extensions import db
from voltmanager.time_utils import to_utc_z

BACKUP_FREQUENCIES = ("daily", "weekly", "monthly")


class ShopSettings(db.Model):
    """
    Single-row shop configuration.

    tax_rate_bps is what the settings screen shows; the POS checkout keeps
    its own fixed rate (see sale_service.POS_TAX_RATE_BPS).
    """
    __tablename__ = "shop_settings"

    id = db.Column(db.Integer, primary_key=True)

    shop_name = db.Column(db.String(255), nullable=False, default="VoltManager Electric Supply")
    address = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(64), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    tax_rate_bps = db.Column(db.Integer, nullable=False, default=800)  # Basis points (e.g., 825 = 8.25%)

    notify_low_stock = db.Column(db.Boolean, nullable=False, default=True)
    notify_new_orders = db.Column(db.Boolean, nullable=False, default=True)
    notify_payment_reminders = db.Column(db.Boolean, nullable=False, default=False)
    notify_system_updates = db.Column(db.Boolean, nullable=False, default=True)

    auto_backup = db.Column(db.Boolean, nullable=False, default=True)
    backup_frequency = db.Column(db.String(16), nullable=False, default="daily")
    last_backup_at = db.Column(db.DateTime, nullable=True)

    def to_dict(self) -> dict:
        return {
            "shop": {
                "shop_name": self.shop_name,
                "address": self.address,
                "phone": self.phone,
                "email": self.email,
                "tax_rate_bps": self.tax_rate_bps,
            },
            "notifications": {
                "notify_low_stock": self.notify_low_stock,
                "notify_new_orders": self.notify_new_orders,
                "notify_payment_reminders": self.notify_payment_reminders,
                "notify_system_updates": self.notify_system_updates,
            },
            "backup": {
                "auto_backup": self.auto_backup,
                "backup_frequency": self.backup_frequency,
                "last_backup_at": to_utc_z(self.last_backup_at),
            },
        }
