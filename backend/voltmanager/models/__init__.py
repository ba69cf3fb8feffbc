from .inventory import Product, RestockPrediction
from .sales import Invoice, InvoiceLine, Cart, CartLine
from .repairs import RepairOrder, Technician, REPAIR_STATUSES, TECHNICIAN_STATUSES
from .settings import ShopSettings, BACKUP_FREQUENCIES

__all__ = [
    'Product', 'RestockPrediction',
    'Invoice', 'InvoiceLine', 'Cart', 'CartLine',
    'RepairOrder', 'Technician', 'REPAIR_STATUSES', 'TECHNICIAN_STATUSES',
    'ShopSettings', 'BACKUP_FREQUENCIES',
]
