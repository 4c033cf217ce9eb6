# Models
from .artisan import Artisan
from .address import Address
from .product import Product
from .coupon import Coupon
from .order import Order, OrderItem, OrderStatus
from .stock_logs import StockLog, StockChangeType

__all__ = [
    "Artisan",
    "Address",
    "Product",
    "Coupon",
    "Order",
    "OrderItem",
    "OrderStatus",
    "StockLog",
    "StockChangeType",
]
