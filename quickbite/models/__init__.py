# quickbite/models/__init__.py
from .user import User, UserRole
from .catalog import Restaurant, MenuCategory, MenuItem
from .order import Order, OrderItem, OrderStatus, PaymentStatus

# Export all models
__all__ = [
    "MenuCategory",
    "MenuItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "Restaurant",
    "User",
    "UserRole",
]
