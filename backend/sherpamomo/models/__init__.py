from .user import User, UserRole, AuthProvider
from .verification import PhoneVerification, MobileAuthCode
from .product import Product, ProductCategory, ProductUnit
from .order import Order, OrderItem, OrderStatus, PaymentStatus, CANCELLABLE_STATUSES

__all__ = [
    "User", "UserRole", "AuthProvider",
    "PhoneVerification", "MobileAuthCode",
    "Product", "ProductCategory", "ProductUnit",
    "Order", "OrderItem", "OrderStatus", "PaymentStatus", "CANCELLABLE_STATUSES",
]
