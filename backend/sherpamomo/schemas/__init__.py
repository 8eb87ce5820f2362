from .order import OrderCreate, OrderResponse, OrderListResponse
from .product import ProductResponse, ProductListResponse
from .user import UserResponse

__all__ = [
    "OrderCreate", "OrderResponse", "OrderListResponse",
    "ProductResponse", "ProductListResponse",
    "UserResponse",
]
