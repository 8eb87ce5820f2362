from pydantic import Field
from typing import Optional, List, Dict
from datetime import datetime
from decimal import Decimal
from sherpamomo.models.order import OrderStatus, PaymentStatus
from sherpamomo.schemas.base import CamelModel, Money, Pagination, ProductRef


class OrderItemCreate(CamelModel):
    product_id: ProductRef = Field(min_length=1)
    name: str = Field(min_length=1)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    quantity: int = Field(ge=1)
    image: Optional[str] = None
    unit: Optional[str] = None


class CustomerInfo(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class PaymentInfoCreate(CamelModel):
    method: str = "cash_on_delivery"
    transaction_id: Optional[str] = None


class OrderCreate(CamelModel):
    items: List[OrderItemCreate]
    customer_info: Optional[CustomerInfo] = None
    payment_info: Optional[PaymentInfoCreate] = None


class OrderItemResponse(CamelModel):
    product_id: str
    name: str
    price: Money
    quantity: int
    image: Optional[str] = None
    unit: Optional[str] = None


class PaymentInfo(CamelModel):
    method: str
    status: PaymentStatus
    transaction_id: Optional[str] = None


class OrderResponse(CamelModel):
    id: int
    order_id: str
    user_id: Optional[int] = None
    items: List[OrderItemResponse] = []

    subtotal: Money
    tax: Money
    shipping: Money
    total: Money

    status: OrderStatus
    customer_info: Optional[CustomerInfo] = None
    payment_info: PaymentInfo

    created_at: datetime
    updated_at: datetime


class OrderSummary(CamelModel):
    id: int
    order_id: str
    total: Money
    status: OrderStatus
    created_at: datetime


class OrderCreateResponse(CamelModel):
    message: str
    order_id: str
    order: OrderSummary


class OrderListResponse(CamelModel):
    orders: List[OrderResponse]
    pagination: Pagination


class OrderStatusUpdate(CamelModel):
    status: OrderStatus


class OrderCancelResponse(CamelModel):
    message: str
    order: OrderResponse


class RecentOrder(CamelModel):
    id: int
    order_id: str
    customer: str
    total: Money
    status: OrderStatus
    date: datetime


class OrderStatsResponse(CamelModel):
    total_orders: int
    total_revenue: Money
    pending_orders: int
    delivered_today: int
    order_stats: Dict[str, int]
    recent_orders: List[RecentOrder]
