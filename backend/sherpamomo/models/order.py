from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from decimal import Decimal
from enum import Enum

if TYPE_CHECKING:
    from .user import User


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


# Statuses a customer may still cancel from
CANCELLABLE_STATUSES = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
)


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class Order(SQLModel, table=True):
    __tablename__ = "orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: str = Field(unique=True, index=True)

    # Optional: orders placed before sign-in existed have no owner
    user_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True)

    # Customer snapshot
    customer_name: Optional[str] = None
    customer_email: Optional[str] = Field(default=None, index=True)
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None

    # Payment snapshot
    payment_method: str = Field(default="cash_on_delivery")
    payment_status: PaymentStatus = Field(default=PaymentStatus.PENDING)
    transaction_id: Optional[str] = None

    # Totals, fixed at creation
    subtotal: Decimal = Field(max_digits=10, decimal_places=2)
    tax: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    shipping: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    total: Decimal = Field(max_digits=10, decimal_places=2)

    status: OrderStatus = Field(default=OrderStatus.PENDING, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    user: Optional["User"] = Relationship(back_populates="orders")
    items: List["OrderItem"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"order_by": "OrderItem.position"},
    )


class OrderItem(SQLModel, table=True):
    """Line item frozen at checkout; product_id is not a live reference"""
    __tablename__ = "order_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id", index=True)
    position: int = Field(default=0)

    product_id: str
    name: str
    price: Decimal = Field(max_digits=10, decimal_places=2)
    quantity: int
    image: Optional[str] = None
    unit: Optional[str] = None

    # Relationships
    order: Optional["Order"] = Relationship(back_populates="items")
