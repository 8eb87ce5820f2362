import logging
import secrets
import string
import time
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from datetime import datetime
from typing import Iterable, Optional
from sqlalchemy import update
from sqlmodel import Session, select
from sherpamomo.core.config import settings
from sherpamomo.core.errors import InvalidRequest, InvalidTransition, NotFound
from sherpamomo.models.order import (
    Order, OrderItem, OrderStatus, PaymentStatus, CANCELLABLE_STATUSES,
)
from sherpamomo.schemas.order import OrderCreate, OrderItemCreate

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
BASE36 = string.digits + string.ascii_uppercase


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal


def to_money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_totals(items: Iterable[OrderItemCreate]) -> OrderTotals:
    """Subtotal, flat shipping under the free-shipping threshold, and tax on the subtotal"""
    subtotal = to_money(sum((item.price * item.quantity for item in items), Decimal("0")))

    if subtotal >= settings.FREE_SHIPPING_THRESHOLD:
        shipping = Decimal("0.00")
    else:
        shipping = to_money(settings.SHIPPING_FEE)

    tax = to_money(subtotal * settings.TAX_RATE)
    total = subtotal + shipping + tax
    return OrderTotals(subtotal=subtotal, shipping=shipping, tax=tax, total=total)


def _base36(number: int) -> str:
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(BASE36[rem])
    return "".join(reversed(digits)) or "0"


def generate_order_id() -> str:
    """Human-readable order id, e.g. ORD-LZ3K9Q1C-4F7XA"""
    timestamp = _base36(int(time.time() * 1000))
    random_part = "".join(secrets.choice(BASE36) for _ in range(5))
    return f"ORD-{timestamp}-{random_part}"


def create_order(db: Session, data: OrderCreate, user_id: Optional[int] = None) -> Order:
    """Persist a new pending order with totals computed from the submitted items"""
    if not data.items:
        raise InvalidRequest("Order must contain at least one item")

    totals = calculate_totals(data.items)
    customer = data.customer_info
    payment = data.payment_info

    order = Order(
        order_id=generate_order_id(),
        user_id=user_id,
        customer_name=customer.name if customer else None,
        customer_email=customer.email.strip().lower() if customer and customer.email else None,
        customer_phone=customer.phone if customer else None,
        customer_address=customer.address if customer else None,
        payment_method=payment.method if payment else "cash_on_delivery",
        payment_status=PaymentStatus.PENDING,
        transaction_id=payment.transaction_id if payment else None,
        subtotal=totals.subtotal,
        tax=totals.tax,
        shipping=totals.shipping,
        total=totals.total,
        status=OrderStatus.PENDING,
    )
    db.add(order)
    db.flush()

    for position, item in enumerate(data.items):
        db.add(OrderItem(
            order_id=order.id,
            position=position,
            product_id=item.product_id,
            name=item.name,
            price=to_money(item.price),
            quantity=item.quantity,
            image=item.image,
            unit=item.unit,
        ))

    db.commit()
    db.refresh(order)

    logger.info("New order created: %s total=%s", order.order_id, order.total)
    return order


def get_order_or_404(db: Session, order_id: str) -> Order:
    order = db.exec(select(Order).where(Order.order_id == order_id)).first()
    if not order:
        raise NotFound("Order not found")
    return order


def cancel_order(db: Session, order: Order) -> Order:
    """Customer cancel, only from pending, confirmed or preparing.

    The update is conditioned on the status still being cancellable, so a
    status change that lands in between is never overwritten.
    """
    if order.status not in CANCELLABLE_STATUSES:
        raise InvalidTransition(order.status.value, OrderStatus.CANCELLED.value)

    changed = db.connection().execute(
        update(Order)
        .where(Order.id == order.id, Order.status.in_(CANCELLABLE_STATUSES))
        .values(status=OrderStatus.CANCELLED, updated_at=datetime.utcnow())
    ).rowcount
    db.commit()
    db.refresh(order)

    if changed != 1:
        raise InvalidTransition(order.status.value, OrderStatus.CANCELLED.value)

    logger.info("Order %s cancelled by customer", order.order_id)
    return order


def set_order_status(db: Session, order: Order, status: OrderStatus) -> Order:
    """Admin status change: any known status, from any status"""
    previous = order.status
    order.status = status
    order.updated_at = datetime.utcnow()
    db.add(order)
    db.commit()
    db.refresh(order)

    logger.info("Order %s status %s -> %s", order.order_id, previous.value, status.value)
    return order
