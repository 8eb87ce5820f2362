from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session, select, col, func, or_
from typing import Optional
from sherpamomo.api.deps import get_db, get_current_user, get_current_user_optional, admin_required
from sherpamomo.core.errors import Forbidden
from sherpamomo.models.user import User, UserRole
from sherpamomo.models.order import Order, OrderStatus
from sherpamomo.schemas.base import paginate
from sherpamomo.schemas.order import (
    OrderCreate, OrderResponse, OrderCreateResponse, OrderSummary, OrderListResponse,
    OrderStatusUpdate, OrderCancelResponse, OrderStatsResponse, OrderItemResponse,
    CustomerInfo, PaymentInfo,
)
from sherpamomo.services import orders as order_service
from sherpamomo.services.stats import order_stats

router = APIRouter(prefix="/api/orders", tags=["orders"])


def build_order_response(order: Order) -> OrderResponse:
    """Order row + item snapshots in the shape the apps read"""
    has_customer = any((order.customer_name, order.customer_email, order.customer_phone, order.customer_address))
    return OrderResponse(
        id=order.id,
        order_id=order.order_id,
        user_id=order.user_id,
        items=[OrderItemResponse.model_validate(item) for item in order.items],
        subtotal=order.subtotal,
        tax=order.tax,
        shipping=order.shipping,
        total=order.total,
        status=order.status,
        customer_info=CustomerInfo(
            name=order.customer_name,
            email=order.customer_email,
            phone=order.customer_phone,
            address=order.customer_address,
        ) if has_customer else None,
        payment_info=PaymentInfo(
            method=order.payment_method,
            status=order.payment_status,
            transaction_id=order.transaction_id,
        ),
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def owns_order(user: User, order: Order) -> bool:
    if order.user_id is not None:
        return order.user_id == user.id
    # Orders placed before sign-in are matched by their contact email
    return bool(user.email and order.customer_email == user.email.lower())


# === Checkout ===

@router.post("", response_model=OrderCreateResponse, status_code=status.HTTP_201_CREATED)
def create_new_order(
    data: OrderCreate,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional)
):
    """Place an order (guest or signed in)"""
    user_id = current_user.id if current_user else None
    order = order_service.create_order(db, data, user_id)
    return OrderCreateResponse(
        message="Order created successfully",
        order_id=order.order_id,
        order=OrderSummary.model_validate(order),
    )


# === Admin: list and stats ===

@router.get("", response_model=OrderListResponse)
def list_orders(
    status: Optional[OrderStatus] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    """All orders, newest first (admin)"""
    stmt = select(Order)

    if status:
        stmt = stmt.where(Order.status == status)

    if search:
        stmt = stmt.where(or_(
            col(Order.order_id).contains(search.upper()),
            col(Order.customer_name).ilike(f"%{search}%"),
            col(Order.customer_email).ilike(f"%{search}%"),
            col(Order.customer_phone).contains(search),
        ))

    total = db.exec(select(func.count()).select_from(stmt.subquery())).one()
    orders = db.exec(
        stmt.order_by(Order.created_at.desc()).offset((page - 1) * limit).limit(limit)
    ).all()

    return OrderListResponse(
        orders=[build_order_response(order) for order in orders],
        pagination=paginate(total, page, limit),
    )


@router.get("/stats", response_model=OrderStatsResponse)
def get_order_stats(
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    """Dashboard counters (admin)"""
    return order_stats(db)


# === Customer ===

@router.get("/user/orders", response_model=OrderListResponse)
def get_my_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Orders placed by the signed-in user, including pre-sign-in orders with their email"""
    conditions = [Order.user_id == current_user.id]
    if current_user.email:
        conditions.append(col(Order.user_id).is_(None) & (Order.customer_email == current_user.email.lower()))

    stmt = select(Order).where(or_(*conditions))
    total = db.exec(select(func.count()).select_from(stmt.subquery())).one()
    orders = db.exec(
        stmt.order_by(Order.created_at.desc()).offset((page - 1) * limit).limit(limit)
    ).all()

    return OrderListResponse(
        orders=[build_order_response(order) for order in orders],
        pagination=paginate(total, page, limit),
    )


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, db: Session = Depends(get_db)):
    """Order by its public order id"""
    return build_order_response(order_service.get_order_or_404(db, order_id))


@router.put("/{order_id}/cancel", response_model=OrderCancelResponse)
def cancel_order(
    order_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Cancel an order that is not yet ready"""
    order = order_service.get_order_or_404(db, order_id)
    if current_user.role != UserRole.ADMIN and not owns_order(current_user, order):
        raise Forbidden("You can only cancel your own orders")

    order = order_service.cancel_order(db, order)
    return OrderCancelResponse(message="Order cancelled", order=build_order_response(order))


# === Admin: status ===

@router.put("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: str,
    data: OrderStatusUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    """Set any status (admin)"""
    order = order_service.get_order_or_404(db, order_id)
    order = order_service.set_order_status(db, order, data.status)
    return build_order_response(order)
