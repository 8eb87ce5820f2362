from datetime import datetime, timedelta, date as date_type
from decimal import Decimal
from sqlmodel import Session, select, func
from sherpamomo.models.order import Order, OrderStatus
from sherpamomo.models.product import Product
from sherpamomo.models.user import User, UserRole, AuthProvider
from sherpamomo.schemas.order import OrderStatsResponse, RecentOrder
from sherpamomo.schemas.product import ProductStatsResponse, LowStockProduct, CategoryStats
from sherpamomo.schemas.user import UserStatsResponse

LOW_STOCK_THRESHOLD = 10

# Revenue counts every order that was not cancelled or failed
REVENUE_EXCLUDED = [OrderStatus.CANCELLED, OrderStatus.FAILED]


def order_stats(db: Session) -> OrderStatsResponse:
    today_start = datetime.combine(date_type.today(), datetime.min.time())

    total_orders = db.exec(select(func.count(Order.id))).one()
    revenue = db.exec(
        select(func.sum(Order.total)).where(Order.status.not_in(REVENUE_EXCLUDED))
    ).one()

    by_status = dict(db.exec(select(Order.status, func.count(Order.id)).group_by(Order.status)).all())
    order_counts = {status.value: int(by_status.get(status, 0)) for status in OrderStatus}

    delivered_today = db.exec(
        select(func.count(Order.id)).where(
            Order.status == OrderStatus.DELIVERED,
            Order.updated_at >= today_start,
        )
    ).one()

    recent = db.exec(select(Order).order_by(Order.created_at.desc()).limit(5)).all()
    recent_orders = [
        RecentOrder(
            id=order.id,
            order_id=order.order_id,
            customer=order.customer_name or order.customer_email or "Guest",
            total=order.total,
            status=order.status,
            date=order.created_at,
        )
        for order in recent
    ]

    return OrderStatsResponse(
        total_orders=total_orders,
        total_revenue=Decimal(str(revenue)) if revenue else Decimal("0"),
        pending_orders=order_counts[OrderStatus.PENDING.value],
        delivered_today=delivered_today,
        order_stats=order_counts,
        recent_orders=recent_orders,
    )


def product_stats(db: Session) -> ProductStatsResponse:
    products = db.exec(select(Product)).all()

    available = [p for p in products if p.in_stock and p.stock > 0]
    low_stock = sorted(
        (p for p in available if p.stock < LOW_STOCK_THRESHOLD),
        key=lambda p: p.stock,
    )

    categories = {}
    for product in products:
        categories.setdefault(product.category, []).append(product)

    category_stats = []
    for category, items in sorted(categories.items(), key=lambda kv: kv[0].value):
        prices = [p.price for p in items]
        category_stats.append(CategoryStats(
            category=category,
            count=len(items),
            total_stock=sum(p.stock for p in items),
            average_price=(sum(prices) / len(prices)).quantize(Decimal("0.01")),
            min_price=min(prices),
            max_price=max(prices),
            total_value=sum((p.price * p.stock for p in items), Decimal("0")),
        ))

    ratings = [p.rating for p in products if p.review_count > 0]

    return ProductStatsResponse(
        total_products=len(products),
        in_stock_products=len(available),
        out_of_stock_products=len(products) - len(available),
        featured_products=sum(1 for p in products if p.featured),
        total_inventory_value=sum((p.price * p.stock for p in products), Decimal("0")),
        average_rating=round(sum(ratings) / len(ratings), 2) if ratings else 0.0,
        total_reviews=sum(p.review_count for p in products),
        low_stock_products=[
            LowStockProduct(name=p.name, stock=p.stock, category=p.category, price=p.price)
            for p in low_stock
        ],
        category_stats=category_stats,
    )


def user_stats(db: Session) -> UserStatsResponse:
    month_ago = datetime.utcnow() - timedelta(days=30)

    def count(*conditions) -> int:
        return db.exec(select(func.count(User.id)).where(*conditions)).one()

    return UserStatsResponse(
        total_users=count(),
        recent_users=count(User.created_at >= month_ago),
        admin_users=count(User.role == UserRole.ADMIN),
        phone_users=count(User.auth_provider == AuthProvider.PHONE),
        firebase_users=count(User.auth_provider == AuthProvider.FIREBASE),
        users_with_address=count(User.address.is_not(None), User.address != ""),
    )
