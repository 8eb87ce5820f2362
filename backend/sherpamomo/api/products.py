import logging
from datetime import datetime
from typing import Optional, List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import false
from sqlmodel import Session, select, col, func, or_
from sherpamomo.api.deps import get_db, admin_required
from sherpamomo.core.errors import InvalidRequest, NotFound
from sherpamomo.models.user import User
from sherpamomo.models.product import Product, ProductCategory
from sherpamomo.schemas.base import MessageResponse, paginate
from sherpamomo.schemas.product import (
    ProductResponse, ProductListResponse, ProductCreate, ProductUpdate, ProductStatsResponse,
)
from sherpamomo.services.stats import product_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])

SORT_ORDERS = {
    "newest": Product.created_at.desc(),
    "-createdAt": Product.created_at.desc(),
    "price_asc": Product.price.asc(),
    "price": Product.price.asc(),
    "price_desc": Product.price.desc(),
    "-price": Product.price.desc(),
    "rating": Product.rating.desc(),
    "-rating": Product.rating.desc(),
    "name": Product.name.asc(),
}


def get_product_or_404(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if not product:
        raise NotFound("Product not found")
    return product


@router.get("", response_model=ProductListResponse)
def list_products(
    category: Optional[str] = Query(None),
    featured: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Search in name and description"),
    sort: str = Query("newest"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """Catalog with filters"""
    if sort not in SORT_ORDERS:
        raise InvalidRequest(f"Unknown sort: {sort}")

    stmt = select(Product)

    if category and category != "all":
        try:
            stmt = stmt.where(Product.category == ProductCategory(category))
        except ValueError:
            # Unknown category matches nothing
            stmt = stmt.where(false())

    if featured is True:
        stmt = stmt.where(Product.featured == True)  # noqa: E712

    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(
            col(Product.name).ilike(pattern),
            col(Product.description).ilike(pattern),
        ))

    total = db.exec(select(func.count()).select_from(stmt.subquery())).one()
    products = db.exec(
        stmt.order_by(SORT_ORDERS[sort], Product.id).offset((page - 1) * limit).limit(limit)
    ).all()

    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in products],
        pagination=paginate(total, page, limit),
    )


@router.get("/categories")
def list_categories(db: Session = Depends(get_db)):
    """Categories that have at least one product"""
    categories = db.exec(select(Product.category).distinct()).all()
    return {"categories": sorted(c.value for c in categories)}


@router.get("/featured", response_model=List[ProductResponse])
def list_featured(db: Session = Depends(get_db)):
    """Top-rated featured products"""
    return db.exec(
        select(Product).where(Product.featured == True).order_by(Product.rating.desc()).limit(8)  # noqa: E712
    ).all()


@router.get("/stats", response_model=ProductStatsResponse)
def get_product_stats(
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    """Inventory overview (admin)"""
    return product_stats(db)


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return get_product_or_404(db, product_id)


# === Admin CRUD ===

@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate,
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    """Create a product (admin)"""
    product = Product(**data.model_dump())
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Product created: %s (%s)", product.id, product.name)
    return product


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    data: ProductUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    """Update a product (admin)"""
    product = get_product_or_404(db, product_id)

    update_data = data.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(product, key, value)
    product.updated_at = datetime.utcnow()

    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    """Delete a product (admin); past orders keep their own snapshot"""
    product = get_product_or_404(db, product_id)
    db.delete(product)
    db.commit()
    logger.info("Product deleted: %s", product_id)
    return MessageResponse(message="Product deleted successfully")
