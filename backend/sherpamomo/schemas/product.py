from pydantic import Field, model_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from sherpamomo.models.product import ProductCategory, ProductUnit
from sherpamomo.schemas.base import CamelModel, Money, Pagination


class ProductResponse(CamelModel):
    id: int
    name: str
    description: str
    price: Money
    category: ProductCategory
    image: str
    rating: float
    review_count: int
    ingredients: List[str] = []
    amount: int
    unit: ProductUnit
    stock: int
    in_stock: bool
    featured: bool
    created_at: datetime
    updated_at: datetime


class ProductListResponse(CamelModel):
    products: List[ProductResponse]
    pagination: Pagination


class ProductCreate(CamelModel):
    name: str = Field(min_length=1)
    description: str
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    category: ProductCategory
    image: str
    rating: float = Field(default=0, ge=0, le=5)
    review_count: int = Field(default=0, ge=0)
    ingredients: List[str] = []
    amount: int = Field(default=1, ge=1)
    unit: ProductUnit = ProductUnit.PCS
    stock: int = Field(default=0, ge=0)
    in_stock: bool = True
    featured: bool = False


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    category: Optional[ProductCategory] = None
    image: Optional[str] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    review_count: Optional[int] = Field(default=None, ge=0)
    ingredients: Optional[List[str]] = None
    amount: Optional[int] = Field(default=None, ge=1)
    unit: Optional[ProductUnit] = None
    stock: Optional[int] = Field(default=None, ge=0)
    in_stock: Optional[bool] = None
    featured: Optional[bool] = None

    @model_validator(mode="after")
    def no_explicit_nulls(self):
        # Fields may be left out, but every product column is required
        cleared = [name for name in self.model_fields_set if getattr(self, name) is None]
        if cleared:
            raise ValueError(f"{', '.join(sorted(cleared))} cannot be null")
        return self


class LowStockProduct(CamelModel):
    name: str
    stock: int
    category: ProductCategory
    price: Money


class CategoryStats(CamelModel):
    category: ProductCategory
    count: int
    total_stock: int
    average_price: Money
    min_price: Money
    max_price: Money
    total_value: Money


class ProductStatsResponse(CamelModel):
    total_products: int
    in_stock_products: int
    out_of_stock_products: int
    featured_products: int
    total_inventory_value: Money
    average_rating: float
    total_reviews: int
    low_stock_products: List[LowStockProduct]
    category_stats: List[CategoryStats]
