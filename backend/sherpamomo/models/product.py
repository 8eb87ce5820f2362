from sqlmodel import SQLModel, Field, Column, JSON
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from enum import Enum


class ProductCategory(str, Enum):
    CHICKEN = "Chicken"
    VEG = "Veg"
    BUFF = "Buff"
    PORK = "Pork"
    BEEF = "Beef"
    SAUCE = "Sauce"


class ProductUnit(str, Enum):
    PCS = "pcs"
    JAR = "jar"
    CONTAINER = "container"
    LBS = "lbs"
    OZ = "oz"


class Product(SQLModel, table=True):
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    description: str

    price: Decimal = Field(max_digits=10, decimal_places=2)
    category: ProductCategory = Field(index=True)
    image: str

    rating: float = Field(default=0)
    review_count: int = Field(default=0)
    ingredients: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    # Package size, e.g. 10 pcs or 1 jar
    amount: int = Field(default=1)
    unit: ProductUnit = Field(default=ProductUnit.PCS)

    stock: int = Field(default=0)
    in_stock: bool = Field(default=True)
    featured: bool = Field(default=False)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
