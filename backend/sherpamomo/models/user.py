from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from enum import Enum

if TYPE_CHECKING:
    from .order import Order


class UserRole(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


class AuthProvider(str, Enum):
    PHONE = "phone"
    FIREBASE = "firebase"


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    phone: Optional[str] = Field(default=None, unique=True, index=True)
    firebase_uid: Optional[str] = Field(default=None, unique=True, index=True)
    email: Optional[str] = Field(default=None, unique=True, index=True)

    name: Optional[str] = None
    address: Optional[str] = None

    role: UserRole = Field(default=UserRole.CUSTOMER)
    auth_provider: AuthProvider = Field(default=AuthProvider.PHONE)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    orders: List["Order"] = Relationship(back_populates="user")
