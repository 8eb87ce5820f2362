from pydantic import EmailStr, Field
from typing import Optional, List
from datetime import datetime
from sherpamomo.models.user import UserRole, AuthProvider
from sherpamomo.schemas.base import CamelModel, Pagination


class UserResponse(CamelModel):
    id: int
    phone: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    address: Optional[str] = None
    role: UserRole
    auth_provider: AuthProvider
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class ProfileUpdateResponse(CamelModel):
    message: str
    user: UserResponse


class RoleUpdate(CamelModel):
    role: UserRole


class UserListResponse(CamelModel):
    users: List[UserResponse]
    pagination: Pagination


class UserStatsResponse(CamelModel):
    total_users: int
    recent_users: int
    admin_users: int
    phone_users: int
    firebase_users: int
    users_with_address: int
