import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, col, func, or_
from sherpamomo.api.deps import get_db, get_current_user, admin_required
from sherpamomo.core.errors import InvalidRequest, NotFound
from sherpamomo.core.security import normalize_phone
from sherpamomo.models.user import User, UserRole, AuthProvider
from sherpamomo.schemas.base import paginate
from sherpamomo.schemas.user import (
    UserResponse, ProfileUpdate, ProfileUpdateResponse, RoleUpdate, UserListResponse, UserStatsResponse,
)
from sherpamomo.services.stats import user_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


# === Current user ===

@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/profile", response_model=ProfileUpdateResponse)
def update_profile(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update own profile"""
    update_data = data.model_dump(exclude_unset=True)

    # The sign-in identity of the account can be changed but never cleared
    if "phone" in update_data:
        if update_data["phone"] and update_data["phone"].strip():
            phone = normalize_phone(update_data["phone"])
            if not phone:
                raise InvalidRequest("Invalid phone number")
            update_data["phone"] = phone
        elif current_user.auth_provider == AuthProvider.PHONE:
            raise InvalidRequest("Phone number cannot be removed")
        else:
            update_data["phone"] = None
    if "email" in update_data:
        if update_data["email"]:
            update_data["email"] = update_data["email"].strip().lower()
        elif current_user.auth_provider == AuthProvider.FIREBASE:
            raise InvalidRequest("Email cannot be removed")

    for key, value in update_data.items():
        setattr(current_user, key, value)
    current_user.updated_at = datetime.utcnow()

    db.add(current_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise InvalidRequest("Phone or email already registered")
    db.refresh(current_user)

    logger.info("Updated user profile: %s", current_user.id)
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=UserResponse.model_validate(current_user),
    )


# === Admin ===

@router.get("", response_model=UserListResponse)
def list_users(
    search: Optional[str] = Query(None),
    role: Optional[UserRole] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    """Users, newest first (admin)"""
    stmt = select(User)

    if role:
        stmt = stmt.where(User.role == role)

    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(
            col(User.name).ilike(pattern),
            col(User.email).ilike(pattern),
            col(User.phone).contains(search),
        ))

    total = db.exec(select(func.count()).select_from(stmt.subquery())).one()
    users = db.exec(
        stmt.order_by(User.created_at.desc(), User.id.desc()).offset((page - 1) * limit).limit(limit)
    ).all()

    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in users],
        pagination=paginate(total, page, limit),
    )


@router.get("/stats", response_model=UserStatsResponse)
def get_user_stats(
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    return user_stats(db)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    """User by id (admin)"""
    return get_user_or_404(db, user_id)


@router.put("/{user_id}/role", response_model=ProfileUpdateResponse)
def update_user_role(
    user_id: int,
    data: RoleUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(admin_required)
):
    """Grant or revoke the admin role (admin)"""
    user = get_user_or_404(db, user_id)
    if user.id == admin.id and data.role != UserRole.ADMIN:
        raise InvalidRequest("You cannot remove your own admin role")

    user.role = data.role
    user.updated_at = datetime.utcnow()
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("User %s role set to %s by %s", user.id, user.role.value, admin.id)
    return ProfileUpdateResponse(message="User role updated", user=UserResponse.model_validate(user))
