import logging
from typing import Optional
from fastapi import Depends, Header
from fastapi_jwt import JwtAccessBearerCookie, JwtAuthorizationCredentials
from sqlmodel import Session
from sherpamomo.db.session import engine
from sherpamomo.models.user import User, UserRole
from sherpamomo.core.config import settings
from sherpamomo.core.errors import NotAuthenticated, Forbidden
from sherpamomo.services.users import get_or_create_firebase_user, admin_exists, promote_to_admin

logger = logging.getLogger(__name__)

# Bearer header for the apps, HttpOnly cookie for the browser
access_security = JwtAccessBearerCookie(
    secret_key=settings.SECRET_KEY,
    auto_error=False,
    access_expires_delta=settings.jwt_expires_delta,
)


def get_db():
    with Session(engine) as session:
        yield session


def issue_session_token(user: User) -> str:
    return access_security.create_access_token(subject={"id": user.id})


async def get_current_user_optional(
    credentials: Optional[JwtAuthorizationCredentials] = Depends(access_security),
    x_firebase_uid: Optional[str] = Header(None),
    x_user_email: Optional[str] = Header(None),
    x_user_name: Optional[str] = Header(None),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """Session token first; legacy web clients identify with X-Firebase-* headers"""
    if credentials is not None:
        user_id = credentials.subject.get("id")
        if not user_id:
            return None
        user = db.get(User, int(user_id))
        if not user or not user.is_active:
            return None
        return user

    if x_firebase_uid:
        user = get_or_create_firebase_user(db, x_firebase_uid, email=x_user_email, name=x_user_name)
        return user if user.is_active else None

    return None


async def get_current_user(
    user: Optional[User] = Depends(get_current_user_optional)
) -> User:
    if user is None:
        raise NotAuthenticated()
    return user


async def admin_required(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> User:
    if current_user.role == UserRole.ADMIN:
        return current_user

    if settings.ADMIN_AUTO_PROMOTE and not admin_exists(db):
        promote_to_admin(db, current_user)
        logger.warning("No admin existed; promoted user %s to admin", current_user.id)
        return current_user

    if settings.ADMIN_DEV_BYPASS and not settings.is_production:
        logger.warning("Development mode: user %s passed an admin check without the admin role", current_user.id)
        return current_user

    raise Forbidden()
