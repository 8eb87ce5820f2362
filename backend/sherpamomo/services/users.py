import logging
from datetime import datetime
from typing import Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, func
from sherpamomo.core.errors import InvalidRequest
from sherpamomo.models.user import User, UserRole, AuthProvider

logger = logging.getLogger(__name__)


def get_or_create_user(db: Session, key: str, value: str, **defaults) -> Tuple[User, bool]:
    """Find a user by a unique identity column or create one.

    Creation relies on the unique constraint: if a concurrent request inserted
    the same identity first, the insert fails and the existing row is returned.
    """
    column = getattr(User, key)
    user = db.exec(select(User).where(column == value)).first()
    if user:
        return user, False

    user = User(**{key: value}, **defaults)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        user = db.exec(select(User).where(column == value)).first()
        if user is None:
            # Conflict on another unique column (e.g. email taken by a different account)
            raise InvalidRequest("Account details already in use")
        return user, False

    db.refresh(user)
    logger.info("New user created: id=%s provider=%s", user.id, user.auth_provider.value)
    return user, True


def get_or_create_phone_user(db: Session, phone: str) -> User:
    user, _ = get_or_create_user(db, "phone", phone, auth_provider=AuthProvider.PHONE)
    return user


def get_or_create_firebase_user(
    db: Session,
    firebase_uid: str,
    email: Optional[str] = None,
    name: Optional[str] = None,
) -> User:
    user, created = get_or_create_user(
        db,
        "firebase_uid",
        firebase_uid,
        email=(email or f"{firebase_uid}@firebase.local").strip().lower(),
        name=name or "Firebase User",
        auth_provider=AuthProvider.FIREBASE,
    )
    if not created and email and user.email != email.strip().lower():
        user.email = email.strip().lower()
        user.updated_at = datetime.utcnow()
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise InvalidRequest("Email already registered")
        db.refresh(user)
    return user


def admin_exists(db: Session) -> bool:
    count = db.exec(select(func.count(User.id)).where(User.role == UserRole.ADMIN)).one()
    return count > 0


def promote_to_admin(db: Session, user: User) -> User:
    user.role = UserRole.ADMIN
    user.updated_at = datetime.utcnow()
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
