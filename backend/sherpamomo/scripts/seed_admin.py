"""
Seed script: create the tables and provision the admin from ENV
Run: python -m sherpamomo.scripts.seed_admin
"""
import logging
from typing import Optional
from sqlmodel import Session, select, or_
from sherpamomo.db.session import engine, create_tables
from sherpamomo.models.user import User, UserRole, AuthProvider
from sherpamomo.core.config import settings
from sherpamomo.core.logging_config import setup_logging
from sherpamomo.core.security import normalize_phone

logger = logging.getLogger(__name__)


def seed_admin(session: Session) -> Optional[User]:
    """Create the admin, or promote the existing account with that phone/email"""
    admin_phone = normalize_phone(settings.ADMIN_PHONE) if settings.ADMIN_PHONE else None
    admin_email = settings.ADMIN_EMAIL.strip().lower() if settings.ADMIN_EMAIL else None

    if settings.ADMIN_PHONE and not admin_phone:
        logger.error("ADMIN_PHONE is not a valid phone number: %s", settings.ADMIN_PHONE)
        return None

    if not admin_phone and not admin_email:
        logger.info("ADMIN_PHONE / ADMIN_EMAIL not set, skipping admin seed")
        return None

    conditions = []
    if admin_phone:
        conditions.append(User.phone == admin_phone)
    if admin_email:
        conditions.append(User.email == admin_email)
    existing = session.exec(select(User).where(or_(*conditions))).first()

    if existing:
        if existing.role == UserRole.ADMIN:
            logger.info("Admin already exists: %s", existing.phone or existing.email)
            return existing
        existing.role = UserRole.ADMIN
        session.add(existing)
        session.commit()
        session.refresh(existing)
        logger.info("Promoted existing user to admin: %s", existing.phone or existing.email)
        return existing

    admin = User(
        phone=admin_phone,
        email=admin_email,
        name=settings.ADMIN_NAME,
        role=UserRole.ADMIN,
        auth_provider=AuthProvider.PHONE if admin_phone else AuthProvider.FIREBASE,
    )
    session.add(admin)
    session.commit()
    session.refresh(admin)
    logger.info("Admin created: %s", admin_phone or admin_email)
    return admin


def main():
    setup_logging()
    logger.info("Creating tables...")
    create_tables()
    logger.info("Seeding admin...")
    with Session(engine) as session:
        seed_admin(session)
    logger.info("Done!")


if __name__ == "__main__":
    main()
