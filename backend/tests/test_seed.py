from sqlmodel import select

from sherpamomo.core.config import settings
from sherpamomo.models.product import Product
from sherpamomo.models.user import User, UserRole
from sherpamomo.scripts.seed_admin import seed_admin
from sherpamomo.scripts.seed_products import seed_products, CATALOG, FEATURED_COUNT


def test_seed_products_once(session):
    assert seed_products(session) == len(CATALOG)
    assert seed_products(session) == 0

    products = session.exec(select(Product)).all()
    assert len(products) == len(CATALOG)
    assert sum(p.featured for p in products) == FEATURED_COUNT


def test_seed_admin_skipped_without_settings(session, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PHONE", None)
    monkeypatch.setattr(settings, "ADMIN_EMAIL", None)
    assert seed_admin(session) is None


def test_seed_admin_creates_admin(session, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PHONE", "416-555-9999")
    monkeypatch.setattr(settings, "ADMIN_EMAIL", None)

    admin = seed_admin(session)
    assert admin.phone == "+14165559999"
    assert admin.role == UserRole.ADMIN

    # Running again is a no-op
    assert seed_admin(session).id == admin.id
    assert len(session.exec(select(User)).all()) == 1


def test_seed_admin_promotes_existing_user(session, customer, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PHONE", None)
    monkeypatch.setattr(settings, "ADMIN_EMAIL", "Momo.Fan@gmail.com")

    assert seed_admin(session).id == customer.id
    session.refresh(customer)
    assert customer.role == UserRole.ADMIN


def test_seed_admin_rejects_bad_phone(session, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PHONE", "12345")
    assert seed_admin(session) is None
