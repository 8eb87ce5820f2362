from sqlmodel import SQLModel, create_engine
from sherpamomo.core.config import settings

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)


def create_tables():
    """Create all tables (models must be imported first)"""
    import sherpamomo.models  # noqa: F401

    SQLModel.metadata.create_all(engine)
