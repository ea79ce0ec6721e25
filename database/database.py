"""Database helpers: engines, session factories and DB initialization.

Provides read/write session factories and a simple `init_db` helper that
creates tables and seeds the food catalogue when it is empty.
"""

import json
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.config import WRITE_DATABASE_URL, READ_DATABASE_URL, SEED_FOODS
from core.logger import get_logger
from .models import Base, Food
from data.foods_dataset import FOODS_DATA

logger = get_logger("database")


def _connect_args(url: str) -> dict:
    # SQLite connections are shared across the threadpool FastAPI runs sync endpoints in.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# Read/Write partitioning: both default to the same SQLite file for local use.
write_engine = create_engine(WRITE_DATABASE_URL, connect_args=_connect_args(WRITE_DATABASE_URL))
read_engine = create_engine(READ_DATABASE_URL, connect_args=_connect_args(READ_DATABASE_URL))

# Session factories
WriteSessionLocal = sessionmaker(bind=write_engine)
ReadSessionLocal = sessionmaker(bind=read_engine)


def seed_foods(session) -> int:
    """Insert the default food catalogue when the foods table is empty.

    Returns:
        Number of foods inserted.
    """
    if session.query(Food).count() > 0:
        return 0
    for item in FOODS_DATA:
        session.add(Food(
            name=item["name"],
            category=item["category"],
            calories=item["calories"],
            protein=item["protein"],
            carbs=item["carbs"],
            fat=item["fat"],
            fiber=item.get("fiber"),
            serving_size=item["serving_size"],
            serving_unit=item.get("serving_unit", "g"),
            restrictions=json.dumps(item.get("restrictions", [])),
        ))
    session.commit()
    logger.info("Seeded %s foods into the catalogue", len(FOODS_DATA))
    return len(FOODS_DATA)


def init_db():
    """Initialize database schema and seed the food catalogue.

    Creates all tables using SQLAlchemy models and, unless `SEED_FOODS` is
    disabled, populates the foods table with default data if it is empty.
    """
    Base.metadata.create_all(bind=write_engine)
    if not SEED_FOODS:
        return
    session = WriteSessionLocal()
    try:
        seed_foods(session)
    finally:
        session.close()


# Convenience generators for dependency injection
def get_write_session():
    """Yield a write-enabled SQLAlchemy session for the request scope.

    Use this generator as a FastAPI dependency to ensure the session is
    properly closed after the request completes.
    """
    db = WriteSessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_read_session():
    """Yield a read-only SQLAlchemy session for the request scope.

    Used for read endpoints where routing reads to a replica may be desired.
    """
    db = ReadSessionLocal()
    try:
        yield db
    finally:
        db.close()
