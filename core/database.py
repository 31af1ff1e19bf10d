"""
Direct PostgreSQL access to the Supabase database.
Only used by the maintenance scripts; the API talks to Supabase over REST.
"""
import os
from typing import Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.ext.declarative import declarative_base

# core.config loads .env
from core.config import logger  # noqa: F401

# Base class for ORM models
Base = declarative_base()

_engine: Optional[Engine] = None


def get_engine(database_url: Optional[str] = None) -> Engine:
    global _engine
    if database_url:
        return create_engine(database_url, pool_pre_ping=True)
    if _engine is None:
        url = os.getenv("DATABASE_URL", "")
        if not url:
            raise ValueError("DATABASE_URL environment variable is required for direct PostgreSQL access")
        _engine = create_engine(url, pool_pre_ping=True, pool_size=5, max_overflow=5)
    return _engine


def init_db(engine: Engine) -> None:
    """Create tables for all models bound to Base"""
    import models.portfolio  # noqa: F401

    Base.metadata.create_all(bind=engine)
