"""Database connection and session management"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from contextlib import contextmanager
from functools import lru_cache
from typing import Generator, Optional
from config import get_settings
from loguru import logger


@lru_cache()
def get_engine() -> Engine:
    """Create the engine for settings.DATABASE_URL on first use"""
    settings = get_settings()
    return create_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20
    )


def make_session_factory(engine: Optional[Engine] = None) -> sessionmaker:
    """Session factory bound to ``engine`` (default: the configured engine)"""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine or get_engine())


@contextmanager
def session_scope(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """
    Context manager for database sessions

    Usage:
        with session_scope(make_session_factory()) as db:
            # use db
    """
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Database error: {e}")
        raise
    finally:
        db.close()


def init_db(engine: Optional[Engine] = None):
    """Initialize database tables"""
    from database.models import Base

    try:
        Base.metadata.create_all(bind=engine or get_engine())
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Failed to create database tables: {e}")
        raise
