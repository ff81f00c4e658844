"""
SQL Connection Utility (users / authentication)

SQLite by default, PostgreSQL when USE_SQLITE=false.
"""
import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Optional

from sqlalchemy import (
    Boolean, Column, DateTime, Integer, MetaData, String, Table, create_engine, func, text
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from ats.core.config import get_settings

logger = logging.getLogger(__name__)

metadata = MetaData()

users_table = Table(
    "users",
    metadata,
    Column("user_id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False, unique=True, index=True),
    Column("password_hash", String(255), nullable=False),
    Column("name", String(100), nullable=False),
    Column("role", String(20), nullable=False, default="hr_manager"),
    Column("department", String(100), default="Human Resources"),
    Column("employee_id", String(50), nullable=False, unique=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("last_login", DateTime, nullable=True),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
    Column("updated_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """
    Create an engine for url.
    SQLite connections are shared across FastAPI worker threads.
    """
    if url.startswith("sqlite"):
        return create_engine(url, echo=echo, connect_args={"check_same_thread": False})
    # pool_size=5: maintain 5 connections ready
    # max_overflow=10: allow 10 extra connections under load
    return create_engine(url, pool_size=5, max_overflow=10, echo=echo)


@lru_cache()
def get_engine() -> Engine:
    settings = get_settings()
    return create_db_engine(settings.sql_url, echo=settings.debug)


@lru_cache()
def get_session_factory() -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


@contextmanager
def get_db_session(session_factory: Optional[sessionmaker] = None):
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.execute(text("SELECT 1"))
    """
    session = (session_factory or get_session_factory())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_sql_schema(engine: Optional[Engine] = None) -> None:
    """Create tables if they don't exist."""
    metadata.create_all(engine or get_engine())
    logger.info("SQL schema synchronized")


def check_sql_connection() -> bool:
    """
    Test if the SQL database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            row = db.execute(text("SELECT 1 as test")).fetchone()
            return row[0] == 1
    except Exception as e:
        logger.warning(f"SQL connection failed: {e}")
        return False
