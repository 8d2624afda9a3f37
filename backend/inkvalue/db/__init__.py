"""
Database Layer - SQLAlchemy engine + session factory for the local key-value store.
"""
import os
import logging
from typing import Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

logger = logging.getLogger("inkvalue-db")

_raw_db_url = os.getenv("DATABASE_URL", "")
if not _raw_db_url:
    # Local single-user mode: a SQLite file next to the working directory
    _raw_db_url = "sqlite:///./inkvalue.db"

DATABASE_URL = _raw_db_url
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)


class Base(DeclarativeBase):
    pass


def make_engine(url: str = DATABASE_URL) -> Engine:
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=False, pool_pre_ping=True, connect_args=connect_args)


engine = make_engine(DATABASE_URL)

SessionLocal = sessionmaker(engine, class_=Session, expire_on_commit=False)


def init_db(bind: Optional[Engine] = None) -> None:
    """Create tables if missing."""
    from inkvalue.models import orm_models  # noqa: F401
    target = bind or engine
    if os.getenv("DB_RESET_ON_STARTUP", "").lower() in ("1", "true", "yes"):
        logger.warning("DB_RESET_ON_STARTUP=true — dropping all tables")
        Base.metadata.drop_all(target)
    Base.metadata.create_all(target)
    logger.info("Database tables initialized.")

