"""ORM Models for InkValue Studio — SQLAlchemy 2.0"""
from datetime import datetime
from typing import Any
from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from inkvalue.db import Base


# ── KEY-VALUE STORE ──────────────────────────────────────────────────────────
class KeyValueRecord(Base):
    __tablename__ = "kv_store"
    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
