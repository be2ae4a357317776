"""
SQLAlchemy ORM Model Definitions

- kv_entries: Key-Value Store Table
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy ORM Base Class"""
    pass


class KeyValueEntry(Base):
    """
    Key-Value Store Table

    Keys are unique per namespace.
    """
    __tablename__ = "kv_entries"

    # Namespace the key belongs to
    namespace: Mapped[str] = mapped_column(String(100), primary_key=True)
    # Key
    key: Mapped[str] = mapped_column(String(512), primary_key=True)
    # Stored value (JSON values are serialized before storage)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    # Creation Time
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    # Update Time
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )
