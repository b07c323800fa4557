"""
SQLAlchemy declarative base and common model mixins.

This module provides the SQLAlchemy DeclarativeBase and mixins for integer
identity and creation timestamps.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all store models, shown by primary key in reprs."""

    __abstract__ = True

    def __repr__(self) -> str:
        pk_values = []
        for column in self.__table__.primary_key.columns:
            value = getattr(self, column.name, None)
            if value is not None:
                pk_values.append(f"{column.name}={value!r}")

        pk_str = ", ".join(pk_values) if pk_values else "no primary key"
        return f"<{self.__class__.__name__}({pk_str})>"


class IntegerIdMixin:
    """
    Mixin for a monotonic integer primary key assigned by the store.
    """

    @declared_attr
    def id(cls) -> Mapped[int]:
        return mapped_column(
            Integer,
            primary_key=True,
            autoincrement=True,
            comment="Unique identifier for the record",
        )


class CreatedAtMixin:
    """
    Mixin for the creation timestamp.

    The value is assigned in Python on insert so it is readable without a
    round trip to the database.
    """

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            nullable=False,
            default=utc_now,
            comment="Timestamp when record was created",
        )


class BaseModel(Base, IntegerIdMixin, CreatedAtMixin):
    """
    Base model with integer primary key and creation timestamp.

    Example:
        class Product(BaseModel):
            __tablename__ = "products"

            sku: Mapped[str] = mapped_column(String(64), unique=True)
    """

    __abstract__ = True


def create_table_args(
    *constraints: Any,
    comment: Optional[str] = None,
    **kwargs: Any,
) -> tuple:
    """
    Create __table_args__ with common settings.

    Ids are never reused on SQLite so they stay monotonic even after rows
    are deleted.

    Args:
        *constraints: Table-level constraints and indexes
        comment: Table comment for documentation
        **kwargs: Additional table keyword arguments

    Example:
        class User(BaseModel):
            __tablename__ = "users"
            __table_args__ = create_table_args(comment="User accounts")
    """
    table_kwargs: Dict[str, Any] = {"sqlite_autoincrement": True}

    if comment:
        table_kwargs["comment"] = comment

    table_kwargs.update(kwargs)

    return (*constraints, table_kwargs)
