"""
Declarative base shared by the tracker's models.

Constraint names follow a fixed convention so Alembic migrations produce the
same names on SQLite (tests, local development) and PostgreSQL.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, MetaData, func, inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def utcnow() -> datetime:
    """Naive UTC timestamp for TIMESTAMP (without time zone) columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    def __repr__(self) -> str:
        # Read loaded values only; repr must not trigger a lazy load
        state = inspect(self)
        key = state.identity[0] if state.identity else "transient"
        label = self.__dict__.get("channel_name") or self.__dict__.get("date")
        suffix = f" {label}" if label is not None else ""
        return f"<{self.__class__.__name__} {key}{suffix}>"


class TimestampMixin:
    """Database-managed created_at / updated_at columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
