"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Alembic migrations are written against these models.

Key ids are chosen by the client, so the primary key is (owner_id, id):
two users may pick the same id without ever seeing each other's rows.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, Float, Index, String, Text, false
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ApiKey(Base):
    """One stored API key, owned by a single Google account.

    Learn: owner_id holds the `sub` claim of the verified ID token. It is
    written once at insert time by the service layer and never taken from
    the request body.
    """

    __tablename__ = "keys"
    __table_args__ = (Index("idx_keys_owner", "owner_id"),)

    owner_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    id: Mapped[str] = mapped_column(String(255), primary_key=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    favorite: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    order: Mapped[Optional[float]] = mapped_column(Float)

    status: Mapped[Optional[str]] = mapped_column(String(100))
    status_message: Mapped[Optional[str]] = mapped_column(Text)
    # Free-form, client-provided timestamp string (ISO-8601 by default)
    created_at: Mapped[Optional[str]] = mapped_column(
        String(64), default=utcnow_iso
    )
