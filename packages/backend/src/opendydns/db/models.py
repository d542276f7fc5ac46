"""SQLAlchemy ORM models: the schema behind SqlStore.

Declarative mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Generic Uuid/DateTime types keep the schema portable between SQLite
(the default) and PostgreSQL.

The (host, domain) unique constraint is what makes alias registration
atomic: two racing inserts can't both commit.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """An account. Email is stored lower-cased."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    aliases: Mapped[list["Alias"]] = relationship(back_populates="owner")


class Alias(Base):
    """A host.domain → value binding owned by one user."""

    __tablename__ = "aliases"
    __table_args__ = (
        UniqueConstraint("host", "domain", name="uq_aliases_host_domain"),
        Index("idx_aliases_owner", "owner_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    host: Mapped[str] = mapped_column(String(63), nullable=False)
    domain: Mapped[str] = mapped_column(String(253), nullable=False)
    value: Mapped[str] = mapped_column(String(45), nullable=False)  # IPv4/IPv6
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    owner: Mapped["User"] = relationship(back_populates="aliases")
