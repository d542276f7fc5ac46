"""SQLAlchemy-backed Store.

Each operation runs in its own session and transaction. Atomicity comes
from the database:
- insert_alias_if_absent relies on the (host, domain) unique constraint;
  an IntegrityError on commit means someone else holds the pair.
- update/delete carry "AND owner_id = :caller" in the statement itself.
  When no row matched, a lookup inside the same transaction tells
  NotFound from Forbidden.

Driver failures are logged and surfaced as InternalError.
"""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import structlog
from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from opendydns.db.models import Alias, User
from opendydns.errors import (
    ConflictError,
    ForbiddenError,
    InternalError,
    MalformedError,
    NotFoundError,
)
from opendydns.store.base import AliasRecord, UserRecord, normalize_email

logger = structlog.get_logger()


def _as_uuid(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError, AttributeError) as e:
        raise MalformedError("Invalid user identifier") from e


def _user_record(user: User) -> UserRecord:
    return UserRecord(
        id=str(user.id), email=user.email, password_hash=user.password_hash
    )


def _alias_record(alias: Alias) -> AliasRecord:
    return AliasRecord(
        id=str(alias.id),
        host=alias.host,
        domain=alias.domain,
        value=alias.value,
        owner_id=str(alias.owner_id),
    )


class SqlStore:
    """Store implementation over an async SQLAlchemy session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as db:
                yield db
        except SQLAlchemyError as e:
            logger.error("store.error", error=str(e), error_type=type(e).__name__)
            raise InternalError() from e

    async def ping(self) -> None:
        async with self._session() as db:
            await db.execute(text("SELECT 1"))

    # ─── Users ──────────────────────────────────────────

    async def create_user(self, email: str, password_hash: str) -> UserRecord:
        async with self._session() as db:
            user = User(email=normalize_email(email), password_hash=password_hash)
            db.add(user)
            try:
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                raise ConflictError("Email already registered") from e
            return _user_record(user)

    async def find_user_by_email(self, email: str) -> Optional[UserRecord]:
        async with self._session() as db:
            user = await db.scalar(
                select(User).where(User.email == normalize_email(email))
            )
            return _user_record(user) if user else None

    # ─── Aliases ────────────────────────────────────────

    async def find_aliases_by_owner(self, owner_id: str) -> list[AliasRecord]:
        owner = _as_uuid(owner_id)
        async with self._session() as db:
            result = await db.execute(
                select(Alias)
                .where(Alias.owner_id == owner)
                .order_by(Alias.domain, Alias.host)
            )
            return [_alias_record(a) for a in result.scalars().all()]

    async def find_alias_by_host_domain(
        self, host: str, domain: str
    ) -> Optional[AliasRecord]:
        async with self._session() as db:
            alias = await db.scalar(
                select(Alias).where(Alias.host == host, Alias.domain == domain)
            )
            return _alias_record(alias) if alias else None

    async def insert_alias_if_absent(
        self, host: str, domain: str, value: str, owner_id: str
    ) -> AliasRecord:
        owner = _as_uuid(owner_id)
        async with self._session() as db:
            alias = Alias(host=host, domain=domain, value=value, owner_id=owner)
            db.add(alias)
            try:
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                raise ConflictError("Alias already registered") from e
            return _alias_record(alias)

    async def update_alias_if_owner(
        self,
        host: str,
        domain: str,
        owner_id: str,
        value: str,
        new_domain: Optional[str] = None,
    ) -> AliasRecord:
        owner = _as_uuid(owner_id)
        target_domain = new_domain or domain
        async with self._session() as db:
            try:
                result = await db.execute(
                    update(Alias)
                    .where(
                        Alias.host == host,
                        Alias.domain == domain,
                        Alias.owner_id == owner,
                    )
                    .values(value=value, domain=target_domain)
                    .execution_options(synchronize_session=False)
                )
            except IntegrityError as e:
                await db.rollback()
                raise ConflictError("Alias already registered") from e

            if result.rowcount == 0:
                await self._raise_missing(db, host, domain)

            alias = await db.scalar(
                select(Alias).where(
                    Alias.host == host, Alias.domain == target_domain
                )
            )
            await db.commit()
            return _alias_record(alias)

    async def delete_alias_if_owner(
        self, host: str, domain: str, owner_id: str
    ) -> None:
        owner = _as_uuid(owner_id)
        async with self._session() as db:
            result = await db.execute(
                delete(Alias).where(
                    Alias.host == host,
                    Alias.domain == domain,
                    Alias.owner_id == owner,
                ).execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await self._raise_missing(db, host, domain)
            await db.commit()

    async def _raise_missing(self, db: AsyncSession, host: str, domain: str):
        """Classify a zero-row conditional write. Always raises."""
        exists = await db.scalar(
            select(Alias.id).where(Alias.host == host, Alias.domain == domain)
        )
        await db.rollback()
        if exists is None:
            raise NotFoundError("Alias not found")
        raise ForbiddenError("Alias belongs to another user")
