"""Store contract: the persistence capabilities the core depends on.

Services depend on the Store protocol, not on a concrete engine. Every
mutating operation is atomic with respect to its predicate: inserting
checks (host, domain) uniqueness, updating and deleting check ownership,
each in a single step the engine guarantees. Callers never do
check-then-act on top of these.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class UserRecord:
    id: str
    email: str
    password_hash: str


@dataclass(frozen=True)
class AliasRecord:
    id: str
    host: str
    domain: str
    value: str
    owner_id: str

    @property
    def name(self) -> str:
        return f"{self.host}.{self.domain}"


def normalize_email(email: str) -> str:
    return email.strip().lower()


@runtime_checkable
class Store(Protocol):
    """Interface for user and alias persistence."""

    async def ping(self) -> None:
        """Raise InternalError if the backing engine is unreachable."""
        ...

    async def create_user(self, email: str, password_hash: str) -> UserRecord:
        """Create a user. Raises ConflictError if the email is taken."""
        ...

    async def find_user_by_email(self, email: str) -> Optional[UserRecord]:
        ...

    async def find_aliases_by_owner(self, owner_id: str) -> list[AliasRecord]:
        """All aliases of a user, ordered by domain then host."""
        ...

    async def find_alias_by_host_domain(
        self, host: str, domain: str
    ) -> Optional[AliasRecord]:
        """Global lookup, whoever owns the alias."""
        ...

    async def insert_alias_if_absent(
        self, host: str, domain: str, value: str, owner_id: str
    ) -> AliasRecord:
        """Insert an alias. Raises ConflictError if (host, domain) exists."""
        ...

    async def update_alias_if_owner(
        self,
        host: str,
        domain: str,
        owner_id: str,
        value: str,
        new_domain: Optional[str] = None,
    ) -> AliasRecord:
        """Update value (and optionally domain) of an alias owned by owner_id.

        Raises NotFoundError if no alias matches, ForbiddenError if it
        belongs to someone else, ConflictError if new_domain collides.
        """
        ...

    async def delete_alias_if_owner(
        self, host: str, domain: str, owner_id: str
    ) -> None:
        """Delete an alias owned by owner_id. NotFoundError / ForbiddenError."""
        ...
