"""In-memory Store.

Used by the test-suite and handy for throwaway daemons. A single
asyncio.Lock serializes mutations, which makes each operation atomic
within one event loop.
"""

import asyncio
import uuid
from dataclasses import replace
from typing import Optional

from opendydns.errors import ConflictError, ForbiddenError, NotFoundError
from opendydns.store.base import AliasRecord, UserRecord, normalize_email


class InMemoryStore:
    def __init__(self):
        self._users: dict[str, UserRecord] = {}  # keyed by normalized email
        self._aliases: dict[tuple[str, str], AliasRecord] = {}
        self._lock = asyncio.Lock()

    async def ping(self) -> None:
        return None

    async def create_user(self, email: str, password_hash: str) -> UserRecord:
        key = normalize_email(email)
        async with self._lock:
            if key in self._users:
                raise ConflictError("Email already registered")
            user = UserRecord(
                id=str(uuid.uuid4()), email=key, password_hash=password_hash
            )
            self._users[key] = user
            return user

    async def find_user_by_email(self, email: str) -> Optional[UserRecord]:
        return self._users.get(normalize_email(email))

    async def find_aliases_by_owner(self, owner_id: str) -> list[AliasRecord]:
        owned = [a for a in self._aliases.values() if a.owner_id == owner_id]
        return sorted(owned, key=lambda a: (a.domain, a.host))

    async def find_alias_by_host_domain(
        self, host: str, domain: str
    ) -> Optional[AliasRecord]:
        return self._aliases.get((host, domain))

    async def insert_alias_if_absent(
        self, host: str, domain: str, value: str, owner_id: str
    ) -> AliasRecord:
        async with self._lock:
            if (host, domain) in self._aliases:
                raise ConflictError("Alias already registered")
            alias = AliasRecord(
                id=str(uuid.uuid4()),
                host=host,
                domain=domain,
                value=value,
                owner_id=owner_id,
            )
            self._aliases[(host, domain)] = alias
            return alias

    async def update_alias_if_owner(
        self,
        host: str,
        domain: str,
        owner_id: str,
        value: str,
        new_domain: Optional[str] = None,
    ) -> AliasRecord:
        async with self._lock:
            alias = self._owned(host, domain, owner_id)
            target = (host, new_domain or domain)
            if target != (host, domain) and target in self._aliases:
                raise ConflictError("Alias already registered")
            updated = replace(alias, value=value, domain=target[1])
            del self._aliases[(host, domain)]
            self._aliases[target] = updated
            return updated

    async def delete_alias_if_owner(
        self, host: str, domain: str, owner_id: str
    ) -> None:
        async with self._lock:
            self._owned(host, domain, owner_id)
            del self._aliases[(host, domain)]

    def _owned(self, host: str, domain: str, owner_id: str) -> AliasRecord:
        alias = self._aliases.get((host, domain))
        if alias is None:
            raise NotFoundError("Alias not found")
        if alias.owner_id != owner_id:
            raise ForbiddenError("Alias belongs to another user")
        return alias
