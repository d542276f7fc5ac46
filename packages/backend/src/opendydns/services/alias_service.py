"""Alias service: alias lifecycle under an authenticated identity.

Uniqueness and ownership are enforced by the store's atomic operations;
this layer never checks first and writes second. It trusts the identity
it is handed and performs no authentication of its own.
"""

from typing import Iterable, Optional

import structlog

from opendydns.auth.identity import UserIdentity
from opendydns.store.base import AliasRecord, Store

logger = structlog.get_logger()


def _norm(name: str) -> str:
    return name.strip().lower().rstrip(".")


class AliasRegistry:
    """Business logic for alias management."""

    def __init__(self, store: Store, available_domains: Iterable[str] = ()):
        self.store = store
        self.available_domains = sorted({_norm(d) for d in available_domains if d})

    async def list_aliases(self, identity: UserIdentity) -> list[AliasRecord]:
        return await self.store.find_aliases_by_owner(identity.user_id)

    async def register_alias(
        self, identity: UserIdentity, host: str, domain: str, value: str
    ) -> AliasRecord:
        """Create an alias owned by the caller. ConflictError if taken."""
        alias = await self.store.insert_alias_if_absent(
            _norm(host), _norm(domain), value, identity.user_id
        )
        logger.info(
            "alias.registered",
            alias=alias.name,
            value=alias.value,
            user_id=identity.user_id,
        )
        return alias

    async def update_alias(
        self,
        identity: UserIdentity,
        host: str,
        domain: str,
        value: str,
        new_domain: Optional[str] = None,
    ) -> AliasRecord:
        """Change the value (and optionally the domain) of a caller's alias."""
        alias = await self.store.update_alias_if_owner(
            _norm(host),
            _norm(domain),
            identity.user_id,
            value,
            new_domain=_norm(new_domain) if new_domain else None,
        )
        logger.info(
            "alias.updated",
            alias=alias.name,
            value=alias.value,
            user_id=identity.user_id,
        )
        return alias

    async def delete_alias(
        self, identity: UserIdentity, host: str, domain: str
    ) -> None:
        host, domain = _norm(host), _norm(domain)
        await self.store.delete_alias_if_owner(host, domain, identity.user_id)
        logger.info("alias.deleted", alias=f"{host}.{domain}", user_id=identity.user_id)

    async def get_domains(self, identity: UserIdentity) -> list[str]:
        """Domains offered by this daemon plus those the caller already uses."""
        owned = await self.list_aliases(identity)
        return sorted(set(self.available_domains) | {a.domain for a in owned})
