"""Alias API routes.

Routes handle HTTP concerns and delegate to AliasRegistry. The caller's
identity arrives through get_current_user and is passed on explicitly.
"""

from fastapi import APIRouter, Depends

from opendydns.api.deps import get_registry
from opendydns.auth.dependencies import get_current_user
from opendydns.auth.identity import UserIdentity
from opendydns.errors import MalformedError
from opendydns.schemas.alias import AliasCreate, AliasRead, AliasUpdate
from opendydns.services.alias_service import AliasRegistry

router = APIRouter()


def split_alias_name(name: str) -> tuple[str, str]:
    """Split "home.example.com" into ("home", "example.com")."""
    host, _, domain = name.strip().partition(".")
    if not host or not domain:
        raise MalformedError("Alias name must be of the form host.domain")
    return host, domain


@router.get("/aliases", response_model=list[AliasRead])
async def list_aliases(
    identity: UserIdentity = Depends(get_current_user),
    registry: AliasRegistry = Depends(get_registry),
):
    return await registry.list_aliases(identity)


@router.post("/aliases", response_model=AliasRead, status_code=201)
async def register_alias(
    body: AliasCreate,
    identity: UserIdentity = Depends(get_current_user),
    registry: AliasRegistry = Depends(get_registry),
):
    return await registry.register_alias(identity, body.host, body.domain, body.value)


@router.put("/aliases", response_model=AliasRead)
async def update_alias(
    body: AliasUpdate,
    identity: UserIdentity = Depends(get_current_user),
    registry: AliasRegistry = Depends(get_registry),
):
    return await registry.update_alias(
        identity, body.host, body.domain, body.value, new_domain=body.new_domain
    )


@router.delete("/aliases/{name}")
async def delete_alias(
    name: str,
    identity: UserIdentity = Depends(get_current_user),
    registry: AliasRegistry = Depends(get_registry),
):
    host, domain = split_alias_name(name)
    await registry.delete_alias(identity, host, domain)
    return {"deleted": True}
