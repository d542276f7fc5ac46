"""Domains the caller can register aliases under."""

from fastapi import APIRouter, Depends

from opendydns.api.deps import get_registry
from opendydns.auth.dependencies import get_current_user
from opendydns.auth.identity import UserIdentity
from opendydns.services.alias_service import AliasRegistry

router = APIRouter()


@router.get("/domains", response_model=list[str])
async def list_domains(
    identity: UserIdentity = Depends(get_current_user),
    registry: AliasRegistry = Depends(get_registry),
):
    return await registry.get_domains(identity)
