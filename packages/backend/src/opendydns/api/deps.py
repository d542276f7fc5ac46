"""Accessors for the services create_app() hangs on app.state."""

from fastapi import Request

from opendydns.auth.jwt import TokenCodec
from opendydns.auth.service import AuthService
from opendydns.services.alias_service import AliasRegistry
from opendydns.store.base import Store


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth


def get_codec(request: Request) -> TokenCodec:
    return request.app.state.codec


def get_registry(request: Request) -> AliasRegistry:
    return request.app.state.aliases
