"""Request authorization.

AuthorizationGate turns an Authorization header into a UserIdentity.
get_current_user wires it into FastAPI: routes declare
`identity: UserIdentity = Depends(get_current_user)` and receive the
verified caller as an explicit parameter.
"""

from typing import Optional

import structlog
from fastapi import Depends, Header, Request

from opendydns.auth.identity import UserIdentity
from opendydns.auth.jwt import TokenCodec
from opendydns.errors import TokenError, UnauthorizedError

logger = structlog.get_logger()


class AuthorizationGate:
    """Validates bearer tokens with the codec it was built with."""

    def __init__(self, codec: TokenCodec):
        self.codec = codec

    def authorize(self, authorization: Optional[str]) -> UserIdentity:
        """Return the identity behind a `Bearer <token>` header value.

        Every failure is an UnauthorizedError. Why a token was refused
        (malformed, expired, bad signature) is logged, not returned.
        """
        if not authorization:
            raise UnauthorizedError()

        scheme, _, token = authorization.strip().partition(" ")
        token = token.strip()
        if scheme.lower() != "bearer" or not token:
            raise UnauthorizedError()

        try:
            return self.codec.validate(token)
        except TokenError as e:
            logger.info("auth.token_rejected", reason=type(e).__name__)
            raise UnauthorizedError() from e


def get_gate(request: Request) -> AuthorizationGate:
    return request.app.state.gate


async def get_current_user(
    authorization: Optional[str] = Header(None),
    gate: AuthorizationGate = Depends(get_gate),
) -> UserIdentity:
    """FastAPI dependency: 401 unless the request carries a valid token."""
    identity = gate.authorize(authorization)
    structlog.contextvars.bind_contextvars(user_id=identity.user_id)
    return identity
