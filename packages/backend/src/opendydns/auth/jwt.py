"""JWT token issuance and validation.

Tokens are stateless: the daemon keeps no session table, so any replica
holding the same signing key can validate them. The flip side is that a
token stays valid until it expires; there is no revocation.

The token carries the user id (sub) and email so validation can rebuild
the UserIdentity without touching the store.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt
import structlog

from opendydns.auth.identity import UserIdentity
from opendydns.errors import (
    ExpiredTokenError,
    InternalError,
    InvalidSignatureError,
    MalformedTokenError,
)

logger = structlog.get_logger()

DEFAULT_TTL = timedelta(hours=24)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class IssuedToken:
    token: str
    issued_at: datetime
    expires_at: datetime


class TokenCodec:
    """Signs and validates identity tokens with a key fixed at construction."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utcnow,
    ):
        if not secret:
            raise ValueError("signing secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl
        self._clock = clock

    def issue(self, identity: UserIdentity) -> IssuedToken:
        """Create a signed token for the identity, expiring after the TTL."""
        # JWT timestamps are whole seconds
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self._ttl
        payload = {
            "sub": identity.user_id,
            "email": identity.email,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        try:
            token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        except (jwt.PyJWTError, NotImplementedError, ValueError, TypeError) as e:
            # Unknown algorithm or a key the algorithm can't use
            logger.error("auth.token_signing_failed", algorithm=self._algorithm, error=repr(e))
            raise InternalError() from e
        return IssuedToken(token=token, issued_at=issued_at, expires_at=expires_at)

    def validate(self, token: str) -> UserIdentity:
        """Verify a token and return the identity it was issued for.

        Raises MalformedTokenError, InvalidSignatureError or ExpiredTokenError.
        Expiry is checked against the codec's clock rather than PyJWT's,
        so a token is accepted up to and including its exp second.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "exp", "iat"],
                },
            )
        except jwt.InvalidSignatureError as e:
            raise InvalidSignatureError() from e
        except jwt.InvalidTokenError as e:
            raise MalformedTokenError(f"Invalid token: {e}") from e

        exp = payload["exp"]
        subject = payload["sub"]
        email = payload.get("email")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise MalformedTokenError("Invalid token: exp is not a timestamp")
        if not isinstance(subject, str) or not isinstance(email, str):
            raise MalformedTokenError("Invalid token: missing identity claims")

        if self._clock() > datetime.fromtimestamp(exp, tz=timezone.utc):
            raise ExpiredTokenError()

        return UserIdentity(user_id=subject, email=email)
