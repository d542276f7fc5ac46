"""Error taxonomy.

Every failure a client can observe is a DydnsError subclass carrying the
HTTP status it maps to and a generic message. The API layer renders them
as {"message": ...}; nothing else about the cause is sent to the client.
"""

from typing import Optional


class DydnsError(Exception):
    """Base exception for all OpenDyDNS errors."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentialsError(DydnsError):
    """Unknown email or wrong password. The two are never distinguished."""

    status_code = 401
    default_message = "Invalid credentials"


class UnauthorizedError(DydnsError):
    """Missing, malformed, expired or forged bearer token."""

    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(DydnsError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(DydnsError):
    status_code = 404
    default_message = "Not found"


class ConflictError(DydnsError):
    status_code = 409
    default_message = "Already exists"


class MalformedError(DydnsError):
    status_code = 422
    default_message = "Malformed request"


class InternalError(DydnsError):
    """Store or signing failure. The cause is logged, never returned."""

    status_code = 500


# ─── Token validation ───────────────────────────────────
# Raised by TokenCodec. The authorization gate folds all of them into
# UnauthorizedError, so clients can't tell them apart.


class TokenError(DydnsError):
    status_code = 401
    default_message = "Invalid token"


class MalformedTokenError(TokenError):
    default_message = "Token could not be decoded"


class InvalidSignatureError(TokenError):
    default_message = "Token signature mismatch"


class ExpiredTokenError(TokenError):
    default_message = "Token has expired"
