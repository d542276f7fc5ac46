"""Authentication and authorization.

Users → email/password → AuthService → signed JWT (TokenCodec).
Every alias request → AuthorizationGate → verified UserIdentity.
"""

from opendydns.auth.dependencies import AuthorizationGate, get_current_user
from opendydns.auth.identity import UserIdentity
from opendydns.auth.jwt import IssuedToken, TokenCodec
from opendydns.auth.service import AuthService

__all__ = [
    "AuthService",
    "AuthorizationGate",
    "IssuedToken",
    "TokenCodec",
    "UserIdentity",
    "get_current_user",
]
