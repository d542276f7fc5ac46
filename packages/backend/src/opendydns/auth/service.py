"""Credential verification and user provisioning."""

import re
import secrets

import structlog

from opendydns.auth.identity import UserIdentity
from opendydns.auth.password import DEFAULT_ROUNDS, hash_password, verify_password
from opendydns.errors import InvalidCredentialsError, MalformedError
from opendydns.store.base import Store, normalize_email

logger = structlog.get_logger()

MIN_PASSWORD_LENGTH = 8
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")


class AuthService:
    """Verifies email/password pairs against the store.

    Unknown emails and wrong passwords fail identically with
    InvalidCredentialsError. An unknown email is still checked against a
    dummy hash so both paths spend the same bcrypt time.
    """

    def __init__(self, store: Store, bcrypt_rounds: int = DEFAULT_ROUNDS):
        self.store = store
        self.bcrypt_rounds = bcrypt_rounds
        self._dummy_hash = hash_password(secrets.token_urlsafe(16), bcrypt_rounds)

    async def authenticate(self, email: str, password: str) -> UserIdentity:
        user = await self.store.find_user_by_email(normalize_email(email))
        if user is None:
            verify_password(password, self._dummy_hash)
            logger.info("auth.login_failed", reason="unknown_email")
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash):
            logger.info("auth.login_failed", reason="bad_password", user_id=user.id)
            raise InvalidCredentialsError()

        logger.info("auth.login", user_id=user.id)
        return UserIdentity(user_id=user.id, email=user.email)

    async def create_user(self, email: str, password: str) -> UserIdentity:
        """Provision a new account. ConflictError if the email is taken."""
        email = normalize_email(email)
        if not _EMAIL_RE.match(email):
            raise MalformedError("Invalid email address")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise MalformedError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        user = await self.store.create_user(
            email, hash_password(password, self.bcrypt_rounds)
        )
        logger.info("auth.user_created", user_id=user.id)
        return UserIdentity(user_id=user.id, email=user.email)
