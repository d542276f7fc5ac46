"""Daemon configuration via environment variables.

Uses pydantic-settings to load config from env vars with OPENDYDNS_ prefix.
The settings object is handed to create_app() explicitly; components get
the individual values they need (secret, TTL, ...) at construction.
"""

from datetime import timedelta

from pydantic import model_validator
from pydantic_settings import BaseSettings

DEFAULT_JWT_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    """All daemon configuration. Set via OPENDYDNS_* env vars."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./opendydns.db"

    # Auth
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_ttl_minutes: int = 24 * 60
    bcrypt_rounds: int = 12

    # Domains users may register aliases under
    domains: list[str] = []

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8888

    # Logging
    log_level: str = "info"
    log_json: bool = False

    model_config = {"env_prefix": "OPENDYDNS_"}

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(minutes=self.token_ttl_minutes)

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure the signing key is changed in non-development environments."""
        if (
            self.environment != "development"
            and self.jwt_secret == DEFAULT_JWT_SECRET
        ):
            raise ValueError(
                "OPENDYDNS_JWT_SECRET must be set to a secure value in "
                "non-development environments. Generate one with: "
                'python -c "import secrets; print(secrets.token_urlsafe(32))"'
            )
        if self.token_ttl_minutes <= 0:
            raise ValueError("OPENDYDNS_TOKEN_TTL_MINUTES must be positive")
        return self


settings = Settings()
