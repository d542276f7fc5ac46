"""The authenticated principal attached to a request."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserIdentity:
    """A verified user. Passed explicitly down to every alias operation."""

    user_id: str
    email: str
