"""Domain entities."""

from dataclasses import dataclass
from enum import Enum


class UserRole(str, Enum):
    """Role stored on a user account and carried in the session token."""

    ADMIN = "admin"
    REGULAR_USER = "regular_user"

    @classmethod
    def from_request(cls, value: str | None) -> "UserRole":
        """Role requested at registration. Anything but an explicit 'admin' is a regular user."""
        return cls.ADMIN if value == cls.ADMIN.value else cls.REGULAR_USER


# Hey future me, Identity is what the auth dependencies hand to route handlers after the token
# checks out. It's ONLY what the token says - we don't hit the users table on every request.
# frozen=True so nobody "upgrades" a caller to admin halfway through a handler.
@dataclass(frozen=True)
class Identity:
    """Authenticated caller decoded from a session token."""

    user_id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


__all__ = ["Identity", "UserRole"]
