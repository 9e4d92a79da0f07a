"""Password hashing and session tokens.

Hey future me - this module is the ONLY place that touches bcrypt and jose. Services get a
PasswordHasher/TokenService handed in, so tests can crank bcrypt_rounds down to 4.
"""

import logging
from datetime import UTC, datetime, timedelta
from functools import cached_property

import bcrypt
from jose import JWTError, jwt

from mlms.config import SecuritySettings
from mlms.domain.entities import Identity, UserRole
from mlms.domain.exceptions import TokenRejectedError

logger = logging.getLogger(__name__)

# bcrypt silently ignores everything past 72 bytes, so longer passwords are refused up front.
BCRYPT_MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES


class PasswordHasher:
    """bcrypt hash/verify with a configurable cost factor."""

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(self.rounds)).decode(
            "utf-8"
        )

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash. A corrupt stored hash never matches."""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is not a valid bcrypt hash")
            return False

    @cached_property
    def _decoy_hash(self) -> str:
        return self.hash("mlms-decoy-password")

    def burn(self, password: str) -> None:
        """Spend one verify's worth of bcrypt work when there is no stored hash to check."""
        self.verify(password, self._decoy_hash)


class TokenService:
    """Issues and verifies signed session tokens.

    Claims are ``{"id": <user id>, "role": <role>, "exp": <expiry>}``.
    """

    def __init__(self, settings: SecuritySettings) -> None:
        self.secret = settings.jwt_secret
        self.algorithm = settings.jwt_algorithm
        self.expire_minutes = settings.token_expire_minutes

    def issue(self, user_id: int, role: UserRole | str) -> str:
        expires = datetime.now(UTC) + timedelta(minutes=self.expire_minutes)
        claims = {
            "id": user_id,
            "role": UserRole(role).value,
            "exp": expires,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    # Listen up - every way a token can be bad (signature, expiry, garbage claims) ends in the same
    # TokenRejectedError. The reason only goes to the debug log, never back to the client.
    def decode(self, token: str) -> Identity:
        """Verify a token and return the identity it carries.

        Raises:
            TokenRejectedError: bad signature, expired, or claims we don't understand
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug("Token rejected: %s", e)
            raise TokenRejectedError("Invalid or expired token") from e

        user_id = payload.get("id")
        role = payload.get("role")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise TokenRejectedError("Invalid or expired token")
        try:
            return Identity(user_id=user_id, role=UserRole(role))
        except ValueError as e:
            raise TokenRejectedError("Invalid or expired token") from e
