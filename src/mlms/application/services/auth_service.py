"""Auth Service - registration, login and password changes."""

import logging
from collections.abc import Iterable
from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from mlms.application.services.activity_service import ActivityLogger
from mlms.config import SecuritySettings
from mlms.domain.entities import UserRole
from mlms.domain.exceptions import (
    AuthenticationError,
    DuplicateEntityException,
    EntityNotFoundException,
    ValidationError,
)
from mlms.domain.value_objects import is_allowed_email, normalize_email
from mlms.infrastructure.persistence.models import UserModel, utc_now
from mlms.infrastructure.persistence.repositories import (
    SubscriptionRepository,
    UserRepository,
)
from mlms.infrastructure.security import PasswordHasher, TokenService, password_too_long

logger = logging.getLogger(__name__)

# Same message for "no such email" and "wrong password" so nobody can probe which emails exist.
INVALID_CREDENTIALS = "Invalid email or password"
SUBSCRIPTION_TRIAL_DAYS = 30


def validated_email(raw: str | None, allowed_tlds: Iterable[str]) -> str:
    """Normalize an email and check it against the pattern and TLD allow-list.

    Raises:
        ValidationError: blank, malformed, or not an allowed TLD
    """
    email = normalize_email(raw or "")
    if not email:
        raise ValidationError("Email is required")
    if not is_allowed_email(email, allowed_tlds):
        raise ValidationError("Invalid email address or domain not allowed")
    return email


def _check_password_length(password: str) -> None:
    if password_too_long(password):
        raise ValidationError("Password must be at most 72 bytes")


class AuthService:
    """User accounts and session tokens."""

    def __init__(
        self,
        session: AsyncSession,
        hasher: PasswordHasher,
        tokens: TokenService,
        settings: SecuritySettings,
    ) -> None:
        self._session = session
        self._hasher = hasher
        self._tokens = tokens
        self._settings = settings
        self._users = UserRepository(session)
        self._subscriptions = SubscriptionRepository(session)
        self._activity = ActivityLogger(session)

    async def register(
        self,
        name: str | None,
        email: str | None,
        password: str | None,
        role: str | None = None,
        subscription_plan: str | None = None,
    ) -> UserModel:
        """Create a user account.

        Returns:
            The new user row

        Raises:
            ValidationError: missing fields, bad email, password too long
            DuplicateEntityException: email already registered
        """
        name = (name or "").strip()
        if not name or not (email or "").strip() or not password:
            raise ValidationError("Name, email and password are required")

        normalized = validated_email(email, self._settings.allowed_email_tlds)
        _check_password_length(password)

        if await self._users.get_by_email(normalized) is not None:
            raise DuplicateEntityException("User", normalized, "Email already registered")

        user_role = UserRole.from_request(role)
        user = await self._users.add(
            name=name,
            email=normalized,
            password_hash=self._hasher.hash(password),
            role=user_role.value,
        )

        plan = (subscription_plan or "").strip()
        if plan and user_role is UserRole.REGULAR_USER:
            today = date.today()
            await self._subscriptions.add(
                user_id=user.id,
                subscription_type=plan,
                start_date=today,
                end_date=today + timedelta(days=SUBSCRIPTION_TRIAL_DAYS),
                is_active=True,
            )

        await self._session.commit()
        logger.info("User registered", extra={"user_id": user.id, "role": user.role})
        return user

    async def login(self, email: str | None, password: str | None) -> tuple[str, UserModel]:
        """Check credentials and issue a session token.

        Returns:
            (token, user)

        Raises:
            ValidationError: email or password missing
            AuthenticationError: unknown email or wrong password (same message for both)
        """
        if not (email or "").strip() or not password:
            raise ValidationError("Email and password are required")

        user = await self._users.get_by_email(normalize_email(email or ""))
        # An unknown email costs one bcrypt verify, same as a wrong password
        if user is None:
            self._hasher.burn(password)
        if user is None or not self._hasher.verify(password, user.password_hash):
            logger.info("Login failed")
            raise AuthenticationError(INVALID_CREDENTIALS)

        user.last_login_at = utc_now()
        await self._session.commit()

        token = self._tokens.issue(user.id, user.role)
        return token, user

    async def change_password(
        self, user_id: int, old_password: str | None, new_password: str | None
    ) -> None:
        """Replace a user's password after checking the current one.

        Raises:
            ValidationError: new password missing or too long
            EntityNotFoundException: the user row is gone
            AuthenticationError: current password doesn't match
        """
        if not new_password:
            raise ValidationError("New password is required")
        _check_password_length(new_password)

        user = await self._users.get_by_id(user_id)
        if user is None:
            raise EntityNotFoundException("User", user_id, "User not found")

        if not old_password or not self._hasher.verify(old_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect")

        user.password_hash = self._hasher.hash(new_password)
        await self._session.commit()
        await self._activity.record(user_id, "Changed password")
