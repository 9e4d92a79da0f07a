"""Domain exceptions.

Every exception carries a human-readable ``message`` and a machine-readable
``kind``. The API layer (see api/exception_handlers.py) maps each class to an
HTTP status and returns ``{"message": ..., "kind": ...}`` to the client.
"""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    kind = "internal"

    # Hey future me, we store message as an attribute so code can inspect it without parsing str(exception).
    # This is your base class - DON'T raise it directly! Always use a specific subclass so callers
    # (and the exception handlers) can catch precisely.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class ValidationError(DomainException):
    """Input validation failed.

    Raised when request data is missing or malformed (blank names, bad email,
    reorder list that is not a permutation, ...).

    HTTP Status: 400
    """

    kind = "validation"


class AuthenticationError(DomainException):
    """Caller did not present credentials, or presented wrong ones.

    HTTP Status: 401

    Example:
        raise AuthenticationError("No token provided")
        raise AuthenticationError("Invalid email or password")
    """

    kind = "authentication"


class TokenRejectedError(AuthenticationError):
    """A bearer token was presented but failed verification.

    Bad signature, expired, or claims we don't understand. The API answers
    403 here (not 401) - the client did authenticate, the token is just no good.

    HTTP Status: 403
    """


class AuthorizationError(DomainException):
    """Caller is authenticated but not allowed to do this.

    Used for role checks (admin-only routes) and for playlist ownership. A
    playlist owned by someone else looks exactly like a missing one.

    HTTP Status: 403
    """

    kind = "authorization"


class EntityNotFoundException(DomainException):
    """Raised when an entity is not found."""

    kind = "not_found"

    # Yo, this is for "get by ID" operations that fail - Track 123 doesn't exist, Album 7 not found.
    # We store entity_type and entity_id separately so error handlers can log them structured.
    def __init__(self, entity_type: str, entity_id: Any, message: str | None = None) -> None:
        super().__init__(message or f"{entity_type} with id {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class ConflictError(DomainException):
    """Operation conflicts with data already in the store.

    HTTP Status: 409
    """

    kind = "conflict"


class DuplicateEntityException(ConflictError):
    """Raised when trying to create a duplicate entity."""

    # Listen, this is for business uniqueness rules - email already registered, album title already
    # used by this artist, track already in playlist. The DB unique constraints back these up for the
    # race where two requests pass the check at the same time (IntegrityError → 409 too).
    def __init__(self, entity_type: str, key: Any, message: str | None = None) -> None:
        super().__init__(message or f"{entity_type} '{key}' already exists")
        self.entity_type = entity_type
        self.key = key


class InvalidStateException(ConflictError):
    """Entity is in a state that forbids the requested operation.

    Example: deleting a genre that tracks still reference.

    HTTP Status: 409
    """


class InternalError(DomainException):
    """Unexpected store or driver fault.

    HTTP Status: 500
    """

    kind = "internal"


__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "DomainException",
    "DuplicateEntityException",
    "EntityNotFoundException",
    "InternalError",
    "InvalidStateException",
    "TokenRejectedError",
    "ValidationError",
]
