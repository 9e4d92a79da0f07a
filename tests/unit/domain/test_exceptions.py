"""Unit tests for domain exceptions."""

import pytest

from mlms.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainException,
    DuplicateEntityException,
    EntityNotFoundException,
    InvalidStateException,
    TokenRejectedError,
    ValidationError,
)


class TestDomainExceptions:
    """Message and kind carried by each exception."""

    def test_message_is_stored(self) -> None:
        error = ValidationError("Playlist name is required")
        assert error.message == "Playlist name is required"
        assert str(error) == "Playlist name is required"
        assert error.kind == "validation"

    def test_entity_not_found_default_message(self) -> None:
        error = EntityNotFoundException("Track", 42)
        assert error.message == "Track with id 42 not found"
        assert error.entity_type == "Track"
        assert error.entity_id == 42
        assert error.kind == "not_found"

    def test_entity_not_found_custom_message(self) -> None:
        error = EntityNotFoundException("Track", 42, "Track not found")
        assert error.message == "Track not found"

    def test_duplicate_is_a_conflict(self) -> None:
        error = DuplicateEntityException("Artist", "Miles Davis")
        assert isinstance(error, ConflictError)
        assert error.message == "Artist 'Miles Davis' already exists"
        assert error.kind == "conflict"

    def test_invalid_state_is_a_conflict(self) -> None:
        assert issubclass(InvalidStateException, ConflictError)

    def test_token_rejected_is_authentication_error(self) -> None:
        # The handler table relies on this: TokenRejectedError gets its own 403 handler,
        # but code catching AuthenticationError still sees it.
        error = TokenRejectedError("Invalid or expired token")
        assert isinstance(error, AuthenticationError)
        assert error.kind == "authentication"

    @pytest.mark.parametrize(
        "exc_class",
        [ValidationError, AuthenticationError, AuthorizationError, ConflictError],
    )
    def test_all_derive_from_domain_exception(self, exc_class: type[DomainException]) -> None:
        assert issubclass(exc_class, DomainException)
