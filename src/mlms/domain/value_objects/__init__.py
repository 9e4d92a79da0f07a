"""Value objects."""

from .email import DEFAULT_ALLOWED_TLDS, EMAIL_PATTERN, is_allowed_email, normalize_email

__all__ = [
    "DEFAULT_ALLOWED_TLDS",
    "EMAIL_PATTERN",
    "is_allowed_email",
    "normalize_email",
]
