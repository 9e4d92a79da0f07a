"""Email address normalization and validation for user accounts.

Hey future me - registration only accepts a handful of top-level domains!
The check is two steps: a loose shape pattern first, then a suffix check
against the allow-list. The pattern alone would happily accept ".museum".

Examples:
    >>> normalize_email("  Alice@Example.COM ")
    'alice@example.com'
    >>> is_allowed_email("alice@example.com", (".com", ".org"))
    True
    >>> is_allowed_email("alice@example.io", (".com", ".org"))
    False
"""

import re
from collections.abc import Iterable

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

DEFAULT_ALLOWED_TLDS: tuple[str, ...] = (".com", ".edu", ".org", ".net")


def normalize_email(email: str) -> str:
    """Trim and lower-case an email address."""
    return email.strip().lower()


def is_allowed_email(
    email: str, allowed_tlds: Iterable[str] = DEFAULT_ALLOWED_TLDS
) -> bool:
    """Check an (already normalized) email against the pattern and the TLD allow-list."""
    if not EMAIL_PATTERN.match(email):
        return False
    tld = "." + email.rsplit(".", 1)[-1].lower()
    return tld in {t.lower() for t in allowed_tlds}
