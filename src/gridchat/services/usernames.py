"""Username format rules.

Availability is a store concern (it needs the profile table); this module only
decides what a well-formed name looks like and how names compare.
"""

from __future__ import annotations

import re

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20

# Names the display layer uses for vanished authors.
RESERVED_USERNAMES = frozenset({"deleted", "unknown"})

HELPER_TEXT = (
    f"Use {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} letters, numbers, underscores "
    "or periods, starting with a letter or number."
)

_USERNAME_RE = re.compile(
    rf"^[A-Za-z0-9][A-Za-z0-9_.]{{{USERNAME_MIN_LENGTH - 1},{USERNAME_MAX_LENGTH - 1}}}$"
)


def clean(username: str) -> str:
    """Strip surrounding whitespace."""
    return username.strip()


def normalize(username: str) -> str:
    """Return the case-insensitive comparison form of ``username``."""
    return clean(username).lower()


def is_valid(username: str | None) -> bool:
    """Return True if ``username`` satisfies the format rule."""
    if not isinstance(username, str):
        return False
    candidate = clean(username)
    if _USERNAME_RE.match(candidate) is None:
        return False
    return candidate.lower() not in RESERVED_USERNAMES


def display_name(author_name: str | None) -> str:
    """Render an author label, falling back to ``[deleted]`` for blank names."""
    trimmed = (author_name or "").strip()
    if not trimmed or trimmed.lower() in RESERVED_USERNAMES:
        return "[deleted]"
    return f"@{trimmed}"
