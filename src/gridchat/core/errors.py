"""Exception hierarchy shared by the grid, partition and discussion layers."""

from __future__ import annotations


class DiscussionError(RuntimeError):
    """Base exception raised for discussion-store failures.

    Every failure the core can surface derives from this class so that
    transport layers can translate them in one place.
    """


class ValidationError(DiscussionError):
    """Raised for malformed input before any state is mutated.

    Covers empty message text, usernames that fail the format rule, NaN
    coordinates and unparseable cell or partition identifiers.
    """


class NotFoundError(DiscussionError):
    """Raised when a referenced message, parent or profile does not exist."""


class ConflictError(DiscussionError):
    """Raised when a write loses a uniqueness race or targets the wrong policy.

    Username collisions end up here whether they were caught by the
    availability pre-check or by the unique index at write time.
    """
