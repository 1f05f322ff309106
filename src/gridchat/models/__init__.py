# src/gridchat/models/__init__.py
"""SQLAlchemy models for the gridchat application."""

from .message import Message
from .profile import Profile
from .reaction import MessageLike, MessageVote

__all__ = [
    "Message",
    "Profile",
    "MessageLike", "MessageVote",
]
