"""Pydantic schemas for the gridchat API."""

from .heatmap import CellResponse, CoordinateSchema, HeatmapCell, HeatmapResponse
from .message import (
    MessageCreate,
    MessageView,
    ReactionModel,
    SortOption,
    ThreadNodeResponse,
    ThreadResponse,
)
from .profile import (
    ProfileView,
    SessionRequest,
    SessionResponse,
    UsernameAvailability,
    UsernameUpdate,
)
from .vote import VoteUpdate

__all__ = [
    "CellResponse",
    "CoordinateSchema",
    "HeatmapCell",
    "HeatmapResponse",
    "MessageCreate",
    "MessageView",
    "ReactionModel",
    "SortOption",
    "ThreadNodeResponse",
    "ThreadResponse",
    "ProfileView",
    "SessionRequest",
    "SessionResponse",
    "UsernameAvailability",
    "UsernameUpdate",
    "VoteUpdate",
]
