# src/gridchat/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    grid_router,
    heatmap_router,
    messages_router,
    profiles_router,
    votes_router,
)

__all__ = [
    "auth_router",
    "grid_router",
    "heatmap_router",
    "messages_router",
    "profiles_router",
    "votes_router",
]
