# src/gridchat/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .grid import router as grid_router
from .heatmap import router as heatmap_router
from .messages import router as messages_router
from .profiles import router as profiles_router
from .votes import router as votes_router

__all__ = [
    "auth_router",
    "grid_router",
    "heatmap_router",
    "messages_router",
    "profiles_router",
    "votes_router",
]
