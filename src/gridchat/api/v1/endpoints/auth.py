# src/gridchat/api/v1/endpoints/auth.py
"""Session endpoints for the gridchat API."""

from __future__ import annotations

from fastapi import APIRouter

from gridchat.core.security import create_access_token
from gridchat.schemas.profile import SessionRequest, SessionResponse

from ..dependencies import StoreDep

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/session", response_model=SessionResponse)
async def open_session(request: SessionRequest, store: StoreDep) -> SessionResponse:
    """Exchange a verified provider identity for an access token.

    The provider has already authenticated the caller; the first session
    for a ``(provider, subject)`` pair creates the profile.
    """
    profile = store.register_profile(request.provider, request.subject)
    return SessionResponse(access_token=create_access_token(profile.id), profile=profile)
