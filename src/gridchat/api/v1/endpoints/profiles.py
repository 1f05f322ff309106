# src/gridchat/api/v1/endpoints/profiles.py
"""Profile endpoints for the gridchat API."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Query

from gridchat.schemas.message import MessageView
from gridchat.schemas.profile import ProfileView, UsernameAvailability, UsernameUpdate
from gridchat.services import usernames

from ..dependencies import CurrentProfileDep, StoreDep

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=ProfileView)
async def get_my_profile(current_profile: CurrentProfileDep) -> ProfileView:
    return current_profile


@router.put("/me/username", response_model=ProfileView)
async def update_username(
    update: UsernameUpdate,
    current_profile: CurrentProfileDep,
    store: StoreDep,
) -> ProfileView:
    """Rename the caller; every message they wrote shows the new name."""
    return store.rename_author(current_profile.id, update.username)


@router.get("/username-availability", response_model=UsernameAvailability)
async def username_availability(
    current_profile: CurrentProfileDep,
    store: StoreDep,
    username: str = Query(..., description="Candidate username"),
) -> UsernameAvailability:
    valid = usernames.is_valid(username)
    available = valid and store.is_username_available(username, exclude_user_id=current_profile.id)
    return UsernameAvailability(
        username=usernames.clean(username),
        valid=valid,
        available=available,
        helper_text=usernames.HELPER_TEXT,
    )


@router.delete("/me")
async def delete_my_account(
    current_profile: CurrentProfileDep,
    store: StoreDep,
) -> dict[str, int]:
    """Delete the caller's profile, messages, reply subtrees and reactions."""
    removed = store.delete_account(current_profile.id)
    return {"deleted_messages": removed}


@router.get("/{profile_id}/messages", response_model=list[MessageView])
async def list_profile_messages(
    profile_id: uuid.UUID,
    current_profile: CurrentProfileDep,
    store: StoreDep,
) -> list[MessageView]:
    """List a profile's messages across all partitions, newest first."""
    return store.fetch_by_author(profile_id, viewer_id=current_profile.id)
