# src/gridchat/api/v1/endpoints/votes.py
"""Reaction endpoints for the gridchat API."""

from __future__ import annotations

from fastapi import APIRouter

from gridchat.schemas.message import MessageView
from gridchat.schemas.vote import VoteUpdate

from ..dependencies import CurrentProfileDep, StoreDep

router = APIRouter(prefix="/messages", tags=["reactions"])


@router.put("/{message_id}/vote", response_model=MessageView)
async def cast_vote(
    message_id: int,
    vote_data: VoteUpdate,
    current_profile: CurrentProfileDep,
    store: StoreDep,
) -> MessageView:
    """Set, replace or clear the caller's vote.

    With ``toggle`` set, repeating the current value clears it.
    """
    if vote_data.toggle and vote_data.value is not None:
        return store.toggle_vote(message_id, current_profile.id, vote_data.value)
    return store.vote(message_id, current_profile.id, vote_data.value)


@router.post("/{message_id}/like", response_model=MessageView)
async def like_message(
    message_id: int,
    current_profile: CurrentProfileDep,
    store: StoreDep,
) -> MessageView:
    """Like a message. Repeating the request changes nothing."""
    return store.like(message_id, current_profile.id)
