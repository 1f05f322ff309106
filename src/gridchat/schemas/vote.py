"""Reaction-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class VoteUpdate(BaseModel):
    """Set (1 or -1) or clear (null) the caller's vote."""

    value: Literal[-1, 1] | None = Field(..., description="1 upvote, -1 downvote, null clears")
    toggle: bool = Field(
        default=False,
        description="Clear the vote instead when it already equals value",
    )
