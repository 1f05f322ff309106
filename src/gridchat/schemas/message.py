"""Message-related Pydantic schemas."""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from gridchat.core.settings import settings
from gridchat.services.usernames import display_name

ReactionModel = Literal["vote", "like"]
SortOption = Literal["top", "newest", "oldest"]


class MessageView(BaseModel):
    """A message as seen by one viewer.

    Reaction counts are derived from the reaction tables at read time and
    the viewer's own vote or like is resolved in the same query, so clients
    can render toggle state without a second round trip.
    """

    id: int
    author_id: uuid.UUID
    author_name: str
    text: str
    created_at: datetime
    partition_key: str
    cell_id: str
    day_key: str
    parent_id: int | None = None
    reaction_model: ReactionModel = "vote"
    upvote_count: int = 0
    downvote_count: int = 0
    like_count: int = 0
    viewer_vote: Literal[-1, 1] | None = None
    viewer_has_liked: bool = False

    model_config = ConfigDict(frozen=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def score(self) -> int:
        """Ranking score: net votes, or the like count under the like model."""
        if self.reaction_model == "like":
            return self.like_count
        return self.upvote_count - self.downvote_count

    @computed_field  # type: ignore[prop-decorator]
    @property
    def author_label(self) -> str:
        return display_name(self.author_name)

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None


class MessageCreate(BaseModel):
    """Schema for posting a message.

    Clients send either a coordinate (the server derives today's partition
    from it) or an explicit partition key computed on the poster's clock.
    """

    text: str = Field(
        ...,
        min_length=1,
        max_length=settings.message_max_length,
        description="Message body",
    )
    parent_id: int | None = Field(None, description="Message being replied to")
    partition_key: str | None = Field(None, description="'{x}:{y}_{yyyy-MM-dd}' partition")
    latitude: float | None = Field(None, description="Poster latitude in degrees")
    longitude: float | None = Field(None, description="Poster longitude in degrees")

    @model_validator(mode="after")
    def _require_location(self) -> "MessageCreate":
        has_coordinate = self.latitude is not None and self.longitude is not None
        if self.partition_key is None and not has_coordinate:
            raise ValueError("Provide either partition_key or latitude and longitude")
        return self


class ThreadNodeResponse(BaseModel):
    """A message with its nested replies."""

    message: MessageView
    depth: int
    children: list["ThreadNodeResponse"]
    hidden_reply_count: int = 0


class ThreadResponse(BaseModel):
    """A top-level message together with its reply tree."""

    root: MessageView
    reply_count: int
    replies: list[ThreadNodeResponse]
    hidden_reply_count: int = 0


ThreadNodeResponse.model_rebuild()
