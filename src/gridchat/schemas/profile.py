"""Profile-related Pydantic schemas."""

import uuid

from pydantic import BaseModel, ConfigDict, Field


class ProfileView(BaseModel):
    """Public view of a profile."""

    id: uuid.UUID
    username: str | None = None
    provider: str
    has_username: bool = False

    model_config = ConfigDict(from_attributes=True, frozen=True)


class SessionRequest(BaseModel):
    """Identity already verified by the sign-in provider."""

    provider: str = Field(..., min_length=1, max_length=40, description="Identity provider name")
    subject: str = Field(..., min_length=1, max_length=255, description="Provider's stable user id")


class SessionResponse(BaseModel):
    """Access token plus the profile it identifies."""

    access_token: str
    token_type: str = "bearer"
    profile: ProfileView


class UsernameUpdate(BaseModel):
    """Schema for renaming the current profile."""

    username: str = Field(..., description="New username")


class UsernameAvailability(BaseModel):
    """Result of a username availability check."""

    username: str
    valid: bool
    available: bool
    helper_text: str
