"""Data access helpers for user profiles."""
from __future__ import annotations

import uuid

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from gridchat.models import Profile

__all__ = ["ProfileRepository"]


class ProfileRepository:
    """Thin wrapper around database access for profile entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, user_id: uuid.UUID) -> Profile | None:
        return self.session.get(Profile, user_id)

    def get_by_provider(self, provider: str, subject: str) -> Profile | None:
        return self.session.scalars(
            select(Profile).where(
                Profile.provider == provider,
                Profile.provider_subject == subject,
            )
        ).first()

    def get_by_normalized_username(self, normalized: str) -> Profile | None:
        return self.session.scalars(
            select(Profile).where(Profile.username_normalized == normalized)
        ).first()

    def create(self, *, provider: str, subject: str) -> Profile:
        profile = Profile(provider=provider, provider_subject=subject)
        self.session.add(profile)
        self.session.flush()
        return profile

    def set_username(self, profile: Profile, username: str, normalized: str) -> Profile:
        """Assign a username; the unique index is checked on flush."""
        profile.username = username
        profile.username_normalized = normalized
        self.session.flush()
        return profile

    def delete(self, user_id: uuid.UUID) -> int:
        result = self.session.execute(delete(Profile).where(Profile.id == user_id))
        return result.rowcount or 0
