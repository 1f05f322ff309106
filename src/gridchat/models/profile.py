"""SQLAlchemy models for user profiles."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from gridchat.db.session import Base
from gridchat.db.time import utcnow


class Profile(Base):
    """Identity linked to an external sign-in provider.

    The username is optional until the owner picks one. Uniqueness is
    enforced on the lower-cased form so that two concurrent renames to
    ``Alice`` and ``alice`` cannot both commit.
    """

    __tablename__ = "profile"
    __table_args__ = (
        UniqueConstraint("provider", "provider_subject", name="uq_profile_provider_subject"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str | None] = mapped_column(Text, nullable=True)
    username_normalized: Mapped[str | None] = mapped_column(Text, nullable=True, unique=True)
    provider: Mapped[str] = mapped_column(Text, nullable=False)
    provider_subject: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    @property
    def has_username(self) -> bool:
        """Return True once the owner has chosen a username."""
        return bool(self.username and self.username.strip())
