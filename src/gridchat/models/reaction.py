"""Models capturing reactions to messages."""

import uuid

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, SmallInteger, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from gridchat.db.session import Base


class MessageVote(Base):
    """Per-user signed vote on a message."""

    __tablename__ = "message_vote"
    __table_args__ = (
        CheckConstraint("value IN (1, -1)", name="ck_message_vote_value"),
        Index("ix_message_vote_user_id", "user_id"),
    )

    # Composite primary key prevents duplicate votes from the same user.
    message_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("message.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("profile.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # 1 = upvote, -1 = downvote.
    value: Mapped[int] = mapped_column(SmallInteger, nullable=False)


class MessageLike(Base):
    """Presence-only like; once added it is never removed by its owner."""

    __tablename__ = "message_like"
    __table_args__ = (Index("ix_message_like_user_id", "user_id"),)

    message_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("message.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("profile.id", ondelete="CASCADE"),
        primary_key=True,
    )
