"""SQLAlchemy models for cell-scoped messages."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from gridchat.db.session import Base


class Message(Base):
    """A short message anchored to one grid cell on one calendar day.

    Replies point at their parent through ``parent_id``; top-level messages
    have ``parent_id = NULL``. The autoincrement id doubles as the creation
    sequence, so a parent always has a smaller id than any of its replies.
    """

    __tablename__ = "message"
    __table_args__ = (
        Index("ix_message_partition_key", "partition_key"),
        Index("ix_message_author_id", "author_id"),
        Index("ix_message_parent_id", "parent_id"),
        Index("ix_message_day_cell", "day_key", "cell_x", "cell_y"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("profile.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Denormalized; rewritten for every message when the author renames.
    author_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    body: Mapped[str] = mapped_column(Text, nullable=False)

    # "{x}:{y}_{yyyy-MM-dd}" plus its parsed parts for range queries.
    partition_key: Mapped[str] = mapped_column(Text, nullable=False)
    cell_id: Mapped[str] = mapped_column(Text, nullable=False)
    cell_x: Mapped[int] = mapped_column(Integer, nullable=False)
    cell_y: Mapped[int] = mapped_column(Integer, nullable=False)
    day_key: Mapped[str] = mapped_column(Text, nullable=False)

    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("message.id", ondelete="CASCADE"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
