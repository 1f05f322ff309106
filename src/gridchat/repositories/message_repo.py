"""Data access helpers for working with messages and their reactions."""
from __future__ import annotations

import uuid
from collections.abc import Collection
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.orm import Session

from gridchat.models import Message, MessageLike, MessageVote

__all__ = ["MessageRepository", "ReactionSummary"]


@dataclass(frozen=True)
class ReactionSummary:
    """Aggregated reactions on one message from one viewer's perspective."""

    upvotes: int = 0
    downvotes: int = 0
    likes: int = 0
    viewer_vote: int | None = None
    viewer_has_liked: bool = False


class MessageRepository:
    """Thin wrapper around database access for message entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, message_id: int) -> Message | None:
        """Return a message by identifier."""
        return self.session.get(Message, message_id)

    def list_by_partition(self, partition_key: str) -> list[Message]:
        """Return a partition's messages, newest first."""
        result = self.session.execute(
            select(Message)
            .where(Message.partition_key == partition_key)
            .order_by(Message.created_at.desc(), Message.id.desc())
        )
        return list(result.scalars())

    def list_by_author(self, author_id: uuid.UUID) -> list[Message]:
        """Return every message by ``author_id`` across partitions, newest first."""
        result = self.session.execute(
            select(Message)
            .where(Message.author_id == author_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
        )
        return list(result.scalars())

    def create(
        self,
        *,
        author_id: uuid.UUID,
        author_name: str,
        body: str,
        partition_key: str,
        cell_id: str,
        cell_x: int,
        cell_y: int,
        day_key: str,
        parent_id: int | None,
        created_at: datetime,
    ) -> Message:
        """Insert a new message and return the persisted ORM instance."""
        message = Message(
            author_id=author_id,
            author_name=author_name,
            body=body,
            partition_key=partition_key,
            cell_id=cell_id,
            cell_x=cell_x,
            cell_y=cell_y,
            day_key=day_key,
            parent_id=parent_id,
            created_at=created_at,
        )
        self.session.add(message)
        self.session.flush()
        return message

    def subtree_ids(self, root_ids: Collection[int]) -> set[int]:
        """Return ``root_ids`` plus every message whose parent chain leads to one of them."""
        collected = set(root_ids)
        frontier = set(root_ids)
        while frontier:
            children = self.session.scalars(
                select(Message.id).where(Message.parent_id.in_(frontier))
            ).all()
            frontier = set(children) - collected
            collected |= frontier
        return collected

    def delete_messages(self, message_ids: Collection[int]) -> int:
        """Delete messages together with every reaction attached to them.

        Returns the number of ids removed. The driver's rowcount is not used
        because rows removed by the parent_id cascade are not counted in it.
        """
        if not message_ids:
            return 0
        ids = list(message_ids)
        self.session.execute(delete(MessageVote).where(MessageVote.message_id.in_(ids)))
        self.session.execute(delete(MessageLike).where(MessageLike.message_id.in_(ids)))
        self.session.execute(delete(Message).where(Message.id.in_(ids)))
        return len(ids)

    def rename_author(self, author_id: uuid.UUID, author_name: str) -> int:
        """Rewrite the denormalized author name on all of an author's messages."""
        result = self.session.execute(
            update(Message).where(Message.author_id == author_id).values(author_name=author_name)
        )
        return result.rowcount or 0

    # Reactions

    def get_vote(self, message_id: int, user_id: uuid.UUID) -> MessageVote | None:
        return self.session.get(MessageVote, (message_id, user_id))

    def set_vote(self, message_id: int, user_id: uuid.UUID, value: int | None) -> None:
        """Insert, overwrite or clear a user's vote on a message."""
        existing = self.get_vote(message_id, user_id)
        if value is None:
            if existing is not None:
                self.session.delete(existing)
        elif existing is None:
            self.session.add(MessageVote(message_id=message_id, user_id=user_id, value=value))
        else:
            existing.value = value
        self.session.flush()

    def add_like(self, message_id: int, user_id: uuid.UUID) -> bool:
        """Record a like; returns False when it already existed."""
        if self.session.get(MessageLike, (message_id, user_id)) is not None:
            return False
        self.session.add(MessageLike(message_id=message_id, user_id=user_id))
        self.session.flush()
        return True

    def strip_user_reactions(self, user_id: uuid.UUID) -> None:
        """Remove every vote and like cast by ``user_id``."""
        self.session.execute(delete(MessageVote).where(MessageVote.user_id == user_id))
        self.session.execute(delete(MessageLike).where(MessageLike.user_id == user_id))

    def reaction_summaries(
        self,
        message_ids: Collection[int],
        viewer_id: uuid.UUID | None,
    ) -> dict[int, ReactionSummary]:
        """Aggregate votes and likes for ``message_ids`` in one pass per table."""
        if not message_ids:
            return {}
        ids = list(message_ids)

        votes = {
            row.message_id: (int(row.up or 0), int(row.down or 0))
            for row in self.session.execute(
                select(
                    MessageVote.message_id,
                    func.sum(case((MessageVote.value == 1, 1), else_=0)).label("up"),
                    func.sum(case((MessageVote.value == -1, 1), else_=0)).label("down"),
                )
                .where(MessageVote.message_id.in_(ids))
                .group_by(MessageVote.message_id)
            )
        }
        likes = dict(
            self.session.execute(
                select(MessageLike.message_id, func.count())
                .where(MessageLike.message_id.in_(ids))
                .group_by(MessageLike.message_id)
            ).all()
        )

        viewer_votes: dict[int, int] = {}
        viewer_likes: set[int] = set()
        if viewer_id is not None:
            viewer_votes = dict(
                self.session.execute(
                    select(MessageVote.message_id, MessageVote.value).where(
                        MessageVote.message_id.in_(ids),
                        MessageVote.user_id == viewer_id,
                    )
                ).all()
            )
            viewer_likes = set(
                self.session.scalars(
                    select(MessageLike.message_id).where(
                        MessageLike.message_id.in_(ids),
                        MessageLike.user_id == viewer_id,
                    )
                )
            )

        summaries: dict[int, ReactionSummary] = {}
        for message_id in ids:
            up, down = votes.get(message_id, (0, 0))
            summaries[message_id] = ReactionSummary(
                upvotes=up,
                downvotes=down,
                likes=int(likes.get(message_id, 0)),
                viewer_vote=viewer_votes.get(message_id),
                viewer_has_liked=message_id in viewer_likes,
            )
        return summaries

    # Heatmap

    def count_by_cell(
        self,
        day_key: str,
        x_range: tuple[int, int],
        y_range: tuple[int, int],
    ) -> list[tuple[str, int]]:
        """Count one day's messages per cell inside an inclusive index window."""
        rows = self.session.execute(
            select(Message.cell_id, func.count())
            .where(
                Message.day_key == day_key,
                Message.cell_x.between(*x_range),
                Message.cell_y.between(*y_range),
            )
            .group_by(Message.cell_id)
        ).all()
        return [(cell_id, int(count)) for cell_id, count in rows]
