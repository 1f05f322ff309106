"""The discussion store: messages, threads, reactions and profiles.

One ``DiscussionStore`` owns all message, reaction and profile state behind a
session factory. Mutations are serialized through a per-store lock and
each runs in a single transaction, so a cascade either completes or leaves
nothing behind. Reads open their own transaction and never take the lock.

The uniqueness of usernames does not rely on the lock alone: the
``profile.username_normalized`` unique index is the real guard, and a
violation surfacing at flush time is reported as the same
:class:`~gridchat.core.errors.ConflictError` the availability pre-check
raises. That keeps the guarantee when several processes share a database.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from gridchat.core.errors import ConflictError, NotFoundError, ValidationError
from gridchat.core.settings import settings
from gridchat.db.time import ensure_aware, utcnow
from gridchat.models import Message, Profile
from gridchat.repositories.message_repo import MessageRepository, ReactionSummary
from gridchat.repositories.profile_repo import ProfileRepository
from gridchat.schemas.message import MessageView, ReactionModel
from gridchat.schemas.profile import ProfileView
from gridchat.services import usernames
from gridchat.services.grid import Coordinate
from gridchat.services.partition import parse_partition_key, partition_for

logger = logging.getLogger(__name__)

VOTE_VALUES = (1, -1)


def to_profile_view(profile: Profile) -> ProfileView:
    """Convert a Profile ORM instance to an API schema."""
    return ProfileView(
        id=profile.id,
        username=profile.username,
        provider=profile.provider,
        has_username=profile.has_username,
    )


class DiscussionStore:
    """Serialized owner of message, reaction and profile state."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        reaction_model: ReactionModel | None = None,
        clock: Callable[[], datetime] = utcnow,
        max_length: int | None = None,
    ) -> None:
        self._session_factory = session_factory
        self.reaction_model: ReactionModel = reaction_model or settings.reaction_model
        self._clock = clock
        self._max_length = max_length or settings.message_max_length
        self._lock = threading.RLock()

    # Transactions

    @contextmanager
    def _write(self) -> Iterator[Session]:
        with self._lock, self._session_factory.begin() as session:
            yield session

    @contextmanager
    def _read(self) -> Iterator[Session]:
        with self._session_factory() as session, session.begin():
            yield session

    def _views(
        self,
        repo: MessageRepository,
        messages: list[Message],
        viewer_id: uuid.UUID | None,
    ) -> list[MessageView]:
        summaries = repo.reaction_summaries([m.id for m in messages], viewer_id)
        return [self._to_view(m, summaries.get(m.id, ReactionSummary())) for m in messages]

    def _to_view(self, message: Message, summary: ReactionSummary) -> MessageView:
        return MessageView(
            id=message.id,
            author_id=message.author_id,
            author_name=message.author_name,
            text=message.body,
            created_at=ensure_aware(message.created_at),
            partition_key=message.partition_key,
            cell_id=message.cell_id,
            day_key=message.day_key,
            parent_id=message.parent_id,
            reaction_model=self.reaction_model,
            upvote_count=summary.upvotes,
            downvote_count=summary.downvotes,
            like_count=summary.likes,
            viewer_vote=summary.viewer_vote,
            viewer_has_liked=summary.viewer_has_liked,
        )

    # Profiles

    def register_profile(self, provider: str, subject: str) -> ProfileView:
        """Return the profile linked to ``(provider, subject)``, creating it if needed."""
        if not provider or not subject:
            raise ValidationError("Provider and subject are required")
        with self._write() as session:
            profiles = ProfileRepository(session)
            profile = profiles.get_by_provider(provider, subject)
            if profile is None:
                profile = profiles.create(provider=provider, subject=subject)
                logger.info("Registered profile %s via %s", profile.id, provider)
            return to_profile_view(profile)

    def get_profile(self, user_id: uuid.UUID) -> ProfileView:
        with self._read() as session:
            profile = ProfileRepository(session).get_by_id(user_id)
            if profile is None:
                raise NotFoundError("Profile not found")
            return to_profile_view(profile)

    def is_username_available(
        self,
        username: str,
        exclude_user_id: uuid.UUID | None = None,
    ) -> bool:
        """Return True if ``username`` is well-formed and not held by another profile."""
        if not usernames.is_valid(username):
            return False
        with self._read() as session:
            holder = ProfileRepository(session).get_by_normalized_username(
                usernames.normalize(username)
            )
            return holder is None or holder.id == exclude_user_id

    def rename_author(self, user_id: uuid.UUID, new_username: str) -> ProfileView:
        """Change a username and rewrite the author name on all of the user's messages.

        Raises:
            ValidationError: If the name fails the format rule.
            NotFoundError: If the profile does not exist.
            ConflictError: If another profile holds the name, whether detected
                by the pre-check or by the unique index at write time.
        """
        if not usernames.is_valid(new_username):
            raise ValidationError(usernames.HELPER_TEXT)
        username = usernames.clean(new_username)
        normalized = usernames.normalize(new_username)

        with self._write() as session:
            profiles = ProfileRepository(session)
            profile = profiles.get_by_id(user_id)
            if profile is None:
                raise NotFoundError("Profile not found")
            if not self._username_free(profiles, normalized, user_id):
                raise ConflictError("Username is already taken")
            try:
                profiles.set_username(profile, username, normalized)
            except IntegrityError as err:
                raise ConflictError("Username is already taken") from err
            renamed = MessageRepository(session).rename_author(user_id, username)
            logger.info("Renamed profile %s; rewrote %d messages", user_id, renamed)
            return to_profile_view(profile)

    def _username_free(
        self,
        profiles: ProfileRepository,
        normalized: str,
        user_id: uuid.UUID,
    ) -> bool:
        holder = profiles.get_by_normalized_username(normalized)
        return holder is None or holder.id == user_id

    def delete_account(self, user_id: uuid.UUID) -> int:
        """Remove a profile, its messages with their reply subtrees, and its reactions.

        Returns:
            Number of messages removed.
        """
        with self._write() as session:
            profiles = ProfileRepository(session)
            if profiles.get_by_id(user_id) is None:
                raise NotFoundError("Profile not found")
            repo = MessageRepository(session)
            authored = session.scalars(
                select(Message.id).where(Message.author_id == user_id)
            ).all()
            removed = repo.delete_messages(repo.subtree_ids(authored))
            repo.strip_user_reactions(user_id)
            profiles.delete(user_id)
            logger.info("Deleted account %s with %d messages", user_id, removed)
            return removed

    # Messages

    def _clean_text(self, text: str) -> str:
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Message text must not be empty")
        body = text.strip()
        if len(body) > self._max_length:
            raise ValidationError(f"Message text exceeds {self._max_length} characters")
        return body

    def post(
        self,
        text: str,
        partition_key: str,
        author_id: uuid.UUID,
        parent_id: int | None = None,
    ) -> MessageView:
        """Create a message in ``partition_key``, optionally replying to ``parent_id``.

        Raises:
            ValidationError: For blank or oversized text or a malformed key.
            NotFoundError: If the author is unknown or the parent is not in
                the same partition.
        """
        body = self._clean_text(text)
        key = parse_partition_key(partition_key)

        with self._write() as session:
            profile = ProfileRepository(session).get_by_id(author_id)
            if profile is None:
                raise NotFoundError("Author not found")
            repo = MessageRepository(session)
            created_at = self._clock()

            if parent_id is not None:
                parent = repo.get_by_id(parent_id)
                if parent is None or parent.partition_key != str(key):
                    raise NotFoundError("Parent message not found in this partition")
                if ensure_aware(parent.created_at) > ensure_aware(created_at):
                    raise ValidationError("A reply cannot predate its parent")

            message = repo.create(
                author_id=author_id,
                author_name=profile.username or "",
                body=body,
                partition_key=str(key),
                cell_id=key.cell_id,
                cell_x=key.cell.x,
                cell_y=key.cell.y,
                day_key=key.day_key,
                parent_id=parent_id,
                created_at=created_at,
            )
            logger.info("Posted message %s in %s", message.id, key)
            return self._to_view(message, ReactionSummary())

    def post_at(
        self,
        text: str,
        coordinate: Coordinate | tuple[float, float],
        author_id: uuid.UUID,
        parent_id: int | None = None,
        when: date | datetime | None = None,
    ) -> MessageView:
        """Post into the partition of ``coordinate`` on the poster's day ``when``.

        Without ``when`` the day is read from the store clock in the local zone.
        """
        if when is None:
            when = self._clock().astimezone()
        return self.post(text, str(partition_for(coordinate, when)), author_id, parent_id)

    def get_message(self, message_id: int, viewer_id: uuid.UUID | None = None) -> MessageView:
        with self._read() as session:
            repo = MessageRepository(session)
            message = repo.get_by_id(message_id)
            if message is None:
                raise NotFoundError("Message not found")
            return self._views(repo, [message], viewer_id)[0]

    def fetch_by_partition(
        self,
        partition_key: str,
        viewer_id: uuid.UUID | None = None,
    ) -> list[MessageView]:
        """Return a partition's messages newest first with the viewer's reactions resolved."""
        key = parse_partition_key(partition_key)
        with self._read() as session:
            repo = MessageRepository(session)
            views = self._views(repo, repo.list_by_partition(str(key)), viewer_id)
        logger.debug("Fetched %d messages from %s", len(views), key)
        return views

    def fetch_by_author(
        self,
        author_id: uuid.UUID,
        viewer_id: uuid.UUID | None = None,
    ) -> list[MessageView]:
        """Return an author's messages across partitions, newest first.

        Reactions are resolved for ``viewer_id``, defaulting to the author.
        """
        with self._read() as session:
            repo = MessageRepository(session)
            return self._views(repo, repo.list_by_author(author_id), viewer_id or author_id)

    def delete(self, message_id: int, by_user_id: uuid.UUID) -> int:
        """Delete a message and its whole reply subtree.

        Requests from anyone but the author, and requests for messages that
        no longer exist, are ignored rather than rejected.

        Returns:
            Number of messages removed; 0 when the request was ignored.
        """
        with self._write() as session:
            repo = MessageRepository(session)
            message = repo.get_by_id(message_id)
            if message is None:
                logger.debug("Delete of missing message %s ignored", message_id)
                return 0
            if message.author_id != by_user_id:
                logger.info(
                    "Ignoring delete of message %s by non-author %s", message_id, by_user_id
                )
                return 0
            removed = repo.delete_messages(repo.subtree_ids([message_id]))
            logger.info("Deleted message %s with %d descendants", message_id, removed - 1)
            return removed

    # Reactions

    def _require_model(self, model: ReactionModel) -> None:
        if self.reaction_model != model:
            raise ConflictError(
                f"This store uses the {self.reaction_model} reaction model, not {model}"
            )

    def _require_reaction_target(
        self,
        session: Session,
        message_id: int,
        user_id: uuid.UUID,
    ) -> MessageRepository:
        repo = MessageRepository(session)
        if repo.get_by_id(message_id) is None:
            raise NotFoundError("Message not found")
        if ProfileRepository(session).get_by_id(user_id) is None:
            raise NotFoundError("Profile not found")
        return repo

    def vote(self, message_id: int, user_id: uuid.UUID, value: int | None) -> MessageView:
        """Set, replace or clear (``value=None``) a user's vote.

        Setting the value a user already holds changes nothing.
        """
        self._require_model("vote")
        if value is not None and value not in VOTE_VALUES:
            raise ValidationError("Vote value must be 1, -1 or None")
        with self._write() as session:
            repo = self._require_reaction_target(session, message_id, user_id)
            repo.set_vote(message_id, user_id, value)
            return self._views(repo, [repo.get_by_id(message_id)], user_id)[0]

    def toggle_vote(self, message_id: int, user_id: uuid.UUID, value: int) -> MessageView:
        """Apply a vote tap: repeating the current value clears it, anything else sets it."""
        self._require_model("vote")
        if value not in VOTE_VALUES:
            raise ValidationError("Vote value must be 1 or -1")
        with self._write() as session:
            repo = self._require_reaction_target(session, message_id, user_id)
            current = repo.get_vote(message_id, user_id)
            next_value = None if current is not None and current.value == value else value
            repo.set_vote(message_id, user_id, next_value)
            return self._views(repo, [repo.get_by_id(message_id)], user_id)[0]

    def like(self, message_id: int, user_id: uuid.UUID) -> MessageView:
        """Add a like. Liking twice is a no-op; likes cannot be withdrawn."""
        self._require_model("like")
        with self._write() as session:
            repo = self._require_reaction_target(session, message_id, user_id)
            repo.add_like(message_id, user_id)
            return self._views(repo, [repo.get_by_id(message_id)], user_id)[0]

    # Aggregation

    def count_cells(
        self,
        day_key: str,
        x_range: tuple[int, int],
        y_range: tuple[int, int],
    ) -> list[tuple[str, int]]:
        """Per-cell message counts for one day inside an index window."""
        with self._read() as session:
            return MessageRepository(session).count_by_cell(day_key, x_range, y_range)
