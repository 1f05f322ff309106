"""Reply-tree assembly over an already-fetched partition batch.

Nothing here touches the database. Every function takes the flat list the
store returned for one partition and derives structure from ``parent_id``
pointers alone. Parent walks are bounded by the batch size so a corrupt
batch (a dangling or cyclic parent reference) degrades to "not a
descendant" instead of looping.

Ordering rules:

* sibling reply lists are chronological (oldest first);
* ``newest`` / ``oldest`` sort on ``created_at`` with the message id as a
  tie-breaker, the id being the creation sequence;
* ``top`` sorts by descending score and breaks ties oldest first, for
  top-level lists and reply lists alike.
"""

from __future__ import annotations

import enum
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace

from gridchat.schemas.message import MessageView


class SortPolicy(str, enum.Enum):
    """Selectable orderings for message lists."""

    TOP = "top"
    NEWEST = "newest"
    OLDEST = "oldest"


def _chronological(message: MessageView) -> tuple:
    return (message.created_at, message.id)


def _index(messages: Iterable[MessageView]) -> dict[int, MessageView]:
    return {message.id: message for message in messages}


def score(message: MessageView) -> int:
    """Return the ranking score of a message."""
    return message.score


def sort_messages(messages: Iterable[MessageView], policy: SortPolicy | str) -> list[MessageView]:
    """Return ``messages`` ordered by ``policy``."""
    policy = SortPolicy(policy)
    if policy is SortPolicy.NEWEST:
        return sorted(messages, key=_chronological, reverse=True)
    if policy is SortPolicy.OLDEST:
        return sorted(messages, key=_chronological)
    return sorted(messages, key=lambda m: (-m.score, m.created_at, m.id))


def top_level(messages: Iterable[MessageView]) -> list[MessageView]:
    """Return messages that are not replies, in input order."""
    return [message for message in messages if message.is_top_level]


def sort_top_level(
    messages: Iterable[MessageView],
    policy: SortPolicy | str = SortPolicy.TOP,
) -> list[MessageView]:
    return sort_messages(top_level(messages), policy)


def direct_replies(messages: Iterable[MessageView], parent_id: int) -> list[MessageView]:
    """Return the immediate replies to ``parent_id``, oldest first."""
    return sorted(
        (message for message in messages if message.parent_id == parent_id),
        key=_chronological,
    )


def sort_replies(
    messages: Iterable[MessageView],
    parent_id: int | None,
    policy: SortPolicy | str = SortPolicy.TOP,
) -> list[MessageView]:
    """Return the immediate children of ``parent_id`` ordered by ``policy``.

    ``parent_id=None`` selects the top-level messages.
    """
    return sort_messages(
        (message for message in messages if message.parent_id == parent_id),
        policy,
    )


def _descends_from(message: MessageView, root_id: int, by_id: dict[int, MessageView]) -> bool:
    current = message
    for _ in range(len(by_id)):
        parent_id = current.parent_id
        if parent_id is None:
            return False
        if parent_id == root_id:
            return True
        parent = by_id.get(parent_id)
        if parent is None:
            return False
        current = parent
    return False


def flattened_replies(messages: Sequence[MessageView], root_id: int) -> list[MessageView]:
    """Return every descendant of ``root_id`` in the batch, oldest first."""
    by_id = _index(messages)
    return sorted(
        (
            message
            for message in messages
            if message.id != root_id and _descends_from(message, root_id, by_id)
        ),
        key=_chronological,
    )


def reply_count(messages: Sequence[MessageView], root_id: int) -> int:
    return len(flattened_replies(messages, root_id))


def depth(message: MessageView, messages: Sequence[MessageView]) -> int:
    """Return the number of parent hops from ``message`` to its root.

    Top-level messages have depth 0. The walk stops at the first parent
    that is missing from the batch.
    """
    by_id = _index(messages)
    level = 0
    current = message
    for _ in range(len(by_id)):
        if current.parent_id is None:
            break
        parent = by_id.get(current.parent_id)
        if parent is None:
            break
        level += 1
        current = parent
    return level


@dataclass
class ThreadNode:
    """One message in an assembled reply tree."""

    message: MessageView
    depth: int
    children: list[ThreadNode] = field(default_factory=list)

    def walk(self) -> Iterable[ThreadNode]:
        """Yield this node and its descendants depth-first, pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


def build_tree(
    messages: Sequence[MessageView],
    policy: SortPolicy | str = SortPolicy.TOP,
    root_id: int | None = None,
) -> list[ThreadNode]:
    """Assemble nested threads from a flat batch.

    Returns the top-level messages (or the single message ``root_id``) as
    roots with their sorted children attached. Messages whose parent is not
    in the batch are left out.
    """
    policy = SortPolicy(policy)
    children: dict[int | None, list[MessageView]] = defaultdict(list)
    for message in messages:
        children[message.parent_id].append(message)

    if root_id is None:
        roots = sort_messages(children[None], policy)
    else:
        roots = [message for message in messages if message.id == root_id]

    nodes = [ThreadNode(message, 0) for message in roots]
    seen = {node.message.id for node in nodes}
    stack = list(nodes)
    while stack:
        node = stack.pop()
        for child in sort_messages(children.get(node.message.id, ()), policy):
            if child.id in seen:
                continue
            seen.add(child.id)
            child_node = ThreadNode(child, node.depth + 1)
            node.children.append(child_node)
            stack.append(child_node)
    return nodes


@dataclass(frozen=True)
class ReplyWindow:
    """A paged view over one sorted sibling list.

    The list is sorted once on construction; ``show_more`` only widens the
    visible prefix, so continuing never reorders what was already shown.
    """

    replies: tuple[MessageView, ...]
    page_size: int
    visible_count: int

    @classmethod
    def for_parent(
        cls,
        messages: Iterable[MessageView],
        parent_id: int | None,
        policy: SortPolicy | str = SortPolicy.TOP,
        page_size: int = 10,
    ) -> ReplyWindow:
        return cls.over(sort_replies(messages, parent_id, policy), page_size)

    @classmethod
    def over(cls, replies: Iterable[MessageView], page_size: int = 10) -> ReplyWindow:
        """Open a window on an already sorted sibling list."""
        if page_size < 1:
            raise ValueError("page_size must be positive")
        replies = tuple(replies)
        return cls(replies, page_size, min(page_size, len(replies)))

    @property
    def visible(self) -> list[MessageView]:
        return list(self.replies[: self.visible_count])

    @property
    def hidden_count(self) -> int:
        return len(self.replies) - self.visible_count

    @property
    def has_more(self) -> bool:
        return self.hidden_count > 0

    @property
    def next_page_size(self) -> int:
        """How many replies the next ``show_more`` call reveals."""
        return min(self.page_size, self.hidden_count)

    def show_more(self) -> ReplyWindow:
        return replace(
            self,
            visible_count=min(len(self.replies), self.visible_count + self.page_size),
        )
