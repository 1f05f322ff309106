# tests/test_threads.py
"""Tests for reply-tree assembly and ordering."""

import uuid
from datetime import UTC, datetime, timedelta

import pytest

from gridchat.schemas.message import MessageView
from gridchat.services.threads import (
    ReplyWindow,
    SortPolicy,
    build_tree,
    depth,
    direct_replies,
    flattened_replies,
    reply_count,
    score,
    sort_messages,
    sort_top_level,
)

AUTHOR = uuid.uuid4()
T0 = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def msg(
    message_id: int,
    parent_id: int | None = None,
    *,
    seconds: int | None = None,
    up: int = 0,
    down: int = 0,
) -> MessageView:
    offset = message_id if seconds is None else seconds
    return MessageView(
        id=message_id,
        author_id=AUTHOR,
        author_name="alice",
        text=f"message {message_id}",
        created_at=T0 + timedelta(seconds=offset),
        partition_key="0:0_2024-05-01",
        cell_id="0:0",
        day_key="2024-05-01",
        parent_id=parent_id,
        upvote_count=up,
        downvote_count=down,
    )


@pytest.fixture()
def batch() -> list[MessageView]:
    # 1 -> 2 -> 3, 1 -> 4; 5 is another top-level thread with reply 6.
    return [msg(1), msg(2, 1), msg(3, 2), msg(4, 1), msg(5), msg(6, 5)]


def test_flattened_replies_are_all_descendants_oldest_first(batch: list[MessageView]) -> None:
    assert [m.id for m in flattened_replies(batch, 1)] == [2, 3, 4]
    assert [m.id for m in flattened_replies(batch, 5)] == [6]
    assert flattened_replies(batch, 3) == []


def test_reply_count(batch: list[MessageView]) -> None:
    assert reply_count(batch, 1) == 3
    assert reply_count(batch, 2) == 1


def test_depth(batch: list[MessageView]) -> None:
    by_id = {m.id: m for m in batch}
    assert depth(by_id[1], batch) == 0
    assert depth(by_id[2], batch) == 1
    assert depth(by_id[3], batch) == 2


def test_direct_replies_oldest_first() -> None:
    batch = [msg(1), msg(4, 1, seconds=30), msg(2, 1, seconds=10), msg(3, 2)]
    assert [m.id for m in direct_replies(batch, 1)] == [2, 4]


def test_corrupt_batch_does_not_loop() -> None:
    cyclic = [msg(1, 2), msg(2, 1), msg(3, 99)]
    assert flattened_replies(cyclic, 7) == []
    assert depth(cyclic[2], cyclic) == 0
    assert build_tree(cyclic) == []


def test_top_sort_breaks_ties_oldest_first() -> None:
    batch = [msg(1, up=2), msg(2, up=5), msg(3, up=3, down=1), msg(4, up=1, down=1), msg(5)]
    assert [m.id for m in sort_messages(batch, SortPolicy.TOP)] == [2, 1, 3, 4, 5]


def test_chronological_sorts_use_id_for_equal_timestamps() -> None:
    batch = [msg(2, seconds=0), msg(1, seconds=0), msg(3, seconds=5)]
    assert [m.id for m in sort_messages(batch, "newest")] == [3, 2, 1]
    assert [m.id for m in sort_messages(batch, "oldest")] == [1, 2, 3]


def test_sort_top_level_excludes_replies(batch: list[MessageView]) -> None:
    assert [m.id for m in sort_top_level(batch, "newest")] == [5, 1]


def test_build_tree_nests_replies(batch: list[MessageView]) -> None:
    roots = build_tree(batch, "oldest")
    assert [node.message.id for node in roots] == [1, 5]
    first = roots[0]
    assert [child.message.id for child in first.children] == [2, 4]
    assert first.children[0].children[0].message.id == 3
    assert first.children[0].children[0].depth == 2
    assert [node.message.id for node in first.walk()] == [1, 2, 3, 4]


def test_build_tree_for_single_root(batch: list[MessageView]) -> None:
    (root,) = build_tree(batch, root_id=5)
    assert root.message.id == 5
    assert [child.message.id for child in root.children] == [6]


def test_reply_window_pages_in_stable_order() -> None:
    replies = [msg(100 + i, 1, up=i % 3) for i in range(25)]
    window = ReplyWindow.for_parent([msg(1), *replies], 1, "top", page_size=10)
    assert len(window.visible) == 10
    assert window.hidden_count == 15
    assert window.next_page_size == 10

    first_page = window.visible
    window = window.show_more()
    assert window.visible[:10] == first_page
    assert window.next_page_size == 5

    window = window.show_more()
    assert len(window.visible) == 25
    assert not window.has_more
    assert window.show_more() == window


def test_reply_window_rejects_empty_pages() -> None:
    with pytest.raises(ValueError):
        ReplyWindow.for_parent([], 1, page_size=0)


def test_score_follows_the_reaction_model() -> None:
    voted = msg(1, up=4, down=1)
    liked = voted.model_copy(update={"reaction_model": "like", "like_count": 7})
    assert score(voted) == 3
    assert score(liked) == 7


def test_reply_window_over_presorted_list_keeps_order() -> None:
    replies = [msg(3, 1), msg(2, 1), msg(4, 1)]
    window = ReplyWindow.over(replies, page_size=2)
    assert [m.id for m in window.visible] == [3, 2]
    assert window.hidden_count == 1
