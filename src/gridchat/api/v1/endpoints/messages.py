# src/gridchat/api/v1/endpoints/messages.py
"""Message endpoints for the gridchat API."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from gridchat.core.errors import NotFoundError
from gridchat.core.settings import settings
from gridchat.schemas.message import (
    MessageCreate,
    MessageView,
    SortOption,
    ThreadNodeResponse,
    ThreadResponse,
)
from gridchat.services import threads
from gridchat.services.grid import Coordinate

from ..dependencies import CurrentProfileDep, StoreDep

router = APIRouter(prefix="/messages", tags=["messages"])


def _visible_children(
    node: threads.ThreadNode,
    page_size: int,
) -> tuple[list[threads.ThreadNode], int]:
    window = threads.ReplyWindow.over([child.message for child in node.children], page_size)
    return node.children[: window.visible_count], window.hidden_count


def _node_response(node: threads.ThreadNode, page_size: int) -> ThreadNodeResponse:
    visible, hidden = _visible_children(node, page_size)
    return ThreadNodeResponse(
        message=node.message,
        depth=node.depth,
        children=[_node_response(child, page_size) for child in visible],
        hidden_reply_count=hidden,
    )


@router.post("", response_model=MessageView, status_code=status.HTTP_201_CREATED)
async def create_message(
    message_data: MessageCreate,
    current_profile: CurrentProfileDep,
    store: StoreDep,
) -> MessageView:
    """Post a message or reply.

    An explicit partition key wins over a coordinate; a coordinate is
    resolved to its cell and today's day key on the server clock.
    """
    if message_data.partition_key is not None:
        return store.post(
            message_data.text,
            message_data.partition_key,
            current_profile.id,
            parent_id=message_data.parent_id,
        )
    coordinate = Coordinate(message_data.latitude, message_data.longitude)
    return store.post_at(
        message_data.text,
        coordinate,
        current_profile.id,
        parent_id=message_data.parent_id,
    )


@router.get("", response_model=list[MessageView])
async def list_messages(
    current_profile: CurrentProfileDep,
    store: StoreDep,
    partition_key: str = Query(..., description="'{x}:{y}_{yyyy-MM-dd}' partition"),
    sort: SortOption = Query("top", description="top, newest or oldest"),
    include_replies: bool = Query(False, description="Return replies as well"),
) -> list[MessageView]:
    """List one partition, top-level messages only unless replies are requested."""
    batch = store.fetch_by_partition(partition_key, viewer_id=current_profile.id)
    if include_replies:
        return threads.sort_messages(batch, sort)
    return threads.sort_top_level(batch, sort)


@router.get("/{message_id}/thread", response_model=ThreadResponse)
async def get_thread(
    message_id: int,
    current_profile: CurrentProfileDep,
    store: StoreDep,
    sort: SortOption = Query("top", description="Order of sibling replies"),
    page_size: int = Query(
        default=settings.reply_page_size,
        ge=1,
        le=100,
        description="Replies shown per parent before 'show more'",
    ),
) -> ThreadResponse:
    """Return a message with its nested replies, each level paged."""
    root = store.get_message(message_id, viewer_id=current_profile.id)
    batch = store.fetch_by_partition(root.partition_key, viewer_id=current_profile.id)
    nodes = threads.build_tree(batch, sort, root_id=message_id)
    if not nodes:
        raise NotFoundError("Message not found")
    root_node = nodes[0]
    visible, hidden = _visible_children(root_node, page_size)
    return ThreadResponse(
        root=root_node.message,
        reply_count=threads.reply_count(batch, message_id),
        replies=[_node_response(child, page_size) for child in visible],
        hidden_reply_count=hidden,
    )


@router.delete("/{message_id}")
async def delete_message(
    message_id: int,
    current_profile: CurrentProfileDep,
    store: StoreDep,
) -> dict[str, int]:
    """Delete one of the caller's messages with its replies.

    Deleting someone else's message, or one that is already gone, is
    accepted and removes nothing.
    """
    removed = store.delete(message_id, current_profile.id)
    return {"deleted": removed}
