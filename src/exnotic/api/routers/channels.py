"""Channel endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from exnotic.api.deps import get_channel_resolver
from exnotic.exceptions import BadRequestError, NotFoundError
from exnotic.services.channel_resolver import ChannelResolver

router = APIRouter()


@router.get("/channel")
async def get_channel(
    q: str | None = Query(None, description="Channel name"),
    channel_id: str | None = Query(
        None, alias="channelId", description="Channel ID, handle or name"
    ),
    id_: str | None = Query(None, alias="id", description="Alias of channelId"),
    resolver: ChannelResolver = Depends(get_channel_resolver),
) -> dict[str, Any]:
    """
    Get a channel and its videos.

    A ``UC``-prefixed channel ID is looked up directly; names are resolved
    through YouTube's channel search.

    Raises
    ------
    BadRequestError
        If neither a query nor an ID is given (400).
    NotFoundError
        If no strategy found the channel (404).
    """
    actual_channel_id = channel_id or id_
    if not (q and q.strip()) and not (actual_channel_id and actual_channel_id.strip()):
        raise BadRequestError("Channel query or ID is required")

    page = await resolver.resolve(query=q, channel_id=actual_channel_id)
    if page is None:
        raise NotFoundError(
            resource_type="Channel",
            identifier=(actual_channel_id or q or "").strip(),
        )

    return page.to_payload()
