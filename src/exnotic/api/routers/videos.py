"""Video endpoints: metadata, oEmbed passthrough and playback sources."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Path, Query

from exnotic.api.deps import get_store, get_video_resolver
from exnotic.exceptions import ExternalServiceError, NotFoundError, UpstreamError
from exnotic.models.enums import PlaybackStrategy, VideoLookupMethod
from exnotic.models.youtube_types import VIDEO_ID_PATTERN
from exnotic.services.store import EphemeralStore
from exnotic.services.video_resolver import VideoSourceResolver

router = APIRouter()

# oEmbed answers these for private, removed or unknown videos
_OEMBED_NOT_FOUND_STATUSES = frozenset({400, 401, 403, 404})

_CACHEABLE_STRATEGIES = frozenset({PlaybackStrategy.INVIDIOUS, PlaybackStrategy.OEMBED})


def _video_id_path() -> Any:
    return Path(
        ...,
        pattern=VIDEO_ID_PATTERN,
        description="YouTube video ID (11 characters)",
        examples=["dQw4w9WgXcQ"],
    )


@router.get("/video/{video_id}")
async def get_video(
    video_id: str = _video_id_path(),
    method: VideoLookupMethod = Query(
        VideoLookupMethod.OEMBED,
        description="oembed: metadata only; bypass: run the full playback chain",
    ),
    store: EphemeralStore = Depends(get_store),
    resolver: VideoSourceResolver = Depends(get_video_resolver),
) -> dict[str, Any]:
    """
    Get video metadata, from the cache when possible.

    Raises
    ------
    NotFoundError
        If oEmbed has no record of the video (404).
    """
    video = store.get_video(video_id)
    if video is not None:
        return video.to_payload()

    if method == VideoLookupMethod.BYPASS:
        source = await resolver.resolve(video_id, prefer_bypass=True)
        video = source.video
        # Proxy and direct records may be placeholders; only real metadata is cached
        cacheable = source.strategy in _CACHEABLE_STRATEGIES
    else:
        video = await resolver.describe_video(video_id)
        if video is None:
            raise NotFoundError(resource_type="Video", identifier=video_id)
        cacheable = True

    if cacheable:
        store.put_video(video)
    return video.to_payload()


@router.get("/oembed/{video_id}")
async def get_oembed(
    video_id: str = _video_id_path(),
    resolver: VideoSourceResolver = Depends(get_video_resolver),
) -> dict[str, Any]:
    """Return YouTube's oEmbed document plus the discovered ``channelAvatarUrl``."""
    try:
        oembed = await resolver.fetch_oembed(video_id)
    except UpstreamError as e:
        if e.status_code in _OEMBED_NOT_FOUND_STATUSES:
            raise NotFoundError(resource_type="Video", identifier=video_id) from e
        raise ExternalServiceError(
            message=f"oEmbed lookup failed: {e.message}",
            details={"url": e.url, "status_code": e.status_code},
        ) from e

    avatar = None
    if oembed.author_name or oembed.title:
        avatar = await resolver.discover_channel_avatar(video_id)

    payload = oembed.model_dump(mode="json", exclude_unset=True)
    payload["channelAvatarUrl"] = avatar
    return payload


@router.get("/invidious/{video_id}")
async def get_invidious(
    video_id: str = _video_id_path(),
    resolver: VideoSourceResolver = Depends(get_video_resolver),
) -> dict[str, Any]:
    """
    Resolve a video through the Invidious instances.

    When every instance fails the proxy playback object is returned instead.
    """
    source = await resolver.resolve_invidious(video_id)
    if source is None:
        source = await resolver.resolve_proxy(video_id)
    source = await resolver.enrich(source)
    return source.to_payload()


@router.get("/proxy/{video_id}")
async def get_proxy(
    video_id: str = _video_id_path(),
    resolver: VideoSourceResolver = Depends(get_video_resolver),
) -> dict[str, Any]:
    """Return the proxy playback object with its alternative embed URLs."""
    source = await resolver.enrich(await resolver.resolve_proxy(video_id))
    return source.to_payload()


@router.get("/play/{video_id}")
async def get_playback_source(
    video_id: str = _video_id_path(),
    bypass: bool = Query(False, description="Prefer Invidious and proxy embeds"),
    resolver: VideoSourceResolver = Depends(get_video_resolver),
) -> dict[str, Any]:
    """Run the playback chain and return the first source that works."""
    source = await resolver.resolve(video_id, prefer_bypass=bypass)
    return source.to_payload()
