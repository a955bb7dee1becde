"""CLI commands that query YouTube directly: search, channel and video."""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.panel import Panel
from rich.table import Table

from exnotic.cli.output import console, print_error, print_warning, truncate
from exnotic.config.settings import settings
from exnotic.exceptions import (
    EXIT_CODE_NOT_FOUND,
    EXIT_CODE_UPSTREAM_FAILURE,
    SourcesExhaustedError,
    UpstreamError,
)
from exnotic.models.enums import PlaybackStrategy, SearchFilter
from exnotic.models.records import ChannelPage, ResolvedPlaybackSource, SearchResponse
from exnotic.models.youtube_types import is_video_id
from exnotic.services.channel_resolver import ChannelResolver
from exnotic.services.scraping.fetcher import PageFetcher
from exnotic.services.search import SearchService
from exnotic.services.store import EphemeralStore
from exnotic.services.video_resolver import VideoSourceResolver


def _fetcher() -> PageFetcher:
    return PageFetcher(user_agent=settings.user_agent, timeout=settings.request_timeout)


def _video_resolver(fetcher: PageFetcher) -> VideoSourceResolver:
    return VideoSourceResolver(
        fetcher,
        settings.invidious_instances,
        invidious_user_agent=settings.invidious_user_agent,
    )


# =============================================================================
# Rendering
# =============================================================================


def _render_search(response: SearchResponse) -> None:
    if response.channels:
        channel_table = Table(title="Channels", show_header=True, header_style="bold blue")
        channel_table.add_column("Channel ID", style="cyan", width=26)
        channel_table.add_column("Name", style="white", width=40)
        channel_table.add_column("Subscribers", style="green", width=20)
        for channel in response.channels:
            channel_table.add_row(
                channel.channel_id,
                truncate(channel.title, 40),
                channel.subscriber_count or "N/A",
            )
        console.print(channel_table)

    video_table = Table(
        title=f"Videos ({response.type.value})",
        show_header=True,
        header_style="bold blue",
    )
    video_table.add_column("Video ID", style="cyan", width=13)
    video_table.add_column("Title", style="white", width=50)
    video_table.add_column("Channel", style="magenta", width=24)
    video_table.add_column("Duration", style="yellow", width=10)
    video_table.add_column("Views", style="green", width=18)
    for video in response.videos:
        video_table.add_row(
            video.id,
            truncate(video.title, 50),
            truncate(video.channel_title, 24),
            video.duration or "N/A",
            video.view_count or "N/A",
        )
    console.print(video_table)


def _render_channel(page: ChannelPage, limit: int) -> None:
    channel = page.channel
    console.print(
        Panel(
            f"[bold]{channel.name}[/bold]\n"
            f"ID: [cyan]{channel.channel_id}[/cyan]\n"
            f"Subscribers: {channel.subscriber_count or 'N/A'}\n"
            f"Videos: {channel.video_count or len(page.videos)}\n"
            f"{channel.description}",
            title="Channel",
            border_style="blue",
        )
    )

    if not page.videos:
        return

    table = Table(
        title=f"Videos (showing {min(limit, len(page.videos))} of {len(page.videos)})",
        show_header=True,
        header_style="bold blue",
    )
    table.add_column("Video ID", style="cyan", width=13)
    table.add_column("Title", style="white", width=50)
    table.add_column("Published", style="yellow", width=16)
    table.add_column("Views", style="green", width=18)
    for video in page.videos[:limit]:
        table.add_row(
            video.id,
            truncate(video.title, 50),
            video.published_at or "N/A",
            video.view_count or "N/A",
        )
    console.print(table)


def _render_source(source: ResolvedPlaybackSource) -> None:
    video = source.video
    lines = [
        f"[bold]{video.title}[/bold]",
        f"Channel: {video.channel_title}",
        f"Strategy: [green]{source.strategy.value}[/green]",
        f"Endpoint: {source.endpoint}",
        f"Embed: {source.embed_url}",
    ]
    if video.duration:
        lines.append(f"Duration: {video.duration}")
    if source.strategy == PlaybackStrategy.INVIDIOUS:
        lines.append(
            f"Streams: {len(source.video_streams)} muxed, "
            f"{len(source.adaptive_formats)} adaptive"
        )
    if source.strategy == PlaybackStrategy.PROXY:
        lines.append("Alternatives:")
        lines.extend(f"  {url}" for url in source.proxy_methods)
    console.print(Panel("\n".join(lines), title=video.id, border_style="green"))


# =============================================================================
# Commands
# =============================================================================


def search(
    query: str = typer.Argument(..., help="Search text, YouTube URL or video ID"),
    filter_: SearchFilter = typer.Option(
        SearchFilter.RELEVANT, "--filter", "-f", help="Sort order"
    ),
    page: int = typer.Option(1, "--page", "-p", min=1, help="Results page"),
) -> None:
    """Search YouTube and print the results."""

    async def run_search() -> SearchResponse:
        fetcher = _fetcher()
        service = SearchService(
            fetcher,
            EphemeralStore(),
            _video_resolver(fetcher),
            result_limit=settings.search_result_limit,
        )
        return await service.search(query, filter_, page)

    try:
        response = asyncio.run(run_search())
    except UpstreamError as e:
        print_error(f"YouTube search failed: {e.message}", title="Upstream Error")
        raise typer.Exit(code=EXIT_CODE_UPSTREAM_FAILURE)

    if not response.videos and not response.channels:
        print_warning(f"No results for '{query}'", title="No Results")
        return

    _render_search(response)


def channel(
    query: Optional[str] = typer.Argument(None, help="Channel name"),
    channel_id: Optional[str] = typer.Option(
        None, "--id", help="Channel ID (UC...), handle or name"
    ),
    limit: int = typer.Option(20, "--limit", "-l", min=1, help="Videos to show"),
) -> None:
    """Look up a channel by name or ID and list its videos."""
    if not query and not channel_id:
        print_error("Provide a channel name or --id", title="Missing Argument")
        raise typer.Exit(code=EXIT_CODE_NOT_FOUND)

    resolver = ChannelResolver(_fetcher(), video_limit=settings.channel_video_limit)
    page = asyncio.run(resolver.resolve(query=query, channel_id=channel_id))

    if page is None:
        print_warning(f"Channel '{channel_id or query}' not found")
        raise typer.Exit(code=EXIT_CODE_NOT_FOUND)

    _render_channel(page, limit)


def video(
    video_id: str = typer.Argument(..., help="YouTube video ID (11 characters)"),
    bypass: bool = typer.Option(
        False, "--bypass", "-b", help="Prefer Invidious and proxy embeds"
    ),
) -> None:
    """Resolve a playable source for a video."""
    if not is_video_id(video_id):
        print_error(f"'{video_id}' is not a valid video ID", title="Invalid Video ID")
        raise typer.Exit(code=EXIT_CODE_NOT_FOUND)

    resolver = _video_resolver(_fetcher())
    try:
        source = asyncio.run(resolver.resolve(video_id, prefer_bypass=bypass))
    except SourcesExhaustedError as e:
        print_error(e.message, title="Unavailable")
        raise typer.Exit(code=EXIT_CODE_UPSTREAM_FAILURE)

    _render_source(source)
