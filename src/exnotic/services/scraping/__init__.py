"""
Scraping layer: fetch YouTube pages, extract ``ytInitialData`` and project
it into records.
"""

from __future__ import annotations

from exnotic.services.scraping.extractor import extract_initial_data
from exnotic.services.scraping.fetcher import PageFetcher
from exnotic.services.scraping.projector import (
    paginate_search_results,
    project_channel_candidates,
    project_channel_page,
    project_results,
    project_search_results,
)

__all__ = [
    "PageFetcher",
    "extract_initial_data",
    "paginate_search_results",
    "project_channel_candidates",
    "project_channel_page",
    "project_results",
    "project_search_results",
]
