"""
exnotic - Ad-free YouTube frontend backend.

An async HTTP service that searches, scrapes metadata from, and resolves
playable sources for YouTube videos through public YouTube pages, the
oEmbed endpoint, and public Invidious instances.
"""

from __future__ import annotations

__version__ = "0.4.0"
__author__ = "exnotic"
__email__ = "noreply@exnotic.dev"
__license__ = "MIT"

__all__ = ["__version__", "__author__", "__email__", "__license__"]
