"""Scrape LinkedIn profiles with a logged-in Chromium session.

The package is split into small modules: browser and page preparation,
navigation and progressive loading, one extractor per profile section,
and pure normalization helpers that turn raw page text into typed records.
"""
from .errors import (
    ConfigurationError,
    ExtractionError,
    InvalidURLError,
    LaunchError,
    NavigationError,
    ScraperError,
    SessionBusyError,
    SessionExpiredError,
    SessionNotOpenError,
)
from .models import ScrapeResult, ScraperOptions, SyncWatermark
from .session import LinkedInProfileScraper
from .sync import filter_new, next_watermark

__all__ = [
    "ConfigurationError",
    "ExtractionError",
    "InvalidURLError",
    "LaunchError",
    "LinkedInProfileScraper",
    "NavigationError",
    "ScrapeResult",
    "ScraperError",
    "ScraperOptions",
    "SessionBusyError",
    "SessionExpiredError",
    "SessionNotOpenError",
    "SyncWatermark",
    "filter_new",
    "next_watermark",
]
