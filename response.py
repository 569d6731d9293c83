from typing import Any, Dict, Optional

from linkedin_profile_scraper import ScrapeResult, SyncWatermark, next_watermark
from linkedin_profile_scraper.errors import (
    ConfigurationError,
    InvalidURLError,
    LaunchError,
    ScraperError,
    SessionBusyError,
    SessionExpiredError,
)


def build_response(url: str, result: ScrapeResult, watermark: Optional[SyncWatermark] = None) -> Dict[str, Any]:
    """Compose the public response for a finished run.

    Alongside the records, `next_watermark` tells the caller what to send
    as the watermark next time so that only newer activity is returned.
    Ids are large, so JSON consumers should read them as strings or bigints.
    """
    body = result.model_dump(mode="json")
    body.update(
        {
            "url": url,
            "found": True,
            "total_posts": len(result.posts),
            "total_comments": len(result.comments),
            "next_watermark": next_watermark(result, watermark).model_dump(),
        }
    )
    return body


def build_error(url: Optional[str], error: BaseException) -> Dict[str, Any]:
    """Build a consistent error body; the error class name is the machine-readable kind."""
    return {
        "url": url,
        "found": False,
        "error": str(error),
        "error_type": type(error).__name__,
    }


def status_code_for(error: BaseException) -> int:
    if isinstance(error, (ConfigurationError, InvalidURLError)):
        return 400
    if isinstance(error, SessionExpiredError):
        return 401
    if isinstance(error, SessionBusyError):
        return 409
    if isinstance(error, LaunchError):
        return 503
    if isinstance(error, ScraperError):
        return 502
    return 500
