"""Incremental re-fetch of feed items (posts and comments).

Feed ids grow with creation time, so "new since last run" is simply
"id greater than the highest id the caller already has".
"""
from typing import Iterable, List, Optional, TypeVar, Union

from .models import ScrapeResult, SyncWatermark
from .timestamps import parse_id

T = TypeVar("T")


def filter_new(items: Iterable[T], watermark_id: Optional[Union[int, str]] = None) -> List[T]:
    """Keep the items whose `id` is strictly greater than `watermark_id`.

    Relative order is preserved. A missing or zero watermark means there is
    no history and every item is returned.
    """
    watermark = parse_id(watermark_id) if watermark_id else 0
    return [item for item in items if parse_id(item.id) > watermark]


def next_watermark(result: ScrapeResult, previous: Optional[SyncWatermark] = None) -> SyncWatermark:
    """Watermark the caller should store after `result` has been consumed.

    Never moves backwards: a run that surfaced nothing new keeps the
    previous values.
    """
    previous = previous or SyncWatermark()
    return SyncWatermark(
        last_post_id=max([previous.last_post_id] + [p.id for p in result.posts]),
        last_comment_id=max([previous.last_comment_id] + [c.id for c in result.comments]),
    )
