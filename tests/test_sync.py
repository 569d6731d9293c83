from datetime import datetime, timezone

from linkedin_profile_scraper.models import Comment, Post, Profile, ScrapeResult, SyncWatermark
from linkedin_profile_scraper.models import RawPost
from linkedin_profile_scraper.sync import filter_new, next_watermark

BIG = 7193453098040102912


def _raw(post_id: int) -> RawPost:
    return RawPost(id=str(post_id))


def _post(post_id: int) -> Post:
    return Post(
        id=post_id,
        created_at=datetime(2024, 5, 6, tzinfo=timezone.utc),
        created_at_human="Mon, 06 May 2024 00:00:00 GMT",
        url=f"https://www.linkedin.com/feed/update/urn:li:activity:{post_id}",
    )


def test_keeps_only_ids_above_watermark_in_order() -> None:
    items = [_raw(BIG + 5), _raw(BIG - 1), _raw(BIG), _raw(BIG + 1)]

    kept = filter_new(items, BIG)

    assert [i.id for i in kept] == [str(BIG + 5), str(BIG + 1)]


def test_filtering_is_idempotent() -> None:
    items = [_raw(BIG + n) for n in range(-3, 4)]

    once = filter_new(items, BIG)

    assert filter_new(once, BIG) == once


def test_zero_or_missing_watermark_returns_everything() -> None:
    items = [_raw(BIG), _raw(BIG + 1)]

    assert filter_new(items, 0) == items
    assert filter_new(items, None) == items
    assert filter_new(items, "0") == items


def test_comparison_does_not_lose_precision() -> None:
    # Indistinguishable as floats, distinct as ints.
    watermark = 2**63 - 2
    items = [_raw(2**63 - 1)]
    assert float(2**63 - 1) == float(watermark)

    assert filter_new(items, str(watermark)) == items


def test_next_watermark_advances_and_never_regresses() -> None:
    result = ScrapeResult(profile=Profile(url="https://www.linkedin.com/in/x/"), posts=[_post(BIG + 2), _post(BIG + 9)])
    previous = SyncWatermark(last_post_id=BIG, last_comment_id=BIG + 100)

    watermark = next_watermark(result, previous)

    assert watermark.last_post_id == BIG + 9
    assert watermark.last_comment_id == BIG + 100


def test_next_watermark_without_history() -> None:
    result = ScrapeResult(profile=Profile(url="https://www.linkedin.com/in/x/"), comments=[])

    assert next_watermark(result) == SyncWatermark()


def test_watermark_accepts_string_ids() -> None:
    assert SyncWatermark(last_post_id=str(BIG)).last_post_id == BIG


def test_comment_records_are_filtered_by_their_own_id() -> None:
    comment = Comment(
        id=BIG + 1,
        post_id=BIG - 50,
        created_at=datetime(2024, 5, 6, tzinfo=timezone.utc),
        created_at_human="x",
        url="https://www.linkedin.com/feed/update/urn:li:activity:1",
    )

    assert filter_new([comment], BIG) == [comment]
