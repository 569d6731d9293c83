"""Raw DOM strings to typed records.

Nothing in here touches a page: every function takes raw records and
returns frozen models, so value semantics can be tested without a browser.
"""
from datetime import date
from typing import Dict, List, Optional

from .models import (
    Comment,
    Education,
    Experience,
    Honor,
    Language,
    License,
    Post,
    Profile,
    RawCard,
    RawComment,
    RawEntry,
    RawHonor,
    RawPost,
    RawProfile,
    RawSkill,
    ScrapeResult,
    Skill,
    SyncWatermark,
    Volunteering,
)
from .errors import ExtractionError
from .sync import filter_new
from .text import clean_text, duration_in_days, format_date, parse_count, parse_date_range, parse_location
from .timestamps import decode

FEED_UPDATE_URL = "https://www.linkedin.com/feed/update/urn:li:activity:{post_id}"


def normalize_profile(raw: RawProfile) -> Profile:
    return Profile(
        full_name=clean_text(raw.full_name),
        pronouns=clean_text(raw.pronouns),
        title=clean_text(raw.title),
        location=parse_location(raw.location),
        about=clean_text(raw.about),
        photo=clean_text(raw.photo),
        url=raw.url,
    )


def normalize_experience(raw: RawEntry, model=Experience) -> Experience:
    start, end = parse_date_range(raw.dates)
    return model(
        title=clean_text(raw.title),
        company=clean_text(raw.company),
        start_date=start,
        end_date=end,
        description=clean_text(raw.description),
    )


def normalize_volunteering(raw: RawEntry) -> Volunteering:
    return normalize_experience(raw, model=Volunteering)


def normalize_education(raw: RawCard, today: Optional[date] = None) -> Education:
    start, end = parse_date_range(raw.caption)
    return Education(
        school_name=clean_text(raw.name),
        degree_name=clean_text(raw.detail),
        start_date=start,
        end_date=end,
        duration_in_days=duration_in_days(start, end, today),
    )


def normalize_license(raw: RawCard) -> License:
    return License(license_name=clean_text(raw.name), license_body=clean_text(raw.detail))


def normalize_language(raw: RawCard) -> Language:
    return Language(language_name=clean_text(raw.name), language_level=clean_text(raw.detail))


def normalize_skill(raw: RawSkill) -> Skill:
    return Skill(skill_name=clean_text(raw.skill_name))


def normalize_honor(raw: RawHonor) -> Honor:
    return Honor(
        title=clean_text(raw.title),
        issuer=clean_text(raw.issuer),
        date=format_date(raw.date),
        description=clean_text(raw.description),
    )


def normalize_post(raw: RawPost) -> Post:
    decoded = decode(raw.id)
    return Post(
        id=int(raw.id),
        text=clean_text(raw.text),
        created_at=decoded.created_at,
        created_at_human=decoded.human_readable,
        likes=parse_count(raw.reactions),
        comments=parse_count(raw.comments),
        shares=parse_count(raw.shares),
        url=FEED_UPDATE_URL.format(post_id=raw.id),
    )


def comment_url(post_id: str, comment_id: str) -> str:
    return (
        f"{FEED_UPDATE_URL.format(post_id=post_id)}/"
        f"?commentUrn=urn:li:comment:(activity:{post_id},{comment_id})"
        f"&dashCommentUrn=urn:li:fsd_comment:({comment_id},urn:li:activity:{post_id})"
    )


def normalize_comment(raw: RawComment) -> Comment:
    decoded = decode(raw.id)
    return Comment(
        id=int(raw.id),
        post_id=int(raw.post_id),
        text=clean_text(raw.text),
        created_at=decoded.created_at,
        created_at_human=decoded.human_readable,
        url=comment_url(raw.post_id, raw.id),
    )


def _cards(raws: List[RawCard], section: str) -> List[RawCard]:
    return [c for c in raws if c.section == section]


def build_result(
    raw: Dict[str, list],
    watermark: Optional[SyncWatermark] = None,
    today: Optional[date] = None,
) -> ScrapeResult:
    """Normalize every section and filter the feeds by `watermark`.

    `raw` maps an extractor `field` to the raw records it returned. Feeds
    are filtered on the raw ids, before the decode work is done.
    """
    watermark = watermark or SyncWatermark()
    profiles = raw.get("profile") or []
    if not profiles:
        raise ExtractionError("No profile record to build a result from")
    cards = raw.get("cards", [])

    return ScrapeResult(
        profile=normalize_profile(profiles[0]),
        experiences=[normalize_experience(r) for r in raw.get("experiences", [])],
        education=[normalize_education(c, today) for c in _cards(cards, "education")],
        licenses=[normalize_license(c) for c in _cards(cards, "licenses")],
        languages=[normalize_language(c) for c in _cards(cards, "languages")],
        skills=[normalize_skill(r) for r in raw.get("skills", [])],
        volunteerings=[normalize_volunteering(r) for r in raw.get("volunteerings", [])],
        honors=[normalize_honor(r) for r in raw.get("honors", [])],
        posts=[normalize_post(r) for r in filter_new(raw.get("posts", []), watermark.last_post_id)],
        comments=[normalize_comment(r) for r in filter_new(raw.get("comments", []), watermark.last_comment_id)],
    )
