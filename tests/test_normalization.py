from datetime import date

import pytest

from linkedin_profile_scraper.models import (
    Location,
    RawCard,
    RawComment,
    RawEntry,
    RawHonor,
    RawPost,
    RawProfile,
    SyncWatermark,
)
from linkedin_profile_scraper.normalization import (
    build_result,
    normalize_comment,
    normalize_education,
    normalize_experience,
    normalize_honor,
    normalize_post,
    normalize_profile,
)
from linkedin_profile_scraper.text import PRESENT
from linkedin_profile_scraper.timestamps import decode

POST_ID = "7193453098040102912"


def test_profile_fields_are_cleaned() -> None:
    profile = normalize_profile(RawProfile(
        full_name=" Jane  Doe\n",
        pronouns="",
        title="Engineer",
        location="Amsterdam, North Holland, Netherlands",
        url="https://www.linkedin.com/in/jane/",
    ))

    assert profile.full_name == "Jane Doe"
    assert profile.pronouns is None
    assert profile.about is None
    assert profile.location == Location(city="Amsterdam", province="North Holland", country="Netherlands")


def test_profile_without_location_has_none() -> None:
    assert normalize_profile(RawProfile(url="https://www.linkedin.com/in/jane/")).location is None


def test_experience_dates_are_normalized() -> None:
    experience = normalize_experience(RawEntry(title="Engineer", company="ACME", dates="Jan 2020 - Present · 4 yrs"))

    assert experience.start_date == "2020-01-01"
    assert experience.end_date == PRESENT


def test_education_duration() -> None:
    education = normalize_education(RawCard(section="education", name="MIT", detail="BSc", caption="2019 - 2020"))
    unknown = normalize_education(RawCard(section="education", name="MIT"))

    assert education.duration_in_days == 366
    assert unknown.start_date is None
    assert unknown.duration_in_days is None


def test_ongoing_education_counts_until_today() -> None:
    education = normalize_education(
        RawCard(section="education", name="MIT", caption="2024"), today=date(2024, 1, 10)
    )

    assert education.end_date == PRESENT
    assert education.duration_in_days == 10


def test_honor_date() -> None:
    assert normalize_honor(RawHonor(title="Award", issuer="ACM", date="Mar 2020")).date == "2020-03-01"


def test_post_is_dated_from_its_id() -> None:
    post = normalize_post(RawPost(id=POST_ID, text="Hello\nworld", reactions="1,204", comments="12 comments"))

    assert post.id == int(POST_ID)
    assert post.text == "Hello world"
    assert post.created_at == decode(POST_ID).created_at
    assert post.likes == 1204
    assert post.comments == 12
    assert post.shares is None
    assert post.url == f"https://www.linkedin.com/feed/update/urn:li:activity:{POST_ID}"


def test_comment_permalink() -> None:
    comment = normalize_comment(RawComment(id="7193460000000000000", post_id=POST_ID, text="Nice"))

    assert comment.post_id == int(POST_ID)
    assert comment.url.startswith(f"https://www.linkedin.com/feed/update/urn:li:activity:{POST_ID}/?commentUrn=")
    assert f"urn:li:fsd_comment:(7193460000000000000,urn:li:activity:{POST_ID})" in comment.url


def test_build_result_filters_feeds_by_watermark() -> None:
    raw = {
        "profile": [RawProfile(url="https://www.linkedin.com/in/jane/")],
        "posts": [RawPost(id="300"), RawPost(id="100"), RawPost(id="200")],
        "comments": [RawComment(id="50", post_id="1"), RawComment(id="60", post_id="1")],
    }

    result = build_result(raw, SyncWatermark(last_post_id=150, last_comment_id=55))

    assert [p.id for p in result.posts] == [300, 200]
    assert [c.id for c in result.comments] == [60]
    assert result.experiences == []


def test_records_are_immutable() -> None:
    profile = normalize_profile(RawProfile(url="https://www.linkedin.com/in/jane/"))

    with pytest.raises(Exception):
        profile.full_name = "Someone else"
