import asyncio

import pytest

from conftest import PROFILE_URL, FakePage, profile_site
from linkedin_profile_scraper.errors import ExtractionError
from linkedin_profile_scraper.extraction import (
    CommentsExtractor,
    ExperienceExtractor,
    HonorsExtractor,
    PostsExtractor,
    ProfileCardsExtractor,
    SkillsExtractor,
    VolunteeringExtractor,
    default_extractors,
    visible_lines,
)
from linkedin_profile_scraper.models import RawCard, ScraperOptions

OPTIONS = ScraperOptions(session_cookie_value="AQED", settle_delay=0, scroll_interval=0)


def test_visible_lines_drops_screen_reader_duplicates() -> None:
    assert visible_lines("Title\nTitle\nCompany\nCompany") == ["Title", "Company"]
    assert visible_lines("") == []


def test_experience_maps_lines_by_position() -> None:
    text = "Engineer\nEngineer\nACME\nACME\nJan 2020 - Present\nJan 2020 - Present\nDid things\nDid things\nMore\nMore"

    [entry] = ExperienceExtractor().parse([text])

    assert entry.title == "Engineer"
    assert entry.company == "ACME"
    assert entry.dates == "Jan 2020 - Present"
    assert entry.description == "Did things, More"


def test_experience_short_item_fills_unknowns() -> None:
    [entry] = ExperienceExtractor().parse(["Engineer\nEngineer"])

    assert entry.title == "Engineer"
    assert entry.company is None
    assert entry.dates is None
    assert entry.description is None


def test_empty_state_is_excluded() -> None:
    assert VolunteeringExtractor().parse(["Nothing to see for now\nNothing to see for now"]) == []
    assert HonorsExtractor().parse(["Nothing to see for now"]) == []
    assert SkillsExtractor().parse(["Nothing to see for now", ""]) == []


def test_honor_splits_issuer_and_date() -> None:
    [honor] = HonorsExtractor().parse(["Award\nAward\nACM · Mar 2020\nACM · Mar 2020"])

    assert honor.issuer == "ACM"
    assert honor.date == "Mar 2020"
    assert honor.description is None


def test_cards_are_assigned_by_heading() -> None:
    cards = ProfileCardsExtractor().parse([
        {"heading": "Education", "name": "MIT", "detail": "BSc", "caption": "2014 - 2018"},
        {"heading": "Licenses & certifications", "name": "CKA", "detail": "CNCF"},
        {"heading": "Languages", "name": "Dutch", "detail": "Native", "light": "Native"},
        {"heading": "Interests", "name": "Something"},
    ])

    assert cards == [
        RawCard(section="education", name="MIT", detail="BSc", caption="2014 - 2018"),
        RawCard(section="licenses", name="CKA", detail="CNCF"),
        RawCard(section="languages", name="Dutch", detail="Native"),
    ]


def test_posts_without_activity_urn_are_skipped() -> None:
    posts = PostsExtractor().parse([
        {"urn": "urn:li:activity:7193453098040102912", "text": "Hello", "reactions": "5"},
        {"urn": None, "text": "Sponsored"},
    ])

    assert [p.id for p in posts] == ["7193453098040102912"]
    assert posts[0].reactions == "5"


def test_comments_keep_only_the_owners_unique_comments() -> None:
    data = {
        "title": "Comments | Jane Doe | LinkedIn",
        "items": [
            {"author": "Jane Doe", "dataId": "urn:li:comment:(activity:7100000000000000000,7100000000000000001)", "text": "Great"},
            {"author": "Jane Doe", "dataId": "urn:li:comment:(activity:7100000000000000000,7100000000000000002)", "text": "Great"},
            {"author": "John Roe", "dataId": "urn:li:comment:(activity:7100000000000000000,7100000000000000003)", "text": "Thanks"},
            {"author": "Jane Doe ", "dataId": "urn:li:comment:(urn:li:ugcPost:7100000000000000009,7100000000000000004)", "text": "Agreed"},
        ],
    }

    comments = CommentsExtractor().parse(data)

    assert [(c.post_id, c.id, c.text) for c in comments] == [
        ("7100000000000000000", "7100000000000000001", "Great"),
        ("7100000000000000009", "7100000000000000004", "Agreed"),
    ]


def test_comments_without_owner_in_title() -> None:
    assert CommentsExtractor().parse({"title": "LinkedIn", "items": [{"author": "A", "text": "x"}]}) == []


def test_unexpected_page_shape_is_an_extraction_error() -> None:
    page = FakePage({PROFILE_URL + "details/skills/": {SkillsExtractor.script: {"oops": 1}}})
    page.url = PROFILE_URL + "details/skills/"

    with pytest.raises(ExtractionError):
        asyncio.run(SkillsExtractor().query(page))


def test_extract_runs_the_whole_protocol() -> None:
    page = FakePage(profile_site())

    skills = asyncio.run(SkillsExtractor().extract(page, PROFILE_URL, OPTIONS))

    assert page.visited == [PROFILE_URL + "details/skills/"]
    assert page.scrolls > 0
    assert [s.skill_name for s in skills] == ["Python", "Playwright"]


def test_default_order_is_fixed() -> None:
    assert [e.field for e in default_extractors()] == [
        "profile", "cards", "experiences", "skills", "volunteerings", "honors", "posts", "comments",
    ]
