from __future__ import annotations

from typing import Any

import pytest
from playwright.async_api import Error as PlaywrightError

from linkedin_profile_scraper import browser as browser_ops
from linkedin_profile_scraper.extraction import (
    CommentsExtractor,
    ExperienceExtractor,
    HonorsExtractor,
    PostsExtractor,
    ProfileCardsExtractor,
    ProfileExtractor,
    SkillsExtractor,
    VolunteeringExtractor,
)

PROFILE_URL = "https://www.linkedin.com/in/jane-doe/"
COOKIE = "AQEDATEST"


class FakePage:
    """Just enough of a Playwright page for the scraper.

    `site` maps a URL to {script: data}; evaluating a script returns the data
    registered for the current URL. `redirects` maps a requested URL to the
    URL the page ends up on.
    """

    def __init__(self, site: dict[str, dict[str, Any]], redirects: dict[str, str] | None = None,
                 fail_on: set[str] | None = None, scroll_height: int = 1200):
        self.site = site
        self.redirects = redirects or {}
        self.fail_on = fail_on or set()
        self.scroll_height = scroll_height
        self.url = "about:blank"
        self.visited: list[str] = []
        self.waits: list[int] = []
        self.scrolls = 0
        self.closed = False
        self.routes: list[str] = []

    async def goto(self, url: str, timeout: int | None = None, wait_until: str | None = None) -> None:
        self.visited.append(url)
        if url in self.fail_on:
            raise PlaywrightError(f"Timeout {timeout}ms exceeded.")
        self.url = self.redirects.get(url, url)

    async def wait_for_timeout(self, ms: int) -> None:
        self.waits.append(ms)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if script == "document.body.scrollHeight":
            return self.scroll_height
        if "scrollBy" in script:
            self.scrolls += 1
            return None
        return self.site.get(self.url, {}).get(script, [])

    async def route(self, pattern: str, handler) -> None:
        self.routes.append(pattern)

    async def close(self) -> None:
        self.closed = True

    async def screenshot(self, path: str, full_page: bool = False) -> None:
        with open(path, "wb") as f:
            f.write(b"")

    async def content(self) -> str:
        return "<html></html>"


class FakeContext:
    def __init__(self, page_factory):
        self.page_factory = page_factory
        self.pages: list[FakePage] = []
        self.cookies: list[dict] = []
        self.cookie_error: Exception | None = None

    def set_default_navigation_timeout(self, timeout: int) -> None:
        self.navigation_timeout = timeout

    def set_default_timeout(self, timeout: int) -> None:
        self.timeout = timeout

    async def new_page(self) -> FakePage:
        page = self.page_factory()
        self.pages.append(page)
        return page

    async def add_cookies(self, cookies: list[dict]) -> None:
        if self.cookie_error:
            raise self.cookie_error
        self.cookies.extend(cookies)


class FakeBrowser:
    def __init__(self, context: FakeContext, close_error: Exception | None = None):
        self.context = context
        self.close_error = close_error
        self.closed = False

    async def new_context(self, **kwargs: Any) -> FakeContext:
        self.context_kwargs = kwargs
        return self.context

    async def close(self) -> None:
        if self.close_error:
            raise self.close_error
        self.closed = True


class FakePlaywright:
    def __init__(self):
        self.stopped = False

    async def stop(self) -> None:
        self.stopped = True


class FakeEnvironment:
    """Wires the fakes into `browser.launch_browser` and records launches."""

    def __init__(self, site: dict, **page_kwargs: Any):
        self.site = site
        self.page_kwargs = page_kwargs
        self.launches = 0
        self.context = FakeContext(lambda: FakePage(self.site, **self.page_kwargs))
        self.browser = FakeBrowser(self.context)
        self.playwright = FakePlaywright()

    async def launch_browser(self, headless: bool = True):
        self.launches += 1
        return self.playwright, self.browser

    @property
    def pages(self) -> list[FakePage]:
        return self.context.pages


def profile_site(posts: list | None = None, comments: list | None = None) -> dict[str, dict[str, Any]]:
    """A rendered profile with one entry in every section."""
    site: dict[str, dict[str, Any]] = {}

    def add(extractor, data):
        site.setdefault(extractor.url_for(PROFILE_URL), {})[extractor.script] = data

    add(ProfileExtractor(), {
        "fullName": "  Jane Doe ",
        "pronouns": "She/Her",
        "title": "Staff Engineer at Example\n",
        "location": "San Francisco, California, United States",
        "about": "Builds things.   See more",
        "photo": "https://media.licdn.com/jane.jpg",
        "url": PROFILE_URL,
    })
    add(ProfileCardsExtractor(), [
        {"heading": "Education", "name": "MIT", "detail": "BSc, Computer Science", "light": None,
         "caption": "2019 - 2020"},
        {"heading": "Licenses & certifications", "name": "CKA", "detail": "The Linux Foundation",
         "light": None, "caption": None},
        {"heading": "Languages", "name": "Dutch", "detail": "Native or bilingual proficiency",
         "light": "Native or bilingual proficiency", "caption": None},
    ])
    add(ExperienceExtractor(), [
        "Staff Engineer\nStaff Engineer\nExample Inc · Full-time\nExample Inc · Full-time\n"
        "Jan 2021 - Present · 3 yrs\nJan 2021 - Present · 3 yrs\nLed the platform team\nLed the platform team",
    ])
    add(SkillsExtractor(), ["Python", "", "Playwright"])
    add(VolunteeringExtractor(), ["Nothing to see for now\nNothing to see for now"])
    add(HonorsExtractor(), [
        "Best Paper\nBest Paper\nACM · Mar 2020\nACM · Mar 2020\nFor the paper\nFor the paper",
    ])
    add(PostsExtractor(), posts if posts is not None else [])
    add(CommentsExtractor(), {"title": "Activity | Jane Doe | LinkedIn", "items": comments or []})
    return site


@pytest.fixture
def fake_env(monkeypatch):
    def _make(site: dict | None = None, **page_kwargs: Any) -> FakeEnvironment:
        env = FakeEnvironment(site if site is not None else profile_site(), **page_kwargs)
        monkeypatch.setattr(browser_ops, "launch_browser", env.launch_browser)
        return env
    return _make
