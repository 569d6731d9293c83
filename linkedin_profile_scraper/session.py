import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Sequence, Union

from playwright.async_api import Browser, BrowserContext, Page, Playwright
from playwright.async_api import Error as PlaywrightError
from pydantic import ValidationError

from . import browser as browser_ops
from .blocked_hosts import HostBlockPolicy, default_policy
from .config import LOGIN_URL
from .cookies_auth import is_login_page
from .errors import (
    ConfigurationError,
    ExtractionError,
    InvalidURLError,
    LaunchError,
    ScraperError,
    SessionBusyError,
    SessionExpiredError,
    SessionNotOpenError,
)
from .extraction import SectionExtractor, default_extractors
from .models import ScrapeResult, ScraperOptions, SyncWatermark
from .navigation import goto
from .normalization import build_result
from .scraper_logging import save_debug_files, status_log


def validate_profile_url(profile_url: Any) -> str:
    if not profile_url or not isinstance(profile_url, str):
        raise InvalidURLError("No profileUrl given.")
    if "linkedin.com/" not in profile_url:
        raise InvalidURLError("The given URL to scrape is not a linkedin.com url.")
    return profile_url


def build_options(options: Union[ScraperOptions, Dict[str, Any], None] = None, **overrides: Any) -> ScraperOptions:
    """Validate user options into `ScraperOptions`.

    Any problem becomes a `ConfigurationError` naming the first offending
    option, e.g. `Option "keep_alive" needs to be a boolean.`
    """
    if isinstance(options, ScraperOptions) and not overrides:
        return options
    data = options.model_dump() if isinstance(options, ScraperOptions) else dict(options or {})
    data.update(overrides)
    if not data.get("session_cookie_value"):
        raise ConfigurationError('Error during setup. Option "session_cookie_value" is required.')
    try:
        return ScraperOptions(**data)
    except ValidationError as err:
        first = err.errors()[0]
        option = ".".join(str(p) for p in first.get("loc", ())) or "options"
        raise ConfigurationError(f'Error during setup. Option "{option}" is invalid: {first.get("msg")}') from err


class LinkedInProfileScraper:
    """Owns one Chromium instance and scrapes LinkedIn profiles with it.

    Usage::

        scraper = LinkedInProfileScraper(session_cookie_value="AQED...")
        await scraper.setup()
        await scraper.check_if_logged_in()
        result = await scraper.run("https://www.linkedin.com/in/someone/")

    Or as an async context manager, which closes the browser on exit.
    One run at a time: a concurrent `run` on the same instance raises
    `SessionBusyError`. Use one instance per concurrent profile.
    """

    def __init__(
        self,
        options: Union[ScraperOptions, Dict[str, Any], None] = None,
        extractors: Optional[Sequence[SectionExtractor]] = None,
        host_policy: Optional[HostBlockPolicy] = None,
        **kwargs: Any,
    ):
        self.options = build_options(options, **kwargs)
        self.extractors: List[SectionExtractor] = list(extractors) if extractors is not None else default_extractors()
        self.host_policy = host_policy or default_policy()
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self._run_lock = asyncio.Lock()
        status_log("constructing", f"Using options: {self.options.redacted()}")

    @classmethod
    async def open(cls, session_cookie_value: Any, **options: Any) -> "LinkedInProfileScraper":
        """Validate options, launch the browser and return a ready scraper."""
        scraper = cls(session_cookie_value=session_cookie_value, **options)
        await scraper.setup()
        return scraper

    async def __aenter__(self) -> "LinkedInProfileScraper":
        if self.browser is None:
            await self.setup()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def is_open(self) -> bool:
        return self.browser is not None

    async def setup(self) -> None:
        """Launch Chromium so the browser can be reused across runs."""
        log_section = "setup"
        if self.browser is not None:
            return
        status_log(log_section, f"Launching Chromium in the {'background' if self.options.headless else 'foreground'}...")
        try:
            self.playwright, self.browser = await browser_ops.launch_browser(headless=self.options.headless)
            self.context = await browser_ops.new_context(self.browser, self.options)
        except (LaunchError, PlaywrightError) as err:
            status_log(log_section, "An error occurred during setup.", level=logging.ERROR)
            try:
                await self.close()
            except ScraperError as close_err:
                status_log(log_section, f"Cleanup after failed setup failed too: {close_err}", level=logging.ERROR)
            if isinstance(err, LaunchError):
                raise
            raise LaunchError(f"Could not prepare the browser: {err}") from err
        status_log(log_section, "Chromium launched!")

    async def _new_page(self) -> Page:
        if self.context is None:
            raise SessionNotOpenError("Browser is not set. Please run the setup method first.")
        return await browser_ops.create_page(self.context, self.options, self.host_policy)

    async def check_if_logged_in(self) -> bool:
        """Check that the session cookie is still accepted.

        LinkedIn redirects a logged-in visitor from /login to the feed; still
        being on /login afterwards means the cookie expired. Only a
        throwaway page is used, so this can run at any time.
        """
        log_section = "checkIfLoggedIn"
        page = await self._new_page()
        try:
            status_log(log_section, "Checking if we are still logged in...")
            await goto(page, LOGIN_URL, self.options.timeout)
            is_logged_in = not is_login_page(page.url)
        finally:
            await page.close()

        if not is_logged_in:
            message = (
                "Bad news, we are not logged in! Your session seems to be expired. "
                'Log in with your browser again and copy the "li_at" cookie value '
                'into the "session_cookie_value" option.'
            )
            status_log(log_section, message, level=logging.WARNING)
            raise SessionExpiredError(message)
        status_log(log_section, "All good. We are still logged in.")
        return True

    async def run(
        self,
        profile_url: str,
        watermark: Union[SyncWatermark, Dict[str, Any], None] = None,
    ) -> ScrapeResult:
        """Scrape every section of a profile and return one aggregated result.

        Posts and comments with an id at or below `watermark` are left out.
        The browser is closed afterwards, or only the page when
        `keep_alive` is set, whether the run succeeded or not. A failure
        in any section fails the whole run; no partial result is returned.
        """
        log_section = "run"
        profile_url = validate_profile_url(profile_url)
        if isinstance(watermark, dict):
            watermark = SyncWatermark(**watermark)
        if self.browser is None:
            raise SessionNotOpenError("Browser is not set. Please run the setup method first.")
        if self._run_lock.locked():
            raise SessionBusyError("A run is already in progress on this scraper session.")

        async with self._run_lock:
            session_id = int(time.time() * 1000)
            page: Optional[Page] = None
            try:
                page = await self._new_page()
                raw = await self._extract_all(page, profile_url, session_id)
                result = build_result(raw, watermark)
                status_log(
                    log_section,
                    f"Done! Returned profile details for: {profile_url} "
                    f"({len(result.posts)} new posts, {len(result.comments)} new comments)",
                    session_id,
                )
            except BaseException as err:
                status_log(log_section, f"An error occurred during a run: {err}", session_id, level=logging.ERROR)
                if self.options.debug and page is not None and isinstance(err, ExtractionError):
                    await save_debug_files(page, "run_failure")
                await self._release(page, suppress=True)
                raise
            await self._release(page)
            return result

    async def _extract_all(self, page: Page, profile_url: str, session_id: int) -> Dict[str, list]:
        """Run every extractor in order; consecutive ones sharing a URL share one load."""
        raw: Dict[str, list] = {}
        loaded_url: Optional[str] = None
        for extractor in self.extractors:
            url = extractor.url_for(profile_url)
            if url != loaded_url:
                await extractor.load(page, profile_url, self.options, session_id)
                loaded_url = url
            raw[extractor.field] = await extractor.query(page, session_id)
        return raw

    async def _release(self, page: Optional[Page], suppress: bool = False) -> None:
        log_section = "run"
        try:
            if self.options.keep_alive:
                if page is not None:
                    await page.close()
                status_log(log_section, "Done. Chromium is being kept alive in memory.")
            else:
                status_log(log_section, "Not keeping the session alive.")
                await self.close(page)
                status_log(log_section, "Done. Chromium is closed.")
        except (ScraperError, PlaywrightError) as err:
            if not suppress:
                raise
            status_log(log_section, f"Cleanup failed after an earlier error: {err}", level=logging.ERROR)

    async def close(self, page: Optional[Page] = None) -> None:
        """Close `page`, then the browser, then stop the driver process.

        Every step is attempted even if an earlier one failed; the first
        error is raised once all of them ran.
        """
        log_section = "close"
        first_error: Optional[BaseException] = None

        if page is not None:
            try:
                status_log(log_section, "Closing page...")
                await page.close()
                status_log(log_section, "Closed page!")
            except PlaywrightError as err:
                first_error = err

        playwright, browser = self.playwright, self.browser
        self.playwright = self.browser = self.context = None
        browser_error = await browser_ops.close_browser(playwright, browser)
        first_error = first_error or browser_error

        if first_error is not None:
            if isinstance(first_error, ScraperError):
                raise first_error
            raise ScraperError(f"Failed to close the browser cleanly: {first_error}") from first_error
