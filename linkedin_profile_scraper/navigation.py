from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from .config import SCROLL_DISTANCE_PX, SCROLL_INTERVAL_MS, SCROLL_MAX_STEPS
from .errors import ExtractionError, NavigationError
from .scraper_logging import status_log


def section_url(profile_url: str, path: str = "") -> str:
    """Join a profile URL and a section path such as `details/skills/`.

    Profile URLs are passed around with and without a trailing slash; the
    section pages only resolve when exactly one slash separates the parts.
    """
    base = profile_url.split("?", 1)[0].split("#", 1)[0]
    if not base.endswith("/"):
        base += "/"
    return base + path.lstrip("/")


async def goto(page: Page, url: str, timeout_ms: int, settle_delay_ms: int = 0, session_id=None) -> None:
    """Navigate, then give client-side rendering a fixed time to settle.

    Playwright timeouts and network failures surface as `NavigationError`.
    """
    try:
        await page.goto(url, timeout=timeout_ms, wait_until="domcontentloaded")
    except PlaywrightError as err:
        raise NavigationError(f"Navigation to {url} failed: {err}") from err
    if settle_delay_ms > 0:
        status_log("navigate", f"Waiting {settle_delay_ms}ms for {url} to settle", session_id)
        await page.wait_for_timeout(settle_delay_ms)


async def auto_scroll(
    page: Page,
    distance: int = SCROLL_DISTANCE_PX,
    interval_ms: int = SCROLL_INTERVAL_MS,
    max_steps: int = SCROLL_MAX_STEPS,
) -> int:
    """Scroll down in fixed steps until the page stops growing.

    LinkedIn renders list items only as they come into view. Each tick
    reads the document height, scrolls one step and stops once the total
    distance scrolled has caught up with the height, i.e. no new content
    was appended while we scrolled. Returns the number of steps taken.
    """
    total_height = 0
    steps = 0
    try:
        while steps < max_steps:
            scroll_height = await page.evaluate("document.body.scrollHeight")
            await page.evaluate("(distance) => window.scrollBy(0, distance)", distance)
            total_height += distance
            steps += 1
            if total_height >= (scroll_height or 0):
                break
            await page.wait_for_timeout(interval_ms)
    except PlaywrightError as err:
        raise ExtractionError(f"Scrolling {page.url} failed: {err}") from err
    return steps
