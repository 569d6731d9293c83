import logging
from typing import Optional, Tuple

from playwright.async_api import Browser, BrowserContext, Page, Playwright, Request, Route
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from .blocked_hosts import HostBlockPolicy, get_hostname
from .config import BLOCKED_RESOURCE_TYPES, BLOCKED_RESOURCE_TYPES_BY_HOST, SLOW_MO_MS, browser_args
from .cookies_auth import apply_session_cookie
from .errors import LaunchError, NavigationError
from .models import ScraperOptions
from .scraper_logging import status_log


async def launch_browser(headless: bool = True) -> Tuple[Playwright, Browser]:
    """Start the Playwright driver and one Chromium instance.

    Both handles are returned so the caller owns their lifetime; nothing is
    kept at module level. On failure the driver is stopped before a
    `LaunchError` is raised.
    """
    playwright = await async_playwright().start()
    try:
        browser = await playwright.chromium.launch(
            headless=headless,
            slow_mo=SLOW_MO_MS if SLOW_MO_MS > 0 else None,
            args=browser_args(),
        )
    except PlaywrightError as err:
        try:
            await playwright.stop()
        except PlaywrightError as stop_err:
            status_log("setup", f"Stopping the browser driver failed too: {stop_err}", level=logging.ERROR)
        raise LaunchError(f"Could not launch Chromium: {err}") from err
    return playwright, browser


async def new_context(browser: Browser, options: ScraperOptions) -> BrowserContext:
    """Create the single context a session renders all its pages in."""
    context = await browser.new_context(
        user_agent=options.user_agent,
        viewport={"width": 1200, "height": 720},
        locale="en-US",
        bypass_csp=True,
        extra_http_headers={"Accept-Language": "en-US,en;q=0.9"},
    )
    context.set_default_navigation_timeout(options.timeout)
    context.set_default_timeout(options.timeout)
    return context


def blocked_resource_types(block_images: bool):
    if block_images:
        return BLOCKED_RESOURCE_TYPES | {"image"}
    return BLOCKED_RESOURCE_TYPES


def should_abort(resource_type: str, url: str, policy: HostBlockPolicy, block_images: bool = False) -> bool:
    """Decide whether an outgoing request is aborted or continued.

    Whole resource types we never read are dropped; scripts, XHR and
    documents are dropped only when they come from a blocked host.
    """
    if resource_type in blocked_resource_types(block_images):
        return True
    if resource_type in BLOCKED_RESOURCE_TYPES_BY_HOST:
        return policy.should_block(get_hostname(url))
    return False


async def create_page(context: BrowserContext, options: ScraperOptions, policy: HostBlockPolicy) -> Page:
    """Open a page with request blocking wired and the session cookie set."""
    log_section = "setup page"
    page = await context.new_page()

    status_log(log_section, f"Blocking the following resources: {', '.join(sorted(blocked_resource_types(options.block_images)))}")
    status_log(log_section, f"Should block scripts from {len(policy)} unwanted hosts to speed up the crawling.")

    async def _route(route: Route, request: Request) -> None:
        if should_abort(request.resource_type, request.url, policy, options.block_images):
            status_log("blocked", f"{request.resource_type}: {request.url}", level=logging.DEBUG)
            await route.abort()
        else:
            await route.continue_()

    try:
        await page.route("**/*", _route)
        await apply_session_cookie(context, options.session_cookie_value)
    except PlaywrightError as err:
        status_log(log_section, f"An error occurred during page setup: {err}", level=logging.ERROR)
        try:
            await page.close()
        except PlaywrightError as close_err:
            status_log(log_section, f"Closing the half-prepared page failed too: {close_err}", level=logging.ERROR)
        raise NavigationError(f"Could not prepare the page: {err}") from err
    status_log(log_section, "Session cookie set!")
    return page


async def close_browser(playwright: Optional[Playwright], browser: Optional[Browser]) -> Optional[BaseException]:
    """Close the browser, then stop the driver, which ends the process tree.

    Both steps always run. A browser or driver that is already gone counts
    as closed. Returns the first error instead of raising so the caller can
    finish its own cleanup before propagating it.
    """
    log_section = "close"
    first_error: Optional[BaseException] = None

    if browser is not None:
        try:
            status_log(log_section, "Closing browser...")
            await browser.close()
            status_log(log_section, "Closed browser!")
        except PlaywrightError as err:
            if not _already_exited(err):
                first_error = err
                status_log(log_section, f"Failed to close browser: {err}", level=logging.ERROR)

    if playwright is not None:
        try:
            status_log(log_section, "Stopping browser driver...")
            await playwright.stop()
            status_log(log_section, "Browser driver stopped.")
        except PlaywrightError as err:
            if not _already_exited(err) and first_error is None:
                first_error = err
                status_log(log_section, f"Failed to stop browser driver: {err}", level=logging.ERROR)

    return first_error


def _already_exited(err: BaseException) -> bool:
    message = str(err).lower()
    return any(k in message for k in ["has been closed", "target closed", "connection closed", "not connected"])
