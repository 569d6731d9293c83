import os


COOKIES_FILE = os.environ.get("LINKEDIN_COOKIES_PATH", "cookies.json")
SESSION_COOKIE_VALUE = os.environ.get("LINKEDIN_SESSION_COOKIE_VALUE", "")
TIMEOUT_MS = int(os.environ.get("SCRAPER_TIMEOUT_MS", "10000"))
HEADLESS = os.environ.get("SCRAPER_HEADLESS", "true").lower() not in ["0", "false", "no"]
SETTLE_DELAY_MS = int(os.environ.get("SCRAPER_SETTLE_DELAY_MS", "5000"))
SLOW_MO_MS = int(os.environ.get("SCRAPER_SLOW_MO_MS", "0"))
BLOCK_IMAGES = os.environ.get("SCRAPER_BLOCK_IMAGES", "true").lower() != "false"
LOG_LEVEL = os.environ.get("SCRAPER_LOG_LEVEL", "INFO")

LINKEDIN_BASE_URL = "https://www.linkedin.com"
LOGIN_URL = f"{LINKEDIN_BASE_URL}/login"
SESSION_COOKIE_NAME = "li_at"
SESSION_COOKIE_DOMAIN = ".www.linkedin.com"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)

# Progressive-load tuning: pixels per scroll step and pause between steps.
SCROLL_DISTANCE_PX = 500
SCROLL_INTERVAL_MS = 100
SCROLL_MAX_STEPS = 400

# Never block "stylesheet": LinkedIn does not render its lists without CSS.
BLOCKED_RESOURCE_TYPES = frozenset(
    ["media", "font", "texttrack", "object", "beacon", "csp_report", "imageset"]
)
BLOCKED_RESOURCE_TYPES_BY_HOST = frozenset(["script", "xhr", "fetch", "document"])


def browser_args():
    """Return Chromium launch flags.

    Kept small: sandbox and shared-memory flags that make containers happy,
    plus switches that stop background work we never look at.
    """
    return [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage",
        "--disable-accelerated-2d-canvas",
        "--disable-gpu",
        "--hide-scrollbars",
        "--mute-audio",
        "--no-first-run",
        "--disable-extensions",
        "--disable-background-networking",
        "--disable-background-timer-throttling",
        "--disable-renderer-backgrounding",
    ]
