import json
import os
import re
from typing import Optional
from urllib.parse import urlparse

from playwright.async_api import BrowserContext

from .config import COOKIES_FILE, SESSION_COOKIE_DOMAIN, SESSION_COOKIE_NAME


def load_session_cookie(path: str = COOKIES_FILE) -> Optional[str]:
    """Read the `li_at` value from a browser cookie export (JSON list).

    Only LinkedIn-scoped cookies are considered and whitespace that sneaks
    in when copying values by hand is stripped. Returns None when the file
    is missing, unreadable, or holds no session cookie.
    """
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            cookies = json.load(f)
    except (OSError, ValueError):
        return None
    if not isinstance(cookies, list):
        return None

    for c in cookies:
        if not isinstance(c, dict):
            continue
        if "linkedin.com" not in str(c.get("domain", "")):
            continue
        if c.get("name") != SESSION_COOKIE_NAME:
            continue
        value = re.sub(r"\s+", "", str(c.get("value") or ""))
        if value:
            return value
    return None


def session_cookie(value: str) -> dict:
    return {
        "name": SESSION_COOKIE_NAME,
        "value": value,
        "domain": SESSION_COOKIE_DOMAIN,
        "path": "/",
        "httpOnly": True,
        "secure": True,
        "sameSite": "None",
    }


async def apply_session_cookie(context: BrowserContext, value: str) -> None:
    await context.add_cookies([session_cookie(value)])


def is_login_page(url: str) -> bool:
    """True when `url` is still LinkedIn's login form.

    A valid session is redirected from /login to the feed, so staying on
    /login is read as an expired cookie.
    """
    path = urlparse(url).path.rstrip("/")
    return path.endswith("/login")
