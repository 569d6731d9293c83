#!/usr/bin/env python3
"""
LinkedIn Profile Scraper - CLI

Scrapes a LinkedIn profile (identity, experience, education, licenses,
languages, skills, volunteering, honors, posts and comments) with a
logged-in session cookie and prints the result as JSON.

Usage:
    python scraper.py <LINKEDIN_URL> [OPTIONS]

Example:
    python scraper.py https://www.linkedin.com/in/johndoe/ --cookie AQEDAR...
    python scraper.py https://www.linkedin.com/in/johndoe/ --watermark-file johndoe.state.json
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from linkedin_profile_scraper import LinkedInProfileScraper, ScrapeResult, ScraperError, SyncWatermark
from linkedin_profile_scraper.config import COOKIES_FILE, HEADLESS, SESSION_COOKIE_VALUE, TIMEOUT_MS
from linkedin_profile_scraper.cookies_auth import load_session_cookie
from linkedin_profile_scraper.scraper_logging import init_logging
from linkedin_profile_scraper.sync import next_watermark
from response import build_response

logger = logging.getLogger("scraper")


def read_watermark(path: Optional[str]) -> SyncWatermark:
    """Load the stored watermark; a missing file means a first run."""
    if not path or not Path(path).exists():
        return SyncWatermark()
    with open(path, "r", encoding="utf-8") as f:
        return SyncWatermark(**json.load(f))


def write_watermark(path: str, watermark: SyncWatermark) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(watermark.model_dump(), f, indent=2)


def resolve_cookie(cookie: Optional[str], cookies_path: Optional[str]) -> Optional[str]:
    """Credential from the flag, then the environment, then a cookie export file."""
    return cookie or SESSION_COOKIE_VALUE or load_session_cookie(cookies_path or COOKIES_FILE)


async def scrape_profile(
    url: str,
    options: dict,
    watermark: Optional[SyncWatermark] = None,
    check_login: bool = True,
) -> ScrapeResult:
    """Open a session, verify the login, scrape `url` and close the session."""
    async with LinkedInProfileScraper(options) as scraper:
        if check_login:
            await scraper.check_if_logged_in()
        return await scraper.run(url, watermark)


async def check_login(options: dict) -> bool:
    async with LinkedInProfileScraper(options) as scraper:
        return await scraper.check_if_logged_in()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="LinkedIn Profile Scraper - Scrape a LinkedIn profile into JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s https://www.linkedin.com/in/johndoe/
  %(prog)s https://www.linkedin.com/in/johndoe/ --headless false --timeout 30000
  %(prog)s https://www.linkedin.com/in/johndoe/ --watermark-file johndoe.json -o johndoe.out.json
  %(prog)s --check-login
        """,
    )
    parser.add_argument(
        "url",
        nargs="?",
        help="LinkedIn profile URL to scrape (e.g., https://www.linkedin.com/in/username/)",
    )
    parser.add_argument(
        "--cookie",
        help="Value of the li_at session cookie (default: $LINKEDIN_SESSION_COOKIE_VALUE)",
    )
    parser.add_argument(
        "--cookies",
        help=f"Path to an exported cookies.json to read li_at from (default: {COOKIES_FILE})",
    )
    parser.add_argument(
        "--headless",
        type=lambda x: x.lower() in ("true", "1", "yes"),
        default=HEADLESS,
        help="Run browser in headless mode (default: true)",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=TIMEOUT_MS,
        help=f"Navigation timeout in milliseconds (default: {TIMEOUT_MS})",
    )
    parser.add_argument("--user-agent", help="User agent presented to LinkedIn")
    parser.add_argument("--last-post-id", default="0", help="Only return posts newer than this id")
    parser.add_argument("--last-comment-id", default="0", help="Only return comments newer than this id")
    parser.add_argument(
        "--watermark-file",
        help="JSON file holding last_post_id/last_comment_id; read before and updated after the run",
    )
    parser.add_argument(
        "--check-login",
        action="store_true",
        help="Only check whether the session cookie is still valid",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Save a screenshot and HTML of the page when extraction fails",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: $SCRAPER_LOG_LEVEL or INFO)")
    parser.add_argument(
        "--output",
        "-o",
        help="Output file path (JSON format). If not specified, prints to stdout",
    )
    return parser


def main(argv=None) -> int:
    """Main CLI entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    init_logging(args.log_level)

    if not args.check_login and not args.url:
        parser.error("a profile URL is required unless --check-login is given")

    url = args.url
    if url and not url.startswith("http"):
        url = f"https://{url}"

    options = {
        "session_cookie_value": resolve_cookie(args.cookie, args.cookies),
        "headless": args.headless,
        "timeout": args.timeout,
        "debug": args.debug,
    }
    if args.user_agent:
        options["user_agent"] = args.user_agent

    try:
        if args.check_login:
            asyncio.run(check_login(options))
            print(json.dumps({"logged_in": True}))
            return 0

        if args.watermark_file:
            watermark = read_watermark(args.watermark_file)
        else:
            watermark = SyncWatermark(last_post_id=args.last_post_id, last_comment_id=args.last_comment_id)

        result = asyncio.run(scrape_profile(url, options, watermark))
        body = build_response(url, result, watermark)

        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                json.dump(body, f, indent=2, ensure_ascii=False)
            logger.info("Results saved to: %s", args.output)
        else:
            print(json.dumps(body, indent=2, ensure_ascii=False))

        if args.watermark_file:
            write_watermark(args.watermark_file, next_watermark(result, watermark))
        return 0

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except ScraperError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1
    except ValueError as e:
        # Malformed watermark input.
        logger.error("Invalid input: %s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
