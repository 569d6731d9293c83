import logging
import os
import sys
import tempfile
import time
from typing import Optional

from .config import LOG_LEVEL

logger = logging.getLogger("linkedin_profile_scraper")

_INITIALIZED = False


def init_logging(level: Optional[str] = None) -> None:
    """Attach a single stderr handler to the root logger.

    Safe to call more than once; later calls are no-ops so the CLI and the
    API can both call it without duplicating output. Logs go to stderr;
    stdout is reserved for the CLI JSON output.
    """
    global _INITIALIZED
    if _INITIALIZED:
        return

    log_level = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(log_level)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        root_logger.addHandler(handler)

    _INITIALIZED = True


def status_log(section: str, message: str, session_id: Optional[int] = None, level: int = logging.INFO) -> None:
    """Log one progress line, tagged with the phase and the run it belongs to."""
    if session_id is not None:
        logger.log(level, "[%s] (%s) %s", section, session_id, message)
    else:
        logger.log(level, "[%s] %s", section, message)


async def save_debug_files(page, prefix: str = "debug") -> Optional[dict]:
    """Save a full-page screenshot and HTML content to the temp dir for diagnostics.

    Returns a map with file paths or None if saving fails. Only used when
    the session runs with `debug=True`.
    """
    try:
        ts = int(time.time() * 1000)
        base = os.path.join(tempfile.gettempdir(), f"{prefix}_{ts}")
        screenshot_path = f"{base}.png"
        html_path = f"{base}.html"
        await page.screenshot(path=screenshot_path, full_page=True)
        content = await page.content()
        with open(html_path, "w", encoding="utf-8") as f:
            f.write(content)
        status_log("debug", f"Saved debug files: {screenshot_path}, {html_path}")
        return {"screenshot": screenshot_path, "html": html_path}
    except Exception as e:
        status_log("debug", f"Could not save debug files: {e}", level=logging.WARNING)
        return None
