from contextlib import asynccontextmanager
from typing import Optional, Union

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from linkedin_profile_scraper import LinkedInProfileScraper, ScraperError, SyncWatermark
from linkedin_profile_scraper.config import HEADLESS, SESSION_COOKIE_VALUE, TIMEOUT_MS
from linkedin_profile_scraper.scraper_logging import init_logging, status_log
from response import build_error, build_response, status_code_for


@asynccontextmanager
async def lifespan(_app: FastAPI):
    init_logging()
    yield


app = FastAPI(title="LinkedIn Profile Scraper", lifespan=lifespan)


class ProfileRequest(BaseModel):
    """Payload for `POST /scrape/profile`.

    The session cookie falls back to `LINKEDIN_SESSION_COOKIE_VALUE` so a
    deployment can keep the credential out of request bodies. Ids are
    accepted as strings because they do not fit a JavaScript number.
    """
    url: str
    session_cookie_value: Optional[str] = None
    last_post_id: Union[int, str] = 0
    last_comment_id: Union[int, str] = 0
    headless: bool = HEADLESS
    timeout: int = TIMEOUT_MS
    check_login: bool = True


class SessionCheckRequest(BaseModel):
    session_cookie_value: Optional[str] = None
    timeout: int = TIMEOUT_MS


def _options(cookie: Optional[str], **extra) -> dict:
    return {"session_cookie_value": cookie or SESSION_COOKIE_VALUE, **extra}


@app.post("/scrape/profile")
async def scrape_profile(data: ProfileRequest):
    try:
        watermark = SyncWatermark(last_post_id=data.last_post_id, last_comment_id=data.last_comment_id)
    except ValueError as e:
        return JSONResponse(status_code=400, content=build_error(data.url, e))

    try:
        options = _options(data.session_cookie_value, headless=data.headless, timeout=data.timeout)
        async with LinkedInProfileScraper(options) as scraper:
            if data.check_login:
                await scraper.check_if_logged_in()
            result = await scraper.run(data.url, watermark)
    except ScraperError as e:
        status_log("api", f"Scrape of {data.url} failed: {type(e).__name__}: {e}")
        return JSONResponse(status_code=status_code_for(e), content=build_error(data.url, e))

    return build_response(data.url, result, watermark)


@app.post("/session/check")
async def check_session(data: SessionCheckRequest):
    try:
        async with LinkedInProfileScraper(_options(data.session_cookie_value, timeout=data.timeout)) as scraper:
            await scraper.check_if_logged_in()
    except ScraperError as e:
        return JSONResponse(status_code=status_code_for(e), content=build_error(None, e))
    return {"logged_in": True}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8787)
