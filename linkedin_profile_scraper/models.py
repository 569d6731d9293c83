from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .config import (
    BLOCK_IMAGES,
    DEFAULT_USER_AGENT,
    HEADLESS,
    SCROLL_DISTANCE_PX,
    SCROLL_INTERVAL_MS,
    SETTLE_DELAY_MS,
    TIMEOUT_MS,
)


class ScraperOptions(BaseModel):
    """Per-session options for `LinkedInProfileScraper`.

    Types are strict so that a caller passing `"false"` for a boolean or a
    float timeout gets a configuration error instead of a silent coercion.
    """
    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    session_cookie_value: str = Field(min_length=1)
    keep_alive: bool = False
    user_agent: str = DEFAULT_USER_AGENT
    timeout: int = Field(default=TIMEOUT_MS, gt=0)
    headless: bool = HEADLESS
    settle_delay: int = Field(default=SETTLE_DELAY_MS, ge=0)
    scroll_distance: int = Field(default=SCROLL_DISTANCE_PX, gt=0)
    scroll_interval: int = Field(default=SCROLL_INTERVAL_MS, ge=0)
    block_images: bool = BLOCK_IMAGES
    debug: bool = False

    def redacted(self) -> dict:
        """Options as a dict that is safe to log."""
        data = self.model_dump()
        data["session_cookie_value"] = "***"
        return data


class SyncWatermark(BaseModel):
    """Highest feed identifiers already delivered to the caller.

    Zero means there is no history and every item is new. Identifiers are
    accepted as strings too, since they routinely exceed 2**53.
    """
    model_config = ConfigDict(frozen=True)

    last_post_id: int = Field(default=0, ge=0)
    last_comment_id: int = Field(default=0, ge=0)


# Raw records: strings as read from the DOM, before any normalization.


class RawProfile(BaseModel):
    full_name: Optional[str] = None
    pronouns: Optional[str] = None
    title: Optional[str] = None
    location: Optional[str] = None
    about: Optional[str] = None
    photo: Optional[str] = None
    url: str = ""


class RawCard(BaseModel):
    """One list item of the education, licenses or languages cards."""
    section: str
    name: Optional[str] = None
    detail: Optional[str] = None
    caption: Optional[str] = None


class RawEntry(BaseModel):
    """A time-bounded entry of the experience or volunteering pages."""
    title: Optional[str] = None
    company: Optional[str] = None
    dates: Optional[str] = None
    description: Optional[str] = None


class RawHonor(BaseModel):
    title: Optional[str] = None
    issuer: Optional[str] = None
    date: Optional[str] = None
    description: Optional[str] = None


class RawSkill(BaseModel):
    skill_name: Optional[str] = None


class RawPost(BaseModel):
    id: str
    text: Optional[str] = None
    reactions: Optional[str] = None
    comments: Optional[str] = None
    shares: Optional[str] = None


class RawComment(BaseModel):
    id: str
    post_id: str
    text: Optional[str] = None


# Normalized records returned to callers.


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class Location(_Record):
    city: Optional[str] = None
    province: Optional[str] = None
    country: Optional[str] = None


class Profile(_Record):
    full_name: Optional[str] = None
    pronouns: Optional[str] = None
    title: Optional[str] = None
    location: Optional[Location] = None
    about: Optional[str] = None
    photo: Optional[str] = None
    url: str


class Experience(_Record):
    title: Optional[str] = None
    company: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    description: Optional[str] = None


class Volunteering(Experience):
    pass


class Education(_Record):
    school_name: Optional[str] = None
    degree_name: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    duration_in_days: Optional[int] = None


class License(_Record):
    license_name: Optional[str] = None
    license_body: Optional[str] = None


class Language(_Record):
    language_name: Optional[str] = None
    language_level: Optional[str] = None


class Skill(_Record):
    skill_name: Optional[str] = None


class Honor(_Record):
    title: Optional[str] = None
    issuer: Optional[str] = None
    date: Optional[str] = None
    description: Optional[str] = None


class Post(_Record):
    """A post or repost from the profile's activity feed.

    `created_at` is decoded from the activity id, not read from the page.
    """
    id: int
    text: Optional[str] = None
    created_at: datetime
    created_at_human: str
    likes: Optional[int] = None
    comments: Optional[int] = None
    shares: Optional[int] = None
    url: str


class Comment(_Record):
    id: int
    post_id: int
    text: Optional[str] = None
    created_at: datetime
    created_at_human: str
    url: str


class ScrapeResult(_Record):
    """Everything one `run` produced for a profile.

    Posts and comments are already filtered by the caller's watermark.
    """
    profile: Profile
    experiences: List[Experience] = []
    education: List[Education] = []
    licenses: List[License] = []
    languages: List[Language] = []
    skills: List[Skill] = []
    volunteerings: List[Volunteering] = []
    honors: List[Honor] = []
    posts: List[Post] = []
    comments: List[Comment] = []
