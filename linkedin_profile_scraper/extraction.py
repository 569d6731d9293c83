"""Section extractors: one per LinkedIn page we read.

Each extractor owns everything that knows about LinkedIn markup for its
section: the URL it lives at, the script evaluated in the page, and the
positional heuristics that turn the returned strings into raw records.
Values are not cleaned here; see `normalization.py`. When the markup
changes, only the matching extractor needs replacing.
"""
import re
from typing import Any, List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from .errors import ExtractionError
from .models import (
    RawCard,
    RawComment,
    RawEntry,
    RawHonor,
    RawPost,
    RawProfile,
    RawSkill,
    ScraperOptions,
)
from .navigation import auto_scroll, goto, section_url
from .scraper_logging import status_log

# Placeholder LinkedIn shows instead of list items on an empty section.
EMPTY_STATE_MARKER = "Nothing to see"

_POST_URN_RE = re.compile(r"urn:li:(?:activity|ugcPost|share):(\d+)")
_COMMENT_ID_RE = re.compile(r"\((?:urn:li:)?(?:activity|ugcPost):(\d+),\s*(\d+)\)")


def visible_lines(text: Optional[str]) -> List[str]:
    """Lines of an `innerText` block with the screen-reader duplicates removed.

    LinkedIn renders every visible label twice, once for screen readers,
    so the real fields are the even-indexed lines.
    """
    if not text:
        return []
    return [line for index, line in enumerate(text.split("\n")) if index % 2 == 0]


def _at(items: List[str], index: int) -> Optional[str]:
    return items[index] if index < len(items) else None


def _joined(items: List[str]) -> Optional[str]:
    rest = [i for i in items if i and i.strip()]
    return ", ".join(rest) if rest else None


def _is_empty_state(label: Optional[str]) -> bool:
    return bool(label) and EMPTY_STATE_MARKER in label


class SectionExtractor:
    """Navigate to a section page, wait for it to render, read its records.

    Subclasses set `path`, `script` and implement `parse()`. `extract()`
    runs the whole protocol; the session controller calls `load()` and
    `query()` separately when several extractors read the same page.
    """
    name = "section"
    field = "section"
    path = ""
    script = "() => []"
    settle_after_scroll = True

    def url_for(self, profile_url: str) -> str:
        return section_url(profile_url, self.path)

    async def load(self, page: Page, profile_url: str, options: ScraperOptions, session_id=None) -> None:
        url = self.url_for(profile_url)
        status_log(self.name, f"Navigating to LinkedIn {self.name}: {url}", session_id)
        await goto(page, url, options.timeout, options.settle_delay, session_id)
        status_log(self.name, f"LinkedIn {self.name} page loaded!", session_id)

        status_log(self.name, "Scrolling to the bottom so every lazily rendered item gets loaded...", session_id)
        steps = await auto_scroll(page, options.scroll_distance, options.scroll_interval)
        status_log(self.name, f"Scrolled {steps} steps", session_id)
        if self.settle_after_scroll and options.settle_delay > 0:
            await page.wait_for_timeout(options.settle_delay)

    async def query(self, page: Page, session_id=None) -> List[Any]:
        status_log(self.name, f"Parsing {self.name} data...", session_id)
        try:
            data = await page.evaluate(self.script)
        except PlaywrightError as err:
            raise ExtractionError(f"Could not query the {self.name} page: {err}") from err
        try:
            records = self.parse(data)
        except (TypeError, KeyError, AttributeError) as err:
            raise ExtractionError(f"Unexpected {self.name} page shape: {err}") from err
        status_log(self.name, f"Got {len(records)} raw {self.name} records", session_id)
        return records

    async def extract(self, page: Page, profile_url: str, options: ScraperOptions, session_id=None) -> List[Any]:
        await self.load(page, profile_url, options, session_id)
        return await self.query(page, session_id)

    def parse(self, data: Any) -> List[Any]:
        raise NotImplementedError

    @staticmethod
    def _require_list(data: Any, what: str) -> list:
        if not isinstance(data, list):
            raise TypeError(f"expected a list of {what}, got {type(data).__name__}")
        return data


class ProfileExtractor(SectionExtractor):
    name = "profile"
    field = "profile"
    path = ""
    settle_after_scroll = False
    script = """
    () => {
      const text = (selector) => document.querySelector(selector)?.textContent || null;
      const photo = document.querySelector(
        '.pv-top-card-profile-picture__image, .evi-image.ember-view.profile-photo-edit__preview'
      );
      return {
        fullName: text('.text-heading-xlarge.inline.t-24.v-align-middle.break-words') || text('main h1'),
        pronouns: text('.text-body-small.v-align-middle.break-words.t-black--light'),
        title: text('.text-body-medium.break-words'),
        location: text('.text-body-small.inline.t-black--light.break-words'),
        about: text('.display-flex.ph5.pv3 div div div span'),
        photo: photo ? photo.src : null,
        url: window.location.href,
      };
    }
    """

    def parse(self, data: Any) -> List[RawProfile]:
        if not isinstance(data, dict):
            raise TypeError(f"expected a profile object, got {type(data).__name__}")
        return [
            RawProfile(
                full_name=data.get("fullName"),
                pronouns=data.get("pronouns"),
                title=data.get("title"),
                location=data.get("location"),
                about=data.get("about"),
                photo=data.get("photo"),
                url=data.get("url") or "",
            )
        ]


class ProfileCardsExtractor(SectionExtractor):
    """Education, licenses & certifications and languages cards.

    These live on the main profile page; each list item is assigned to a
    card by the heading rendered just above its list.
    """
    name = "education, licenses and languages"
    field = "cards"
    path = ""
    settle_after_scroll = False
    script = """
    () => {
      const firstLine = (item, selector) => {
        const node = item.querySelector(selector);
        return node ? (node.innerText || '').split('\\n')[0] : null;
      };
      const cards = [];
      for (const item of document.querySelectorAll('.artdeco-list__item')) {
        const top = item.parentElement?.parentElement?.previousElementSibling;
        if (!top) continue;
        cards.push({
          heading: (top.textContent || '').trim(),
          name: firstLine(item, '.display-flex.flex-wrap.align-items-center.full-height'),
          detail: firstLine(item, '.t-14.t-normal'),
          light: firstLine(item, '.t-14.t-normal.t-black--light'),
          caption: firstLine(item, '.pvs-entity__caption-wrapper'),
        });
      }
      return cards;
    }
    """

    def parse(self, data: Any) -> List[RawCard]:
        cards: List[RawCard] = []
        for item in self._require_list(data, "cards"):
            heading = item.get("heading") or ""
            if _is_empty_state(item.get("name")):
                continue
            if "Education" in heading:
                cards.append(RawCard(section="education", name=item.get("name"), detail=item.get("detail"), caption=item.get("caption")))
            elif "Licenses & certifications" in heading:
                cards.append(RawCard(section="licenses", name=item.get("name"), detail=item.get("detail")))
            elif "Languages" in heading:
                cards.append(RawCard(section="languages", name=item.get("name"), detail=item.get("light")))
        return cards


PAGED_LIST_ITEMS_SCRIPT = """
() => Array.from(document.querySelectorAll('.pvs-list__paged-list-item')).map((el) => el.innerText || '')
"""


class ExperienceExtractor(SectionExtractor):
    name = "experience"
    field = "experiences"
    path = "details/experience/"
    script = PAGED_LIST_ITEMS_SCRIPT

    def parse(self, data: Any) -> List[RawEntry]:
        entries: List[RawEntry] = []
        for text in self._require_list(data, "list item texts"):
            lines = visible_lines(text)
            if not lines or _is_empty_state(lines[0]):
                continue
            entries.append(
                RawEntry(
                    title=_at(lines, 0),
                    company=_at(lines, 1),
                    dates=_at(lines, 2),
                    description=_joined(lines[3:]),
                )
            )
        return entries


class VolunteeringExtractor(ExperienceExtractor):
    name = "volunteering"
    field = "volunteerings"
    path = "details/volunteering-experiences/"


class HonorsExtractor(SectionExtractor):
    name = "honors"
    field = "honors"
    path = "details/honors/"
    script = PAGED_LIST_ITEMS_SCRIPT

    def parse(self, data: Any) -> List[RawHonor]:
        honors: List[RawHonor] = []
        for text in self._require_list(data, "list item texts"):
            lines = visible_lines(text)
            if not lines or _is_empty_state(lines[0]):
                continue
            # Second line reads "Issuer · Mon YYYY".
            issuer_line = (_at(lines, 1) or "").split(" · ")
            honors.append(
                RawHonor(
                    title=_at(lines, 0),
                    issuer=_at(issuer_line, 0),
                    date=_at(issuer_line, 1),
                    description=_joined(lines[2:]),
                )
            )
        return honors


class SkillsExtractor(SectionExtractor):
    name = "skills"
    field = "skills"
    path = "details/skills/"
    script = """
    () => Array.from(document.querySelectorAll('[data-field="skill_page_skill_topic"]'))
      .map((el) => (el.innerText || '').split('\\n')[0])
    """

    def parse(self, data: Any) -> List[RawSkill]:
        return [
            RawSkill(skill_name=name)
            for name in self._require_list(data, "skill names")
            if name and name.strip() and not _is_empty_state(name)
        ]


class PostsExtractor(SectionExtractor):
    name = "posts"
    field = "posts"
    path = "recent-activity/all/"
    script = """
    () => Array.from(document.querySelectorAll('.profile-creator-shared-feed-update__container')).map((post) => {
      const text = (selector) => post.querySelector(selector)?.textContent || null;
      return {
        urn: post.querySelector('[data-urn]')?.getAttribute('data-urn') || null,
        text: text('.break-words'),
        reactions: text('.social-details-social-counts__reactions-count'),
        comments: text('.social-details-social-counts__comments'),
        shares: text('.social-details-social-counts__item--right-aligned:not(.social-details-social-counts__comments)'),
      };
    })
    """

    def parse(self, data: Any) -> List[RawPost]:
        posts: List[RawPost] = []
        for item in self._require_list(data, "posts"):
            match = _POST_URN_RE.search(item.get("urn") or "")
            if not match:
                # Without an activity id a post can be neither dated nor synced.
                continue
            posts.append(
                RawPost(
                    id=match.group(1),
                    text=item.get("text"),
                    reactions=item.get("reactions"),
                    comments=item.get("comments"),
                    shares=item.get("shares"),
                )
            )
        return posts


class CommentsExtractor(SectionExtractor):
    """Comments the profile owner wrote, from their comment activity page.

    The page also shows other people's replies in each thread; those are
    dropped by comparing the author with the owner name in the page title
    ("Activity | Jane Doe | LinkedIn").
    """
    name = "comments"
    field = "comments"
    path = "recent-activity/comments/"
    script = """
    () => ({
      title: document.title,
      items: Array.from(document.getElementsByClassName('comments-comment-item')).map((item) => {
        const authorSpan = item.querySelector('.comments-post-meta__name-text');
        const hidden = authorSpan?.querySelector('span[aria-hidden="true"]');
        return {
          author: (hidden || authorSpan)?.innerText || null,
          dataId: item.getAttribute('data-id'),
          text: item.querySelector('.comments-comment-item__main-content')?.innerText || null,
        };
      }),
    })
    """

    @staticmethod
    def owner_from_title(title: Optional[str]) -> Optional[str]:
        parts = (title or "").split(" | ")
        return parts[1].strip() if len(parts) > 1 and parts[1].strip() else None

    def parse(self, data: Any) -> List[RawComment]:
        if not isinstance(data, dict):
            raise TypeError(f"expected a comments object, got {type(data).__name__}")
        owner = self.owner_from_title(data.get("title"))
        if owner is None:
            status_log(self.name, "Could not read the profile owner from the page title; no comments kept")
            return []

        comments: List[RawComment] = []
        seen_texts = set()
        for item in self._require_list(data.get("items"), "comments"):
            author = (item.get("author") or "").strip()
            text = item.get("text")
            if author != owner or text in seen_texts:
                continue
            match = _COMMENT_ID_RE.search(item.get("dataId") or "")
            if not match:
                continue
            seen_texts.add(text)
            comments.append(RawComment(id=match.group(2), post_id=match.group(1), text=text))
        return comments


def default_extractors() -> List[SectionExtractor]:
    """Extractors in the order a run visits them."""
    return [
        ProfileExtractor(),
        ProfileCardsExtractor(),
        ExperienceExtractor(),
        SkillsExtractor(),
        VolunteeringExtractor(),
        HonorsExtractor(),
        PostsExtractor(),
        CommentsExtractor(),
    ]
