"""Cleanup and parsing of the free text LinkedIn renders.

Every helper returns `None` for "unknown" rather than an empty string and
never raises on odd input: markup drifts, and a missing field must not cost
the caller the whole profile.
"""
import re
from datetime import date, datetime
from typing import NamedTuple, Optional

from .models import Location

PRESENT = "Present"

_LINE_BREAKS = re.compile(r"[\r\n\t\f\v]+")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f\u200b\u200e\u200f\ufeff]")
_MULTIPLE_SPACES = re.compile(r"\s{2,}")
_UI_AFFORDANCES = re.compile(r"(?:…|\.\.\.)?\s*see (?:more|less)\s*$", re.I)
_RANGE_SEPARATOR = re.compile(r"\s+[-–—]\s+")
_QUALIFIER_SEPARATOR = " · "
_DATE_FORMATS = ["%b %Y", "%B %Y", "%Y", "%Y-%m-%d", "%Y-%m"]


class DateRange(NamedTuple):
    start: Optional[str]
    end: Optional[str]

    @property
    def is_current(self) -> bool:
        return self.end == PRESENT


def clean_text(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    clean = _LINE_BREAKS.sub(" ", str(text))
    clean = _CONTROL_CHARS.sub("", clean)
    clean = _UI_AFFORDANCES.sub("", clean)
    clean = _MULTIPLE_SPACES.sub(" ", clean).strip()
    return clean or None


def format_date(text: Optional[str]) -> Optional[str]:
    """Normalize a LinkedIn date ("Jan 2019", "2019") to `YYYY-MM-DD`.

    Month and year-only dates resolve to the first day of the period.
    "Present" is kept as the `PRESENT` marker; anything else is unknown.
    """
    value = clean_text(text)
    if not value:
        return None
    if value.lower() == PRESENT.lower():
        return PRESENT
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date().isoformat()
        except ValueError:
            continue
    return None


def parse_date_range(text: Optional[str]) -> DateRange:
    """Split "Jan 2019 - Present · 4 yrs 2 mos" into normalized endpoints.

    The qualifier after " · " is dropped first. A start without an end
    segment is an ongoing entry, so the end becomes `PRESENT`; a range
    that cannot be read at all is `(None, None)`.
    """
    value = clean_text(text)
    if not value:
        return DateRange(None, None)
    value = value.split(_QUALIFIER_SEPARATOR)[0].strip()
    parts = _RANGE_SEPARATOR.split(value, maxsplit=1)
    start = format_date(parts[0])
    if start is None:
        return DateRange(None, None)
    if len(parts) == 1:
        return DateRange(start, PRESENT)
    return DateRange(start, format_date(parts[1]))


def parse_location(text: Optional[str]) -> Optional[Location]:
    """Read "Amsterdam, North Holland, Netherlands" into a `Location`.

    The last segment is the country, the first one the city and a middle
    one the province. Fewer segments leave the missing parts empty; a lone
    "... Area" segment is a metro area and becomes the city.
    """
    value = clean_text(text)
    if not value:
        return None
    parts = [p.strip() for p in value.split(",") if p.strip()]
    if not parts:
        return None
    # "San Francisco Bay Area" names a metro area, not a country.
    is_area = parts[0].endswith(" Area")
    parts = [p[: -len(" Area")] if p.endswith(" Area") else p for p in parts]
    if len(parts) == 1:
        return Location(city=parts[0]) if is_area else Location(country=parts[0])
    if len(parts) == 2:
        return Location(city=parts[0], country=parts[1])
    return Location(city=parts[0], province=", ".join(parts[1:-1]), country=parts[-1])


def _to_date(value: Optional[str], today: date) -> Optional[date]:
    if value is None:
        return None
    if value == PRESENT:
        return today
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def duration_in_days(start: Optional[str], end: Optional[str], today: Optional[date] = None) -> Optional[int]:
    """Inclusive number of days between two normalized dates.

    Both the first and the last day count, so a range within a single day
    lasts 1 day. `PRESENT` as the end means today.
    """
    today = today or date.today()
    start_date = _to_date(start, today)
    end_date = _to_date(end, today)
    if start_date is None or end_date is None:
        return None
    return (end_date - start_date).days + 1


def parse_count(text: Optional[str]) -> Optional[int]:
    """First integer in a label like "1,204 reactions"; None if there is none."""
    value = clean_text(text)
    if not value:
        return None
    match = re.search(r"\d[\d,]*", value)
    if not match:
        return None
    digits = re.sub(r"\D", "", match.group(0))
    return int(digits) if digits else None
