"""Creation time of LinkedIn activity and comment identifiers.

LinkedIn ids are Snowflake-style: the leading 41 bits of the 64-bit id hold
the creation time in milliseconds since the Unix epoch. Python integers are
arbitrary precision, so the id is never squeezed through a float.
"""
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from typing import NamedTuple, Union

TIMESTAMP_BITS = 41
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class DecodedTimestamp(NamedTuple):
    timestamp_millis: int
    created_at: datetime
    human_readable: str


def parse_id(value: Union[str, int]) -> int:
    """Return an identifier as a non-negative int.

    Raises ValueError for anything that is not a plain decimal number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not an identifier: {value!r}")
    if isinstance(value, int):
        number = value
    else:
        text = str(value).strip()
        if not text.isdigit():
            raise ValueError(f"Not an identifier: {value!r}")
        number = int(text)
    if number < 0:
        raise ValueError(f"Not an identifier: {value!r}")
    return number


def extract_unix_timestamp(value: Union[str, int]) -> int:
    """Milliseconds since epoch embedded in the leading 41 bits of an id."""
    number = parse_id(value)
    # Same as int(bin(number)[2:][:41], 2) without the string round trip.
    return number >> max(number.bit_length() - TIMESTAMP_BITS, 0)


def to_human_date(timestamp_millis: int) -> str:
    """RFC 1123 rendering in UTC, e.g. `Mon, 06 May 2024 13:14:12 GMT`."""
    return format_datetime(to_datetime(timestamp_millis), usegmt=True)


def to_datetime(timestamp_millis: int) -> datetime:
    return EPOCH + timedelta(milliseconds=timestamp_millis)


def decode(value: Union[str, int]) -> DecodedTimestamp:
    millis = extract_unix_timestamp(value)
    return DecodedTimestamp(millis, to_datetime(millis), to_human_date(millis))
