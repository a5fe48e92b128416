# media_gallery/utils/time_utils.py
"""
Time and calendar-date helpers.

Media and event dates are plain ISO calendar dates (``YYYY-MM-DD``) with no
timezone; timestamps (``createdAt``, inferred capture times) are always UTC.
"""

import re
from datetime import date, datetime, timezone
from typing import List, Optional, Union

UTC_TIMEZONE = timezone.utc

# Seconds between 1904-01-01 (QuickTime/MP4 epoch) and 1970-01-01
QUICKTIME_UNIX_EPOCH_OFFSET_SECONDS = 2_082_844_800

ISO_DATE_FORMAT = "%Y-%m-%d"

_EXIF_DATE_RE = re.compile(r"^(\d{4}):(\d{2}):(\d{2})(?:[ T](\d{2}):(\d{2}):(\d{2}))?$")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC_TIMEZONE)


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse ``YYYY-MM-DD``; anything else (including blanks) gives ``None``."""
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), ISO_DATE_FORMAT).date()
    except ValueError:
        return None


def is_iso_date(value: Optional[str]) -> bool:
    return parse_iso_date(value) is not None


def to_iso_date(value: Union[date, datetime]) -> str:
    """Calendar date of ``value``; aware datetimes are converted to UTC first."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC_TIMEZONE)
        return value.date().isoformat()
    return value.isoformat()


def parse_exif_date(value: Optional[str]) -> Optional[str]:
    """
    ``2024:07:04 18:30:00`` -> ``2024-07-04``.

    The calendar date is taken as written; EXIF stamps carry no zone.
    Zero-filled placeholders (``0000:00:00 00:00:00``) give None.
    """
    if not value:
        return None
    match = _EXIF_DATE_RE.match(str(value).replace("\x00", "").strip())
    if not match:
        return None
    year, month, day = match.group(1, 2, 3)
    candidate = f"{year}-{month}-{day}"
    return candidate if is_iso_date(candidate) else None


def quicktime_seconds_to_datetime(seconds: int) -> Optional[datetime]:
    """
    Convert an ``mvhd`` creation time to UTC.

    Values at or below the epoch offset are already Unix seconds (some
    encoders write those); ``0`` means unset.
    """
    if seconds <= 0:
        return None
    unix_seconds = (
        seconds - QUICKTIME_UNIX_EPOCH_OFFSET_SECONDS
        if seconds > QUICKTIME_UNIX_EPOCH_OFFSET_SECONDS
        else seconds
    )
    try:
        return datetime.fromtimestamp(unix_seconds, tz=UTC_TIMEZONE)
    except (OverflowError, OSError, ValueError):
        return None


def format_date_label(value: Union[str, date]) -> str:
    """``2024-07-04`` -> ``Jul 4, 2024``. Unparseable strings are returned as-is."""
    parsed = parse_iso_date(value) if isinstance(value, str) else value
    if parsed is None:
        return str(value)
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"


def date_search_tokens(value: Optional[str]) -> List[str]:
    """
    Every textual form of a date a user might type into the search box.

    Returns the raw string, ``YYYY-MM-DD``, ``MM/DD/YYYY``, ``M/D/YYYY`` and
    the ``Mon D, YYYY`` label. Unparseable dates only yield the raw string.
    """
    if not value:
        return []
    tokens = [value]
    parsed = parse_iso_date(value)
    if parsed is None:
        return tokens
    tokens.extend(
        [
            parsed.isoformat(),
            f"{parsed.month:02d}/{parsed.day:02d}/{parsed.year}",
            f"{parsed.month}/{parsed.day}/{parsed.year}",
            format_date_label(parsed),
        ]
    )
    return tokens
