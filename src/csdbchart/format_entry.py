"""Map raw chart entries to display records."""

import logging
import math
import re
from datetime import datetime, timezone

from csdbchart.models import DisplayRecord, RawEntry, RawRelease

logger = logging.getLogger(__name__)

CSDB_RELEASE_URL = "https://csdb.dk/release/?id={id}"
UNKNOWN_DATE = "Unknown"

_FLOAT_PATTERN = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PATTERN = re.compile(r"\s*([+-]?\d+)")


def parse_rating(text: str) -> float:
    """Leading float of text, 0.0 if there is none or it is negative."""
    m = _FLOAT_PATTERN.match(text)
    if not m:
        return 0.0
    value = float(m.group(1))
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def parse_votes(text: str) -> int:
    """Leading integer of text, 0 if there is none or it is negative."""
    m = _INT_PATTERN.match(text)
    if not m:
        return 0
    try:
        value = int(m.group(1))
    except ValueError:
        # longer than the interpreter's int conversion limit
        return 0
    return max(value, 0)


def release_date(release: RawRelease) -> tuple[str, int]:
    """Return (display date, sort value in epoch milliseconds).

    The display date is day/month/year exactly as given. Missing parts, or
    parts that do not make a calendar date, give ("Unknown", 0).
    """
    day, month, year = release.release_day, release.release_month, release.release_year
    if not (day and month and year):
        return UNKNOWN_DATE, 0

    d, m, y = _INT_PATTERN.match(day), _INT_PATTERN.match(month), _INT_PATTERN.match(year)
    if not (d and m and y):
        return UNKNOWN_DATE, 0
    try:
        dt = datetime(int(y.group(1)), int(m.group(1)), int(d.group(1)), tzinfo=timezone.utc)
    except (ValueError, OverflowError):
        logger.debug("Invalid release date %s/%s/%s for release %s", day, month, year, release.id)
        return UNKNOWN_DATE, 0

    return f"{day}/{month}/{year}", int(dt.timestamp()) * 1000


def format_entry(entry: RawEntry) -> DisplayRecord:
    release = entry.release
    date_text, date_sort = release_date(release)

    achievement = None
    if release.achievement is not None:
        achievement = f"{release.achievement.place}. place at {release.achievement.compo}"

    event = None
    if release.event is not None and release.event.name:
        event = release.event.name

    return DisplayRecord(
        id=release.id,
        name=release.name,
        place=entry.place,
        release_date=date_text,
        release_date_sort_value=date_sort,
        rating=parse_rating(entry.rating),
        votes=parse_votes(entry.votes),
        csdb_url=CSDB_RELEASE_URL.format(id=release.id),
        screenshot=release.screenshot or None,
        achievement=achievement,
        event=event,
    )


def format_entries(entries: list[RawEntry]) -> list[DisplayRecord]:
    """Format a page of entries, keeping their order."""
    return [format_entry(e) for e in entries]
