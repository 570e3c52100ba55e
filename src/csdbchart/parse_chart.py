"""CSDb chart webservice XML parser."""

import logging

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup
from lxml import etree

from csdbchart.models import (
    RawAchievement,
    RawEntry,
    RawEvent,
    RawGroup,
    RawRelease,
)
from csdbchart.util import ParseError

logger = logging.getLogger(__name__)


def load_document(xml: str | bytes) -> BeautifulSoup:
    """Parse the response body as XML. Raises ParseError if there is no root element."""
    if not xml.strip():
        raise ParseError("Empty response body")
    try:
        soup = BeautifulSoup(xml, "xml")
    except (ParserRejectedMarkup, etree.LxmlError) as e:
        raise ParseError(f"Unparsable XML: {e}") from e
    if soup.find() is None:
        raise ParseError("Response is not an XML document")
    return soup


def extract_entries(doc: BeautifulSoup) -> list[RawEntry]:
    """Extract every <Entry> in document order."""
    entries: list[RawEntry] = []
    for entry_el in doc.find_all("Entry"):
        release_el = entry_el.find("Release", recursive=False)
        entries.append(RawEntry(
            place=_child_text(entry_el, "Place"),
            rating=_child_text(entry_el, "Rating"),
            votes=_child_text(entry_el, "Votes"),
            release=_parse_release(release_el) if release_el else RawRelease(),
        ))
    logger.debug("Extracted %d entries", len(entries))
    return entries


def parse_chart_page(xml: str | bytes) -> list[RawEntry]:
    """Parse one chart page body and return its RawEntries."""
    return extract_entries(load_document(xml))


def _parse_release(release_el: Tag) -> RawRelease:
    """Read scalar fields and the optional group, event and achievement blocks."""
    release = RawRelease(
        id=_child_text(release_el, "ID"),
        name=_child_text(release_el, "Name"),
        release_day=_child_text(release_el, "ReleaseDay"),
        release_month=_child_text(release_el, "ReleaseMonth"),
        release_year=_child_text(release_el, "ReleaseYear"),
        screenshot=_child_text(release_el, "ScreenShot"),
    )

    group_el = _nested(release_el, "ReleasedBy", "Group")
    if group_el:
        release.group = RawGroup(
            id=_child_text(group_el, "ID"),
            name=_child_text(group_el, "Name"),
        )

    event_el = _nested(release_el, "ReleasedAt", "Event")
    if event_el:
        release.event = RawEvent(name=_child_text(event_el, "Name"))

    achievement_el = release_el.find("Achievement", recursive=False)
    if achievement_el:
        release.achievement = RawAchievement(
            place=_child_text(achievement_el, "Place"),
            compo=_child_text(achievement_el, "Compo"),
        )

    return release


def _nested(parent: Tag, outer: str, inner: str) -> Tag | None:
    """Find <outer><inner> below parent, e.g. ReleasedBy/Group."""
    outer_el = parent.find(outer, recursive=False)
    if not outer_el:
        return None
    return outer_el.find(inner)


def _child_text(parent: Tag, name: str) -> str:
    """Text of a direct child element, or "" if it is missing."""
    el = parent.find(name, recursive=False)
    if el is None:
        return ""
    return el.get_text()
