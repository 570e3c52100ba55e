"""Drive the page fetcher across the chart and collect display records."""

import logging
from collections.abc import Callable
from typing import Protocol

from csdbchart.fetch import fetch_chart_page
from csdbchart.format_entry import format_entries
from csdbchart.models import ChartPage, DisplayRecord
from csdbchart.util import CsdbChartError

logger = logging.getLogger(__name__)

MAX_PAGES = 20


class StatusDisplay(Protocol):
    def update(self, message: str, progress: str = "") -> None: ...


class LoggingStatus:
    """Status display that writes progress to the log."""

    def update(self, message: str, progress: str = "") -> None:
        if progress:
            logger.info("%s (%s)", message, progress)
        else:
            logger.info("%s", message)


def fetch_all_releases(
    fetch_page: Callable[[int], ChartPage] = fetch_chart_page,
    status: StatusDisplay | None = None,
    max_pages: int = MAX_PAGES,
) -> list[DisplayRecord]:
    """Fetch chart pages from page 1 until a short or empty page, or max_pages.

    A failure after at least one good page stops the loop and the records
    collected so far are returned. A failure on page 1 is re-raised.
    """
    status = status or LoggingStatus()
    records: list[DisplayRecord] = []
    page = 1
    has_more = True

    while has_more and page <= max_pages:
        status.update(f"Fetching page {page}...")
        try:
            chart_page = fetch_page(page)
        except CsdbChartError as e:
            logger.error("Error fetching page %d: %s", page, e)
            if page == 1:
                raise
            break

        if not chart_page.entries:
            logger.info("Page %d is empty, stopping", page)
            break

        records.extend(format_entries(chart_page.entries))
        status.update(f"Retrieved {len(records)} demos so far...", f"Page {page} complete")

        has_more = chart_page.has_more
        page += 1

    status.update(f"Processing {len(records)} demos...", "All data retrieved")
    return records
