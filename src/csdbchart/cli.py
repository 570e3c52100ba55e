"""CLI entry point and main processing flow."""

import argparse
import logging
import sys
import time
from functools import partial
from pathlib import Path

import requests

from csdbchart.aggregate import MAX_PAGES, fetch_all_releases
from csdbchart.fetch import DEFAULT_RELAY, fetch_chart_page
from csdbchart.models import DisplayRecord
from csdbchart.render import (
    DEFAULT_TITLE,
    render_error_page,
    render_page,
    write_json,
    write_page,
)
from csdbchart.util import CsdbChartError

logger = logging.getLogger("csdbchart")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csdbchart",
        description="Fetch the CSDb top demos chart and render it as a searchable table.",
    )
    parser.add_argument(
        "--output", default="csdb_toplist.html",
        help="HTML page to write (default: csdb_toplist.html)",
    )
    parser.add_argument(
        "--json", default=None,
        help="Also write the records as JSON to this path",
    )
    parser.add_argument(
        "--max-pages", type=int, default=MAX_PAGES,
        help=f"Maximum number of chart pages to fetch (default: {MAX_PAGES})",
    )
    parser.add_argument(
        "--relay", default=DEFAULT_RELAY,
        help=f"Relay prefix the upstream URL is appended to (default: {DEFAULT_RELAY})",
    )
    parser.add_argument(
        "--no-relay", action="store_true", default=False,
        help="Request the CSDb webservice directly",
    )
    parser.add_argument(
        "--timeout", type=float, default=None,
        help="Per-request timeout in seconds (default: none)",
    )
    parser.add_argument(
        "--title", default=DEFAULT_TITLE,
        help=f"Page title (default: {DEFAULT_TITLE})",
    )
    parser.add_argument(
        "--log-level", choices=["INFO", "DEBUG"], default="INFO",
        help="Logging level (default: INFO)",
    )
    return parser


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )


def load_chart(
    relay: str | None = DEFAULT_RELAY,
    max_pages: int = MAX_PAGES,
    timeout: float | None = None,
) -> list[DisplayRecord]:
    """Fetch the whole chart and return its display records."""
    with requests.Session() as session:
        fetch_page = partial(
            fetch_chart_page, relay=relay, session=session, timeout=timeout,
        )
        return fetch_all_releases(fetch_page=fetch_page, max_pages=max_pages)


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    _setup_logging(args.log_level)

    relay = None if args.no_relay else args.relay
    output = Path(args.output)

    logger.info("Starting csdbchart: relay=%s max_pages=%d", relay or "off", args.max_pages)
    start_time = time.time()

    try:
        records = load_chart(relay=relay, max_pages=args.max_pages, timeout=args.timeout)
        write_page(output, render_page(records, title=args.title))
        if args.json:
            write_json(Path(args.json), records)

        elapsed = time.time() - start_time
        logger.info("=== Summary ===")
        logger.info("Records: %d", len(records))
        logger.info("Elapsed: %.1fs", elapsed)

    except CsdbChartError as e:
        logger.error("Fatal error: %s", e)
        write_page(output, render_error_page(title=args.title))
        sys.exit(1)
    except Exception as e:
        logger.error("Unexpected error: %s", e, exc_info=True)
        sys.exit(1)
