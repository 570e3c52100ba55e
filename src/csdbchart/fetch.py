"""HTTP fetch of CSDb chart pages through a pass-through relay."""

import logging
from urllib.parse import quote, urlencode

import requests

from csdbchart.models import ChartPage
from csdbchart.parse_chart import parse_chart_page
from csdbchart.util import FetchError

logger = logging.getLogger(__name__)

CSDB_WEBSERVICE_URL = "https://csdb.dk/webservice/"
DEFAULT_RELAY = "https://corsproxy.io/?"
HEADERS = {
    "User-Agent": "csdbchart/0.1 (+https://github.com/owner/csdbchart)"
}
PAGE_SIZE = 25


def chart_url(page: int) -> str:
    """Upstream chart URL for a 1-based page number."""
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    query = urlencode({
        "type": "chart",
        "ctype": "release",
        "subtype": 1,
        "start": (page - 1) * PAGE_SIZE,
    })
    return f"{CSDB_WEBSERVICE_URL}?{query}"


def relay_url(url: str, relay: str | None = DEFAULT_RELAY) -> str:
    """Wrap url for the relay; no relay means a direct request."""
    if not relay:
        return url
    return relay + quote(url, safe="")


def fetch_xml(
    url: str,
    session: requests.Session | None = None,
    timeout: float | None = None,
) -> bytes:
    """Fetch a response body with a single attempt."""
    get = session.get if session is not None else requests.get
    logger.debug("Fetching %s", url)
    try:
        resp = get(url, headers=HEADERS, timeout=timeout)
    except requests.RequestException as e:
        raise FetchError(f"Connection error for {url}: {e}") from e
    if resp.status_code != 200:
        raise FetchError(f"HTTP {resp.status_code} for {url}")
    logger.debug("OK %s (%d bytes)", url, len(resp.content))
    return resp.content


def fetch_chart_page(
    page: int,
    relay: str | None = DEFAULT_RELAY,
    session: requests.Session | None = None,
    timeout: float | None = None,
) -> ChartPage:
    """Fetch and parse one chart page.

    A page holding fewer than PAGE_SIZE entries is taken to be the last one.
    FetchError and ParseError propagate to the caller.
    """
    url = relay_url(chart_url(page), relay)
    body = fetch_xml(url, session=session, timeout=timeout)
    entries = parse_chart_page(body)
    logger.info("Page %d: %d entries", page, len(entries))
    return ChartPage(entries=entries, has_more=len(entries) >= PAGE_SIZE)
