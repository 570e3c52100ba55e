"""Common utilities and exception classes."""


class CsdbChartError(Exception):
    """Base exception for csdbchart."""


class FetchError(CsdbChartError):
    """HTTP fetch failure for a chart page."""


class ParseError(CsdbChartError):
    """Response body is not an XML document."""
