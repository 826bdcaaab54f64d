"""Failure taxonomy for the scraping engine.

Every stage signals failure with a :class:`ScrapeError` subclass.  None of
them escape :meth:`~scrapeai.services.engine.ScrapingEngine.scrape`; they are
converted into a failure :class:`~scrapeai.models.response.ScrapeResult`
carrying ``str(exc)`` as the error message.
"""


class ScrapeError(Exception):
    """Base class for all engine errors."""


class ConfigError(ScrapeError):
    """Malformed URL or invalid request shape."""


class NetworkError(ScrapeError):
    """Connection-level failure before a usable HTTP response was received."""


class HTTPStatusError(ScrapeError):
    """The target answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"HTTP {status_code}: {reason}" if reason else f"HTTP {status_code}")


class FetchTimeoutError(ScrapeError, TimeoutError):
    """The fetch deadline elapsed and the in-flight request was cancelled."""

    def __init__(self, timeout_ms: int) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(f"Request timeout after {timeout_ms} ms")


class ParseError(ScrapeError):
    """A JSON-LD block could not be parsed.  Internal only; never surfaced."""
