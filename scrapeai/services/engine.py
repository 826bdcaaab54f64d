"""Scrape orchestration: fetch → metadata → text → prompts → structured data."""

import logging
from typing import Any, Mapping, Optional, Union

import httpx

from scrapeai.config import DEFAULT_HEADERS
from scrapeai.models.request import ScrapeRequest
from scrapeai.models.response import ScrapeResult
from scrapeai.services.errors import ScrapeError
from scrapeai.services.fetcher import fetch_url
from scrapeai.services.metadata import extract_metadata
from scrapeai.services.normalizer import normalize
from scrapeai.services.prompts import run_pipeline
from scrapeai.services.structured import extract_structured_data
from scrapeai.services.validator import validate_config

logger = logging.getLogger(__name__)


class ScrapingEngine:
    """Stateless scraper; one instance can serve any number of concurrent calls.

    Args:
        headers: Outbound header set shared by every fetch.  Not copied.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
    """

    def __init__(
        self,
        headers: Mapping[str, str] = DEFAULT_HEADERS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.headers = headers
        self._transport = transport

    async def scrape(self, config: Union[ScrapeRequest, Mapping[str, Any]]) -> ScrapeResult:
        """Scrape the URL described by *config*.

        Never raises: every failure, expected or not, comes back as a result
        with ``success=False`` and a non-empty ``error``.
        """
        url = _requested_url(config)
        try:
            return await self._scrape(config)
        except ScrapeError as exc:
            logger.warning("Scrape failed for %s: %s", url, exc)
            return ScrapeResult.failure(url, str(exc) or exc.__class__.__name__)
        except Exception as exc:
            logger.exception("Unexpected error scraping %s", url)
            return ScrapeResult.failure(url, str(exc) or "Unknown scraping error")

    async def _scrape(self, config: Union[ScrapeRequest, Mapping[str, Any]]) -> ScrapeResult:
        request = validate_config(config)
        logger.info(
            "Scraping %s",
            request.url,
            extra={"extract_mode": request.extract_mode, "ai_prompts": request.ai_prompts},
        )

        raw = await fetch_url(
            request.url,
            timeout_ms=request.timeout_ms,
            headers=self.headers,
            transport=self._transport,
        )

        metadata = extract_metadata(raw)

        if request.extract_mode == "html":
            content = raw
        else:
            content = normalize(raw)
            if request.ai_prompts:
                content = run_pipeline(content, request.ai_prompts)

        structured_data = None
        if request.extract_mode == "structured":
            # Normalised text has no markup left, so scan the fetched document.
            structured_data = extract_structured_data(raw)

        return ScrapeResult(
            success=True,
            url=request.url,
            content=content,
            metadata=metadata,
            structured_data=structured_data,
        )


def _requested_url(config: Any) -> str:
    if isinstance(config, ScrapeRequest):
        return config.url
    if isinstance(config, Mapping):
        return str(config.get("url") or "")
    return ""


async def scrape(config: Union[ScrapeRequest, Mapping[str, Any]]) -> ScrapeResult:
    """Scrape with a default :class:`ScrapingEngine`."""
    return await ScrapingEngine().scrape(config)
