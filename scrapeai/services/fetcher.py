import asyncio
import ipaddress
import logging
import socket
from typing import Mapping, Optional
from urllib.parse import urljoin, urlparse

import httpx

from scrapeai.config import DEFAULT_HEADERS, get_settings
from scrapeai.services.errors import ConfigError, FetchTimeoutError, HTTPStatusError, NetworkError

logger = logging.getLogger(__name__)


async def _is_private_address(hostname: str) -> bool:
    """Return True if *hostname* resolves to a private, loopback, or link-local address."""
    loop = asyncio.get_running_loop()
    try:
        infos = await loop.getaddrinfo(hostname, None)
    except socket.gaierror:
        return False

    for info in infos:
        raw_ip = info[4][0]
        # Strip IPv6 zone IDs (e.g. "::1%eth0" → "::1")
        raw_ip = raw_ip.split("%")[0]
        try:
            addr = ipaddress.ip_address(raw_ip)
        except ValueError:
            continue
        if addr.is_private or addr.is_loopback or addr.is_link_local or addr.is_reserved:
            return True
    return False


def validate_url(url: str) -> None:
    """Raise ConfigError unless *url* is an absolute URL with a scheme and host.

    Purely syntactic; no network access happens here.
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        raise ConfigError(f"Invalid URL: {url!r}")

    if not parsed.scheme or not parsed.netloc:
        raise ConfigError(f"Invalid URL: {url!r} is not an absolute URL with a scheme")


async def ensure_public_host(url: str) -> None:
    """Raise ConfigError if the host of *url* resolves to a private/internal address."""
    hostname = urlparse(url).hostname
    if not hostname:
        raise ConfigError("URL must have a valid hostname.")
    if await _is_private_address(hostname):
        raise ConfigError("Requests to private/internal addresses are not allowed.")


def _content_length(response: httpx.Response) -> Optional[int]:
    value = response.headers.get("content-length")
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise NetworkError(f"Malformed Content-Length header: {value!r}")


async def fetch_url(
    url: str,
    *,
    timeout_ms: int,
    headers: Mapping[str, str] = DEFAULT_HEADERS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """GET *url* once and return the response body as text.

    The whole exchange, redirects included, must finish within *timeout_ms*;
    otherwise the in-flight request is cancelled.  Redirect destinations are
    validated like the original URL before they are requested.  When
    ``block_private_addresses`` is set, every host is resolved without
    blocking the event loop, inside the same deadline.

    Raises:
        ConfigError: if the URL is not an absolute URL (no request is made),
            or a host resolves to a private address while those are blocked.
        HTTPStatusError: on a non-2xx response.
        FetchTimeoutError: when the deadline elapses.
        NetworkError: on connection-level failures, oversized bodies, a
            malformed Content-Length, or redirect loops.
    """
    validate_url(url)

    try:
        return await asyncio.wait_for(
            _get(url, timeout_ms=timeout_ms, headers=headers, transport=transport),
            timeout=timeout_ms / 1000,
        )
    except (asyncio.TimeoutError, httpx.TimeoutException):
        logger.warning("Timeout fetching %s after %d ms", url, timeout_ms)
        raise FetchTimeoutError(timeout_ms)
    except httpx.InvalidURL as exc:
        raise ConfigError(f"Invalid URL: {exc}")
    except httpx.RequestError as exc:
        logger.warning("Network error fetching %s: %s", url, exc)
        raise NetworkError(str(exc) or exc.__class__.__name__)


async def _get(
    url: str,
    *,
    timeout_ms: int,
    headers: Mapping[str, str],
    transport: Optional[httpx.AsyncBaseTransport],
) -> str:
    settings = get_settings()
    current_url = url

    async with httpx.AsyncClient(
        headers=dict(headers),
        timeout=timeout_ms / 1000,
        follow_redirects=False,
        transport=transport,
    ) as client:
        if settings.block_private_addresses:
            await ensure_public_host(current_url)

        for _ in range(settings.max_redirects + 1):
            async with client.stream("GET", current_url) as response:
                if response.is_redirect:
                    location = response.headers.get("location", "")
                    next_url = urljoin(current_url, location)
                    validate_url(next_url)
                    if settings.block_private_addresses:
                        await ensure_public_host(next_url)
                    logger.debug("Following redirect %s → %s", current_url, next_url)
                    current_url = next_url
                    continue

                if not response.is_success:
                    raise HTTPStatusError(response.status_code, response.reason_phrase)

                content_length = _content_length(response)
                if content_length is not None and content_length > settings.max_content_size:
                    raise NetworkError("Response body exceeds the maximum allowed size.")

                chunks = []
                total = 0
                async for chunk in response.aiter_bytes():
                    total += len(chunk)
                    if total > settings.max_content_size:
                        raise NetworkError("Response body exceeds the maximum allowed size.")
                    chunks.append(chunk)

                return b"".join(chunks).decode(errors="replace")

    raise NetworkError("Too many redirects.")
