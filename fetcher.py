"""Async HTTP access for the health probes.

Every probe fetches what it needs itself so probes stay independent and can
run concurrently. This module only provides the shared plumbing: URL
normalization, a configured httpx client, and page/robots/sitemap fetches.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Optional
from urllib.parse import urljoin, urlparse

import httpx

import config

logger = logging.getLogger(__name__)


class InvalidURLError(ValueError):
    """URL cannot be normalized into an absolute http(s) URL."""


# Identify ourselves; some sites block unknown agents
HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; AEO-Intelligence-SEO-Bot/1.0)",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


@dataclass
class PageResponse:
    """Result of fetching a single page."""
    url: str
    final_url: str
    status_code: int
    html: str
    headers: Dict[str, str] = field(default_factory=dict)
    elapsed_ms: int = 0
    size_bytes: int = 0

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())


def normalize_url(url: str) -> str:
    """Return an absolute http(s) URL or raise InvalidURLError."""
    if not isinstance(url, str) or not url.strip():
        raise InvalidURLError("URL is required")

    url = url.strip()
    if not url.startswith(('http://', 'https://')):
        if '://' in url:
            raise InvalidURLError(f"Unsupported URL scheme: {url}")
        url = f'https://{url}'

    parsed = urlparse(url)
    host = parsed.hostname or ''
    if not host or ' ' in parsed.netloc or ('.' not in host and host != 'localhost'):
        raise InvalidURLError(f"Invalid URL format: {url}")
    return url


def site_root(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def create_http_client(timeout: float = config.HTTP_TIMEOUT, **kwargs) -> httpx.AsyncClient:
    """httpx client with bot headers and redirect following."""
    return httpx.AsyncClient(
        headers=HEADERS,
        timeout=timeout,
        follow_redirects=True,
        **kwargs,
    )


async def fetch_page(client: httpx.AsyncClient, url: str, timeout: float = config.HTTP_TIMEOUT) -> PageResponse:
    """Fetch a page; raises httpx.HTTPError on transport failure or error status."""
    start = time.perf_counter()
    response = await client.get(url, timeout=timeout)
    elapsed_ms = int((time.perf_counter() - start) * 1000)
    response.raise_for_status()

    return PageResponse(
        url=url,
        final_url=str(response.url),
        status_code=response.status_code,
        html=response.text,
        headers={k.lower(): v for k, v in response.headers.items()},
        elapsed_ms=elapsed_ms,
        size_bytes=len(response.content),
    )


async def fetch_robots_txt(client: httpx.AsyncClient, url: str) -> Optional[str]:
    """Fetch robots.txt from the website root (None when missing)."""
    robots_url = urljoin(site_root(url), '/robots.txt')
    try:
        response = await client.get(robots_url, timeout=config.AUX_TIMEOUT)
    except httpx.HTTPError as e:
        logger.info(f"robots.txt fetch failed for {robots_url}: {e}")
        return None
    if response.status_code == 200:
        return response.text
    return None


async def fetch_sitemap(client: httpx.AsyncClient, url: str) -> bool:
    """Check whether sitemap.xml exists at the website root."""
    sitemap_url = urljoin(site_root(url), '/sitemap.xml')
    try:
        response = await client.get(sitemap_url, timeout=config.AUX_TIMEOUT)
    except httpx.HTTPError as e:
        logger.info(f"sitemap.xml fetch failed for {sitemap_url}: {e}")
        return False
    return response.status_code == 200


async def check_link(client: httpx.AsyncClient, url: str) -> bool:
    """True when a link resolves with a non-error status."""
    try:
        response = await client.head(url, timeout=config.AUX_TIMEOUT)
        if response.status_code == 405:
            response = await client.get(url, timeout=config.AUX_TIMEOUT)
    except httpx.HTTPError:
        return False
    return response.status_code < 400
