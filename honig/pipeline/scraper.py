"""
Pipeline - Web Scraper

Fetches page HTML with a timeout, a size cap, and a one-shot relay retry,
then hands it to the ContentExtractor.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Union
from urllib.parse import urlparse

import httpx

from honig.config import get_settings
from honig.pipeline.extractor import ContentExtractor
from honig.schemas import ExtractedArticle


logger = logging.getLogger(__name__)


FailureKind = Literal[
    "invalid_url",
    "blocked",
    "timeout",
    "http_status",
    "content_type",
    "transport",
    "error",
]


@dataclass
class ScrapeFailure:
    """Error marker for one URL in a scrape batch."""
    url: str
    kind: FailureKind
    message: str


class ScrapeError(Exception):
    """A single fetch failed."""

    def __init__(self, url: str, kind: FailureKind, message: str):
        super().__init__(f"{kind.upper()}: {url} - {message}")
        self.url = url
        self.kind = kind
        self.message = message

    def to_failure(self) -> ScrapeFailure:
        return ScrapeFailure(url=self.url, kind=self.kind, message=self.message)


ScrapeOutcome = Union[ExtractedArticle, ScrapeFailure]


class WebScraper:
    """Fetches pages and extracts readable content."""

    def __init__(
        self,
        settings=None,
        extractor: Optional[ContentExtractor] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.extractor = extractor or ContentExtractor()
        self.timeout = self.settings.scraper.timeout_ms / 1000
        self.max_content_length = self.settings.scraper.max_content_length
        self.blocked_domains = [d.lower() for d in self.settings.scraper.blocked_domains]
        self.proxy_url = self.settings.scraper.cors_proxy_url
        self._transport = transport

    # ─────────────────────────────────────────────
    #  URL checks
    # ─────────────────────────────────────────────

    @staticmethod
    def is_valid_url(url: str) -> bool:
        """Only absolute http(s) URLs are fetchable."""
        try:
            parsed = urlparse(url)
        except ValueError:
            return False
        return parsed.scheme in ("http", "https") and bool(parsed.netloc)

    def is_blocked(self, url: str) -> bool:
        """Check if a URL belongs to a known cross-origin-restricted domain."""
        host = (urlparse(url).hostname or "").lower()
        return any(host == d or host.endswith("." + d) for d in self.blocked_domains)

    def filter_scrapeable(self, urls: List[str]) -> List[str]:
        """Drop invalid and blocked URLs."""
        kept = []
        for url in urls:
            if not self.is_valid_url(url):
                continue
            if self.is_blocked(url):
                logger.debug(f"Filtering out {url} - known CORS restrictions")
                continue
            kept.append(url)
        return kept

    # ─────────────────────────────────────────────
    #  Fetching
    # ─────────────────────────────────────────────

    def _headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.settings.scraper.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
            "Cache-Control": "no-cache",
        }

    async def fetch_and_extract(
        self,
        url: str,
        max_content_length: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> ExtractedArticle:
        """
        Fetch one page and extract its article content.

        Args:
            url: Page URL (http/https)
            max_content_length: Byte cap on the downloaded body
            timeout: Seconds before the fetch is cancelled

        Returns:
            ExtractedArticle

        Raises:
            ScrapeError: with a kind describing the failure
        """
        if not self.is_valid_url(url):
            raise ScrapeError(url, "invalid_url", "Only HTTP and HTTPS URLs are supported")

        if self.is_blocked(url):
            raise ScrapeError(url, "blocked", "domain blocks cross-origin requests")

        limit = max_content_length or self.max_content_length
        timeout = timeout or self.timeout

        try:
            html = await self._fetch_with_timeout(self._fetch_direct(url, limit, timeout), url, timeout)
        except ScrapeError as e:
            if e.kind != "transport":
                raise
            logger.info(f"Retrying {url} through relay proxy...")
            try:
                html = await self._fetch_with_timeout(self._fetch_via_proxy(url, limit, timeout), url, timeout)
            except ScrapeError as proxy_error:
                raise ScrapeError(
                    url,
                    "transport",
                    f"{e.message} (proxy also failed: {proxy_error.message})",
                ) from proxy_error

        return self.extractor.extract(html, url)

    async def _fetch_with_timeout(self, fetch, url: str, timeout: float) -> str:
        try:
            return await asyncio.wait_for(fetch, timeout=timeout)
        except asyncio.TimeoutError:
            raise ScrapeError(url, "timeout", f"Request timeout after {int(timeout * 1000)}ms")

    async def _fetch_direct(self, url: str, limit: int, timeout: float) -> str:
        async with httpx.AsyncClient(
            headers=self._headers(),
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            try:
                async with client.stream("GET", url) as response:
                    if response.status_code >= 400:
                        raise ScrapeError(
                            url, "http_status",
                            f"HTTP {response.status_code}: {response.reason_phrase}",
                        )
                    content_type = response.headers.get("content-type", "")
                    if "text/html" not in content_type:
                        raise ScrapeError(
                            url, "content_type", f"Unsupported content type: {content_type}"
                        )
                    body = await self._read_capped(response, limit)
                    return body.decode(response.encoding or "utf-8", errors="replace")
            except httpx.TimeoutException as e:
                raise ScrapeError(url, "timeout", f"Request timeout: {e}") from e
            except httpx.TransportError as e:
                raise ScrapeError(url, "transport", f"Failed to fetch: {e}") from e
            except httpx.HTTPError as e:
                raise ScrapeError(url, "transport", f"Request failed: {e}") from e

    async def _fetch_via_proxy(self, url: str, limit: int, timeout: float) -> str:
        async with httpx.AsyncClient(
            headers=self._headers(),
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            try:
                response = await client.get(self.proxy_url, params={"url": url})
            except httpx.TimeoutException as e:
                raise ScrapeError(url, "timeout", f"Proxy timeout: {e}") from e
            except httpx.HTTPError as e:
                raise ScrapeError(url, "transport", f"Proxy request failed: {e}") from e

        if response.status_code >= 400:
            raise ScrapeError(url, "http_status", f"Proxy HTTP {response.status_code}")

        try:
            contents = response.json().get("contents") or ""
        except ValueError as e:
            raise ScrapeError(url, "transport", "Proxy returned malformed JSON") from e

        return contents[:limit]

    @staticmethod
    async def _read_capped(response: httpx.Response, limit: int) -> bytes:
        """Read at most `limit` bytes, truncating the overflow."""
        chunks = []
        size = 0
        async for chunk in response.aiter_bytes():
            remaining = limit - size
            if remaining <= 0:
                break
            chunks.append(chunk[:remaining])
            size += min(len(chunk), remaining)
        return b"".join(chunks)

    async def fetch_many(
        self,
        urls: List[str],
        max_content_length: Optional[int] = None,
    ) -> Dict[str, ScrapeOutcome]:
        """
        Fetch several pages concurrently. One URL's failure never aborts the batch.

        Args:
            urls: URLs to fetch
            max_content_length: Byte cap applied to each page

        Returns:
            Mapping of url -> ExtractedArticle or ScrapeFailure
        """
        results = await asyncio.gather(
            *[self.fetch_and_extract(url, max_content_length) for url in urls],
            return_exceptions=True,
        )

        outcomes: Dict[str, ScrapeOutcome] = {}
        for url, result in zip(urls, results):
            if isinstance(result, ExtractedArticle):
                outcomes[url] = result
            elif isinstance(result, ScrapeError):
                logger.debug(f"Scrape failed: {result}")
                outcomes[url] = result.to_failure()
            elif isinstance(result, Exception):
                logger.warning(f"Unexpected scrape error for {url}: {result}")
                outcomes[url] = ScrapeFailure(url=url, kind="error", message=str(result))
            else:
                # BaseException such as cancellation propagates
                raise result

        return outcomes
