"""
LinkedContentFetcher - concurrent, failure-isolated fetching of URLs found in a quote.

Each link is fetched with its own hard timeout. A failing link never raises and
never cancels its siblings; its failure is returned as a LinkFetchResult.
"""

import asyncio
from collections.abc import Iterable, Sequence

import httpx

from models.errors import LinkFetchFailed
from models.quote import LinkFetchResult
from tools.documents.html_text import html_to_text
from utils.logger import get_logger

logger = get_logger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "DNT": "1",
    "Upgrade-Insecure-Requests": "1",
}

# Page chrome that never carries quote figures.
BOILERPLATE_SELECTORS = (
    "nav",
    "footer",
    ".navigation",
    ".nav",
    ".menu",
    ".sidebar",
    ".advertisement",
    ".ads",
)

TEXT_CONTENT_TYPES = ("text/html", "text/plain")

DEFAULT_TIMEOUT_S = 15.0
DEFAULT_MAX_LINKS = 5
DEFAULT_MAX_BYTES = 2 * 1024 * 1024
DEFAULT_MIN_TEXT_CHARS = 100


class LinkedContentFetcher:
    """
    Fetches linked pages and reduces them to readable text.

    Example usage:
        fetcher = LinkedContentFetcher()
        results = asyncio.run(fetcher.fetch_all(["https://hotel.example/offer"]))
        for result in results:
            print(result.url, result.succeeded, result.error_message)
    """

    def __init__(
        self,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        max_links: int = DEFAULT_MAX_LINKS,
        max_bytes: int = DEFAULT_MAX_BYTES,
        min_text_chars: int = DEFAULT_MIN_TEXT_CHARS,
        skip_selectors: Sequence[str] = BOILERPLATE_SELECTORS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            timeout_s: Hard per-link timeout covering connect, headers and body
            max_links: Only the first ``max_links`` URLs are fetched
            max_bytes: Bodies larger than this are rejected
            min_text_chars: Cleaned text shorter than this is judged not substantial
            skip_selectors: CSS selectors removed from HTML before rendering
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        self.timeout_s = timeout_s
        self.max_links = max_links
        self.max_bytes = max_bytes
        self.min_text_chars = min_text_chars
        self.skip_selectors = tuple(skip_selectors)
        self._transport = transport

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_s),
            follow_redirects=True,
            transport=self._transport,
        )

    async def fetch_all(self, urls: Iterable[str]) -> list[LinkFetchResult]:
        """
        Fetch the first ``max_links`` URLs concurrently.

        Returns:
            One LinkFetchResult per fetched URL, in input order regardless of
            completion order
        """
        selected = list(urls)[: self.max_links]
        if not selected:
            return []

        logger.info(
            f"Fetching linked content from {len(selected)} links",
            extra={"extra_fields": {"link_count": len(selected), "timeout_s": self.timeout_s}},
        )

        async with self._create_client() as client:
            # fetch() never raises, so gather settles every link
            results = await asyncio.gather(*(self.fetch(client, url) for url in selected))

        succeeded = sum(1 for r in results if r.succeeded)
        logger.info(
            f"Linked content fetch complete: {succeeded}/{len(results)} succeeded",
            extra={
                "extra_fields": {
                    "succeeded": succeeded,
                    "failed": len(results) - succeeded,
                }
            },
        )
        return list(results)

    async def fetch(self, client: httpx.AsyncClient, url: str) -> LinkFetchResult:
        """Fetch one URL. All failures are captured in the returned result."""
        try:
            text = await asyncio.wait_for(self._fetch_text(client, url), timeout=self.timeout_s)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            message = f"Request timeout after {self.timeout_s:g}s"
        except LinkFetchFailed as exc:
            message = exc.message
        except httpx.HTTPError as exc:
            message = f"Failed to fetch: {exc}"
        except Exception as exc:
            message = f"Unexpected error: {exc!s}"
        else:
            return LinkFetchResult(url=url, text=text, succeeded=True)

        logger.warning(
            f"Linked content unavailable for {url}: {message}",
            extra={"extra_fields": {"url": url, "error": message}},
        )
        return LinkFetchResult(url=url, text="", succeeded=False, error_message=message)

    async def _fetch_text(self, client: httpx.AsyncClient, url: str) -> str:
        async with client.stream("GET", url, headers=BROWSER_HEADERS) as response:
            if not response.is_success:
                raise LinkFetchFailed(f"HTTP {response.status_code} {response.reason_phrase}".strip())

            content_type = response.headers.get("content-type", "").lower()
            if not any(allowed in content_type for allowed in TEXT_CONTENT_TYPES):
                raise LinkFetchFailed(f"Skipped non-text content: {content_type or 'unknown'}")

            declared_length = response.headers.get("content-length", "")
            if declared_length.isdigit() and int(declared_length) > self.max_bytes:
                raise LinkFetchFailed(f"Content too large: {declared_length} bytes")

            body = bytearray()
            async for chunk in response.aiter_bytes():
                body.extend(chunk)
                if len(body) > self.max_bytes:
                    raise LinkFetchFailed(f"Content too large: more than {self.max_bytes} bytes")

            raw = _decode(bytes(body), response.charset_encoding)

        if "text/html" in content_type:
            text = html_to_text(raw, skip_selectors=self.skip_selectors)
        else:
            text = raw

        if len(text.strip()) < self.min_text_chars:
            raise LinkFetchFailed("Content too short")
        return text


def _decode(body: bytes, charset: str | None) -> str:
    try:
        return body.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")
