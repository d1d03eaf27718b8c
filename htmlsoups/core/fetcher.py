"""
HTTP fetcher for article pages.

Sends browser-like requests and retries transient failures with a fixed
delay between attempts.
"""

import asyncio
import time
from typing import Any

import httpx

from htmlsoups.config import FetcherConfig
from htmlsoups.core.user_agents import UserAgentRotator
from htmlsoups.exceptions import FetchError, InvalidURLError, TimeoutError
from htmlsoups.models import FetchResult
from htmlsoups.utils import metrics
from htmlsoups.utils.logging import SoupsLogger
from htmlsoups.utils.url_utils import get_domain, get_origin, get_path, is_valid_url

BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
    "DNT": "1",
}

# Status codes worth another attempt
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class Fetcher:
    """
    HTTP fetcher with browser-like headers and retries.

    Implements:
    - User-Agent rotation
    - Referer for non-root paths
    - Charset detection from the response
    - Fixed-delay retry of timeouts, connection errors and 5xx responses
    - Safety limits (size, timeout, redirects)
    """

    def __init__(
        self,
        config: FetcherConfig | None = None,
        user_agents: UserAgentRotator | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: SoupsLogger | None = None,
    ):
        """
        Initialize the fetcher.

        Args:
            config: Fetcher configuration.
            user_agents: User-Agent rotation.
            transport: Custom httpx transport, e.g. httpx.MockTransport in tests.
            logger: Logger instance.
        """
        self.config = config or FetcherConfig()
        self.user_agents = user_agents or UserAgentRotator()
        self.transport = transport
        self.logger = logger or SoupsLogger("fetcher")

        self._client: httpx.AsyncClient | None = None

    async def start(self) -> None:
        """Initialize the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout_seconds),
                follow_redirects=True,
                max_redirects=self.config.max_redirects,
                verify=self.config.verify_ssl,
                headers=BROWSER_HEADERS,
                transport=self.transport,
            )

    async def stop(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def build_headers(self, url: str) -> dict[str, str]:
        """Per-request headers: a rotated User-Agent and, off the homepage, a Referer."""
        headers = {"User-Agent": self.user_agents.next()}
        if get_path(url) != "/":
            headers["Referer"] = get_origin(url)
        return headers

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch a URL, retrying transient failures.

        Args:
            url: URL to fetch.

        Returns:
            FetchResult with the decoded page.

        Raises:
            InvalidURLError: If the URL is not an http(s) URL with a host.
            TimeoutError: If the last attempt timed out.
            FetchError: If the page could not be fetched.
        """
        if not is_valid_url(url):
            raise InvalidURLError(url)

        domain = get_domain(url)
        start_time = time.monotonic()
        attempts = max(1, self.config.max_retries)
        last_error: FetchError | None = None

        for attempt in range(1, attempts + 1):
            self.logger.fetch_start(url=url, attempt=attempt)
            try:
                result = await self._do_fetch(url)
            except FetchError as e:
                last_error = e
                self.logger.fetch_error(
                    url=url,
                    error=str(e),
                    error_type=type(e).__name__,
                    attempt=attempt,
                )
                if not self._is_retryable(e) or attempt == attempts:
                    break
                metrics.FETCH_RETRIES.labels(domain=domain).inc()
                await asyncio.sleep(self.config.retry_delay_seconds)
                continue

            duration_ms = (time.monotonic() - start_time) * 1000
            result.duration_ms = duration_ms
            result.attempts = attempt

            metrics.record_fetch(domain, "success", duration_ms / 1000)
            self.logger.fetch_success(
                url=url,
                status_code=result.status_code,
                duration_ms=duration_ms,
                content_length=len(result.html),
            )
            return result

        metrics.record_fetch(domain, "error", time.monotonic() - start_time)
        assert last_error is not None
        raise last_error

    def _is_retryable(self, error: FetchError) -> bool:
        if error.status_code is None:
            return True
        return error.status_code in RETRYABLE_STATUS_CODES

    async def _do_fetch(self, url: str) -> FetchResult:
        """Perform one HTTP request."""
        if self._client is None:
            await self.start()

        assert self._client is not None

        try:
            response = await self._client.get(url, headers=self.build_headers(url))
        except httpx.TimeoutException:
            raise TimeoutError(url, self.config.timeout_seconds)
        except httpx.TooManyRedirects as e:
            raise FetchError(url, f"Too many redirects: {e}")
        except httpx.HTTPError as e:
            raise FetchError(url, str(e))

        if not 200 <= response.status_code < 300:
            raise FetchError(
                url,
                f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        content_length = response.headers.get("content-length")
        if (
            content_length
            and content_length.isdigit()
            and int(content_length) > self.config.max_content_size
        ):
            raise FetchError(
                url,
                f"Content too large: {content_length} bytes",
                status_code=response.status_code,
            )

        content = response.content
        if len(content) > self.config.max_content_size:
            raise FetchError(
                url,
                f"Content too large: {len(content)} bytes",
                status_code=response.status_code,
            )

        return FetchResult.from_bytes(
            url=str(response.url),
            content=content,
            encoding=response.charset_encoding,
            status_code=response.status_code,
            headers=dict(response.headers),
        )

    async def __aenter__(self) -> "Fetcher":
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.stop()
