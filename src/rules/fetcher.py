"""Fetcher for rule description pages with in-memory caching."""

from __future__ import annotations

from collections.abc import Callable
from urllib.parse import SplitResult, urlsplit

import httpx
import structlog

from src.errors import FetchError
from src.rules.cache import PageCache, get_page_cache

logger = structlog.get_logger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

UrlTransform = Callable[[str], str]

DEFAULT_PORTS = {"http": 80, "https": 443}


def identity_transform(url: str) -> str:
    """Return the URL unchanged."""
    return url


def _origin(parts: SplitResult) -> tuple[str, str, int | None] | None:
    """Normalize a URL's origin: lowercase scheme and host, default port filled in.

    Returns None when the port is not a valid number.
    """
    scheme = parts.scheme.lower()
    try:
        port = parts.port
    except ValueError:
        return None
    return scheme, (parts.hostname or ""), port or DEFAULT_PORTS.get(scheme)


def proxy_url_transform(proxy_base: str, upstream_origin: str) -> UrlTransform:
    """Build a rewrite function for a local relay.

    The relay serves `proxy_base` and forwards requests to `upstream_origin`
    with the proxy prefix stripped, so a page on the upstream origin is
    reachable at `proxy_base` + its path and query. URLs on any other origin
    are left alone.

    Args:
        proxy_base: Relay base URL, e.g. "http://localhost:5173/proxy".
        upstream_origin: Origin the relay forwards to,
            e.g. "https://www.fukushi.metro.tokyo.lg.jp".

    Returns:
        A function mapping a page URL to the URL to request.
    """
    base = proxy_base.rstrip("/")
    upstream = _origin(urlsplit(upstream_origin))

    def transform(url: str) -> str:
        parts = urlsplit(url)
        if upstream is None or _origin(parts) != upstream:
            return url
        rewritten = f"{base}{parts.path or '/'}"
        if parts.query:
            rewritten += f"?{parts.query}"
        return rewritten

    return transform


class RuleFetcher:
    """Retrieve the text of rule description pages.

    Each URL is downloaded at most once per cache: later calls return the
    cached string without touching the network. Failures are never cached
    and never retried.
    """

    def __init__(
        self,
        cache: PageCache | None = None,
        url_transform: UrlTransform | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the fetcher.

        Args:
            cache: Page cache to consult and fill. Defaults to the
                process-wide cache.
            url_transform: Applied to a URL right before the request is
                sent, e.g. a relay rewrite. Cache keys stay the original URL.
            timeout: HTTP request timeout in seconds.
            client: Optional preconfigured HTTP client. A client passed in
                is not closed by `close()`.
        """
        self.cache = cache if cache is not None else get_page_cache()
        self.url_transform = url_transform or identity_transform
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

        self.log = logger.bind(fetcher=self.__class__.__name__)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": USER_AGENT},
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _download(self, url: str) -> str:
        """Issue a single GET and return the body as text."""
        client = await self._get_client()
        request_url = self.url_transform(url)

        self.log.info("fetching", url=url, request_url=request_url)
        response = await client.get(request_url)
        response.raise_for_status()

        return response.text

    async def fetch(self, url: str) -> str:
        """Fetch a page, using the cache if available.

        Args:
            url: The URL of the rule description page.

        Returns:
            The page text.

        Raises:
            FetchError: If the request fails, returns a non-success status,
                or the body is empty.
        """
        cached = self.cache.get(url)
        if cached is not None:
            return cached

        try:
            content = await self._download(url)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            self.log.error("fetch_failed", url=url, status_code=status)
            raise FetchError(
                f"Failed to fetch {url}: HTTP {status}",
                details={"url": url, "status_code": status},
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.log.error("fetch_failed", url=url, error=str(e))
            raise FetchError(
                f"Failed to fetch {url}: {e}",
                details={"url": url},
            ) from e

        if not content:
            self.log.error("fetch_empty", url=url)
            raise FetchError(f'content from "{url}" was empty', details={"url": url})

        self.cache.put(url, content)
        return content

    async def __aenter__(self) -> RuleFetcher:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
