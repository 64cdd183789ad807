"""In-memory cache of fetched rule description pages."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


class PageCache:
    """URL to page text mapping that never expires.

    Entries live as long as the cache instance. There is no TTL, no eviction
    and no refresh: once a URL has content, every later lookup returns that
    same string.

    Example:
        cache = PageCache()

        content = cache.get(url)
        if content is None:
            content = await download(url)
            cache.put(url, content)
    """

    def __init__(self, entries: dict[str, str] | None = None):
        """Initialize the cache.

        Args:
            entries: Optional pre-seeded url -> content pairs.
        """
        self._entries: dict[str, str] = dict(entries or {})

        # Statistics
        self._hits = 0
        self._misses = 0

    def get(self, url: str) -> str | None:
        """Look up cached content for a URL. Never performs I/O.

        Args:
            url: The page URL.

        Returns:
            The cached content, or None if the URL was never stored.
        """
        content = self._entries.get(url)
        if content is None:
            self._misses += 1
            return None

        self._hits += 1
        logger.debug("cache_hit", url=url)
        return content

    def put(self, url: str, content: str) -> None:
        """Store content for a URL, replacing any previous value.

        Args:
            url: The page URL.
            content: The page text.
        """
        self._entries[url] = content
        logger.debug("cache_set", url=url, content_length=len(content))

    def clear(self) -> int:
        """Drop every entry.

        Returns:
            Number of entries removed.
        """
        count = len(self._entries)
        self._entries.clear()
        return count

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with hit/miss counts, hit rate and entry count
        """
        total = self._hits + self._misses
        hit_rate = self._hits / total if total > 0 else 0.0

        return {
            "hits": self._hits,
            "misses": self._misses,
            "total": total,
            "hit_rate": round(hit_rate, 3),
            "size": len(self._entries),
        }

    def __contains__(self, url: object) -> bool:
        return url in self._entries

    def __len__(self) -> int:
        return len(self._entries)


@lru_cache
def get_page_cache() -> PageCache:
    """Get the process-wide page cache.

    To start over, call `get_page_cache.cache_clear()`.
    """
    return PageCache()
