"""Shared pytest fixtures for rule editor tests."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from pathlib import Path
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from config.settings import Settings
from src.generation.client import GenerationClient
from src.rules.cache import PageCache
from src.rules.example import EXEMPLAR
from src.rules.fetcher import RuleFetcher
from src.rules.models import RuleDescriptor

TARGET_URL = "https://example.test/a"
EXEMPLAR_PAGE = "<html><body>渋谷区 児童育成手当: 月額13,500円</body></html>"
TARGET_PAGE = "<html><body>児童扶養手当の支給要件</body></html>"


# =============================================================================
# Sample Rules
# =============================================================================


@pytest.fixture
def example_descriptor() -> RuleDescriptor:
    """Exemplar rule with a short description."""
    return RuleDescriptor(name="Example Rule", content="DESC_A")


@pytest.fixture
def target_descriptor() -> RuleDescriptor:
    """Target rule with a short description."""
    return RuleDescriptor(name="New Rule", content="DESC_B")


# =============================================================================
# HTTP
# =============================================================================


class CountingTransport(httpx.MockTransport):
    """MockTransport serving fixed pages and counting requests per URL."""

    def __init__(self, pages: dict[str, Any]):
        self.pages = pages
        self.calls: Counter[str] = Counter()
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.calls[url] += 1
        page = self.pages.get(url)
        if page is None:
            return httpx.Response(404, text="not found")
        if isinstance(page, Exception):
            raise page
        if isinstance(page, httpx.Response):
            return page
        return httpx.Response(200, text=page)


@pytest.fixture
def pages() -> dict[str, Any]:
    """Pages served by the mock transport, keyed by URL."""
    return {
        EXEMPLAR.url: EXEMPLAR_PAGE,
        TARGET_URL: TARGET_PAGE,
    }


@pytest.fixture
def transport(pages: dict[str, Any]) -> CountingTransport:
    """Counting mock transport over `pages`."""
    return CountingTransport(pages)


@pytest.fixture
def page_cache() -> PageCache:
    """A fresh, empty page cache."""
    return PageCache()


@pytest.fixture
async def fetcher(transport: CountingTransport, page_cache: PageCache):
    """RuleFetcher backed by the counting transport."""
    client = httpx.AsyncClient(transport=transport)
    fetcher = RuleFetcher(cache=page_cache, client=client)
    yield fetcher
    await client.aclose()


# =============================================================================
# Gemini
# =============================================================================


def make_genai_client(text: str | None = "class 新制度(Variable):\n    pass\n") -> MagicMock:
    """Fake google.genai client whose generate_content returns `text`."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(
        return_value=SimpleNamespace(
            text=text,
            usage_metadata=SimpleNamespace(prompt_token_count=120, candidates_token_count=30),
        )
    )
    client.aio.aclose = AsyncMock()
    return client


@pytest.fixture
def genai_client() -> MagicMock:
    """Fake google.genai client returning a short rule."""
    return make_genai_client()


@pytest.fixture
def client_factory() -> Callable[[str], GenerationClient]:
    """Factory producing GenerationClients over fresh fake SDK clients.

    Every client created is recorded on `factory.created`.
    """
    created: list[GenerationClient] = []

    def factory(credential: str) -> GenerationClient:
        client = GenerationClient(make_genai_client(), model="gemini-test", max_output_tokens=64)
        created.append(client)
        return client

    factory.created = created  # type: ignore[attr-defined]
    return factory


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(_env_file=None, gemini_api_key=None)


def live_api_key(env_file: str | Path | None = ".env") -> str | None:
    """Gemini API key from the environment or the .env file, if any."""
    key = Settings(_env_file=env_file).gemini_api_key
    if key is None or not key.get_secret_value().strip():
        return None
    return key.get_secret_value()
