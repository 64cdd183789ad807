"""End-to-end rule drafting: exemplar, target page, prompt, Gemini."""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog

from config.prompts import RULE_EDITOR_INSTRUCTION
from config.settings import Settings, get_settings
from src.generation.client import GenerationClient
from src.generation.prompt_builder import build_prompt
from src.observability.context import clear_run_context, new_run_id, set_run_context
from src.rules.cache import PageCache, get_page_cache
from src.rules.example import ExampleProvider
from src.rules.fetcher import RuleFetcher, proxy_url_transform
from src.rules.models import RuleDescriptor

logger = structlog.get_logger(__name__)

ClientFactory = Callable[[str], GenerationClient]


def build_fetcher(settings: Settings, cache: PageCache | None = None) -> RuleFetcher:
    """Create a RuleFetcher from settings, wiring the relay rewrite if configured."""
    url_transform = None
    if settings.proxy_enabled:
        url_transform = proxy_url_transform(settings.rule_proxy_base, settings.rule_proxy_upstream)
    return RuleFetcher(
        cache=cache if cache is not None else get_page_cache(),
        url_transform=url_transform,
        timeout=settings.fetch_timeout,
    )


def default_client_factory(settings: Settings) -> ClientFactory:
    """Return a factory opening GenerationClients with the configured model."""

    def factory(credential: str) -> GenerationClient:
        return GenerationClient.open(
            credential,
            model=settings.gemini_model,
            max_output_tokens=settings.max_output_tokens,
            timeout=settings.llm_timeout,
        )

    return factory


class RuleEditor:
    """Draft OpenFisca source for a new rule.

    Steps run strictly in order and the first failure aborts the run. Errors
    from the fetcher and the Gemini client reach the caller unchanged.
    """

    def __init__(
        self,
        fetcher: RuleFetcher | None = None,
        client_factory: ClientFactory | None = None,
        settings: Settings | None = None,
        system_instruction: str = RULE_EDITOR_INSTRUCTION,
    ):
        """Initialize the editor.

        Args:
            fetcher: Fetcher for description pages. Built from settings with
                the process-wide cache if None.
            client_factory: Opens a GenerationClient for a credential.
            settings: Application settings (defaults to get_settings()).
            system_instruction: Standing instructions sent before the prompt.
        """
        self.settings = settings or get_settings()
        self.fetcher = fetcher or build_fetcher(self.settings)
        self.client_factory = client_factory or default_client_factory(self.settings)
        self.examples = ExampleProvider(self.fetcher)
        self.system_instruction = system_instruction

    async def prepare_prompt(self, rule_name: str, rule_url: str) -> str:
        """Fetch the exemplar and target pages and render the prompt.

        Raises:
            FetchError: If either page cannot be fetched.
        """
        example = await self.examples.get_example()
        target = RuleDescriptor(name=rule_name, content=await self.fetcher.fetch(rule_url))
        return build_prompt(example, self.examples.example_source, target)

    async def run(self, credential: str, rule_name: str, rule_url: str) -> str:
        """Draft source for a rule described at a URL.

        Args:
            credential: Gemini API key.
            rule_name: Display name of the new rule.
            rule_url: URL of the page describing the rule.

        Returns:
            The generated source text.

        Raises:
            FetchError: If the exemplar or target page cannot be fetched.
            AuthConfigError: If the credential is missing or rejected.
            GenerationError: If Gemini fails or returns no text.
        """
        set_run_context(new_run_id())
        logger.info("run_started", rule_name=rule_name, rule_url=rule_url)
        start_time = time.time()

        try:
            prompt = await self.prepare_prompt(rule_name, rule_url)

            client = self.client_factory(credential)
            try:
                result = await client.send(self.system_instruction, prompt)
            finally:
                await client.aclose()

            logger.info(
                "run_completed",
                duration_ms=int((time.time() - start_time) * 1000),
                output_length=len(result.text),
            )
            return result.text
        finally:
            clear_run_context()

    async def close(self) -> None:
        """Release the fetcher's HTTP client."""
        await self.fetcher.close()

    async def __aenter__(self) -> RuleEditor:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()


async def run(credential: str, rule_name: str, rule_url: str) -> str:
    """Draft source for a rule using the configured defaults.

    Pages are cached for the whole process, so repeated runs for the same
    URL fetch it only once.
    """
    async with RuleEditor() as editor:
        return await editor.run(credential, rule_name, rule_url)
