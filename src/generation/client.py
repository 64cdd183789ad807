"""Gemini client that drafts rule source from an assembled prompt."""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx
import structlog
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from config.prompts import SEED_ACKNOWLEDGEMENT
from src.errors import AuthConfigError, GenerationError
from src.generation.models import ChatRole, ChatTurn, GenerationResult

logger = structlog.get_logger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_MAX_OUTPUT_TOKENS = 2048

# Statuses Gemini uses when the API key itself is bad
AUTH_STATUS_CODES = {401, 403}
AUTH_ERROR_MARKERS = ("API_KEY_INVALID", "API key not valid", "API key expired")


def build_conversation(system_instruction: str, prompt: str) -> list[ChatTurn]:
    """Build the three-turn conversation sent for one generation.

    Gemini rejects histories that do not alternate roles starting from the
    user, so the instruction turn is answered by a fixed synthetic model turn
    before the prompt is appended.

    Args:
        system_instruction: Standing instructions, sent as the first user turn.
        prompt: The rendered rule prompt, sent as the final user turn.

    Returns:
        [user(system_instruction), model(SEED_ACKNOWLEDGEMENT), user(prompt)]
    """
    return [
        ChatTurn(role=ChatRole.USER, text=system_instruction),
        ChatTurn(role=ChatRole.MODEL, text=SEED_ACKNOWLEDGEMENT),
        ChatTurn(role=ChatRole.USER, text=prompt),
    ]


def _is_auth_error(error: genai_errors.APIError) -> bool:
    """Check whether an API error means the credential was rejected."""
    if error.code in AUTH_STATUS_CODES:
        return True
    text = f"{error.status or ''} {error.message or ''} {error}"
    return any(marker in text for marker in AUTH_ERROR_MARKERS)


class GenerationClient:
    """Obtain one text completion from Gemini per `send` call.

    Every call starts a fresh conversation; nothing is remembered between
    calls and nothing is retried.
    """

    def __init__(
        self,
        client: Any,
        model: str = DEFAULT_MODEL,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ):
        """Initialize with an already constructed SDK client.

        Args:
            client: A `google.genai.Client` (or an object with the same
                `aio.models.generate_content` surface).
            model: Gemini model name.
            max_output_tokens: Maximum tokens in the reply.
        """
        self.client = client
        self.model = model
        self.max_output_tokens = max_output_tokens

    @classmethod
    def open(
        cls,
        credential: str | None,
        model: str = DEFAULT_MODEL,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
        timeout: float | None = None,
    ) -> GenerationClient:
        """Bind a Gemini client to a credential.

        No request is made here; a credential the service rejects only
        surfaces as AuthConfigError on the first `send`.

        Args:
            credential: Gemini API key.
            model: Gemini model name.
            max_output_tokens: Maximum tokens in the reply.
            timeout: Request timeout in seconds, enforced by the SDK transport.

        Raises:
            AuthConfigError: If the credential is empty.
        """
        if not credential or not credential.strip():
            raise AuthConfigError("Gemini API key is not set")

        http_options = None
        if timeout is not None:
            # The SDK expects milliseconds
            http_options = types.HttpOptions(timeout=int(timeout * 1000))

        client = genai.Client(api_key=credential, http_options=http_options)
        return cls(client, model=model, max_output_tokens=max_output_tokens)

    async def send(self, system_instruction: str, prompt: str) -> GenerationResult:
        """Send the prompt after the seeded instruction and return the reply.

        Args:
            system_instruction: Standing instructions for the model.
            prompt: The rendered rule prompt.

        Returns:
            GenerationResult holding the reply text.

        Raises:
            AuthConfigError: If Gemini rejects the credential.
            GenerationError: If the call fails, times out, or the reply has
                no text.
        """
        conversation = build_conversation(system_instruction, prompt)
        logger.info(
            "generation_started",
            model=self.model,
            prompt_length=len(prompt),
            turn_count=len(conversation),
        )
        start_time = time.time()

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=[turn.to_content() for turn in conversation],
                config=types.GenerateContentConfig(max_output_tokens=self.max_output_tokens),
            )
        except genai_errors.APIError as e:
            if _is_auth_error(e):
                logger.error("generation_auth_error", model=self.model, code=e.code)
                raise AuthConfigError(
                    f"Gemini rejected the API key: {e.message or e}",
                    details={"model": self.model, "code": e.code},
                ) from e
            logger.error("generation_llm_error", model=self.model, code=e.code, error=str(e))
            raise GenerationError(
                f"Gemini request failed: {e}",
                details={"model": self.model, "code": e.code},
            ) from e
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logger.error("generation_timeout", model=self.model)
            raise GenerationError(
                "Gemini request timed out",
                details={"model": self.model},
            ) from e
        except Exception as e:
            logger.error("generation_llm_error", model=self.model, error=str(e))
            raise GenerationError(
                f"Gemini request failed: {e}",
                details={"model": self.model},
            ) from e

        text = response.text
        if not text:
            logger.error("generation_empty_reply", model=self.model)
            raise GenerationError(
                "Gemini returned no text",
                details={"model": self.model},
            )

        duration_ms = int((time.time() - start_time) * 1000)
        usage = getattr(response, "usage_metadata", None)
        input_tokens = getattr(usage, "prompt_token_count", None)
        output_tokens = getattr(usage, "candidates_token_count", None)

        logger.info(
            "generation_completed",
            model=self.model,
            duration_ms=duration_ms,
            output_length=len(text),
        )

        return GenerationResult(
            text=text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            generation_metadata={
                "model": self.model,
                "duration_ms": duration_ms,
            },
        )

    async def aclose(self) -> None:
        """Close the SDK client's async HTTP transport."""
        await self.client.aio.aclose()

    async def __aenter__(self) -> GenerationClient:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.aclose()
