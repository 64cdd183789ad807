"""Unit tests for the Gemini generation client."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from config.prompts import SEED_ACKNOWLEDGEMENT
from src.errors import AuthConfigError, GenerationError
from src.generation.client import GenerationClient, build_conversation
from src.generation.models import ChatRole, ChatTurn, is_alternating

from .conftest import make_genai_client


def _submitted_contents(genai_client: MagicMock) -> list[types.Content]:
    return genai_client.aio.models.generate_content.call_args.kwargs["contents"]


class TestConversation:
    """Test the seeded three-turn conversation."""

    def test_exact_seed(self) -> None:
        """Instruction, synthetic acknowledgement, then the prompt."""
        conversation = build_conversation("INSTRUCTION", "PROMPT")

        assert conversation == [
            ChatTurn(role=ChatRole.USER, text="INSTRUCTION"),
            ChatTurn(role=ChatRole.MODEL, text=SEED_ACKNOWLEDGEMENT),
            ChatTurn(role=ChatRole.USER, text="PROMPT"),
        ]

    def test_alternates_and_ends_on_user(self) -> None:
        """Roles alternate from the user and the last turn awaits a reply."""
        conversation = build_conversation("INSTRUCTION", "PROMPT")

        assert len(conversation) >= 3
        assert is_alternating(conversation)
        assert conversation[-1].role is ChatRole.USER

    def test_alternates_even_with_empty_texts(self) -> None:
        """Empty instruction or prompt never changes the turn structure."""
        conversation = build_conversation("", "")
        assert [t.role for t in conversation] == [ChatRole.USER, ChatRole.MODEL, ChatRole.USER]

    def test_is_alternating_rejects_bad_sequences(self) -> None:
        """Model-first and repeated roles are not alternating."""
        user = ChatTurn(role=ChatRole.USER, text="u")
        model = ChatTurn(role=ChatRole.MODEL, text="m")

        assert not is_alternating([])
        assert not is_alternating([model, user])
        assert not is_alternating([user, user])
        assert is_alternating([user, model, user])

    def test_turn_to_content(self) -> None:
        """Turns convert to SDK Content with one text part."""
        content = ChatTurn(role=ChatRole.MODEL, text="ok").to_content()

        assert isinstance(content, types.Content)
        assert content.role == "model"
        assert content.parts[0].text == "ok"


class TestOpen:
    """Test binding a client to a credential."""

    @pytest.mark.parametrize("credential", ["", "   ", None])
    def test_empty_credential_raises(self, credential: str | None) -> None:
        """Missing credentials fail before any request."""
        with pytest.raises(AuthConfigError):
            GenerationClient.open(credential)

    def test_open_creates_sdk_client(self) -> None:
        """A non-empty credential yields a google.genai client without network I/O."""
        client = GenerationClient.open("test-key", model="gemini-test", max_output_tokens=64, timeout=5)

        assert isinstance(client.client, genai.Client)
        assert client.model == "gemini-test"
        assert client.max_output_tokens == 64


class TestSend:
    """Test sending the conversation."""

    async def test_returns_reply_text(self, genai_client: MagicMock) -> None:
        """The reply's text is returned."""
        client = GenerationClient(genai_client, model="gemini-test")
        result = await client.send("INSTRUCTION", "PROMPT")

        assert result.text == "class 新制度(Variable):\n    pass\n"
        assert result.input_tokens == 120
        assert result.output_tokens == 30
        assert result.generation_metadata["model"] == "gemini-test"

    async def test_submits_alternating_conversation(self, genai_client: MagicMock) -> None:
        """The submitted contents start with the user and alternate roles."""
        client = GenerationClient(genai_client)
        await client.send("INSTRUCTION", "PROMPT")

        contents = _submitted_contents(genai_client)
        roles = [c.role for c in contents]

        assert len(contents) >= 3
        assert roles[0] == "user"
        assert all(a != b for a, b in zip(roles, roles[1:]))
        assert [c.parts[0].text for c in contents] == ["INSTRUCTION", SEED_ACKNOWLEDGEMENT, "PROMPT"]

    async def test_passes_model_and_token_limit(self, genai_client: MagicMock) -> None:
        """Model name and max output tokens are sent with the request."""
        client = GenerationClient(genai_client, model="gemini-test", max_output_tokens=100)
        await client.send("INSTRUCTION", "PROMPT")

        kwargs = genai_client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["config"].max_output_tokens == 100

    async def test_each_send_is_fresh(self, genai_client: MagicMock) -> None:
        """No turns from an earlier call leak into the next one."""
        client = GenerationClient(genai_client)
        await client.send("INSTRUCTION", "FIRST")
        await client.send("INSTRUCTION", "SECOND")

        calls = genai_client.aio.models.generate_content.call_args_list
        assert len(calls) == 2
        second = calls[1].kwargs["contents"]
        assert len(second) == 3
        assert second[-1].parts[0].text == "SECOND"

    @pytest.mark.parametrize("text", [None, ""])
    async def test_no_text_raises(self, text: str | None) -> None:
        """A reply without text is a GenerationError."""
        client = GenerationClient(make_genai_client(text=text))

        with pytest.raises(GenerationError, match="no text"):
            await client.send("INSTRUCTION", "PROMPT")

    async def test_missing_usage_metadata(self) -> None:
        """Token counts are optional."""
        genai_client = MagicMock()
        genai_client.aio.models.generate_content = AsyncMock(
            return_value=SimpleNamespace(text="ok", usage_metadata=None)
        )
        result = await GenerationClient(genai_client).send("INSTRUCTION", "PROMPT")

        assert result.text == "ok"
        assert result.input_tokens is None
        assert result.output_tokens is None


class TestSendErrors:
    """Test mapping of SDK and transport failures."""

    @staticmethod
    def _failing_client(error: Exception) -> GenerationClient:
        genai_client = MagicMock()
        genai_client.aio.models.generate_content = AsyncMock(side_effect=error)
        return GenerationClient(genai_client, model="gemini-test")

    @pytest.mark.parametrize("code,status", [(401, "UNAUTHENTICATED"), (403, "PERMISSION_DENIED")])
    async def test_rejected_credential_raises_auth_error(self, code: int, status: str) -> None:
        """401/403 from Gemini mean the key was rejected."""
        error = genai_errors.ClientError(
            code, {"error": {"code": code, "message": "denied", "status": status}}
        )
        client = self._failing_client(error)

        with pytest.raises(AuthConfigError) as exc_info:
            await client.send("INSTRUCTION", "PROMPT")

        assert exc_info.value.__cause__ is error
        assert exc_info.value.details["code"] == code

    async def test_invalid_api_key_400_raises_auth_error(self) -> None:
        """Gemini reports a bad key as 400 INVALID_ARGUMENT with an API key message."""
        error = genai_errors.ClientError(
            400,
            {
                "error": {
                    "code": 400,
                    "message": "API key not valid. Please pass a valid API key.",
                    "status": "INVALID_ARGUMENT",
                }
            },
        )

        with pytest.raises(AuthConfigError):
            await self._failing_client(error).send("INSTRUCTION", "PROMPT")

    async def test_other_client_error_raises_generation_error(self) -> None:
        """Other 4xx errors are generation failures."""
        error = genai_errors.ClientError(
            400, {"error": {"code": 400, "message": "prompt too long", "status": "INVALID_ARGUMENT"}}
        )

        with pytest.raises(GenerationError):
            await self._failing_client(error).send("INSTRUCTION", "PROMPT")

    async def test_server_error_raises_generation_error(self) -> None:
        """5xx errors are generation failures."""
        error = genai_errors.ServerError(
            503, {"error": {"code": 503, "message": "overloaded", "status": "UNAVAILABLE"}}
        )

        with pytest.raises(GenerationError) as exc_info:
            await self._failing_client(error).send("INSTRUCTION", "PROMPT")

        assert exc_info.value.details["code"] == 503

    @pytest.mark.parametrize("error", [httpx.ReadTimeout("slow"), asyncio.TimeoutError()])
    async def test_timeout_raises_generation_error(self, error: Exception) -> None:
        """Transport timeouts are generation failures."""
        with pytest.raises(GenerationError, match="timed out"):
            await self._failing_client(error).send("INSTRUCTION", "PROMPT")

    async def test_transport_error_raises_generation_error(self) -> None:
        """Connection failures are generation failures."""
        with pytest.raises(GenerationError):
            await self._failing_client(httpx.ConnectError("refused")).send("INSTRUCTION", "PROMPT")

    async def test_no_retry(self) -> None:
        """A failed call is attempted exactly once."""
        client = self._failing_client(httpx.ConnectError("refused"))

        with pytest.raises(GenerationError):
            await client.send("INSTRUCTION", "PROMPT")

        assert client.client.aio.models.generate_content.await_count == 1


class TestClose:
    """Test releasing the SDK client."""

    async def test_aclose_closes_sdk_client(self, genai_client: MagicMock) -> None:
        """aclose() closes the SDK's async transport."""
        client = GenerationClient(genai_client)

        await client.aclose()

        genai_client.aio.aclose.assert_awaited_once()

    async def test_context_manager_closes_on_error(self, genai_client: MagicMock) -> None:
        """Leaving an async with block closes the SDK client even on failure."""
        genai_client.aio.models.generate_content.side_effect = httpx.ConnectError("reset")

        with pytest.raises(GenerationError):
            async with GenerationClient(genai_client) as client:
                await client.send("SYS", "PROMPT")

        genai_client.aio.aclose.assert_awaited_once()
