"""Tests for the Gen AI SDK wrapper (client mocked)."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from resonance.errors import RemoteGenerationError
from resonance.services.llm_service import LLMService


def _response(text, chunks=None):
    metadata = SimpleNamespace(grounding_chunks=chunks)
    return SimpleNamespace(text=text, candidates=[SimpleNamespace(grounding_metadata=metadata)])


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def service(client, cfg):
    return LLMService(cfg, client=client)


class TestGenerateContent:

    @pytest.mark.asyncio
    async def test_grounded_request(self, service, client):
        client.aio.models.generate_content = AsyncMock(return_value=_response(
            "Sujet",
            [
                SimpleNamespace(web=SimpleNamespace(uri="https://a.example", title="A")),
                SimpleNamespace(web=None),
                SimpleNamespace(web=SimpleNamespace(uri="https://b.example", title=None)),
            ],
        ))

        result = await service.generate_content("flash-test", "prompt", search_grounding=True)

        kwargs = client.aio.models.generate_content.await_args.kwargs
        assert kwargs["model"] == "flash-test"
        assert kwargs["contents"] == "prompt"
        assert kwargs["config"].tools[0].google_search is not None
        assert kwargs["config"].thinking_config is None
        assert result.text == "Sujet"
        assert result.grounding_chunks == [
            {"uri": "https://a.example", "title": "A"},
            {"uri": None, "title": None},
            {"uri": "https://b.example", "title": None},
        ]

    @pytest.mark.asyncio
    async def test_thinking_request(self, service, client):
        client.aio.models.generate_content = AsyncMock(return_value=_response("Sujet"))

        result = await service.generate_content("pro-test", "prompt", thinking_budget=32768)

        config = client.aio.models.generate_content.await_args.kwargs["config"]
        assert config.thinking_config.thinking_budget == 32768
        assert not config.tools
        assert result.grounding_chunks == []

    @pytest.mark.asyncio
    async def test_text_from_parts_when_text_missing(self, service, client):
        parts = [SimpleNamespace(text="Bon"), SimpleNamespace(text="jour")]
        resp = SimpleNamespace(
            text=None,
            candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))],
        )
        client.aio.models.generate_content = AsyncMock(return_value=resp)

        result = await service.generate_content("flash-test", "prompt")
        assert result.text == "Bonjour"

    @pytest.mark.asyncio
    async def test_empty_response(self, service, client):
        client.aio.models.generate_content = AsyncMock(
            return_value=SimpleNamespace(text=None, candidates=[])
        )
        result = await service.generate_content("flash-test", "prompt")
        assert result.text == ""

    @pytest.mark.asyncio
    async def test_sdk_error_is_wrapped(self, service, client):
        client.aio.models.generate_content = AsyncMock(side_effect=RuntimeError("boom"))
        with pytest.raises(RemoteGenerationError):
            await service.generate_content("flash-test", "prompt")


class TestChat:

    def test_create_chat_passes_system_instruction(self, service, client):
        service.create_chat("flash-test", system_instruction="Sois bref.")

        kwargs = client.aio.chats.create.call_args.kwargs
        assert kwargs["model"] == "flash-test"
        assert kwargs["config"].system_instruction == "Sois bref."

    @pytest.mark.asyncio
    async def test_send_message(self, service, client):
        sdk_chat = MagicMock()
        sdk_chat.send_message = AsyncMock(return_value=SimpleNamespace(text="Réponse"))
        client.aio.chats.create.return_value = sdk_chat

        chat = service.create_chat("flash-test", system_instruction="Sois bref.")
        assert await chat.send_message("Bonjour") == "Réponse"
        sdk_chat.send_message.assert_awaited_once_with("Bonjour")

    @pytest.mark.asyncio
    async def test_send_message_error_is_wrapped(self, service, client):
        sdk_chat = MagicMock()
        sdk_chat.send_message = AsyncMock(side_effect=ConnectionError("reset"))
        client.aio.chats.create.return_value = sdk_chat

        chat = service.create_chat("flash-test", system_instruction="Sois bref.")
        with pytest.raises(RemoteGenerationError):
            await chat.send_message("Bonjour")
