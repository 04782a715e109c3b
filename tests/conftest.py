"""Shared fixtures: a mocked LLMService so no test reaches Gemini."""

from unittest.mock import AsyncMock, Mock

import pytest

from resonance.controller import AppController
from resonance.services.debate import DebateService
from resonance.services.llm_service import GenerationResult, LLMService
from resonance.services.topics import TopicService
from resonance.settings import Settings


@pytest.fixture
def cfg():
    return Settings(
        fast_model="flash-test",
        deep_model="pro-test",
        thinking_budget=32768,
    )


@pytest.fixture
def remote_chat():
    chat = Mock()
    chat.send_message = AsyncMock(return_value="Et si l'histoire se répétait ?")
    return chat


@pytest.fixture
def llm(remote_chat):
    service = Mock(spec=LLMService)
    service.generate_content = AsyncMock(
        return_value=GenerationResult(text="**Titre**\nContexte.\n1. Question ?")
    )
    service.create_chat = Mock(return_value=remote_chat)
    return service


@pytest.fixture
def topic_service(llm, cfg):
    return TopicService(llm, cfg)


@pytest.fixture
def debate_service(llm, cfg):
    return DebateService(llm, cfg)


@pytest.fixture
def controller(topic_service, debate_service):
    return AppController(topic_service, debate_service)
