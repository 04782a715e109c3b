import logging
from functools import lru_cache

from resonance.controller import AppController
from resonance.services.debate import DebateService
from resonance.services.llm_service import LLMService
from resonance.services.topics import TopicService
from resonance.settings import settings


@lru_cache()
def get_llm_service() -> LLMService:
    """Provides an LLMService instance."""
    logging.info("Initializing LLMService...")
    return LLMService(settings)


@lru_cache()
def get_controller() -> AppController:
    """Provides the process-wide AppController (one session per backend)."""
    llm = get_llm_service()
    return AppController(
        topics=TopicService(llm, settings),
        debate=DebateService(llm, settings),
    )
