"""Topic generation: picks a model strategy per category and normalises the result."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..categories import get_category, strategy_for
from ..errors import GenerationError, RemoteGenerationError
from ..models import CategoryId, GroundingSource, Topic
from ..settings import Settings
from .llm_service import LLMService

logger = logging.getLogger(__name__)

TOPIC_TEMPLATE = """Génère un sujet de conversation engageant, profond et nuancé sur : {topic}.

Le résultat doit être formaté ainsi :
1. Un titre accrocheur.
2. Une brève mise en contexte ou une anecdote (1-2 phrases).
3. Une question ouverte principale pour lancer le débat.
4. Deux sous-questions pour approfondir.

Réponds directement en Français. Sois créatif et évite les clichés."""

FALLBACK_TEXT = "Désolé, je n'ai pas pu générer de contenu pour le moment."
FALLBACK_TEXT_DEEP = "Désolé, la réflexion a pris trop de temps."
DEFAULT_SOURCE_TITLE = "Source Web"
GENERATION_FAILED = "Impossible de contacter l'IA pour le moment."


def build_prompt(topic_prompt: str) -> str:
    return TOPIC_TEMPLATE.format(topic=topic_prompt)


def extract_sources(chunks: List[Dict[str, Optional[str]]]) -> List[GroundingSource]:
    """Keep chunks with a usable uri, in order; untitled ones get the generic label."""
    return [
        GroundingSource(uri=c["uri"], title=c.get("title") or DEFAULT_SOURCE_TITLE)
        for c in chunks
        if (c.get("uri") or "").strip()
    ]


class TopicService:
    """Generates one discussion topic per call. No retry: that is the caller's decision."""

    def __init__(self, llm: LLMService, cfg: Settings | None = None) -> None:
        self.llm = llm
        self.cfg = cfg

    async def generate_topic(self, category_id: CategoryId | str, topic_prompt: str) -> Topic:
        try:
            category = get_category(category_id)
        except KeyError:
            raise GenerationError(f"Catégorie inconnue : {category_id}") from None
        if not topic_prompt or not topic_prompt.strip():
            raise GenerationError("Aucun thème fourni pour la génération.")

        strategy = strategy_for(category, self.cfg)
        logger.info(
            "Generating topic for %s with %s (grounding=%s, thinking=%s)",
            category.id.value, strategy.model, strategy.search_grounding, strategy.thinking_budget,
        )

        try:
            result = await self.llm.generate_content(
                strategy.model,
                build_prompt(topic_prompt),
                search_grounding=strategy.search_grounding,
                thinking_budget=strategy.thinking_budget,
            )
        except RemoteGenerationError as exc:
            logger.error("Topic generation failed for %s: %s", category.id.value, exc)
            raise GenerationError(GENERATION_FAILED) from exc

        text = result.text
        if not text or not text.strip():
            text = FALLBACK_TEXT if strategy.thinking_budget is None else FALLBACK_TEXT_DEEP

        sources = extract_sources(result.grounding_chunks) if strategy.search_grounding else []
        return Topic(category_id=category.id, content=text, grounding_sources=sources)
