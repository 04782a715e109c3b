"""Static category table and the category -> generation strategy mapping."""

from __future__ import annotations

from typing import Dict, Sequence, Tuple

from pydantic import BaseModel

from .models import CategoryId, GenerationStrategy, StrategyKind
from .settings import Settings, settings as _default_settings


class Category(BaseModel):
    id: CategoryId
    label: str
    description: str
    icon_name: str
    prompt_topic: str
    strategy: StrategyKind  # required: a category without a strategy does not build

    class Config:
        frozen = True


# Only categories of this set may use the fast model
GENERAL_KNOWLEDGE = frozenset({CategoryId.HISTORY, CategoryId.RANDOM})


def _build_table(categories: Sequence[Category]) -> Tuple[Category, ...]:
    """Validate that every CategoryId has exactly one entry and a coherent strategy."""
    seen: Dict[CategoryId, Category] = {}
    for cat in categories:
        if cat.id in seen:
            raise ValueError(f"Duplicate category: {cat.id.value}")
        expected = (
            StrategyKind.GENERAL_KNOWLEDGE
            if cat.id in GENERAL_KNOWLEDGE
            else StrategyKind.DEEP_REASONING
        )
        if cat.strategy is not expected:
            raise ValueError(
                f"Category {cat.id.value} must use {expected.value}, got {cat.strategy.value}"
            )
        seen[cat.id] = cat

    missing = [cid.value for cid in CategoryId if cid not in seen]
    if missing:
        raise ValueError(f"Categories without a strategy: {', '.join(missing)}")
    return tuple(categories)


CATEGORIES: Tuple[Category, ...] = _build_table([
    Category(
        id=CategoryId.HISTORY,
        label="Histoire & Faits",
        description="Des anecdotes vérifiées et des événements qui ont façonné le monde.",
        icon_name="book",
        prompt_topic="un fait historique méconnu ou un événement marquant, vérifiable et surprenant",
        strategy=StrategyKind.GENERAL_KNOWLEDGE,
    ),
    Category(
        id=CategoryId.COMPLEX,
        label="Sujets Complexes",
        description="Philosophie, éthique et dilemmes de société.",
        icon_name="brain",
        prompt_topic="une question philosophique, éthique ou sociétale complexe sans réponse évidente",
        strategy=StrategyKind.DEEP_REASONING,
    ),
    Category(
        id=CategoryId.LOVE,
        label="Amour & Relations",
        description="Couple, amitié, famille : ce qui nous lie aux autres.",
        icon_name="heart",
        prompt_topic="les relations amoureuses, amicales ou familiales et leurs paradoxes",
        strategy=StrategyKind.DEEP_REASONING,
    ),
    Category(
        id=CategoryId.TENSE,
        label="Sujets Qui Fâchent",
        description="Les débats sensibles, abordés avec nuance et respect.",
        icon_name="fire",
        prompt_topic="un sujet de débat sensible et clivant, à aborder avec nuance et sans caricature",
        strategy=StrategyKind.DEEP_REASONING,
    ),
    Category(
        id=CategoryId.RANDOM,
        label="Aléatoire",
        description="Laissez le hasard choisir un sujet inattendu.",
        icon_name="dice",
        prompt_topic="un thème totalement inattendu, insolite ou décalé",
        strategy=StrategyKind.GENERAL_KNOWLEDGE,
    ),
])

_BY_ID: Dict[CategoryId, Category] = {cat.id: cat for cat in CATEGORIES}


def get_category(category_id: CategoryId | str) -> Category:
    """Return the category for *category_id*; raises ``KeyError`` if unknown."""
    try:
        return _BY_ID[CategoryId(category_id)]
    except ValueError:
        raise KeyError(category_id) from None


def strategy_for(category: Category, cfg: Settings | None = None) -> GenerationStrategy:
    """Resolve the model and config for *category*."""
    cfg = cfg or _default_settings
    if category.strategy is StrategyKind.GENERAL_KNOWLEDGE:
        # search only for history; random stays purely generative
        return GenerationStrategy(
            model=cfg.fast_model,
            search_grounding=category.id is CategoryId.HISTORY,
        )
    return GenerationStrategy(
        model=cfg.deep_model,
        thinking_budget=cfg.thinking_budget,
    )
