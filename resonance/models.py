"""Pydantic data models shared across the application."""

from __future__ import annotations

import datetime as _dt
import uuid
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, computed_field


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> _dt.datetime:
    return _dt.datetime.now(_dt.timezone.utc)


class CategoryId(str, Enum):
    HISTORY = "history"
    COMPLEX = "complex"
    LOVE = "love"
    TENSE = "tense"
    RANDOM = "random"


class StrategyKind(str, Enum):
    GENERAL_KNOWLEDGE = "general_knowledge"
    DEEP_REASONING = "deep_reasoning"


class GenerationStrategy(BaseModel):
    """Model + config chosen for one category."""

    model: str
    search_grounding: bool = False
    thinking_budget: Optional[int] = None

    class Config:
        frozen = True


class GroundingSource(BaseModel):
    uri: str = Field(..., min_length=1)
    title: Optional[str] = None

    @computed_field
    @property
    def display_title(self) -> str:
        return self.title or self.uri


class Topic(BaseModel):
    id: str = Field(default_factory=_new_id)
    category_id: CategoryId
    content: str
    grounding_sources: List[GroundingSource] = []
    timestamp: _dt.datetime = Field(default_factory=_utcnow)

    class Config:
        json_encoders = {
            _dt.datetime: lambda dt: dt.isoformat() if dt else None
        }


class ChatMessage(BaseModel):
    id: str = Field(default_factory=_new_id)
    role: Literal["user", "model"]
    text: str
    timestamp: _dt.datetime = Field(default_factory=_utcnow)


class Notice(BaseModel):
    """Transient, non-blocking notification (toast)."""

    ok: bool
    message: str


# --- HTTP payloads ---

class SendMessageRequest(BaseModel):
    text: str


class ExportResponse(BaseModel):
    notice: Notice
    text: Optional[str] = None


class PostMessageResponse(BaseModel):
    user_message: ChatMessage
    bot_message: ChatMessage


class Section(BaseModel):
    text: str
    is_header: bool = False
