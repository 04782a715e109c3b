import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import types as gt

from ..errors import RemoteGenerationError
from ..settings import Settings, settings as _default_settings

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    text: str
    # one dict per web grounding chunk, in response order: {"uri": ..., "title": ...}
    grounding_chunks: List[Dict[str, Optional[str]]] = field(default_factory=list)


class RemoteChat:
    """Stateful Gemini chat; keeps the conversation history on the SDK side."""

    def __init__(self, chat: Any) -> None:
        self._chat = chat

    async def send_message(self, text: str) -> str:
        try:
            resp = await self._chat.send_message(text)
        except Exception as exc:
            logger.error("Gen AI chat error: %s", exc, exc_info=True)
            raise RemoteGenerationError(str(exc)) from exc
        return _response_text(resp)


class LLMService:
    """Wrapper around the Google Gen AI SDK (generation + chat sessions)."""

    def __init__(self, cfg: Settings | None = None, client: genai.Client | None = None) -> None:
        s = cfg or _default_settings
        if client is None:
            logger.info("Initialising Google Gen AI client …")
            if s.use_vertexai:
                client = genai.Client(vertexai=True, project=s.project_id, location=s.model_location)
            else:
                client = genai.Client(api_key=s.api_key or None)
        # One client for the whole lifetime of the service
        self.client = client

    # ---------- text generation ------------------------------------------------
    async def generate_content(
        self,
        model: str,
        prompt: str,
        *,
        search_grounding: bool = False,
        thinking_budget: Optional[int] = None,
        system_instruction: Optional[str] = None,
    ) -> GenerationResult:
        cfg = gt.GenerateContentConfig(
            tools=[gt.Tool(google_search=gt.GoogleSearch())] if search_grounding else None,
            thinking_config=(
                gt.ThinkingConfig(thinking_budget=thinking_budget) if thinking_budget else None
            ),
            system_instruction=system_instruction,
        )

        try:
            resp = await self.client.aio.models.generate_content(
                model=model,
                contents=prompt,
                config=cfg,
            )
        except Exception as exc:
            logger.error("Gen AI error: %s", exc, exc_info=True)
            raise RemoteGenerationError(str(exc)) from exc

        return GenerationResult(
            text=_response_text(resp),
            grounding_chunks=_grounding_chunks(resp) if search_grounding else [],
        )

    # ---------- chat -----------------------------------------------------------
    def create_chat(self, model: str, *, system_instruction: str) -> RemoteChat:
        chat = self.client.aio.chats.create(
            model=model,
            config=gt.GenerateContentConfig(system_instruction=system_instruction),
        )
        return RemoteChat(chat)


def _response_text(resp: Any) -> str:
    """Best-effort text extraction; empty string when the response carries none."""
    try:
        text = getattr(resp, "text", None)
    except ValueError:
        # older SDK builds raise on blocked/empty candidates
        text = None
    if text:
        return text

    candidates = getattr(resp, "candidates", None) or []
    if candidates:
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        texts = [p.text for p in parts if getattr(p, "text", None)]
        if texts:
            return "".join(texts)

    logger.warning("Empty or filtered response: %s", resp)
    return ""


def _grounding_chunks(resp: Any) -> List[Dict[str, Optional[str]]]:
    candidates = getattr(resp, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    out: List[Dict[str, Optional[str]]] = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        out.append({
            "uri": getattr(web, "uri", None),
            "title": getattr(web, "title", None),
        })
    return out
