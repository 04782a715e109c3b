"""Debate chat: one Gemini chat session bound to a generated topic."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from ..errors import ChatError, RemoteGenerationError
from ..models import ChatMessage
from ..settings import Settings, settings as _default_settings
from .llm_service import LLMService, RemoteChat

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = """Tu es un partenaire de débat intellectuel et bienveillant.
Le sujet de la conversation est le suivant : "{topic}".

Ton rôle est de :
1. Challenger les opinions de l'utilisateur de manière constructive.
2. Poser des questions socratiques (qui poussent à la réflexion).
3. Apporter des contre-arguments ou des nuances si l'utilisateur est trop catégorique.
4. Rester concis (maximum 3-4 phrases par réponse) pour fluidifier le chat.
5. Toujours rester respectueux mais stimulant.

Ne fais pas de longs monologues. Invite l'utilisateur à répondre."""

OPENING_PROMPT = "Lance le débat avec une phrase courte et provocante liée au sujet."
OPENING_FALLBACK = "Prêt à débattre ?"
EMPTY_REPLY = "..."
SEND_FAILED = "Le message n'a pas pu être envoyé. Réessayez."


class DebateSession:
    """Transcript (what is displayed) plus the remote chat used for the next request."""

    def __init__(self, topic_text: str, chat: RemoteChat, system_instruction: str) -> None:
        self.topic_text = topic_text
        self.system_instruction = system_instruction
        self._chat = chat
        self._messages: List[ChatMessage] = []
        self._lock = asyncio.Lock()

    @property
    def messages(self) -> List[ChatMessage]:
        return list(self._messages)

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def _append(self, message: ChatMessage) -> ChatMessage:
        self._messages.append(message)
        return message


class DebateService:
    def __init__(self, llm: LLMService, cfg: Settings | None = None) -> None:
        self.llm = llm
        self.cfg = cfg or _default_settings

    def create_debate_session(self, topic_text: str) -> DebateSession:
        instruction = SYSTEM_INSTRUCTION.format(topic=topic_text)
        chat = self.llm.create_chat(self.cfg.fast_model, system_instruction=instruction)
        logger.info("Created debate session on %s", self.cfg.fast_model)
        return DebateSession(topic_text, chat, instruction)

    async def open_debate(self, session: DebateSession) -> Optional[ChatMessage]:
        """Prime the transcript with the assistant's opening line.

        Failure is not reported: the session simply starts empty.
        """
        async with session._lock:
            try:
                text = await session._chat.send_message(OPENING_PROMPT)
            except RemoteGenerationError as exc:
                logger.warning("Opening turn failed, starting with an empty transcript: %s", exc)
                return None
            return session._append(ChatMessage(role="model", text=text or OPENING_FALLBACK))

    async def send_message(self, session: DebateSession, text: str) -> ChatMessage:
        text = text or ""
        if not text.strip():
            raise ChatError("Le message est vide.")

        # sends are serialised: the remote chat is stateful
        async with session._lock:
            session._append(ChatMessage(role="user", text=text))
            try:
                reply = await session._chat.send_message(text)
            except RemoteGenerationError as exc:
                logger.error("Debate message failed: %s", exc)
                raise ChatError(SEND_FAILED) from exc
            return session._append(ChatMessage(role="model", text=reply or EMPTY_REPLY))
