"""Application state controller.

The whole UI-facing state is one tagged value (``AppController.state``):

    Welcome -> Home -> CategoryActive(idle|loading|result|error) <-> ChatOpen

Every navigation bumps an epoch counter; results of remote calls started
under an older epoch are dropped instead of being applied.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Annotated, Callable, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from .categories import Category, get_category
from .errors import ChatError, GenerationError, InvalidTransition
from .models import CategoryId, ChatMessage, Notice, Topic
from .services.debate import DebateService, DebateSession
from .services.topics import TopicService

logger = logging.getLogger(__name__)

COPY_OK = "Sujet copié dans le presse-papier !"
COPY_FAILED = "Impossible de copier le sujet."
NOTHING_TO_COPY = "Aucun sujet à copier."


class Phase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    RESULT = "result"
    ERROR = "error"


class WelcomeState(BaseModel):
    kind: Literal["welcome"] = "welcome"


class HomeState(BaseModel):
    kind: Literal["home"] = "home"


class CategoryActiveState(BaseModel):
    kind: Literal["category"] = "category"
    category: Category
    phase: Phase = Phase.IDLE
    topic: Optional[Topic] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_phase(self):
        if (self.topic is not None) != (self.phase is Phase.RESULT):
            raise ValueError("a topic is present only in the result phase")
        if (self.error is not None) != (self.phase is Phase.ERROR):
            raise ValueError("an error is present only in the error phase")
        return self


class ChatOpenState(BaseModel):
    kind: Literal["chat"] = "chat"
    category: Category
    topic: Topic
    session: DebateSession = Field(exclude=True)
    chat_error: Optional[str] = None

    class Config:
        arbitrary_types_allowed = True


AppState = Annotated[
    Union[WelcomeState, HomeState, CategoryActiveState, ChatOpenState],
    Field(discriminator="kind"),
]


class StateView(BaseModel):
    """Serialisable snapshot of the controller for the front-end."""

    kind: str
    category: Optional[Category] = None
    phase: Optional[Phase] = None
    topic: Optional[Topic] = None
    error: Optional[str] = None
    messages: List[ChatMessage] = []
    chat_error: Optional[str] = None
    typing: bool = False


class AppController:
    """Owns the single session's state and sequences calls to the services."""

    def __init__(self, topics: TopicService, debate: DebateService) -> None:
        self.topics = topics
        self.debate = debate
        self.state: AppState = WelcomeState()
        self._epoch = 0

    # ------------------------------------------------------------------ #
    # helpers                                                            #
    # ------------------------------------------------------------------ #
    def _advance(self) -> int:
        self._epoch += 1
        return self._epoch

    def _is_current(self, epoch: int) -> bool:
        return epoch == self._epoch

    @property
    def session(self) -> Optional[DebateSession]:
        return self.state.session if isinstance(self.state, ChatOpenState) else None

    @property
    def current_topic(self) -> Optional[Topic]:
        return getattr(self.state, "topic", None)

    def view(self) -> StateView:
        state = self.state
        if isinstance(state, CategoryActiveState):
            return StateView(
                kind=state.kind,
                category=state.category,
                phase=state.phase,
                topic=state.topic,
                error=state.error,
            )
        if isinstance(state, ChatOpenState):
            return StateView(
                kind=state.kind,
                category=state.category,
                topic=state.topic,
                messages=state.session.messages,
                chat_error=state.chat_error,
                typing=state.session.busy,
            )
        return StateView(kind=state.kind)

    # ------------------------------------------------------------------ #
    # navigation                                                         #
    # ------------------------------------------------------------------ #
    def acknowledge_welcome(self) -> AppState:
        if isinstance(self.state, WelcomeState):
            self.state = HomeState()
        return self.state

    def select_category(self, category_id: CategoryId | str) -> AppState:
        if isinstance(self.state, WelcomeState):
            raise InvalidTransition("Commencez l'expérience avant de choisir une catégorie.")
        category = get_category(category_id)
        self._advance()
        self.state = CategoryActiveState(category=category)
        logger.info("Category selected: %s", category.id.value)
        return self.state

    def back(self) -> AppState:
        if isinstance(self.state, ChatOpenState):
            return self.close_chat()
        if not isinstance(self.state, CategoryActiveState):
            raise InvalidTransition("Aucune catégorie active.")
        self._advance()
        self.state = HomeState()
        return self.state

    # ------------------------------------------------------------------ #
    # generation                                                         #
    # ------------------------------------------------------------------ #
    async def generate(self) -> AppState:
        state = self.state
        if isinstance(state, CategoryActiveState):
            if state.phase is Phase.LOADING:
                raise InvalidTransition("Une génération est déjà en cours.")
        elif not isinstance(state, ChatOpenState):
            raise InvalidTransition("Choisissez d'abord une catégorie.")

        category = state.category
        epoch = self._advance()
        # drops the previous topic, error and chat
        self.state = CategoryActiveState(category=category, phase=Phase.LOADING)

        try:
            topic = await self.topics.generate_topic(category.id, category.prompt_topic)
        except GenerationError as exc:
            if not self._is_current(epoch):
                logger.debug("Discarding stale generation error for %s", category.id.value)
                return self.state
            self.state = CategoryActiveState(category=category, phase=Phase.ERROR, error=exc.message)
            return self.state

        if not self._is_current(epoch):
            logger.debug("Discarding stale topic %s for %s", topic.id, category.id.value)
            return self.state
        self.state = CategoryActiveState(category=category, phase=Phase.RESULT, topic=topic)
        return self.state

    async def regenerate(self) -> AppState:
        state = self.state
        if isinstance(state, ChatOpenState) or (
            isinstance(state, CategoryActiveState) and state.phase is Phase.RESULT
        ):
            return await self.generate()
        raise InvalidTransition("Aucun sujet à remplacer.")

    async def retry(self) -> AppState:
        state = self.state
        if isinstance(state, CategoryActiveState) and state.phase is Phase.ERROR:
            return await self.generate()
        raise InvalidTransition("Aucune erreur à réessayer.")

    def dismiss_error(self) -> AppState:
        state = self.state
        if isinstance(state, CategoryActiveState) and state.phase is Phase.ERROR:
            self.state = CategoryActiveState(category=state.category)
        return self.state

    # ------------------------------------------------------------------ #
    # debate                                                             #
    # ------------------------------------------------------------------ #
    async def open_chat(self) -> AppState:
        state = self.state
        if not (isinstance(state, CategoryActiveState) and state.phase is Phase.RESULT):
            raise InvalidTransition("Générez un sujet avant d'ouvrir le débat.")

        session = self.debate.create_debate_session(state.topic.content)
        epoch = self._advance()
        self.state = ChatOpenState(category=state.category, topic=state.topic, session=session)

        await self.debate.open_debate(session)
        if not self._is_current(epoch):
            logger.debug("Chat closed before its opening turn resolved")
        return self.state

    async def send_chat_message(self, text: str) -> ChatMessage:
        state = self.state
        if not isinstance(state, ChatOpenState):
            raise InvalidTransition("Aucun débat en cours.")
        session = state.session

        try:
            reply = await self.debate.send_message(session, text)
        except ChatError as exc:
            self._set_chat_error(session, exc.message)
            raise
        self._set_chat_error(session, None)
        return reply

    def _set_chat_error(self, session: DebateSession, message: Optional[str]) -> None:
        # the chat may have been closed while the send was in flight
        if self.session is session:
            self.state = self.state.model_copy(update={"chat_error": message})

    def close_chat(self) -> AppState:
        state = self.state
        if not isinstance(state, ChatOpenState):
            raise InvalidTransition("Aucun débat en cours.")
        self._advance()
        self.state = CategoryActiveState(
            category=state.category, phase=Phase.RESULT, topic=state.topic
        )
        return self.state

    # ------------------------------------------------------------------ #
    # export                                                             #
    # ------------------------------------------------------------------ #
    def export_topic(self, clipboard: Callable[[str], None]) -> Notice:
        topic = self.current_topic
        if topic is None:
            return Notice(ok=False, message=NOTHING_TO_COPY)
        try:
            clipboard(topic.content)
        except Exception as exc:
            logger.error("Failed to copy topic %s: %s", topic.id, exc)
            return Notice(ok=False, message=COPY_FAILED)
        return Notice(ok=True, message=COPY_OK)
