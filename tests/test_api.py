"""HTTP surface tests (controller wired to a mocked LLMService)."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from resonance.api.deps import get_controller
from resonance.api.main import app
from resonance.errors import RemoteGenerationError
from resonance.services.llm_service import GenerationResult
from resonance.services.topics import GENERATION_FAILED


@pytest.fixture
def client(controller):
    app.dependency_overrides[get_controller] = lambda: controller
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


def _start(client, category="history"):
    client.post("/welcome")
    return client.post(f"/categories/{category}")


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_categories_are_ordered(client):
    ids = [c["id"] for c in client.get("/categories").json()]
    assert ids == ["history", "complex", "love", "tense", "random"]


def test_full_flow(client, remote_chat):
    assert client.get("/state").json()["kind"] == "welcome"
    assert client.post("/welcome").json()["kind"] == "home"

    state = client.post("/categories/history").json()
    assert state["kind"] == "category"
    assert state["phase"] == "idle"

    state = client.post("/topic").json()
    assert state["phase"] == "result"
    assert state["topic"]["category_id"] == "history"

    sections = client.get("/topic/sections").json()
    assert sections[0] == {"text": "Titre", "is_header": True}

    resp = client.post("/chat")
    assert resp.status_code == 201
    assert resp.json()["kind"] == "chat"
    assert len(resp.json()["messages"]) == 1

    remote_chat.send_message.return_value = "Et vous ?"
    body = client.post("/chat/messages", json={"text": "Pourquoi ?"}).json()
    assert body["user_message"]["text"] == "Pourquoi ?"
    assert body["bot_message"]["text"] == "Et vous ?"

    state = client.delete("/chat").json()
    assert state["phase"] == "result"
    assert state["messages"] == []

    assert client.post("/back").json()["kind"] == "home"


def test_unknown_category_is_404(client):
    client.post("/welcome")
    assert client.post("/categories/sports").status_code == 404


def test_invalid_transition_is_409(client):
    _start(client)
    resp = client.post("/chat")
    assert resp.status_code == 409
    assert resp.json()["detail"]


def test_generation_error_is_part_of_state(client, llm):
    llm.generate_content = AsyncMock(side_effect=RemoteGenerationError("quota"))
    _start(client, "love")

    state = client.post("/topic").json()
    assert state["phase"] == "error"
    assert state["error"] == GENERATION_FAILED

    assert client.delete("/topic/error").json()["phase"] == "idle"


def test_chat_error_is_502(client, remote_chat):
    _start(client)
    client.post("/topic")
    client.post("/chat")
    remote_chat.send_message = AsyncMock(side_effect=RemoteGenerationError("503"))

    resp = client.post("/chat/messages", json={"text": "Pourquoi ?"})
    assert resp.status_code == 502
    assert client.get("/state").json()["messages"][-1]["text"] == "Pourquoi ?"


def test_empty_message_is_400(client):
    _start(client)
    client.post("/topic")
    client.post("/chat")
    assert client.post("/chat/messages", json={"text": "  "}).status_code == 400


def test_export(client):
    _start(client)
    assert client.post("/topic/export").json()["notice"]["ok"] is False

    topic = client.post("/topic").json()["topic"]
    body = client.post("/topic/export").json()
    assert body["notice"]["ok"] is True
    assert body["text"] == topic["content"]


def test_grounding_sources_carry_display_title(client, llm):
    llm.generate_content.return_value = GenerationResult(
        text="Sujet",
        grounding_chunks=[{"uri": "https://a.example", "title": None}, {"uri": " "}],
    )
    _start(client)
    sources = client.post("/topic").json()["topic"]["grounding_sources"]
    assert sources == [
        {"uri": "https://a.example", "title": "Source Web", "display_title": "Source Web"}
    ]
