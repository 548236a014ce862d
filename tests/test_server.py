"""
Integration tests for the FastAPI server.
Uses the real FastAPI TestClient with a FunctionModel-backed agent.
"""
import json

import pytest
from fastapi.testclient import TestClient
from pydantic_ai.models.function import AgentInfo, FunctionModel

from agent.agent import create_agent
from agent.wrapper import AgentWrapper
from core.models import Message
from core.persistence import InMemoryPersistence
from core.pricing import ModelPricing, PricingTable
from server import app, set_agent_factory, set_persistence, set_pricing
from server.state import get_persistence


async def stream_text(messages, info: AgentInfo):
    yield "Hello"
    yield " from the model"


async def stream_failure(messages, info: AgentInfo):
    yield "Partial"
    raise RuntimeError("upstream connection lost")


def factory_for(stream_function):
    def factory(model_id, api_key, search_tools, custom_instructions):
        agent = create_agent(model=FunctionModel(stream_function=stream_function))
        return AgentWrapper(agent=agent, tools=search_tools)

    return factory


def parse_sse(body: str) -> list[dict]:
    """Parse an SSE body into {"event", "data"} dicts."""
    events = []
    current: dict = {}
    for line in body.splitlines():
        if not line.strip():
            if current:
                events.append(current)
                current = {}
            continue
        field, _, value = line.partition(":")
        value = value.lstrip(" ")
        if field == "event":
            current["event"] = value
        elif field == "data":
            current["data"] = json.loads(value)
    if current:
        events.append(current)
    return events


def chat_body(**overrides) -> dict:
    body = {
        "messages": [{"id": "u1", "role": "user", "parts": [{"type": "text", "text": "Hi"}]}],
        "threadId": "thread-1",
        "modelId": "test-vendor/test-model",
        "openrouterClientKey": "client-key",
    }
    body.update(overrides)
    return body


@pytest.fixture(scope="module")
def client():
    """Create a test client sharing one event loop across the module."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def server_state():
    """Give each test a fresh store, a known price table and a scripted model."""
    set_persistence(InMemoryPersistence())
    set_pricing(PricingTable({"test-vendor/test-model": ModelPricing(1.0, 2.0)}))
    set_agent_factory(factory_for(stream_text))
    yield
    set_agent_factory(None)


class TestHealthEndpoint:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "pricedModels": 1}


class TestChatEndpoint:
    """Test POST /chat."""

    def test_stream_and_persist(self, client):
        response = client.post("/chat", json=chat_body())

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        events = parse_sse(response.text)
        names = [e["event"] for e in events]
        assert names[0] == "message.saved"
        assert "message.created" in names
        assert "part.updated" in names
        finished = next(e for e in events if e["event"] == "message.finished")
        message = finished["data"]["properties"]["message"]
        assert message["parts"][0]["text"] == "Hello from the model"
        assert message["metadata"]["model"] == "test-vendor/test-model"

        history = client.get("/threads/thread-1/messages").json()
        assert [m["role"] for m in history] == ["user", "assistant"]

    def test_missing_model_key(self, client, no_env_keys):
        response = client.post("/chat", json=chat_body(openrouterClientKey=None))

        assert response.status_code == 400
        assert "No API key configured" in response.json()["detail"]

    def test_env_model_key(self, client, mock_env_vars):
        response = client.post("/chat", json=chat_body(openrouterClientKey=None))

        assert response.status_code == 200

    def test_search_without_parallel_key(self, client, no_env_keys):
        response = client.post("/chat", json=chat_body(searchEnabled=True))

        assert response.status_code == 400
        assert "Parallel API key" in response.json()["detail"]

    def test_empty_messages_rejected(self, client):
        response = client.post("/chat", json=chat_body(messages=[]))

        assert response.status_code == 422

    def test_provider_failure_yields_error_event(self, client):
        set_agent_factory(factory_for(stream_failure))

        response = client.post("/chat", json=chat_body())

        events = parse_sse(response.text)
        errors = [e for e in events if e["event"] == "error"]
        assert len(errors) == 1
        assert errors[0]["data"]["properties"]["error"]
        assert "message.finished" not in [e["event"] for e in events]


class TestStopEndpoint:
    """Test POST /chat/stop."""

    def test_stop_without_generation(self, client):
        response = client.post("/chat/stop", json={"threadId": "thread-1"})

        assert response.status_code == 200
        assert response.json() == {"ok": True, "stopped": False, "savedID": None}

    def test_stop_saves_client_copy(self, client):
        message = {"id": "a1", "role": "assistant", "parts": [{"type": "text", "text": "Partial"}]}

        response = client.post("/chat/stop", json={"threadId": "thread-1", "message": message})

        assert response.json()["savedID"] == "a1"
        history = client.get("/threads/thread-1/messages").json()
        assert history[0]["stoppedByUser"] is True

    def test_stop_user_message_rejected(self, client):
        message = {"id": "u1", "role": "user", "parts": []}

        response = client.post("/chat/stop", json={"threadId": "thread-1", "message": message})

        assert response.status_code == 400


class TestThreadMessagesEndpoint:
    """Test GET /threads/{threadId}/messages."""

    def test_reconciles_with_stopped_ids(self, client):
        store = get_persistence()
        user = {"id": "u1", "role": "user", "parts": [{"type": "text", "text": "Q"}]}
        first = {"id": "A", "role": "assistant", "parts": [{"type": "text", "text": "Hello wor"}]}
        second = {"id": "B", "role": "assistant", "parts": [{"type": "text", "text": "Hello wor"}]}
        for message in (user, first, second):
            client.portal.call(store.save, "t2", "anonymous", Message.model_validate(message))

        full = client.get("/threads/t2/messages").json()
        reconciled = client.get("/threads/t2/messages", params={"stopped": "A"}).json()

        assert [m["id"] for m in full] == ["u1", "A", "B"]
        assert [m["id"] for m in reconciled] == ["u1", "A"]

    def test_unknown_thread_is_empty(self, client):
        assert client.get("/threads/missing/messages").json() == []

    def test_get_single_message(self, client):
        message = {"id": "a9", "role": "assistant", "parts": [{"type": "text", "text": "Hi"}]}
        client.portal.call(
            get_persistence().save, "t3", "anonymous", Message.model_validate(message)
        )

        response = client.get("/threads/t3/messages/a9")

        assert response.status_code == 200
        assert response.json()["parts"][0]["text"] == "Hi"

    def test_get_missing_message_404(self, client):
        response = client.get("/threads/t3/messages/missing")

        assert response.status_code == 404
