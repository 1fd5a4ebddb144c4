# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-28
# Description: test_api_routes.py
# -----------------------------------------------------------------------------
import time
from dataclasses import replace

import pytest
from starlette.testclient import TestClient

from api.AppContainer import AppContainer
from api.dependencies import get_chat_service, get_health_service, get_observation_service, get_retrieval
from api.main import app
from conftest import KeywordEmbeddingProvider, ScriptedChatClient
from errors.CompanionErrors import ProviderError


@pytest.fixture
def container(cfg):
    return AppContainer(
        cfg,
        embedder=KeywordEmbeddingProvider(),
        chat_client=ScriptedChatClient(
            answers=["- Sam mentioned liking green apples.\n- Sam works on AI tools.", "Green apples."]
        ),
    )


@pytest.fixture
def client(container):
    app.dependency_overrides[get_retrieval] = lambda: container.retrieval
    app.dependency_overrides[get_chat_service] = lambda: container.chat_service
    app.dependency_overrides[get_observation_service] = lambda: container.observation_service
    app.dependency_overrides[get_health_service] = lambda: container.health_service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _wait_for_refresh(client, count=1, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        status = client.get("/observations/status").json()
        if status["refresh_count"] >= count and not status["pending"] and not status["running"]:
            return status
        time.sleep(0.02)
    raise AssertionError("refresh did not complete in time")


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_deep_health_checks_index_and_embedding(client):
    resp = client.get("/health/deep")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert set(data["results"]) == {"index", "embedding"}


def test_observe_then_query_then_chat(client, container):
    resp = client.post("/observations/observe", json={"content": "Lunch was apples.", "source": "Daily note"})
    assert resp.status_code == 200
    assert resp.json()["count"] == 2

    status = _wait_for_refresh(client)
    assert status["observations"] == 2
    assert status["last_result"]["embedded"] == 2

    resp = client.post("/query", json={"query": "What food do I like?", "k": 1})
    assert resp.status_code == 200
    (hit,) = resp.json()["results"]
    assert hit["rank"] == 1
    assert hit["text"] == "Sam mentioned liking green apples."
    assert hit["source"] == "Daily note"

    resp = client.post("/chat", json={"message": "What food do I like?", "k": 1})
    assert resp.status_code == 200
    data = resp.json()
    assert data["ok"] is True
    assert data["answer"] == "Green apples."
    assert data["context"] == ["Sam mentioned liking green apples."]
    assert data["usage"] == {"total_tokens": 7}


def test_changed_notification_schedules_debounced_refresh(client, cfg):
    with open(cfg.observations_path, "w", encoding="utf-8") as f:
        f.write("I like green apples.\nI work on AI tools.\n")

    for _ in range(3):
        resp = client.post("/observations/changed")
        assert resp.status_code == 200
        assert resp.json() == {"scheduled": True, "quiet_period_seconds": cfg.debounce_seconds}

    status = _wait_for_refresh(client)
    assert status["observations"] == 2


def test_manual_refresh_returns_counts(client, cfg):
    with open(cfg.observations_path, "w", encoding="utf-8") as f:
        f.write("I like green apples.\n")

    resp = client.post("/observations/refresh")

    assert resp.status_code == 200
    assert resp.json()["stored"] == 1


def test_query_on_empty_index_returns_no_results(client):
    resp = client.post("/query", json={"query": "anything"})
    assert resp.status_code == 200
    assert resp.json()["results"] == []


def test_query_embedding_failure_is_502(client, container, cfg):
    with open(cfg.observations_path, "w", encoding="utf-8") as f:
        f.write("I like green apples.\n")
    client.post("/observations/refresh")
    container.retrieval.provider = KeywordEmbeddingProvider(fail_on={"apples"})

    resp = client.post("/query", json={"query": "apples"})

    assert resp.status_code == 502


def test_query_on_malformed_index_is_500(client, cfg):
    with open(cfg.embeddings_path, "w", encoding="utf-8") as f:
        f.write("[{}]")

    resp = client.post("/query", json={"query": "apples"})

    assert resp.status_code == 500


def test_query_validation(client):
    assert client.post("/query", json={"query": "x", "k": 0}).status_code == 422
    assert client.post("/query", json={"query": "   "}).status_code == 400


def test_chat_failure_is_an_apology_not_an_error(client, container):
    container.chat_service.chat_client = ScriptedChatClient(error=ProviderError("503"))

    resp = client.post("/chat", json={"message": "hello"})

    assert resp.status_code == 200
    data = resp.json()
    assert data["ok"] is False
    assert data["answer"].startswith("Sorry")


def test_observe_provider_failure_is_502(client, container):
    container.observation_service.chat_client = ScriptedChatClient(error=ProviderError("down"))

    resp = client.post("/observations/observe", json={"content": "a note"})

    assert resp.status_code == 502


def test_top_k_setting_is_the_default_for_query_and_chat(cfg):
    container = AppContainer(
        replace(cfg, top_k=2),
        embedder=KeywordEmbeddingProvider(),
        chat_client=ScriptedChatClient(answers=["Noted."]),
    )
    with open(cfg.observations_path, "w", encoding="utf-8") as f:
        f.write("I like green apples.\nI love eating pizza.\nI work on AI tools.\nCold rain.\n")

    app.dependency_overrides[get_retrieval] = lambda: container.retrieval
    app.dependency_overrides[get_chat_service] = lambda: container.chat_service
    app.dependency_overrides[get_observation_service] = lambda: container.observation_service
    try:
        with TestClient(app) as c:
            assert c.post("/observations/refresh").json()["stored"] == 4

            resp = c.post("/query", json={"query": "food"})
            assert resp.status_code == 200
            assert resp.json()["k"] == 2
            assert len(resp.json()["results"]) == 2

            resp = c.post("/chat", json={"message": "food"})
            assert resp.status_code == 200
            assert len(resp.json()["context"]) == 2

            resp = c.post("/query", json={"query": "food", "k": 3})
            assert len(resp.json()["results"]) == 3
    finally:
        app.dependency_overrides.clear()
