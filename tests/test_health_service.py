# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-20
# Description: test_health_service.py
# -----------------------------------------------------------------------------
import pytest

from conftest import KeywordEmbeddingProvider, ScriptedChatClient
from errors.CompanionErrors import ProviderError
from health.EmbeddingHealth import EmbeddingHealth
from services.CompanionHealthService import CompanionHealthService
from vectorstore.EmbeddingIndex import EmbeddingIndex


def _service(tmp_path, provider, chat_client=None, expected_dim=None):
    return CompanionHealthService(
        index=EmbeddingIndex(tmp_path / "observation_embeddings.json", provider),
        embedding_health=EmbeddingHealth(provider, expected_dim=expected_dim),
        chat_client=chat_client,
    )


@pytest.mark.asyncio
async def test_deep_health_ok_reports_index_facts(tmp_path, provider):
    svc = _service(tmp_path, provider)
    await svc.index.rebuild(["I like green apples."])

    resp = await svc.deep_health()

    assert resp.status == "ok"
    assert resp.results == {"index": True, "embedding": True}
    assert resp.observations == 1
    assert resp.dimension == 4


@pytest.mark.asyncio
async def test_malformed_index_fails_the_index_probe(tmp_path, provider):
    (tmp_path / "observation_embeddings.json").write_text("[1, 2]", encoding="utf-8")

    resp = await _service(tmp_path, provider).deep_health()

    assert resp.status == "error"
    assert resp.results["index"] is False
    assert resp.observations is None
    assert resp.summary.failed == 1


@pytest.mark.asyncio
async def test_embedding_probe_checks_dimension_and_errors(tmp_path):
    assert await EmbeddingHealth(KeywordEmbeddingProvider(), expected_dim=4).run() is True
    assert await EmbeddingHealth(KeywordEmbeddingProvider(), expected_dim=3072).run() is False

    failing = KeywordEmbeddingProvider(fail_on={EmbeddingHealth.probe_text})
    assert await EmbeddingHealth(failing).run() is False


@pytest.mark.asyncio
async def test_chat_probe_only_runs_when_requested(tmp_path, provider):
    chat = ScriptedChatClient(error=ProviderError("down"))
    svc = _service(tmp_path, provider, chat_client=chat)

    assert "chat" not in (await svc.deep_health()).results

    resp = await svc.deep_health(run_chat=True)
    assert resp.results["chat"] is False
    assert resp.status == "error"
