# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-03-03
# Description: test_open_ai_integration.py
# -----------------------------------------------------------------------------
import os

import pytest

from chat.OpenAIChat import OpenAIChat
from config.Config import Config
from embedding.CompanionEmbedder import CompanionEmbedder


def _skip_if_missing_prereqs():
    missing = [name for name in Config.OPENAI_ENV_VARS if not os.getenv(name)]
    if missing:
        pytest.skip(f"Missing env vars for OpenAI: {', '.join(missing)}")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_openai_chat_simple_roundtrip():
    """
    Integration test:
      - instantiate OpenAIChat
      - send a tiny prompt
      - verify response is returned
    """
    _skip_if_missing_prereqs()

    chat = OpenAIChat(cfg=Config.from_env())

    resp = await chat.simple_chat(
        user_text="Reply with a single word: OK",
        system_text="You are a test assistant.",
        temperature=0.0,
        max_tokens=5,
    )

    assert isinstance(resp, dict)
    assert resp["answer"].strip().upper().startswith("OK")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_openai_embedding_roundtrip():
    _skip_if_missing_prereqs()

    cfg = Config.from_env()
    embedder = CompanionEmbedder(cfg)

    vec = await embedder.embed("I like green apples.")

    assert len(vec) > 0
    if cfg.embed_dimensions:
        assert len(vec) == cfg.embed_dimensions


@pytest.mark.integration
@pytest.mark.asyncio
async def test_openai_chat_healthcheck():
    _skip_if_missing_prereqs()
    chat = OpenAIChat(cfg=Config.from_env())
    assert await chat.healthcheck() is True
