# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: conftest.py
# -----------------------------------------------------------------------------

import asyncio
import re
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Dict, List, Optional, Set

import pytest

# add project root to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from config.Config import Config  # noqa: E402
from errors.CompanionErrors import ProviderError  # noqa: E402

# Each concept is one axis of the fake embedding space
CONCEPTS: Dict[str, Set[str]] = {
    "food": {"food", "apple", "apples", "eat", "eating", "fruit", "pizza", "cooking"},
    "work": {"work", "ai", "tools", "job", "code", "coding"},
    "like": {"like", "likes", "love", "enjoy"},
    "weather": {"rain", "sun", "weather", "cold"},
}


class KeywordEmbeddingProvider:
    """
    Deterministic stand-in for the embedding API: counts concept keywords,
    so texts about the same thing land close together.
    """

    def __init__(
            self,
            *,
            fail_on: Optional[Set[str]] = None,
            delay: float = 0.0,
            dimension_override: Optional[Dict[str, int]] = None,
    ):
        self.fail_on = fail_on or set()
        self.delay = delay
        self.dimension_override = dimension_override or {}
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if text in self.fail_on:
                raise ProviderError(f"rate limited: {text}")
            if text in self.dimension_override:
                return [1.0] * self.dimension_override[text]
            return keyword_vector(text)
        finally:
            self.in_flight -= 1


def keyword_vector(text: str) -> List[float]:
    tokens = re.findall(r"[a-z]+", text.lower())
    return [float(sum(1 for t in tokens if t in words)) for words in CONCEPTS.values()]


class ScriptedChatClient:
    """Replays canned answers (or raises) in place of OpenAIChat."""

    def __init__(self, answers: Optional[List[str]] = None, error: Optional[Exception] = None):
        self.answers = list(answers or [])
        self.error = error
        self.requests: List[list] = []

    async def chat(self, messages, temperature=None, max_tokens=None, extra_params=None):
        self.requests.append(messages)
        if self.error is not None:
            raise self.error
        content = self.answers.pop(0) if self.answers else ""
        return SimpleNamespace(
            model="gpt-test",
            usage={"total_tokens": 7},
            choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        )

    @staticmethod
    def answer_text(resp) -> str:
        return resp.choices[0].message.content or ""

    async def healthcheck(self) -> bool:
        return self.error is None


@pytest.fixture
def provider() -> KeywordEmbeddingProvider:
    return KeywordEmbeddingProvider()


@pytest.fixture
def cfg(tmp_path) -> Config:
    return Config(
        openai_api_key="sk-test",
        vault_dir=str(tmp_path),
        debounce_seconds=0.05,
        embed_timeout_seconds=1.0,
        embed_max_retries=0,
    )
