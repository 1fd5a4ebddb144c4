# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-18
# Updated: 2026-03-11
# Description: CompanionObservationService.py
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any, Dict, List, Optional

from chat.OpenAIChat import OpenAIChat
from corpus.TextCorpusStore import TextCorpusStore
from errors.CompanionErrors import StorageError
from observation.Observation import ObservationMetadata
from scheduling.DebounceScheduler import DebounceScheduler
from utility.logging_utils import get_class_logger
from vectorstore.EmbeddingIndex import EmbeddingIndex, RefreshResult

# "- foo", "* foo", "1. foo", "2) foo"
_LIST_MARKER = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+")


def clean_observation_lines(raw: str) -> List[str]:
    """Split a model answer into one observation per line, minus list markers."""
    lines: List[str] = []
    for line in (raw or "").splitlines():
        line = _LIST_MARKER.sub("", line).strip()
        if line:
            lines.append(line)
    return lines


class CompanionObservationService:
    """
    Owns the observation pipeline:
      - observe(): note content -> generated observations -> corpus append
      - notify_changed(): corpus change event -> debounced refresh
      - refresh(): corpus lines -> incremental index rebuild (scheduler action)
    """

    observation_prompt: str = (
        "Generate factual observations about the user from this text. "
        "The user's name is {name}. Only return the observations, one per line, nothing else. "
        "For example: '{name} mentioned liking green apples.', "
        "'{name} reflected that in a few hundred years LLMs from 2024 will sound funny.'"
    )

    def __init__(
            self,
            *,
            corpus: TextCorpusStore,
            index: EmbeddingIndex,
            chat_client: Optional[OpenAIChat] = None,
            user_first_name: str = "User",
            quiet_period: float = 10.0,
            full_rebuild: bool = False,
            scheduler: Optional[DebounceScheduler] = None,
            logger: logging.Logger | None = None,
    ) -> None:
        self.corpus = corpus
        self.index = index
        self.chat_client = chat_client
        self.user_first_name = user_first_name
        self.full_rebuild = full_rebuild
        self.logger = logger or get_class_logger(self.__class__)
        self.scheduler = scheduler or DebounceScheduler(self.refresh, quiet_period=quiet_period)

        self.last_result: Optional[RefreshResult] = None
        self._pending_metadata: Dict[str, ObservationMetadata] = {}

    # ------------------------------------------------------------------
    # Observe
    # ------------------------------------------------------------------
    async def observe(self, content: str, source: Optional[str] = None) -> List[str]:
        if not content or not content.strip():
            raise ValueError("content must not be empty")
        if self.chat_client is None:
            raise RuntimeError("observe() requires a chat client")

        self.logger.info("observe: source=%s content_chars=%d (start)", source, len(content))

        # ProviderError propagates; nothing has been written yet
        resp = await self.chat_client.chat(
            [
                {"role": "system", "content": self.observation_prompt.format(name=self.user_first_name)},
                {"role": "user", "content": content},
            ]
        )
        lines = clean_observation_lines(self.chat_client.answer_text(resp))
        if not lines:
            self.logger.warning("observe: model returned no observations for source=%s", source)
            return []

        await self.corpus.append(lines)

        hint = ObservationMetadata(date=date.today().isoformat(), source=source)
        for line in lines:
            self._pending_metadata[line] = hint

        self.logger.info("observe: %d observation(s) saved from %s", len(lines), source or "note")
        self.notify_changed()
        return lines

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------
    def notify_changed(self) -> None:
        self.scheduler.notify_changed()

    async def refresh(self) -> RefreshResult:
        lines = await self.corpus.candidate_lines()
        hints = dict(self._pending_metadata)

        result = await self.index.rebuild(lines, hints, incremental=not self.full_rebuild)

        # hints are consumed once their line made it into the index; a newer
        # hint set by observe() during this refresh stays for the next one
        failed = set(result.failed_texts)
        for text, hint in hints.items():
            if text not in failed and self._pending_metadata.get(text) is hint:
                del self._pending_metadata[text]

        self.last_result = result
        if result.failed:
            self.logger.warning(
                "Embeddings updated for %s with %d failed line(s)", self.corpus.path.name, result.failed
            )
        else:
            self.logger.info("Embeddings updated for %s", self.corpus.path.name)
        return result

    async def refresh_now(self) -> RefreshResult:
        return await self.scheduler.run_now()

    async def status(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "pending": self.scheduler.pending,
            "running": self.scheduler.running,
            "refresh_count": self.scheduler.refresh_count,
            "last_error": str(self.scheduler.last_error) if self.scheduler.last_error else None,
            "last_result": self.last_result.to_dict() if self.last_result else None,
        }
        try:
            observations = await self.index.load()
            out["observations"] = len(observations)
            out["dimension"] = observations[0].dimension if observations else None
            out["index_error"] = None
        except StorageError as e:
            out["observations"] = None
            out["dimension"] = None
            out["index_error"] = str(e)
        return out

    async def aclose(self) -> None:
        await self.scheduler.aclose()
