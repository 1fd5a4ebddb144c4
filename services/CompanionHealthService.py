# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-20
# Description: CompanionHealthService.py
# -----------------------------------------------------------------------------
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from api.schemas.health import DeepHealthResponse, SmokeTestSummary
from chat.OpenAIChat import OpenAIChat
from errors.CompanionErrors import StorageError
from health.EmbeddingHealth import EmbeddingHealth
from utility.logging_utils import get_class_logger
from vectorstore.EmbeddingIndex import EmbeddingIndex


@dataclass
class CompanionHealthService:
    """
    Runs smoke checks on the index document, the embedding provider and
    (optionally, since it costs a completion) the chat model.
    Returns DeepHealthResponse for API layer
    """

    index: EmbeddingIndex
    embedding_health: EmbeddingHealth
    chat_client: Optional[OpenAIChat] = None
    logger: Optional[logging.Logger] = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

    async def deep_health(self, run_chat: bool = False) -> DeepHealthResponse:
        results: Dict[str, bool] = {}

        observations = None
        dimension = None
        try:
            loaded = await self.index.load()
            observations = len(loaded)
            dimension = loaded[0].dimension if loaded else None
            results["index"] = True
        except StorageError as e:
            self.logger.error("Index healthcheck failed: %s", e)
            results["index"] = False

        results["embedding"] = await self.embedding_health.run()

        if run_chat and self.chat_client is not None:
            results["chat"] = await self.chat_client.healthcheck()

        total = len(results)
        passed = sum(1 for ok in results.values() if ok)
        failed = total - passed

        overall_status = "ok" if failed == 0 else "error"
        self.logger.info("Deep health: %s (%d/%d passed)", overall_status, passed, total)

        return DeepHealthResponse(
            status=overall_status,
            results=results,
            summary=SmokeTestSummary(total=total, passed=passed, failed=failed),
            observations=observations,
            dimension=dimension,
        )
