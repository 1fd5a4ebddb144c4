# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-20
# Description: EmbeddingHealth
# -----------------------------------------------------------------------------
import logging
import time
from typing import Optional

from embedding.EmbeddingProvider import EmbeddingProvider
from errors.CompanionErrors import ProviderError
from utility.logging_utils import get_class_logger


class EmbeddingHealth:
    """
    Smoke test for the embedding provider.

    Verifies:
      - The embedding call completes successfully
      - The response contains a non-empty vector
      - The vector dimension matches the expected dimension (if provided)
    """

    probe_text = "Companion embedding healthcheck"

    def __init__(
        self,
        provider: EmbeddingProvider,
        expected_dim: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.provider = provider
        self.expected_dim = expected_dim
        self.logger = logger or get_class_logger(self.__class__)

    async def run(self) -> bool:
        self.logger.info("Running embedding healthcheck")

        try:
            start = time.time()
            embedding = await self.provider.embed(self.probe_text)
            elapsed_ms = (time.time() - start) * 1000.0
        except ProviderError as e:
            self.logger.error("Embedding healthcheck FAILED: %s", e)
            return False

        if not embedding:
            self.logger.error("No embedding data returned in response.")
            return False

        dim = len(embedding)
        self.logger.info("Embedding call succeeded in %.1f ms. Returned dimension: %d", elapsed_ms, dim)

        # Optional dimension validation
        if self.expected_dim is not None and dim != self.expected_dim:
            self.logger.warning("Dimension mismatch: expected %d, got %d.", self.expected_dim, dim)
            return False

        self.logger.info("Embedding healthcheck PASSED.")
        return True
