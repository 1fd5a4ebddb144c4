# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: RetrievalOrchestrator
# -----------------------------------------------------------------------------
import asyncio
import logging
import math
from typing import List, Optional

from embedding.EmbeddingProvider import EmbeddingProvider
from errors.CompanionErrors import ProviderError, RetrievalError
from utility.logging_utils import get_class_logger
from vectorstore.EmbeddingIndex import EmbeddingIndex
from vectorstore.SimilarityRanker import CosineSimilarityRanker, ScoredObservation, SimilarityRanker


class RetrievalOrchestrator:
    """
    Query-time retrieval:
        - reads whatever index state is currently persisted
        - embeds the query text
        - ranks observations by cosine similarity
        - returns the top-k observation texts (scores are only logged)
    """

    def __init__(
            self,
            *,
            index: EmbeddingIndex,
            provider: EmbeddingProvider,
            ranker: Optional[SimilarityRanker] = None,
            default_k: int = 5,
            call_timeout: Optional[float] = None,
            logger: logging.Logger | None = None,
    ) -> None:
        self.index = index
        self.provider = provider
        self.ranker = ranker or CosineSimilarityRanker()
        self.default_k = default_k
        self.call_timeout = call_timeout
        self.logger = logger or get_class_logger(self.__class__)

    async def retrieve_context(self, query_text: str, k: Optional[int] = None) -> List[str]:
        scored = await self.retrieve_scored(query_text, k)
        return [obs.text for obs, _ in scored]

    async def retrieve_scored(self, query_text: str, k: Optional[int] = None) -> List[ScoredObservation]:
        q = (query_text or "").strip()
        if not q:
            raise ValueError("query_text must not be empty")
        k = self.default_k if k is None else k

        # StorageError on a malformed index propagates as-is
        observations = await self.index.load()
        if not observations:
            self.logger.info("retrieve: index is empty; returning no context")
            return []

        query_vector = await self._embed_query(q)

        try:
            scored = self.ranker.rank(query_vector, observations, k)
        except ValueError as e:
            self.logger.error("retrieve: ranking failed: %s", e)
            raise RetrievalError(f"Could not rank observations: {e}") from e

        self.logger.info("Top observations with scores (k=%d, candidates=%d):", k, len(observations))
        for obs, score in scored:
            self.logger.info("Score: %.4f, Observation: %s", score, obs.short_preview())

        return scored

    async def _embed_query(self, q: str) -> List[float]:
        try:
            if self.call_timeout is not None:
                vec = await asyncio.wait_for(self.provider.embed(q), timeout=self.call_timeout)
            else:
                vec = await self.provider.embed(q)
            vec = [float(x) for x in vec]
        except asyncio.TimeoutError as e:
            self.logger.error("retrieve: query embedding timed out (limit=%ss)", self.call_timeout)
            raise RetrievalError(f"Query embedding timed out (limit={self.call_timeout}s)") from e
        except ProviderError as e:
            self.logger.error("retrieve: query embedding failed: %s", e)
            raise RetrievalError(f"Could not embed query: {e}") from e
        except Exception as e:
            # any EmbeddingProvider implementation, not only the OpenAI one
            self.logger.error("retrieve: query embedding failed unexpectedly: %r", e)
            raise RetrievalError(f"Could not embed query: {e!r}") from e

        if not vec or not all(math.isfinite(x) for x in vec):
            raise RetrievalError("Query embedding is empty or contains non-finite values")
        return vec
