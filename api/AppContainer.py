# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-25
# Description: AppContainer.py
# -----------------------------------------------------------------------------
from typing import Optional

from chat.OpenAIChat import OpenAIChat
from config.Config import Config
from corpus.TextCorpusStore import TextCorpusStore
from embedding.CompanionEmbedder import CompanionEmbedder
from embedding.EmbeddingProvider import EmbeddingProvider
from health.EmbeddingHealth import EmbeddingHealth
from services.CompanionChatService import CompanionChatService
from services.CompanionHealthService import CompanionHealthService
from services.CompanionObservationService import CompanionObservationService
from services.RetrievalOrchestrator import RetrievalOrchestrator
from utility.logging_utils import get_class_logger
from vectorstore.EmbeddingIndex import EmbeddingIndex
from vectorstore.SimilarityRanker import CosineSimilarityRanker


class AppContainer:
    """
    Owns heavy object instantiation and application wiring.
    Singleton instances are provided via FastAPI dependencies.
    """

    def __init__(
            self,
            cfg: Optional[Config] = None,
            *,
            embedder: Optional[EmbeddingProvider] = None,
            chat_client: Optional[OpenAIChat] = None,
    ) -> None:
        # Configuration
        self.cfg = cfg or Config.from_env()
        self.logger = get_class_logger(self.__class__)
        self.logger.info("Building AppContainer: %s", self.cfg.summary())

        # Core infrastructure
        # Clients can be swapped for offline fakes
        self.embedder = embedder or CompanionEmbedder(cfg=self.cfg)
        self.openai_chat = chat_client or OpenAIChat(cfg=self.cfg)
        self.corpus = TextCorpusStore(self.cfg.observations_path)

        # Upper bound per line covers the embedder's own retries + backoff
        call_timeout = self.cfg.embed_timeout_seconds * (self.cfg.embed_max_retries + 1) + 10.0
        self.index = EmbeddingIndex(
            self.cfg.embeddings_path,
            self.embedder,
            concurrency=self.cfg.embed_concurrency,
            expected_dim=self.cfg.embed_dimensions or None,
            call_timeout=call_timeout,
        )

        # Return a singleton RetrievalOrchestrator instance
        self.retrieval = RetrievalOrchestrator(
            index=self.index,
            provider=self.embedder,
            ranker=CosineSimilarityRanker(),
            default_k=self.cfg.top_k,
            call_timeout=call_timeout,
        )

        # Return a singleton CompanionObservationService instance
        self.observation_service = CompanionObservationService(
            corpus=self.corpus,
            index=self.index,
            chat_client=self.openai_chat,
            user_first_name=self.cfg.user_first_name,
            quiet_period=self.cfg.debounce_seconds,
            full_rebuild=self.cfg.full_rebuild,
        )

        # Return a singleton CompanionChatService instance
        self.chat_service = CompanionChatService(
            retrieval=self.retrieval,
            chat_client=self.openai_chat,
            user_first_name=self.cfg.user_first_name,
        )

        # Return a singleton CompanionHealthService instance
        self.health_service = CompanionHealthService(
            index=self.index,
            embedding_health=EmbeddingHealth(self.embedder, expected_dim=self.cfg.embed_dimensions or None),
            chat_client=self.openai_chat,
        )

    async def aclose(self) -> None:
        await self.observation_service.aclose()
