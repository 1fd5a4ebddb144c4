# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Updated: 2026-03-01
# Description: CompanionEmbedder
# -----------------------------------------------------------------------------
import asyncio
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI, OpenAIError

from config.Config import Config
from errors.CompanionErrors import ProviderError
from utility.logging_utils import get_class_logger


class CompanionEmbedder:
    """
    OpenAI embedding provider: one text in, one vector out.

    Every call is bounded by `timeout_seconds` and retried with backoff
    up to `max_retries` times; anything that still fails is raised as
    ProviderError so callers only have one failure type to handle.
    """

    def __init__(
            self,
            cfg: Config,
            *,
            client: Optional[Any] = None,
            retry_delay: float = 0.8,
            logger=None,
    ):
        self.cfg = cfg
        self.model = cfg.openai_embed_model or "text-embedding-3-large"
        self.dimensions = cfg.embed_dimensions or None
        self.timeout_seconds = cfg.embed_timeout_seconds
        self.max_retries = cfg.embed_max_retries
        self.retry_delay = retry_delay
        self.logger = logger or get_class_logger(self.__class__)

        if client is not None:
            self.client = client
        elif cfg.openai_base_url:
            self.client = AsyncOpenAI(api_key=cfg.openai_api_key, base_url=cfg.openai_base_url)
        else:
            self.client = AsyncOpenAI(api_key=cfg.openai_api_key)

        self.logger.info(
            "OpenAI Embedder initialized (model=%s, dimensions=%s, timeout=%.1fs, retries=%d)",
            self.model,
            self.dimensions or "default",
            self.timeout_seconds,
            self.max_retries,
        )

    async def embed(self, text: str) -> List[float]:
        if not text or not text.strip():
            raise ValueError("text must not be empty")

        delay = self.retry_delay
        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return await self._embed_once(text)
            except ProviderError as e:
                self.logger.warning(
                    "Embedding call failed (attempt %d/%d): %s", attempt, attempts, e
                )
                if attempt == attempts:
                    raise
                await asyncio.sleep(delay)
                delay *= 1.7  # backoff

        # Unreachable and include for type checkers
        raise ProviderError("Embedding failed")

    async def _embed_once(self, text: str) -> List[float]:
        params: Dict[str, Any] = {"model": self.model, "input": text}
        if self.dimensions:
            params["dimensions"] = self.dimensions

        try:
            resp = await asyncio.wait_for(
                self.client.embeddings.create(**params),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise ProviderError(
                f"Embedding request timed out after {self.timeout_seconds:.1f}s"
            ) from e
        except OpenAIError as e:
            raise ProviderError(f"Embedding request failed: {e}") from e

        if not resp.data or not resp.data[0].embedding:
            raise ProviderError("Embedding response contained no vector")
        return [float(x) for x in resp.data[0].embedding]

    async def test_connection(self) -> bool:
        try:
            vec = await self.embed("Companion embedding healthcheck")
            self.logger.info("Embedding connection OK (dimension=%d)", len(vec))
            return True
        except ProviderError as e:
            self.logger.error("Embedding connection failed: %s", e)
            return False
