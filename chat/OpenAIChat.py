# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-14
# Description: OpenAIChat
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI, OpenAIError

from errors.CompanionErrors import ProviderError
from utility.logging_utils import get_class_logger

Message = Dict[str, str]  # {"role": "system"|"user"|"assistant", "content": "..."}


@dataclass
class OpenAIChat:
    """
        Async OpenAI chat wrapper for Companion.

        Expected Config fields:
          cfg.openai_api_key: str
          cfg.openai_base_url: str (optional)
          cfg.openai_chat_model: str  (e.g. "gpt-4-0125-preview", "gpt-4o", etc.)
    """

    cfg: Any
    client: Any = None
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

        if not getattr(self.cfg, "openai_api_key", None):
            raise ValueError("Config is missing openai_api_key")

        self.model = getattr(self.cfg, "openai_chat_model", None)
        if not self.model:
            raise ValueError("Config missing openai_chat_model.")

        if self.client is None:
            base_url = getattr(self.cfg, "openai_base_url", None)
            if base_url:
                self.client = AsyncOpenAI(api_key=self.cfg.openai_api_key, base_url=base_url)
            else:
                self.client = AsyncOpenAI(api_key=self.cfg.openai_api_key)

        self.logger.info("OpenAIChat initialised (model=%s)", self.model)

    # Standard chat call
    async def chat(
            self,
            messages: List[Message],
            temperature: Optional[float] = None,
            max_tokens: Optional[int] = None,
            extra_params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        if not messages:
            raise ValueError("messages must be non-empty.")

        params: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
        }
        if temperature is not None:
            params["temperature"] = temperature
        if max_tokens is not None:
            params["max_tokens"] = max_tokens
        if extra_params:
            params.update(extra_params)

        self.logger.debug(
            "Chat request: model=%s temp=%s max_tokens=%s messages=%d",
            self.model, temperature, max_tokens, len(messages)
        )

        try:
            resp = await self.client.chat.completions.create(**params)
        except OpenAIError as e:
            self.logger.error("Chat request failed: %s", e)
            raise ProviderError(f"Chat request failed: {e}") from e

        self.logger.debug("Raw ChatCompletion response: %r", resp)

        # Return the full response object (NOT just the content)
        return resp

    @staticmethod
    def answer_text(resp: Any) -> str:
        try:
            return resp.choices[0].message.content or ""
        except (AttributeError, IndexError, TypeError) as e:
            raise ProviderError(f"Unexpected chat response format: {e}") from e

    # Convenience helper
    async def simple_chat(
            self,
            user_text: str,
            system_text: Optional[str] = None,
            **kwargs: Any,
    ) -> dict:
        messages: List[Message] = []
        if system_text:
            messages.append({"role": "system", "content": system_text})
        messages.append({"role": "user", "content": user_text})

        resp = await self.chat(messages, **kwargs)
        content = self.answer_text(resp)

        self.logger.info("Chat answer generated (model=%s)", getattr(resp, "model", None))
        self.logger.debug("Token usage: %r", getattr(resp, "usage", None))

        return {
            "answer": content,
            "model": getattr(resp, "model", None),
            "usage": getattr(resp, "usage", None),
        }

    async def healthcheck(self) -> bool:
        try:
            _ = await self.simple_chat("ping", max_tokens=5, temperature=0.0)
            return True
        except ProviderError as e:
            self.logger.warning("Chat healthcheck failed: %s", e)
            return False
