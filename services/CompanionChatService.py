# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-15
# Updated: 2026-03-04
# Description: CompanionChatService.py
# -----------------------------------------------------------------------------
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from chat.OpenAIChat import Message, OpenAIChat
from errors.CompanionErrors import CompanionError, RetrievalError
from services.RetrievalOrchestrator import RetrievalOrchestrator
from utility.logging_utils import get_class_logger

APOLOGY = "Sorry, there was an error processing your request."
NO_ANSWER = "I'm not sure how to respond to that."


@dataclass
class ChatTurn:
    answer: str
    context: List[str] = field(default_factory=list)
    ok: bool = True
    model: Optional[str] = None
    usage: Any = None


@dataclass
class CompanionChatService:
    """
    Chat Service:
        - retrieves relevant observations using RetrievalOrchestrator
        - templates them into the persona system prompt
        - calls OpenAIChat to generate the answer
        - answers with an apology instead of raising when any step fails
    """
    retrieval: RetrievalOrchestrator
    chat_client: OpenAIChat
    user_first_name: str = "User"
    logger: logging.Logger | None = None

    system_prompt_template: str = (
        "You are a personal Companion to {name}. Act as a trusted thought partner. "
        "Be direct, concise, and conversational. Consider these observations: \n{context}"
    )

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)
        self.logger.info(
            "CompanionChatService initialised (retrieval=%s chat_client=%s)",
            type(self.retrieval).__name__,
            type(self.chat_client).__name__,
        )

    def build_system_prompt(self, context: List[str]) -> str:
        return self.system_prompt_template.format(name=self.user_first_name, context="\n".join(context))

    async def chat(
            self,
            *,
            message: str,
            k: Optional[int] = None,
            history: Optional[List[Message]] = None,
    ) -> ChatTurn:
        q = (message or "").strip()
        if not q:
            raise ValueError("message must not be empty")

        self.logger.info("chat: message='%s' k=%s history=%d (start)", q[:120], k, len(history or []))

        try:
            context = await self.retrieval.retrieve_context(q, k)
        except RetrievalError as e:
            self.logger.error("chat: retrieval failed: %s", e)
            return ChatTurn(answer=APOLOGY, ok=False)
        except CompanionError as e:
            self.logger.error("chat: index unavailable: %s", e)
            return ChatTurn(answer=APOLOGY, ok=False)

        self.logger.info("chat: retrieved observations=%d", len(context))

        messages: List[Message] = [{"role": "system", "content": self.build_system_prompt(context)}]
        if history:
            messages.extend(history)
        messages.append({"role": "user", "content": q})

        try:
            resp = await self.chat_client.chat(messages)
            answer = self.chat_client.answer_text(resp) or NO_ANSWER
        except CompanionError as e:
            self.logger.error("chat: generation failed: %s", e)
            return ChatTurn(answer=APOLOGY, context=context, ok=False)

        self.logger.info("chat: answer_chars=%d (done)", len(answer))
        return ChatTurn(
            answer=answer,
            context=context,
            ok=True,
            model=getattr(resp, "model", None),
            usage=getattr(resp, "usage", None),
        )
