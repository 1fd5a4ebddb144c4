# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-26
# Description: chat.py
# -----------------------------------------------------------------------------
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_chat_service
from api.schemas.chat import ChatRequest, ChatResponse
from services.CompanionChatService import CompanionChatService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def _usage_dict(usage: Any) -> Optional[Dict[str, Any]]:
    if usage is None:
        return None
    if isinstance(usage, dict):
        return usage
    if hasattr(usage, "model_dump"):
        return usage.model_dump()
    return None


@router.post("", response_model=ChatResponse)
async def post_chat(
        req: ChatRequest,
        svc: CompanionChatService = Depends(get_chat_service),
) -> ChatResponse:
    message = (req.message or "").strip()
    if not message:
        raise HTTPException(status_code=400, detail="message must not be empty")

    logger.info("POST /chat (start) message_len=%d k=%s", len(message), req.k)

    history = [h.model_dump() for h in req.history] if req.history else None
    turn = await svc.chat(message=message, k=req.k, history=history)

    logger.info("POST /chat (done) ok=%s answer_len=%d context=%d", turn.ok, len(turn.answer), len(turn.context))

    return ChatResponse(
        message=message,
        answer=turn.answer,
        ok=turn.ok,
        context=turn.context,
        model=turn.model,
        usage=_usage_dict(turn.usage),
    )
