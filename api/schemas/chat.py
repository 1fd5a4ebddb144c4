# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-22
# Description: api/schemas/chat.py
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field


class HistoryMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)

    # Retrieval controls (mirror /query)
    k: Optional[int] = Field(None, ge=1, le=50)  # None = COMPANION_TOP_K

    # Earlier turns of the conversation, oldest first
    history: Optional[List[HistoryMessage]] = None


class ChatResponse(BaseModel):
    message: str
    answer: str
    ok: bool
    context: List[str] = Field(default_factory=list)

    # helpful for debugging / telemetry
    model: Optional[str] = None
    usage: Optional[Dict[str, Any]] = None
