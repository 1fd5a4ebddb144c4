# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-24
# Description: observations.py
# -----------------------------------------------------------------------------
from typing import List, Optional

from pydantic import BaseModel, Field


class ObserveRequest(BaseModel):
    content: str = Field(..., min_length=1)
    source: Optional[str] = None  # e.g. the note's basename


class ObserveResponse(BaseModel):
    source: Optional[str] = None
    observations: List[str] = Field(default_factory=list)
    count: int


class ChangeNotificationResponse(BaseModel):
    scheduled: bool
    quiet_period_seconds: float


class RefreshResultModel(BaseModel):
    mode: str
    total: int
    embedded: int
    reused: int
    failed: int
    removed: int
    stored: int
    failed_texts: List[str] = Field(default_factory=list)
    finished_at: Optional[str] = None


class IndexStatusResponse(BaseModel):
    observations: Optional[int] = None
    dimension: Optional[int] = None
    index_error: Optional[str] = None
    pending: bool
    running: bool
    refresh_count: int
    last_error: Optional[str] = None
    last_result: Optional[RefreshResultModel] = None
