# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-20
# Description: health.py
# -----------------------------------------------------------------------------
from typing import Dict, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    message: str


class SmokeTestSummary(BaseModel):
    total: int
    passed: int
    failed: int


class DeepHealthResponse(BaseModel):
    status: str  # "ok" only when every probe passed
    results: Dict[str, bool] = Field(default_factory=dict)
    summary: SmokeTestSummary

    # Index facts, None when the document could not be read
    observations: Optional[int] = None
    dimension: Optional[int] = None
