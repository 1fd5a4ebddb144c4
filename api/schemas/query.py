# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-22
# Description: query.py
# -----------------------------------------------------------------------------
from typing import List, Optional

from pydantic import Field, BaseModel

class QueryRequest(BaseModel):
    query: str = Field(..., min_length=1)
    k: Optional[int] = Field(None, ge=1, le=50)  # None = COMPANION_TOP_K
    include_metadata: bool = True

class QueryHit(BaseModel):
    rank: int
    text: str
    score: float
    date: Optional[str] = None
    source: Optional[str] = None
    source_quote: Optional[str] = None
    tags: Optional[List[str]] = None

class QueryResponse(BaseModel):
    query: str
    k: int
    results: List[QueryHit]
