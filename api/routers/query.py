# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-26
# Description: query router
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_retrieval
from api.schemas.query import QueryRequest, QueryResponse, QueryHit
from errors.CompanionErrors import RetrievalError, StorageError
from services.RetrievalOrchestrator import RetrievalOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/query", tags=["query"])


@router.post("", response_model=QueryResponse)
async def post_query(
    req: QueryRequest,
    svc: RetrievalOrchestrator = Depends(get_retrieval),
) -> QueryResponse:
    query_text = (req.query or "").strip()
    if not query_text:
        raise HTTPException(status_code=400, detail="query must not be empty")

    k = req.k if req.k is not None else svc.default_k

    try:
        scored = await svc.retrieve_scored(query_text, k)
    except RetrievalError as e:
        logger.error("Query failed: %s", e)
        raise HTTPException(status_code=502, detail=f"Retrieval failed: {e}")
    except StorageError as e:
        logger.error("Index unreadable: %s", e)
        raise HTTPException(status_code=500, detail=f"Index unreadable: {e}")

    hits = []
    for rank, (obs, score) in enumerate(scored, start=1):
        hit = QueryHit(rank=rank, text=obs.text, score=score)
        if req.include_metadata:
            hit.date = obs.metadata.date
            hit.source = obs.metadata.source
            hit.source_quote = obs.metadata.source_quote
            hit.tags = obs.metadata.tags
        hits.append(hit)

    return QueryResponse(query=query_text, k=k, results=hits)
