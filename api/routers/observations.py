# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-27
# Description: observations router
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_observation_service
from api.schemas.observations import (
    ChangeNotificationResponse,
    IndexStatusResponse,
    ObserveRequest,
    ObserveResponse,
    RefreshResultModel,
)
from errors.CompanionErrors import ProviderError, StorageError
from services.CompanionObservationService import CompanionObservationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/observations", tags=["observations"])


@router.post("/changed", response_model=ChangeNotificationResponse)
async def post_changed(
    svc: CompanionObservationService = Depends(get_observation_service),
) -> ChangeNotificationResponse:
    # Host "document modified" event
    svc.notify_changed()
    return ChangeNotificationResponse(scheduled=True, quiet_period_seconds=svc.scheduler.quiet_period)


@router.post("/refresh", response_model=RefreshResultModel)
async def post_refresh(
    svc: CompanionObservationService = Depends(get_observation_service),
) -> RefreshResultModel:
    logger.info("POST /observations/refresh (start)")
    try:
        result = await svc.refresh_now()
    except StorageError as e:
        logger.error("Refresh failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Refresh failed: {e}")
    return RefreshResultModel(**result.to_dict())


@router.post("/observe", response_model=ObserveResponse)
async def post_observe(
    req: ObserveRequest,
    svc: CompanionObservationService = Depends(get_observation_service),
) -> ObserveResponse:
    if not req.content.strip():
        raise HTTPException(status_code=400, detail="content must not be empty")

    try:
        lines = await svc.observe(req.content, source=req.source)
    except ProviderError as e:
        logger.error("Observation generation failed: %s", e)
        raise HTTPException(status_code=502, detail=f"Observation generation failed: {e}")
    except StorageError as e:
        logger.error("Could not save observations: %s", e)
        raise HTTPException(status_code=500, detail=f"Could not save observations: {e}")

    return ObserveResponse(source=req.source, observations=lines, count=len(lines))


@router.get("/status", response_model=IndexStatusResponse)
async def get_status(
    svc: CompanionObservationService = Depends(get_observation_service),
) -> IndexStatusResponse:
    return IndexStatusResponse(**(await svc.status()))
