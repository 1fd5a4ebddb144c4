# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-25
# Description: dependencies.py
# -----------------------------------------------------------------------------
from functools import lru_cache

from api.AppContainer import AppContainer
from services.CompanionChatService import CompanionChatService
from services.CompanionHealthService import CompanionHealthService
from services.CompanionObservationService import CompanionObservationService
from services.RetrievalOrchestrator import RetrievalOrchestrator


@lru_cache
def get_app_container() -> AppContainer:
    # built on first request so importing the app needs no credentials
    return AppContainer()

def get_health_service() -> CompanionHealthService:
    # use the singleton service from the container
    return get_app_container().health_service

def get_retrieval() -> RetrievalOrchestrator:
    # use the singleton service from the container
    return get_app_container().retrieval

def get_chat_service() -> CompanionChatService:
    # use the singleton service from the container
    return get_app_container().chat_service

def get_observation_service() -> CompanionObservationService:
    # use the singleton service from the container
    return get_app_container().observation_service
