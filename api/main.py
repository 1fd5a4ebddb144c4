# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-25
# Description: main.py
# -----------------------------------------------------------------------------
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.dependencies import get_app_container
from api.routers import health, query, chat, observations


@asynccontextmanager
async def lifespan(_: FastAPI):
    yield
    # Only close what was actually built; never build the container on shutdown
    if get_app_container.cache_info().currsize:
        await get_app_container().aclose()


logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
app = FastAPI(title="Companion API", lifespan=lifespan)
app.include_router(health.router)
app.include_router(observations.router)
app.include_router(query.router)
app.include_router(chat.router)


if __name__ == "__main__":
    import os
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=os.getenv("COMPANION_API_HOST", "127.0.0.1"),
        port=int(os.getenv("COMPANION_API_PORT", "8000")),
        log_level="info",
        reload=False,
    )
