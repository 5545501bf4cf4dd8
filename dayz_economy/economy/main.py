"""FastAPI application -- economy file validator entrypoint."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

import economy.deps as deps
from economy.api.validate import router as validate_router
from economy.config import load_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: load settings on startup, drop them on shutdown."""
    log_level = logging.DEBUG if os.environ.get("ECONOMY_DEV_MODE") else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    deps._settings = load_settings()
    logger.info("Economy validator starting with settings: %s", deps._settings.model_dump())

    yield

    deps._settings = None


app = FastAPI(
    title="DayZ Economy Validator",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(validate_router)
