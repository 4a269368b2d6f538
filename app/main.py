# =============================================================================
# FastAPI Application — Entry Point
# =============================================================================
#
# Run with:  uv run uvicorn app.main:app --reload
#
# Startup creates the pgvector extension and tables (init_db). Logging is
# configured once here; every module logs through logging.getLogger(__name__).
# =============================================================================

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api import appeals, reference, templates
from app.config import settings
from app.db.engine import async_engine, init_db
from app.models.responses import HealthResponse

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s v%s", settings.app_name, settings.app_version)
    await init_db()
    yield
    await async_engine.dispose()
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.app_name,
    description="Drafts marketplace seller appeal letters from a guided questionnaire.",
    version=settings.app_version,
    lifespan=lifespan,
)


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    return HealthResponse(version=settings.app_version, service=settings.app_name)


app.include_router(reference.router)
app.include_router(appeals.router)
app.include_router(templates.router)
