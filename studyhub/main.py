"""FastAPI application entry point and configuration."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from studyhub.api.analytics_router import router as analytics_router
from studyhub.api.flashcard_router import router as flashcard_router
from studyhub.api.planner_router import router as planner_router
from studyhub.config import settings
from studyhub.database import async_session, engine, init_db
from studyhub.errors import StudyHubError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize database on startup and cleanup on shutdown."""
    logging.basicConfig(level=settings.log_level)
    await init_db()
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Grade analytics, assignment planning and flashcard scheduling",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analytics_router)
app.include_router(planner_router)
app.include_router(flashcard_router)


@app.exception_handler(StudyHubError)
async def studyhub_error_handler(request: Request, exc: StudyHubError) -> JSONResponse:
    """Report computation errors as 422 with their error kind."""
    logger.info("%s on %s: %s", exc.kind, request.url.path, exc)
    return JSONResponse(status_code=422, content={"error": exc.kind, "detail": str(exc)})


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Check database connectivity and return status."""
    async with async_session() as session:
        await session.execute(text("SELECT 1"))
    return {"status": "ok"}
