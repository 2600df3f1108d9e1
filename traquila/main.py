"""FastAPI application entry point for Traquila."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from traquila import __version__
from traquila.config import settings
from traquila.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    configure_logging(settings.log_level, settings.log_file if settings.log_to_file else None)
    logger.info("Starting %s %s", settings.app_name, __version__)

    yield

    logger.info("Shutting down %s", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="Tequila tasting journal with cellar fill-level accounting and tasting insights",
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)

# Only allow origins from the whitelist; empty list means same-origin only
if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
        max_age=600,
    )


@app.get("/health", tags=["Health"])
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(
        content={
            "status": "healthy",
            "version": __version__,
            "app_name": settings.app_name,
        }
    )


from traquila.routers import bottles, cellar, export, insights, pours  # noqa: E402

app.include_router(bottles.router, prefix="/api/bottles", tags=["Bottles"])
app.include_router(pours.router, prefix="/api/pours", tags=["Pours"])
app.include_router(cellar.router, prefix="/api/cellar", tags=["Cellar"])
app.include_router(insights.router, prefix="/api/insights", tags=["Insights"])
app.include_router(export.router, prefix="/api/export", tags=["Export"])
