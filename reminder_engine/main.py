"""Main FastAPI application module for the Reminder Extraction Engine.

This module initializes the FastAPI application and sets up the core routes and dependencies.
"""

import logging
import logging.config
from contextlib import asynccontextmanager
from typing import Any, Dict

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from reminder_engine.core.config import Settings, get_settings
from reminder_engine.core import dependencies as core_deps
from reminder_engine.core.logging_config import build_logging_config
from reminder_engine.api.routers import reminders as reminders_router
from reminder_engine.features.errors import ProviderError

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    try:
        settings = get_settings()
    except Exception as e:
        logger.error(f"Failed to load settings on startup: {e}", exc_info=True)
        raise
    logging.config.dictConfig(build_logging_config(settings.log_level))
    logger.info(f"Starting Reminder Extraction Engine API (provider: {settings.llm_provider})...")

    # LLM clients are created lazily via Depends; drop any left from a previous run.
    core_deps.reset_singletons()

    yield

    # Shutdown
    logger.info("Shutting down Reminder Extraction Engine API...")
    core_deps.reset_singletons()
    logger.info("Shutdown complete.")

# Create FastAPI app
app = FastAPI(
    title="Reminder Extraction Engine API",
    description="API for turning emails, notes and documents into reminder candidates.",
    version="0.1.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, replace with specific origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(ProviderError)
async def provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    """Handles provider errors raised while resolving dependencies (e.g. a missing API key)."""
    logger.warning(f"{exc.provider} unavailable for {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=reminders_router.provider_error_status(exc),
        content={"detail": exc.message},
    )

# Include API routers
app.include_router(reminders_router.router, prefix="/api/v1/reminders", tags=["Reminders"])

@app.get("/health", response_model=Dict[str, Any])
async def health_check(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    """Health check endpoint to verify the API is running.

    Returns:
        Dict[str, Any]: Health status information
    """
    return {
        "status": "healthy",
        "version": app.version,
        "environment": settings.environment,
        "llm_provider": settings.llm_provider,
    }

@app.get("/")
async def root() -> Dict[str, str]:
    """Root endpoint that returns basic API information.

    Returns:
        Dict[str, str]: Basic API information
    """
    return {
        "message": "Welcome to the Reminder Extraction Engine API",
        "version": app.version,
    }

if __name__ == "__main__":
    settings = get_settings()

    logger.info(f"Starting Uvicorn server on {settings.api_host}:{settings.api_port} with reload={settings.api_reload}")

    uvicorn.run(
        "reminder_engine.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_config=build_logging_config(settings.log_level),
        log_level=settings.api_log_level.lower()
    )
