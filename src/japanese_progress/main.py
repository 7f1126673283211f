"""FastAPI application entry point and composition root."""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from japanese_progress.api.routes import router
from japanese_progress.config import Settings, get_settings
from japanese_progress.storage.backends import JsonFileStorage
from japanese_progress.storage.progress_store import ProgressStore
from japanese_progress.tracking.tracker import ProgressTracker

# Configure structlog based on environment
is_production = os.getenv("ENV", "development").lower() == "production"

if is_production:
    # Production: JSON format for machine parsing
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
else:
    # Development: console format for human readability
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def build_tracker(settings: Settings) -> ProgressTracker:
    """Wire the store and tracker from settings.

    With persistence disabled (headless runs) the store keeps everything in memory.
    """
    storage = JsonFileStorage(settings.progress_dir) if settings.persistence_enabled else None
    store = ProgressStore(storage, key=settings.storage_key, user_id=settings.user_id)
    return ProgressTracker(store)


def create_app(settings: Settings) -> FastAPI:
    app = FastAPI(title="Japanese Progress Tracker", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    app.state.tracker = build_tracker(settings)
    return app


settings = get_settings()
app = create_app(settings)


def main() -> None:
    """Run the application."""
    uvicorn.run(
        "japanese_progress.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    main()
