"""FastAPI server for Company Search."""

from __future__ import annotations

import threading
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from company_search import __version__
from company_search.api.routes import health, search
from company_search.core.service import CompanySearchService
from company_search.utils.config import Config, get_config
from company_search.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Handles startup and shutdown logic.
    """
    # Startup
    logger.info("Starting Company Search API server")
    setup_logging(level="INFO")

    if app.state.config.get("index.warm_on_startup", False):
        # Queries arriving during the warm-up wait on the same build
        logger.info("Warming search index in the background")
        threading.Thread(
            target=app.state.service.cache.ensure_ready,
            name="index-warmup",
            daemon=True,
        ).start()

    yield

    # Shutdown
    logger.info("Shutting down Company Search API server")


def create_app(
    config: Optional[Config] = None,
    service: Optional[CompanySearchService] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        config: Optional config (uses global config if None)
        service: Optional search service (built from config if None)

    Returns:
        Configured FastAPI app
    """
    config = config or get_config()

    app = FastAPI(
        title="Company Search API",
        description="Substring lookup over tabular company records",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.config = config
    app.state.service = service or CompanySearchService.from_config(config)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred",
                "detail": str(exc),
            },
        )

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Company Search API",
            "version": __version__,
            "description": "Substring lookup over tabular company records",
            "endpoints": {
                "health": "/health",
                "search": "/api/v1/search",
                "search_status": "/api/v1/search/status",
                "docs": "/docs",
            },
        }

    # Register routers
    app.include_router(health.router)
    app.include_router(search.router)

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "company_search.api.server:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
