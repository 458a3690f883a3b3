"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Request

from company_search import __version__
from company_search.api.models import HealthResponse
from company_search.core.index_cache import IndexState
from company_search.utils.timing import get_latency_tracker

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """Health check endpoint.

    The index is built lazily, so an unbuilt index still reports healthy;
    a ready index with no records is degraded.
    """
    stats = request.app.state.service.cache.stats()
    loaded = stats["state"] == IndexState.READY.value

    return HealthResponse(
        status="degraded" if loaded and stats["total_records"] == 0 else "healthy",
        version=__version__,
        index_loaded=loaded,
        index_state=stats["state"],
        total_records=stats["total_records"] if loaded else None,
        index_source=stats["source"],
        latency=get_latency_tracker().get_stats(),
    )
