"""Search endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Request

from company_search.api.models import (
    ErrorResponse,
    SearchRequest,
    SearchResponse,
    SearchStatusResponse,
)
from company_search.core.access import AccessContext, resolve_access
from company_search.core.service import UNLIMITED, OutcomeStatus
from company_search.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["search"])


def _access_for(request: Request, x_forwarded_for: Optional[str]) -> AccessContext:
    config = request.app.state.config
    cookie_name = config.get("access.session_cookie", "premium_session")
    return resolve_access(x_forwarded_for, request.cookies.get(cookie_name), config)


@router.post(
    "/search",
    response_model=SearchResponse,
    responses={500: {"model": ErrorResponse}},
)
def search(
    request: Request,
    search_request: SearchRequest,
    x_forwarded_for: Optional[str] = Header(None),
) -> SearchResponse:
    """Search companies by name or CIN substring.

    Unauthenticated callers get a limited number of searches per day, keyed
    by the forwarded client address. A refused search is a normal response
    with ``error`` set and ``remaining`` at 0.

    Raises:
        HTTPException: If the search pipeline fails unexpectedly
    """
    access = _access_for(request, x_forwarded_for)
    service = request.app.state.service

    outcome = service.search(
        search_request.query,
        caller_identity=access.identity,
        is_privileged=access.is_privileged,
    )

    if outcome.status is OutcomeStatus.FAILED:
        raise HTTPException(status_code=500, detail=outcome.error)

    return SearchResponse(**outcome.to_dict())


@router.get("/search/status", response_model=SearchStatusResponse)
def search_status(
    request: Request,
    x_forwarded_for: Optional[str] = Header(None),
) -> SearchStatusResponse:
    """Get index state and the caller's remaining quota without searching."""
    access = _access_for(request, x_forwarded_for)
    service = request.app.state.service
    stats = service.cache.stats()

    return SearchStatusResponse(
        index_state=stats["state"],
        total_records=stats["total_records"],
        is_premium=access.is_privileged,
        remaining=UNLIMITED
        if access.is_privileged
        else service.limiter.peek(access.identity),
    )
