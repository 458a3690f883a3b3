"""Pydantic models for API requests and responses."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class SearchRequest(BaseModel):
    """Search request model."""

    query: str = Field("", description="Substring to look for in company names or CINs")

    model_config = {"json_schema_extra": {"examples": [{"query": "acme"}]}}


class SearchResponse(BaseModel):
    """Search response model."""

    results: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Matched companies: canonical fields plus every source column",
    )
    error: Optional[str] = Field(None, description="Reason the search was refused")
    remaining: Optional[int] = Field(
        None, description="Free searches left today (-1 for unlimited)"
    )
    is_premium: bool = Field(False, description="Whether the caller is privileged")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "results": [
                        {
                            "id": "companies.csv-0",
                            "name": "Acme Corp",
                            "state": "MH",
                            "cin": "CIN123",
                            "status": "Active",
                            "Name": "Acme Corp",
                            "CIN": "CIN123",
                            "State": "MH",
                            "Status": "Active",
                        }
                    ],
                    "error": None,
                    "remaining": 9,
                    "is_premium": False,
                }
            ]
        }
    }


class SearchStatusResponse(BaseModel):
    """Index and quota status for the calling client."""

    index_state: str = Field(..., description="empty, building or ready")
    total_records: int = Field(..., description="Records in the in-memory index")
    is_premium: bool = Field(..., description="Whether the caller is privileged")
    remaining: int = Field(..., description="Free searches left today (-1 for unlimited)")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Service version")
    index_loaded: bool = Field(..., description="Whether search index is loaded")
    index_state: str = Field(..., description="empty, building or ready")
    total_records: Optional[int] = Field(None, description="Total records in index")
    index_source: Optional[str] = Field(None, description="snapshot, scan or empty")
    latency: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict, description="Latency statistics per operation"
    )


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
