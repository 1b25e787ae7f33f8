"""
Common response DTOs shared across multiple endpoints.

ErrorResponse    — standard error shape from AppError.to_dict()
HealthResponse   — GET /health
MessageResponse  — generic {success, message} shape
PaginationMeta   — pagination block of list responses
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Standard error JSON body produced by the AppError exception handler."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = False
    error: str
    code: str
    field: Optional[str] = None
    details: Optional[Any] = None


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    status: str
    checks: dict[str, str]
    timestamp: Optional[str] = None


class MessageResponse(BaseModel):
    """Generic success/message response."""

    success: bool
    message: Optional[str] = None


class PaginationMeta(BaseModel):
    """Pagination metadata included in list responses."""

    page: int
    limit: int
    total: int
    pages: int
