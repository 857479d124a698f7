"""
API routes: health.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from .models import HealthResponse

router = APIRouter(prefix="/api", tags=["api"])


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Health check."""
    sessions = getattr(request.app.state, "sessions", None) or {}
    return HealthResponse(status="ok", active_sessions=len(sessions))
