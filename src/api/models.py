"""
Request and response models for the service-level API.
"""

from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    status: str
    active_sessions: int = 0
