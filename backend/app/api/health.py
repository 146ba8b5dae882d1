"""Health check endpoint."""

from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel

from backend.app.config import get_settings

router = APIRouter(tags=["health"])


class HealthStatus(BaseModel):
    """Health check response."""

    status: Literal["ok"]
    service: str


@router.get("/health")
async def get_health() -> HealthStatus:
    """Report that the service is up.

    Sessions live in memory, so there is no backing infrastructure to probe.
    """
    return HealthStatus(status="ok", service=get_settings().service_name)
