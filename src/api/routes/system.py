"""System-level routes such as health checks."""

from __future__ import annotations

import httpx
from fastapi import APIRouter

from src.config import settings

router = APIRouter(tags=["system"])


@router.get("/")
async def read_root() -> dict[str, str]:
    """Hello World endpoint used by smoke tests."""

    return {"message": "Hello World"}


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint with inventory API connectivity check."""

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(settings.INVENTORY_API_URL, timeout=5.0)
            upstream_status = (
                "connected" if response.status_code < 500 else "disconnected"
            )
    except Exception:
        upstream_status = "disconnected"

    return {
        "status": "healthy",
        "inventory_api": upstream_status,
        "environment": settings.ENVIRONMENT,
    }
