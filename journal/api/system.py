"""System API: health check and runtime settings."""

from fastapi import APIRouter

from journal.config import settings

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/health")
def health_check():
    return {"status": "ok"}


@router.get("/settings")
def runtime_settings():
    """Non-secret settings the dashboard needs for display defaults."""
    return {
        "timezone": settings.timezone,
        "default_loss_modifier_pct": settings.default_loss_modifier_pct,
    }
