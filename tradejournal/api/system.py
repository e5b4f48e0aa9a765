"""System API — health check."""

from datetime import datetime, timezone

from fastapi import APIRouter

from tradejournal import __version__

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/health")
def health_check():
    return {
        "status": "ok",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
