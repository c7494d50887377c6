"""Health and observability routes."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from core.health import Status
from utils.timestamp import format_timestamp

router = APIRouter(prefix="/api/v1", tags=["health"])

# These will be set by app.py
_journal = None
_health_checker = None


def init(journal, health_checker):
    """Initialize with journal and health checker references."""
    global _journal, _health_checker
    _journal = journal
    _health_checker = health_checker


@router.get("/health")
async def health():
    """Health check with component status."""
    report = await _health_checker.check()
    status_code = 200 if report.status != Status.FAIL else 503
    return JSONResponse(content=report.to_dict(), status_code=status_code)


@router.get("/heartbeat")
async def heartbeat():
    """Lightweight heartbeat for frequent polling."""
    return {
        "status": "ok",
        "timestamp": format_timestamp(),
        "uptime_s": round(_health_checker.uptime, 3),
        "issued": _journal.recorded,
    }
