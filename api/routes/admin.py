"""Source management routes."""

import random
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from api.auth import verify_admin
from internal.logging import get_logger
from sortid.encoder import secure_random
from utils.timestamp import format_timestamp

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])

RANDOM_SOURCES = {"system": random.random, "secure": secure_random}

# These will be set by app.py
_context = None
_journal = None
_health_checker = None
_default_time_source = None


def init(context, journal, health_checker):
    """Initialize with context, journal and health checker references."""
    global _context, _journal, _health_checker, _default_time_source
    _context = context
    _journal = journal
    _health_checker = health_checker
    _default_time_source = context.time_source


@router.get("/stats")
async def stats(username=Depends(verify_admin)):
    """Encoder settings and journal statistics (requires basic auth)."""
    return {
        "timestamp": format_timestamp(),
        "encoder": {
            "time_length": _context.time_length,
            "random_length": _context.random_length,
            "strict_overflow": _context.strict_overflow,
            "time_source": getattr(_context.time_source, "__qualname__", repr(_context.time_source)),
            "random_source": getattr(_context.random_source, "__qualname__", repr(_context.random_source)),
        },
        "journal": _journal.get_stats(),
    }


@router.post("/random-source")
async def set_random_source(kind: Literal["system", "secure"], username=Depends(verify_admin)):
    """Swap the random source (requires basic auth)."""
    _context.set_random_source(RANDOM_SOURCES[kind])
    get_logger().info("Random source changed", kind=kind, user=username)
    return {"ok": True, "random_source": kind}


@router.post("/time-source")
async def set_time_source(kind: Literal["system", "fixed"], value: Optional[float] = None,
                          username=Depends(verify_admin)):
    """Swap the time source; `fixed` pins it to `value` seconds (requires basic auth)."""
    if kind == "fixed":
        if value is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="value is required for a fixed time source")
        _context.set_time_source(lambda: value)
    else:
        _context.set_time_source(_default_time_source)
    _health_checker.invalidate()
    get_logger().info("Time source changed", kind=kind, value=value, user=username)
    return {"ok": True, "time_source": kind}
