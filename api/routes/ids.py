"""Identifier minting and decoding routes."""

from typing import Optional

from fastapi import APIRouter, Query

from internal.logging import get_logger
from utils.timestamp import format_millis

router = APIRouter(prefix="/api/v1/ids", tags=["ids"])

MAX_BATCH = 1000

# These will be set by app.py
_context = None
_journal = None


def init(context, journal):
    """Initialize with source context and journal references."""
    global _context, _journal
    _context = context
    _journal = journal


@router.get("")
async def mint(count: int = Query(1, ge=1, le=MAX_BATCH), time: Optional[float] = None):
    """Mint `count` identifiers, optionally for a fixed time in seconds."""
    ids = [_context.new_identifier(time) for _ in range(count)]
    accepted = _journal.record_ids(ids)
    if accepted < len(ids):
        get_logger().warn("Journal full, identifiers not recorded", dropped=len(ids) - accepted)
    return {"ids": ids, "count": len(ids)}


@router.get("/time")
async def time_segment(time: Optional[float] = None, length: Optional[int] = Query(None, ge=0, le=64)):
    return {"time": _context.encode_time(time, length)}


@router.get("/random")
async def random_segment(length: Optional[int] = Query(None, ge=0, le=256)):
    return {"random": _context.encode_random(length)}


@router.get("/{identifier}")
async def decode(identifier: str):
    """Decode the timestamp carried by an identifier."""
    identifier = _context.normalize(identifier)
    ms = _context.decode_time(identifier)
    try:
        timestamp = format_millis(ms)
    except (ValueError, OverflowError, OSError):
        # Beyond datetime's range
        timestamp = None
    return {
        "id": identifier,
        "timestamp_ms": ms,
        "timestamp": timestamp,
    }
