"""
Crash capture for the identifier service.

Uncaught exceptions, sync or from the event loop, become one JSON line in
the crash file. Errors raised by the encoder keep their own tracking id and
context so a crash line can be matched with the request log that reported
the same error.
"""

import json
import os
import sys
import traceback

from core.errors import SortIdError
from utils.tracking import generate_tracking_id
from utils.timestamp import format_timestamp

_crash_log = "logs/crash.log"


def configure(crash_file):
    """Point crash records at `crash_file`."""
    global _crash_log
    _crash_log = crash_file


def build_record(exc, tb=None, origin="main", extra=None):
    """Crash record for `exc`; None means the loop reported a bare message."""
    if isinstance(exc, SortIdError):
        crash_id, context = exc.error_id, dict(exc.context)
    else:
        crash_id, context = generate_tracking_id(), {}
    if extra:
        context.update(extra)

    record = {
        "id": crash_id,
        "timestamp": format_timestamp(),
        "origin": origin,
        "type": type(exc).__name__ if exc is not None else "AsyncError",
        "msg": exc.message if isinstance(exc, SortIdError) else str(exc or context.get("message", "")),
    }
    if exc is not None:
        record["traceback"] = "".join(traceback.format_exception(type(exc), exc, tb or exc.__traceback__))
    if context:
        record["context"] = context
    return record


def append_record(record):
    """Append to the crash file; a crash log that cannot be written is skipped."""
    try:
        log_dir = os.path.dirname(_crash_log)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        with open(_crash_log, "a") as f:
            f.write(json.dumps(record, default=str) + "\n")
    except OSError:
        return False
    return True


def log_crash(exc_type, exc_value, exc_tb):
    """sys.excepthook: banner on stderr plus a crash record."""
    record = build_record(exc_value, exc_tb)
    banner = "=" * 60
    sys.stderr.write(f"\n{banner}\nCRASH [{record['id']}] {record['timestamp']}\n{banner}\n")
    sys.stderr.write(f"{record['type']}: {record['msg']}\n{record.get('traceback', '')}{banner}\n\n")
    append_record(record)


def create_async_handler(logger=None):
    """Event loop exception handler recording task crashes."""
    def handler(loop, context):
        extra = {"message": context.get("message", ""), "task": str(context.get("future", context.get("task", "")))}
        record = build_record(context.get("exception"), origin="loop", extra=extra)
        if logger:
            logger.error("Async exception", error=record["msg"], crash_id=record["id"], task=extra["task"])
        append_record(record)
    return handler


def install_crash_handler():
    sys.excepthook = log_crash
