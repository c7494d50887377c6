import asyncio
import json
import os
import sys
import threading
from enum import IntEnum
from utils.timestamp import format_timestamp

class LogLevel(IntEnum):
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

_logger = None
_logger_lock = threading.Lock()

class StructuredLogger:
    def __init__(self, level=LogLevel.INFO, stream=None, **fields):
        self.level = level
        self.stream = stream
        self.fields = fields

    def bind(self, **fields):
        """Child logger that adds `fields` to every record."""
        return StructuredLogger(self.level, self.stream, **{**self.fields, **fields})

    def _emit(self, level, message, error=None, **kwargs):
        if level < self.level:
            return
        try:
            record = {"timestamp": format_timestamp(), "level": level.name, "msg": message, **self.fields, **kwargs}
            if error:
                record["err"] = str(error)
            print(json.dumps(record, default=str), file=self.stream or sys.stderr, flush=True)
        except Exception:
            pass

    def debug(self, message, **kwargs):
        self._emit(LogLevel.DEBUG, message, **kwargs)

    def info(self, message, **kwargs):
        self._emit(LogLevel.INFO, message, **kwargs)

    def warn(self, message, error=None, **kwargs):
        self._emit(LogLevel.WARN, message, error, **kwargs)

    def error(self, message, error=None, **kwargs):
        self._emit(LogLevel.ERROR, message, error, **kwargs)

    @classmethod
    def configure(cls, min_level=LogLevel.INFO, stream=None):
        global _logger
        with _logger_lock:
            _logger = cls(min_level, stream)

def get_logger():
    global _logger
    if _logger is None:
        with _logger_lock:
            if _logger is None:
                _logger = StructuredLogger()
    return _logger


class IssueJournal:
    """JSONL journal of issued identifiers, written by a background task."""

    def __init__(self, file_path, queue_size=1000):
        self.path = file_path
        self.queue = asyncio.Queue(maxsize=queue_size)
        self._task = None
        self._stop = asyncio.Event()
        self.recorded = 0
        self.written = 0
        self.dropped = 0

    def record(self, kind, data):
        try:
            self.queue.put_nowait({"timestamp": format_timestamp(), "kind": kind, "data": data})
            self.recorded += 1
            return True
        except asyncio.QueueFull:
            self.dropped += 1
        return False

    def record_ids(self, ids, **extra):
        accepted = 0
        for identifier in ids:
            if self.record("issued", {"id": identifier, **extra}):
                accepted += 1
        return accepted

    @property
    def running(self):
        return self._task is not None

    async def start(self):
        if self._task:
            return
        dir_path = os.path.dirname(self.path)
        if dir_path:
            os.makedirs(dir_path, exist_ok=True)
        self._stop.clear()
        self._task = asyncio.create_task(self._run())

    async def stop(self):
        self._stop.set()
        if self._task:
            await self._task
            self._task = None

    def get_stats(self):
        return {
            "queued": self.queue.qsize(),
            "recorded": self.recorded,
            "written": self.written,
            "dropped": self.dropped,
            "running": self.running,
        }

    async def _run(self):
        file = open(self.path, "a")
        self._file_missing_logged = False
        try:
            while not self._stop.is_set():
                try:
                    # Journal file removed underneath us
                    if not os.path.exists(self.path):
                        if not self._file_missing_logged:
                            get_logger().warn("Journal file deleted, journaling disabled", path=self.path)
                            self._file_missing_logged = True
                        try:
                            await asyncio.wait_for(self.queue.get(), timeout=0.5)
                            self.dropped += 1
                        except asyncio.TimeoutError:
                            pass
                        continue

                    entry = await asyncio.wait_for(self.queue.get(), timeout=0.5)
                    file.write(json.dumps(entry, default=str) + "\n")
                    file.flush()
                    self.written += 1
                except asyncio.TimeoutError:
                    pass
                except OSError as exc:
                    self.dropped += 1
                    get_logger().error("Journal write failed", error=exc, path=self.path)
            self._drain(file)
        finally:
            file.close()

    def _drain(self, file):
        """Write whatever is still queued at shutdown."""
        while not self.queue.empty():
            entry = self.queue.get_nowait()
            try:
                file.write(json.dumps(entry, default=str) + "\n")
                self.written += 1
            except OSError as exc:
                self.dropped += 1
                get_logger().error("Journal drain failed", error=exc, path=self.path)
        try:
            file.flush()
        except OSError as exc:
            get_logger().error("Journal flush failed", error=exc, path=self.path)
