import asyncio
import time
from enum import Enum

from core.errors import MissingCapabilityError, SortIdError
from sortid.base32 import fits
from utils.timestamp import format_timestamp

class Status(Enum):
    OK = "healthy"
    DEGRADED = "degraded"
    FAIL = "unhealthy"

class CheckResult:
    __slots__ = ("name", "status", "msg")
    
    def __init__(self, name, status, msg=""): 
        self.name = name
        self.status = status
        self.msg = msg
    
    def to_dict(self): 
        return {"name": self.name,
                "status": self.status.value,
                "msg": self.msg}

class HealthReport:
    __slots__ = ("status", "checks", "uptime", "timestamp")
    
    def __init__(self, status, checks, uptime=0):
        self.status = status
        self.checks = checks
        self.uptime = uptime
        self.timestamp = format_timestamp()
    
    def to_dict(self):
        return {"status": self.status.value,
                "timestamp": self.timestamp,
                "uptime": round(self.uptime, 1),
                "checks": [check.to_dict() for check in self.checks]}

class HealthChecker:
    def __init__(self, ttl=1.0, timeout=5):
        self._checks = {}
        self._cache = None
        self._cache_time = 0
        self._ttl = ttl
        self._timeout = timeout
        self._start_time = time.time()

    @property
    def uptime(self):
        return time.time() - self._start_time

    def register(self, name, check_fn, critical=True):
        self._checks[name] = (check_fn, critical)

    def invalidate(self):
        self._cache = None

    async def check(self):
        now = time.time()
        if self._cache and now - self._cache_time < self._ttl:
            return self._cache

        results = []
        for name, (check_fn, is_critical) in self._checks.items():
            try:
                result = await asyncio.wait_for(check_fn(), timeout=self._timeout)
            except asyncio.TimeoutError:
                result = CheckResult(name, Status.FAIL, "timeout")
            except Exception as exc:
                result = CheckResult(name, Status.FAIL, str(exc))
            results.append((result, is_critical))

        status = Status.OK
        for result, is_critical in results:
            if result.status == Status.FAIL and is_critical:
                status = Status.FAIL
            elif result.status != Status.OK and status == Status.OK:
                status = Status.DEGRADED

        self._cache = HealthReport(status, [result for result, _ in results], now - self._start_time)
        self._cache_time = now
        return self._cache

# Checks
async def check_event_loop():
    await asyncio.sleep(0)
    return CheckResult("loop", Status.OK)

def create_clock_check(context):
    async def check():
        try:
            ms = context.now_millis()
        except MissingCapabilityError:
            return CheckResult("clock", Status.FAIL, "no time source")
        except SortIdError as exc:
            return CheckResult("clock", Status.FAIL, exc.message)

        # Current time no longer fits the time segment
        if not fits(ms, context.time_length):
            return CheckResult("clock", Status.DEGRADED, f"overflow@{context.time_length}")

        return CheckResult("clock", Status.OK, f"{ms}ms")
    return check

def create_journal_check(journal):
    async def check():
        queue_size, max_size = journal.queue.qsize(), journal.queue.maxsize
        
        if queue_size / max_size > 0.9:
            return CheckResult("journal", Status.DEGRADED, f"{queue_size}/{max_size}")
        
        return CheckResult("journal", Status.OK)
    return check
