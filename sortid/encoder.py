"""
Sortable identifier encoder.

An identifier is a time segment (milliseconds since the Unix epoch, 10
symbols) followed by a random segment (16 symbols), both in the restricted
Base32 alphabet, so string order follows creation time.

The time and random sources are held by a `SourceContext`. The module-level
functions operate on a default context created at import; replacing its
sources affects every later call that uses it.

The default random source is `random.random`, which gives no collision
resistance guarantee. Use `secure_random` where that matters.
"""

import math
import random
import secrets
import threading
import time as _time

from core.errors import (
    InvalidArgumentError,
    MalformedIdentifierError,
    MissingCapabilityError,
    TimestampOverflowError,
)
from internal.logging import get_logger
from sortid.base32 import (
    ALPHABET,
    RANDOM_LEN,
    TIME_LEN,
    decode_int,
    encode_int,
    fits,
    symbol_for,
)

_system_random = secrets.SystemRandom()
_SYMBOLS = frozenset(ALPHABET)


def _no_time_source():
    raise MissingCapabilityError(
        "No time source available, please provide time in seconds with millisecond precision",
        capability="time",
    )


def _detect_time_source():
    if callable(getattr(_time, "time", None)):
        return _time.time
    return _no_time_source


def secure_random():
    """Random source backed by the OS CSPRNG."""
    return _system_random.random()


def _check_length(length, name="length"):
    if isinstance(length, bool) or not isinstance(length, int) or length < 0:
        raise InvalidArgumentError(f"{name} must be a non-negative integer, got {length!r}", argument=name)
    return length


def _describe(source):
    return getattr(source, "__qualname__", None) or repr(source)


class SourceContext:
    """Time and random sources plus segment widths for one encoder."""

    def __init__(self, time_source=None, random_source=None, time_length=TIME_LEN,
                 random_length=RANDOM_LEN, strict_overflow=False):
        self._lock = threading.Lock()
        self._time_source = _detect_time_source()
        self._random_source = random.random
        self.time_length = _check_length(time_length, "time_length")
        self.random_length = _check_length(random_length, "random_length")
        self.strict_overflow = strict_overflow
        if time_source is not None:
            self.set_time_source(time_source)
        if random_source is not None:
            self.set_random_source(random_source)

    @classmethod
    def without_clock(cls, **kwargs):
        """Context whose time source always raises MissingCapabilityError."""
        ctx = cls(**kwargs)
        ctx._time_source = _no_time_source
        return ctx

    @property
    def time_source(self):
        return self._time_source

    @property
    def random_source(self):
        return self._random_source

    def set_time_source(self, f):
        """Replace the time source. `f()` returns seconds since epoch."""
        if not callable(f):
            raise InvalidArgumentError(f"time source must be callable, got {type(f).__name__}",
                                       argument="time_source")
        with self._lock:
            self._time_source = f
        get_logger().debug("Time source replaced", source=_describe(f))

    def set_random_source(self, f):
        """Replace the random source. `f()` returns a float in [0, 1)."""
        if not callable(f):
            raise InvalidArgumentError(f"random source must be callable, got {type(f).__name__}",
                                       argument="random_source")
        with self._lock:
            self._random_source = f
        get_logger().debug("Random source replaced", source=_describe(f))

    def now_millis(self, time=None):
        """floor(time * 1000), reading the time source when `time` is None."""
        if time is None:
            time = self._time_source()
        if isinstance(time, bool) or not isinstance(time, (int, float)):
            raise InvalidArgumentError(f"time must be a number of seconds, got {time!r}", argument="time")
        if time < 0 or math.isnan(time) or math.isinf(time):
            raise InvalidArgumentError(f"time must be a finite non-negative number, got {time!r}",
                                       argument="time")
        return math.floor(time * 1000)

    def encode_time(self, time=None, length=None):
        """Time segment for `time` (seconds), exactly `length` symbols.

        High-order digits that do not fit are dropped unless the context is
        strict, in which case TimestampOverflowError is raised.
        """
        length = self.time_length if length is None else _check_length(length)
        ms = self.now_millis(time)
        if not fits(ms, length):
            if self.strict_overflow:
                raise TimestampOverflowError(f"timestamp {ms}ms does not fit in {length} symbols",
                                             length=length, timestamp_ms=ms)
            get_logger().debug("Timestamp truncated", timestamp_ms=ms, length=length)
        return encode_int(ms, length)

    def encode_random(self, length=None):
        length = self.random_length if length is None else _check_length(length)
        source = self._random_source
        chars = []
        for _ in range(length):
            fraction = source()
            if isinstance(fraction, bool) or not isinstance(fraction, (int, float)) or not 0 <= fraction < 1:
                raise InvalidArgumentError(f"random source returned {fraction!r}, expected a value in [0, 1)",
                                           argument="random_source")
            chars.append(symbol_for(fraction))
        return "".join(chars)

    def new_identifier(self, time=None):
        return self.encode_time(time) + self.encode_random()

    def decode_time(self, identifier, length=None):
        """Millisecond timestamp stored in an identifier's time segment."""
        return decode_time(identifier, self.time_length if length is None else length)

    def is_identifier(self, value):
        return is_identifier(value, self.time_length, self.random_length)

    def normalize(self, identifier):
        return normalize(identifier, self.time_length, self.random_length)


def _upper_symbols(text, identifier):
    """Upper-case `text` one symbol at a time, rejecting anything outside the alphabet."""
    symbols = []
    for symbol in text:
        upper = symbol.upper()
        if upper not in _SYMBOLS:
            raise MalformedIdentifierError(f"invalid symbol {symbol!r} in identifier", identifier=identifier)
        symbols.append(upper)
    return "".join(symbols)


def decode_time(identifier, length=TIME_LEN):
    _check_length(length)
    if not isinstance(identifier, str):
        raise MalformedIdentifierError(f"identifier must be a string, got {type(identifier).__name__}")
    segment = identifier[:length]
    if len(segment) < length:
        raise MalformedIdentifierError(f"identifier shorter than its {length}-symbol time segment",
                                       identifier=identifier)
    return decode_int(_upper_symbols(segment, identifier))


def normalize(identifier, time_length=TIME_LEN, random_length=RANDOM_LEN):
    """Upper-cased identifier; MalformedIdentifierError unless it has the full shape."""
    if not isinstance(identifier, str):
        raise MalformedIdentifierError(f"identifier must be a string, got {type(identifier).__name__}")
    expected = time_length + random_length
    if len(identifier) != expected:
        raise MalformedIdentifierError(f"identifier must be {expected} symbols, got {len(identifier)}",
                                       identifier=identifier)
    return _upper_symbols(identifier, identifier)


def is_identifier(value, time_length=TIME_LEN, random_length=RANDOM_LEN):
    if not isinstance(value, str) or len(value) != time_length + random_length:
        return False
    return all(symbol in _SYMBOLS for symbol in value)


default_context = SourceContext()


def set_time_source(f):
    default_context.set_time_source(f)


def set_random_source(f):
    default_context.set_random_source(f)


def encode_time(time=None, length=TIME_LEN):
    return default_context.encode_time(time, length)


def encode_random(length=RANDOM_LEN):
    return default_context.encode_random(length)


def new_identifier(time=None):
    return default_context.new_identifier(time)
