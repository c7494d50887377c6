"""Custom errors with tracking IDs."""

from utils.timestamp import format_timestamp
from utils.tracking import generate_tracking_id


class SortIdError(Exception):
    """Base error with unique ID and timestamp for tracking."""

    def __init__(self, message, context=None, cause=None):
        super().__init__(message)
        self.error_id = generate_tracking_id()
        self.timestamp = format_timestamp()
        self.context = context or {}
        self.cause = cause

    def __str__(self):
        return f"[{self.error_id}] {super().__str__()}"

    @property
    def message(self):
        return super().__str__()

    def to_dict(self):
        return {
            "error": type(self).__name__,
            "error_id": self.error_id,
            "timestamp": self.timestamp,
            "detail": self.message,
            "context": self.context,
        }


class InvalidArgumentError(SortIdError):
    """A setter, length or timestamp argument was rejected."""

    def __init__(self, message, argument=None, **kwargs):
        context = kwargs.pop("context", {})
        if argument:
            context["argument"] = argument
        super().__init__(message, context=context, **kwargs)


class MissingCapabilityError(SortIdError):
    """No usable time or random source is configured."""

    def __init__(self, message, capability=None, **kwargs):
        context = kwargs.pop("context", {})
        if capability:
            context["capability"] = capability
        super().__init__(message, context=context, **kwargs)


class TimestampOverflowError(SortIdError):
    """Timestamp does not fit the time segment (strict mode only)."""

    def __init__(self, message, length=None, timestamp_ms=None, **kwargs):
        context = kwargs.pop("context", {})
        if length is not None:
            context["length"] = length
        if timestamp_ms is not None:
            context["timestamp_ms"] = timestamp_ms
        super().__init__(message, context=context, **kwargs)


class MalformedIdentifierError(SortIdError):
    """String is not an identifier in the restricted alphabet."""

    def __init__(self, message, identifier=None, **kwargs):
        context = kwargs.pop("context", {})
        if identifier is not None:
            context["identifier"] = identifier
        super().__init__(message, context=context, **kwargs)
