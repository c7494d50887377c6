from utils.tracking import generate_tracking_id
from utils.timestamp import now_micros, format_timestamp
from core.errors import (
    SortIdError,
    InvalidArgumentError,
    MissingCapabilityError,
    TimestampOverflowError,
    MalformedIdentifierError,
)

__all__ = [
    "generate_tracking_id",
    "now_micros",
    "format_timestamp",
    "SortIdError",
    "InvalidArgumentError",
    "MissingCapabilityError",
    "TimestampOverflowError",
    "MalformedIdentifierError",
]
