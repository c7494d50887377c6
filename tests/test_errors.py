"""Unit tests for the error hierarchy."""

import pytest

from core.errors import (
    SortIdError,
    InvalidArgumentError,
    MissingCapabilityError,
    TimestampOverflowError,
    MalformedIdentifierError,
)
from sortid.encoder import is_identifier


class TestSortIdError:
    """Tests for the base error."""

    def test_error_id_is_identifier(self):
        """Every error carries a sortable tracking id."""
        err = SortIdError("boom")
        assert is_identifier(err.error_id)

    def test_str_includes_error_id(self):
        """str() prefixes the tracking id."""
        err = SortIdError("boom")
        assert str(err) == f"[{err.error_id}] boom"
        assert err.message == "boom"

    def test_cause_and_context(self):
        """Cause and context are kept."""
        cause = KeyError("x")
        err = SortIdError("boom", context={"a": 1}, cause=cause)
        assert err.cause is cause
        assert err.context == {"a": 1}

    def test_to_dict(self):
        """to_dict exposes name, id and detail."""
        data = InvalidArgumentError("bad", argument="length").to_dict()
        assert data["error"] == "InvalidArgumentError"
        assert data["detail"] == "bad"
        assert data["context"] == {"argument": "length"}
        assert is_identifier(data["error_id"])


class TestSubclasses:
    """Tests for the specific error kinds."""

    @pytest.mark.parametrize("cls", [
        InvalidArgumentError,
        MissingCapabilityError,
        TimestampOverflowError,
        MalformedIdentifierError,
    ])
    def test_inherit_base(self, cls):
        """All errors derive from SortIdError."""
        assert issubclass(cls, SortIdError)

    def test_missing_capability_context(self):
        """capability lands in context."""
        err = MissingCapabilityError("no clock", capability="time")
        assert err.context["capability"] == "time"

    def test_overflow_context(self):
        """length and timestamp land in context."""
        err = TimestampOverflowError("too big", length=2, timestamp_ms=33000)
        assert err.context == {"length": 2, "timestamp_ms": 33000}

    def test_malformed_context_merges(self):
        """Explicit context is merged with the identifier."""
        err = MalformedIdentifierError("bad", identifier="XYZ", context={"source": "api"})
        assert err.context == {"source": "api", "identifier": "XYZ"}

    def test_unique_error_ids(self):
        """Tracking ids differ between errors."""
        ids = {SortIdError("x").error_id for _ in range(50)}
        assert len(ids) == 50
