"""Pytest fixtures for all tests."""

import pytest
from httpx import AsyncClient, ASGITransport

from api.app import create_app
from config import Config, LoggingConfig
from internal.logging import IssueJournal
from sortid import encoder
from sortid.encoder import SourceContext


@pytest.fixture
def fixed_context():
    """Context pinned to t=1s with a constant random draw of 0.5."""
    return SourceContext(time_source=lambda: 1, random_source=lambda: 0.5)


@pytest.fixture
def default_context(monkeypatch):
    """Fresh module-level default context, restored after the test."""
    ctx = SourceContext()
    monkeypatch.setattr(encoder, "default_context", ctx)
    return ctx


@pytest.fixture
def config(tmp_path):
    """Create test config writing under tmp_path."""
    return Config(logging=LoggingConfig(
        level="INFO",
        file=str(tmp_path / "issued.jsonl"),
        crash_file=str(tmp_path / "crash.log"),
    ))


@pytest.fixture
async def journal(tmp_path):
    """Create test issue journal."""
    jrnl = IssueJournal(str(tmp_path / "journal.jsonl"), queue_size=10)
    yield jrnl
    if jrnl.running:
        await jrnl.stop()


@pytest.fixture
async def app(config, fixed_context):
    """Create test FastAPI app."""
    return create_app(config, context=fixed_context)


@pytest.fixture
async def client(app):
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
