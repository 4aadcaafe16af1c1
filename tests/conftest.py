"""Shared pytest fixtures for the webhook deploy listener tests.

Provides:
- A fake command runner (and a factory for scripted ones)
- Settings, trigger and FastAPI test client fixtures
- A raw ASGI driver for tests that control headers and body chunks exactly
"""

import asyncio
import os
from typing import NamedTuple

import pytest
from fastapi.testclient import TestClient

# Keep a developer's config.yaml out of the test run
os.environ["CONFIG_PATH"] = os.path.join(os.path.dirname(__file__), "no-such-config.yaml")

from config import Settings  # noqa: E402
from dependencies import build_context  # noqa: E402
from deploy_trigger import DeploymentTrigger  # noqa: E402
from main import create_app  # noqa: E402


class FakeCommandRunner:
    """Records commands and returns scripted exit codes instead of running anything."""

    def __init__(self, exit_codes=None, error=None):
        self.exit_codes = exit_codes or {}
        self.error = error
        self.commands = []

    def run(self, command: str) -> int:
        self.commands.append(command)
        if self.error is not None:
            raise self.error
        return self.exit_codes.get(command, 0)


class AsgiResult(NamedTuple):
    status: int
    body: bytes
    chunks_consumed: int


# ---------------------------------------------------------------------------
# Runner / trigger fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def make_runner():
    """Factory for runners with scripted exit codes or a raised error."""
    def _make(exit_codes=None, error=None):
        return FakeCommandRunner(exit_codes=exit_codes, error=error)
    return _make


@pytest.fixture
def runner(make_runner):
    return make_runner()


@pytest.fixture
def trigger(runner):
    return DeploymentTrigger(runner)


# ---------------------------------------------------------------------------
# App / HTTP client fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def app(settings, runner):
    return create_app(build_context(settings, runner=runner))


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def asgi_post(app):
    """POST a body to the app as a list of ASGI chunks with exactly the given headers."""
    def _post(path, chunks, headers):
        scope = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": "POST",
            "scheme": "http",
            "path": path,
            "raw_path": path.encode(),
            "root_path": "",
            "query_string": b"",
            "headers": headers,
            "client": ("127.0.0.1", 50000),
            "server": ("127.0.0.1", 3000),
        }
        pending = list(chunks)
        consumed = 0
        messages = []

        async def receive():
            nonlocal consumed
            if not pending:
                return {"type": "http.disconnect"}
            consumed += 1
            chunk = pending.pop(0)
            return {"type": "http.request", "body": chunk, "more_body": bool(pending)}

        async def send(message):
            messages.append(message)

        asyncio.run(app(scope, receive, send))
        start = next(m for m in messages if m["type"] == "http.response.start")
        body = b"".join(m.get("body", b"") for m in messages if m["type"] == "http.response.body")
        return AsgiResult(start["status"], body, consumed)
    return _post
