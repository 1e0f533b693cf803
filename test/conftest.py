# test/conftest.py
import asyncio

import pytest
from websockets.exceptions import ConnectionClosedOK

from fereai.config import get_settings
from fereai.llm.provider import create_fereai

API_KEY = "test-api-key"
USER_ID = "test-user-id"
HOST = "api.fereai.xyz"

CLOSE = ("close",)


def frame(data):
    return ("frame", data)


def error(exc):
    return ("error", exc)


class FakeConnection:
    """
    Scripted stand-in for a websockets client connection.

    recv() replays events in order: ("frame", data) returns data, ("close",)
    raises ConnectionClosedOK, ("error", exc) raises exc. When the script runs
    out, recv() blocks until push() adds more.
    """

    def __init__(self, *events):
        self.events = list(events)
        self.sent = []
        self.log = []
        self.closed = False
        self._wakeup = None

    def push(self, *event):
        self.events.append(event)
        if self._wakeup is not None:
            self._wakeup.set()

    async def send(self, message):
        self.log.append("send")
        self.sent.append(message)

    async def recv(self):
        self.log.append("recv")
        while not self.events:
            self._wakeup = asyncio.Event()
            await self._wakeup.wait()
        kind, *rest = self.events.pop(0)
        if kind == "frame":
            return rest[0]
        if kind == "close":
            raise ConnectionClosedOK(None, None)
        raise rest[0]

    async def close(self):
        self.log.append("close")
        self.closed = True


class FakeConnector:
    def __init__(self, *connections, fail=None):
        self.connections = list(connections)
        self.fail = fail
        self.urls = []

    async def __call__(self, url):
        self.urls.append(url)
        if self.fail is not None:
            raise self.fail
        return self.connections.pop(0)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """No FEREAI_* from the host environment leaks into tests."""
    for name in ("FEREAI_API_KEY", "FEREAI_USER_ID", "FEREAI_BASE_URL", "FEREAI_DEFAULT_AGENT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_provider():
    def _make(*connections, fail=None, **kwargs):
        connector = FakeConnector(*connections, fail=fail)
        kwargs.setdefault("api_key", API_KEY)
        kwargs.setdefault("user_id", USER_ID)
        return create_fereai(connect=connector, **kwargs), connector

    return _make


@pytest.fixture
def api_client(monkeypatch, make_provider):
    """
    TestClient for fereai.api whose provider talks to scripted connections.

    Usage: client = api_client(FakeConnection(...), api_key=None, ...)
    """
    from fastapi.testclient import TestClient

    import fereai.api as api

    def _client(*connections, **kwargs):
        provider, connector = make_provider(*connections, **kwargs)
        monkeypatch.setattr(api, "_provider", provider, raising=True)
        return TestClient(api.app), connector

    return _client
