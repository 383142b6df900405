import asyncio

import pytest
from websockets.exceptions import ConnectionClosedError, ConnectionClosedOK
from websockets.frames import Close

from shopsocket.core.config import ConnectionSettings, get_settings
from shopsocket.websocket.listener import WebSocketListener


@pytest.fixture(scope="function", autouse=True)
def set_test_environment(monkeypatch, tmp_path):
    """
    Sets up a consistent environment for every test so that settings never
    pick up the developer's shell or .env values.
    """
    for name in (
        "WS_SERVER_URL",
        "WS_RECONNECT_INTERVAL",
        "WS_MAX_RECONNECT_ATTEMPTS",
        "WS_HEARTBEAT_INTERVAL",
        "WS_HEARTBEAT_MESSAGE",
        "WS_CONNECT_TIMEOUT",
        "WS_READ_TIMEOUT",
        "WS_WRITE_TIMEOUT",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeConnection:
    """In-memory stand-in for a websockets ClientConnection."""

    def __init__(self):
        self.sent = []
        self.closed = None
        self.send_error = None
        self.close_error = None
        self.hang_sends = False
        self._incoming = asyncio.Queue()

    async def send(self, message):
        if self.send_error is not None:
            raise self.send_error
        if self.hang_sends:
            await asyncio.Event().wait()
        self.sent.append(message)

    async def recv(self):
        item = await self._incoming.get()
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self, code=1000, reason=""):
        if self.close_error is not None:
            raise self.close_error
        self.closed = (code, reason)
        frame = Close(code, reason)
        self._incoming.put_nowait(ConnectionClosedOK(frame, frame, False))

    def feed(self, message):
        """Queue a frame as if the server had sent it."""
        self._incoming.put_nowait(message)

    def server_close(self, code=1000, reason=""):
        """Simulate a close handshake initiated by the server."""
        frame = Close(code, reason)
        error_class = ConnectionClosedOK if code in (1000, 1001) else ConnectionClosedError
        self._incoming.put_nowait(error_class(frame, frame, True))

    def drop(self):
        """Simulate the transport breaking without a close frame."""
        self._incoming.put_nowait(ConnectionClosedError(None, None))


class FakeConnector:
    """Connect factory returning queued outcomes (connections or exceptions)."""

    def __init__(self, outcomes=None):
        self.outcomes = list(outcomes or [])
        self.calls = []
        self.connections = []

    async def __call__(self, url, **kwargs):
        self.calls.append((url, kwargs))
        outcome = self.outcomes.pop(0) if self.outcomes else FakeConnection()
        if isinstance(outcome, BaseException):
            raise outcome
        self.connections.append(outcome)
        return outcome


class RecordingListener(WebSocketListener):
    """Records every event as a tuple."""

    def __init__(self):
        self.events = []

    def on_connected(self):
        self.events.append(("connected",))

    def on_connection_failed(self, error):
        self.events.append(("connection_failed", error))

    def on_disconnected(self, code, reason):
        self.events.append(("disconnected", code, reason))

    def on_message_received(self, message):
        self.events.append(("message", message))

    def on_send_failed(self, error):
        self.events.append(("send_failed", error))

    def on_reconnecting(self, attempt):
        self.events.append(("reconnecting", attempt))

    def on_reconnected(self):
        self.events.append(("reconnected",))

    def on_reconnect_failed(self, error):
        self.events.append(("reconnect_failed", error))


async def wait_until(condition, timeout: float = 1.0):
    """Poll `condition` until it holds, failing the test after `timeout` seconds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not condition():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.005)


@pytest.fixture
def fast_settings():
    """Connection settings with no reconnect delay and a distant heartbeat."""
    return ConnectionSettings(
        reconnect_interval=0,
        max_reconnect_attempts=3,
        heartbeat_interval=60,
        connect_timeout=1,
        read_timeout=1,
        write_timeout=1,
    )


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def connector():
    return FakeConnector()


@pytest.fixture
def make_connector():
    """Factory for connectors with a scripted list of outcomes."""
    return FakeConnector


@pytest.fixture
def make_connection():
    return FakeConnection


@pytest.fixture
def eventually():
    """Returns the `wait_until` polling helper."""
    return wait_until
