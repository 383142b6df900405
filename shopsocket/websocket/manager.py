"""
WebSocket connection manager.

Provides connect, disconnect, automatic reconnect and heartbeat on top of the
``websockets`` asyncio client. Every background activity (receiving,
heartbeats, reconnecting) runs as a task on the event loop that called
``connect()``; listener callbacks are invoked on that same loop.
"""

import asyncio
import inspect
from dataclasses import replace
from enum import Enum
from typing import Any, Callable, Optional, Set

import structlog
from websockets.asyncio.client import connect as websocket_connect
from websockets.exceptions import (
    ConnectionClosed,
    WebSocketException,
)

from shopsocket import USER_AGENT
from shopsocket.core.config import ConnectionSettings
from shopsocket.core.metrics import ConnectionMetrics
from shopsocket.core.simple_error_handler import safe_call
from shopsocket.websocket.listener import WebSocketListener
from shopsocket.websocket.utils import HEARTBEAT_PONG

logger = structlog.get_logger(__name__)

TRANSPORT_ERRORS = (OSError, asyncio.TimeoutError, WebSocketException)

NORMAL_CLOSURE = 1000

EMPTY_URL_ERROR = "server URL must not be empty"
NOT_CONNECTED_ERROR = "WebSocket is not connected"
SEND_FAILED_ERROR = "failed to send message"
MAX_ATTEMPTS_ERROR = "max reconnect attempts reached"
DISCONNECT_REASON = "client disconnect"


class ConnectionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"


def _describe(error: BaseException) -> str:
    return str(error) or error.__class__.__name__


class WebSocketManager:
    """
    Manages a single WebSocket connection to the real-time server.
    """

    def __init__(
        self,
        server_url: Optional[str] = None,
        settings: Optional[ConnectionSettings] = None,
        listener: Optional[WebSocketListener] = None,
        metrics: Optional[ConnectionMetrics] = None,
        connect_factory: Callable[..., Any] = websocket_connect,
    ):
        """
        Args:
            server_url: Overrides ``settings.server_url`` when given.
            settings: Connection settings; copied so the manager can be
                reconfigured without touching the shared instance.
            listener: Receives connection events.
            metrics: Collects traffic counters; a fresh one is created if omitted.
            connect_factory: Awaitable factory opening the connection. Called
                as ``connect_factory(url, **options)``.
        """
        self.settings = replace(settings) if settings else ConnectionSettings()
        if server_url is not None:
            self.settings.server_url = server_url
        self.metrics = metrics or ConnectionMetrics()
        self._listener = listener
        self._connect_factory = connect_factory

        self._connection = None
        self._state = ConnectionState.DISCONNECTED
        self._should_reconnect = True
        self._reconnecting = False
        self._reconnect_attempts = 0

        self._heartbeat_task: Optional[asyncio.Task] = None
        self._receive_task: Optional[asyncio.Task] = None
        self._reconnect_task: Optional[asyncio.Task] = None
        self._callback_tasks: Set[asyncio.Task] = set()

    @property
    def server_url(self) -> str:
        return self.settings.server_url

    @server_url.setter
    def server_url(self, value: str) -> None:
        self.settings.server_url = value

    @property
    def connection_state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state == ConnectionState.CONNECTED

    @property
    def reconnect_attempts(self) -> int:
        return self._reconnect_attempts

    def set_listener(self, listener: WebSocketListener) -> None:
        self._listener = listener

    def remove_listener(self) -> None:
        self._listener = None

    async def __aenter__(self) -> "WebSocketManager":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.release()

    # Public API
    async def connect(self) -> None:
        """
        Open the connection and enable automatic reconnects.

        Returns once the opening handshake has completed or failed. Failures
        are reported through the listener, never raised.
        """
        if not self.server_url:
            logger.error("Server URL must not be empty")
            self._notify("on_connection_failed", EMPTY_URL_ERROR)
            return

        if self._state != ConnectionState.DISCONNECTED:
            logger.warning(
                f"WebSocket is already {self._state.value}, ignoring connect()"
            )
            return

        # A gave-up or not yet started reconnect loop must not race this attempt
        self._stop_reconnect()
        self._should_reconnect = True
        await self._open()

    async def disconnect(self) -> None:
        """Close the connection and stop reconnecting."""
        logger.info("Disconnecting WebSocket")
        self._should_reconnect = False
        self._stop_heartbeat()
        self._stop_reconnect()

        connection, self._connection = self._connection, None
        self._cancel(self._receive_task)
        self._receive_task = None
        self._state = ConnectionState.DISCONNECTED

        if connection is not None:
            try:
                await connection.close(NORMAL_CLOSURE, DISCONNECT_REASON)
            except TRANSPORT_ERRORS as e:
                logger.warning(f"Error while closing WebSocket: {_describe(e)}")
            self._notify("on_disconnected", NORMAL_CLOSURE, DISCONNECT_REASON)

    async def send_message(self, message: str) -> bool:
        """
        Send a text frame.

        Returns:
            True if the frame was handed to the transport, False otherwise.
        """
        connection = self._connection
        if connection is None or self._state != ConnectionState.CONNECTED:
            logger.error("WebSocket is not connected, cannot send message")
            self._notify("on_send_failed", NOT_CONNECTED_ERROR)
            return False

        try:
            await asyncio.wait_for(
                connection.send(message), timeout=self.settings.write_timeout
            )
        except TRANSPORT_ERRORS as e:
            logger.error(f"Failed to send message: {message}", error=_describe(e))
            self.metrics.record_error("send")
            self._notify("on_send_failed", SEND_FAILED_ERROR)
            return False

        self.metrics.record_sent()
        logger.debug(f"Message sent: {message}")
        return True

    async def release(self) -> None:
        """Disconnect, stop all background work and drop the listener."""
        logger.info("Releasing WebSocket resources")
        await self.disconnect()

        current = asyncio.current_task()
        pending = [task for task in self._callback_tasks if task is not current]
        if pending:
            _, still_running = await asyncio.wait(
                pending, timeout=self.settings.write_timeout
            )
            for task in still_running:
                task.cancel()
        self._callback_tasks.clear()
        self._listener = None

    # Connection lifecycle
    async def _open(self) -> bool:
        logger.info(f"Connecting to WebSocket: {self.server_url}")
        self._state = ConnectionState.CONNECTING
        try:
            connection = await self._connect_factory(
                self.server_url,
                open_timeout=self.settings.connect_timeout,
                close_timeout=self.settings.read_timeout,
                ping_interval=None,
                user_agent_header=USER_AGENT,
            )
        except TRANSPORT_ERRORS as e:
            self._handle_failure(_describe(e))
            return False

        if self._state != ConnectionState.CONNECTING:
            # disconnect() ran while the handshake was in flight
            try:
                await connection.close(NORMAL_CLOSURE, DISCONNECT_REASON)
            except TRANSPORT_ERRORS as e:
                logger.warning(f"Error while closing WebSocket: {_describe(e)}")
            return False

        was_reconnecting = self._reconnecting
        self._connection = connection
        self._state = ConnectionState.CONNECTED
        self._reconnect_attempts = 0
        self._reconnecting = False
        self.metrics.record_connection()
        logger.info("WebSocket connected", url=self.server_url)

        self._start_heartbeat()
        self._receive_task = asyncio.create_task(self._receive_loop(connection))
        self._notify("on_reconnected" if was_reconnecting else "on_connected")
        return True

    async def _receive_loop(self, connection) -> None:
        try:
            while True:
                message = await connection.recv()
                if isinstance(message, bytes):
                    message = message.decode("utf-8", errors="replace")
                self._handle_message(message)
        except ConnectionClosed as e:
            if connection is not self._connection:
                return
            # Any close frame from the server is a clean close, whatever its code
            if e.rcvd is not None:
                self._handle_closed(e.rcvd.code, e.rcvd.reason)
            else:
                self._handle_failure(_describe(e))

    def _handle_message(self, message: str) -> None:
        if message == self.settings.heartbeat_message or message == HEARTBEAT_PONG:
            logger.debug("Heartbeat response received")
            return

        self.metrics.record_received()
        logger.debug(f"Message received: {message}")
        self._notify("on_message_received", message)

    def _handle_closed(self, code: int, reason: str) -> None:
        logger.info(f"WebSocket closed: {code} - {reason}")
        self._connection = None
        self._state = ConnectionState.DISCONNECTED
        self._stop_heartbeat()
        self._notify("on_disconnected", code, reason)

        if self._should_reconnect and not self._reconnecting:
            self._schedule_reconnect()

    def _handle_failure(self, error: str) -> None:
        logger.error(f"WebSocket connection failed: {error}")
        self._connection = None
        self._state = ConnectionState.DISCONNECTED
        self._stop_heartbeat()
        self.metrics.record_error("connection")

        if self._reconnecting:
            self._notify("on_reconnect_failed", error)
            return

        self._notify("on_connection_failed", error)
        if self._should_reconnect:
            self._schedule_reconnect()

    # Reconnect
    def _schedule_reconnect(self) -> None:
        if not self._should_reconnect:
            return
        if self._reconnect_task is not None and not self._reconnect_task.done():
            return
        self._reconnecting = True
        self._reconnect_task = asyncio.create_task(self._reconnect_loop())

    async def _reconnect_loop(self) -> None:
        while self._should_reconnect:
            if self._reconnect_attempts >= self.settings.max_reconnect_attempts:
                logger.error("Max reconnect attempts reached, giving up")
                self._reconnecting = False
                self._state = ConnectionState.DISCONNECTED
                self._notify("on_reconnect_failed", MAX_ATTEMPTS_ERROR)
                return

            self._reconnect_attempts += 1
            attempt = self._reconnect_attempts
            self._state = ConnectionState.RECONNECTING
            self.metrics.record_reconnect_attempt()
            logger.info(
                f"Scheduling reconnect attempt {attempt} in {self.settings.reconnect_interval}s"
            )
            self._notify("on_reconnecting", attempt)

            await asyncio.sleep(self.settings.reconnect_interval)
            if not self._should_reconnect:
                break

            logger.info(f"Reconnecting, attempt {attempt}")
            if await self._open():
                return

        self._reconnecting = False

    def _stop_reconnect(self) -> None:
        self._cancel(self._reconnect_task)
        self._reconnect_task = None
        self._reconnecting = False
        self._reconnect_attempts = 0

    # Heartbeat
    def _start_heartbeat(self) -> None:
        self._stop_heartbeat()
        self._heartbeat_task = asyncio.create_task(self._heartbeat_loop())

    async def _heartbeat_loop(self) -> None:
        heartbeat = self.settings.heartbeat_message
        while True:
            await asyncio.sleep(self.settings.heartbeat_interval)
            connection = self._connection
            if self._state != ConnectionState.CONNECTED or connection is None:
                return

            logger.debug(f"Sending heartbeat: {heartbeat}")
            try:
                await asyncio.wait_for(
                    connection.send(heartbeat), timeout=self.settings.write_timeout
                )
            except TRANSPORT_ERRORS as e:
                logger.error(f"Heartbeat send failed: {_describe(e)}")
                self.metrics.record_error("heartbeat")
            else:
                self.metrics.record_heartbeat()

    def _stop_heartbeat(self) -> None:
        self._cancel(self._heartbeat_task)
        self._heartbeat_task = None

    # Helpers
    @staticmethod
    def _cancel(task: Optional[asyncio.Task]) -> None:
        if task is None or task.done():
            return
        if task is asyncio.current_task():
            return
        task.cancel()

    def _notify(self, event: str, *args) -> None:
        listener = self._listener
        if listener is None:
            return

        callback = getattr(listener, event, None)
        if callback is None:
            return

        success, result = safe_call(callback, *args)
        if success and inspect.isawaitable(result):
            task = asyncio.ensure_future(self._await_callback(event, result))
            self._callback_tasks.add(task)
            task.add_done_callback(self._callback_tasks.discard)

    async def _await_callback(self, event: str, awaitable) -> None:
        try:
            await awaitable
        except Exception as e:
            logger.error(f"Listener callback {event} failed: {e}", exc_info=True)
