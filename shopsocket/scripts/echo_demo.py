"""
End-to-end usage example for WebSocketManager.

Connects to an echo server, sends a greeting once connected, sends a test
message a little later, then disconnects and releases the manager.
"""

import asyncio
from typing import List, Optional

import structlog

from shopsocket.core.app import initialize_app
from shopsocket.core.simple_error_handler import log_exception
from shopsocket.websocket.listener import WebSocketListener
from shopsocket.websocket.manager import ConnectionState, WebSocketManager
from shopsocket.websocket.utils import is_heartbeat_message

logger = structlog.get_logger(__name__)

DEFAULT_DEMO_URL = "ws://echo.websocket.org"
GREETING = "Hello WebSocket!"
TEST_MESSAGE = "test message"

STATE_LABELS = {
    ConnectionState.DISCONNECTED: "not connected",
    ConnectionState.CONNECTING: "connecting",
    ConnectionState.CONNECTED: "connected",
    ConnectionState.RECONNECTING: "reconnecting",
}


class DemoListener(WebSocketListener):
    def __init__(self, demo: "EchoDemo"):
        self._demo = demo

    async def on_connected(self) -> None:
        logger.info("WebSocket connected")
        await self._demo.send_greeting()

    def on_connection_failed(self, error: str) -> None:
        logger.error(f"WebSocket connection failed: {error}")

    def on_disconnected(self, code: int, reason: str) -> None:
        logger.info(f"WebSocket disconnected: {code} - {reason}")

    def on_message_received(self, message: str) -> None:
        self._demo.handle_message(message)

    def on_send_failed(self, error: str) -> None:
        logger.error(f"Failed to send message: {error}")

    def on_reconnecting(self, attempt: int) -> None:
        logger.info(f"Reconnecting, attempt {attempt}")

    def on_reconnected(self) -> None:
        logger.info("Reconnected")

    def on_reconnect_failed(self, error: str) -> None:
        logger.error(f"Reconnect failed: {error}")


class EchoDemo:
    """Drives a WebSocketManager through a short connect/send/disconnect session."""

    def __init__(self, manager: WebSocketManager):
        self.manager: Optional[WebSocketManager] = manager
        self.received: List[str] = []
        manager.set_listener(DemoListener(self))

    @property
    def is_connected(self) -> bool:
        return self.manager is not None and self.manager.is_connected

    def describe_connection_state(self) -> str:
        if self.manager is None:
            return "not initialized"
        return STATE_LABELS.get(self.manager.connection_state, "unknown")

    async def connect(self) -> None:
        if self.manager is not None:
            await self.manager.connect()

    async def disconnect(self) -> None:
        if self.manager is not None:
            await self.manager.disconnect()

    async def send_greeting(self) -> bool:
        if not self.is_connected:
            return False
        success = await self.manager.send_message(GREETING)
        logger.info(f"Greeting sent: {success}")
        return success

    async def send_message(self, message: str) -> bool:
        if self.manager is None:
            return False
        return await self.manager.send_message(message)

    def handle_message(self, message: str) -> None:
        if is_heartbeat_message(message):
            return
        self.received.append(message)
        logger.info(f"Handling message: {message}")

    async def release(self) -> None:
        if self.manager is not None:
            await self.manager.release()
            self.manager = None


async def run_demo(
    demo: EchoDemo, send_delay: float = 2.0, disconnect_delay: float = 5.0
) -> None:
    try:
        await demo.connect()
        await asyncio.sleep(send_delay)
        await demo.send_message(TEST_MESSAGE)
        await asyncio.sleep(disconnect_delay)
        await demo.disconnect()
    finally:
        await demo.release()


@log_exception
async def main(url: Optional[str] = None):
    """Run the echo demo against `url`, the configured server, or the public echo server."""
    app_context = initialize_app()
    server_url = url or app_context.settings.connection.server_url or DEFAULT_DEMO_URL
    demo = EchoDemo(app_context.create_manager(server_url=server_url))

    try:
        await run_demo(demo)
        logger.info(f"Demo finished, {len(demo.received)} message(s) received")
    finally:
        app_context.metrics.log_summary()
