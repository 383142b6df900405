"""
Connection event listener for WebSocketManager.
"""


class WebSocketListener:
    """
    Receives connection events from a WebSocketManager.

    Every method is a no-op; subclasses override the events they care about.
    Overrides may be plain methods or coroutine functions. Coroutines are
    scheduled on the running event loop and are not awaited by the manager.
    """

    def on_connected(self) -> None:
        """The connection was opened."""

    def on_connection_failed(self, error: str) -> None:
        """Opening the connection failed, or the open connection broke."""

    def on_disconnected(self, code: int, reason: str) -> None:
        """The connection was closed with the given close code and reason."""

    def on_message_received(self, message: str) -> None:
        """A non-heartbeat message arrived."""

    def on_send_failed(self, error: str) -> None:
        """A message could not be sent."""

    def on_reconnecting(self, attempt: int) -> None:
        """Reconnect attempt number ``attempt`` (1-based) has been scheduled."""

    def on_reconnected(self) -> None:
        """A reconnect attempt succeeded."""

    def on_reconnect_failed(self, error: str) -> None:
        """A reconnect attempt failed, or the attempt limit was reached."""
