"""
WebSocket client: connection manager, listener interface and message helpers.
"""

from .listener import WebSocketListener as WebSocketListener
from .manager import ConnectionState as ConnectionState
from .manager import WebSocketManager as WebSocketManager

__all__ = ["ConnectionState", "WebSocketListener", "WebSocketManager"]
