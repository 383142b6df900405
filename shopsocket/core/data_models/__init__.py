"""
Standardized data models for the application.

This package contains Pydantic models that define the structure and validation
of the messages exchanged over the WebSocket connection.
"""

from .messages import MessageType as MessageType
from .messages import WebSocketMessage as WebSocketMessage

__all__ = ["MessageType", "WebSocketMessage"]
