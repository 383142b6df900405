"""
Standardized message data model.

This module defines the JSON envelope exchanged with the real-time server:

    {"type": "...", "content": "...", "timestamp": <epoch ms>, "data": {...}}
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from shopsocket.core.serializer import coerce_bool, coerce_int


class MessageType:
    """Known values of the envelope ``type`` field."""

    HEARTBEAT = "heartbeat"
    TEXT = "text"
    JSON = "json"
    BINARY = "binary"
    ERROR = "error"
    NOTIFICATION = "notification"


class WebSocketMessage(BaseModel):
    """
    A parsed message envelope.
    """

    type: str = Field(MessageType.TEXT, description="Type of the message")
    content: str = Field("", description="Content of the message")
    timestamp: int = Field(
        ..., description="Time the message was created, in epoch milliseconds"
    )
    data: Optional[Dict[str, Any]] = Field(
        None, description="Additional structured payload"
    )

    def get_data_string(self, key: str) -> str:
        if self.data is None:
            return ""
        value = self.data.get(key)
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    def get_data_int(self, key: str, default: int) -> int:
        if self.data is None:
            return default
        return coerce_int(self.data.get(key), default)

    def get_data_bool(self, key: str, default: bool) -> bool:
        if self.data is None:
            return default
        return coerce_bool(self.data.get(key), default)
