"""
Message formatting and URL helpers for the WebSocket client.
"""

import json
import time
from typing import Any, Dict, Optional

import structlog

from shopsocket.core.data_models import MessageType, WebSocketMessage
from shopsocket.core.serializer import (
    deserialize_payload,
    serialize_content,
    serialize_payload_data,
)

logger = structlog.get_logger(__name__)

HEARTBEAT_PING = "ping"
HEARTBEAT_PONG = "pong"


def _now_ms() -> int:
    return int(time.time() * 1000)


def create_json_message(
    message_type: str, content: Any, data: Optional[Dict[str, Any]] = None
) -> str:
    """
    Build a JSON envelope.

    Args:
        message_type: One of the MessageType values (free-form strings are allowed)
        content: Message content, stringified when not already a string
        data: Optional structured payload; omitted from the envelope when None

    Returns:
        The serialized envelope.
    """
    message: Dict[str, Any] = {
        "type": message_type,
        "content": serialize_content(content),
        "timestamp": _now_ms(),
    }
    payload = serialize_payload_data(data)
    if payload is not None:
        message["data"] = payload
    return json.dumps(message, ensure_ascii=False)


def create_heartbeat_message() -> str:
    return create_json_message(MessageType.HEARTBEAT, HEARTBEAT_PING)


def create_text_message(content: str) -> str:
    return create_json_message(MessageType.TEXT, content)


def create_error_message(error: str) -> str:
    return create_json_message(MessageType.ERROR, error)


def create_notification_message(title: str, content: str) -> str:
    return create_json_message(
        MessageType.NOTIFICATION, content, {"title": title, "content": content}
    )


def parse_message(message: str) -> WebSocketMessage:
    """
    Parse a raw frame into a WebSocketMessage.

    Frames that are not JSON objects are treated as plain text.
    """
    payload = deserialize_payload(message)
    if payload is None:
        logger.debug("Message is not a JSON object, treating it as plain text")
        return WebSocketMessage(
            type=MessageType.TEXT, content=message or "", timestamp=_now_ms()
        )

    message_type = payload.get("type")
    content = payload.get("content")
    timestamp = payload.get("timestamp")
    data = payload.get("data")

    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        timestamp = _now_ms()

    return WebSocketMessage(
        type=str(message_type) if message_type is not None else MessageType.TEXT,
        content=serialize_content(content) if content is not None else message,
        timestamp=int(timestamp),
        data=data if isinstance(data, dict) else None,
    )


def is_heartbeat_message(message: str) -> bool:
    if message in (HEARTBEAT_PING, HEARTBEAT_PONG):
        return True
    return parse_message(message).type == MessageType.HEARTBEAT


def is_error_message(message: str) -> bool:
    return parse_message(message).type == MessageType.ERROR


def _format_url(scheme: str, host: str, port: int, path: Optional[str], default_port: int) -> str:
    url = f"{scheme}://{host}"
    if port > 0 and port != default_port:
        url += f":{port}"
    if path:
        if not path.startswith("/"):
            url += "/"
        url += path
    return url


def format_websocket_url(host: str, port: int, path: Optional[str] = None) -> str:
    """Build a ``ws://`` URL, leaving out the default port 80."""
    return _format_url("ws", host, port, path, 80)


def format_secure_websocket_url(host: str, port: int, path: Optional[str] = None) -> str:
    """Build a ``wss://`` URL, leaving out the default port 443."""
    return _format_url("wss", host, port, path, 443)


def is_valid_websocket_url(url: Optional[str]) -> bool:
    if not url:
        return False
    return url.startswith("ws://") or url.startswith("wss://")
