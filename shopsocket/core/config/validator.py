"""
Configuration validator that validates settings values.
"""

import structlog

from .models import ConnectionSettings

logger = structlog.get_logger(__name__)


def validate_configuration(connection: ConnectionSettings) -> None:
    """Validate configuration values and provide helpful warnings."""

    if connection.reconnect_interval < 0:
        raise ValueError(
            f"reconnect_interval must be >= 0, got {connection.reconnect_interval}"
        )

    if connection.max_reconnect_attempts < 0:
        raise ValueError(
            f"max_reconnect_attempts must be >= 0, got {connection.max_reconnect_attempts}"
        )

    if connection.heartbeat_interval <= 0:
        raise ValueError(
            f"heartbeat_interval must be > 0, got {connection.heartbeat_interval}"
        )

    for name in ("connect_timeout", "read_timeout", "write_timeout"):
        value = getattr(connection, name)
        if value <= 0:
            raise ValueError(f"{name} must be > 0, got {value}")

    if not connection.heartbeat_message:
        raise ValueError("heartbeat_message must not be empty")

    if connection.server_url and not connection.server_url.startswith(
        ("ws://", "wss://")
    ):
        logger.warning(
            f"WS_SERVER_URL ({connection.server_url}) does not use the ws:// or wss:// scheme. "
            f"The connection will most likely fail."
        )

    if connection.heartbeat_interval < connection.read_timeout:
        logger.warning(
            f"WS_HEARTBEAT_INTERVAL ({connection.heartbeat_interval}s) is shorter than "
            f"WS_READ_TIMEOUT ({connection.read_timeout}s). "
            f"Heartbeats will be sent more often than necessary."
        )
