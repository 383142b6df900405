"""
Configuration loader that loads settings from environment variables.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

from .models import AppSettings, ConnectionSettings, PathSettings


def _get_float(name: str, default: str) -> float:
    value = os.getenv(name, default)
    try:
        return float(value)
    except ValueError:
        raise RuntimeError(
            f"Environment variable '{name}' must be a number, got {value!r}."
        )


def _get_int(name: str, default: str) -> int:
    value = os.getenv(name, default)
    try:
        return int(value)
    except ValueError:
        raise RuntimeError(
            f"Environment variable '{name}' must be an integer, got {value!r}."
        )


@lru_cache(maxsize=None)
def get_settings() -> AppSettings:
    """
    Loads the application settings from environment variables.
    Uses a cache to ensure settings are loaded only once.
    """
    load_dotenv()

    # --- Connection Settings ---
    connection_settings = ConnectionSettings(
        server_url=os.getenv("WS_SERVER_URL", "").strip(),
        reconnect_interval=_get_float("WS_RECONNECT_INTERVAL", "3.0"),
        max_reconnect_attempts=_get_int("WS_MAX_RECONNECT_ATTEMPTS", "5"),
        heartbeat_interval=_get_float("WS_HEARTBEAT_INTERVAL", "30.0"),
        heartbeat_message=os.getenv("WS_HEARTBEAT_MESSAGE", "ping"),
        connect_timeout=_get_float("WS_CONNECT_TIMEOUT", "10.0"),
        read_timeout=_get_float("WS_READ_TIMEOUT", "10.0"),
        write_timeout=_get_float("WS_WRITE_TIMEOUT", "10.0"),
    )

    # --- Path Settings ---
    path_settings = PathSettings()

    # --- Validate Configuration ---
    from .validator import validate_configuration

    validate_configuration(connection_settings)

    # --- App Settings ---
    return AppSettings(
        connection=connection_settings,
        paths=path_settings,
        console_log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
