"""
Configuration models for the application.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

# parents[2] is the shopsocket package directory, its parent the checkout
PROJECT_ROOT = Path(__file__).resolve().parents[2].parent


@dataclass
class ConnectionSettings:
    """Settings for the WebSocket connection manager.

    All durations are in seconds.
    """

    server_url: str = ""
    reconnect_interval: float = 3.0
    max_reconnect_attempts: int = 5
    heartbeat_interval: float = 30.0  # 30s heartbeat
    heartbeat_message: str = "ping"
    connect_timeout: float = 10.0
    read_timeout: float = 10.0
    write_timeout: float = 10.0


@dataclass
class PathSettings:
    """
    Path settings.
    All paths are absolute and constructed from the project root.
    """

    root_dir: str = field(init=False)
    log_dir: str = field(init=False)

    def __post_init__(self):
        self.root_dir = str(PROJECT_ROOT)
        # Allow overriding log_dir with environment variable
        self.log_dir = os.getenv("LOG_DIR", os.path.join(self.root_dir, "logs"))


@dataclass
class AppSettings:
    """Root application settings."""

    connection: ConnectionSettings
    paths: PathSettings
    console_log_level: str = "INFO"
