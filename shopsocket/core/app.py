"""
Centralized application initialization.

This module provides a single point of entry for initializing the application's
core services, such as configuration and logging. Entrypoint scripts should
call `initialize_app` to get a fully configured application environment.
"""

from typing import Optional

import structlog

from shopsocket.core.config import AppSettings, get_settings
from shopsocket.core.logger import setup_logging
from shopsocket.core.metrics import ConnectionMetrics
from shopsocket.websocket.listener import WebSocketListener
from shopsocket.websocket.manager import WebSocketManager

_logger = structlog.get_logger(__name__)


class AppContext:
    """
    Centralized application context.
    """

    def __init__(self, settings: AppSettings):
        self.settings = settings
        setup_logging(self.settings)
        self.metrics = ConnectionMetrics()
        _logger.info("Application context initialized.")

    @classmethod
    def create(cls) -> "AppContext":
        """
        Creates a new instance of the application context.
        """
        settings = get_settings()
        return cls(settings)

    def create_manager(
        self,
        listener: Optional[WebSocketListener] = None,
        server_url: Optional[str] = None,
    ) -> WebSocketManager:
        """Build a WebSocketManager wired to the configured settings and metrics."""
        return WebSocketManager(
            server_url=server_url or None,
            settings=self.settings.connection,
            listener=listener,
            metrics=self.metrics,
        )


def initialize_app() -> AppContext:
    """
    Initializes the application by creating the application context.
    """
    return AppContext.create()
