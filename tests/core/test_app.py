from unittest.mock import MagicMock, patch

from shopsocket.core.app import AppContext, initialize_app
from shopsocket.core.config import AppSettings, ConnectionSettings, PathSettings
from shopsocket.websocket.listener import WebSocketListener


def _settings():
    return AppSettings(
        connection=ConnectionSettings(server_url="ws://shop.test/ws"),
        paths=PathSettings(),
    )


@patch("shopsocket.core.app.setup_logging")
def test_app_context_initialization(mock_setup_logging):
    settings = _settings()

    app_context = AppContext(settings)

    mock_setup_logging.assert_called_once_with(settings)
    assert app_context.settings is settings
    assert app_context.metrics.messages_sent == 0


@patch("shopsocket.core.app.setup_logging")
def test_create_manager_uses_settings_and_metrics(mock_setup_logging):
    app_context = AppContext(_settings())
    listener = WebSocketListener()

    manager = app_context.create_manager(listener)

    assert manager.server_url == "ws://shop.test/ws"
    assert manager.metrics is app_context.metrics
    assert manager._listener is listener


@patch("shopsocket.core.app.setup_logging")
def test_create_manager_url_override(mock_setup_logging):
    app_context = AppContext(_settings())

    manager = app_context.create_manager(server_url="wss://other.test")

    assert manager.server_url == "wss://other.test"
    # The shared settings are untouched
    assert app_context.settings.connection.server_url == "ws://shop.test/ws"


@patch("shopsocket.core.app.setup_logging")
@patch("shopsocket.core.app.get_settings")
def test_initialize_app(mock_get_settings, mock_setup_logging):
    mock_get_settings.return_value = MagicMock(spec=AppSettings)

    app_context = initialize_app()

    mock_get_settings.assert_called_once()
    assert app_context.settings is mock_get_settings.return_value
