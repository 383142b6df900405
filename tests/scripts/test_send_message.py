import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from shopsocket.scripts import send_message
from shopsocket.websocket.manager import WebSocketManager

URL = "ws://shop.test/ws"


@pytest.fixture
def app_context_for(fast_settings):
    def _build(connector, server_url=URL):
        app_context = MagicMock()
        app_context.create_manager.return_value = WebSocketManager(
            server_url=server_url, settings=fast_settings, connect_factory=connector
        )
        return app_context

    return _build


@pytest.mark.parametrize(
    "message_type,expected_type",
    [("text", "text"), ("json", "json"), ("error", "error")],
)
def test_build_message_envelopes(message_type, expected_type):
    payload = json.loads(send_message.build_message(message_type, "hello"))

    assert payload["type"] == expected_type
    assert payload["content"] == "hello"


def test_build_message_raw_and_notification():
    assert send_message.build_message("raw", "as is") == "as is"

    payload = json.loads(
        send_message.build_message("notification", "Back in stock", title="Restock")
    )
    assert payload["data"] == {"title": "Restock", "content": "Back in stock"}


def test_build_message_unknown_type():
    with pytest.raises(ValueError, match="Unknown message type"):
        send_message.build_message("fax", "hello")


@pytest.mark.asyncio
async def test_main_sends_payload(app_context_for, connector):
    app_context = app_context_for(connector)

    with patch.object(send_message, "initialize_app", return_value=app_context):
        sent = await send_message.main("hello", message_type="raw", wait=0)

    assert sent is True
    connection = connector.connections[0]
    assert connection.sent == ["hello"]
    assert connection.closed[0] == 1000
    app_context.metrics.log_summary.assert_called_once()


@pytest.mark.asyncio
async def test_main_without_url(app_context_for, connector):
    app_context = app_context_for(connector, server_url="")

    with patch.object(send_message, "initialize_app", return_value=app_context):
        sent = await send_message.main("hello")

    assert sent is False
    assert connector.calls == []


@pytest.mark.asyncio
async def test_main_retries_then_gives_up(app_context_for, make_connector):
    connector = make_connector([OSError("refused")] * 3)
    app_context = app_context_for(connector)

    with patch.object(
        send_message, "initialize_app", return_value=app_context
    ), patch(
        "shopsocket.core.simple_error_handler.asyncio.sleep", new_callable=AsyncMock
    ):
        sent = await send_message.main("hello", wait=0)

    assert sent is False
    assert len(connector.calls) == 3


@pytest.mark.asyncio
async def test_main_retries_then_sends(app_context_for, make_connector, make_connection):
    connection = make_connection()
    connector = make_connector([OSError("refused"), connection])
    app_context = app_context_for(connector)

    with patch.object(
        send_message, "initialize_app", return_value=app_context
    ), patch(
        "shopsocket.core.simple_error_handler.asyncio.sleep", new_callable=AsyncMock
    ):
        sent = await send_message.main("hello", message_type="raw", wait=0)

    assert sent is True
    assert connection.sent == ["hello"]
