import asyncio
from typing import Callable, Dict, Optional

import structlog
from rich.console import Console
from rich.panel import Panel

from shopsocket.core.app import initialize_app
from shopsocket.core.data_models import MessageType
from shopsocket.core.simple_error_handler import log_exception, retry_on_failure
from shopsocket.scripts.listen import ConsoleListener
from shopsocket.websocket.manager import WebSocketManager
from shopsocket.websocket.utils import (
    create_error_message,
    create_json_message,
    create_notification_message,
    create_text_message,
)

logger = structlog.get_logger(__name__)

console = Console()

MESSAGE_BUILDERS: Dict[str, Callable[[str, Optional[str]], str]] = {
    "raw": lambda content, title: content,
    "text": lambda content, title: create_text_message(content),
    "json": lambda content, title: create_json_message(MessageType.JSON, content),
    "notification": lambda content, title: create_notification_message(
        title or "", content
    ),
    "error": lambda content, title: create_error_message(content),
}


def build_message(message_type: str, content: str, title: Optional[str] = None) -> str:
    """Wrap `content` in the envelope selected by `message_type`."""
    try:
        builder = MESSAGE_BUILDERS[message_type]
    except KeyError:
        raise ValueError(
            f"Unknown message type '{message_type}'. "
            f"Expected one of: {', '.join(MESSAGE_BUILDERS)}"
        )
    return builder(content, title)


@retry_on_failure(max_retries=2, delay=1.0)
async def connect_once(manager: WebSocketManager) -> None:
    """Open the connection, raising ConnectionError if the handshake failed."""
    await manager.connect()
    if not manager.is_connected:
        raise ConnectionError(f"Could not connect to {manager.server_url}")


@log_exception
async def main(
    content: str,
    url: Optional[str] = None,
    message_type: str = "text",
    title: Optional[str] = None,
    wait: float = 3.0,
) -> bool:
    """Send a single message and print replies received within `wait` seconds."""
    payload = build_message(message_type, content, title)

    app_context = initialize_app()
    manager = app_context.create_manager(ConsoleListener(), server_url=url)
    if not manager.server_url:
        console.print(
            Panel("No server URL. Pass --url or set WS_SERVER_URL.", style="red")
        )
        return False

    # Failed handshakes are retried by connect_once, not by the manager
    manager.settings.max_reconnect_attempts = 0

    sent = False
    try:
        async with manager:
            try:
                await connect_once(manager)
            except ConnectionError as e:
                console.print(Panel(str(e), style="red"))
                return False

            sent = await manager.send_message(payload)
            if sent:
                console.print(f"[green]Sent:[/] {payload}")
                if wait > 0:
                    await asyncio.sleep(wait)
    finally:
        app_context.metrics.log_summary()
    return sent
