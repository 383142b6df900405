import asyncio
from typing import Optional

import structlog
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from shopsocket.core.app import initialize_app
from shopsocket.core.data_models import MessageType
from shopsocket.core.simple_error_handler import log_exception
from shopsocket.websocket.listener import WebSocketListener
from shopsocket.websocket.utils import parse_message

logger = structlog.get_logger(__name__)

console = Console()


class ConsoleListener(WebSocketListener):
    """Prints connection events and parsed messages to the terminal."""

    def on_connected(self) -> None:
        console.print("[bold green]Connected[/]")

    def on_connection_failed(self, error: str) -> None:
        console.print(f"[bold red]Connection failed:[/] {error}")

    def on_disconnected(self, code: int, reason: str) -> None:
        console.print(f"[yellow]Disconnected[/] ({code}) {reason}")

    def on_message_received(self, message: str) -> None:
        parsed = parse_message(message)
        style = "bold red" if parsed.type == MessageType.ERROR else "bold cyan"
        line = Text(f"[{parsed.type}] ", style=style)
        line.append(parsed.content)
        if parsed.data:
            line.append(f" {parsed.data}", style="dim")
        console.print(line)

    def on_send_failed(self, error: str) -> None:
        console.print(f"[bold red]Send failed:[/] {error}")

    def on_reconnecting(self, attempt: int) -> None:
        console.print(f"[yellow]Reconnecting (attempt {attempt})...[/]")

    def on_reconnected(self) -> None:
        console.print("[bold green]Reconnected[/]")

    def on_reconnect_failed(self, error: str) -> None:
        console.print(f"[bold red]Reconnect failed:[/] {error}")


@log_exception
async def main(url: Optional[str] = None, duration: Optional[float] = None):
    """Connect and print incoming messages until interrupted or `duration` elapses."""
    app_context = initialize_app()
    manager = app_context.create_manager(ConsoleListener(), server_url=url)

    if not manager.server_url:
        console.print(
            Panel("No server URL. Pass --url or set WS_SERVER_URL.", style="red")
        )
        return

    console.print(
        Panel(
            f"Listening on [bold cyan]{manager.server_url}[/]",
            title="shopsocket",
            expand=False,
        )
    )

    try:
        async with manager:
            await manager.connect()
            if duration is None:
                await asyncio.Event().wait()
            else:
                await asyncio.sleep(duration)
    finally:
        app_context.metrics.log_summary()
