import argparse
import asyncio
import inspect
import sys

import structlog

from shopsocket import __version__
from shopsocket.scripts import echo_demo, listen, send_message

logger = structlog.get_logger(__name__)


def run_cli(argv: list[str]):
    """
    Parses command-line arguments and executes the corresponding command.
    This function is separate from main() to be easily testable.
    """
    parser = argparse.ArgumentParser(
        description="Real-time WebSocket client for the spandroidshopping app."
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    subparsers = parser.add_subparsers(
        dest="command", required=True, help="sub-command help"
    )

    # --- Listen Command ---
    parser_listen = subparsers.add_parser(
        "listen", help="Connect and print incoming messages."
    )
    parser_listen.add_argument("--url", help="Server URL (defaults to WS_SERVER_URL).")
    parser_listen.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Stop after this many seconds (default: run until interrupted).",
    )
    parser_listen.set_defaults(func=listen.main)

    # --- Send Command ---
    parser_send = subparsers.add_parser("send", help="Send a single message.")
    parser_send.add_argument("content", help="Message content.")
    parser_send.add_argument("--url", help="Server URL (defaults to WS_SERVER_URL).")
    parser_send.add_argument(
        "--type",
        dest="message_type",
        choices=sorted(send_message.MESSAGE_BUILDERS),
        default="text",
        help="Envelope to wrap the content in.",
    )
    parser_send.add_argument("--title", help="Title for notification messages.")
    parser_send.add_argument(
        "--wait",
        type=float,
        default=3.0,
        help="Seconds to wait for replies after sending.",
    )
    parser_send.set_defaults(func=send_message.main)

    # --- Demo Command ---
    parser_demo = subparsers.add_parser(
        "demo", help="Run the connect/send/disconnect example session."
    )
    parser_demo.add_argument("--url", help="Echo server URL.")
    parser_demo.set_defaults(func=echo_demo.main)

    args = parser.parse_args(argv)
    kwargs = {k: v for k, v in vars(args).items() if k not in ("command", "func")}

    logger.info(f"Executing command: {args.command}")
    try:
        if inspect.iscoroutinefunction(args.func):
            asyncio.run(args.func(**kwargs))
        else:
            args.func(**kwargs)
    except KeyboardInterrupt:
        logger.info(f"Command '{args.command}' interrupted.")
        return
    logger.info(f"Command '{args.command}' finished.")


def main():
    """
    Main entry point for the application's command-line interface.
    """
    run_cli(sys.argv[1:])


if __name__ == "__main__":
    main()
