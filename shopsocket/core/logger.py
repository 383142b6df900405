import logging
import logging.handlers
import os
import sys

import structlog

from shopsocket.core.config import AppSettings

LOG_FILE_NAME = "shopsocket.log"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3

# Transport chatter is only interesting at WARNING and above
QUIET_LOGGERS = ("asyncio", "websockets")

_HANDLER_MARKER = "_shopsocket_handler"


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        )
    )
    return handler


def _file_handler(log_dir: str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        os.path.join(log_dir, LOG_FILE_NAME),
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
        )
    )
    return handler


def _remove_own_handlers(root_logger: logging.Logger) -> None:
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False) is True:
            root_logger.removeHandler(handler)
            handler.close()


def setup_logging(settings: AppSettings) -> None:
    """
    Route structlog through the stdlib root logger.

    Console output is rendered for humans at the configured level; the rotating
    file gets every record as JSON. Calling this again replaces the handlers
    installed by the previous call instead of stacking new ones.
    """
    log_dir = settings.paths.log_dir
    os.makedirs(log_dir, exist_ok=True)

    console_level = getattr(
        logging, settings.console_log_level.upper(), logging.INFO
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    _remove_own_handlers(root_logger)
    root_logger.setLevel(logging.DEBUG)
    for handler in (_console_handler(console_level), _file_handler(log_dir)):
        setattr(handler, _HANDLER_MARKER, True)
        root_logger.addHandler(handler)

    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).debug(
        "Logging configured", console_level=logging.getLevelName(console_level)
    )
