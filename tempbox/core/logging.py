"""
Logging Configuration

Structured logging through structlog on top of the stdlib logging tree.

Application code logs an event name plus key/value fields:

    logger.info("sweep_completed", trigger="manual", successful=7, failed=5)

In ``json`` format the fields become top-level keys of a python-json-logger
record; in ``text`` format structlog's console renderer prints them as
``key=value`` pairs. Records from third-party stdlib loggers (uvicorn,
httpx) go through the same handlers.
"""

import logging
import sys

import structlog
from pythonjsonlogger import jsonlogger

from tempbox.config import get_settings


settings = get_settings()

TEXT_TIMESTAMP = structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S")


def _json_formatter() -> logging.Formatter:
    return jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
            "message": "event",
        },
    )


def _text_formatter() -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            TEXT_TIMESTAMP,
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
    )


def _structlog_processors(log_format: str) -> list:
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]

    if log_format == "json":
        # Event dict becomes the record's msg and extra fields
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.stdlib.render_to_log_kwargs,
        ])
    else:
        processors.extend([
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            TEXT_TIMESTAMP,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ])

    return processors


def setup_logging():
    """
    Configure application logging.

    Sets up:
    - Log level from settings
    - JSON (python-json-logger) or text (structlog console) rendering
    - Console and file handlers
    - Structlog bound loggers routed through the stdlib handlers
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper())
    formatter = _json_formatter() if settings.LOG_FORMAT == "json" else _text_formatter()

    logging.root.setLevel(log_level)
    logging.root.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logging.root.addHandler(console_handler)

    if settings.LOG_FILE:
        try:
            file_handler = logging.FileHandler(settings.LOG_FILE)
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            logging.root.addHandler(file_handler)
        except OSError as e:
            logging.error(f"Failed to setup file logging: {e}")

    structlog.configure(
        processors=_structlog_processors(settings.LOG_FORMAT),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=settings.is_production,
    )

    # Suppress noisy loggers
    for name in ("uvicorn", "uvicorn.access", "fastapi", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structlog logger bound to a stdlib logger of the same name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        structlog.stdlib.BoundLogger: Logger accepting key/value fields
    """
    return structlog.get_logger(name)
