"""Centralized logging configuration for the API server and CLI."""

import logging
import logging.handlers
from pathlib import Path

import structlog

from hoopstats.config import Settings

_SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.StackInfoRenderer(),
    structlog.dev.set_exc_info,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]


def configure_logging(settings: Settings, json_output: bool | None = None) -> None:
    """
    Configure structlog and stdlib logging based on settings.

    Args:
        settings: Application settings containing logging configuration
        json_output: Force JSON (True) or console (False) rendering. Defaults to
                     ``settings.logging.json_output``.

    Note:
        This function is idempotent - safe to call multiple times.
        Creates log directory if it doesn't exist.
    """
    if json_output is None:
        json_output = settings.logging.json_output

    log_level = _parse_level(settings.logging.level)
    log_path = Path(settings.logging.file)

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=10_485_760,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
    except OSError as e:
        print(f"Warning: Could not create log file {log_path}: {e}")
        print("Falling back to console-only logging")
        _install(log_level, [_console_handler(log_level, json_output)])
        return

    file_handler.setLevel(log_level)
    file_handler.setFormatter(_formatter(json_output, colors=False))

    _install(log_level, [file_handler, _console_handler(log_level, json_output)])


def _parse_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if isinstance(value, int):
        return value
    print(f"Warning: Invalid log level '{level}', defaulting to INFO")
    return logging.INFO


def _formatter(json_output: bool, colors: bool) -> structlog.stdlib.ProcessorFormatter:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=colors)
    )
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=_SHARED_PROCESSORS,
    )


def _console_handler(log_level: int, json_output: bool) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(log_level)
    handler.setFormatter(_formatter(json_output, colors=not json_output))
    return handler


def _install(log_level: int, handlers: list[logging.Handler]) -> None:
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=handlers,
        force=True,  # Allow reconfiguration
    )

    # SQLAlchemy echo propagates to root; keep it at WARNING unless debugging
    if log_level > logging.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    structlog.configure(
        processors=_SHARED_PROCESSORS
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
