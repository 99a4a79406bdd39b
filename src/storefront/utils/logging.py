"""Logging configuration for the storefront.

stdlib handlers do the writing (console plus rotating files); structlog sits in
front of them and renders either coloured console output or JSON lines.
Credentials never reach a handler: any event key that looks like a password,
token or authorization header is masked before rendering.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

_LEVEL_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
_JSON_ENVIRONMENTS = {"production", "staging"}

SENSITIVE_KEYS = ("password", "token", "authorization", "secret")
MASK = "***"

_MAX_BYTES = 10 * 1024 * 1024
_BACKUPS = 5


def _environment() -> str:
    return (os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """LOG_LEVEL if set, else the level for the current PROTEAN_ENV."""
    return os.getenv("LOG_LEVEL", _LEVEL_BY_ENV.get(_environment(), "INFO")).upper()


def _rotating(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path, maxBytes=_MAX_BYTES, backupCount=_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging() -> None:
    log_level = get_log_level()
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(log_level)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers = [
        console,
        _rotating(log_dir / "storefront.log", log_level),
        _rotating(log_dir / "storefront_error.log", logging.ERROR),
    ]

    # Framework chatter stays out of the application log
    for noisy in ("protean", "uvicorn.access", "multipart", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def mask_sensitive_values(_logger, _method_name, event_dict: dict) -> dict:
    """structlog processor replacing credential-like values with a mask."""
    for key in event_dict:
        if any(marker in key.lower() for marker in SENSITIVE_KEYS):
            event_dict[key] = MASK
    return event_dict


def setup_structlog() -> None:
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        mask_sensitive_values,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.LINENO,
            ]
        ),
    ]

    if _environment() in _JSON_ENVIRONMENTS:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=5),
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging() -> None:
    setup_stdlib_logging()
    setup_structlog()


def add_context(**kwargs: Any) -> None:
    """Bind values into every log event for the rest of the current context (e.g. one request)."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
