"""Logging configuration shared by the Market and Profiles contexts.

stdlib logging owns the sinks (stdout plus two rotating files, one of them
errors-only); structlog owns the event structure. Production and staging
emit JSON lines, every other environment renders for a terminal. The acting
user is carried through contextvars so handler log lines need not repeat it.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

SERVICE_NAME = "marketstream"

_LEVELS_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
_JSON_ENVS = ("production", "staging")
_ROTATE_BYTES = 10 * 1024 * 1024
_ROTATE_KEEP = 5
_QUIET_LOGGERS = ("urllib3", "asyncio", "sqlalchemy.engine", "httpx")

_configured = False


def current_env() -> str:
    """The deployment environment; ``PROTEAN_ENV`` doubles as the fallback."""
    for name in ("ENV", "ENVIRONMENT", "PROTEAN_ENV"):
        value = os.getenv(name)
        if value:
            return value.lower()
    return "development"


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", _LEVELS_BY_ENV.get(current_env(), "INFO")).upper()


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_ROTATE_BYTES,
        backupCount=_ROTATE_KEEP,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(log_dir: str = "logs", log_file_prefix: str = SERVICE_NAME) -> None:
    """Route the root logger to stdout, ``<prefix>.log`` and ``<prefix>_error.log``."""
    level = get_log_level()
    directory = Path(os.getenv("LOG_DIR", log_dir))
    directory.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [
        console,
        _rotating_handler(directory / f"{log_file_prefix}.log", level),
        _rotating_handler(directory / f"{log_file_prefix}_error.log", logging.ERROR),
    ]

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _add_service(_logger, _method, event_dict):
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("env", current_env())
    return event_dict


def _renderer():
    if current_env() in _JSON_ENVS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=True, max_frames=2),
    )


def setup_structlog() -> None:
    callsite = structlog.processors.CallsiteParameterAdder(
        parameters=[
            structlog.processors.CallsiteParameter.MODULE,
            structlog.processors.CallsiteParameter.FUNC_NAME,
            structlog.processors.CallsiteParameter.LINENO,
        ]
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            _add_service,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            callsite,
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(log_dir: str = "logs", log_file_prefix: str = SERVICE_NAME) -> None:
    """Configure all logging once per process; later calls are no-ops."""
    global _configured
    if _configured:
        return
    setup_stdlib_logging(log_dir=log_dir, log_file_prefix=log_file_prefix)
    setup_structlog()
    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_requester(user_id: str | None, rank: Any = None) -> None:
    """Attach the acting user to every log line of the current request."""
    structlog.contextvars.bind_contextvars(
        requester_id=user_id,
        requester_rank=getattr(rank, "value", rank),
    )


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
