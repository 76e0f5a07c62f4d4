"""structlog setup for the storefront.

Everything goes through stdlib handlers (stdout plus two rotating files under
``LOG_DIR``) so third-party loggers and structlog share one pipeline. Output is
JSON in production and staging, the coloured dev console elsewhere.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

import structlog

_LEVEL_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

# Chatty libraries kept at WARNING regardless of our level
_QUIET_LOGGERS = ("protean", "httpx", "httpcore", "asyncio", "uvicorn.access")

_MAX_BYTES = 10 * 1024 * 1024


def current_env() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("ENV") or os.getenv("PROTEAN_ENV") or "development").lower()


def resolve_level(env: str | None = None) -> str:
    """``LOG_LEVEL`` wins; otherwise the level follows the environment."""
    return os.getenv("LOG_LEVEL") or _LEVEL_BY_ENV.get(env or current_env(), "INFO")


def _rotating(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=_MAX_BYTES, backupCount=5, encoding="utf-8")
    handler.setLevel(level)
    return handler


def _install_handlers(level: str) -> None:
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    stdout = logging.StreamHandler(sys.stdout)
    stdout.setLevel(level)

    root = logging.getLogger()
    root.handlers = [
        stdout,
        _rotating(log_dir / "storefront.log", level),
        _rotating(log_dir / "storefront_error.log", logging.ERROR),
    ]
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _renderer(env: str):
    if env in ("production", "staging"):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
    )


def configure_logging(env: str | None = None) -> None:
    """Wire stdlib handlers and structlog processors for ``env``."""
    env = env or current_env()
    _install_handlers(resolve_level(env))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(env),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_request_context(**values) -> None:
    """Start a fresh per-request context (method, path, request id)."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)
