# launchpad/logging/logger.py
from __future__ import annotations

import logging
import sys
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional

from launchpad.configuration.config import settings

# ANSI colors
_COLORS = {
    "RESET": "\033[0m",
    "DIM": "\033[2m",
    "RED": "\033[31m",
    "GREEN": "\033[32m",
    "YELLOW": "\033[33m",
    "MAGENTA": "\033[35m",
    "CYAN": "\033[36m",
}

_LEVEL_EMOJI = {
    "DEBUG": "🔍",
    "INFO": "ℹ️",
    "WARNING": "⚠️",
    "ERROR": "❌",
    "CRITICAL": "🛑",
}

_LEVEL_COLOR = {
    "DEBUG": _COLORS["CYAN"],
    "INFO": _COLORS["GREEN"],
    "WARNING": _COLORS["YELLOW"],
    "ERROR": _COLORS["RED"],
    "CRITICAL": _COLORS["MAGENTA"],
}

APP_NAMESPACE = "launchpad"
SERVICE_NAME = "opencoins-launchpad"

# Attributes every LogRecord carries; anything else was passed through `extra=`.
_STANDARD_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}

LogSink = Callable[[Dict[str, Any]], None]


def _level_from_str(value: str) -> int:
    level = logging.getLevelName((value or "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def _canonical_name(name: str) -> str:
    """Map module logger names to the canonical 'launchpad.*' namespace."""
    if name == APP_NAMESPACE or name.startswith(APP_NAMESPACE + "."):
        return name
    return f"{APP_NAMESPACE}.{name}"


class ColorFormatter(logging.Formatter):
    """
    Readable, colored formatter with emoji per level and ISO-8601 timestamps.
    Example:
      2026-10-02 01:36:22.123+0000 ℹ️ INFO     launchpad.core.backends.evm_backend - [EVM][DEPLOY] Contract confirmed
    """

    def __init__(self, use_color: bool = True) -> None:
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.gmtime(record.created)) + f".{int(record.msecs):03d}+0000"

        level_name = record.levelname.upper()
        emoji = _LEVEL_EMOJI.get(level_name, "")
        message = record.getMessage()
        name = record.name or ""

        if self.use_color:
            color = _LEVEL_COLOR.get(level_name, "")
            reset = _COLORS["RESET"]
            dim = _COLORS["DIM"]
            line = f"{dim}{timestamp}{reset} {color}{emoji} {level_name:<8}{reset} {name} {dim}- {message}{reset}"
        else:
            line = f"{timestamp} {emoji} {level_name:<8} {name} - {message}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class LogSinkHandler(logging.Handler):
    """
    Forward log records to the host log sink as `{service, level, message, extra}`.

    Fire-and-forget: a failing sink is reported through `handleError` and never
    reaches the code that emitted the record.
    """

    def __init__(self, sink: LogSink, service: str = SERVICE_NAME) -> None:
        super().__init__(level=logging.NOTSET)
        self.sink = sink
        self.service = service

    @staticmethod
    def extract_extra(record: logging.LogRecord) -> Dict[str, Any]:
        return {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_ATTRIBUTES and not key.startswith("_")
        }

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        try:
            payload = {
                "service": self.service,
                "level": record.levelname.lower(),
                "message": record.getMessage(),
                "extra": self.extract_extra(record),
            }
            self.sink(payload)
        except Exception:
            self.handleError(record)


def _install_console_handler(root: logging.Logger) -> None:
    """Install a single console handler that does not filter by level (NOTSET)."""
    for h in root.handlers:
        if isinstance(h, logging.StreamHandler) and getattr(h, "_launchpad_handler", False):
            h.setLevel(logging.NOTSET)
            return

    use_color = sys.stderr.isatty() and not settings.NO_COLOR
    handler = logging.StreamHandler(stream=sys.stderr)
    handler._launchpad_handler = True
    handler.setLevel(logging.NOTSET)
    handler.setFormatter(ColorFormatter(use_color=use_color))
    root.addHandler(handler)


def init_logging() -> None:
    """
    Initialize logging with:
    - ISO-8601 timestamps
    - Emoji per level
    - Quiet chain/HTTP client libraries
    """
    root = logging.getLogger()
    root.setLevel(_level_from_str(settings.LOG_LEVEL))
    _install_console_handler(root)

    # All application loggers under 'launchpad' use LOG_LEVEL_LAUNCHPAD
    logging.getLogger(APP_NAMESPACE).setLevel(_level_from_str(settings.LOG_LEVEL_LAUNCHPAD))

    logging.getLogger("web3").setLevel(_level_from_str(settings.LOG_LEVEL_LIB_WEB3))
    logging.getLogger("httpx").setLevel(_level_from_str(settings.LOG_LEVEL_LIB_HTTPX))
    logging.getLogger("httpcore").setLevel(_level_from_str(settings.LOG_LEVEL_LIB_HTTPX))
    logging.getLogger("urllib3").setLevel(_level_from_str(settings.LOG_LEVEL_LIB_URLLIB3))
    logging.getLogger("solana").setLevel(_level_from_str(settings.LOG_LEVEL_LIB_SOLANA))

    # Route uvicorn through our handler (same formatting)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.setLevel(_level_from_str(settings.LOG_LEVEL))
        lg.propagate = True


def install_log_sink(sink: LogSink, service: str = SERVICE_NAME) -> LogSinkHandler:
    """Attach the host log sink to the 'launchpad' logger (idempotent)."""
    app_logger = logging.getLogger(APP_NAMESPACE)
    for handler in app_logger.handlers:
        if isinstance(handler, LogSinkHandler):
            handler.sink = sink
            handler.service = service
            return handler
    handler = LogSinkHandler(sink, service=service)
    app_logger.addHandler(handler)
    return handler


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger in the canonical 'launchpad.*' namespace."""
    base = name or __name__
    logger = logging.getLogger(_canonical_name(base))
    logger.propagate = True
    return logger


def log_deployment(
        logger: logging.Logger,
        family: str,
        network: str,
        address: str,
        token_name: str,
        token_symbol: str,
        tx_id: str,
        extra: Optional[Mapping[str, Any]] = None,
) -> None:
    """Emit the structured record describing a confirmed token deployment."""
    payload: Dict[str, Any] = {
        "chain": family,
        "network": network,
        "token_address": address,
        "token_name": token_name,
        "token_symbol": token_symbol,
        "tx_id": tx_id,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if extra:
        payload.update(extra)
    logger.info("[%s][DEPLOYED] %s (%s) at %s", family.upper(), token_name, token_symbol, address, extra=payload)
