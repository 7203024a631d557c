# logging_utils.py
"""Structured logging utilities for the Kyros discovery tooling."""

import json
import logging
import os
import sys
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Dict, Optional

LOGGER_NAMESPACE = "kyros_discovery"

# LogRecord attributes that never count as "extra" fields
_STANDARD_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "message", "taskName",
}


class StructuredFormatter(logging.Formatter):
    """Formatter that renders each record as a single JSON object."""

    def __init__(
        self,
        service_name: str = "kyros-discovery",
        include_timestamp: bool = True,
        include_extra: bool = True,
    ):
        """Initialize the structured formatter.

        Args:
            service_name: Name of the service to include in logs
            include_timestamp: Whether to include timestamp in output
            include_extra: Whether to include extra fields from log record
        """
        super().__init__()
        self.service_name = service_name
        self.include_timestamp = include_timestamp
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a JSON string."""
        log_data: Dict[str, Any] = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "service": self.service_name,
        }

        if self.include_timestamp:
            log_data["timestamp"] = datetime.now(timezone.utc).isoformat()

        log_data["source"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            extra_fields = {}
            for key, value in record.__dict__.items():
                if key in _STANDARD_ATTRS or key.startswith("_"):
                    continue
                try:
                    json.dumps(value)
                    extra_fields[key] = value
                except (TypeError, ValueError):
                    extra_fields[key] = str(value)

            if extra_fields:
                log_data["extra"] = extra_fields

        return json.dumps(log_data, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Human-readable formatter for development environments."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname

        if self.use_colors:
            color = self.COLORS.get(level, "")
            level_str = f"{color}{level:8}{self.RESET}"
        else:
            level_str = f"{level:8}"

        formatted = f"[{timestamp}] {level_str} [{record.name}] {record.getMessage()}"

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


def setup_logging(
    level: Optional[str] = None,
    structured: Optional[bool] = None,
    service_name: str = "kyros-discovery",
    stream=None,
) -> logging.Logger:
    """Set up logging configuration for the discovery tooling.

    Configures the root logger and returns the package logger. Structured
    (JSON) output is the default everywhere except development, where a
    coloured single-line format is easier to read.

    Args:
        level: Log level name. Defaults to the LOG_LEVEL env var or INFO.
        structured: Whether to use JSON output. Defaults to True unless
                    APP_ENV is a development environment.
        service_name: Service name to include in structured logs.
        stream: Output stream for the console handler (default: stderr).

    Returns:
        Logger instance for kyros_discovery

    Example:
        >>> logger = setup_logging(level="DEBUG", structured=False)
        >>> logger.info("Discovery started", extra={"session_id": "abc"})
    """
    if level is None:
        level = os.environ.get("LOG_LEVEL", "INFO")
    level = level.upper()
    log_level = getattr(logging, level, logging.INFO)

    if structured is None:
        app_env = os.environ.get("APP_ENV", "development").lower()
        structured = app_env not in ("dev", "development")

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(log_level)

    if structured:
        formatter = StructuredFormatter(service_name=service_name)
    else:
        formatter = HumanReadableFormatter(use_colors=True)

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    _configure_third_party_loggers(log_level)

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.debug(
        "Logging initialized",
        extra={
            "log_level": level,
            "structured": structured,
            "service": service_name,
        }
    )

    return logger


def _configure_third_party_loggers(log_level: int) -> None:
    """Keep HTTP client libraries at WARNING unless DEBUG is requested."""
    third_party_level = logging.WARNING if log_level > logging.DEBUG else log_level

    for logger_name in ("urllib3", "requests"):
        logging.getLogger(logger_name).setLevel(third_party_level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance under the kyros_discovery namespace.

    Example:
        >>> logger = get_logger("controller")
        >>> logger.name
        'kyros_discovery.controller'
    """
    if not name.startswith(LOGGER_NAMESPACE):
        name = f"{LOGGER_NAMESPACE}.{name}"
    return logging.getLogger(name)


class LogContext:
    """Context manager for adding extra fields to log messages.

    Fields set here are picked up by ContextAdapter for every message logged
    inside the block. The fields live in a ContextVar, so each asyncio task
    sees its own copy and a block may safely span an ``await``.

    Example:
        >>> with LogContext(session_id="abc123"):
        ...     logger.info("Analysis started")  # includes session_id
    """

    _context: ContextVar[Dict[str, Any]] = ContextVar("kyros_log_context", default={})

    def __init__(self, **kwargs: Any):
        self.new_context = kwargs
        self._token: Optional[Token] = None

    def __enter__(self) -> "LogContext":
        merged = {**LogContext._context.get(), **self.new_context}
        self._token = LogContext._context.set(merged)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            LogContext._context.reset(self._token)
            self._token = None

    @classmethod
    def get_context(cls) -> Dict[str, Any]:
        """Get a copy of the log context of the current task."""
        return dict(cls._context.get())


class ContextAdapter(logging.LoggerAdapter):
    """Logger adapter that automatically includes LogContext fields.

    Example:
        >>> logger = ContextAdapter(get_logger("controller"), {})
        >>> with LogContext(session_id="abc123"):
        ...     logger.info("Processing")  # automatically includes session_id
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = dict(LogContext.get_context())
        extra.update(kwargs.get("extra", {}))
        kwargs["extra"] = extra
        return msg, kwargs
