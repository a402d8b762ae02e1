"""
Structured logging configuration for JSON-formatted logs.
Supports pretty format for local development.

Library modules only create loggers through get_logger(); handlers are
installed by the embedding application calling setup_logging().
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

# Log format: "json" for production, "pretty" for local dev
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

_CONTEXT_FIELDS = ("uri", "host", "component", "operation")


class JSONFormatter(logging.Formatter):
    """
    Custom formatter that outputs logs as JSON.
    One object per line, suitable for log shippers.
    """

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add any extra fields from log_with_context
        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            log_data.update(extra_fields)

        for field in _CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, ensure_ascii=False)


class PrettyFormatter(logging.Formatter):
    """
    Human-readable formatter for local development.
    """

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        color = self.COLORS.get(record.levelname, "")
        level = f"{color}{record.levelname:<7}{self.RESET}"
        service = f"{self.DIM}{self.service_name}{self.RESET}"
        message = record.getMessage()

        context_parts = []
        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            for key, value in extra_fields.items():
                if key == "uri" and isinstance(value, str) and len(value) > 60:
                    value = value[:57] + "..."
                context_parts.append(f"{key}={value}")

        context = (
            f" {self.DIM}[{', '.join(context_parts)}]{self.RESET}"
            if context_parts
            else ""
        )
        output = f"{timestamp} {level} {service} │ {message}{context}"

        if record.exc_info:
            output += f"\n{self.formatException(record.exc_info)}"

        return output


def setup_logging(service_name: str = "urikit", level: int = logging.INFO) -> None:
    """
    Configure structured logging for an application embedding urikit.

    Uses LOG_FORMAT env var to determine format:
    - "json" (default): one JSON object per line
    - "pretty": Human-readable format for local development

    Args:
        service_name: Name reported in every record
        level: Logging level (default: INFO)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if LOG_FORMAT == "pretty":
        formatter = PrettyFormatter(service_name)
    else:
        formatter = JSONFormatter(service_name)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    root_logger.addHandler(console_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__)
    """
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger, level: int, message: str, **kwargs
) -> None:
    """
    Log a message with additional context fields.

    Args:
        logger: Logger instance
        level: Log level (e.g., logging.DEBUG)
        message: Log message
        **kwargs: Additional fields to include in JSON output
    """
    if not logger.isEnabledFor(level):
        return
    extra = {"extra_fields": kwargs}
    logger.log(level, message, extra=extra)
