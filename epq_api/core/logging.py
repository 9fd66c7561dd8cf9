"""
Structured logging configuration.

Provides consistent, structured logging across the application. Structured
records are sanitized before they are written: credential-like keys are
redacted, e-mail addresses are masked and long strings are truncated.
"""

import sys
import logging
from typing import Any, Dict
from datetime import datetime, timezone
import json
from pathlib import Path

from .config import settings

SENSITIVE_KEYS = ("password", "token", "secret", "api_key")
REDACTED = "[REDACTED]"


def sanitize_for_logging(data: Any, max_length: int = 1000) -> Any:
    """
    Remove or mask sensitive values in structured log data.

    Args:
        data: Value to sanitize (nested dicts and lists are walked)
        max_length: Strings longer than this are truncated

    Returns:
        Sanitized copy of the data
    """
    if isinstance(data, str):
        return data[:max_length] + "..." if len(data) > max_length else data

    if isinstance(data, (list, tuple)):
        return [sanitize_for_logging(item, max_length) for item in data]

    if isinstance(data, dict):
        sanitized = {}
        for key, value in data.items():
            lowered = str(key).lower()
            if any(marker in lowered for marker in SENSITIVE_KEYS):
                sanitized[key] = REDACTED
            elif "email" in lowered:
                sanitized[key] = _mask_email(str(value))
            else:
                sanitized[key] = sanitize_for_logging(value, max_length)
        return sanitized

    return data


def _mask_email(email: str) -> str:
    at_index = email.find("@")
    if at_index > 2:
        return email[:2] + "***" + email[at_index:]
    return "[EMAIL]"


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter"""

    def __init__(self, max_string_length: int = 1000):
        super().__init__()
        self.max_string_length = max_string_length

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON"""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra fields
        if isinstance(getattr(record, "extra_data", None), dict):
            log_data.update(sanitize_for_logging(record.extra_data, self.max_string_length))

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text log formatter"""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )


def setup_logging() -> None:
    """Configure application logging"""

    # Determine log level
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    # Create formatter
    if settings.LOG_FORMAT == "json":
        formatter = StructuredFormatter(settings.LOG_MAX_STRING_LENGTH)
    else:
        formatter = TextFormatter()

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    handlers = [console_handler]

    # File handler (if configured)
    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        handlers.append(file_handler)

    # Configure root logger
    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        force=True
    )

    # Silence noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get logger instance"""
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    """Enhanced logger with structured context"""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        """Add context to log messages"""
        extra_data = kwargs.pop("extra_data", {})

        if "extra" not in kwargs:
            kwargs["extra"] = {}

        kwargs["extra"]["extra_data"] = {
            **self.extra,
            **kwargs["extra"].get("extra_data", {}),
            **extra_data
        }

        return msg, kwargs


def get_context_logger(name: str, **context) -> LoggerAdapter:
    """Get logger with permanent context"""
    logger = get_logger(name)
    return LoggerAdapter(logger, context)
