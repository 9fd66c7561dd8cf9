"""Core utilities package"""

from .config import settings, get_settings, Settings
from .logging import (
    setup_logging,
    get_logger,
    get_context_logger,
    sanitize_for_logging,
)
from .errors import (
    EngineError,
    InvalidRequestError,
    BlankConfigurationError,
    GradingError,
    register_error_handlers,
)

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "setup_logging",
    "get_logger",
    "get_context_logger",
    "sanitize_for_logging",
    "EngineError",
    "InvalidRequestError",
    "BlankConfigurationError",
    "GradingError",
    "register_error_handlers",
]
