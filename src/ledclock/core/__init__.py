"""Core infrastructure module.

Provides foundational components:
- Custom exception hierarchy
- Structured logging

Configuration lives in `core.config`; it depends on the display color
types, so it is not imported here.
"""

from .errors import (
    LEDClockError,
    ConfigurationError,
    HardwareError,
    ValidationError,
    InvalidDimensionError,
    FontError,
    AppError,
)
from .logging import setup_logging, get_logger, log_error

__all__ = [
    # Errors
    "LEDClockError",
    "ConfigurationError",
    "HardwareError",
    "ValidationError",
    "InvalidDimensionError",
    "FontError",
    "AppError",
    # Logging
    "setup_logging",
    "get_logger",
    "log_error",
]
