"""Exception hierarchy for the LED clock.

Errors carry a severity level and optional context so callers can log
them in a structured way.
"""

from enum import Enum
from typing import Any


class ErrorSeverity(Enum):
    """Error severity levels used when logging."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class LEDClockError(Exception):
    """Base exception for all LED clock errors.

    Attributes:
        message: Human-readable error message
        details: Additional context as key-value pairs
        cause: Underlying exception, if any
        severity: Error severity level
    """

    severity: ErrorSeverity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "severity": self.severity.value,
            "details": self.details,
        }


class ConfigurationError(LEDClockError):
    """Configuration loading or saving error.

    Raised when:
    - Config file cannot be written
    - A setting names an unknown section
    """


class HardwareError(LEDClockError):
    """LED matrix errors.

    Raised when the matrix cannot be initialised. Logged at CRITICAL
    level since the process usually needs a restart.
    """

    severity = ErrorSeverity.CRITICAL


class ValidationError(LEDClockError):
    """Input validation errors."""

    severity = ErrorSeverity.WARNING


class InvalidDimensionError(ValidationError):
    """Rectangle width or height is zero or negative."""

    def __init__(self, width: float, height: float) -> None:
        super().__init__(
            "Rectangle dimensions must be positive",
            details={"width": width, "height": height},
        )
        self.width = width
        self.height = height


class FontError(LEDClockError):
    """A bitmap font could not be loaded."""

    severity = ErrorSeverity.WARNING


class AppError(LEDClockError):
    """App-specific errors.

    Raised when:
    - App activation fails
    - App render fails
    - App configuration invalid
    """
