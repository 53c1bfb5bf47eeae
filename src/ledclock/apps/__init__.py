"""Display applications module.

Provides:
- BaseApp abstract class for app implementation
- AppRunner render loop
- Built-in apps: analog clock, letter clock
"""

from .base import BaseApp, AppMetadata, AppState, RenderResult
from .analog_clock import AnalogClockApp
from .letter_clock import LetterClockApp
from .runner import AppRunner

__all__ = [
    "BaseApp",
    "AppMetadata",
    "AppState",
    "RenderResult",
    "AnalogClockApp",
    "LetterClockApp",
    "AppRunner",
]
