"""Hardware abstraction module.

Provides:
- Mock implementations of the LED matrix binding for development
  without a panel
- GPIO control button handling
"""

from .button import ButtonEvent, ButtonHandler
from .mock import MockCanvas, MockMatrix, MockRGBMatrixOptions

__all__ = [
    "ButtonEvent",
    "ButtonHandler",
    "MockCanvas",
    "MockMatrix",
    "MockRGBMatrixOptions",
]
