"""Display subsystem.

Provides:
- Perimeter geometry for clock hands
- Colors and drawing primitives
- Font loading

The hardware-facing DisplayManager lives in `display.manager`.
"""

from .geometry import Point, hand_point, perimeter_point, round_half_away
from .graphics import Color, Colors, draw_line, draw_pixels, draw_text, new_frame

__all__ = [
    "Point",
    "hand_point",
    "perimeter_point",
    "round_half_away",
    "Color",
    "Colors",
    "draw_line",
    "draw_pixels",
    "draw_text",
    "new_frame",
]
