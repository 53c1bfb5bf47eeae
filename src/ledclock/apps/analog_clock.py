"""Analog clock drawn on a rectangular panel.

Hands point at positions on the panel border instead of a circle, so
the clock uses the whole 64x32 area. Twelve tick marks sit on the
border at the hour positions.
"""

import logging
from datetime import datetime
from typing import Callable

from PIL import Image

from ..core.config import AnalogClockConfig, ColorTransitionConfig
from ..display.geometry import Point, hand_point, perimeter_point
from ..display.graphics import Color, draw_line, draw_text, new_frame
from ..display.renderer import load_font
from ..effects.transition import ColorTransition
from .base import AppMetadata, BaseApp, RenderResult

logger = logging.getLogger(__name__)

HOUR_MARKERS = 12


def hand_fractions(now: datetime) -> tuple[float, float, float]:
    """Fractions of a full turn for the hour, minute and second hands."""
    hours = now.hour % 12
    minutes = now.minute
    seconds = now.second

    hour_frac = (hours + minutes / 60 + seconds / 3600) / 12
    minute_frac = (minutes + seconds / 60) / 60
    second_frac = seconds / 60
    return hour_frac, minute_frac, second_frac


class AnalogClockApp(BaseApp[AnalogClockConfig]):
    """Rectangular analog clock with hour, minute and second hands."""

    def __init__(
        self,
        config: AnalogClockConfig,
        transition: ColorTransitionConfig | None = None,
        now: Callable[[], datetime] | None = None,
        clock_ms: Callable[[], float] | None = None,
    ) -> None:
        super().__init__(config, now)
        self._transition: ColorTransition | None = None
        if config.color_mode == "auto" and transition is not None:
            self._transition = ColorTransition(transition, clock=clock_ms)
        self._font = None

    @property
    def metadata(self) -> AppMetadata:
        return AppMetadata(
            name="analog",
            display_name="Analog Clock",
            description="Clock hands pointing at the panel border",
        )

    def _on_activate(self) -> None:
        self._font = load_font(self._config.font, fallback_size=6)
        if self._transition is not None:
            self._transition.reset()

    def _markers_color(self) -> Color:
        if self._transition is not None:
            return self._transition.get_current_color()
        return self._config.markers_color.to_color()

    def render(self, width: int, height: int) -> RenderResult:
        """Render the clock face for the current second."""
        now = self._now()
        config = self._config
        image = new_frame(width, height)

        center = Point(width // 2, height // 2)
        hour_frac, minute_frac, second_frac = hand_fractions(now)

        hands = (
            (hour_frac, config.hour_hand_length, config.hour_hand_color),
            (minute_frac, config.minute_hand_length, config.minute_hand_color),
            (second_frac, config.second_hand_length, config.second_hand_color),
        )
        for fraction, length, color in hands:
            edge = perimeter_point(fraction, width, height)
            tip = hand_point(center.x, center.y, edge.x, edge.y, length)
            draw_line(image, center, tip, color.to_color())

        self._draw_markers(image, center, width, height)

        if config.show_date:
            if self._font is None:
                self._font = load_font(config.font, fallback_size=6)
            draw_text(
                image,
                now.strftime("%d.%m."),
                config.date_x,
                config.date_y,
                config.date_color.to_color(),
                font=self._font,
            )

        return RenderResult(image=image, next_render_in=1.0)

    def _draw_markers(self, image: Image.Image, center: Point, width: int, height: int) -> None:
        color = self._markers_color()
        for i in range(HOUR_MARKERS):
            edge = perimeter_point(i / HOUR_MARKERS, width, height)
            inner = hand_point(center.x, center.y, edge.x, edge.y, self._config.marker_inward)
            draw_line(image, edge, inner, color)
