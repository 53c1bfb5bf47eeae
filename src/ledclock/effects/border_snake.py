"""Border "snake" shown while the clock color fades.

Two snakes leave the bottom-center pixel together, one running
counter-clockwise up the left edge and one clockwise up the right edge,
and meet at top-center when the fade ends. Their color follows the same
eased fade as the clock.
"""

import logging
from typing import Callable

from ..display.geometry import Point
from ..display.graphics import Color
from .transition import ease_in_out_cubic, interpolate_color, wall_clock_ms

logger = logging.getLogger(__name__)

# Fraction of the animation during which the start pixel stays lit
START_PIXEL_FRACTION = 0.3


class BorderSnakeAnimation:
    """Two snakes crawling along the panel border.

    Usage:
        snake = BorderSnakeAnimation(64, 32)
        snake.start(Colors.RED, Colors.BLUE, 30_000)
        for point, color in snake.update():
            ...
    """

    def __init__(
        self,
        width: int,
        height: int,
        max_snake_length: int = 16,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.max_snake_length = max_snake_length
        self._clock = clock or wall_clock_ms

        self._animating = False
        self._start_time = 0.0
        self._duration_ms = 0.0
        self._from_color = Color(0, 0, 0)
        self._to_color = Color(0, 0, 0)

        self.path_left, self.path_right = self._build_paths()

    @property
    def is_animating(self) -> bool:
        return self._animating

    @property
    def start_point(self) -> Point:
        return Point(self.width // 2, self.height - 1)

    def _build_paths(self) -> tuple[list[Point], list[Point]]:
        """Border paths from bottom-center to top-center, one per side."""
        w, h = self.width, self.height
        start_x, start_y = w // 2, h - 1

        left: list[Point] = []
        left.extend(Point(x, start_y) for x in range(start_x - 1, -1, -1))
        left.extend(Point(0, y) for y in range(start_y - 1, -1, -1))
        left.extend(Point(x, 0) for x in range(1, w // 2 + 1))

        right: list[Point] = []
        right.extend(Point(x, start_y) for x in range(start_x + 1, w))
        right.extend(Point(w - 1, y) for y in range(start_y - 1, -1, -1))
        right.extend(Point(x, 0) for x in range(w - 2, w // 2 - 1, -1))

        return left, right

    def start(self, from_color: Color, to_color: Color, duration_ms: float) -> None:
        """Start an animation synchronised with a color fade."""
        self._from_color = from_color
        self._to_color = to_color
        self._duration_ms = duration_ms
        self._start_time = self._clock()
        self._animating = duration_ms > 0
        logger.debug("Border snake started (%.0f ms)", duration_ms)

    def cancel(self) -> None:
        self._animating = False

    def update(self) -> list[tuple[Point, Color]]:
        """Pixels to draw for the current frame (empty when idle)."""
        if not self._animating:
            return []

        elapsed = self._clock() - self._start_time
        if elapsed >= self._duration_ms:
            self._animating = False
            return []

        progress = max(0.0, elapsed / self._duration_ms)
        color = interpolate_color(self._from_color, self._to_color, ease_in_out_cubic(progress))

        return [(point, color) for point in self.positions(progress)]

    def positions(self, progress: float) -> list[Point]:
        """Snake cells at a given progress in [0, 1)."""
        points: list[Point] = []

        for path in (self.path_left, self.path_right):
            head = int(progress * (len(path) + self.max_snake_length))
            for i in range(self.max_snake_length):
                index = head - i
                if 0 <= index < len(path):
                    points.append(path[index])

        if progress < START_PIXEL_FRACTION:
            points.append(self.start_point)

        return points
