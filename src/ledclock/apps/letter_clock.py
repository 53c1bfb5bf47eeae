"""Letter clock: date and time as text, centered on the panel.

The color is either a fixed palette entry or, in AUTO mode, the output
of the color transition engine. While a fade runs, two snakes crawl
along the border in the fading color.

Short status messages (version at startup, brightness, color name)
temporarily replace the clock.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from PIL import Image

from .. import __version__
from ..core.config import ColorTransitionConfig, LetterClockConfig
from ..display.graphics import Color, Colors, draw_pixels, draw_text, new_frame
from ..display.renderer import Font, get_line_height, get_text_dimensions, load_font
from ..effects.border_snake import BorderSnakeAnimation
from ..effects.transition import ColorTransition, TransitionEvent, wall_clock_ms
from .base import AppMetadata, BaseApp, RenderResult

logger = logging.getLogger(__name__)

AUTO = -1
MSG_AUTO = "AUTO"
MSG_VERSION_PREFIX = "v"

MIN_BRIGHTNESS = 10
MAX_BRIGHTNESS = 100
BRIGHTNESS_STEP = 10

# Short names indexed by datetime.weekday() (Monday = 0) and month - 1
DAY_NAMES = {
    "it": ("LUN", "MAR", "MER", "GIO", "VEN", "SAB", "DOM"),
    "en": ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN"),
}
MONTH_NAMES = {
    "it": ("GEN", "FEB", "MAR", "APR", "MAG", "GIU", "LUG", "AGO", "SET", "OTT", "NOV", "DIC"),
    "en": ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC"),
}


def format_date_line(now: datetime, locale: str = "it") -> str:
    """Format a date like "LUN 15 DIC"."""
    day = DAY_NAMES[locale][now.weekday()]
    month = MONTH_NAMES[locale][now.month - 1]
    return f"{day} {now.day} {month}"


@dataclass
class _Message:
    text: str
    color: Color
    until_ms: float


class LetterClockApp(BaseApp[LetterClockConfig]):
    """Digital clock with a date line above the time.

    Controls:
        cycle_brightness() - step brightness by 10%, wrapping to 10%
        cycle_color() - step through the palette, then back to AUTO
    """

    def __init__(
        self,
        config: LetterClockConfig,
        transition: ColorTransitionConfig,
        now: Callable[[], datetime] | None = None,
        clock_ms: Callable[[], float] | None = None,
        on_settings_changed: Callable[[dict[str, Any]], None] | None = None,
    ) -> None:
        """Initialize the letter clock.

        Args:
            config: Letter clock settings
            transition: Palette and AUTO-mode timing
            now: Wall clock for the displayed time
            clock_ms: Millisecond time source for animations
            on_settings_changed: Called with changed settings so they can
                be persisted
        """
        super().__init__(config, now)
        self._transition_config = transition
        self._clock_ms = clock_ms or wall_clock_ms
        self._on_settings_changed = on_settings_changed

        self._transition = ColorTransition(
            transition,
            clock=self._clock_ms,
            on_event=self._on_transition_event,
        )
        self._snake: BorderSnakeAnimation | None = None
        self._message: _Message | None = None

        self._date_font: Font | None = None
        self._time_font: Font | None = None

    @property
    def metadata(self) -> AppMetadata:
        return AppMetadata(
            name="letter",
            display_name="Letter Clock",
            description="Date and time in bitmap letters",
        )

    @property
    def transition(self) -> ColorTransition:
        return self._transition

    @property
    def is_auto(self) -> bool:
        return self._config.fixed_color == AUTO

    @property
    def message(self) -> str | None:
        """Text of the message currently shown, if any."""
        if self._message is None or self._clock_ms() >= self._message.until_ms:
            return None
        return self._message.text

    def _on_activate(self) -> None:
        self._load_fonts()
        self._transition.reset()
        self._snake = None
        if self._config.version_duration_ms > 0:
            self.show_message(
                f"{MSG_VERSION_PREFIX}{__version__}",
                Colors.WHITE,
                self._config.version_duration_ms,
            )

    def _on_deactivate(self) -> None:
        self._message = None
        if self._snake is not None:
            self._snake.cancel()

    def _load_fonts(self) -> None:
        self._date_font = load_font(self._config.date_font, fallback_size=8)
        self._time_font = load_font(self._config.time_font, fallback_size=14)

    # -------------------------------------------------------------------------
    # Controls
    # -------------------------------------------------------------------------

    def show_message(self, text: str, color: Color, duration_ms: float | None = None) -> None:
        """Replace the clock with `text` for `duration_ms`."""
        if duration_ms is None:
            duration_ms = self._config.message_duration_ms
        self._message = _Message(text, color, self._clock_ms() + duration_ms)

    def cycle_brightness(self) -> int:
        """Step brightness up by 10%, wrapping past 100% back to 10%."""
        brightness = self._config.brightness + BRIGHTNESS_STEP
        if brightness > MAX_BRIGHTNESS:
            brightness = MIN_BRIGHTNESS

        self._config = self._config.model_copy(update={"brightness": brightness})
        self.show_message(f"{brightness}%", Colors.WHITE)
        logger.info("Brightness: %d%%", brightness)
        self._notify({"brightness": brightness})
        return brightness

    def cycle_color(self) -> int:
        """Select the next palette color; after the last one, go back to AUTO."""
        palette = self._transition_config.colors
        fixed_color = self._config.fixed_color + 1

        if fixed_color >= len(palette):
            fixed_color = AUTO
            self._transition.reset()
            self.show_message(MSG_AUTO, Colors.WHITE)
        else:
            named = palette[fixed_color]
            self.show_message(named.name or named.to_color().to_hex(), named.to_color())
            if self._snake is not None:
                self._snake.cancel()

        self._config = self._config.model_copy(update={"fixed_color": fixed_color})
        logger.info("Color: %s", self.message)
        self._notify({"fixed_color": fixed_color})
        return fixed_color

    def _notify(self, changes: dict[str, Any]) -> None:
        if self._on_settings_changed is not None:
            self._on_settings_changed(changes)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def _on_transition_event(self, event: TransitionEvent) -> None:
        if event.kind != "started" or not self._config.border_snake or not self.is_auto:
            return
        if self._snake is not None:
            self._snake.start(event.from_color, event.to_color, event.duration_ms)

    def current_colors(self) -> tuple[Color, Color]:
        """(date color, time color) for this frame."""
        palette = self._transition.palette
        fixed = self._config.fixed_color

        if 0 <= fixed < len(palette):
            color = palette[fixed]
            return color, color

        if self._transition.enabled and palette:
            color = self._transition.get_current_color()
            return color, color

        date_color = self._config.date_color
        time_color = self._config.time_color
        default = self._transition.get_current_color()
        return (
            date_color.to_color() if date_color else default,
            time_color.to_color() if time_color else default,
        )

    def render(self, width: int, height: int) -> RenderResult:
        """Render date and time, or the active message."""
        if self._date_font is None or self._time_font is None:
            self._load_fonts()

        if self._snake is None or (self._snake.width, self._snake.height) != (width, height):
            self._snake = BorderSnakeAnimation(
                width, height, self._config.snake_length, clock=self._clock_ms
            )

        image = new_frame(width, height)
        date_color, time_color = self.current_colors()

        if self.message is not None:
            self._draw_message(image, self._message)
        else:
            self._draw_clock(image, date_color, time_color)
            draw_pixels(image, self._snake.update())

        next_render = 1.0
        if self._snake.is_animating or self._transition.is_transitioning:
            next_render = 1.0 / 25.0

        return RenderResult(
            image=image,
            next_render_in=next_render,
            brightness=self._config.brightness,
        )

    def _draw_message(self, image: Image.Image, message: _Message) -> None:
        text_width, text_height = get_text_dimensions(message.text, self._time_font)
        x = (image.width - text_width) // 2
        y = (image.height - text_height) // 2
        draw_text(image, message.text, x, y, message.color, font=self._time_font)

    def _draw_clock(self, image: Image.Image, date_color: Color, time_color: Color) -> None:
        now = self._now()
        config = self._config

        lines: list[tuple[str, Font, Color]] = []
        if config.show_date:
            lines.append((format_date_line(now, config.locale), self._date_font, date_color))
        if config.show_time:
            lines.append((now.strftime(config.time_format), self._time_font, time_color))
        if not lines:
            return

        heights = [get_line_height(font) for _, font, _ in lines]
        total_height = sum(heights) + config.spacing * (len(lines) - 1)
        y = (image.height - total_height) // 2

        for (text, font, color), line_height in zip(lines, heights):
            text_width, _ = get_text_dimensions(text, font)
            x = (image.width - text_width) // 2
            draw_text(image, text, x, y, color, font=font)
            y += line_height + config.spacing
