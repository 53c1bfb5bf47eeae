"""Colors and drawing primitives for the LED matrix.

All drawing happens on Pillow images; the display manager pushes the
finished frame to the panel.
"""

from dataclasses import dataclass
from typing import Iterable

from PIL import Image, ImageDraw, ImageFont

from .geometry import Point, round_half_away
from .renderer import get_default_font


@dataclass(frozen=True)
class Color:
    """RGB color, channels clamped to 0-255."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "r", max(0, min(255, int(self.r))))
        object.__setattr__(self, "g", max(0, min(255, int(self.g))))
        object.__setattr__(self, "b", max(0, min(255, int(self.b))))

    @classmethod
    def from_hex(cls, hex_color: str) -> "Color":
        """Create color from hex string (e.g., '#FF5500', 'FF5500' or '#F50')."""
        hex_color = hex_color.lstrip("#")
        if len(hex_color) == 3:
            hex_color = "".join(c * 2 for c in hex_color)
        if len(hex_color) != 6:
            raise ValueError(f"Invalid hex color: #{hex_color}")
        return cls(
            r=int(hex_color[0:2], 16),
            g=int(hex_color[2:4], 16),
            b=int(hex_color[4:6], 16),
        )

    def to_tuple(self) -> tuple[int, int, int]:
        """Convert to RGB tuple."""
        return (self.r, self.g, self.b)

    def to_hex(self) -> str:
        """Convert to hex string."""
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def blend(self, other: "Color", factor: float) -> "Color":
        """Linear blend towards another color.

        Args:
            other: Color to blend with
            factor: Blend factor (0.0 = self, 1.0 = other), not clamped

        Returns:
            Blended color, each channel rounded half away from zero
        """
        return Color(
            r=round_half_away(self.r + (other.r - self.r) * factor),
            g=round_half_away(self.g + (other.g - self.g) * factor),
            b=round_half_away(self.b + (other.b - self.b) * factor),
        )

    def dim(self, factor: float) -> "Color":
        """Dim the color by a factor (0.0 = black, 1.0 = original)."""
        factor = max(0.0, min(1.0, factor))
        return Color(
            r=int(self.r * factor),
            g=int(self.g * factor),
            b=int(self.b * factor),
        )


class Colors:
    """Predefined colors."""

    BLACK = Color(0, 0, 0)
    WHITE = Color(255, 255, 255)
    RED = Color(255, 0, 0)
    GREEN = Color(0, 255, 0)
    BLUE = Color(0, 0, 255)

    # Default clock palette
    GIALLO = Color(255, 220, 0)
    ROSSO = RED
    VERDE = GREEN
    BLU = BLUE
    BIANCO = WHITE

    GRAY = Color(80, 80, 90)
    GRAY_LIGHT = Color(150, 150, 160)
    ERROR = Color(255, 60, 60)


def new_frame(width: int, height: int, background: Color = Colors.BLACK) -> Image.Image:
    """Create a cleared RGB frame."""
    return Image.new("RGB", (width, height), background.to_tuple())


def draw_line(
    image: Image.Image,
    start: Point,
    end: Point,
    color: Color = Colors.WHITE,
    width: int = 1,
) -> None:
    """Draw a line between two points."""
    draw = ImageDraw.Draw(image)
    draw.line([tuple(start), tuple(end)], fill=color.to_tuple(), width=width)


def draw_text(
    image: Image.Image,
    text: str,
    x: int,
    y: int,
    color: Color = Colors.WHITE,
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont | None = None,
) -> None:
    """Draw text with its top-left corner at (x, y).

    Args:
        image: Target image
        text: Text to draw
        x: X position
        y: Y position
        color: Text color
        font: Font to use (None = default)
    """
    draw = ImageDraw.Draw(image)
    if font is None:
        font = get_default_font()
    draw.text((x, y), text, font=font, fill=color.to_tuple())


def draw_pixels(image: Image.Image, pixels: Iterable[tuple[Point, Color]]) -> None:
    """Set individual pixels, skipping any outside the image."""
    target = image.load()
    for point, color in pixels:
        x, y = int(point.x), int(point.y)
        if 0 <= x < image.width and 0 <= y < image.height:
            target[x, y] = color.to_tuple()
