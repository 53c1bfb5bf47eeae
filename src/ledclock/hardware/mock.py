"""Stand-in for the rpi-rgb-led-matrix binding.

Used when `rgbmatrix` is not importable (development machines, CI) or
when mock mode is forced. Mirrors the subset of the binding's API the
display manager calls and keeps the last swapped frame so it can be
inspected.
"""

import logging

from PIL import Image

logger = logging.getLogger(__name__)


class MockRGBMatrixOptions:
    """Mock RGBMatrixOptions."""

    def __init__(self) -> None:
        self.rows = 32
        self.cols = 64
        self.chain_length = 1
        self.parallel = 1
        self.hardware_mapping = "adafruit-hat"
        self.gpio_slowdown = 4
        self.brightness = 50
        self.led_rgb_sequence = "RGB"
        self.pixel_mapper_config = ""


class MockCanvas:
    """Off-screen frame buffer."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._image = Image.new("RGB", (width, height))

    def Clear(self) -> None:
        self._image = Image.new("RGB", (self.width, self.height))

    def SetPixel(self, x: int, y: int, r: int, g: int, b: int) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self._image.putpixel((x, y), (r, g, b))

    def SetImage(self, image: Image.Image, offset_x: int = 0, offset_y: int = 0) -> None:
        self._image.paste(image.convert("RGB"), (offset_x, offset_y))

    def get_image(self) -> Image.Image:
        """Copy of the canvas contents (for testing)."""
        return self._image.copy()


class MockMatrix:
    """Mock RGBMatrix with double buffering.

    `SwapOnVSync` makes the given canvas the visible frame and returns
    a fresh back buffer, like the real binding.
    """

    def __init__(self, options: MockRGBMatrixOptions | None = None) -> None:
        if options is None:
            options = MockRGBMatrixOptions()

        self._options = options
        self._brightness = options.brightness

        if "U-mapper" in (options.pixel_mapper_config or ""):
            self._width = options.cols
            self._height = options.rows * options.chain_length
        else:
            self._width = options.cols * options.chain_length
            self._height = options.rows * options.parallel

        self._front = MockCanvas(self._width, self._height)
        self.frames_shown = 0

        logger.info("MockMatrix initialized: %dx%d", self._width, self._height)

    @property
    def brightness(self) -> int:
        return self._brightness

    @brightness.setter
    def brightness(self, value: int) -> None:
        self._brightness = max(0, min(100, value))
        logger.debug("MockMatrix: brightness = %d", self._brightness)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def visible_frame(self) -> Image.Image:
        """What the panel currently shows."""
        return self._front.get_image()

    def CreateFrameCanvas(self) -> MockCanvas:
        return MockCanvas(self._width, self._height)

    def SwapOnVSync(self, canvas: MockCanvas) -> MockCanvas:
        previous = self._front
        self._front = canvas
        self.frames_shown += 1
        return previous

    def Clear(self) -> None:
        self._front.Clear()
