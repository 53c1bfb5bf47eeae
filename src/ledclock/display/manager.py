"""LED matrix display manager.

Wraps the rpi-rgb-led-matrix Python binding, falling back to a mock
matrix when the binding is missing or mock mode is requested.
"""

import logging
from typing import TYPE_CHECKING, Any

from PIL import Image

from ..core.errors import HardwareError
from ..hardware.mock import MockMatrix, MockRGBMatrixOptions

if TYPE_CHECKING:
    from ..core.config import DisplayConfig

logger = logging.getLogger(__name__)

try:
    from rgbmatrix import RGBMatrix, RGBMatrixOptions

    RGB_MATRIX_AVAILABLE = True
except ImportError:
    RGBMatrix = None
    RGBMatrixOptions = None
    RGB_MATRIX_AVAILABLE = False
    logger.info("rgbmatrix not available, will use mock mode")


class DisplayManager:
    """Owns the LED matrix and its double-buffered canvas.

    Usage:
        manager = DisplayManager(config.display)
        manager.start()
        manager.render_image(frame)
        manager.stop()
    """

    def __init__(self, config: "DisplayConfig", mock: bool = False) -> None:
        """Initialize the display manager.

        Args:
            config: Panel settings
            mock: Force mock mode even when rgbmatrix is installed
        """
        self._config = config
        self._mock_mode = mock or not RGB_MATRIX_AVAILABLE
        self._matrix: Any = None
        self._canvas: Any = None
        self._running = False
        self._brightness = config.brightness

        if "U-mapper" in config.pixel_mapper_config:
            self._width = config.cols
            self._height = config.rows * config.chain_length
        else:
            self._width = config.cols * config.chain_length
            self._height = config.rows * config.parallel

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def is_mock(self) -> bool:
        return self._mock_mode

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def brightness(self) -> int:
        return self._brightness

    @property
    def matrix(self) -> Any:
        """The underlying matrix object (RGBMatrix or MockMatrix)."""
        return self._matrix

    def _build_options(self, options: Any) -> Any:
        config = self._config
        options.rows = config.rows
        options.cols = config.cols
        options.chain_length = config.chain_length
        options.parallel = config.parallel
        options.hardware_mapping = config.hardware_mapping
        options.gpio_slowdown = config.gpio_slowdown
        options.brightness = self._brightness
        options.led_rgb_sequence = config.led_rgb_sequence
        if config.pixel_mapper_config:
            options.pixel_mapper_config = config.pixel_mapper_config
        return options

    def start(self) -> None:
        """Initialize the LED matrix.

        Raises:
            HardwareError: If matrix initialization fails
        """
        if self._running:
            logger.warning("Display already running")
            return

        logger.info(
            "Starting LED matrix: %dx%d, chain=%d (mock=%s)",
            self._config.cols,
            self._config.rows,
            self._config.chain_length,
            self._mock_mode,
        )

        try:
            if self._mock_mode:
                self._matrix = MockMatrix(self._build_options(MockRGBMatrixOptions()))
            else:
                self._matrix = RGBMatrix(options=self._build_options(RGBMatrixOptions()))
            self._canvas = self._matrix.CreateFrameCanvas()
        except Exception as e:
            logger.exception("Failed to initialize LED matrix")
            raise HardwareError(
                "Failed to initialize LED matrix",
                details={"error": str(e)},
                cause=e,
            ) from e

        self._running = True
        logger.info("LED matrix started")

    def stop(self) -> None:
        """Clear the panel and release the matrix."""
        if not self._running:
            return

        logger.info("Stopping display")
        self._running = False

        if self._matrix is not None:
            try:
                self._matrix.Clear()
            except Exception as e:
                logger.warning("Error clearing matrix: %s", e)
            self._matrix = None
            self._canvas = None

    def set_brightness(self, brightness: int) -> None:
        """Set the panel brightness (0-100)."""
        self._brightness = max(0, min(100, brightness))
        logger.debug("Setting brightness to %d", self._brightness)

        if self._matrix is not None:
            self._matrix.brightness = self._brightness

    def render_image(self, image: Image.Image) -> None:
        """Draw a frame and swap it in on the next vsync."""
        if not self._running or self._canvas is None:
            return

        if image.size != (self._width, self._height):
            image = image.resize((self._width, self._height), Image.Resampling.NEAREST)

        if image.mode != "RGB":
            image = image.convert("RGB")

        self._canvas.SetImage(image)
        self._canvas = self._matrix.SwapOnVSync(self._canvas)

    def clear(self) -> None:
        """Clear the display to black."""
        if not self._running or self._canvas is None:
            return

        self._canvas.Clear()
        self._canvas = self._matrix.SwapOnVSync(self._canvas)

    def draw_test_pattern(self) -> None:
        """Show red, green, blue and white vertical bars."""
        logger.info("Drawing test pattern")

        image = Image.new("RGB", (self._width, self._height), (0, 0, 0))
        bar_width = max(1, self._width // 4)
        bars = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 255)]

        for i, color in enumerate(bars):
            image.paste(color, (i * bar_width, 0, (i + 1) * bar_width, self._height))

        self.render_image(image)
