"""GPIO push button with debounce and long-press detection.

The clock has a single control button wired between a GPIO pin and
ground (internal pull-up, active LOW). A press is classified when the
button is released: held for at least `long_press_duration` it is a
long press, held for at least `debounce_time` a short press, anything
shorter is contact bounce and ignored.
"""

import logging
import threading
import time
from enum import Enum
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from ..core.config import ButtonConfig

logger = logging.getLogger(__name__)

# Try to import GPIO library
try:
    import RPi.GPIO as GPIO

    GPIO_AVAILABLE = True
except ImportError:
    GPIO = None
    GPIO_AVAILABLE = False
    logger.info("RPi.GPIO not available, button will use mock mode")

POLL_INTERVAL = 0.01


class ButtonEvent(Enum):
    """Button event types."""

    SHORT_PRESS = "short_press"
    LONG_PRESS = "long_press"


class ButtonHandler:
    """Polls the control button on a background thread.

    Callbacks run on the polling thread; callers that touch render
    state should hand the work to the render loop (see
    `AppRunner.call_soon`).

    Usage:
        handler = ButtonHandler(config.button)
        handler.on_short_press = lambda: print("Short press!")
        handler.on_long_press = lambda: print("Long press!")
        handler.start()
    """

    def __init__(
        self,
        config: "ButtonConfig",
        mock: bool = False,
        reader: Callable[[], bool] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize the button handler.

        Args:
            config: Pin and timing settings
            mock: Never touch GPIO even when RPi.GPIO is installed
            reader: Returns True while the button is held (default: GPIO
                pin, or always released in mock mode)
            clock: Monotonic time source in seconds
        """
        self._pin = config.pin
        self._long_press_duration = config.long_press_duration
        self._debounce_time = config.debounce_time

        self._mock_mode = mock or not GPIO_AVAILABLE
        self._reader = reader or self._read_button
        self._clock = clock or time.monotonic

        self._running = False
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

        # Callbacks
        self.on_short_press: Callable[[], None] | None = None
        self.on_long_press: Callable[[], None] | None = None

        self._press_start_time: float | None = None

    @property
    def is_mock(self) -> bool:
        return self._mock_mode

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_pressed(self) -> bool:
        """True between a press and its release."""
        return self._press_start_time is not None

    def start(self) -> None:
        """Set up the pin and start the polling thread."""
        if self._running:
            logger.warning("Button handler already running")
            return

        if self._mock_mode:
            logger.info("Starting button handler in mock mode (GPIO pin %d)", self._pin)
        else:
            logger.info("Starting button handler on GPIO pin %d", self._pin)
            self._setup_gpio()

        self._running = True
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._monitor_loop, name="ButtonThread", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop polling and release the pin."""
        if not self._running:
            return

        logger.info("Stopping button handler")
        self._running = False
        self._stop_event.set()

        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None

        if not self._mock_mode and GPIO:
            try:
                GPIO.cleanup(self._pin)
            except Exception as e:
                logger.warning("Error cleaning up GPIO: %s", e)

    def _setup_gpio(self) -> None:
        GPIO.setmode(GPIO.BCM)
        GPIO.setup(self._pin, GPIO.IN, pull_up_down=GPIO.PUD_UP)
        logger.debug("GPIO pin %d configured as input with pull-up", self._pin)

    def _read_button(self) -> bool:
        if self._mock_mode:
            return False

        # Active LOW (pull-up resistor)
        return GPIO.input(self._pin) == GPIO.LOW

    def _monitor_loop(self) -> None:
        logger.debug("Button monitor loop started")

        while not self._stop_event.is_set():
            try:
                self.poll()
            except Exception as e:
                logger.exception("Error in button monitoring: %s", e)
            self._stop_event.wait(POLL_INTERVAL)

        logger.debug("Button monitor loop stopped")

    def poll(self) -> ButtonEvent | None:
        """Sample the button once and emit an event on release.

        Returns:
            The event emitted by this sample, if any
        """
        is_pressed = self._reader()
        now = self._clock()

        if is_pressed and self._press_start_time is None:
            self._press_start_time = now
            logger.debug("Button pressed")
            return None

        if not is_pressed and self._press_start_time is not None:
            press_duration = now - self._press_start_time
            self._press_start_time = None

            if press_duration >= self._long_press_duration:
                event = ButtonEvent.LONG_PRESS
            elif press_duration >= self._debounce_time:
                event = ButtonEvent.SHORT_PRESS
            else:
                logger.debug("Ignoring %.3fs bounce", press_duration)
                return None

            self._emit_event(event)
            return event

        return None

    def _emit_event(self, event: ButtonEvent) -> None:
        logger.info("Button event: %s", event.value)

        try:
            if event == ButtonEvent.SHORT_PRESS and self.on_short_press:
                self.on_short_press()
            elif event == ButtonEvent.LONG_PRESS and self.on_long_press:
                self.on_long_press()
        except Exception as e:
            logger.exception("Error in button callback: %s", e)

    def simulate_short_press(self) -> None:
        """Emit a short press without touching the pin (mock mode)."""
        logger.debug("Simulating short press")
        self._emit_event(ButtonEvent.SHORT_PRESS)

    def simulate_long_press(self) -> None:
        """Emit a long press without touching the pin (mock mode)."""
        logger.debug("Simulating long press")
        self._emit_event(ButtonEvent.LONG_PRESS)
