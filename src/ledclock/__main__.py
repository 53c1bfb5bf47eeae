"""LED Matrix Clock entry point.

Usage:
    python -m ledclock [options]

Options:
    --config PATH     Path to config file (default: first of /etc/ledclock/config.yaml,
                      ~/.config/ledclock/config.yaml)
    --app NAME        App to show: analog, letter (default: from config)
    --test-display    Show the display test pattern and exit
    --mock            Force mock mode (no hardware required)
    --debug           Enable debug logging
"""

import argparse
import signal
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .apps import AnalogClockApp, AppRunner, LetterClockApp
from .core.config import Config, ConfigManager
from .core.errors import LEDClockError
from .core.logging import get_logger, log_error, setup_logging
from .display.manager import DisplayManager
from .hardware.button import ButtonHandler

logger = get_logger(__name__)


class LEDClockSystem:
    """Wires configuration, display and apps together."""

    def __init__(self, config_path: Path | None, mock_mode: bool = False) -> None:
        self._config_manager = ConfigManager.get_instance(config_path)
        self._mock_mode = mock_mode
        self._display: DisplayManager | None = None
        self._runner: AppRunner | None = None
        self._letter_app: LetterClockApp | None = None
        self._button: ButtonHandler | None = None

    @property
    def runner(self) -> AppRunner | None:
        return self._runner

    @property
    def button(self) -> ButtonHandler | None:
        return self._button

    def _persist_letter_settings(self, changes: dict[str, Any]) -> None:
        try:
            self._config_manager.update_app("letter", **changes)
        except LEDClockError as e:
            log_error(logger, e, "Could not persist settings")

    def start(self, app_name: str | None = None, debug: bool = False) -> None:
        """Start the display and activate the initial app."""
        config = self._config_manager.get()

        setup_logging(
            level="DEBUG" if debug else config.logging.level,
            log_format=config.logging.format,
            log_file=config.logging.file,
            max_size_mb=config.logging.max_size_mb,
            backup_count=config.logging.backup_count,
        )

        self._display = DisplayManager(config.display, mock=self._mock_mode)
        self._display.start()

        self._runner = AppRunner(self._display)
        self._letter_app = LetterClockApp(
            config.apps.letter,
            config.color_transition,
            on_settings_changed=self._persist_letter_settings,
        )
        self._runner.register_app(self._letter_app)
        self._runner.register_app(AnalogClockApp(config.apps.analog, config.color_transition))

        initial = app_name or config.apps.active_app
        if not self._runner.set_active_app(initial):
            self._runner.next_app()

        if config.button.enabled:
            self._start_button(config)

        logger.info(
            "Display started: %dx%d (mock=%s), app=%s",
            self._display.width,
            self._display.height,
            self._display.is_mock,
            self._runner.active_app_name,
        )

    def _start_button(self, config: Config) -> None:
        """Start polling the control button.

        Presses are handed to the render loop so apps are only touched
        from the loop thread.
        """
        self._button = ButtonHandler(config.button, mock=self._mock_mode)
        self._button.on_short_press = lambda: self._runner.call_soon(self._on_short_press)
        self._button.on_long_press = lambda: self._runner.call_soon(self._on_long_press)
        self._button.start()
        logger.info("Button handler started (mock=%s)", self._button.is_mock)

    def _letter_clock_active(self) -> bool:
        return self._runner is not None and self._runner.active_app is self._letter_app

    def _on_short_press(self) -> None:
        """Short press: letter clock brightness, otherwise next app."""
        if self._letter_clock_active():
            self._letter_app.cycle_brightness()
        elif self._runner is not None:
            self._runner.next_app()

    def _on_long_press(self) -> None:
        """Long press: letter clock color, otherwise next app."""
        if self._letter_clock_active():
            self._letter_app.cycle_color()
        elif self._runner is not None:
            self._runner.next_app()

    def run(self) -> None:
        """Run the render loop until stop() is called."""
        if self._runner is None:
            raise RuntimeError("start() must be called before run()")
        try:
            self._runner.run()
        finally:
            if self._button is not None:
                self._button.stop()
            if self._display is not None:
                self._display.stop()

    def stop(self) -> None:
        if self._runner is not None:
            self._runner.stop()

    def run_test_pattern(self) -> None:
        """Show the test pattern until interrupted."""
        config = self._config_manager.get()
        display = DisplayManager(config.display, mock=self._mock_mode)
        display.start()
        display.draw_test_pattern()

        logger.info("Test pattern displayed. Press Ctrl+C to exit.")

        try:
            signal.pause()
        except KeyboardInterrupt:
            pass
        finally:
            display.stop()


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="LED Matrix Clock",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to config file")
    parser.add_argument("--app", choices=["analog", "letter"], help="App to show")
    parser.add_argument(
        "--test-display",
        action="store_true",
        help="Show the display test pattern and exit",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Force mock mode (no hardware required)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    setup_logging(level="DEBUG" if args.debug else "INFO")
    logger.info("LED Matrix Clock v%s", __version__)

    try:
        system = LEDClockSystem(args.config, mock_mode=args.mock)

        if args.test_display:
            system.run_test_pattern()
            return 0

        def signal_handler(sig, frame):
            logger.info("Received signal %s, shutting down...", sig)
            system.stop()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        system.start(args.app, debug=args.debug)
        system.run()
        return 0

    except LEDClockError as e:
        log_error(logger, e, "Fatal error")
        return 1
    except Exception as e:
        logger.exception("Fatal error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
