"""Render loop driving the active app.

Single-threaded: each tick renders the active app, pushes the frame to
the display and waits until the next tick. Other threads (signal
handlers, the control button) never touch apps directly: `stop()` ends
the loop at the next tick boundary and `call_soon()` queues work that
runs on the loop thread before the next render.
"""

import logging
import queue
import threading
from typing import Callable, Protocol

from PIL import Image

from ..core.errors import AppError
from ..core.logging import log_error
from .base import AppState, BaseApp, RenderResult

logger = logging.getLogger(__name__)


class FrameSink(Protocol):
    """What the runner needs from a display."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    @property
    def brightness(self) -> int: ...

    def render_image(self, image: Image.Image) -> None: ...

    def set_brightness(self, brightness: int) -> None: ...


class AppRunner:
    """Renders the active app once per tick.

    Usage:
        runner = AppRunner(display)
        runner.register_app(LetterClockApp(...))
        runner.set_active_app("letter")
        runner.run()
    """

    MAX_RENDER_ERRORS = 5
    ERROR_RETRY_DELAY = 1.0

    def __init__(self, display: FrameSink) -> None:
        self._display = display
        self._apps: dict[str, BaseApp] = {}
        self._active_name: str | None = None
        self._render_errors = 0
        self._default_brightness = display.brightness
        self._brightness: int | None = None
        self._pending: queue.SimpleQueue[Callable[[], object]] = queue.SimpleQueue()
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()

    @property
    def active_app_name(self) -> str | None:
        return self._active_name

    @property
    def active_app(self) -> BaseApp | None:
        return self._apps.get(self._active_name) if self._active_name else None

    def register_app(self, app: BaseApp) -> None:
        name = app.metadata.name
        self._apps[name] = app
        logger.info("Registered app: %s (%s)", name, app.metadata.display_name)

    def get_enabled_apps(self) -> list[str]:
        """Names of enabled apps in registration order."""
        return [name for name, app in self._apps.items() if app.enabled]

    def set_active_app(self, name: str) -> bool:
        """Deactivate the current app and activate `name`.

        Returns:
            True if successful, False if app not found or activation failed
        """
        if name not in self._apps:
            logger.warning("App not found: %s", name)
            return False

        current = self.active_app
        if current is not None and current.state == AppState.ACTIVE:
            try:
                current.deactivate()
            except Exception as e:
                logger.error("Error deactivating %s: %s", self._active_name, e)

        try:
            self._apps[name].activate()
        except AppError as e:
            log_error(logger, e, f"Error activating {name}")
            self._active_name = None
            return False

        self._active_name = name
        self._render_errors = 0
        logger.info("Activated app: %s", name)
        return True

    def next_app(self) -> str | None:
        """Switch to the next enabled app.

        Returns:
            Name of the newly active app, or None if no apps available
        """
        enabled = self.get_enabled_apps()
        if not enabled:
            return None

        if self._active_name in enabled:
            idx = (enabled.index(self._active_name) + 1) % len(enabled)
        else:
            idx = 0

        next_name = enabled[idx]
        return next_name if self.set_active_app(next_name) else None

    def call_soon(self, callback: Callable[[], object]) -> None:
        """Run `callback` on the loop thread before the next render.

        Safe to call from any thread; wakes the loop if it is waiting.
        """
        self._pending.put(callback)
        self._wake_event.set()

    def _run_pending(self) -> None:
        while True:
            try:
                callback = self._pending.get_nowait()
            except queue.Empty:
                return
            try:
                callback()
            except Exception as e:
                logger.exception("Error in queued callback: %s", e)

    def run_once(self) -> float:
        """Perform one render cycle.

        Returns:
            Seconds to wait before the next tick
        """
        self._run_pending()

        app = self.active_app
        if app is None:
            return self.ERROR_RETRY_DELAY

        try:
            result: RenderResult = app.render(self._display.width, self._display.height)
        except Exception as e:
            self._render_errors += 1
            logger.error(
                "Render error for %s (%d): %s", self._active_name, self._render_errors, e
            )
            if self._render_errors >= self.MAX_RENDER_ERRORS:
                logger.error("Too many render errors, switching app")
                self.next_app()
            return self.ERROR_RETRY_DELAY

        self._render_errors = 0

        self._apply_brightness(result.brightness)

        self._display.render_image(result.image)
        return result.next_render_in

    def _apply_brightness(self, requested: int | None) -> None:
        """Apply the app's brightness, or restore the panel default."""
        if requested is None:
            if self._brightness is not None:
                self._display.set_brightness(self._default_brightness)
                self._brightness = None
            return

        if requested != self._brightness:
            self._display.set_brightness(requested)
            self._brightness = requested

    def run(self) -> None:
        """Render until stop() is called."""
        logger.info("Render loop started")

        while not self._stop_event.is_set():
            self._wake_event.clear()
            delay = self.run_once()
            self._wake_event.wait(max(0.0, delay))

        app = self.active_app
        if app is not None and app.state == AppState.ACTIVE:
            app.deactivate()

        logger.info("Render loop stopped")

    def stop(self) -> None:
        """Ask the loop to exit at the next tick boundary."""
        self._stop_event.set()
        self._wake_event.set()
