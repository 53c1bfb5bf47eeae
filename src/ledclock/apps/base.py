"""Base class for display applications.

An app turns the current time into a frame. The runner calls
`render()` once per tick and pushes the returned image to the panel.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Generic, TypeVar

from PIL import Image
from pydantic import BaseModel

from ..core.errors import AppError

ConfigT = TypeVar("ConfigT", bound=BaseModel)


class AppState(Enum):
    """App lifecycle states."""

    INACTIVE = "inactive"
    ACTIVATING = "activating"
    ACTIVE = "active"
    DEACTIVATING = "deactivating"
    ERROR = "error"


@dataclass(frozen=True)
class AppMetadata:
    """Metadata describing an app.

    Attributes:
        name: Internal app identifier (lowercase, no spaces)
        display_name: Human-readable name
        description: Short description of app functionality
        version: App version string
    """

    name: str
    display_name: str
    description: str
    version: str = "1.0.0"


@dataclass
class RenderResult:
    """Result of an app render operation.

    Attributes:
        image: The rendered frame
        next_render_in: Seconds until the next render is needed
        brightness: Panel brightness the app wants, or None to leave it
    """

    image: Image.Image
    next_render_in: float = 1.0
    brightness: int | None = None


class BaseApp(ABC, Generic[ConfigT]):
    """Abstract base class for display applications.

    Lifecycle:
        1. __init__() - Create instance with config
        2. activate() - Called when app becomes active
        3. render() - Called once per tick
        4. deactivate() - Called when switching to another app
    """

    def __init__(
        self,
        config: ConfigT,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the app.

        Args:
            config: App settings
            now: Wall clock (default: datetime.now)
        """
        self._config = config
        self._now = now or datetime.now
        self._state = AppState.INACTIVE
        self._last_error: str | None = None

    @property
    @abstractmethod
    def metadata(self) -> AppMetadata:
        """Return app metadata."""

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def config(self) -> ConfigT:
        return self._config

    @property
    def enabled(self) -> bool:
        return getattr(self._config, "enabled", True)

    @property
    def last_error(self) -> str | None:
        return self._last_error

    def activate(self) -> None:
        """Activate the app (called when becoming the current app).

        Raises:
            AppError: If activation fails (state becomes ERROR)
        """
        self._state = AppState.ACTIVATING
        self._last_error = None

        try:
            self._on_activate()
            self._state = AppState.ACTIVE
        except Exception as e:
            self._state = AppState.ERROR
            self._last_error = str(e)
            raise AppError(
                "App activation failed",
                details={"app": self.metadata.name},
                cause=e,
            ) from e

    def deactivate(self) -> None:
        """Deactivate the app (called when switching away)."""
        self._state = AppState.DEACTIVATING
        try:
            self._on_deactivate()
        finally:
            self._state = AppState.INACTIVE

    def _on_activate(self) -> None:
        """Override for app-specific activation logic."""

    def _on_deactivate(self) -> None:
        """Override for app-specific cleanup logic."""

    @abstractmethod
    def render(self, width: int, height: int) -> RenderResult:
        """Render one frame.

        Args:
            width: Display width in pixels
            height: Display height in pixels

        Returns:
            RenderResult with the rendered image
        """
