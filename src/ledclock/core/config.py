"""Configuration management with Pydantic validation.

Provides type-safe configuration with:
- Pydantic models for validation
- YAML file persistence with a search path
- Thread-safe updates
- Defaults matching a single 64x32 panel
"""

import logging
import threading
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from ..display.geometry import round_half_away
from ..display.graphics import Color
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# Searched in order when no explicit path is given
DEFAULT_CONFIG_PATHS = [
    Path("/etc/ledclock/config.yaml"),
    Path("~/.config/ledclock/config.yaml").expanduser(),
]


# =============================================================================
# Configuration Models
# =============================================================================


def _clamp_channel(value: Any) -> int:
    return max(0, min(255, round_half_away(float(value))))


class NamedColor(BaseModel):
    """Palette entry: RGB channels plus an optional display name.

    Accepts `{"r": .., "g": .., "b": ..}`, a hex string ("#FF0000") or
    an `[r, g, b]` list. Channels are clamped to 0-255.
    """

    name: str = Field("", description="Name shown when the color is selected")
    r: int = 0
    g: int = 0
    b: int = 0

    @model_validator(mode="before")
    @classmethod
    def coerce_shorthand(cls, value: Any) -> Any:
        if isinstance(value, str):
            color = Color.from_hex(value)
            return {"r": color.r, "g": color.g, "b": color.b}
        if isinstance(value, (list, tuple)):
            if len(value) != 3:
                raise ValueError("Color list must have exactly 3 channels")
            return {"r": value[0], "g": value[1], "b": value[2]}
        return value

    @field_validator("r", "g", "b", mode="before")
    @classmethod
    def clamp(cls, v: Any) -> int:
        return _clamp_channel(v)

    def to_color(self) -> Color:
        return Color(self.r, self.g, self.b)


def _default_palette() -> list[NamedColor]:
    return [
        NamedColor(name="GIALLO", r=255, g=220, b=0),
        NamedColor(name="ROSSO", r=255, g=0, b=0),
        NamedColor(name="VERDE", r=0, g=255, b=0),
        NamedColor(name="BLU", r=0, g=0, b=255),
        NamedColor(name="BIANCO", r=255, g=255, b=255),
    ]


class DisplayConfig(BaseModel):
    """LED matrix panel configuration."""

    rows: int = Field(32, ge=8, le=64, description="Panel row count")
    cols: int = Field(64, ge=16, le=128, description="Panel column count")
    chain_length: int = Field(1, ge=1, le=4, description="Number of chained panels")
    parallel: int = Field(1, ge=1, le=3, description="Parallel chains")
    hardware_mapping: str = Field("adafruit-hat", description="GPIO mapping profile")
    gpio_slowdown: int = Field(4, ge=0, le=5, description="GPIO timing slowdown")
    brightness: int = Field(50, ge=0, le=100, description="Display brightness %")
    led_rgb_sequence: str = Field("RBG", description="LED color order")
    pixel_mapper_config: str = Field("", description="Panel arrangement mapper")


class ButtonConfig(BaseModel):
    """GPIO control button configuration."""

    enabled: bool = Field(True, description="Poll the control button")
    pin: int = Field(19, ge=0, le=27, description="GPIO BCM pin number")
    long_press_duration: float = Field(
        1.0, ge=0.2, le=10.0, description="Seconds for long press"
    )
    debounce_time: float = Field(0.1, ge=0.01, le=0.5, description="Debounce time in seconds")


class ColorTransitionConfig(BaseModel):
    """Automatic palette cycling."""

    enabled: bool = Field(True, description="Cycle through the palette")
    interval_minutes: float = Field(120, ge=0, description="Minutes each color is held")
    transition_duration_seconds: float = Field(
        30, ge=0, description="Length of the fade between colors"
    )
    colors: list[NamedColor] = Field(default_factory=_default_palette)

    def palette(self) -> tuple[Color, ...]:
        """Colors in cycle order."""
        return tuple(c.to_color() for c in self.colors)


class AnalogClockConfig(BaseModel):
    """Analog (perimeter) clock settings."""

    enabled: bool = True
    hour_hand_color: NamedColor = Field(default_factory=lambda: NamedColor(r=255, g=0, b=0))
    minute_hand_color: NamedColor = Field(default_factory=lambda: NamedColor(r=0, g=255, b=0))
    second_hand_color: NamedColor = Field(default_factory=lambda: NamedColor(r=0, g=0, b=255))
    markers_color: NamedColor = Field(default_factory=lambda: NamedColor(r=80, g=80, b=80))
    date_color: NamedColor = Field(default_factory=lambda: NamedColor(r=255, g=220, b=0))
    color_mode: str = Field("static", description="Marker color: static, auto")
    hour_hand_length: float = Field(0.6, ge=0, le=1.5)
    minute_hand_length: float = Field(0.8, ge=0, le=1.5)
    second_hand_length: float = Field(0.95, ge=0, le=1.5)
    marker_inward: float = Field(0.9, ge=0, le=1, description="Inner end of tick marks")
    show_date: bool = True
    date_x: int = Field(6, ge=0)
    date_y: int = Field(14, ge=0)
    font: str | None = Field("/root/fonts/4x6.bdf", description="BDF font for the date")

    @field_validator("color_mode")
    @classmethod
    def validate_color_mode(cls, v: str) -> str:
        if v not in ("static", "auto"):
            raise ValueError("color_mode must be 'static' or 'auto'")
        return v


class LetterClockConfig(BaseModel):
    """Letter (digital) clock settings."""

    enabled: bool = True
    fixed_color: int = Field(-1, ge=-1, description="Palette index, -1 = AUTO")
    date_color: NamedColor | None = Field(None, description="Override when not cycling")
    time_color: NamedColor | None = Field(None, description="Override when not cycling")
    brightness: int = Field(100, ge=0, le=100)
    locale: str = Field("it", description="Day/month names: it, en")
    time_format: str = Field("%H:%M:%S", description="strftime format for the time line")
    show_date: bool = True
    show_time: bool = True
    spacing: int = Field(1, ge=0, le=16, description="Pixels between date and time")
    date_font: str | None = Field("/root/fonts/spleen-5x8.bdf")
    time_font: str | None = Field("/root/fonts/7x14B.bdf")
    border_snake: bool = Field(True, description="Snake animation during transitions")
    snake_length: int = Field(16, ge=1, le=64)
    message_duration_ms: int = Field(2000, ge=0)
    version_duration_ms: int = Field(4000, ge=0)

    @field_validator("locale")
    @classmethod
    def validate_locale(cls, v: str) -> str:
        v = v.lower()[:2]
        if v not in ("it", "en"):
            raise ValueError("locale must be 'it' or 'en'")
        return v


class AppsConfig(BaseModel):
    """Apps configuration."""

    active_app: str = Field("letter", description="App shown at startup")
    analog: AnalogClockConfig = Field(default_factory=AnalogClockConfig)
    letter: LetterClockConfig = Field(default_factory=LetterClockConfig)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Log level")
    format: str = Field("simple", description="Format: simple, structured")
    file: str | None = Field(None, description="Log file path")
    max_size_mb: int = Field(10, ge=1, description="Max log file size")
    backup_count: int = Field(3, ge=0, description="Number of backup files")


class Config(BaseModel):
    """Root configuration model."""

    display: DisplayConfig = Field(default_factory=DisplayConfig)
    button: ButtonConfig = Field(default_factory=ButtonConfig)
    color_transition: ColorTransitionConfig = Field(default_factory=ColorTransitionConfig)
    apps: AppsConfig = Field(default_factory=AppsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Manager
# =============================================================================


def find_config_path(candidates: list[Path] | None = None) -> Path:
    """Return the first existing config file, else the first candidate."""
    candidates = candidates if candidates is not None else DEFAULT_CONFIG_PATHS
    for path in candidates:
        if path.exists():
            return path
    return candidates[0]


class ConfigManager:
    """Thread-safe configuration manager with file persistence.

    Usage:
        config_manager = ConfigManager("/etc/ledclock/config.yaml")
        config = config_manager.get()
        config_manager.update_app("letter", fixed_color=2)
    """

    _instance: "ConfigManager | None" = None
    _instance_lock: threading.Lock = threading.Lock()

    def __init__(self, config_path: str | Path) -> None:
        self._config_path = Path(config_path)
        self._config: Config
        self._lock = threading.RLock()
        self._load()

    @property
    def path(self) -> Path:
        return self._config_path

    @classmethod
    def get_instance(cls, config_path: str | Path | None = None) -> "ConfigManager":
        """Get singleton instance.

        Args:
            config_path: Path to config file (only used on first call)
        """
        with cls._instance_lock:
            if cls._instance is None:
                if config_path is None:
                    config_path = find_config_path()
                cls._instance = cls(config_path)
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset singleton instance (for testing)."""
        with cls._instance_lock:
            cls._instance = None

    def _load(self) -> None:
        """Load and validate configuration from file."""
        if self._config_path.exists():
            try:
                with open(self._config_path) as f:
                    data = yaml.safe_load(f) or {}
                self._config = Config.model_validate(data)
                logger.info("Loaded config from %s", self._config_path)
            except Exception as e:
                logger.warning("Failed to load config, using defaults: %s", e)
                self._config = Config()
        else:
            logger.info("Config file %s not found, using defaults", self._config_path)
            self._config = Config()
            try:
                self._save()
            except ConfigurationError:
                # Read-only location; run on defaults
                pass

    def _save(self) -> None:
        """Persist configuration to file atomically."""
        try:
            self._config_path.parent.mkdir(parents=True, exist_ok=True)
            data = self._config.model_dump(mode="json")

            temp_path = self._config_path.with_suffix(".tmp")
            with open(temp_path, "w") as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
            temp_path.replace(self._config_path)

            logger.debug("Saved config to %s", self._config_path)
        except OSError as e:
            logger.error("Failed to save config: %s", e)
            raise ConfigurationError(
                "Failed to save config",
                details={"path": str(self._config_path)},
                cause=e,
            ) from e

    def get(self) -> Config:
        """Get a deep copy of the current configuration."""
        with self._lock:
            return self._config.model_copy(deep=True)

    def update_display(self, **kwargs: Any) -> None:
        """Update display settings."""
        with self._lock:
            data = self._config.model_dump()
            data["display"].update(kwargs)
            self._config = Config.model_validate(data)
            self._save()

    def update_app(self, app_name: str, **kwargs: Any) -> None:
        """Update specific app settings.

        Args:
            app_name: Name of the app (analog, letter)
            **kwargs: Settings to update

        Raises:
            ConfigurationError: If the app is unknown
        """
        with self._lock:
            data = self._config.model_dump()
            if app_name not in data["apps"] or not isinstance(data["apps"][app_name], dict):
                raise ConfigurationError("Unknown app", details={"app": app_name})
            data["apps"][app_name].update(kwargs)
            self._config = Config.model_validate(data)
            self._save()

    def set_active_app(self, app_name: str) -> None:
        """Set the app shown at startup."""
        with self._lock:
            data = self._config.model_dump()
            data["apps"]["active_app"] = app_name
            self._config = Config.model_validate(data)
            self._save()


# =============================================================================
# Convenience Functions
# =============================================================================


def get_config() -> Config:
    """Get current configuration from the singleton manager."""
    return ConfigManager.get_instance().get()
