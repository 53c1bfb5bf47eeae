"""Shared fixtures: controllable clocks and small configs."""

from datetime import datetime

import pytest

from ledclock.core.config import ColorTransitionConfig, ConfigManager, NamedColor
from ledclock.display.manager import DisplayManager


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms

    def advance_seconds(self, seconds: float) -> None:
        self.now += seconds * 1000


class FakeWallClock:
    """datetime.now() replacement."""

    def __init__(self, when: datetime) -> None:
        self.when = when

    def __call__(self) -> datetime:
        return self.when


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def wall_clock():
    return FakeWallClock(datetime(2024, 12, 16, 14, 30, 45))


@pytest.fixture
def two_colors():
    """Black -> white fade, due immediately, 10 s long."""
    return ColorTransitionConfig(
        enabled=True,
        interval_minutes=0,
        transition_duration_seconds=10,
        colors=[NamedColor(name="NERO", r=0, g=0, b=0), NamedColor(name="BIANCO", r=255, g=255, b=255)],
    )


@pytest.fixture
def rgb_palette():
    return ColorTransitionConfig(
        enabled=True,
        interval_minutes=1,
        transition_duration_seconds=2,
        colors=["#FF0000", "#00FF00", "#0000FF"],
    )


@pytest.fixture
def mock_display():
    from ledclock.core.config import DisplayConfig

    display = DisplayManager(DisplayConfig(), mock=True)
    display.start()
    yield display
    display.stop()


@pytest.fixture(autouse=True)
def reset_config_singleton():
    yield
    ConfigManager.reset_instance()
