"""Timed palette cycling with eased color fades.

The engine holds each palette color for `interval_minutes`, then fades
to the next one over `transition_duration_seconds` and starts the hold
timer again. It is driven by the render loop: every call to
`get_current_color()` both advances the state and returns the color to
draw.

The state machine itself is the pure `step()` function so it can be
tested without a clock; `ColorTransition` owns the state and the time
source.
"""

import logging
import time
from dataclasses import dataclass, replace
from typing import Callable, Literal, Sequence

from ..core.config import ColorTransitionConfig
from ..display.graphics import Color, Colors

logger = logging.getLogger(__name__)

DEFAULT_COLOR = Colors.WHITE

Clock = Callable[[], float]


def wall_clock_ms() -> float:
    """Milliseconds since the epoch."""
    return time.time() * 1000


def ease_in_out_cubic(t: float) -> float:
    """Cubic ease in-out: slow start, fast middle, slow end."""
    if t < 0.5:
        return 4 * t * t * t
    return 1 - pow(-2 * t + 2, 3) / 2


def interpolate_color(color1: Color, color2: Color, t: float) -> Color:
    """Per-channel linear interpolation, rounded half away from zero."""
    return color1.blend(color2, t)


@dataclass(frozen=True)
class TransitionState:
    """Snapshot of the engine's position in the palette cycle.

    Times are in milliseconds since the epoch.
    """

    current_color_index: int = 0
    next_color_index: int = 0
    transition_start_time: float = 0.0
    interval_start_time: float = 0.0
    is_transitioning: bool = False

    @classmethod
    def initial(cls, palette_size: int, now: float) -> "TransitionState":
        return cls(
            current_color_index=0,
            next_color_index=1 if palette_size > 1 else 0,
            interval_start_time=now,
        )


@dataclass(frozen=True)
class TransitionEvent:
    """Emitted when a fade starts or completes."""

    kind: Literal["started", "completed"]
    from_color: Color
    to_color: Color
    timestamp: float
    duration_ms: float


@dataclass(frozen=True)
class StepResult:
    color: Color
    state: TransitionState
    event: TransitionEvent | None = None


def step(
    palette: Sequence[Color],
    enabled: bool,
    interval_ms: float,
    duration_ms: float,
    state: TransitionState,
    now: float,
) -> StepResult:
    """Advance the transition state machine to `now`.

    Args:
        palette: Colors in cycle order
        enabled: When False the default color is returned
        interval_ms: How long each color is held; <= 0 means a fade is
            always due
        duration_ms: Fade length; <= 0 completes a fade on the call
            after it starts
        state: State before this call
        now: Current time in milliseconds

    Returns:
        The color to draw, the new state, and the event (if any)
    """
    if not enabled or not palette:
        return StepResult(DEFAULT_COLOR, state)

    if len(palette) == 1:
        return StepResult(palette[0], state)

    event = None
    if not state.is_transitioning and now - state.interval_start_time >= interval_ms:
        state = replace(state, is_transitioning=True, transition_start_time=now)
        event = TransitionEvent(
            kind="started",
            from_color=palette[state.current_color_index],
            to_color=palette[state.next_color_index],
            timestamp=now,
            duration_ms=duration_ms,
        )

    if not state.is_transitioning:
        return StepResult(palette[state.current_color_index], state, event)

    elapsed = now - state.transition_start_time
    progress = min(elapsed / duration_ms, 1.0) if duration_ms > 0 else 1.0

    # A zero-length fade still reports its start on the call that triggers it
    if progress >= 1 and not (event is not None and duration_ms <= 0):
        from_color = palette[state.current_color_index]
        state = replace(
            state,
            is_transitioning=False,
            current_color_index=state.next_color_index,
            next_color_index=(state.next_color_index + 1) % len(palette),
            interval_start_time=now,
        )
        final_color = palette[state.current_color_index]
        event = TransitionEvent(
            kind="completed",
            from_color=from_color,
            to_color=final_color,
            timestamp=now,
            duration_ms=duration_ms,
        )
        return StepResult(final_color, state, event)

    if duration_ms <= 0:
        return StepResult(palette[state.current_color_index], state, event)

    color = interpolate_color(
        palette[state.current_color_index],
        palette[state.next_color_index],
        ease_in_out_cubic(progress),
    )
    return StepResult(color, state, event)


class ColorTransition:
    """Cycles through a palette, fading between colors.

    Call `get_current_color()` once per frame. Not thread-safe: a single
    render loop is expected to own each instance.

    Usage:
        transition = ColorTransition(config.color_transition)
        color = transition.get_current_color()
    """

    def __init__(
        self,
        config: ColorTransitionConfig,
        clock: Clock | None = None,
        on_event: Callable[[TransitionEvent], None] | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Palette and timing
            clock: Time source in milliseconds (default: wall clock)
            on_event: Called when a fade starts or completes
        """
        self._config = config
        self._palette = config.palette()
        self._clock = clock or wall_clock_ms
        self._on_event = on_event
        self._state = TransitionState.initial(len(self._palette), self._clock())

    @property
    def state(self) -> TransitionState:
        return self._state

    @property
    def palette(self) -> tuple[Color, ...]:
        return self._palette

    @property
    def current_color_index(self) -> int:
        return self._state.current_color_index

    @property
    def next_color_index(self) -> int:
        return self._state.next_color_index

    @property
    def is_transitioning(self) -> bool:
        return self._state.is_transitioning

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def get_current_color(self) -> Color:
        """Return the color to draw now, advancing the cycle as needed."""
        result = step(
            self._palette,
            self._config.enabled,
            self._config.interval_minutes * 60 * 1000,
            self._config.transition_duration_seconds * 1000,
            self._state,
            self._clock(),
        )
        self._state = result.state

        if result.event is not None:
            self._emit(result.event)

        return result.color

    def reset(self) -> None:
        """Return to the first palette color and restart the hold timer."""
        self._state = TransitionState.initial(len(self._palette), self._clock())

    def _emit(self, event: TransitionEvent) -> None:
        if event.kind == "started":
            logger.info(
                "Starting color transition: %s -> %s",
                event.from_color.to_hex(),
                event.to_color.to_hex(),
            )
        else:
            logger.info("Color transition complete -> %s", event.to_color.to_hex())

        if self._on_event is not None:
            self._on_event(event)
