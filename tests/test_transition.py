"""
Tests for the palette transition engine.

Run with: pytest tests/test_transition.py -v
"""

import logging

import pytest

from ledclock.core.config import ColorTransitionConfig, NamedColor
from ledclock.display.graphics import Color, Colors
from ledclock.effects.transition import (
    ColorTransition,
    TransitionState,
    ease_in_out_cubic,
    interpolate_color,
    step,
)

BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)


# ============================================================
# Easing and interpolation
# ============================================================


class TestEasing:
    @pytest.mark.parametrize(
        "t,expected",
        [(0.0, 0.0), (0.25, 0.0625), (0.5, 0.5), (0.75, 0.9375), (1.0, 1.0)],
    )
    def test_known_values(self, t, expected):
        assert ease_in_out_cubic(t) == pytest.approx(expected)

    def test_monotonic(self):
        values = [ease_in_out_cubic(i / 100) for i in range(101)]
        assert values == sorted(values)

    def test_symmetric(self):
        for t in (0.1, 0.2, 0.3, 0.4):
            assert ease_in_out_cubic(t) + ease_in_out_cubic(1 - t) == pytest.approx(1.0)


class TestInterpolateColor:
    def test_endpoints(self):
        assert interpolate_color(Colors.RED, Colors.BLUE, 0) == Colors.RED
        assert interpolate_color(Colors.RED, Colors.BLUE, 1) == Colors.BLUE

    def test_midpoint_rounds_half_up(self):
        assert interpolate_color(BLACK, WHITE, 0.5) == Color(128, 128, 128)

    def test_channels_independent(self):
        c = interpolate_color(Color(10, 200, 0), Color(20, 100, 255), 0.5)
        assert c == Color(15, 150, 128)


# ============================================================
# ColorTransition
# ============================================================


class TestColorTransition:
    def test_disabled_returns_white(self, clock, rgb_palette):
        config = rgb_palette.model_copy(update={"enabled": False})
        transition = ColorTransition(config, clock=clock)
        clock.advance_seconds(3600)
        assert transition.get_current_color() == Colors.WHITE
        assert not transition.is_transitioning

    def test_empty_palette_returns_white(self, clock):
        transition = ColorTransition(ColorTransitionConfig(colors=[]), clock=clock)
        assert transition.get_current_color() == Colors.WHITE

    def test_single_color_never_transitions(self, clock):
        config = ColorTransitionConfig(interval_minutes=0, colors=["#123456"])
        transition = ColorTransition(config, clock=clock)
        for _ in range(5):
            clock.advance_seconds(60)
            assert transition.get_current_color() == Color(0x12, 0x34, 0x56)
            assert not transition.is_transitioning
        assert transition.next_color_index == 0

    def test_holds_first_color_until_interval(self, clock, rgb_palette):
        transition = ColorTransition(rgb_palette, clock=clock)
        assert transition.get_current_color() == Colors.RED
        clock.advance_seconds(59.9)
        assert transition.get_current_color() == Colors.RED
        assert not transition.is_transitioning

    def test_two_color_fade(self, clock, two_colors):
        transition = ColorTransition(two_colors, clock=clock)

        assert transition.get_current_color() == BLACK
        assert transition.is_transitioning

        clock.advance_seconds(5)
        assert transition.get_current_color() == Color(128, 128, 128)

        clock.advance_seconds(5)
        assert transition.get_current_color() == WHITE
        assert not transition.is_transitioning
        assert transition.current_color_index == 1
        assert transition.next_color_index == 0

    def test_fade_is_eased(self, clock, two_colors):
        transition = ColorTransition(two_colors, clock=clock)
        transition.get_current_color()
        clock.advance_seconds(2.5)
        # ease(0.25) = 0.0625 -> 255 * 0.0625 = 15.94
        assert transition.get_current_color() == Color(16, 16, 16)

    def test_full_cycles_wrap_around(self, clock, rgb_palette):
        transition = ColorTransition(rgb_palette, clock=clock)
        palette = transition.palette

        for n in range(1, 8):
            clock.advance_seconds(60)
            transition.get_current_color()
            assert transition.is_transitioning
            clock.advance_seconds(2)
            color = transition.get_current_color()
            assert transition.current_color_index == n % len(palette)
            assert color == palette[n % len(palette)]

    def test_interval_restarts_after_fade(self, clock, rgb_palette):
        transition = ColorTransition(rgb_palette, clock=clock)
        clock.advance_seconds(60)
        transition.get_current_color()
        clock.advance_seconds(2)
        transition.get_current_color()

        clock.advance_seconds(59)
        assert transition.get_current_color() == Colors.GREEN
        assert not transition.is_transitioning

    def test_reset(self, clock, rgb_palette):
        transition = ColorTransition(rgb_palette, clock=clock)
        clock.advance_seconds(60)
        transition.get_current_color()
        clock.advance_seconds(2)
        transition.get_current_color()
        assert transition.current_color_index == 1

        transition.reset()
        assert transition.current_color_index == 0
        assert transition.next_color_index == 1
        assert not transition.is_transitioning
        assert transition.state.interval_start_time == clock()
        assert transition.get_current_color() == Colors.RED

    def test_zero_duration_completes_on_next_call(self, clock):
        config = ColorTransitionConfig(
            interval_minutes=0,
            transition_duration_seconds=0,
            colors=["#FF0000", "#00FF00"],
        )
        transition = ColorTransition(config, clock=clock)

        assert transition.get_current_color() == Colors.RED
        assert transition.is_transitioning

        assert transition.get_current_color() == Colors.GREEN
        assert not transition.is_transitioning
        assert transition.current_color_index == 1

    def test_negative_timings_behave_like_zero(self, clock):
        config = ColorTransitionConfig.model_construct(
            enabled=True,
            interval_minutes=-5,
            transition_duration_seconds=-1,
            colors=[NamedColor(r=255), NamedColor(g=255)],
        )
        transition = ColorTransition(config, clock=clock)

        assert transition.get_current_color() == Colors.RED
        assert transition.get_current_color() == Colors.GREEN
        assert transition.get_current_color() == Colors.GREEN
        assert transition.is_transitioning
        assert transition.get_current_color() == Colors.RED

    def test_events(self, clock, two_colors):
        events = []
        transition = ColorTransition(two_colors, clock=clock, on_event=events.append)

        transition.get_current_color()
        clock.advance_seconds(5)
        transition.get_current_color()
        clock.advance_seconds(5)
        transition.get_current_color()

        assert [e.kind for e in events] == ["started", "completed"]
        started, completed = events
        assert started.from_color == BLACK
        assert started.to_color == WHITE
        assert started.duration_ms == 10_000
        assert completed.to_color == WHITE
        assert completed.timestamp - started.timestamp == 10_000

    def test_logs_transitions(self, clock, two_colors, caplog):
        transition = ColorTransition(two_colors, clock=clock)
        with caplog.at_level(logging.INFO, logger="ledclock.effects.transition"):
            transition.get_current_color()
            clock.advance_seconds(10)
            transition.get_current_color()

        messages = [r.getMessage() for r in caplog.records]
        assert "Starting color transition: #000000 -> #ffffff" in messages
        assert "Color transition complete -> #ffffff" in messages


# ============================================================
# step()
# ============================================================


class TestStep:
    palette = (Colors.RED, Colors.GREEN, Colors.BLUE)

    def test_does_not_mutate_state(self):
        state = TransitionState.initial(3, now=0)
        result = step(self.palette, True, 1000, 500, state, now=1000)
        assert state.is_transitioning is False
        assert result.state.is_transitioning is True
        assert result.state.transition_start_time == 1000
        assert result.event is not None and result.event.kind == "started"

    def test_idle_step_has_no_event(self):
        state = TransitionState.initial(3, now=0)
        result = step(self.palette, True, 1000, 500, state, now=999)
        assert result.event is None
        assert result.color == Colors.RED
        assert result.state == state

    def test_completion(self):
        state = TransitionState(
            current_color_index=2,
            next_color_index=0,
            transition_start_time=100,
            interval_start_time=0,
            is_transitioning=True,
        )
        result = step(self.palette, True, 1000, 500, state, now=700)
        assert result.color == Colors.RED
        assert result.state.current_color_index == 0
        assert result.state.next_color_index == 1
        assert result.state.interval_start_time == 700
        assert result.event.kind == "completed"

    def test_initial_state(self):
        assert TransitionState.initial(1, now=5).next_color_index == 0
        state = TransitionState.initial(4, now=5)
        assert (state.current_color_index, state.next_color_index) == (0, 1)
        assert state.interval_start_time == 5
