"""Animated effects: palette cycling and the border snake."""

from .border_snake import BorderSnakeAnimation
from .transition import (
    ColorTransition,
    TransitionEvent,
    TransitionState,
    ease_in_out_cubic,
    interpolate_color,
    step,
)

__all__ = [
    "BorderSnakeAnimation",
    "ColorTransition",
    "TransitionEvent",
    "TransitionState",
    "ease_in_out_cubic",
    "interpolate_color",
    "step",
]
