"""Friction decay of flick velocity into continued pan motion."""

import logging
from enum import Enum

from .constants import VELOCITY_ZERO_THRESHOLD
from .gesture import GestureStateMachine
from .models import ORIGIN, Point
from .state import GestureState, round_offset

logger = logging.getLogger(__name__)


class MomentumStep(Enum):
    """Result of one momentum tick."""
    IDLE = "idle"  # Nothing to do (held, or already at rest)
    MOVED = "moved"  # Pan offset advanced
    STOPPED = "stopped"  # Velocity fell below threshold and the offset snapped


def is_velocity_zero(state: GestureState) -> bool:
    """Check for rest, snapping sub-threshold velocity to exactly zero."""
    if state.velocity.length > VELOCITY_ZERO_THRESHOLD:
        return False
    state.velocity = ORIGIN
    return True


class MomentumSimulator:
    """Applies exponential friction once per animation tick."""

    def __init__(self, gesture: GestureStateMachine, friction: float) -> None:
        self.gesture = gesture
        self.friction = friction

    @property
    def state(self) -> GestureState:
        return self.gesture.state

    def active(self) -> bool:
        return not self.state.held and self.state.velocity != ORIGIN

    def step(self, now_ms: float, slot_width: float, window_count: int) -> MomentumStep:
        """Advance momentum to ``now_ms``.

        Any non-zero velocity goes through friction, so a slow residual
        velocity still ends with the offset snapped to a slot. The pan offset
        is re-clamped first so a window list that shrank since the last tick
        cannot leave momentum running out of bounds.
        """
        state = self.state
        if not self.active():
            return MomentumStep.IDLE

        if state.clamp_pan(window_count):
            state.velocity = ORIGIN

        state.velocity = state.velocity.scaled(self.friction)
        if is_velocity_zero(state):
            if state.has_selection():
                state.pan_offset = round_offset(state.pan_offset)
            state.clear_flick()
            state.start_point = ORIGIN
            logger.debug(f"Momentum stopped at offset {state.pan_offset}")
            return MomentumStep.STOPPED

        last = state.flick_start_time if state.flick_start_time is not None else now_ms
        elapsed = max(now_ms - last, 0.0)
        state.flick_start_time = now_ms

        movement: Point = state.velocity.scaled(elapsed)
        self.gesture.apply_pan(movement.x, slot_width, window_count)
        return MomentumStep.MOVED
