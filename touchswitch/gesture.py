"""
Gesture state machine for touchswitch.

Interprets press/move/release events from the pointer or the first touch
point into pan offset, vertical drag offset, swipe-axis commitment and
flick velocity. Decisions that need the window list (tap-select, background
taps) are returned to the caller as a :class:`ReleaseDecision`.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import (
    COMMIT_RADIUS,
    DEAD_ZONE_RADIUS,
    FLICK_END_THRESHOLD,
    FLICK_START_THRESHOLD,
    MIN_ELAPSED_MS,
    VELOCITY_ZERO_THRESHOLD,
    VERTICAL_ACTION_FRACTION,
)
from .models import (
    ORIGIN,
    DragAction,
    GesturePhase,
    Point,
    SwipeDirection,
    TouchswitchOptions,
    WindowId,
)
from .state import GestureState, round_offset

logger = logging.getLogger(__name__)


class ReleaseOutcome(Enum):
    """What a release asks the session to do."""
    IGNORED = "ignored"  # No gesture was held
    SETTLE = "settle"  # Drag finished; offsets settled or flick started
    SELECT = "select"  # Tap on a window
    BACKGROUND = "background"  # Tap on the background


@dataclass
class ReleaseDecision:
    """Result of :meth:`GestureStateMachine.release`."""
    outcome: ReleaseOutcome
    window_id: Optional[WindowId] = None
    action: DragAction = DragAction.NONE


class GestureStateMachine:
    """Converts raw input events into gesture state changes."""

    def __init__(self, state: GestureState, options: TouchswitchOptions) -> None:
        self.state = state
        self.options = options

    def press(self, point: Point, time_ms: float, selected: Optional[WindowId]) -> None:
        """Start a gesture.

        Args:
            point: Press location
            time_ms: Monotonic event time in milliseconds
            selected: Session window under the press, already resolved to
                its topmost parent, or None for the background
        """
        self.state.begin_press(point, selected)
        logger.debug(f"Press at ({point.x:.0f}, {point.y:.0f}) t={time_ms}, selected={selected}")

    def move(self, point: Point, time_ms: float, slot_width: float, window_count: int) -> bool:
        """Process motion of the held pointer or touch point.

        Returns:
            True if offsets changed and the layout must be recomputed
        """
        state = self.state
        if not state.held:
            return False

        if (point - state.start_point).length > DEAD_ZONE_RADIUS:
            state.travelled = True
            state.phase = GesturePhase.DRAGGING

        if not state.travelled:
            return False

        total = point - state.start_point
        diff = point - state.last_point

        if state.swipe_direction == SwipeDirection.UNDECIDED and total.length > COMMIT_RADIUS:
            if abs(total.y) > abs(total.x):
                state.swipe_direction = SwipeDirection.VERTICAL
            else:
                state.swipe_direction = SwipeDirection.HORIZONTAL
            logger.debug(f"Swipe committed to {state.swipe_direction.value}")

        distance = diff.length
        if distance > FLICK_START_THRESHOLD and state.flick_start_time is None:
            state.flick_start_time = time_ms
            state.flick_start_point = point
        elif distance <= FLICK_END_THRESHOLD:
            state.clear_flick()

        changed = self.apply_motion(diff, slot_width, window_count)
        state.last_point = point
        return changed

    def apply_motion(self, diff: Point, slot_width: float, window_count: int) -> bool:
        """Apply relative motion along the committed swipe axis."""
        state = self.state
        if state.swipe_direction == SwipeDirection.VERTICAL:
            state.vertical_offset += diff.y
            return True

        if state.swipe_direction == SwipeDirection.HORIZONTAL:
            state.vertical_offset = 0.0
            self.apply_pan(diff.x, slot_width, window_count)
            return True

        return False

    def apply_pan(self, dx: float, slot_width: float, window_count: int) -> bool:
        """Shift the pan offset by ``dx`` pixels, clamped to the slot range.

        Crossing a bound zeroes the velocity so momentum stops there.

        Returns:
            True if the offset was updated
        """
        state = self.state
        if window_count <= 0 or not state.has_selection():
            return False

        state.pan_offset -= dx / max(slot_width, 1.0)
        if state.clamp_pan(window_count):
            state.velocity = ORIGIN
        return True

    def release(self, point: Point, time_ms: float, workarea_height: float) -> ReleaseDecision:
        """End the gesture and decide what happens next."""
        state = self.state
        if not state.held:
            return ReleaseDecision(ReleaseOutcome.IGNORED)

        state.held = False
        state.phase = GesturePhase.IDLE

        if not state.travelled:
            if state.selected_window is not None:
                return ReleaseDecision(ReleaseOutcome.SELECT, window_id=state.selected_window)
            return ReleaseDecision(ReleaseOutcome.BACKGROUND)

        action = DragAction.NONE
        if (state.selected_window is not None and
                abs(state.vertical_offset) > workarea_height * VERTICAL_ACTION_FRACTION):
            action = self.options.resolve_drag_action(upwards=state.vertical_offset < 0)

        if state.flick_start_time is not None:
            elapsed = max(time_ms - state.flick_start_time, MIN_ELAPSED_MS)
            state.velocity = (point - state.flick_start_point).scaled(1.0 / elapsed)
            # Momentum measures its first step from the release time
            state.flick_start_time = time_ms
            logger.debug(f"Flick released with velocity ({state.velocity.x:.3f}, {state.velocity.y:.3f})")

            if state.velocity.length <= VELOCITY_ZERO_THRESHOLD:
                # Too slow to coast: settle like a plain drag
                state.velocity = ORIGIN
                state.clear_flick()

        if state.flick_start_time is None and state.has_selection():
            state.pan_offset = round_offset(state.pan_offset)

        state.vertical_offset = 0.0
        state.flick_start_point = ORIGIN
        state.start_point = ORIGIN
        state.last_point = ORIGIN

        return ReleaseDecision(ReleaseOutcome.SETTLE, window_id=state.selected_window, action=action)
