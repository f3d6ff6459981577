"""
Gesture state for a touchswitch session.

Holds the pan offset (the current selection), vertical drag offset, swipe
commitment and flick tracking that the gesture machine and momentum
simulator share.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .models import ORIGIN, GesturePhase, Point, SwipeDirection, WindowId

NO_SELECTION = math.nan


def round_offset(value: float) -> float:
    """Round half away from zero, as slot snapping expects."""
    return math.copysign(math.floor(abs(value) + 0.5), value)


@dataclass
class GestureState:
    """Mutable gesture record.

    ``pan_offset`` is NaN only while no selection exists (no session, or the
    background was tapped with show-desktop). Use :attr:`selection` or
    :meth:`has_selection` instead of reading it as an index.
    """

    phase: GesturePhase = GesturePhase.IDLE
    swipe_direction: SwipeDirection = SwipeDirection.UNDECIDED
    start_point: Point = ORIGIN
    last_point: Point = ORIGIN
    pan_offset: float = NO_SELECTION
    vertical_offset: float = 0.0
    selected_window: Optional[WindowId] = None
    velocity: Point = ORIGIN
    flick_start_time: Optional[float] = None
    flick_start_point: Point = ORIGIN
    held: bool = False
    travelled: bool = False

    def has_selection(self) -> bool:
        return not math.isnan(self.pan_offset)

    @property
    def selection(self) -> Optional[int]:
        """Slot index nearest to the pan offset, None for no selection."""
        if not self.has_selection():
            return None
        return int(round_offset(self.pan_offset))

    def begin_press(self, point: Point, selected: Optional[WindowId]) -> None:
        """Reset per-gesture fields; the pan offset persists across presses."""
        self.phase = GesturePhase.PRESSED
        self.swipe_direction = SwipeDirection.UNDECIDED
        self.start_point = point
        self.last_point = point
        self.vertical_offset = 0.0
        self.selected_window = selected
        self.velocity = ORIGIN
        self.flick_start_time = None
        self.flick_start_point = ORIGIN
        self.held = True
        self.travelled = False

    def clear_flick(self) -> None:
        self.flick_start_time = None
        self.flick_start_point = ORIGIN

    def reset(self) -> None:
        """Return to the no-session state."""
        self.phase = GesturePhase.IDLE
        self.swipe_direction = SwipeDirection.UNDECIDED
        self.start_point = ORIGIN
        self.last_point = ORIGIN
        self.pan_offset = NO_SELECTION
        self.vertical_offset = 0.0
        self.selected_window = None
        self.velocity = ORIGIN
        self.clear_flick()
        self.held = False
        self.travelled = False

    def clamp_pan(self, window_count: int) -> bool:
        """Clamp the pan offset into ``[0, window_count - 1]``.

        Returns:
            True if the offset had to be moved
        """
        if not self.has_selection() or window_count <= 0:
            return False

        upper = float(window_count - 1)
        if self.pan_offset < 0.0:
            self.pan_offset = 0.0
            return True
        if self.pan_offset > upper:
            self.pan_offset = upper
            return True
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "swipe_direction": self.swipe_direction.value,
            "pan_offset": self.pan_offset if self.has_selection() else None,
            "selection": self.selection,
            "vertical_offset": self.vertical_offset,
            "selected_window": self.selected_window,
            "velocity": (self.velocity.x, self.velocity.y),
            "flick_active": self.flick_start_time is not None,
            "held": self.held,
        }
