"""
Tests for the gesture state machine.
"""

import pytest

from touchswitch.gesture import GestureStateMachine, ReleaseOutcome
from touchswitch.models import (
    ORIGIN,
    DragAction,
    GesturePhase,
    Point,
    SwipeDirection,
    TouchswitchOptions,
)
from touchswitch.state import GestureState

SLOT = 520.0  # 0.5 * 1000 + 20 spacing


@pytest.fixture
def machine():
    state = GestureState()
    state.pan_offset = 1.0
    return GestureStateMachine(state, TouchswitchOptions())


class TestPressAndDeadZone:
    """Tests for press handling and the dead zone."""

    def test_press_holds_and_records_selection(self, machine):
        machine.press(Point(10, 10), 0, selected=5)

        assert machine.state.held
        assert machine.state.phase == GesturePhase.PRESSED
        assert machine.state.selected_window == 5
        assert machine.state.pan_offset == 1.0

    def test_motion_inside_dead_zone_is_ignored(self, machine):
        machine.press(Point(0, 0), 0, selected=None)

        assert not machine.move(Point(30, 0), 10, SLOT, 3)
        assert not machine.state.travelled
        assert machine.state.last_point == Point(0, 0)
        assert machine.state.pan_offset == 1.0

    def test_move_without_press_is_ignored(self, machine):
        assert not machine.move(Point(300, 0), 10, SLOT, 3)


class TestSwipeCommitment:
    """Tests for committing to a swipe axis."""

    def test_horizontal_commit_pans(self, machine):
        machine.press(Point(0, 0), 0, selected=None)

        assert machine.move(Point(60, 10), 10, SLOT, 3)

        state = machine.state
        assert state.swipe_direction == SwipeDirection.HORIZONTAL
        assert state.phase == GesturePhase.DRAGGING
        assert state.pan_offset == pytest.approx(1.0 - 60 / SLOT)
        assert state.vertical_offset == 0.0

    def test_vertical_commit_moves_selected_window(self, machine):
        machine.press(Point(0, 0), 0, selected=2)

        assert machine.move(Point(5, 80), 10, SLOT, 3)

        assert machine.state.swipe_direction == SwipeDirection.VERTICAL
        assert machine.state.vertical_offset == 80
        assert machine.state.pan_offset == 1.0

    def test_undecided_motion_changes_nothing(self, machine):
        """Past the dead zone but inside the commit radius."""
        machine.press(Point(0, 0), 0, selected=None)

        assert not machine.move(Point(45, 0), 10, SLOT, 3)
        assert machine.state.travelled
        assert machine.state.swipe_direction == SwipeDirection.UNDECIDED
        assert machine.state.last_point == Point(45, 0)


class TestFlick:
    """Tests for flick detection and release velocity."""

    def test_fast_motion_starts_flick(self, machine):
        machine.press(Point(0, 0), 0, selected=None)
        machine.move(Point(100, 0), 10, SLOT, 3)

        assert machine.state.flick_start_time == 10
        assert machine.state.flick_start_point == Point(100, 0)

    def test_slow_motion_clears_flick(self, machine):
        machine.press(Point(0, 0), 0, selected=None)
        machine.move(Point(100, 0), 10, SLOT, 3)
        machine.move(Point(110, 0), 20, SLOT, 3)

        assert machine.state.flick_start_time is None
        assert machine.state.flick_start_point == ORIGIN

    def test_release_computes_velocity(self, machine):
        machine.press(Point(0, 0), 0, selected=None)
        machine.move(Point(100, 0), 10, SLOT, 3)

        decision = machine.release(Point(200, 0), 20, 1000)

        assert decision.outcome == ReleaseOutcome.SETTLE
        assert machine.state.velocity.x == pytest.approx(10.0)
        assert machine.state.velocity.y == 0.0
        assert machine.state.flick_start_time == 20

    def test_slow_flick_settles_on_slot(self, machine):
        """A flick that ends too slowly to coast snaps like a plain drag."""
        machine.press(Point(900, 500), 0, selected=None)
        machine.move(Point(840, 500), 10, SLOT, 3)
        machine.move(Point(810, 500), 500, SLOT, 3)
        assert machine.state.flick_start_time == 10

        decision = machine.release(Point(800, 500), 1000, 1000)

        assert decision.outcome == ReleaseOutcome.SETTLE
        assert machine.state.velocity == ORIGIN
        assert machine.state.flick_start_time is None
        assert machine.state.pan_offset == 1.0

    def test_release_without_flick_rounds_offset(self, machine):
        machine.press(Point(0, 0), 0, selected=None)
        machine.move(Point(45, 0), 10, SLOT, 3)
        machine.move(Point(60, 0), 20, SLOT, 3)
        assert machine.state.pan_offset == pytest.approx(1.0 - 15 / SLOT)

        decision = machine.release(Point(60, 0), 30, 1000)

        assert decision.outcome == ReleaseOutcome.SETTLE
        assert machine.state.pan_offset == 1.0
        assert machine.state.velocity == ORIGIN


class TestRelease:
    """Tests for tap and drag release decisions."""

    def test_release_without_press(self, machine):
        assert machine.release(Point(0, 0), 0, 1000).outcome == ReleaseOutcome.IGNORED

    def test_tap_on_window_selects(self, machine):
        machine.press(Point(0, 0), 0, selected=7)
        decision = machine.release(Point(10, 0), 5, 1000)

        assert decision.outcome == ReleaseOutcome.SELECT
        assert decision.window_id == 7
        assert not machine.state.held

    def test_tap_on_background(self, machine):
        machine.press(Point(0, 0), 0, selected=None)
        assert machine.release(Point(0, 0), 5, 1000).outcome == ReleaseOutcome.BACKGROUND

    def test_pull_up_resolves_close(self, machine):
        machine.press(Point(0, 500), 0, selected=7)
        machine.move(Point(0, 200), 50, SLOT, 3)

        decision = machine.release(Point(0, 200), 100, 1000)

        assert decision.action == DragAction.CLOSE
        assert decision.window_id == 7
        assert machine.state.vertical_offset == 0.0

    def test_pull_down_resolves_minimize(self, machine):
        machine.press(Point(0, 200), 0, selected=7)
        machine.move(Point(0, 500), 50, SLOT, 3)

        assert machine.release(Point(0, 500), 100, 1000).action == DragAction.MINIMIZE

    def test_short_vertical_drag_has_no_action(self, machine):
        machine.press(Point(0, 0), 0, selected=7)
        machine.move(Point(0, 200), 50, SLOT, 3)

        assert machine.release(Point(0, 200), 100, 1000).action == DragAction.NONE

    def test_unknown_action_name_is_noop(self):
        state = GestureState()
        state.pan_offset = 0.0
        machine = GestureStateMachine(state, TouchswitchOptions(pull_up="explode"))
        machine.press(Point(0, 500), 0, selected=7)
        machine.move(Point(0, 100), 50, SLOT, 3)

        assert machine.release(Point(0, 100), 100, 1000).action == DragAction.NONE


class TestApplyPan:
    """Tests for pan clamping."""

    def test_clamps_at_lower_bound_and_zeroes_velocity(self, machine):
        machine.state.pan_offset = 0.0
        machine.state.velocity = Point(3.0, 0.0)

        assert machine.apply_pan(200, SLOT, 3)

        assert machine.state.pan_offset == 0.0
        assert machine.state.velocity == ORIGIN

    def test_clamps_at_upper_bound(self, machine):
        machine.state.pan_offset = 2.0
        machine.apply_pan(-10 * SLOT, SLOT, 3)
        assert machine.state.pan_offset == 2.0

    def test_no_selection_is_left_alone(self, machine):
        machine.state.pan_offset = float("nan")
        assert not machine.apply_pan(100, SLOT, 3)
