"""
Session controller for touchswitch.

Owns the gesture state machine, momentum simulator, transform store and
layout engine for one output, and drives them through the session lifecycle:

    Inactive -> Active -> Deactivating -> Inactive

with ``finalize()`` reachable from every state (e.g. when the input grab is
revoked). Nothing here raises across the public methods; invalid requests
are refused by returning False or doing nothing.
"""

import logging
from typing import Any, Dict, List, Optional

from .animation import TransformStore
from .constants import BTN_LEFT, EXIT_TRANSLATION_Y, PRIMARY_FINGER
from .gesture import GestureStateMachine, ReleaseDecision, ReleaseOutcome
from .interfaces import FrameDriver, WindowProvider
from .layout import LayoutParams, compute_layout
from .models import (
    IDENTITY,
    BackgroundAction,
    DragAction,
    Point,
    Pose,
    SessionPhase,
    TouchswitchOptions,
    WindowId,
)
from .momentum import MomentumSimulator, MomentumStep
from .notifications import NotificationKind, NotificationQueue
from .state import NO_SELECTION, GestureState
from .tree import WindowTree

logger = logging.getLogger(__name__)


class SessionController:
    """Window switcher session for a single output."""

    def __init__(
        self,
        provider: WindowProvider,
        options: Optional[TouchswitchOptions] = None,
        frame_driver: Optional[FrameDriver] = None,
    ) -> None:
        """
        Initialize the session controller.

        Args:
            provider: Window and work-area collaborator
            options: Switcher options (defaults when omitted)
            frame_driver: Render loop to wake when frames are needed
        """
        self.provider = provider
        self.options = options or TouchswitchOptions()
        self.frame_driver = frame_driver

        self.phase = SessionPhase.INACTIVE
        self.notifications = NotificationQueue()
        self.state = GestureState()
        self.gesture = GestureStateMachine(self.state, self.options)
        self.momentum = MomentumSimulator(self.gesture, self.options.flick_motion)
        self.transforms = TransformStore(self.notifications, self.options.duration)

        self._last_frame_ms: Optional[float] = None

    # Queries

    @property
    def active(self) -> bool:
        return self.phase == SessionPhase.ACTIVE

    @property
    def pan_offset(self) -> float:
        return self.state.pan_offset

    def get_windows(self) -> List[WindowId]:
        """Session windows in slot order, sorted by identity."""
        return sorted(set(self.provider.list_windows()))

    def current_index(self) -> Optional[int]:
        """Slot index of the current selection, None when nothing is selected."""
        return self.state.selection

    def current_window(self) -> Optional[WindowId]:
        index = self.current_index()
        if index is None:
            return None

        windows = self.get_windows()
        if 0 <= index < len(windows):
            return windows[index]
        return None

    def _params(self) -> LayoutParams:
        return LayoutParams.from_options(self.options, self.provider.get_workarea())

    def _topmost_parent(self, window_id: WindowId) -> WindowId:
        seen = {window_id}
        current = window_id
        parent = self.provider.get_parent(current)
        while parent is not None and parent not in seen:
            seen.add(parent)
            current = parent
            parent = self.provider.get_parent(current)
        return current

    def should_scale_window(self, window_id: WindowId) -> bool:
        """True if the window's topmost parent takes part in the session."""
        return self._topmost_parent(window_id) in self.get_windows()

    def window_at(self, point: Point) -> Optional[WindowId]:
        """Session window under ``point``, resolved to its topmost parent.

        Hit testing uses the transformed bounding boxes, children above
        their parents.
        """
        windows = self.get_windows()
        tree = WindowTree.snapshot(self.provider, windows)

        for root in reversed(windows):
            for window_id in reversed(tree.enumerate(root)):
                record = self.transforms.get(window_id)
                if record is None:
                    continue
                if record.pose.apply(tree.geometry[window_id]).contains(point):
                    return root
        return None

    # Lifecycle

    def toggle(self) -> bool:
        """Deactivate an active session, otherwise try to activate one."""
        if self.active:
            self.deactivate()
            return True
        return self.activate()

    def activate(self) -> bool:
        """Start a session.

        Returns:
            False if a session is already active or there are no windows
        """
        if self.active:
            return False

        windows = self.get_windows()
        if not windows:
            logger.info("Not activating: no windows on this workspace")
            return False

        self.state.reset()
        focused = self.provider.focused_window()
        if focused is not None:
            focused = self._topmost_parent(focused)
        self.state.pan_offset = float(windows.index(focused)) if focused in windows else 0.0

        self.phase = SessionPhase.ACTIVE
        self._last_frame_ms = None

        # Visible windows animate from where they are; minimized ones enter from below
        for window_id in windows:
            if not self.provider.is_minimized(window_id):
                self.transforms.attach(window_id, window_id, IDENTITY)

        self.notifications.push(NotificationKind.SESSION_STARTED)
        logger.info(f"Activated with {len(windows)} windows, selection={self.state.selection}")

        self.relayout()
        return True

    def deactivate(self) -> None:
        """Commit the current selection and animate every window out of the filmstrip."""
        if not self.active:
            return

        selected = self.current_window()
        self.phase = SessionPhase.DEACTIVATING
        self.state.held = False
        self.state.velocity = Point()
        self.state.clear_flick()

        if selected is not None:
            self.provider.focus_raise(selected)

        to_desktop = (self.options.resolve_background_action() == BackgroundAction.SHOW_DESKTOP
                      and selected is None)

        windows = self.get_windows()
        tree = WindowTree.snapshot(self.provider, windows)
        targets = compute_layout(windows, tree, self.state.pan_offset, 0.0, None,
                                 self._params(), active=False)

        for window_id in self.transforms:
            record = self.transforms.get(window_id)
            root_record = self.transforms.get(record.root_id) or record
            leaving = root_record.was_marked_for_post_action or self.options.minimize_others or to_desktop

            if record.root_id != selected and leaving:
                target = Pose(self.options.window_scale, self.options.window_scale,
                              record.pose.translation_x, EXIT_TRANSLATION_Y)
            elif window_id in targets:
                target = targets[window_id].pose
            else:
                target = IDENTITY
            self.transforms.set_target(window_id, target, directly=False)

        self.notifications.push(NotificationKind.SESSION_ENDED)
        logger.info(f"Deactivating, selected window={selected}")
        self._request_frames()

    def finalize(self) -> None:
        """End the session completely, including running animations.

        Safe to call repeatedly and from any phase.
        """
        if self.phase == SessionPhase.INACTIVE:
            return

        if self.phase == SessionPhase.ACTIVE:
            # deactivate() already announced the end otherwise
            self.notifications.push(NotificationKind.SESSION_ENDED)
        self.phase = SessionPhase.FINALIZING

        selected = self.current_window()
        show_desktop = self.options.resolve_background_action() == BackgroundAction.SHOW_DESKTOP

        if selected is not None:
            self.provider.focus_raise(selected)

        for window_id in self.get_windows():
            if show_desktop and selected is None:
                self.provider.set_minimized(window_id, True)
                continue
            if window_id == selected:
                continue

            record = self.transforms.get(window_id)
            if self.options.minimize_others or (record is not None and record.was_marked_for_post_action):
                self.provider.set_minimized(window_id, True)

        self.transforms.clear()
        self.state.reset()
        self._last_frame_ms = None
        self.phase = SessionPhase.INACTIVE
        logger.info(f"Finalized, selected window={selected}")

    def grab_lost(self) -> None:
        """Input grab revoked externally: end immediately."""
        logger.info("Input grab lost, finalizing")
        self.finalize()

    # Input

    def press(self, point: Point, time_ms: float) -> None:
        if not self.active:
            return
        self.gesture.press(point, time_ms, self.window_at(point))

    def move(self, point: Point, time_ms: float) -> None:
        if not self.active:
            return

        window_count = len(self.get_windows())
        if self.gesture.move(point, time_ms, self._params().slot_width, window_count):
            self.relayout()

    def release(self, point: Point, time_ms: float) -> None:
        if not self.active:
            return

        decision = self.gesture.release(point, time_ms, self.provider.get_workarea().height)
        self._handle_release(decision)

    def _handle_release(self, decision: ReleaseDecision) -> None:
        if decision.outcome == ReleaseOutcome.IGNORED:
            return

        if decision.outcome == ReleaseOutcome.SELECT:
            windows = self.get_windows()
            if decision.window_id in windows:
                # Tap on a window: switch to it now
                self.state.pan_offset = float(windows.index(decision.window_id))
            self.deactivate()
            return

        if decision.outcome == ReleaseOutcome.BACKGROUND:
            action = self.options.resolve_background_action()
            if action == BackgroundAction.IGNORE:
                return
            if action == BackgroundAction.SHOW_DESKTOP:
                # No window is raised when the session ends
                self.state.pan_offset = NO_SELECTION
            self.deactivate()
            return

        self._apply_drag_action(decision.window_id, decision.action)
        self.relayout()

    def _apply_drag_action(self, window_id: Optional[WindowId], action: DragAction) -> None:
        if window_id is None or action == DragAction.NONE:
            return

        record = self.transforms.get(window_id)
        if record is None:
            logger.debug(f"Drag action {action.value} on stale window {window_id} ignored")
            return

        if action == DragAction.CLOSE:
            # Hide first so the dying window does not flash at full size
            self.provider.hide(window_id)
            self.provider.close(window_id)
        elif action == DragAction.MINIMIZE:
            record.was_marked_for_post_action = True
        logger.info(f"Drag action {action.value} applied to window {window_id}")

    def handle_pointer_button(self, button: int, pressed: bool, point: Point, time_ms: float) -> None:
        if button != BTN_LEFT:
            return
        if pressed:
            self.press(point, time_ms)
        else:
            self.release(point, time_ms)

    def handle_pointer_motion(self, point: Point, time_ms: float) -> None:
        self.move(point, time_ms)

    def handle_touch_down(self, finger_id: int, point: Point, time_ms: float) -> None:
        if finger_id == PRIMARY_FINGER:
            self.press(point, time_ms)

    def handle_touch_motion(self, finger_id: int, point: Point, time_ms: float) -> None:
        if finger_id == PRIMARY_FINGER:
            self.move(point, time_ms)

    def handle_touch_up(self, finger_id: int, point: Point, time_ms: float) -> None:
        if finger_id == PRIMARY_FINGER:
            self.release(point, time_ms)

    def step_selection(self, delta: int) -> bool:
        """Move the selection by ``delta`` slots (keyboard navigation)."""
        if not self.active:
            return False

        windows = self.get_windows()
        if not windows:
            return False

        if not self.state.has_selection():
            self.state.pan_offset = 0.0
        self.state.pan_offset += delta
        self.state.clamp_pan(len(windows))
        self.relayout()
        return True

    def confirm(self) -> None:
        """Switch to the current selection."""
        self.deactivate()

    # Layout

    def relayout(self) -> None:
        """Recompute targets for all session windows and hand them to the store."""
        if not self.active:
            return

        windows = self.get_windows()
        if not windows:
            self.deactivate()
            return

        self.state.clamp_pan(len(windows))
        params = self._params()
        tree = WindowTree.snapshot(self.provider, windows)
        targets = compute_layout(windows, tree, self.state.pan_offset, self.state.vertical_offset,
                                 self.state.selected_window, params)

        # Set directly while dragging or flicking; animating would lag behind the input
        directly = self.state.held or self.momentum.active()
        parent_pose = IDENTITY

        for window_id, target in targets.items():
            if target.is_root:
                self.transforms.attach(window_id, window_id, target.entry_pose)
                record = self.transforms.get(window_id)
                if tree.minimized.get(window_id):
                    self.provider.set_minimized(window_id, False)
                    record.was_marked_for_post_action = True
                parent_pose = record.pose
            else:
                # New children emerge from their parent's current pose
                self.transforms.attach(window_id, target.root_id, parent_pose)

            self.transforms.set_target(window_id, target.pose, directly)

        self._request_frames()

    def request_relayout(self) -> None:
        """External request to relayout; no-op unless a session is active."""
        if not self.active:
            return
        self.notifications.push(NotificationKind.UPDATE_REQUESTED)
        self.relayout()

    def update_options(self, options: TouchswitchOptions) -> None:
        """Swap options, relayouting a running session."""
        self.options = options
        self.gesture.options = options
        self.momentum.friction = options.flick_motion
        self.transforms.duration_ms = options.duration
        self.request_relayout()

    # External window events

    def window_mapped(self, window_id: WindowId) -> None:
        if not self.active:
            return
        if self.should_scale_window(window_id):
            self.relayout()

    def window_unmapped(self, window_id: WindowId) -> None:
        if not self.active:
            return

        if self.state.selected_window == window_id:
            self.state.selected_window = None

        record = self.transforms.get(window_id)
        if record is not None:
            is_root = record.root_id == window_id
        else:
            is_root = self.provider.get_parent(window_id) is None

        if record is not None and is_root:
            self.transforms.remove_tree(window_id)
        elif record is not None:
            self.transforms.remove(window_id)
            for child in self.provider.get_children(window_id):
                self.transforms.remove(child)

        if len(self.transforms) == 0:
            self.finalize()
            return

        if is_root:
            # Pull the offset back in if the anchor slot disappeared
            self.state.clamp_pan(len(self.get_windows()))
            self.relayout()

    def window_geometry_changed(self, window_id: WindowId) -> None:
        if not self.active:
            return
        self.relayout()

    def workarea_changed(self) -> None:
        if not self.active:
            return
        self.relayout()

    def workspace_changed(self) -> None:
        if not self.active:
            return
        self.relayout()

    # Frames

    def _request_frames(self) -> None:
        if self.frame_driver is not None:
            self.frame_driver.schedule_redraw()

    @property
    def wants_frames(self) -> bool:
        if self.phase == SessionPhase.INACTIVE:
            return False
        return self.transforms.any_running() or self.momentum.active() or self.phase == SessionPhase.DEACTIVATING

    def tick(self, now_ms: float) -> bool:
        """Advance animations and momentum by one frame.

        Returns:
            True while further frames are needed
        """
        if self.phase == SessionPhase.INACTIVE:
            return False

        dt = 0.0 if self._last_frame_ms is None else max(now_ms - self._last_frame_ms, 0.0)
        self._last_frame_ms = now_ms

        running = self.transforms.tick(dt)

        if self.momentum.active():
            windows = self.get_windows()
            step = self.momentum.step(now_ms, self._params().slot_width, len(windows))
            if step != MomentumStep.IDLE:
                self.relayout()
            running = running or self.transforms.any_running() or self.momentum.active()

        if self.phase == SessionPhase.DEACTIVATING and not running:
            self.finalize()
            return False

        if not running:
            # Next animation starts measuring from its first frame
            self._last_frame_ms = None
        return running

    def to_dict(self) -> Dict[str, Any]:
        """Diagnostic snapshot of the session."""
        return {
            "phase": self.phase.value,
            "gesture": self.state.to_dict(),
            "current_window": self.current_window(),
            "transform_count": len(self.transforms),
            "animating": self.transforms.any_running(),
            "pending_notifications": len(self.notifications),
        }
