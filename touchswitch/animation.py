"""Per-window transform records and their interpolated animations."""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional

from .models import IDENTITY, Pose, WindowId
from .notifications import NotificationKind, NotificationQueue

logger = logging.getLogger(__name__)


def circle_smoothing(progress: float) -> float:
    """Ease-out curve: fast start, gentle landing."""
    return math.sqrt(max(0.0, 2.0 * progress - progress * progress))


class Animation:
    """Timed transition of all four pose components from ``start`` to ``end``."""

    def __init__(
        self,
        start: Pose,
        end: Pose,
        duration_ms: float,
        smoothing: Callable[[float], float] = circle_smoothing,
    ) -> None:
        self.start = start
        self.end = end
        self.duration_ms = max(0.0, float(duration_ms))
        self.elapsed_ms = 0.0
        self.smoothing = smoothing

    @property
    def progress(self) -> float:
        """Raw progress in [0, 1]; a zero duration is complete immediately."""
        if self.duration_ms <= 0.0:
            return 1.0
        return min(1.0, self.elapsed_ms / self.duration_ms)

    def running(self) -> bool:
        return self.elapsed_ms < self.duration_ms

    def advance(self, dt_ms: float) -> None:
        if dt_ms > 0.0:
            self.elapsed_ms = min(self.duration_ms, self.elapsed_ms + dt_ms)

    def current(self) -> Pose:
        if self.progress >= 1.0:
            return self.end
        t = self.smoothing(self.progress)

        def lerp(a: float, b: float) -> float:
            return a + (b - a) * t

        return Pose(
            lerp(self.start.scale_x, self.end.scale_x),
            lerp(self.start.scale_y, self.end.scale_y),
            lerp(self.start.translation_x, self.end.translation_x),
            lerp(self.start.translation_y, self.end.translation_y),
        )


@dataclass
class WindowTransform:
    """Transform attached to one window for the duration of a session."""

    root_id: WindowId
    pose: Pose = IDENTITY
    animation: Optional[Animation] = None
    was_marked_for_post_action: bool = False

    @property
    def translation(self):
        return self.pose.translation

    @property
    def scale(self):
        return self.pose.scale

    @property
    def animating(self) -> bool:
        return self.animation is not None and self.animation.running()


class TransformStore:
    """Map of window id to :class:`WindowTransform`.

    Attaching and removing a record always emits the matching
    transformer-added/removed notification, so overlays bound to a window
    are never left dangling.
    """

    def __init__(self, notifications: NotificationQueue, duration_ms: float = 300) -> None:
        self.notifications = notifications
        self.duration_ms = duration_ms
        self._records: Dict[WindowId, WindowTransform] = {}

    def __contains__(self, window_id: WindowId) -> bool:
        return window_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[WindowId]:
        return iter(list(self._records))

    def get(self, window_id: WindowId) -> Optional[WindowTransform]:
        return self._records.get(window_id)

    def attach(self, window_id: WindowId, root_id: WindowId, pose: Pose = IDENTITY) -> bool:
        """Attach a transform starting at ``pose``.

        Returns:
            False if the window already has a transform (nothing changes)
        """
        if window_id in self._records:
            return False

        self._records[window_id] = WindowTransform(root_id=root_id, pose=pose)
        self.notifications.push(NotificationKind.TRANSFORMER_ADDED, window_id)
        logger.debug(f"Attached transform to window {window_id} (root={root_id})")
        return True

    def set_target(self, window_id: WindowId, target: Pose, directly: bool) -> bool:
        """Move a window towards ``target``, immediately or through an animation.

        Returns:
            False if the window has no transform
        """
        record = self._records.get(window_id)
        if record is None:
            return False

        if directly:
            record.pose = target
            record.animation = None
            return True

        if record.pose == target and not record.animating:
            record.animation = None
            return True

        record.animation = Animation(record.pose, target, self.duration_ms)
        return True

    def tick(self, dt_ms: float) -> bool:
        """Advance running animations and write their values into the poses.

        Returns:
            True if any animation is still running
        """
        running = False
        for record in self._records.values():
            if record.animation is None:
                continue

            record.animation.advance(dt_ms)
            record.pose = record.animation.current()
            if record.animation.running():
                running = True
            else:
                record.animation = None

        return running

    def any_running(self) -> bool:
        return any(record.animating for record in self._records.values())

    def remove(self, window_id: WindowId) -> bool:
        """Drop a window's transform; safe to call for unknown windows."""
        record = self._records.pop(window_id, None)
        if record is None:
            return False

        self.notifications.push(NotificationKind.TRANSFORMER_REMOVED, window_id)
        logger.debug(f"Removed transform from window {window_id}")
        return True

    def remove_tree(self, root_id: WindowId) -> List[WindowId]:
        """Remove a window and every record attached under it as root."""
        doomed = [wid for wid, record in self._records.items()
                  if wid == root_id or record.root_id == root_id]
        for window_id in doomed:
            self.remove(window_id)
        return doomed

    def clear(self) -> None:
        for window_id in list(self._records):
            self.remove(window_id)
