"""
Filmstrip layout engine.

Turns the ordered window list and the continuous pan offset into target
poses for every window and its dependent windows. The computation is pure:
callers decide whether targets are applied directly or animated.
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from .constants import MAX_CHILD_SCALE, MAX_SCALE_FACTOR
from .models import IDENTITY, Geometry, Pose, TouchswitchOptions, WindowId
from .tree import WindowTree


@dataclass(frozen=True)
class LayoutParams:
    """Work area and options that determine slot geometry."""

    workarea: Geometry
    window_scale: float
    spacing: float
    allow_zoom: bool

    @classmethod
    def from_options(cls, options: TouchswitchOptions, workarea: Geometry) -> "LayoutParams":
        return cls(
            workarea=workarea,
            window_scale=options.window_scale,
            spacing=float(options.spacing),
            allow_zoom=options.allow_zoom,
        )

    @property
    def scaled_width(self) -> float:
        return max(self.workarea.width * self.window_scale, 1.0)

    @property
    def scaled_height(self) -> float:
        return max(self.workarea.height * self.window_scale, 1.0)

    @property
    def slot_width(self) -> float:
        """Horizontal distance between neighbouring slot origins."""
        return self.spacing + self.scaled_width

    @property
    def offset_x(self) -> float:
        return self.workarea.x - self.scaled_width / 2.0 + self.workarea.width / 2.0

    @property
    def offset_y(self) -> float:
        return self.workarea.y - self.scaled_height / 2.0 + self.workarea.height / 2.0

    def entry_pose(self, index_position: float) -> Pose:
        """Starting pose of a window new to the session: below the screen."""
        return Pose(
            self.window_scale,
            self.window_scale,
            self.slot_width * index_position,
            self.offset_y + self.workarea.height,
        )


@dataclass(frozen=True)
class SlotTarget:
    """Computed target for one window of the layout."""

    window_id: WindowId
    root_id: WindowId
    index: int
    pose: Pose
    entry_pose: Pose

    @property
    def is_root(self) -> bool:
        return self.window_id == self.root_id


def calculate_scale(geometry: Geometry, params: LayoutParams) -> float:
    """Largest scale that fits ``geometry`` into a slot."""
    geometry = geometry.floored()
    scale = min(params.scaled_width / geometry.width, params.scaled_height / geometry.height)
    if not params.allow_zoom:
        scale = min(scale, MAX_SCALE_FACTOR)
    return scale


def compute_layout(
    windows: Sequence[WindowId],
    tree: WindowTree,
    pan_offset: float,
    vertical_offset: float,
    selected: Optional[WindowId],
    params: LayoutParams,
    active: bool = True,
) -> Dict[WindowId, SlotTarget]:
    """Compute target poses for every window tree in ``windows``.

    Args:
        windows: Session windows in slot order
        tree: Hierarchy snapshot covering ``windows``
        pan_offset: Continuous slot index centred on screen
        vertical_offset: Drag offset applied to ``selected`` only
        selected: Window pressed by the current gesture
        params: Slot geometry
        active: False while deactivating; every target becomes identity

    Returns:
        Mapping of window id to target, roots before their descendants
    """
    targets: Dict[WindowId, SlotTarget] = {}
    if math.isnan(pan_offset):
        pan_offset = 0.0

    for index, root in enumerate(windows):
        if root not in tree:
            continue

        index_position = index - pan_offset
        x = params.offset_x + params.slot_width * index_position
        y = params.offset_y
        if selected is not None and root == selected:
            y += vertical_offset

        entry = params.entry_pose(index_position)
        root_scale = calculate_scale(tree.geometry[root], params)

        for window_id in tree.enumerate(root):
            if not active:
                targets[window_id] = SlotTarget(window_id, root, index, IDENTITY, entry)
                continue

            geometry = tree.geometry[window_id]
            scale = calculate_scale(geometry, params)
            if (not params.allow_zoom and window_id != root and MAX_CHILD_SCALE > 0.0):
                scale = min(scale, MAX_CHILD_SCALE * root_scale)

            center = geometry.center
            dx = x - center.x + params.scaled_width / 2.0
            dy = y - center.y + params.scaled_height / 2.0
            targets[window_id] = SlotTarget(window_id, root, index, Pose(scale, scale, dx, dy), entry)

    return targets
