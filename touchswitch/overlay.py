"""Title and icon overlay placement for windows shown in the switcher.

Consumes session notifications to know which windows carry a transform and
computes where a title label or application icon belongs on each
transformed window. Producing and drawing the textures is left to the host.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

from .constants import MIN_TITLE_BOX
from .icons import IconResolver
from .models import (
    Geometry,
    IconPosition,
    TitleOverlayMode,
    TitlePosition,
    WindowId,
)
from .notifications import Notification, NotificationKind
from .session import SessionController
from .tree import WindowTree

logger = logging.getLogger(__name__)


@dataclass
class TitleOverlay:
    """Title overlay bound to one transformed window."""
    window_id: WindowId
    position: TitlePosition


@dataclass
class IconOverlay:
    """Icon overlay bound to one transformed window."""
    window_id: WindowId
    position: IconPosition


class OverlayTracker:
    """Keeps one overlay per transformed window while its option allows it.

    Subclasses decide whether the option is on and what an overlay records.
    Only the first-child leaf of each window tree shows its overlay.
    """

    def __init__(self, session: SessionController) -> None:
        self.session = session
        self.shown = self.option_enabled()
        self.overlays: Dict[WindowId, object] = {}

    def option_enabled(self) -> bool:
        raise NotImplementedError

    def create(self, window_id: WindowId):
        raise NotImplementedError

    def reload(self) -> None:
        self.shown = self.option_enabled()

    def consume(self, notifications: Iterable[Notification]) -> None:
        for notification in notifications:
            self.handle(notification)

    def handle(self, notification: Notification) -> None:
        kind = notification.kind
        if kind in (NotificationKind.SESSION_STARTED, NotificationKind.UPDATE_REQUESTED):
            self.reload()
        elif kind == NotificationKind.SESSION_ENDED:
            self.shown = False
        elif kind == NotificationKind.TRANSFORMER_ADDED:
            # Option changes while running only affect windows added afterwards
            if not self.option_enabled():
                return
            self.overlays[notification.window_id] = self.create(notification.window_id)
        elif kind == NotificationKind.TRANSFORMER_REMOVED:
            self.overlays.pop(notification.window_id, None)

    def _tree_for(self, window_id: WindowId) -> WindowTree:
        record = self.session.transforms.get(window_id)
        root = record.root_id if record is not None else window_id
        return WindowTree.snapshot(self.session.provider, [root])

    def _scaled_bbox(self, tree: WindowTree, window_id: WindowId) -> Geometry:
        geometry = tree.geometry[window_id]
        record = self.session.transforms.get(window_id)
        if record is None:
            return geometry
        return record.pose.apply(geometry)

    def should_have_overlay(self, window_id: WindowId) -> bool:
        if not self.shown or window_id not in self.overlays:
            return False
        return self._tree_for(window_id).first_leaf(window_id) == window_id


class TitleOverlayTracker(OverlayTracker):
    """Title labels, sized to the widest window of their tree."""

    @property
    def mode(self) -> TitleOverlayMode:
        return TitleOverlayMode.ALL if self.shown else TitleOverlayMode.NEVER

    def option_enabled(self) -> bool:
        return self.session.options.title_overlay != TitleOverlayMode.NEVER

    def create(self, window_id: WindowId) -> TitleOverlay:
        return TitleOverlay(window_id, self.session.options.title_position)

    def placement(self, window_id: WindowId, text_size: Tuple[float, float]) -> Optional[Geometry]:
        """Rectangle of the title label for ``window_id``.

        Args:
            window_id: Window carrying the overlay
            text_size: Rendered label width and height

        Returns:
            Overlay geometry, or None if this window shows no overlay
        """
        if not self.should_have_overlay(window_id):
            return None

        tree = self._tree_for(window_id)
        if window_id not in tree:
            return None

        root = tree.topmost_parent(window_id)
        max_width = MIN_TITLE_BOX
        for member in tree.enumerate(root):
            max_width = max(max_width, self._scaled_bbox(tree, member).width)

        width = min(text_size[0], max_width)
        height = text_size[1]
        bbox = self._scaled_bbox(tree, window_id)
        x = bbox.x + bbox.width / 2.0 - width / 2.0

        position = self.overlays[window_id].position
        if position == TitlePosition.TOP:
            y = bbox.y
        elif position == TitlePosition.BOTTOM:
            y = bbox.y + bbox.height - height / 2.0
        else:
            y = bbox.y + bbox.height / 2.0 - height / 2.0

        return Geometry(x, y, width, height)


class IconOverlayTracker(OverlayTracker):
    """Application icons of a fixed size, resolved from the root's app_id."""

    def __init__(self, session: SessionController) -> None:
        self.resolver = IconResolver(session.options.icon_theme)
        super().__init__(session)

    def option_enabled(self) -> bool:
        return self.session.options.icon_overlay

    def create(self, window_id: WindowId) -> IconOverlay:
        return IconOverlay(window_id, self.session.options.icon_position)

    def reload(self) -> None:
        super().reload()
        self.resolver.set_theme(self.session.options.icon_theme)

    def icon_path(self, window_id: WindowId) -> Optional[Path]:
        """Icon file for the application owning ``window_id``'s tree."""
        tree = self._tree_for(window_id)
        root = tree.topmost_parent(window_id) if window_id in tree else window_id
        return self.resolver.lookup(self.session.provider.get_app_id(root))

    def placement(self, window_id: WindowId) -> Optional[Geometry]:
        """Square of ``icon_size`` centred horizontally on the window.

        Returns:
            Overlay geometry, or None if this window shows no overlay
        """
        if not self.should_have_overlay(window_id):
            return None

        tree = self._tree_for(window_id)
        if window_id not in tree:
            return None

        size = float(self.session.options.icon_size)
        bbox = self._scaled_bbox(tree, window_id)
        x = bbox.x + bbox.width / 2.0 - size / 2.0

        position = self.overlays[window_id].position
        if position == IconPosition.ABOVE:
            y = bbox.y - size
        elif position == IconPosition.TOP:
            y = bbox.y
        elif position == IconPosition.BOTTOM:
            y = bbox.y + bbox.height - size / 2.0
        elif position == IconPosition.BELOW:
            y = bbox.y + bbox.height
        else:
            y = bbox.y + bbox.height / 2.0 - size / 2.0

        return Geometry(x, y, size, size)
