"""Read-only snapshot of the window hierarchy used by one layout pass."""

import logging
from typing import Dict, Iterable, List, Optional

from .interfaces import WindowProvider
from .models import Geometry, WindowId

logger = logging.getLogger(__name__)


class WindowTree:
    """Parent/child relations and geometry captured at a single point in time.

    Layout and hit testing iterate this snapshot instead of querying the
    provider mid-pass, so the external window state is never observed
    half-updated.
    """

    def __init__(self) -> None:
        self.parents: Dict[WindowId, Optional[WindowId]] = {}
        self.children: Dict[WindowId, List[WindowId]] = {}
        self.geometry: Dict[WindowId, Geometry] = {}
        self.minimized: Dict[WindowId, bool] = {}

    @classmethod
    def snapshot(cls, provider: WindowProvider, roots: Iterable[WindowId]) -> "WindowTree":
        """Capture every window reachable from ``roots``."""
        tree = cls()
        for root in roots:
            tree._capture(provider, root, None)
        return tree

    def _capture(self, provider: WindowProvider, window_id: WindowId, parent: Optional[WindowId]) -> None:
        if window_id in self.parents:
            logger.debug(f"Window {window_id} reached twice while capturing tree")
            return

        geometry = provider.get_geometry(window_id)
        if geometry is None:
            # Window disappeared between enumeration and capture
            return

        self.parents[window_id] = parent
        self.geometry[window_id] = geometry
        self.minimized[window_id] = provider.is_minimized(window_id)
        self.children[window_id] = []

        for child in provider.get_children(window_id):
            self._capture(provider, child, window_id)
            if child in self.parents:
                self.children[window_id].append(child)

    def __contains__(self, window_id: WindowId) -> bool:
        return window_id in self.parents

    def enumerate(self, root: WindowId) -> List[WindowId]:
        """Return ``root`` and all its descendants, root first."""
        if root not in self.parents:
            return []

        result = []
        stack = [root]
        while stack:
            window_id = stack.pop()
            result.append(window_id)
            stack.extend(reversed(self.children.get(window_id, [])))
        return result

    def topmost_parent(self, window_id: WindowId) -> Optional[WindowId]:
        """Return the root ancestor of a window, None if it is not captured."""
        if window_id not in self.parents:
            return None

        current = window_id
        while self.parents.get(current) is not None:
            current = self.parents[current]
        return current

    def first_leaf(self, window_id: WindowId) -> Optional[WindowId]:
        """Follow first children from the topmost parent down to a leaf."""
        current = self.topmost_parent(window_id)
        if current is None:
            return None

        while self.children.get(current):
            current = self.children[current][0]
        return current
