"""
Sway implementation of the window provider.

The engine queries the provider synchronously, so :class:`SwayDesktop` works
from a snapshot taken by :meth:`SwayDesktop.refresh` and queues every action
as a Sway command. :meth:`SwayDesktop.flush` sends the queue in order.

Sway IPC exposes no dialog hierarchy, so every window is a root.
"""

import logging
from typing import Dict, List, Optional, Set

from i3ipc.aio import Connection

from .errors import ErrorCode, SwayIPCError
from .interfaces import WindowProvider
from .models import Geometry, WindowId

logger = logging.getLogger(__name__)

# Container types that hold application windows
WINDOW_TYPES = ("con", "floating_con")


def rect_to_geometry(rect) -> Geometry:
    return Geometry(rect.x, rect.y, rect.width, rect.height)


def record_app_id(app_ids: Dict[WindowId, str], leaf) -> None:
    # Wayland clients report app_id, XWayland clients only a window class
    app_id = leaf.app_id or leaf.window_class
    if app_id:
        app_ids[leaf.id] = app_id


class SwayDesktop(WindowProvider):
    """Window provider for the focused Sway workspace."""

    def __init__(self, conn: Optional[Connection] = None):
        """
        Initialize the adapter.

        Args:
            conn: Connected i3ipc async connection (can be set later)
        """
        self.conn = conn
        self.workspace_name: Optional[str] = None
        self.workarea = Geometry(0, 0, 1, 1)
        self.geometry: Dict[WindowId, Geometry] = {}
        self.mapped: List[WindowId] = []
        self.minimized: Set[WindowId] = set()
        self.app_ids: Dict[WindowId, str] = {}
        self.focused: Optional[WindowId] = None
        self.outbox: List[str] = []

    async def refresh(self) -> None:
        """Snapshot the focused workspace and the scratchpad.

        Raises:
            SwayIPCError: If there is no connection or the tree cannot be read
        """
        if self.conn is None:
            raise SwayIPCError("get_tree", "not connected", code=ErrorCode.SWAY_NOT_RUNNING)

        try:
            tree = await self.conn.get_tree()
        except Exception as e:
            raise SwayIPCError("get_tree", str(e))

        focused = tree.find_focused()
        workspace = focused.workspace() if focused else None

        geometry: Dict[WindowId, Geometry] = {}
        mapped: List[WindowId] = []
        minimized: Set[WindowId] = set()
        app_ids: Dict[WindowId, str] = {}

        if workspace is not None:
            self.workspace_name = workspace.name
            self.workarea = rect_to_geometry(workspace.rect)
            for leaf in workspace.leaves():
                if leaf.type in WINDOW_TYPES:
                    mapped.append(leaf.id)
                    geometry[leaf.id] = rect_to_geometry(leaf.rect)
                    record_app_id(app_ids, leaf)

        scratchpad = tree.scratchpad()
        if scratchpad is not None:
            for leaf in scratchpad.leaves():
                if leaf.id in geometry:
                    continue
                minimized.add(leaf.id)
                geometry[leaf.id] = rect_to_geometry(leaf.rect)
                record_app_id(app_ids, leaf)

        self.geometry = geometry
        self.mapped = mapped
        self.minimized = minimized
        self.app_ids = app_ids
        self.focused = focused.id if focused is not None and focused.id in geometry else None

        logger.debug(
            f"Refreshed workspace {self.workspace_name}: "
            f"{len(mapped)} mapped, {len(minimized)} minimized"
        )

    async def flush(self) -> int:
        """Send queued commands in order.

        Returns:
            Number of commands that Sway reported as failed
        """
        if not self.outbox:
            return 0

        commands, self.outbox = self.outbox, []
        if self.conn is None:
            logger.warning(f"Dropping {len(commands)} commands: not connected")
            return len(commands)

        failed = 0
        for command in commands:
            try:
                replies = await self.conn.command(command)
            except Exception as e:
                logger.error(f"Sway command failed: {command}: {e}")
                failed += 1
                continue

            for reply in replies:
                if not reply.success:
                    logger.warning(f"Sway rejected '{command}': {reply.error}")
                    failed += 1

        return failed

    def _queue(self, window_id: WindowId, action: str) -> None:
        self.outbox.append(f"[con_id={window_id}] {action}")

    # WindowProvider

    def list_windows(self) -> List[WindowId]:
        windows = list(self.mapped)
        windows.extend(wid for wid in sorted(self.minimized) if wid not in windows)
        return windows

    def get_geometry(self, window_id: WindowId) -> Optional[Geometry]:
        return self.geometry.get(window_id)

    def get_parent(self, window_id: WindowId) -> Optional[WindowId]:
        return None

    def get_children(self, window_id: WindowId) -> List[WindowId]:
        return []

    def is_minimized(self, window_id: WindowId) -> bool:
        return window_id in self.minimized

    def set_minimized(self, window_id: WindowId, minimized: bool) -> None:
        if minimized == (window_id in self.minimized):
            return

        if minimized:
            self._queue(window_id, "move scratchpad")
            self.minimized.add(window_id)
            if window_id in self.mapped:
                self.mapped.remove(window_id)
        else:
            # Showing a scratchpad window floats it; put it back in the tiling tree
            self._queue(window_id, "scratchpad show, floating disable")
            self.minimized.discard(window_id)
            self.mapped.append(window_id)

    def close(self, window_id: WindowId) -> None:
        self._queue(window_id, "kill")

    def hide(self, window_id: WindowId) -> None:
        self._queue(window_id, "opacity 0")

    def focus_raise(self, window_id: WindowId) -> None:
        self._queue(window_id, "focus")
        self.focused = window_id

    def focused_window(self) -> Optional[WindowId]:
        return self.focused

    def get_workarea(self) -> Geometry:
        return self.workarea

    def get_app_id(self, window_id: WindowId) -> Optional[str]:
        return self.app_ids.get(window_id)
