"""Mock i3ipc objects for Sway adapter and daemon tests."""

from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock


def make_rect(x: int, y: int, width: int, height: int) -> MagicMock:
    rect = MagicMock()
    rect.x, rect.y, rect.width, rect.height = x, y, width, height
    return rect


def make_window(con_id: int, x: int = 0, y: int = 0, width: int = 500, height: int = 500,
                con_type: str = "con", app_id: Optional[str] = None,
                window_class: Optional[str] = None) -> MagicMock:
    window = MagicMock()
    window.id = con_id
    window.app_id = app_id
    window.window_class = window_class
    window.type = con_type
    window.rect = make_rect(x, y, width, height)
    return window


def make_tree(windows: List[MagicMock], scratchpad: Optional[List[MagicMock]] = None,
              focused_index: Optional[int] = 0, workspace_name: str = "1") -> MagicMock:
    """Tree whose focused workspace holds ``windows``."""
    workspace = MagicMock()
    workspace.name = workspace_name
    workspace.rect = make_rect(0, 0, 1000, 1000)
    workspace.leaves.return_value = windows

    for window in windows:
        window.workspace.return_value = workspace

    if focused_index is None:
        focused = workspace
        workspace.id = 9999
        workspace.workspace.return_value = workspace
    else:
        focused = windows[focused_index]

    scratch = MagicMock()
    scratch.leaves.return_value = scratchpad or []

    tree = MagicMock()
    tree.find_focused.return_value = focused
    tree.scratchpad.return_value = scratch
    return tree


def make_connection(tree: MagicMock) -> MagicMock:
    """Async connection returning ``tree`` and accepting every command."""
    conn = MagicMock()
    conn.get_tree = AsyncMock(return_value=tree)
    conn.command = AsyncMock(return_value=[MagicMock(success=True, error=None)])
    return conn
