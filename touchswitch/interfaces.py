"""Abstract collaborator interfaces consumed by the switcher engine.

The engine never touches compositor objects directly. Everything it needs
from the desktop (window enumeration, geometry, hierarchy, actions and the
usable screen area) goes through :class:`WindowProvider`.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .models import Geometry, WindowId


class WindowProvider(ABC):
    """Window and work-area provider for one output."""

    @abstractmethod
    def list_windows(self) -> List[WindowId]:
        """Return mapped top-level windows of the current workspace.

        The list is deduplicated. Order is not significant; the engine sorts
        by identity for a deterministic layout.
        """
        pass

    @abstractmethod
    def get_geometry(self, window_id: WindowId) -> Optional[Geometry]:
        """Return untransformed geometry, or None if the window is gone."""
        pass

    @abstractmethod
    def get_parent(self, window_id: WindowId) -> Optional[WindowId]:
        """Return the parent of a dependent window (dialog), None for roots."""
        pass

    @abstractmethod
    def get_children(self, window_id: WindowId) -> List[WindowId]:
        """Return direct children of a window in stacking order."""
        pass

    @abstractmethod
    def is_minimized(self, window_id: WindowId) -> bool:
        pass

    @abstractmethod
    def set_minimized(self, window_id: WindowId, minimized: bool) -> None:
        pass

    @abstractmethod
    def close(self, window_id: WindowId) -> None:
        """Request the client to close the window."""
        pass

    @abstractmethod
    def hide(self, window_id: WindowId) -> None:
        """Stop showing the window immediately (used right before close)."""
        pass

    @abstractmethod
    def focus_raise(self, window_id: WindowId) -> None:
        pass

    @abstractmethod
    def focused_window(self) -> Optional[WindowId]:
        """Return the currently focused window, if any."""
        pass

    @abstractmethod
    def get_workarea(self) -> Geometry:
        """Return the usable screen rectangle of the output."""
        pass

    def get_app_id(self, window_id: WindowId) -> Optional[str]:
        """Return the application id used for icon lookup, if known."""
        return None


class FrameDriver(ABC):
    """Render loop that ticks the session once per frame."""

    @abstractmethod
    def schedule_redraw(self) -> None:
        """Request at least one more frame."""
        pass
