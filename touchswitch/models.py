"""
Data models for the touchswitch window switcher.

Defines geometry primitives, transform poses, enumerations and the
pydantic-validated option set consumed by the engine.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

WindowId = int


# Geometry primitives

@dataclass(frozen=True)
class Point:
    """2D point or vector in layout coordinates."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def scaled(self, factor: float) -> "Point":
        return Point(self.x * factor, self.y * factor)

    @property
    def length(self) -> float:
        return math.hypot(self.x, self.y)


ORIGIN = Point(0.0, 0.0)


@dataclass(frozen=True)
class Geometry:
    """Axis-aligned rectangle (window geometry or work area)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2.0, self.y + self.height / 2.0)

    def contains(self, point: Point) -> bool:
        return (self.x <= point.x < self.x + self.width and
                self.y <= point.y < self.y + self.height)

    def floored(self) -> "Geometry":
        """Same rectangle with width/height floored to 1 unit for safe division."""
        return Geometry(self.x, self.y, max(self.width, 1.0), max(self.height, 1.0))


@dataclass(frozen=True)
class Pose:
    """Scale and translation applied to a window around its own center."""

    scale_x: float = 1.0
    scale_y: float = 1.0
    translation_x: float = 0.0
    translation_y: float = 0.0

    @property
    def translation(self) -> Tuple[float, float]:
        return (self.translation_x, self.translation_y)

    @property
    def scale(self) -> Tuple[float, float]:
        return (self.scale_x, self.scale_y)

    def apply(self, geometry: Geometry) -> Geometry:
        """Bounding box of ``geometry`` once this pose is applied."""
        center = geometry.center
        width = geometry.width * self.scale_x
        height = geometry.height * self.scale_y
        return Geometry(
            center.x + self.translation_x - width / 2.0,
            center.y + self.translation_y - height / 2.0,
            width,
            height,
        )


IDENTITY = Pose()


# Enumerations

class SwipeDirection(Enum):
    """Axis a drag committed to."""
    UNDECIDED = "undecided"
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class GesturePhase(Enum):
    """Phase of the pointer/first-touch gesture."""
    IDLE = "idle"
    PRESSED = "pressed"
    DRAGGING = "dragging"


class SessionPhase(Enum):
    """Lifecycle of one switcher session."""
    INACTIVE = "inactive"
    ACTIVE = "active"
    DEACTIVATING = "deactivating"
    FINALIZING = "finalizing"


class DragAction(str, Enum):
    """Action applied to a window dragged past the vertical threshold."""
    CLOSE = "close"
    MINIMIZE = "minimize"
    NONE = "none"


class BackgroundAction(str, Enum):
    """Action applied when the background is tapped."""
    IGNORE = "ignore"
    SHOW_DESKTOP = "showdesktop"
    DEACTIVATE = "deactivate"


class TitleOverlayMode(str, Enum):
    """Which windows show a title overlay."""
    ALL = "all"
    NEVER = "never"


class TitlePosition(str, Enum):
    """Vertical placement of the title overlay."""
    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


class IconPosition(str, Enum):
    """Vertical placement of the application icon overlay."""
    ABOVE = "above"
    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"
    BELOW = "below"


# Options

class TouchswitchOptions(BaseModel):
    """Named options consumed by the switcher as plain values."""

    spacing: int = Field(20, ge=0, description="Gap between slots in pixels")
    window_scale: float = Field(0.75, gt=0.0, le=1.0, description="Slot size relative to the work area")
    allow_zoom: bool = Field(False, description="Allow windows to be scaled above native size")
    minimize_others: bool = Field(False, description="Minimize non-selected windows on exit")
    pull_up: str = Field("close", description="Action for dragging a window up")
    pull_down: str = Field("minimize", description="Action for dragging a window down")
    background_touch: str = Field("deactivate", description="Action for tapping the background")
    flick_motion: float = Field(0.95, gt=0.0, lt=1.0, description="Friction factor applied per frame")
    duration: int = Field(300, ge=0, description="Animation duration in milliseconds")
    title_overlay: TitleOverlayMode = Field(TitleOverlayMode.ALL, description="Title overlay mode")
    title_position: TitlePosition = Field(TitlePosition.CENTER, description="Title overlay position")
    icon_overlay: bool = Field(True, description="Show the application icon on each window")
    icon_position: IconPosition = Field(IconPosition.CENTER, description="Icon overlay position")
    icon_size: int = Field(64, gt=0, description="Icon edge length in pixels")
    icon_theme: str = Field("hicolor", min_length=1, description="Preferred icon theme")

    @field_validator('pull_up', 'pull_down', 'background_touch')
    @classmethod
    def normalize_action(cls, v: str) -> str:
        """Action names are matched case-insensitively."""
        return v.strip().lower()

    def resolve_drag_action(self, upwards: bool) -> DragAction:
        """Drag action for the given direction; unknown names are no-ops."""
        name = self.pull_up if upwards else self.pull_down
        try:
            return DragAction(name)
        except ValueError:
            logger.warning(f"Unknown drag action '{name}', ignoring")
            return DragAction.NONE

    def resolve_background_action(self) -> BackgroundAction:
        """Background tap action; unknown names deactivate normally."""
        try:
            return BackgroundAction(self.background_touch)
        except ValueError:
            logger.warning(f"Unknown background action '{self.background_touch}', deactivating")
            return BackgroundAction.DEACTIVATE
