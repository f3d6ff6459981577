"""Centralized constants for touchswitch.

Gesture thresholds are in layout units (pixels) per input event, velocities in
units per millisecond.
"""

from pathlib import Path
from typing import Final


class ConfigPaths:
    """Default configuration locations."""

    HOME: Final[Path] = Path.home()
    CONFIG_DIR: Final[Path] = HOME / ".config" / "touchswitch"
    OPTIONS_FILE: Final[Path] = CONFIG_DIR / "touchswitch.toml"
    OPTIONS_JSON_FILE: Final[Path] = CONFIG_DIR / "touchswitch.json"


# Gesture recognition
DEAD_ZONE_RADIUS: Final[float] = 40.0  # Displacement before a press counts as a drag
COMMIT_RADIUS: Final[float] = 50.0  # Displacement before the swipe axis is decided
FLICK_START_THRESHOLD: Final[float] = 50.0  # Per-event motion that starts a flick
FLICK_END_THRESHOLD: Final[float] = 20.0  # Per-event motion at or below which a flick is dropped

# Momentum
VELOCITY_ZERO_THRESHOLD: Final[float] = 0.1  # Speed at which motion is considered stopped
MIN_ELAPSED_MS: Final[float] = 1.0

# Layout
MAX_SCALE_FACTOR: Final[float] = 1.0  # 1.0 means windows are never zoomed in
MAX_CHILD_SCALE: Final[float] = 1.0  # Child scale relative to its parent, 0 disables the limit
EXIT_TRANSLATION_Y: Final[float] = 1000.0  # Vertical translation of windows leaving downwards
VERTICAL_ACTION_FRACTION: Final[float] = 0.25  # Work-area height fraction for drag actions

# Title overlay
MIN_TITLE_BOX: Final[float] = 200.0

# Icon lookup, searched in this order inside each theme
ICON_SIZE_DIRS: Final[tuple] = ("scalable", "128x128", "96x96", "64x64", "48x48", "32x32")
ICON_FALLBACK_THEMES: Final[tuple] = ("hicolor", "locolor")
ICON_EXTENSIONS: Final[tuple] = (".svg", ".png")

# Frame driver
FRAME_INTERVAL_S: Final[float] = 1.0 / 60.0

# Sway tick message prefix
TICK_PREFIX: Final[str] = "touchswitch:"

# Input
BTN_LEFT: Final[int] = 0x110  # linux/input-event-codes.h
PRIMARY_FINGER: Final[int] = 0
