"""Application icon lookup for the icon overlay.

Maps a window's app_id to an icon file the way desktop shells do:
``applications/<app_id>.desktop`` under each XDG data directory names the
icon, which is then searched in the preferred theme, ``hicolor`` and
``locolor`` before falling back to loose files in ``icons/``.
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from xdg.DesktopEntry import DesktopEntry
from xdg.Exceptions import ParsingError

from .constants import ICON_EXTENSIONS, ICON_FALLBACK_THEMES, ICON_SIZE_DIRS

logger = logging.getLogger(__name__)


def xdg_data_dirs() -> List[Path]:
    """Data directories from ``XDG_DATA_DIRS``, read on every call."""
    raw = os.environ.get("XDG_DATA_DIRS")
    if not raw:
        home = Path.home()
        return [home / ".local" / "share", Path("/usr/local/share"), Path("/usr/share")]
    return [Path(entry) for entry in raw.split(":") if entry]


def icon_name_for_app_id(app_id: str) -> Optional[str]:
    """Icon key of the first ``<app_id>.desktop`` entry that names one."""
    for data_dir in xdg_data_dirs():
        desktop_path = data_dir / "applications" / f"{app_id}.desktop"
        if not desktop_path.is_file():
            continue
        try:
            icon = DesktopEntry(str(desktop_path)).getIcon()
        except ParsingError as e:
            logger.warning(f"Skipping unreadable desktop entry {desktop_path}: {e}")
            continue
        if icon:
            return icon
    return None


def resolve_icon_path(icon: str, theme: str = "hicolor") -> Optional[Path]:
    """Find the file for an icon name.

    Themes are exhausted one at a time: every size and extension of the
    preferred theme is tried before ``hicolor``, then ``locolor``. An
    absolute icon path is returned as given.

    Args:
        icon: Icon name from a desktop entry, or an absolute path
        theme: Preferred icon theme

    Returns:
        Path to the icon file, or None if nothing matches
    """
    if not icon:
        return None
    if icon.startswith("/"):
        return Path(icon)

    data_dirs = xdg_data_dirs()
    themes = [theme] + [name for name in ICON_FALLBACK_THEMES if name != theme]

    for theme_name in themes:
        for size in ICON_SIZE_DIRS:
            for extension in ICON_EXTENSIONS:
                for data_dir in data_dirs:
                    candidate = data_dir / "icons" / theme_name / size / "apps" / f"{icon}{extension}"
                    if candidate.is_file():
                        return candidate

    for extension in ICON_EXTENSIONS:
        for data_dir in data_dirs:
            candidate = data_dir / "icons" / f"{icon}{extension}"
            if candidate.is_file():
                return candidate

    return None


class IconResolver:
    """Caches app_id to icon path lookups for one icon theme."""

    def __init__(self, theme: str = "hicolor") -> None:
        self.theme = theme
        self._cache: Dict[str, Optional[Path]] = {}

    def set_theme(self, theme: str) -> None:
        if theme != self.theme:
            self.theme = theme
            self._cache.clear()

    def lookup(self, app_id: Optional[str]) -> Optional[Path]:
        """Icon file for ``app_id``, or None if the app has no usable icon."""
        if not app_id:
            return None
        if app_id in self._cache:
            return self._cache[app_id]

        path = None
        icon = icon_name_for_app_id(app_id)
        if icon is not None:
            path = resolve_icon_path(icon, self.theme)
        if path is None:
            logger.debug(f"No icon found for app_id '{app_id}'")

        self._cache[app_id] = path
        return path
