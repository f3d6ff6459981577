"""
Configuration subsystem for touchswitch.

Modules:
- loader: Load and validate the options file (TOML/JSON)
- file_watcher: Monitor the options file for changes
"""

from .loader import ConfigLoader
from .file_watcher import FileWatcher

__all__ = [
    "ConfigLoader",
    "FileWatcher",
]
