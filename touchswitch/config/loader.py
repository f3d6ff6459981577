"""
Options loader for touchswitch.

Loads ``touchswitch.toml`` (TOML, options under a ``[touchswitch]`` table or
at top level) or, when absent, ``touchswitch.json`` with the same keys.
"""

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..constants import ConfigPaths
from ..errors import ConfigLoadError, ErrorCode
from ..models import TouchswitchOptions

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads switcher options from TOML or JSON files."""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize configuration loader.

        Args:
            config_dir: Configuration directory (defaults to ~/.config/touchswitch)
        """
        self.config_dir = config_dir or ConfigPaths.CONFIG_DIR
        self.toml_path = self.config_dir / ConfigPaths.OPTIONS_FILE.name
        self.json_path = self.config_dir / ConfigPaths.OPTIONS_JSON_FILE.name

    @property
    def active_path(self) -> Optional[Path]:
        """File the options are read from, None when only defaults apply."""
        if self.toml_path.exists():
            return self.toml_path
        if self.json_path.exists():
            return self.json_path
        return None

    def _read_toml(self, path: Path) -> Dict[str, Any]:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return data.get("touchswitch", data)

    def _read_json(self, path: Path) -> Dict[str, Any]:
        with open(path, "r") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("top-level JSON value must be an object")
        return data.get("touchswitch", data)

    def load_options(self) -> TouchswitchOptions:
        """
        Load options from the configuration directory.

        Returns:
            Validated options; defaults if no options file exists

        Raises:
            ConfigLoadError: If the file cannot be parsed or values are invalid
        """
        path = self.active_path
        if path is None:
            logger.debug(f"No options file in {self.config_dir}, using defaults")
            return TouchswitchOptions()

        try:
            if path.suffix == ".toml":
                data = self._read_toml(path)
            else:
                data = self._read_json(path)
        except (OSError, tomllib.TOMLDecodeError, json.JSONDecodeError, ValueError) as e:
            raise ConfigLoadError(str(path), str(e))

        try:
            options = TouchswitchOptions(**data)
        except ValidationError as e:
            raise ConfigLoadError(str(path), str(e), code=ErrorCode.CONFIG_INVALID)

        logger.info(f"Loaded options from {path}")
        return options
