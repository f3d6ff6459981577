"""
Tests for options loading and the options file watcher.
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from touchswitch.config import ConfigLoader
from touchswitch.config.file_watcher import ConfigFileHandler, FileWatcher
from touchswitch.errors import ConfigLoadError, ErrorCode
from touchswitch.models import (
    BackgroundAction,
    DragAction,
    IconPosition,
    TitlePosition,
    TouchswitchOptions,
)


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_defaults_without_file(self, temp_config_dir):
        loader = ConfigLoader(temp_config_dir)

        assert loader.active_path is None
        assert loader.load_options() == TouchswitchOptions()

    def test_toml_table(self, temp_config_dir):
        (temp_config_dir / "touchswitch.toml").write_text(
            "[touchswitch]\n"
            "spacing = 40\n"
            "window_scale = 0.6\n"
            "pull_up = \"Minimize\"\n"
            "title_position = \"top\"\n"
        )

        options = ConfigLoader(temp_config_dir).load_options()

        assert options.spacing == 40
        assert options.window_scale == 0.6
        assert options.resolve_drag_action(upwards=True) == DragAction.MINIMIZE
        assert options.title_position == TitlePosition.TOP

    def test_toml_top_level(self, temp_config_dir):
        (temp_config_dir / "touchswitch.toml").write_text("minimize_others = true\n")

        assert ConfigLoader(temp_config_dir).load_options().minimize_others

    def test_json_file(self, temp_config_dir):
        (temp_config_dir / "touchswitch.json").write_text(json.dumps({"background_touch": "showdesktop"}))

        options = ConfigLoader(temp_config_dir).load_options()

        assert options.resolve_background_action() == BackgroundAction.SHOW_DESKTOP

    def test_toml_preferred_over_json(self, temp_config_dir):
        (temp_config_dir / "touchswitch.toml").write_text("spacing = 1\n")
        (temp_config_dir / "touchswitch.json").write_text(json.dumps({"spacing": 2}))

        loader = ConfigLoader(temp_config_dir)

        assert loader.active_path.name == "touchswitch.toml"
        assert loader.load_options().spacing == 1

    def test_invalid_value(self, temp_config_dir):
        (temp_config_dir / "touchswitch.toml").write_text("flick_motion = 1.5\n")

        with pytest.raises(ConfigLoadError) as exc_info:
            ConfigLoader(temp_config_dir).load_options()

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID
        assert "touchswitch.toml" in exc_info.value.to_dict()["context"]["file_path"]

    def test_icon_options(self, temp_config_dir):
        (temp_config_dir / "touchswitch.toml").write_text(
            "[touchswitch]\n"
            "icon_overlay = false\n"
            "icon_position = \"below\"\n"
            "icon_size = 48\n"
            "icon_theme = \"Papirus\"\n"
        )

        options = ConfigLoader(temp_config_dir).load_options()

        assert not options.icon_overlay
        assert options.icon_position == IconPosition.BELOW
        assert options.icon_size == 48
        assert options.icon_theme == "Papirus"

    @pytest.mark.parametrize("line", ["icon_size = 0\n", "icon_position = \"left\"\n"])
    def test_invalid_icon_option(self, temp_config_dir, line):
        (temp_config_dir / "touchswitch.toml").write_text(line)

        with pytest.raises(ConfigLoadError) as exc_info:
            ConfigLoader(temp_config_dir).load_options()

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID

    def test_malformed_toml(self, temp_config_dir):
        (temp_config_dir / "touchswitch.toml").write_text("spacing = = 3\n")

        with pytest.raises(ConfigLoadError) as exc_info:
            ConfigLoader(temp_config_dir).load_options()

        assert exc_info.value.code == ErrorCode.CONFIG_LOAD_FAILED

    def test_json_must_be_object(self, temp_config_dir):
        (temp_config_dir / "touchswitch.json").write_text("[1, 2]")

        with pytest.raises(ConfigLoadError):
            ConfigLoader(temp_config_dir).load_options()

    def test_unknown_action_is_kept_and_resolves_to_noop(self, temp_config_dir):
        (temp_config_dir / "touchswitch.toml").write_text("pull_down = \"shred\"\n")

        options = ConfigLoader(temp_config_dir).load_options()

        assert options.pull_down == "shred"
        assert options.resolve_drag_action(upwards=False) == DragAction.NONE


class TestConfigFileHandler:
    """Tests for debounced reloads."""

    @pytest.mark.asyncio
    async def test_changes_are_debounced(self):
        callback = AsyncMock()
        handler = ConfigFileHandler(callback, asyncio.get_running_loop(), debounce_ms=10)

        for _ in range(3):
            handler.on_modified(MagicMock(is_directory=False, src_path="/tmp/touchswitch.toml"))
        await asyncio.sleep(0.1)

        callback.assert_awaited_once_with(["/tmp/touchswitch.toml"])

    @pytest.mark.asyncio
    async def test_ignores_unrelated_files(self):
        callback = AsyncMock()
        handler = ConfigFileHandler(callback, asyncio.get_running_loop(), debounce_ms=10)

        handler.on_modified(MagicMock(is_directory=False, src_path="/tmp/notes.txt"))
        handler.on_modified(MagicMock(is_directory=False, src_path="/tmp/.touchswitch.toml"))
        handler.on_modified(MagicMock(is_directory=True, src_path="/tmp/dir.toml"))
        await asyncio.sleep(0.05)

        callback.assert_not_awaited()


class TestFileWatcher:
    """Tests for FileWatcher start/stop."""

    @pytest.mark.asyncio
    async def test_start_and_stop(self, temp_config_dir):
        watcher = FileWatcher(temp_config_dir, AsyncMock(), debounce_ms=10)

        watcher.start()
        assert watcher.is_running()

        watcher.stop()
        assert not watcher.is_running()

    @pytest.mark.asyncio
    async def test_missing_directory_not_watched(self, tmp_path):
        watcher = FileWatcher(tmp_path / "absent", AsyncMock())

        watcher.start()

        assert not watcher.is_running()
