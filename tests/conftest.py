"""
Pytest configuration and fixtures for touchswitch tests.
"""

import pytest

from touchswitch.models import Geometry, TouchswitchOptions
from touchswitch.session import SessionController

from tests.fixtures.fake_desktop import FakeDesktop, RecordingFrameDriver


@pytest.fixture
def options() -> TouchswitchOptions:
    """Default options with a fixed animation duration."""
    return TouchswitchOptions(duration=100)


@pytest.fixture
def desktop() -> FakeDesktop:
    """1000x1000 work area with no windows."""
    return FakeDesktop(Geometry(0, 0, 1000, 1000))


@pytest.fixture
def three_windows(desktop) -> FakeDesktop:
    """Three 500x500 windows (ids 1, 2, 3) with window 2 focused."""
    for window_id in (1, 2, 3):
        desktop.add_window(window_id, Geometry(0, 0, 500, 500))
    desktop.focused = 2
    return desktop


@pytest.fixture
def frames() -> RecordingFrameDriver:
    return RecordingFrameDriver()


@pytest.fixture
def session(three_windows, options, frames) -> SessionController:
    """Inactive session over the three-window desktop."""
    return SessionController(three_windows, options, frames)


@pytest.fixture
def temp_config_dir(tmp_path):
    """Empty configuration directory."""
    config_dir = tmp_path / "touchswitch"
    config_dir.mkdir()
    return config_dir
