"""
touchswitch daemon

Connects to Sway, feeds window/workspace/output events into the session
controller and maps ``touchswitch:*`` tick messages to switcher commands.
Bind them in the Sway config, e.g.::

    bindsym $mod+Tab exec swaymsg -t send_tick touchswitch:toggle

Sway IPC carries no pointer or touch input, so gestures are not driven from
here.
"""
# Module can be run with: python -m touchswitch

import asyncio
import logging
import os
import signal
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from i3ipc.aio import Connection

from .config import ConfigLoader, FileWatcher
from .constants import TICK_PREFIX, ConfigPaths
from .errors import ConfigLoadError, SwayIPCError
from .frame_clock import FrameClock
from .overlay import IconOverlayTracker, TitleOverlayTracker
from .session import SessionController
from .sway import SwayDesktop

logger = logging.getLogger(__name__)


class TouchswitchDaemon:
    """Runs one switcher session against the focused Sway output."""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize the daemon.

        Args:
            config_dir: Configuration directory (defaults to ~/.config/touchswitch)
        """
        self.config_dir = config_dir or ConfigPaths.CONFIG_DIR
        self.loader = ConfigLoader(self.config_dir)
        self.sway: Optional[Connection] = None
        self.running = False

        self.desktop = SwayDesktop()
        self.session = SessionController(self.desktop, self._load_options_or_defaults())
        self.overlays = TitleOverlayTracker(self.session)
        self.icons = IconOverlayTracker(self.session)
        self.frame_clock = FrameClock(on_frame=self.after_update)
        self.frame_clock.attach(self.session)

        self.file_watcher: Optional[FileWatcher] = None
        self._frame_task: Optional[asyncio.Task] = None

        self.commands: Dict[str, Callable[[], object]] = {
            "toggle": self.session.toggle,
            "left": lambda: self.session.step_selection(-1),
            "right": lambda: self.session.step_selection(1),
            "enter": self.session.confirm,
            "relayout": self.session.request_relayout,
            "cancel": self.session.grab_lost,
        }

    def _load_options_or_defaults(self):
        try:
            return self.loader.load_options()
        except ConfigLoadError as e:
            logger.error(f"{e.message}; using default options")
            return None

    async def start(self):
        """Start the daemon and run until the connection closes."""
        logger.info("Starting touchswitch daemon")

        try:
            self.sway = await Connection(auto_reconnect=True).connect()
            logger.info("Connected to Sway IPC")
            self.desktop.conn = self.sway
            await self.desktop.refresh()

            self.file_watcher = FileWatcher(
                config_dir=self.config_dir,
                reload_callback=self._on_config_file_changed,
                debounce_ms=500
            )
            self.file_watcher.start()

            self._frame_task = asyncio.create_task(self.frame_clock.run())
            await self._subscribe_events()

            self.running = True
            logger.info("Daemon started successfully")

            await self._run_event_loop()

        except Exception as e:
            logger.error(f"Failed to start daemon: {e}")
            raise

    async def stop(self):
        """Stop the daemon, ending any running session."""
        logger.info("Stopping daemon...")
        self.running = False

        self.session.finalize()
        await self.after_update()

        if self.file_watcher:
            self.file_watcher.stop()

        self.frame_clock.stop()
        if self._frame_task:
            await self._frame_task

        if self.sway:
            self.sway.main_quit()

        logger.info("Daemon stopped")

    async def _subscribe_events(self):
        """Subscribe to Sway events."""
        self.sway.on('window::new', self._on_window_new)
        self.sway.on('window::close', self._on_window_close)
        self.sway.on('window::move', self._on_window_move)
        self.sway.on('workspace::focus', self._on_workspace_focus)
        self.sway.on('output', self._on_output_change)
        self.sway.on('tick', self._on_tick)

        logger.info("Subscribed to Sway events")

    async def after_update(self):
        """Send queued compositor commands and route notifications to overlays."""
        await self.desktop.flush()
        notifications = self.session.notifications.drain()
        self.overlays.consume(notifications)
        self.icons.consume(notifications)

    async def _refresh(self) -> bool:
        try:
            await self.desktop.refresh()
            return True
        except SwayIPCError as e:
            logger.error(f"{e.message}")
            return False

    async def _on_window_new(self, sway, event):
        """Handle window::new event."""
        try:
            if await self._refresh():
                self.session.window_mapped(event.container.id)
            await self.after_update()
        except Exception as e:
            logger.error(f"Error handling window::new event: {e}")

    async def _on_window_close(self, sway, event):
        """Handle window::close event."""
        try:
            if await self._refresh():
                self.session.window_unmapped(event.container.id)
            await self.after_update()
        except Exception as e:
            logger.error(f"Error handling window::close event: {e}")

    async def _on_window_move(self, sway, event):
        """Handle window::move event."""
        try:
            if await self._refresh():
                self.session.window_geometry_changed(event.container.id)
            await self.after_update()
        except Exception as e:
            logger.error(f"Error handling window::move event: {e}")

    async def _on_workspace_focus(self, sway, event):
        """Handle workspace::focus event."""
        try:
            if await self._refresh():
                self.session.workspace_changed()
            await self.after_update()
        except Exception as e:
            logger.error(f"Error handling workspace::focus event: {e}")

    async def _on_output_change(self, sway, event):
        """Handle output change event."""
        try:
            logger.info("Output configuration changed")
            if await self._refresh():
                self.session.workarea_changed()
            await self.after_update()
        except Exception as e:
            logger.error(f"Error handling output change: {e}")

    async def _on_tick(self, sway, event):
        """Handle tick event carrying a ``touchswitch:<command>`` payload."""
        payload = event.payload or ""
        if getattr(event, "first", False) or not payload.startswith(TICK_PREFIX):
            return

        try:
            await self.handle_command(payload[len(TICK_PREFIX):])
        except Exception as e:
            logger.error(f"Error handling tick '{payload}': {e}")

    async def handle_command(self, name: str) -> bool:
        """
        Run a switcher command.

        Args:
            name: One of toggle, left, right, enter, relayout, cancel

        Returns:
            True if the command is known
        """
        command = self.commands.get(name.strip().lower())
        if command is None:
            logger.warning(f"Unknown command: {name}")
            return False

        if not await self._refresh():
            return True

        logger.debug(f"Running command {name}")
        command()
        await self.after_update()
        return True

    async def _on_config_file_changed(self, files: List[str]):
        """
        Handle configuration file change event from file watcher.

        Args:
            files: List of changed file paths
        """
        try:
            logger.info(f"Configuration files changed: {len(files)} files")
            options = self.loader.load_options()
        except ConfigLoadError as e:
            logger.error(f"Options reload failed, keeping current options: {e.message}")
            return

        self.session.update_options(options)
        await self.after_update()
        logger.info("Options auto-reloaded successfully")

    async def _run_event_loop(self):
        """Run main event loop."""
        try:
            await self.sway.main()
        except asyncio.CancelledError:
            logger.info("Event loop cancelled")
        except Exception as e:
            logger.error(f"Event loop error: {e}")


def setup_logging() -> None:
    """Setup logging to stderr."""
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    handler = logging.StreamHandler(sys.stderr)
    formatter = logging.Formatter(
        "%(levelname)s [%(name)s] %(message)s"
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logger.info(f"Logging configured: level={log_level}")


async def main():
    """Main entry point."""
    setup_logging()
    daemon = TouchswitchDaemon()

    loop = asyncio.get_running_loop()

    def signal_handler():
        logger.info("Received shutdown signal")
        asyncio.create_task(daemon.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler)

    try:
        await daemon.start()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


def run():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
