"""
Asyncio frame clock driving session ticks.

Sleeps until a redraw is requested, then ticks the session at a fixed
interval for as long as it reports that more frames are needed.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from .constants import FRAME_INTERVAL_S
from .interfaces import FrameDriver
from .session import SessionController

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class FrameClock(FrameDriver):
    """Frame driver backed by an asyncio task."""

    def __init__(
        self,
        interval_s: float = FRAME_INTERVAL_S,
        clock: Callable[[], float] = monotonic_ms,
        on_frame: Optional[Callable[[], Awaitable[None]]] = None,
    ) -> None:
        """
        Initialize the frame clock.

        Args:
            interval_s: Delay between frames while animating
            clock: Millisecond time source handed to ``SessionController.tick``
            on_frame: Awaited after every tick (e.g. to flush compositor commands)
        """
        self.interval_s = interval_s
        self.clock = clock
        self.on_frame = on_frame
        self.session: Optional[SessionController] = None
        self.frames = 0
        self._wake = asyncio.Event()
        self._running = False

    def attach(self, session: SessionController) -> None:
        self.session = session
        session.frame_driver = self

    def schedule_redraw(self) -> None:
        self._wake.set()

    async def run_frames(self) -> None:
        """Tick until the session stops asking for frames."""
        while self._running and self.session is not None:
            more = self.session.tick(self.clock())
            self.frames += 1
            if self.on_frame is not None:
                await self.on_frame()
            if not more:
                break
            await asyncio.sleep(self.interval_s)

    async def run(self) -> None:
        """Main loop; returns after :meth:`stop`."""
        self._running = True
        logger.debug("Frame clock started")

        while self._running:
            await self._wake.wait()
            self._wake.clear()
            if not self._running:
                break
            await self.run_frames()

        logger.debug(f"Frame clock stopped after {self.frames} frames")

    def stop(self) -> None:
        self._running = False
        self._wake.set()
