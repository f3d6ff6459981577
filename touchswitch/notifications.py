"""Outbound notifications emitted by a switcher session.

Consumers (overlay trackers, host integrations) drain the queue at frame
boundaries instead of being called back synchronously from inside the engine.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, List, Optional

from .models import WindowId


class NotificationKind(Enum):
    """Kinds of session notifications."""
    TRANSFORMER_ADDED = "transformer-added"
    TRANSFORMER_REMOVED = "transformer-removed"
    SESSION_STARTED = "session-started"
    SESSION_ENDED = "session-ended"
    UPDATE_REQUESTED = "update-requested"


@dataclass(frozen=True)
class Notification:
    """Single notification; ``window_id`` is set for transformer events."""
    kind: NotificationKind
    window_id: Optional[WindowId] = None


class NotificationQueue:
    """FIFO of notifications awaiting consumption."""

    def __init__(self) -> None:
        self._pending: Deque[Notification] = deque()

    def push(self, kind: NotificationKind, window_id: Optional[WindowId] = None) -> None:
        self._pending.append(Notification(kind, window_id))

    def drain(self) -> List[Notification]:
        """Remove and return all pending notifications in emission order."""
        drained = list(self._pending)
        self._pending.clear()
        return drained

    def __len__(self) -> int:
        return len(self._pending)
