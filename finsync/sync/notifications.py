"""Mini README: User-facing notification channel (toasts).

Structure:
    * Notification - level and message of a single toast.
    * Notifier - bounded history of toasts drained by the interface.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, List

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Notification:
    level: str
    message: str


class Notifier:
    """Collect toasts until the interface drains them."""

    def __init__(self, history: int = 20) -> None:
        self._pending: Deque[Notification] = deque(maxlen=history)

    def success(self, message: str) -> Notification:
        notification = Notification(level="success", message=message)
        self._pending.append(notification)
        LOGGER.info("Toast: %s", message)
        return notification

    @property
    def pending(self) -> List[Notification]:
        return list(self._pending)

    def drain(self) -> List[Notification]:
        """Return and clear queued notifications, oldest first."""

        drained = list(self._pending)
        self._pending.clear()
        return drained
