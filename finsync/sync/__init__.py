"""Mini README: Synchronisation layer between remote store and local state.

``controller`` implements the load and mutation intents, ``results`` the
typed outcomes they return, and ``notifications`` the toast channel the
interface uses to acknowledge successful intents.
"""

from .controller import SyncController, derive_salary
from .notifications import Notification, Notifier
from .results import SyncOutcome, SyncResult

__all__ = [
    "Notification",
    "Notifier",
    "SyncController",
    "SyncOutcome",
    "SyncResult",
    "derive_salary",
]
