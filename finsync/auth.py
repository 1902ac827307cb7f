"""Mini README: Signed-in user holder for the synchronisation layer.

Structure:
    * UserScope - identity whose collection records are read from and written to.
    * AuthSession - tracks the current user; sign-in UI lives elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class UserScope:
    """Authenticated user identity."""

    uid: str
    email: Optional[str] = None


class AuthSession:
    """Hold the currently authenticated user, if any."""

    def __init__(self, user: Optional[UserScope] = None) -> None:
        self._user = user

    @property
    def current_user(self) -> Optional[UserScope]:
        return self._user

    def sign_in(self, uid: str, email: Optional[str] = None) -> UserScope:
        if not uid or not uid.strip():
            raise ValueError("User id is required to sign in")
        self._user = UserScope(uid=uid.strip(), email=email)
        LOGGER.info("User %s signed in", self._user.uid)
        return self._user

    def sign_out(self) -> None:
        if self._user is not None:
            LOGGER.info("User %s signed out", self._user.uid)
        self._user = None
