"""Mini README: Typed outcomes returned by synchronisation operations.

Structure:
    * SyncOutcome - success, not found, failed, or skipped.
    * SyncResult - outcome plus the affected record and failure details.

Callers decide how to present an outcome; the controller never raises for
remote failures and never notifies the user itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from ..finance.records import Transaction


class SyncOutcome(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class SyncResult:
    """Result of a load, create, edit or delete intent."""

    outcome: SyncOutcome
    record: Optional[Transaction] = None
    reason: Optional[str] = None
    error_code: Optional[str] = None
    count: int = 0

    @property
    def ok(self) -> bool:
        return self.outcome is SyncOutcome.SUCCESS

    @classmethod
    def success(cls, record: Optional[Transaction] = None, count: int = 0) -> "SyncResult":
        return cls(SyncOutcome.SUCCESS, record=record, count=count)

    @classmethod
    def not_found(cls, record: Optional[Transaction], reason: str) -> "SyncResult":
        return cls(SyncOutcome.NOT_FOUND, record=record, reason=reason)

    @classmethod
    def failed(
        cls, record: Optional[Transaction], code: str, reason: str, count: int = 0
    ) -> "SyncResult":
        return cls(SyncOutcome.FAILED, record=record, reason=reason, error_code=code, count=count)

    @classmethod
    def skipped(cls, reason: str) -> "SyncResult":
        return cls(SyncOutcome.SKIPPED, reason=reason)

    def as_dict(self) -> Dict[str, object]:
        return {
            "outcome": self.outcome.value,
            "record": self.record.as_dict() if self.record else None,
            "reason": self.reason,
            "error_code": self.error_code,
            "count": self.count,
        }
