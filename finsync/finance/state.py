"""Mini README: Observable in-memory state for mirrored transactions.

Structure:
    * AddBatch / RemoveOne / UpdateOne / SetDerivedSalary - action payloads.
    * LocalStateStore - owns the local collection and the derived salary.

State only changes through ``dispatch``. Listeners registered with
``subscribe`` are notified after every dispatch so views can re-render. The
store never talks to the network; keeping it consistent with the remote
copy is the synchronisation controller's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from ..logging_utils import get_logger
from .records import Transaction, TransactionType

LOGGER = get_logger(__name__)

MUTABLE_FIELDS = frozenset(
    {"transaction_type", "amount", "category", "note", "created_at"}
)


@dataclass(frozen=True)
class AddBatch:
    records: Tuple[Transaction, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "records", tuple(self.records))


@dataclass(frozen=True)
class RemoveOne:
    transaction_id: str


@dataclass(frozen=True)
class UpdateOne:
    transaction_id: str
    fields: Dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class SetDerivedSalary:
    amount: float


Action = Union[AddBatch, RemoveOne, UpdateOne, SetDerivedSalary]
Listener = Callable[["LocalStateStore"], None]


class LocalStateStore:
    """Hold the local transaction collection and derived salary scalar."""

    def __init__(self) -> None:
        self._records: Dict[str, Transaction] = {}
        self._salary: Optional[float] = None
        self._listeners: List[Listener] = []

    def __len__(self) -> int:
        return len(self._records)

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        """Records in insertion order."""

        return tuple(self._records.values())

    @property
    def salary(self) -> Optional[float]:
        return self._salary

    def get(self, transaction_id: str) -> Optional[Transaction]:
        return self._records.get(transaction_id)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener and return a callable removing it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> None:
        """Apply an action and notify listeners."""

        if isinstance(action, AddBatch):
            self._add_batch(action.records)
        elif isinstance(action, RemoveOne):
            self._remove_one(action.transaction_id)
        elif isinstance(action, UpdateOne):
            self._update_one(action.transaction_id, action.fields)
        elif isinstance(action, SetDerivedSalary):
            self._salary = float(action.amount)
            LOGGER.debug("Derived salary set to %.2f", self._salary)
        else:
            raise TypeError(f"Unsupported action: {action!r}")

        for listener in list(self._listeners):
            listener(self)

    def _add_batch(self, records: Iterable[Transaction]) -> None:
        count = 0
        for record in records:
            # dict assignment keeps the original slot for known ids
            self._records[record.transaction_id] = record
            count += 1
        LOGGER.debug("Added batch of %s transactions (total %s)", count, len(self._records))

    def _remove_one(self, transaction_id: str) -> None:
        if self._records.pop(transaction_id, None) is None:
            LOGGER.warning("Ignoring removal of unknown transaction %s", transaction_id)

    def _update_one(self, transaction_id: str, fields: Dict[str, object]) -> None:
        unsupported = set(fields) - MUTABLE_FIELDS
        if unsupported:
            raise ValueError(f"Fields cannot be updated: {sorted(unsupported)}")
        current = self._records.get(transaction_id)
        if current is None:
            LOGGER.warning("Ignoring update of unknown transaction %s", transaction_id)
            return
        changes = dict(fields)
        if "transaction_type" in changes:
            changes["transaction_type"] = TransactionType.from_str(changes["transaction_type"])
        self._records[transaction_id] = replace(current, **changes)
