"""Mini README: Presentation state for the recent transactions list.

Structure:
    * EditDraft - pending field values for the single record being edited.
    * NoActiveDraftError - raised when a draft operation has nothing to act on.
    * TransactionListView - display ordering, inline edit draft, and intents.

The view owns at most one ``EditDraft``; starting another edit replaces it.
Intents go through the ``SyncController`` and the view decides which results
deserve a toast: only successful intents are acknowledged.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Dict, List, Optional

from ..finance.records import Transaction, TransactionType, coerce_amount
from ..logging_utils import get_logger
from ..sync.controller import SyncController
from ..sync.notifications import Notifier
from ..sync.results import SyncResult

LOGGER = get_logger(__name__)

DRAFT_FIELDS = ("transaction_type", "amount", "category", "note")


class NoActiveDraftError(LookupError):
    """No record is currently being edited."""


@dataclass(slots=True)
class EditDraft:
    """Pending values for the record being edited inline."""

    transaction_id: str
    transaction_type: TransactionType
    amount: float
    category: str
    note: Optional[str]

    @classmethod
    def from_record(cls, record: Transaction) -> "EditDraft":
        return cls(
            transaction_id=record.transaction_id,
            transaction_type=record.transaction_type,
            amount=record.amount,
            category=record.category,
            note=record.note,
        )

    def as_dict(self) -> Dict[str, object]:
        return {
            "transaction_id": self.transaction_id,
            "transaction_type": self.transaction_type.value,
            "amount": self.amount,
            "category": self.category,
            "note": self.note,
        }


class TransactionListView:
    """Drive the transaction list: ordering, inline editing, and intents."""

    def __init__(self, controller: SyncController, notifier: Notifier) -> None:
        self._controller = controller
        self._notifier = notifier
        self._draft: Optional[EditDraft] = None

    @property
    def draft(self) -> Optional[EditDraft]:
        return self._draft

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    def display_order(self) -> List[Transaction]:
        """Records sorted by date, newest first; ties keep insertion order."""

        return sorted(
            self._controller.state.transactions,
            key=lambda record: (record.occurred_on is not None, record.occurred_on or date.min),
            reverse=True,
        )

    def _require(self, transaction_id: str) -> Transaction:
        record = self._controller.state.get(transaction_id)
        if record is None:
            raise KeyError(f"Transaction {transaction_id} not found")
        return record

    def begin_edit(self, transaction_id: str) -> EditDraft:
        """Open the inline editor for a record, discarding any other draft."""

        self._draft = EditDraft.from_record(self._require(transaction_id))
        return self._draft

    def update_draft(self, **fields: object) -> EditDraft:
        """Set pending values. Only the amount and type are coerced."""

        if self._draft is None:
            raise NoActiveDraftError("No transaction is being edited")
        unknown = set(fields) - set(DRAFT_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be edited: {sorted(unknown)}")
        changes = dict(fields)
        if "amount" in changes:
            changes["amount"] = coerce_amount(changes["amount"])
        if "transaction_type" in changes:
            changes["transaction_type"] = TransactionType.from_str(changes["transaction_type"])
        self._draft = replace(self._draft, **changes)
        return self._draft

    def cancel_edit(self) -> None:
        self._draft = None

    async def save_edit(self) -> SyncResult:
        """Submit the draft merged over its record and close the editor."""

        draft = self._draft
        if draft is None:
            raise NoActiveDraftError("No transaction is being edited")
        base = self._controller.state.get(draft.transaction_id) or Transaction(
            transaction_id=draft.transaction_id,
            transaction_type=draft.transaction_type,
            amount=draft.amount,
            category=draft.category,
        )
        merged = replace(
            base,
            transaction_type=draft.transaction_type,
            amount=draft.amount,
            category=draft.category,
            note=draft.note,
        )
        self._draft = None
        result = await self._controller.edit(merged)
        if result.ok:
            self._notifier.success("Transaction updated successfully!")
        return result

    async def delete(self, transaction_id: str) -> SyncResult:
        if self._controller.user is None:
            return SyncResult.skipped("no authenticated user")
        result = await self._controller.delete(self._require(transaction_id))
        if result.ok:
            self._notifier.success("Transaction deleted successfully!")
        return result

    async def create(
        self,
        transaction_type: object,
        amount: object,
        category: str,
        note: Optional[str] = None,
        occurred_on: Optional[object] = None,
    ) -> SyncResult:
        result = await self._controller.create(
            transaction_type, amount, category, note=note, occurred_on=occurred_on
        )
        if result.ok:
            self._notifier.success("Transaction added successfully!")
        return result

    async def load(self) -> SyncResult:
        """Fetch-on-mount: seed local state when it is still empty."""

        result = await self._controller.initial_load()
        LOGGER.debug("Initial load finished with outcome %s", result.outcome.value)
        return result
