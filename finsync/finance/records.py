"""Mini README: Transaction records mirrored from the remote document store.

Structure:
    * TransactionType - enum representing income versus expense entries.
    * Transaction - dataclass storing a single income or expense record.
    * coerce_amount / parse_date - form-style coercion helpers.

Remote documents use camelCase keys (``createdAt``) and may carry server
timestamp objects. ``Transaction.from_document`` is the single place where
those are translated into plain Python values so the rest of the package only
deals with ``Transaction`` instances.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class TransactionType(str, Enum):
    """Enumerate the supported transaction categories."""

    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def from_str(cls, value: object) -> "TransactionType":
        """Coerce arbitrary casing into a valid transaction type."""

        if isinstance(value, cls):
            return value
        try:
            normalised = str(value).strip().lower()
            return cls(normalised)
        except ValueError as error:
            raise ValueError(f"Unsupported transaction type: {value}") from error


@dataclass(slots=True)
class Transaction:
    """Represent a transaction record as held in local state."""

    transaction_id: str
    transaction_type: TransactionType
    amount: float
    category: str
    note: Optional[str] = None
    occurred_on: Optional[date] = None
    created_at: Optional[str] = None

    @property
    def is_income(self) -> bool:
        return self.transaction_type is TransactionType.INCOME

    @classmethod
    def from_document(cls, document_id: str, data: Mapping[str, Any]) -> "Transaction":
        """Build a record from a remote document payload."""

        raw_date = data.get("date")
        return cls(
            transaction_id=str(data.get("id") or document_id),
            transaction_type=TransactionType.from_str(data.get("type", "")),
            amount=coerce_amount(data.get("amount", 0)),
            category=str(data.get("category") or ""),
            note=data.get("note"),
            occurred_on=_document_date(document_id, raw_date),
            created_at=timestamp_to_iso(data.get("createdAt")),
        )

    def to_document(self) -> Dict[str, object]:
        """Export the editable payload written to the remote store."""

        return {
            "id": self.transaction_id,
            "type": self.transaction_type.value,
            "amount": self.amount,
            "category": self.category,
            "note": self.note,
            "date": self.occurred_on.isoformat() if self.occurred_on else None,
        }

    def as_dict(self) -> Dict[str, object]:
        """Export the transaction with serialisable values."""

        return {
            "transaction_id": self.transaction_id,
            "transaction_type": self.transaction_type.value,
            "amount": self.amount,
            "category": self.category,
            "note": self.note,
            "occurred_on": self.occurred_on.isoformat() if self.occurred_on else None,
            "created_at": self.created_at,
        }


def _document_date(document_id: str, value: object) -> Optional[date]:
    """Parse a stored display date; unreadable dates leave the record undated."""

    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as error:
        LOGGER.warning("Ignoring unreadable date on document %s: %s", document_id, error)
        return None


def coerce_amount(value: object) -> float:
    """Numeric coercion mirroring form inputs: blanks become zero."""

    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as error:
        raise ValueError(f"Amount must be numeric, got {value!r}") from error
    if amount < 0:
        raise ValueError("Amount must be non-negative")
    return amount


def parse_date(value: object) -> date:
    """Parse ISO formatted strings or date objects safely."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if "T" in text:
            # Stored dates may be full ISO timestamps.
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    raise ValueError("Dates must be provided as ISO strings or date/datetime instances.")


def timestamp_to_iso(value: object) -> Optional[str]:
    """Convert a server timestamp into an ISO string, ``None`` when absent."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str):
        return value
    LOGGER.debug("Ignoring unsupported timestamp value %r", value)
    return None
