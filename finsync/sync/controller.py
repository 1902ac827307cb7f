"""Mini README: Synchronisation between the remote store and local state.

Structure:
    * derive_salary - choose the salary scalar from a loaded batch.
    * SyncController - initial load plus create, edit and delete intents.

Every mutation is remote-first: the local state is only touched after the
remote call succeeded. A record stored as several documents is mirrored one
document at a time, so a failure part way reports how many already went
through. Records are addressed directly through ``RemoteStore.find_by_id``
rather than by re-running a filtered list query. Remote failures are logged
with their code and reported as a ``SyncResult``; they are never raised to
the caller.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from ..auth import AuthSession, UserScope
from ..configuration import SalaryPolicy
from ..finance.records import Transaction, TransactionType, coerce_amount, parse_date
from ..finance.state import AddBatch, LocalStateStore, RemoveOne, SetDerivedSalary, UpdateOne
from ..logging_utils import get_logger
from ..remote.base import SERVER_TIMESTAMP, RemoteDocument, RemoteStore, RemoteStoreError
from .results import SyncResult

LOGGER = get_logger(__name__)


def derive_salary(
    records: Iterable[Transaction], policy: SalaryPolicy = SalaryPolicy.LAST_IN_BATCH
) -> Optional[float]:
    """Return the salary implied by ``records`` or ``None`` without income.

    ``records`` are expected newest first, as returned by the initial load, so
    ``MOST_RECENT`` picks the first income and ``LAST_IN_BATCH`` the last.
    """

    incomes = [record.amount for record in records if record.is_income]
    if not incomes:
        return None
    if policy is SalaryPolicy.SUM:
        return sum(incomes)
    if policy is SalaryPolicy.MOST_RECENT:
        return incomes[0]
    return incomes[-1]


class SyncController:
    """Mirror remote transaction documents into a ``LocalStateStore``."""

    def __init__(
        self,
        store: RemoteStore,
        state: LocalStateStore,
        auth: AuthSession,
        salary_policy: SalaryPolicy = SalaryPolicy.LAST_IN_BATCH,
    ) -> None:
        self._store = store
        self._state = state
        self._auth = auth
        self._salary_policy = salary_policy

    @property
    def state(self) -> LocalStateStore:
        return self._state

    @property
    def user(self) -> Optional[UserScope]:
        return self._auth.current_user

    def _convert(self, documents: Iterable[RemoteDocument]) -> List[Transaction]:
        records = []
        for document in documents:
            try:
                records.append(Transaction.from_document(document.document_id, document.data))
            except ValueError as error:
                LOGGER.warning("Skipping malformed document %s: %s", document.document_id, error)
        return records

    async def initial_load(self) -> SyncResult:
        """Seed local state from the remote collection once per session."""

        user = self._auth.current_user
        if user is None:
            return SyncResult.skipped("no authenticated user")
        if len(self._state) > 0:
            LOGGER.debug("Local state already holds %s records; skipping fetch", len(self._state))
            return SyncResult.skipped("local state already loaded")

        try:
            documents = await self._store.list(user.uid)
        except RemoteStoreError as error:
            LOGGER.error("Failed to fetch transactions: %s %s", error.code, error.message)
            return SyncResult.failed(None, error.code, error.message)

        records = self._convert(documents)
        self._state.dispatch(AddBatch(records))
        salary = derive_salary(records, self._salary_policy)
        if salary is not None:
            self._state.dispatch(SetDerivedSalary(salary))
        LOGGER.info("Loaded %s transactions for user %s", len(records), user.uid)
        return SyncResult.success(count=len(records))

    async def create(
        self,
        transaction_type: object,
        amount: object,
        category: str,
        note: Optional[str] = None,
        occurred_on: Optional[object] = None,
    ) -> SyncResult:
        """Insert a record remotely, then mirror the stored copy locally.

        Raises ``ValueError`` for an invalid type, amount or date.
        """

        kind = TransactionType.from_str(transaction_type)
        value = coerce_amount(amount)
        day: Optional[date] = parse_date(occurred_on) if occurred_on else None

        user = self._auth.current_user
        if user is None:
            return SyncResult.skipped("no authenticated user")

        fields = {
            "type": kind.value,
            "amount": value,
            "category": category,
            "note": note,
            "date": day.isoformat() if day else None,
            "createdAt": SERVER_TIMESTAMP,
        }
        try:
            document = await self._store.insert(user.uid, fields)
        except RemoteStoreError as error:
            LOGGER.error("Error adding transaction: %s %s", error.code, error.message)
            return SyncResult.failed(None, error.code, error.message)

        record = Transaction.from_document(document.document_id, document.data)
        self._state.dispatch(AddBatch([record]))
        if record.is_income:
            self._state.dispatch(SetDerivedSalary(record.amount))
        return SyncResult.success(record, count=1)

    async def delete(self, record: Transaction) -> SyncResult:
        """Delete ``record`` remotely and drop it from local state.

        Each matching document is removed locally as soon as its remote delete
        succeeds. If a later match fails the result is ``FAILED`` and ``count``
        holds the number of documents already deleted, so local state may
        already be missing the record.
        """

        user = self._auth.current_user
        if user is None:
            return SyncResult.skipped("no authenticated user")

        deleted = 0
        try:
            matches = await self._store.find_by_id(user.uid, record.transaction_id)
            if not matches:
                LOGGER.warning("No matching document found for deletion: %s", record.transaction_id)
                return SyncResult.not_found(record, "no matching document")
            for match in matches:
                await self._store.delete(match.ref)
                self._state.dispatch(RemoveOne(record.transaction_id))
                deleted += 1
        except RemoteStoreError as error:
            LOGGER.error(
                "Error deleting transaction after %s of its documents: %s %s",
                deleted,
                error.code,
                error.message,
            )
            return SyncResult.failed(record, error.code, error.message, count=deleted)
        return SyncResult.success(record, count=len(matches))

    async def edit(self, record: Transaction) -> SyncResult:
        """Overwrite the mutable fields of ``record`` remotely, then locally.

        The identifier is never written. The server timestamp is refreshed and
        an income record also becomes the derived salary.
        """

        user = self._auth.current_user
        if user is None:
            return SyncResult.skipped("no authenticated user")

        remote_fields = {
            "type": record.transaction_type.value,
            "amount": record.amount,
            "category": record.category,
            "note": record.note,
            "createdAt": SERVER_TIMESTAMP,
        }
        try:
            matches = await self._store.find_by_id(user.uid, record.transaction_id)
            if not matches:
                LOGGER.warning("No matching document found for editing: %s", record.transaction_id)
                return SyncResult.not_found(record, "no matching document")
            for match in matches:
                stamp = await self._store.update(match.ref, remote_fields)
                self._state.dispatch(
                    UpdateOne(
                        record.transaction_id,
                        {
                            "transaction_type": record.transaction_type,
                            "amount": record.amount,
                            "category": record.category,
                            "note": record.note,
                            "created_at": stamp.isoformat(),
                        },
                    )
                )
                if record.is_income:
                    self._state.dispatch(SetDerivedSalary(record.amount))
        except RemoteStoreError as error:
            LOGGER.error("Error updating transaction: %s %s", error.code, error.message)
            return SyncResult.failed(record, error.code, error.message)
        return SyncResult.success(self._state.get(record.transaction_id) or record, count=len(matches))
