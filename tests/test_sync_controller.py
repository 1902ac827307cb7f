"""Mini README: Tests for the synchronisation controller.

Structure:
    * initial load - ordering, salary derivation, idempotence and guards.
    * delete / edit intents - remote-first mutation and not-found handling.
    * create intent - stored copy mirrored locally.
    * failure handling - remote errors reported as results, state untouched.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import date, datetime, timezone

import pytest

from finsync.auth import AuthSession, UserScope
from finsync.configuration import SalaryPolicy
from finsync.finance import LocalStateStore, TransactionType, summarise
from finsync.remote import DocumentRef, RemoteDocument, RemoteStoreError
from finsync.remote.providers import InMemoryStore
from finsync.sync import SyncController, SyncOutcome

USER = "user-1"
NOW = datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc)


def _stamp(minute: int) -> datetime:
    return datetime(2024, 5, 1, 12, minute, tzinfo=timezone.utc)


def _documents():
    return [
        {
            "id": "1",
            "type": "income",
            "amount": 1000,
            "category": "Salary",
            "note": "May salary",
            "date": "2024-05-01",
            "createdAt": _stamp(1),
        },
        {
            "id": "2",
            "type": "expense",
            "amount": 300,
            "category": "Rent",
            "note": None,
            "date": "2024-05-03",
            "createdAt": _stamp(2),
        },
    ]


def _build(documents=None, signed_in=True, policy=SalaryPolicy.LAST_IN_BATCH):
    store = InMemoryStore(clock=lambda: NOW)
    store.seed(USER, _documents() if documents is None else documents)
    state = LocalStateStore()
    auth = AuthSession(UserScope(uid=USER) if signed_in else None)
    return store, state, SyncController(store, state, auth, policy)


def _loaded(**kwargs):
    store, state, controller = _build(**kwargs)
    asyncio.run(controller.initial_load())
    return store, state, controller


def test_initial_load_seeds_state_newest_first() -> None:
    store, state, controller = _build()

    result = asyncio.run(controller.initial_load())

    assert result.outcome is SyncOutcome.SUCCESS
    assert result.count == 2
    assert [record.transaction_id for record in state.transactions] == ["2", "1"]
    assert state.get("1").created_at == _stamp(1).isoformat()
    assert state.salary == 1000
    assert summarise(state.transactions)["total_balance"] == 700


def test_initial_load_is_idempotent_once_state_is_populated() -> None:
    store, state, controller = _loaded()

    result = asyncio.run(controller.initial_load())

    assert result.outcome is SyncOutcome.SKIPPED
    assert store.calls["list"] == 1
    assert len(state) == 2


def test_initial_load_without_user_is_skipped() -> None:
    store, state, controller = _build(signed_in=False)

    result = asyncio.run(controller.initial_load())

    assert result.outcome is SyncOutcome.SKIPPED
    assert store.calls["list"] == 0
    assert len(state) == 0


def test_initial_load_failure_leaves_state_empty() -> None:
    store, state, controller = _build()
    store.fail_next("list", code="permission_denied")

    result = asyncio.run(controller.initial_load())

    assert result.outcome is SyncOutcome.FAILED
    assert result.error_code == "permission_denied"
    assert len(state) == 0
    assert state.salary is None


@pytest.mark.parametrize(
    "policy,expected",
    [
        (SalaryPolicy.LAST_IN_BATCH, 1000),
        (SalaryPolicy.MOST_RECENT, 2000),
        (SalaryPolicy.SUM, 3000),
    ],
)
def test_salary_policy_with_several_incomes(policy, expected) -> None:
    documents = [
        {"id": "a", "type": "income", "amount": 1000, "category": "Salary", "createdAt": _stamp(1)},
        {"id": "b", "type": "income", "amount": 2000, "category": "Bonus", "createdAt": _stamp(5)},
        {"id": "c", "type": "expense", "amount": 10, "category": "Food", "createdAt": _stamp(9)},
    ]
    _, state, _ = _loaded(documents=documents, policy=policy)

    assert state.salary == expected


def test_malformed_documents_are_skipped() -> None:
    documents = _documents() + [{"id": "bad", "type": "refund", "amount": 1, "createdAt": _stamp(7)}]
    _, state, _ = _loaded(documents=documents)

    assert sorted(record.transaction_id for record in state.transactions) == ["1", "2"]


def test_records_with_unreadable_dates_still_count() -> None:
    documents = _documents()
    documents[0]["date"] = "05/01/2024"
    _, state, _ = _loaded(documents=documents)

    assert len(state) == 2
    assert state.get("1").occurred_on is None
    assert summarise(state.transactions) == {
        "total_income": 1000,
        "total_expense": 300,
        "total_balance": 700,
    }
    assert state.salary == 1000


def test_delete_removes_record_remotely_then_locally() -> None:
    store, state, controller = _loaded()

    result = asyncio.run(controller.delete(state.get("2")))

    assert result.outcome is SyncOutcome.SUCCESS
    assert [record.transaction_id for record in state.transactions] == ["1"]
    assert summarise(state.transactions)["total_balance"] == 1000
    assert "2" not in store.documents(USER)


def test_delete_of_record_missing_remotely_is_not_found() -> None:
    store, state, controller = _loaded()
    asyncio.run(store.delete(DocumentRef(USER, "2")))

    result = asyncio.run(controller.delete(state.get("2")))

    assert result.outcome is SyncOutcome.NOT_FOUND
    assert len(state) == 2


def test_delete_failure_keeps_local_state() -> None:
    store, state, controller = _loaded()
    store.fail_next("delete")

    result = asyncio.run(controller.delete(state.get("2")))

    assert result.outcome is SyncOutcome.FAILED
    assert result.error_code == "unavailable"
    assert len(state) == 2
    assert "2" in store.documents(USER)


class _DuplicatedStore(InMemoryStore):
    """Stores record "2" as two documents and refuses to delete the copy."""

    async def find_by_id(self, user_id, transaction_id):
        matches = await super().find_by_id(user_id, transaction_id)
        if transaction_id == "2":
            matches.append(RemoteDocument(ref=DocumentRef(user_id, "2-copy"), data={"id": "2"}))
        return matches

    async def delete(self, ref):
        if ref.document_id == "2-copy":
            raise RemoteStoreError("permission_denied", "copy is read-only")
        await super().delete(ref)


def test_partial_delete_reports_documents_already_removed() -> None:
    store = _DuplicatedStore(clock=lambda: NOW)
    store.seed(USER, _documents())
    state = LocalStateStore()
    controller = SyncController(store, state, AuthSession(UserScope(uid=USER)))
    asyncio.run(controller.initial_load())

    result = asyncio.run(controller.delete(state.get("2")))

    assert result.outcome is SyncOutcome.FAILED
    assert result.error_code == "permission_denied"
    assert result.count == 1
    assert state.get("2") is None
    assert "2" not in store.documents(USER)


def test_edit_updates_four_fields_and_refreshes_timestamp() -> None:
    store, state, controller = _loaded()
    edited = replace(state.get("1"), amount=1500, note="Raise")

    result = asyncio.run(controller.edit(edited))

    assert result.outcome is SyncOutcome.SUCCESS
    record = state.get("1")
    assert record.amount == 1500
    assert record.note == "Raise"
    assert record.transaction_id == "1"
    assert record.occurred_on == date(2024, 5, 1)
    assert record.created_at == NOW.isoformat()
    assert state.salary == 1500

    stored = store.documents(USER)["1"]
    assert stored["amount"] == 1500
    assert stored["createdAt"] == NOW
    assert stored["id"] == "1"
    assert stored["date"] == "2024-05-01"


def test_edit_to_expense_keeps_salary() -> None:
    _, state, controller = _loaded()
    record_as_expense = replace(
        state.get("1"), transaction_type=TransactionType.EXPENSE, amount=50, category="Refund"
    )

    result = asyncio.run(controller.edit(record_as_expense))

    assert result.outcome is SyncOutcome.SUCCESS
    assert state.get("1").transaction_type is TransactionType.EXPENSE
    assert state.salary == 1000


def test_edit_of_record_missing_remotely_is_not_found() -> None:
    store, state, controller = _loaded()
    asyncio.run(store.delete(DocumentRef(USER, "1")))

    result = asyncio.run(controller.edit(state.get("1")))

    assert result.outcome is SyncOutcome.NOT_FOUND
    assert state.get("1").created_at == _stamp(1).isoformat()


def test_edit_failure_keeps_local_state() -> None:
    store, state, controller = _loaded()
    store.fail_next("update", code="resource_exhausted")
    record = state.get("2")

    result = asyncio.run(controller.edit(record))

    assert result.outcome is SyncOutcome.FAILED
    assert result.error_code == "resource_exhausted"
    assert state.get("2") == record


def test_create_mirrors_stored_record() -> None:
    store, state, controller = _loaded()

    result = asyncio.run(
        controller.create("income", "2500", "Freelance", note="Invoice 7", occurred_on="2024-05-10")
    )

    assert result.outcome is SyncOutcome.SUCCESS
    created = result.record
    assert state.get(created.transaction_id) == created
    assert created.created_at == NOW.isoformat()
    assert created.occurred_on == date(2024, 5, 10)
    assert state.salary == 2500
    assert store.documents(USER)[created.transaction_id]["category"] == "Freelance"


def test_create_rejects_invalid_amount() -> None:
    _, _, controller = _build()

    with pytest.raises(ValueError):
        asyncio.run(controller.create("expense", "-5", "Food"))


def test_mutations_without_user_are_skipped() -> None:
    _, state, _ = _loaded()
    record = state.get("1")
    store, _, controller = _build(signed_in=False)

    assert asyncio.run(controller.delete(record)).outcome is SyncOutcome.SKIPPED
    assert asyncio.run(controller.edit(record)).outcome is SyncOutcome.SKIPPED
    assert asyncio.run(controller.create("expense", 1, "Food")).outcome is SyncOutcome.SKIPPED
    assert store.calls["find_by_id"] == 0
