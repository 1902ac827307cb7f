"""Mini README: Tests for the Firestore provider against a fake async client.

Structure:
    * ordering and direct lookup with the legacy ``id`` field fallback.
    * server timestamp sentinels translated for writes.
    * SDK errors re-raised as ``RemoteStoreError``.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Dict, Optional

import pytest
from google.api_core import exceptions as google_exceptions
from google.cloud import firestore

from finsync.remote import SERVER_TIMESTAMP, DocumentRef, RemoteStoreError
from finsync.remote.providers import FirestoreStore

WRITE_TIME = datetime(2024, 6, 1, tzinfo=timezone.utc)


class FakeSnapshot:
    def __init__(self, document_id: str, data: Optional[Dict]) -> None:
        self.id = document_id
        self.exists = data is not None
        self._data = data

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeQuery:
    def __init__(self, documents: Dict[str, Dict]) -> None:
        self._documents = documents

    async def stream(self):
        for document_id, data in self._documents.items():
            yield FakeSnapshot(document_id, data)


class FakeDocument:
    def __init__(self, collection: "FakeCollection", document_id: str) -> None:
        self._collection = collection
        self.id = document_id

    async def get(self):
        return FakeSnapshot(self.id, self._collection.documents.get(self.id))

    async def set(self, data):
        self._collection.documents[self.id] = {
            key: WRITE_TIME if value is firestore.SERVER_TIMESTAMP else value for key, value in data.items()
        }

    async def delete(self):
        self._collection.documents.pop(self.id, None)

    async def update(self, data):
        if self._collection.fail_with is not None:
            raise self._collection.fail_with
        self._collection.documents[self.id].update(data)
        return SimpleNamespace(update_time=WRITE_TIME)


class FakeCollection:
    def __init__(self) -> None:
        self.documents: Dict[str, Dict] = {}
        self.fail_with: Optional[Exception] = None
        self.ordered_by = None
        self._counter = 0

    def document(self, document_id: Optional[str] = None) -> FakeDocument:
        if document_id is None:
            self._counter += 1
            document_id = f"auto-{self._counter}"
        return FakeDocument(self, document_id)

    def order_by(self, field, direction):
        self.ordered_by = (field, direction)
        ordered = sorted(self.documents.items(), key=lambda item: item[1][field], reverse=True)
        return FakeQuery(dict(ordered))

    def where(self, filter):
        return FakeQuery(
            {
                key: data
                for key, data in self.documents.items()
                if data.get(filter.field_path) == filter.value
            }
        )


class FakeClient:
    project = "demo-project"

    def __init__(self) -> None:
        self.collections: Dict[tuple, FakeCollection] = {}

    def collection(self, *path):
        return self.collections.setdefault(path, FakeCollection())


@pytest.fixture()
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture()
def store(client: FakeClient) -> FirestoreStore:
    return FirestoreStore(client=client)


def _collection(client: FakeClient) -> FakeCollection:
    return client.collection("users", "user-1", "transactions")


def test_list_orders_by_created_at_descending(client, store) -> None:
    collection = _collection(client)
    collection.documents["a"] = {"id": "a", "createdAt": datetime(2024, 1, 1, tzinfo=timezone.utc)}
    collection.documents["b"] = {"id": "b", "createdAt": datetime(2024, 2, 1, tzinfo=timezone.utc)}

    documents = asyncio.run(store.list("user-1"))

    assert [document.document_id for document in documents] == ["b", "a"]
    assert collection.ordered_by == ("createdAt", firestore.Query.DESCENDING)


def test_find_by_id_falls_back_to_stored_id_field(client, store) -> None:
    collection = _collection(client)
    collection.documents["generated"] = {"id": "txn-1", "amount": 5}

    direct = asyncio.run(store.find_by_id("user-1", "generated"))
    legacy = asyncio.run(store.find_by_id("user-1", "txn-1"))
    missing = asyncio.run(store.find_by_id("user-1", "nope"))

    assert [document.ref for document in direct] == [DocumentRef("user-1", "generated")]
    assert [document.ref for document in legacy] == [DocumentRef("user-1", "generated")]
    assert missing == []


def test_insert_and_update_translate_server_timestamps(client, store) -> None:
    inserted = asyncio.run(store.insert("user-1", {"type": "expense", "amount": 9, "createdAt": SERVER_TIMESTAMP}))

    assert inserted.data["id"] == inserted.document_id
    assert inserted.data["createdAt"] == WRITE_TIME

    stamp = asyncio.run(store.update(inserted.ref, {"amount": 11, "createdAt": SERVER_TIMESTAMP}))

    stored = _collection(client).documents[inserted.document_id]
    assert stamp == WRITE_TIME
    assert stored["amount"] == 11
    assert stored["createdAt"] is firestore.SERVER_TIMESTAMP


def test_sdk_errors_become_remote_store_errors(client, store) -> None:
    collection = _collection(client)
    collection.documents["a"] = {"id": "a"}
    collection.fail_with = google_exceptions.PermissionDenied("rules rejected the write")

    with pytest.raises(RemoteStoreError) as caught:
        asyncio.run(store.update(DocumentRef("user-1", "a"), {"amount": 1}))

    assert caught.value.code in {"permission_denied", "403"}
    assert "rules rejected" in caught.value.message
    assert store.metadata() == {"provider": "firestore", "project": "demo-project"}
