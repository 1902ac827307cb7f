"""Mini README: In-process remote store used for demos and tests.

Structure:
    * InMemoryStore - dictionary-backed ``RemoteStore`` with fault injection.

Behaviour follows the Firestore provider closely: documents are addressed by
id with a fallback scan on the stored ``id`` field, deletes of missing
documents succeed silently, and updates of missing documents fail with a
``not_found`` error. ``calls`` counts invocations per operation and
``fail_next`` makes the next call of an operation raise ``RemoteStoreError``.
"""

from __future__ import annotations

import asyncio
import uuid
from collections import Counter, defaultdict
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from ..base import SERVER_TIMESTAMP, DocumentRef, RemoteDocument, RemoteStore, RemoteStoreError
from ..registry import REGISTRY
from ...logging_utils import get_logger

LOGGER = get_logger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryStore(RemoteStore):
    """Dictionary-backed store keyed by user id then document id."""

    provider_name = "memory"

    def __init__(self, clock: Optional[Clock] = None, **options: Any) -> None:
        super().__init__(**options)
        self._clock = clock or _utc_now
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = defaultdict(dict)
        self._failures: Dict[str, str] = {}
        self.calls: Counter = Counter()

    def fail_next(self, operation: str, code: str = "unavailable") -> None:
        """Make the next ``operation`` call raise ``RemoteStoreError`` with ``code``."""

        self._failures[operation] = code

    def seed(self, user_id: str, documents: Iterable[Mapping[str, Any]]) -> List[str]:
        """Store documents verbatim, bypassing call counting and fault injection."""

        identifiers = []
        for document in documents:
            document_id = str(document.get("id") or uuid.uuid4().hex)
            self._collections[user_id][document_id] = dict(document)
            identifiers.append(document_id)
        return identifiers

    def documents(self, user_id: str) -> Dict[str, Dict[str, Any]]:
        """Snapshot of the raw documents stored for ``user_id``."""

        return {key: dict(value) for key, value in self._collections[user_id].items()}

    async def _enter(self, operation: str) -> None:
        self.calls[operation] += 1
        await asyncio.sleep(0)
        code = self._failures.pop(operation, None)
        if code is not None:
            raise RemoteStoreError(code, f"Simulated {operation} failure")

    def _resolve(self, fields: Mapping[str, Any], stamp: datetime) -> Dict[str, Any]:
        return {key: stamp if value is SERVER_TIMESTAMP else value for key, value in fields.items()}

    async def list(self, user_id: str) -> List[RemoteDocument]:
        await self._enter("list")
        collection = self._collections[user_id]
        ordered = sorted(
            collection.items(),
            key=lambda item: (item[1].get("createdAt") is not None, item[1].get("createdAt") or 0),
            reverse=True,
        )
        return [
            RemoteDocument(ref=DocumentRef(user_id, document_id), data=dict(data))
            for document_id, data in ordered
        ]

    async def find_by_id(self, user_id: str, transaction_id: str) -> List[RemoteDocument]:
        await self._enter("find_by_id")
        collection = self._collections[user_id]
        if transaction_id in collection:
            matches = [transaction_id]
        else:
            matches = [key for key, data in collection.items() if data.get("id") == transaction_id]
        return [
            RemoteDocument(ref=DocumentRef(user_id, key), data=dict(collection[key]))
            for key in matches
        ]

    async def insert(self, user_id: str, fields: Dict[str, Any]) -> RemoteDocument:
        await self._enter("insert")
        document_id = uuid.uuid4().hex
        data = self._resolve(fields, self._clock())
        data["id"] = document_id
        data.setdefault("createdAt", self._clock())
        self._collections[user_id][document_id] = data
        LOGGER.debug("Inserted document %s for user %s", document_id, user_id)
        return RemoteDocument(ref=DocumentRef(user_id, document_id), data=dict(data))

    async def delete(self, ref: DocumentRef) -> None:
        await self._enter("delete")
        self._collections[ref.user_id].pop(ref.document_id, None)

    async def update(self, ref: DocumentRef, fields: Dict[str, Any]) -> datetime:
        await self._enter("update")
        collection = self._collections[ref.user_id]
        if ref.document_id not in collection:
            raise RemoteStoreError("not_found", f"No document to update: {ref.document_id}")
        stamp = self._clock()
        collection[ref.document_id].update(self._resolve(fields, stamp))
        return stamp


REGISTRY.register(InMemoryStore)
