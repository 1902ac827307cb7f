"""Mini README: Firestore-backed remote store.

Structure:
    * FirestoreStore - ``RemoteStore`` over the ``firebase-admin`` async client.

Documents live under ``users/{uid}/transactions``. Older documents may have
a generated document id that differs from the ``id`` field stored inside
them, so ``find_by_id`` tries the direct document first and falls back to a
field query. SDK errors are re-raised as ``RemoteStoreError`` carrying the
gRPC/HTTP code and message.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import firebase_admin
from firebase_admin import credentials, firestore_async
from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1 import FieldFilter

from ..base import SERVER_TIMESTAMP, DocumentRef, RemoteDocument, RemoteStore, RemoteStoreError
from ..registry import REGISTRY
from ...logging_utils import get_logger

LOGGER = get_logger(__name__)

USERS_COLLECTION = "users"
TRANSACTIONS_COLLECTION = "transactions"


def _initialise_app(
    credentials_path: Optional[Path], project_id: Optional[str]
) -> firebase_admin.App:
    """Return the default Firebase app, initialising it on first use."""

    try:
        return firebase_admin.get_app()
    except ValueError:
        pass
    if credentials_path:
        cred = credentials.Certificate(str(credentials_path))
    else:
        cred = credentials.ApplicationDefault()
    options = {"projectId": project_id} if project_id else None
    LOGGER.info("Initialising Firebase app (project=%s)", project_id or "default")
    return firebase_admin.initialize_app(cred, options)


def _translate(error: google_exceptions.GoogleAPICallError) -> RemoteStoreError:
    code = getattr(error, "grpc_status_code", None) or error.code
    return RemoteStoreError(str(getattr(code, "name", code)).lower(), error.message)


class FirestoreStore(RemoteStore):
    """Remote store talking to Cloud Firestore through ``firebase-admin``."""

    provider_name = "firestore"

    def __init__(
        self,
        credentials_path: Optional[Path] = None,
        project_id: Optional[str] = None,
        client: Optional[firestore.AsyncClient] = None,
        **options: Any,
    ) -> None:
        super().__init__(**options)
        if client is None:
            client = firestore_async.client(_initialise_app(credentials_path, project_id))
        self._client = client

    def _collection(self, user_id: str) -> firestore.AsyncCollectionReference:
        return self._client.collection(USERS_COLLECTION, user_id, TRANSACTIONS_COLLECTION)

    def _prepare(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return {
            key: firestore.SERVER_TIMESTAMP if value is SERVER_TIMESTAMP else value
            for key, value in fields.items()
        }

    async def list(self, user_id: str) -> List[RemoteDocument]:
        query = self._collection(user_id).order_by(
            "createdAt", direction=firestore.Query.DESCENDING
        )
        try:
            return [
                RemoteDocument(ref=DocumentRef(user_id, snapshot.id), data=snapshot.to_dict() or {})
                async for snapshot in query.stream()
            ]
        except google_exceptions.GoogleAPICallError as error:
            raise _translate(error) from error

    async def find_by_id(self, user_id: str, transaction_id: str) -> List[RemoteDocument]:
        collection = self._collection(user_id)
        try:
            snapshot = await collection.document(transaction_id).get()
            if snapshot.exists:
                return [RemoteDocument(ref=DocumentRef(user_id, snapshot.id), data=snapshot.to_dict() or {})]
            query = collection.where(filter=FieldFilter("id", "==", transaction_id))
            return [
                RemoteDocument(ref=DocumentRef(user_id, match.id), data=match.to_dict() or {})
                async for match in query.stream()
            ]
        except google_exceptions.GoogleAPICallError as error:
            raise _translate(error) from error

    async def insert(self, user_id: str, fields: Dict[str, Any]) -> RemoteDocument:
        document = self._collection(user_id).document()
        payload = self._prepare(fields)
        payload["id"] = document.id
        payload.setdefault("createdAt", firestore.SERVER_TIMESTAMP)
        try:
            await document.set(payload)
            snapshot = await document.get()
        except google_exceptions.GoogleAPICallError as error:
            raise _translate(error) from error
        LOGGER.debug("Inserted Firestore document %s for user %s", document.id, user_id)
        return RemoteDocument(ref=DocumentRef(user_id, document.id), data=snapshot.to_dict() or {})

    async def delete(self, ref: DocumentRef) -> None:
        try:
            await self._collection(ref.user_id).document(ref.document_id).delete()
        except google_exceptions.GoogleAPICallError as error:
            raise _translate(error) from error

    async def update(self, ref: DocumentRef, fields: Dict[str, Any]) -> datetime:
        document = self._collection(ref.user_id).document(ref.document_id)
        try:
            result = await document.update(self._prepare(fields))
        except google_exceptions.GoogleAPICallError as error:
            raise _translate(error) from error
        return result.update_time or datetime.now(timezone.utc)

    def metadata(self) -> Dict[str, str]:
        return {"provider": self.provider_name, "project": self._client.project or "default"}


REGISTRY.register(FirestoreStore)
