"""Mini README: Abstract contract for remote transaction stores.

Structure:
    * RemoteStoreError - failure raised by every provider operation.
    * DocumentRef / RemoteDocument - addressing and payload of stored records.
    * SERVER_TIMESTAMP - sentinel asking the provider to stamp server time.
    * RemoteStore - abstract async interface implemented by providers.

Records live in a per-user collection. Providers translate their SDK's
exceptions into ``RemoteStoreError`` so callers only handle one type.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class RemoteStoreError(Exception):
    """Network, permission or quota failure reported by a store provider."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message


class _ServerTimestamp:
    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True, slots=True)
class DocumentRef:
    """Direct address of a stored document within a user's collection."""

    user_id: str
    document_id: str


@dataclass(frozen=True, slots=True)
class RemoteDocument:
    """A stored document and the reference it can be mutated through."""

    ref: DocumentRef
    data: Mapping[str, Any]

    @property
    def document_id(self) -> str:
        return self.ref.document_id


class RemoteStore(ABC):
    """Base interface for document database integrations."""

    provider_name: str = "generic"

    def __init__(self, **options: Any) -> None:
        self.options = options
        LOGGER.debug("Initialising %s store with options %s", self.provider_name, sorted(options))

    @abstractmethod
    async def list(self, user_id: str) -> List[RemoteDocument]:
        """Return every document in the user's scope, newest ``createdAt`` first."""

    @abstractmethod
    async def find_by_id(self, user_id: str, transaction_id: str) -> List[RemoteDocument]:
        """Return the documents holding ``transaction_id`` (expected 0 or 1)."""

    @abstractmethod
    async def insert(self, user_id: str, fields: Dict[str, Any]) -> RemoteDocument:
        """Create a document, assigning its id and creation timestamp."""

    @abstractmethod
    async def delete(self, ref: DocumentRef) -> None:
        """Delete the referenced document."""

    @abstractmethod
    async def update(self, ref: DocumentRef, fields: Dict[str, Any]) -> datetime:
        """Overwrite ``fields`` on the referenced document, returning the write stamp."""

    def metadata(self) -> Dict[str, str]:
        """Return diagnostic metadata for UI displays."""

        return {"provider": self.provider_name}
