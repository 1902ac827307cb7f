"""Mini README: Remote store subsystem package initialiser.

Re-exports the store contract, the provider registry, and the built-in
providers. ``base`` defines the async interface, ``registry`` resolves
backend names, and ``providers`` holds the in-memory and Firestore stores.
"""

from .base import SERVER_TIMESTAMP, DocumentRef, RemoteDocument, RemoteStore, RemoteStoreError
from .registry import REGISTRY, RemoteStoreRegistry, build_store
from . import providers  # noqa: F401  # ensure built-in providers register on import

__all__ = [
    "DocumentRef",
    "REGISTRY",
    "RemoteDocument",
    "RemoteStore",
    "RemoteStoreError",
    "RemoteStoreRegistry",
    "SERVER_TIMESTAMP",
    "build_store",
]
