"""Mini README: Concrete remote store implementations.

Each provider subclasses ``RemoteStore`` and calls ``REGISTRY.register``
during import so ``store_backend`` names resolve without further wiring.
"""

from .firestore import FirestoreStore
from .memory import InMemoryStore

__all__ = ["FirestoreStore", "InMemoryStore"]
