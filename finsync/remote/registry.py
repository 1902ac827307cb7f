"""Mini README: Registry mapping backend names to remote store providers.

Structure:
    * RemoteStoreRegistry - registration and instantiation of ``RemoteStore``
      implementations.

Providers register themselves at import time, so the configured
``store_backend`` setting can be resolved to a class without the callers
importing vendor SDKs directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, Type

from .base import RemoteStore
from ..logging_utils import get_logger

if TYPE_CHECKING:
    from ..configuration import FinsyncSettings

LOGGER = get_logger(__name__)


class RemoteStoreRegistry:
    """Simple registry for mapping provider identifiers to classes."""

    def __init__(self) -> None:
        self._providers: Dict[str, Type[RemoteStore]] = {}

    def register(self, provider: Type[RemoteStore]) -> None:
        """Register a new provider class with the registry."""

        identifier = provider.provider_name.lower()
        LOGGER.debug("Registering store provider '%s'", identifier)
        self._providers[identifier] = provider

    def available_providers(self) -> Iterable[str]:
        """Return iterable of provider identifiers for display."""

        return sorted(self._providers.keys())

    def create(self, identifier: str, **options: Any) -> RemoteStore:
        """Instantiate a provider matching the identifier."""

        provider_cls = self._providers.get(identifier.lower())
        if not provider_cls:
            raise KeyError(f"Unknown store provider '{identifier}'")
        LOGGER.info("Creating store provider '%s'", identifier)
        return provider_cls(**options)


REGISTRY = RemoteStoreRegistry()


def build_store(settings: FinsyncSettings) -> RemoteStore:
    """Instantiate the store selected by ``settings.store_backend``."""

    return REGISTRY.create(
        settings.store_backend,
        credentials_path=settings.firebase_credentials,
        project_id=settings.firebase_project_id,
    )
