"""Abstract base class for the persisted document store.

The store is an abstract keyed collection of :class:`Document` and
:class:`ProviderConfig` records.  Implementations may use SQLite (local),
a hosted GraphQL data API, or any other backend; business logic only ever
sees the typed models, never raw rows.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from sciorag.models.document import Document, ProviderConfig


# Concrete implementation: SQLiteDocumentStore (sciorag/providers/store/)
class IDocumentStore(ABC):
    """Contract for Document and ProviderConfig persistence.

    All operations are async to support network-backed stores.  Failures
    raise :class:`~sciorag.utils.errors.StoreError`.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables/indices if they don't exist.  Called at startup."""

    @abstractmethod
    async def list_documents(self, topic: str | None = None) -> list[Document]:
        """Return Documents in insertion order.

        Parameters
        ----------
        topic:
            When given, only Documents whose ``topic`` equals it exactly.
        """

    @abstractmethod
    async def create_document(self, document: Document) -> Document:
        """Insert *document* and return it with its assigned ``id``."""

    @abstractmethod
    async def update_document(self, document: Document) -> Document:
        """Overwrite the record identified by ``document.id``.

        Returns the stored record.
        """

    @abstractmethod
    async def list_provider_configs(self, key: str | None = None) -> list[ProviderConfig]:
        """Return ProviderConfig records, optionally filtered by ``key``."""

    @abstractmethod
    async def create_provider_config(self, config: ProviderConfig) -> ProviderConfig:
        """Insert a ProviderConfig record."""

    @abstractmethod
    async def update_provider_config(self, config: ProviderConfig) -> ProviderConfig:
        """Overwrite the ProviderConfig identified by ``config.id``."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this store."""
