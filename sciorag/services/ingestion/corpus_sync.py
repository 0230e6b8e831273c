"""Reconcile enumerated sources with the persisted Document set.

Pipeline per source: **load text -> build snippet -> embed -> create or update**.

Deduplication is by canonical ``path``.  The lookup of existing Documents is
an explicit :class:`PathIndex` owned by the caller and passed through
:meth:`CorpusSynchronizer.sync`; every successful write is registered in it,
so a later source in the same run with the same path updates the record the
earlier one created instead of creating a second one.

Per-source failures (unreadable file, store write error) are logged and
counted as ``skipped``; they never abort the rest of the batch.
"""

from __future__ import annotations

import asyncio
import enum
from typing import Iterable, Sequence

import structlog

from sciorag.interfaces.document_store import IDocumentStore
from sciorag.models.document import Document, SourceDescriptor, SyncResult
from sciorag.services.embedding_service import EmbeddingService
from sciorag.services.ingestion.tabular_normalizer import (
    GENERIC_SNIPPET_CHARS,
    TABULAR_SNIPPET_CHARS,
    build_snippet,
)
from sciorag.utils.concurrency import throttled_gather
from sciorag.utils.text import canonicalize_path

logger = structlog.get_logger(logger_name=__name__)


class SyncOutcome(str, enum.Enum):
    """What happened to one source during a sync run."""

    ADDED = "added"
    UPDATED = "updated"
    SKIPPED = "skipped"


class PathIndex:
    """Existing Documents keyed by canonical path, plus one lock per path.

    The locks only matter when sources are processed concurrently: the
    check-then-write for a given path happens under its lock, so two
    descriptors for the same path can never both take the create branch.
    """

    def __init__(self, documents: Iterable[Document] = ()) -> None:
        self._by_path: dict[str, Document] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        for document in documents:
            self.register(document)

    @classmethod
    async def load(cls, store: IDocumentStore) -> PathIndex:
        """Build an index from every Document currently in *store*."""
        return cls(await store.list_documents())

    def get(self, path: str) -> Document | None:
        return self._by_path.get(canonicalize_path(path))

    def register(self, document: Document) -> None:
        key = canonicalize_path(document.path)
        if key:
            self._by_path[key] = document

    def lock_for(self, path: str) -> asyncio.Lock:
        key = canonicalize_path(path)
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and canonicalize_path(path) in self._by_path

    def __len__(self) -> int:
        return len(self._by_path)


class CorpusSynchronizer:
    """Create-or-update Documents for a batch of sources.

    Parameters
    ----------
    store:
        Persisted Document set.
    embeddings:
        Computes the vector stored alongside each snippet.
    concurrency:
        Sources processed at once.  ``1`` (the default) processes them
        strictly in order.
    generic_chars / tabular_chars:
        Snippet length caps.
    """

    def __init__(
        self,
        store: IDocumentStore,
        embeddings: EmbeddingService,
        concurrency: int = 1,
        generic_chars: int = GENERIC_SNIPPET_CHARS,
        tabular_chars: int = TABULAR_SNIPPET_CHARS,
    ) -> None:
        self._store = store
        self._embeddings = embeddings
        self._concurrency = max(1, concurrency)
        self._generic_chars = generic_chars
        self._tabular_chars = tabular_chars

    async def sync(
        self,
        sources: Sequence[SourceDescriptor],
        provider_id: str | None,
        index: PathIndex | None = None,
    ) -> SyncResult:
        """Import *sources*, embedding with *provider_id* when it is set.

        Raises
        ------
        sciorag.utils.errors.StoreError
            Only when *index* is not given and the existing Documents cannot
            be listed; individual write failures are absorbed.
        """
        if index is None:
            index = await PathIndex.load(self._store)
        baseline = len(index)

        if self._concurrency == 1:
            outcomes = [await self._sync_one(s, provider_id, index) for s in sources]
        else:
            raw = await throttled_gather(
                [self._sync_one(s, provider_id, index) for s in sources],
                limit=self._concurrency,
            )
            outcomes = [r if isinstance(r, SyncOutcome) else SyncOutcome.SKIPPED for r in raw]

        result = SyncResult(
            added=outcomes.count(SyncOutcome.ADDED),
            updated=outcomes.count(SyncOutcome.UPDATED),
            skipped=outcomes.count(SyncOutcome.SKIPPED),
            total=baseline + outcomes.count(SyncOutcome.ADDED),
        )
        logger.info(
            "corpus_sync_completed",
            provider=provider_id,
            sources=len(sources),
            added=result.added,
            updated=result.updated,
            skipped=result.skipped,
            total=result.total,
        )
        return result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _sync_one(
        self,
        source: SourceDescriptor,
        provider_id: str | None,
        index: PathIndex,
    ) -> SyncOutcome:
        try:
            text = await source.text_loader()
            snippet = build_snippet(
                text,
                source.filename,
                source.topic,
                source.format_hint,
                generic_chars=self._generic_chars,
                tabular_chars=self._tabular_chars,
            )
            if not snippet.strip():
                logger.info("source_skipped_empty", path=source.source_path)
                return SyncOutcome.SKIPPED

            embedding = None
            if provider_id:
                embedding = await self._embeddings.compute_embedding(snippet, provider_id)

            async with index.lock_for(source.source_path):
                return await self._write(source, snippet, embedding, provider_id, index)
        except Exception as exc:  # noqa: BLE001 -- one bad source must not stop the batch
            logger.error(
                "source_sync_failed",
                path=source.source_path,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return SyncOutcome.SKIPPED

    async def _write(
        self,
        source: SourceDescriptor,
        snippet: str,
        embedding: list[float] | None,
        provider_id: str | None,
        index: PathIndex,
    ) -> SyncOutcome:
        existing = index.get(source.source_path)
        fields = {
            "filename": source.filename,
            "path": source.source_path,
            "text": snippet,
            "embedding": embedding,
            "embedding_provider": provider_id if embedding else None,
        }

        if existing is not None and existing.id is not None:
            topic = source.topic if source.topic is not None else existing.topic
            stored = await self._store.update_document(
                Document(id=existing.id, topic=topic, **fields)
            )
            index.register(stored)
            logger.debug("document_updated", id=stored.id, path=stored.path)
            return SyncOutcome.UPDATED

        stored = await self._store.create_document(Document(topic=source.topic, **fields))
        index.register(stored)
        logger.debug("document_created", id=stored.id, path=stored.path)
        return SyncOutcome.ADDED
