"""sciorag composition root.

Wires providers and services together via dependency injection.  Settings
are resolved once (``config/config.yaml`` under ``.env`` and the
environment) and handed to every component; nothing below this module reads
configuration on its own.

Usage from a script::

    services = build_services(load_settings())
    await services.initialize()
    try:
        status = await services.documents.preprocess()
    finally:
        await services.aclose()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from sciorag.config.settings import Settings
from sciorag.interfaces.document_store import IDocumentStore
from sciorag.interfaces.embedding_provider import IEmbeddingProvider
from sciorag.interfaces.source_backend import ISourceBackend
from sciorag.providers.embedding.google_embedding_provider import GoogleEmbeddingProvider
from sciorag.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from sciorag.providers.source.local_source_backend import LocalSourceBackend
from sciorag.providers.source.s3_source_backend import S3SourceBackend
from sciorag.providers.store.sqlite_document_store import SQLiteDocumentStore
from sciorag.services.document_service import DocumentService
from sciorag.services.embedding_service import EmbeddingService
from sciorag.services.ingestion.corpus_sync import CorpusSynchronizer
from sciorag.services.ingestion.source_enumerator import SourceEnumerator
from sciorag.services.retrieval_service import RetrievalService

logger = structlog.get_logger(logger_name=__name__)


@dataclass
class Services:
    """Every constructed component, keyed by role."""

    settings: Settings
    store: IDocumentStore
    embeddings: EmbeddingService
    enumerator: SourceEnumerator
    synchronizer: CorpusSynchronizer
    retrieval: RetrievalService
    documents: DocumentService
    http_client: httpx.AsyncClient | None = None

    async def initialize(self) -> None:
        """Create store tables.  Call once before the first operation."""
        await self.store.initialize()

    async def aclose(self) -> None:
        if self.http_client is not None:
            await self.http_client.aclose()


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------


def _build_embedding_providers(
    settings: Settings,
    http_client: httpx.AsyncClient | None,
) -> list[IEmbeddingProvider]:
    """One adapter per embedding-capable provider.

    Adapters are registered even without a credential; they report
    themselves unavailable and the embedding service returns ``None``.
    """
    return [
        OpenAIEmbeddingProvider(settings=settings),
        GoogleEmbeddingProvider(settings=settings, http_client=http_client),
    ]


def _build_source_backends(settings: Settings, s3_client: Any | None) -> list[ISourceBackend]:
    # Local first, then remote.
    backends: list[ISourceBackend] = [LocalSourceBackend(settings.local_docs_dir)]
    if settings.s3_bucket:
        backends.append(
            S3SourceBackend(
                bucket=settings.s3_bucket,
                prefix=settings.s3_prefix,
                client=s3_client,
                region=settings.aws_region,
            )
        )
    return backends


def build_services(
    settings: Settings | None = None,
    s3_client: Any | None = None,
    store: IDocumentStore | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> Services:
    """Construct all services with injected dependencies.

    Parameters
    ----------
    settings:
        Resolved settings.  A fresh :class:`Settings` from the environment
        is used when omitted.
    s3_client:
        Optional pre-built boto3 S3 client.
    store:
        Optional store override (tests pass an in-memory one).
    http_client:
        Optional shared ``httpx.AsyncClient``.  One is created when omitted
        and closed by :meth:`Services.aclose`.
    """
    s = settings or Settings()

    owns_client = http_client is None
    if http_client is None:
        http_client = httpx.AsyncClient(timeout=s.http_timeout)

    document_store = store or SQLiteDocumentStore(db_path=s.db_path)
    embeddings = EmbeddingService(_build_embedding_providers(s, http_client))
    enumerator = SourceEnumerator(_build_source_backends(s, s3_client))
    synchronizer = CorpusSynchronizer(
        store=document_store,
        embeddings=embeddings,
        concurrency=s.sync_concurrency,
        generic_chars=s.generic_snippet_chars,
        tabular_chars=s.tabular_snippet_chars,
    )
    retrieval = RetrievalService(
        store=document_store,
        embeddings=embeddings,
        query_chars=s.query_embedding_chars,
    )
    documents = DocumentService(
        settings=s,
        store=document_store,
        enumerator=enumerator,
        synchronizer=synchronizer,
        retrieval=retrieval,
    )

    logger.info(
        "services_built",
        store=document_store.get_provider_name(),
        backends=[b.get_backend_name() for b in enumerator.backends],
        embedding_providers=embeddings.provider_ids,
        default_provider=s.default_provider(),
    )

    return Services(
        settings=s,
        store=document_store,
        embeddings=embeddings,
        enumerator=enumerator,
        synchronizer=synchronizer,
        retrieval=retrieval,
        documents=documents,
        http_client=http_client if owns_client else None,
    )
