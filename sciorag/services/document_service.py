"""Operation facade over ingestion, topics, provider selection and retrieval.

Every public method returns a result model; nothing raises to the caller.
Invalid input and store failures come back as
``OperationStatus(ok=False, message=...)`` and read paths fall back to safe
defaults (the predefined topic list, the computed default provider).
"""

from __future__ import annotations

import structlog

from sciorag.config.settings import ALLOWED_PROVIDERS, Settings
from sciorag.interfaces.document_store import IDocumentStore
from sciorag.models.document import (
    LlmProvider,
    OperationStatus,
    ProviderConfig,
    SyncResult,
    TopicList,
)
from sciorag.services.ingestion.corpus_sync import CorpusSynchronizer
from sciorag.services.ingestion.source_enumerator import SourceEnumerator
from sciorag.services.ingestion.tabular_normalizer import TABULAR_TOPIC
from sciorag.services.retrieval_service import RetrievalService
from sciorag.utils.errors import SciRagError
from sciorag.utils.logging import operation_context

logger = structlog.get_logger(logger_name=__name__)

# Topics that always exist, whether or not any Document carries them yet.
DEFAULT_TOPICS: tuple[str, ...] = ("forensics", "designer genes", TABULAR_TOPIC)

PROVIDER_CONFIG_KEY = "global"


class DocumentService:
    """The operations exposed to the API layer.

    Parameters
    ----------
    settings:
        Supplies the default provider and the retrieval ``k``.
    store:
        Document and ProviderConfig persistence.
    enumerator:
        All configured source backends.
    synchronizer:
        Writes enumerated sources into *store*.
    retrieval:
        Ranks stored snippets for chat.
    """

    def __init__(
        self,
        settings: Settings,
        store: IDocumentStore,
        enumerator: SourceEnumerator,
        synchronizer: CorpusSynchronizer,
        retrieval: RetrievalService,
    ) -> None:
        self._settings = settings
        self._store = store
        self._enumerator = enumerator
        self._synchronizer = synchronizer
        self._retrieval = retrieval

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    async def import_topic(self, topic: str) -> OperationStatus:
        """Import every source filed under *topic*, tagging Documents with it."""
        topic = (topic or "").strip()
        if not topic:
            return OperationStatus(ok=False, message="Topic is required")

        try:
            with operation_context("import_topic", topic=topic):
                await self._enumerator.ensure_topic_folders(DEFAULT_TOPICS)
                sources = await self._enumerator.enumerate(topic)
                if not sources:
                    return OperationStatus(ok=False, message=f"No files found for topic: {topic}")
                provider = await self._configured_provider()
                result = await self._synchronizer.sync(sources, provider)
        except Exception as exc:  # noqa: BLE001
            return self._failed("import_topic_failed", "Failed to import topic", exc, topic=topic)

        return self._sync_status("Imported", result)

    async def preprocess(self) -> OperationStatus:
        """Import every source under every backend root."""
        try:
            with operation_context("preprocess"):
                await self._enumerator.ensure_topic_folders(DEFAULT_TOPICS)
                sources = await self._enumerator.enumerate(None)
                provider = await self._configured_provider()
                result = await self._synchronizer.sync(sources, provider)
        except Exception as exc:  # noqa: BLE001
            return self._failed("preprocess_failed", "Failed to preprocess documents", exc)

        return self._sync_status("Preprocessed", result)

    # ------------------------------------------------------------------
    # Topics
    # ------------------------------------------------------------------

    async def list_topics(self) -> TopicList:
        """Predefined topics first, then topics discovered on stored Documents."""
        try:
            documents = await self._store.list_documents()
        except SciRagError as exc:
            logger.error("list_topics_failed", error=str(exc))
            return TopicList(topics=list(DEFAULT_TOPICS))

        topics = list(DEFAULT_TOPICS)
        for document in documents:
            if document.topic and document.topic not in topics:
                topics.append(document.topic)
        return TopicList(topics=topics)

    # ------------------------------------------------------------------
    # Provider selection
    # ------------------------------------------------------------------

    async def get_llm_provider(self) -> LlmProvider:
        return LlmProvider(provider=await self._configured_provider())

    async def set_llm_provider(self, provider: str) -> OperationStatus:
        """Persist *provider* as the selection for embeddings and generation."""
        if provider not in ALLOWED_PROVIDERS:
            return OperationStatus(ok=False, message=f"Invalid provider: {provider}")

        try:
            configs = await self._store.list_provider_configs(PROVIDER_CONFIG_KEY)
        except SciRagError as exc:
            logger.error("provider_config_load_failed", error=str(exc))
            return OperationStatus(ok=False, message="Failed to load config")

        existing = configs[0] if configs else None
        if existing is not None and existing.id is not None:
            try:
                await self._store.update_provider_config(
                    ProviderConfig(id=existing.id, key=PROVIDER_CONFIG_KEY, provider=provider)
                )
            except SciRagError as exc:
                logger.error("provider_config_update_failed", error=str(exc))
                return OperationStatus(ok=False, message="Failed to update provider")
        else:
            try:
                await self._store.create_provider_config(
                    ProviderConfig(key=PROVIDER_CONFIG_KEY, provider=provider)
                )
            except SciRagError as exc:
                logger.error("provider_config_create_failed", error=str(exc))
                return OperationStatus(ok=False, message="Failed to save provider")

        logger.info("llm_provider_set", provider=provider)
        return OperationStatus(ok=True, message=f"Provider set to {provider}", total=1)

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    async def retrieve(
        self,
        topic: str | None,
        query: str,
        k: int | None = None,
        provider: str | None = None,
    ) -> list[str]:
        """Return the best-matching snippets for *query* within *topic*.

        *provider* defaults to the configured provider and *k* to
        ``settings.retrieval_top_k``.
        """
        if provider is None:
            provider = await self._configured_provider()
        if k is None:
            k = self._settings.retrieval_top_k
        try:
            return await self._retrieval.retrieve(topic, query, k, provider)
        except Exception as exc:  # noqa: BLE001
            logger.error("retrieve_failed", topic=topic, error=str(exc))
            return []

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _configured_provider(self) -> str:
        """Stored selection when valid, else the computed default."""
        default = self._settings.default_provider()
        try:
            configs = await self._store.list_provider_configs(PROVIDER_CONFIG_KEY)
        except SciRagError as exc:
            logger.warning("provider_config_read_failed", error=str(exc), fallback=default)
            return default

        if configs and configs[0].provider in ALLOWED_PROVIDERS:
            return configs[0].provider
        return default

    @staticmethod
    def _sync_status(verb: str, result: SyncResult) -> OperationStatus:
        return OperationStatus(
            ok=True,
            message=f"{verb} {result.added} files, updated {result.updated} files",
            total=result.total,
        )

    @staticmethod
    def _failed(event: str, message: str, exc: Exception, **context: object) -> OperationStatus:
        logger.error(event, error=str(exc), error_type=type(exc).__name__, **context)
        return OperationStatus(ok=False, message=message)
