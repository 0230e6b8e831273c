"""Topic-scoped snippet retrieval for chat.

Two tiers, tried in order:

  1. EMBEDDING -- when the query is non-empty and at least one candidate
                  holds a vector from the active provider, embed the query
                  (first ``query_chars`` characters) and rank those
                  candidates by cosine similarity.
  2. KEYWORD   -- otherwise, or when the query embedding is unavailable,
                  rank every candidate by how many query tokens occur in
                  its text.  This tier never calls an embedding backend.

Both sorts are stable: ties keep the store's listing order.  Only vectors
tagged with the active provider are ever compared, so vectors from
different models never meet.
"""

from __future__ import annotations

from typing import Sequence

import structlog

from sciorag.interfaces.document_store import IDocumentStore
from sciorag.models.document import Document
from sciorag.services.embedding_service import EmbeddingService
from sciorag.utils.errors import StoreError
from sciorag.utils.similarity import cosine_similarity, keyword_overlap, tokenize_query

logger = structlog.get_logger(logger_name=__name__)

CONTEXT_HEADER = "Context from documents:"
CONTEXT_SEPARATOR = "\n---\n"


def build_context_block(snippets: Sequence[str]) -> str:
    """Render retrieved snippets as the system message prepended to a chat.

    Returns ``""`` when there is nothing to prepend.
    """
    if not snippets:
        return ""
    return f"{CONTEXT_HEADER}\n" + CONTEXT_SEPARATOR.join(snippets)


class RetrievalService:
    """Ranks stored Documents against a free-text query.

    Parameters
    ----------
    store:
        Source of candidate Documents.
    embeddings:
        Embeds the query for the vector tier.
    query_chars:
        Only this many leading characters of the query are embedded.
    """

    def __init__(
        self,
        store: IDocumentStore,
        embeddings: EmbeddingService,
        query_chars: int = 1000,
    ) -> None:
        self._store = store
        self._embeddings = embeddings
        self._query_chars = query_chars

    async def retrieve(
        self,
        topic: str | None,
        query: str,
        k: int = 3,
        provider_id: str | None = None,
    ) -> list[str]:
        """Return up to *k* snippet texts, best match first."""
        if k <= 0:
            return []

        candidates = await self._load_candidates(topic)
        if not candidates:
            return []

        if query and provider_id:
            ranked = await self._rank_by_embedding(candidates, query, provider_id)
            if ranked is not None:
                logger.debug("retrieval_tier", tier="embedding", topic=topic, hits=len(ranked))
                return [doc.text for doc in ranked[:k]]

        tokens = tokenize_query(query)
        # sorted() is stable, so equal scores stay in listing order.
        ranked = sorted(candidates, key=lambda doc: keyword_overlap(tokens, doc.text), reverse=True)
        logger.debug("retrieval_tier", tier="keyword", topic=topic, tokens=len(tokens))
        return [doc.text for doc in ranked[:k]]

    async def _load_candidates(self, topic: str | None) -> list[Document]:
        try:
            return await self._store.list_documents(topic or None)
        except StoreError as exc:
            logger.error("retrieval_store_read_failed", topic=topic, error=str(exc))
            return []

    async def _rank_by_embedding(
        self,
        candidates: list[Document],
        query: str,
        provider_id: str,
    ) -> list[Document] | None:
        """Cosine-rank the candidates embedded by *provider_id*.

        Returns ``None`` when this tier cannot run, so the caller falls back.
        """
        embedded = [doc for doc in candidates if doc.has_embedding_for(provider_id)]
        if not embedded:
            return None

        query_vector = await self._embeddings.compute_embedding(
            query[: self._query_chars], provider_id
        )
        if not query_vector:
            return None

        return sorted(
            embedded,
            key=lambda doc: cosine_similarity(query_vector, doc.embedding),
            reverse=True,
        )
