"""Utility modules for sciorag.

- **errors** -- Domain-specific exception hierarchy rooted at SciRagError.
- **logging** -- structlog setup with a dual console/JSON renderer.
- **concurrency** -- semaphore-bounded gather for optional parallel ingestion.
- **similarity** -- cosine similarity and keyword-overlap scoring.
- **text** -- sanitizing, topic slugs and path canonicalization.
"""

from sciorag.utils.concurrency import throttled_gather
from sciorag.utils.errors import (
    ConfigurationError,
    EmbeddingError,
    ExtractionError,
    ProviderUnavailableError,
    SciRagError,
    SourceError,
    StoreError,
)
from sciorag.utils.logging import configure_logging, get_logger, operation_context
from sciorag.utils.similarity import cosine_similarity, keyword_overlap, tokenize_query
from sciorag.utils.text import canonicalize_path, sanitize_text, slugify_topic, topic_from_slug

__all__ = [
    "ConfigurationError",
    "EmbeddingError",
    "ExtractionError",
    "ProviderUnavailableError",
    "SciRagError",
    "SourceError",
    "StoreError",
    "canonicalize_path",
    "configure_logging",
    "cosine_similarity",
    "get_logger",
    "keyword_overlap",
    "operation_context",
    "sanitize_text",
    "slugify_topic",
    "throttled_gather",
    "tokenize_query",
    "topic_from_slug",
]
