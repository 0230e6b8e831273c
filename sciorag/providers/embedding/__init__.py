"""Embedding provider implementations.

Two implementations of IEmbeddingProvider, keyed by provider id:
    1. OpenAIEmbeddingProvider  -- "openai", text-embedding-3-small (1536 dims).
    2. GoogleEmbeddingProvider  -- "google", text-embedding-004 (768 dims).

The "bedrock" provider id is generation-only and has no embedding backend;
documents ingested while it is selected are stored without vectors and
retrieval falls back to keyword overlap.
"""

from sciorag.providers.embedding.google_embedding_provider import GoogleEmbeddingProvider
from sciorag.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["GoogleEmbeddingProvider", "OpenAIEmbeddingProvider"]
