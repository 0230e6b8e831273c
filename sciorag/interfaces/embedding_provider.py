"""Abstract base class for text-embedding service providers.

Defines the contract for generating embedding vectors from text.
Implementations wrap OpenAI ``text-embedding-3-small`` or Google
``text-embedding-004``; the adapter pattern keeps providers interchangeable
and lets :class:`~sciorag.services.embedding_service.EmbeddingService`
select one by provider id at call time.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations (sciorag/providers/embedding/):
#   OpenAIEmbeddingProvider  -- provider id "openai", needs OPENAI_API_KEY
#   GoogleEmbeddingProvider  -- provider id "google", needs GOOGLE_API_KEY
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services used by ingestion and retrieval."""

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Parameters
        ----------
        texts:
            One or more text strings to embed.

        Returns
        -------
        list[list[float]]
            Embedding vectors corresponding positionally to *texts*.

        Raises
        ------
        sciorag.utils.errors.EmbeddingError
            If the embedding API call fails or the payload is unusable.
        """

    @abstractmethod
    async def embed_single(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string."""

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the dimensionality of the embedding vectors."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the provider id this adapter serves (``"openai"``, ``"google"``).

        The id is stored on each Document as ``embedding_provider`` and must
        stay stable across releases.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider's credential is configured.

        Must not perform network I/O.
        """
