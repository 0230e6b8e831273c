"""Abstract base class for corpus source backends.

A source backend only knows how to *enumerate* importable items.  Each item
comes back as a :class:`~sciorag.models.document.SourceDescriptor` carrying
its identity, topic and a lazy text loader, so the corpus synchronizer never
branches on where a file lives.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from sciorag.models.document import SourceDescriptor


# Concrete implementations (sciorag/providers/source/):
#   LocalSourceBackend -- directory tree on the local filesystem
#   S3SourceBackend    -- bucket/prefix in S3-compatible object storage
class ISourceBackend(ABC):
    """Contract for listing importable items from one storage backend."""

    @abstractmethod
    async def enumerate(self, topic: str | None = None) -> list[SourceDescriptor]:
        """List importable items.

        Parameters
        ----------
        topic:
            Topic label.  When given, only the topic's slug directory/prefix
            is walked and every descriptor carries this label.  When
            ``None``, the whole corpus root is walked and each item's topic
            is inferred from its first path segment.

        Returns
        -------
        list[SourceDescriptor]
            One descriptor per item.  A missing root, directory or bucket
            yields an empty list rather than an error.
        """

    async def ensure_topic_folders(self, topics: Iterable[str]) -> None:  # noqa: B027
        """Make sure the well-known topic folders exist.  Default: nothing to do."""

    @abstractmethod
    def get_backend_name(self) -> str:
        """Return a short identifier used in logs (``"local"``, ``"s3"``)."""
