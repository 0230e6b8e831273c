"""Data models for the document corpus.

Defines Pydantic v2 models for persisted records (:class:`Document`,
:class:`ProviderConfig`), the operation results handed to the API layer,
and the transient :class:`SourceDescriptor` that unifies both source
backends.  Persisted and result models are frozen; updates go through
``model_copy(update=...)`` so a record is never mutated in place.

Invariants enforced here rather than in the services:

* ``embedding`` and ``embedding_provider`` are both present or both absent.
* ``text`` is stored already truncated by the ingestion pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Document -- the unit of retrieval.
# ---------------------------------------------------------------------------
class Document(BaseModel):
    """A single indexed unit of content.

    ``path`` is the deduplication key: a resolved local filesystem path or an
    ``s3://bucket/key`` URI.  Two imports of the same path update the same
    Document.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = Field(default=None, description="Store-assigned identifier.")
    filename: str = Field(description="Display name relative to the corpus root.")
    path: str = Field(description="Canonical source identity (dedup key).")
    topic: str | None = Field(default=None, description="Topic label, if known.")
    text: str = Field(default="", description="Stored snippet text.")
    embedding: list[float] | None = Field(
        default=None,
        description="Embedding vector computed from ``text``.",
    )
    embedding_provider: str | None = Field(
        default=None,
        description="Provider id that produced ``embedding``.",
    )

    @model_validator(mode="before")
    @classmethod
    def _normalize_embedding_pair(cls, data: object) -> object:
        # Empty vectors and empty provider strings both mean "absent".
        if isinstance(data, dict):
            data = dict(data)
            if not data.get("embedding"):
                data["embedding"] = None
            if not data.get("embedding_provider"):
                data["embedding_provider"] = None
        return data

    @model_validator(mode="after")
    def _check_embedding_pair(self) -> Document:
        if (self.embedding is None) != (self.embedding_provider is None):
            msg = "embedding and embedding_provider must be set together"
            raise ValueError(msg)
        return self

    def has_embedding_for(self, provider_id: str) -> bool:
        """Return ``True`` when this Document holds a vector from *provider_id*."""
        return bool(self.embedding) and self.embedding_provider == provider_id


# ---------------------------------------------------------------------------
# ProviderConfig -- singleton keyed record.
# ---------------------------------------------------------------------------
class ProviderConfig(BaseModel):
    """The currently selected embedding/generation provider."""

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    key: str = "global"
    provider: str


# ---------------------------------------------------------------------------
# Operation results.
# ---------------------------------------------------------------------------
class SyncResult(BaseModel):
    """Counts produced by one corpus synchronization run."""

    model_config = ConfigDict(frozen=True)

    added: int = Field(default=0, ge=0)
    updated: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0, description="Documents after the run.")


class OperationStatus(BaseModel):
    """Outcome of an import, preprocess or provider-change operation."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    message: str
    total: int = 0


class TopicList(BaseModel):
    model_config = ConfigDict(frozen=True)

    topics: list[str] = Field(default_factory=list)


class LlmProvider(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider: str


# ---------------------------------------------------------------------------
# SourceDescriptor -- transient handle over one importable item.
# ---------------------------------------------------------------------------
TextLoader = Callable[[], Awaitable[str]]


@dataclass(frozen=True)
class SourceDescriptor:
    """A lazy handle over one importable item from any source backend.

    Attributes
    ----------
    source_path:
        Canonical identity, becomes ``Document.path``.
    filename:
        Display name relative to the corpus root (POSIX separators).
    topic:
        Topic label, or ``None`` when it cannot be inferred.
    format_hint:
        Lower-case file extension including the dot, e.g. ``".pdf"``.
    text_loader:
        Coroutine function returning the item's sanitized text.  Called
        once per sync, only when the item is actually processed.
    """

    source_path: str
    filename: str
    topic: str | None
    format_hint: str
    text_loader: TextLoader
