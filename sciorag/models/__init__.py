"""Pydantic data models and transient descriptors for sciorag."""

from sciorag.models.document import (
    Document,
    LlmProvider,
    OperationStatus,
    ProviderConfig,
    SourceDescriptor,
    SyncResult,
    TextLoader,
    TopicList,
)

__all__ = [
    "Document",
    "LlmProvider",
    "OperationStatus",
    "ProviderConfig",
    "SourceDescriptor",
    "SyncResult",
    "TextLoader",
    "TopicList",
]
