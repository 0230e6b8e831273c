"""Public interface definitions for all external collaborators.

Every external service is accessed through the abstract base classes in
this package.  Concrete adapters live in ``sciorag/providers/`` and are
wired together in :func:`sciorag.main.build_services`.

    Interface           ->  Concrete implementations
    ---------------------------------------------------------------
    IEmbeddingProvider  ->  OpenAIEmbeddingProvider, GoogleEmbeddingProvider
    IDocumentStore      ->  SQLiteDocumentStore
    ISourceBackend      ->  LocalSourceBackend, S3SourceBackend
"""

from sciorag.interfaces.document_store import IDocumentStore
from sciorag.interfaces.embedding_provider import IEmbeddingProvider
from sciorag.interfaces.source_backend import ISourceBackend

__all__ = ["IDocumentStore", "IEmbeddingProvider", "ISourceBackend"]
