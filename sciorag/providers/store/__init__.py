"""Document store providers.

SQLiteDocumentStore keeps Documents and the provider selection in
data/documents.db.
"""

from sciorag.providers.store.sqlite_document_store import SQLiteDocumentStore

__all__ = ["SQLiteDocumentStore"]
