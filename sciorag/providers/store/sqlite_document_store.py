"""SQLite-backed document store.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Providers (concrete adapter implementing IDocumentStore).
# Database: ``data/documents.db`` -- two tables:
#   documents        one row per source path (UNIQUE(path))
#   provider_config  keyed singleton rows (UNIQUE(key))
#
# Embeddings are stored as a JSON text blob; the row <-> model mapping
# lives entirely in this module so services only ever see Document and
# ProviderConfig instances.
#
# Uses ``aiosqlite`` for async I/O and ``PRAGMA journal_mode=WAL`` for
# concurrent read safety.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import aiosqlite
import structlog
from pydantic import ValidationError

from sciorag.interfaces.document_store import IDocumentStore
from sciorag.models.document import Document, ProviderConfig
from sciorag.utils.errors import StoreError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/documents.db")

# ── Schema DDL ────────────────────────────────────────────────────────

_CREATE_DOCUMENTS_TABLE = """\
CREATE TABLE IF NOT EXISTS documents (
    id                  INTEGER PRIMARY KEY AUTOINCREMENT,
    filename            TEXT    NOT NULL,
    path                TEXT    NOT NULL UNIQUE,
    topic               TEXT,
    text                TEXT    NOT NULL DEFAULT '',
    embedding           TEXT,
    embedding_provider  TEXT,
    created_at          TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    updated_at          TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_CREATE_CONFIG_TABLE = """\
CREATE TABLE IF NOT EXISTS provider_config (
    id        INTEGER PRIMARY KEY AUTOINCREMENT,
    key       TEXT    NOT NULL UNIQUE,
    provider  TEXT    NOT NULL
);
"""

_CREATE_INDICES = [
    "CREATE INDEX IF NOT EXISTS idx_documents_topic ON documents(topic);",
]

# ── DML ───────────────────────────────────────────────────────────────

_DOCUMENT_COLUMNS = "id, filename, path, topic, text, embedding, embedding_provider"

_INSERT_DOCUMENT = """\
INSERT INTO documents (filename, path, topic, text, embedding, embedding_provider)
VALUES (?, ?, ?, ?, ?, ?);
"""

_UPDATE_DOCUMENT = """\
UPDATE documents
SET filename = ?, path = ?, topic = ?, text = ?, embedding = ?, embedding_provider = ?,
    updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now')
WHERE id = ?;
"""


class SQLiteDocumentStore(IDocumentStore):
    """SQLite persistence for Documents and ProviderConfig records."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create tables and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute("PRAGMA journal_mode=WAL;")
                await db.execute(_CREATE_DOCUMENTS_TABLE)
                await db.execute(_CREATE_CONFIG_TABLE)
                for idx_sql in _CREATE_INDICES:
                    await db.execute(idx_sql)
                await db.commit()
        except aiosqlite.Error as exc:
            raise StoreError(f"failed to initialize {self._db_path}: {exc}", "sqlite") from exc
        logger.info("document_store_initialized", path=str(self._db_path))

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    async def list_documents(self, topic: str | None = None) -> list[Document]:
        sql = f"SELECT {_DOCUMENT_COLUMNS} FROM documents"
        params: tuple[Any, ...] = ()
        if topic is not None:
            sql += " WHERE topic = ?"
            params = (topic,)
        sql += " ORDER BY id ASC"

        rows = await self._fetch_all(sql, params)
        documents: list[Document] = []
        for row in rows:
            try:
                documents.append(self._row_to_document(row))
            except (ValidationError, ValueError) as exc:
                # A damaged row must not hide the rest of the corpus.
                logger.warning("document_row_invalid", id=row["id"], error=str(exc))
        return documents

    async def create_document(self, document: Document) -> Document:
        params = self._document_params(document)
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(_INSERT_DOCUMENT, params)
                await db.commit()
                new_id = cursor.lastrowid
        except aiosqlite.IntegrityError as exc:
            raise StoreError(f"document already exists for path {document.path}", "sqlite") from exc
        except aiosqlite.Error as exc:
            raise StoreError(f"failed to create document {document.path}: {exc}", "sqlite") from exc
        return document.model_copy(update={"id": new_id})

    async def update_document(self, document: Document) -> Document:
        if document.id is None:
            raise StoreError("cannot update a document without an id", "sqlite")
        params = (*self._document_params(document), document.id)
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(_UPDATE_DOCUMENT, params)
                await db.commit()
                changed = cursor.rowcount
        except aiosqlite.Error as exc:
            raise StoreError(f"failed to update document {document.id}: {exc}", "sqlite") from exc
        if changed == 0:
            raise StoreError(f"document {document.id} not found", "sqlite")
        return document

    # ------------------------------------------------------------------
    # Provider config
    # ------------------------------------------------------------------

    async def list_provider_configs(self, key: str | None = None) -> list[ProviderConfig]:
        sql = "SELECT id, key, provider FROM provider_config"
        params: tuple[Any, ...] = ()
        if key is not None:
            sql += " WHERE key = ?"
            params = (key,)
        sql += " ORDER BY id ASC"
        rows = await self._fetch_all(sql, params)
        return [ProviderConfig(id=r["id"], key=r["key"], provider=r["provider"]) for r in rows]

    async def create_provider_config(self, config: ProviderConfig) -> ProviderConfig:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(
                    "INSERT INTO provider_config (key, provider) VALUES (?, ?);",
                    (config.key, config.provider),
                )
                await db.commit()
                new_id = cursor.lastrowid
        except aiosqlite.Error as exc:
            raise StoreError(f"failed to create provider config: {exc}", "sqlite") from exc
        return config.model_copy(update={"id": new_id})

    async def update_provider_config(self, config: ProviderConfig) -> ProviderConfig:
        if config.id is None:
            raise StoreError("cannot update a provider config without an id", "sqlite")
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(
                    "UPDATE provider_config SET key = ?, provider = ? WHERE id = ?;",
                    (config.key, config.provider, config.id),
                )
                await db.commit()
        except aiosqlite.Error as exc:
            raise StoreError(f"failed to update provider config: {exc}", "sqlite") from exc
        return config

    def get_provider_name(self) -> str:
        return "sqlite_documents"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _fetch_all(self, sql: str, params: tuple[Any, ...]) -> list[aiosqlite.Row]:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(sql, params)
                return list(await cursor.fetchall())
        except aiosqlite.Error as exc:
            raise StoreError(f"query failed: {exc}", "sqlite") from exc

    @staticmethod
    def _document_params(document: Document) -> tuple[Any, ...]:
        embedding = json.dumps(document.embedding) if document.embedding else None
        return (
            document.filename,
            document.path,
            document.topic,
            document.text,
            embedding,
            document.embedding_provider,
        )

    @staticmethod
    def _row_to_document(row: aiosqlite.Row) -> Document:
        raw_embedding = row["embedding"]
        embedding = json.loads(raw_embedding) if raw_embedding else None
        return Document(
            id=row["id"],
            filename=row["filename"],
            path=row["path"],
            topic=row["topic"],
            text=row["text"] or "",
            embedding=embedding,
            embedding_provider=row["embedding_provider"],
        )
