"""Shared pytest fixtures for the sciorag test suite."""

from __future__ import annotations

import io
from typing import Any, Iterable

import pytest
from botocore.exceptions import ClientError

from sciorag.interfaces.document_store import IDocumentStore
from sciorag.interfaces.embedding_provider import IEmbeddingProvider
from sciorag.models.document import Document, ProviderConfig, SourceDescriptor
from sciorag.utils.errors import EmbeddingError, StoreError

# ---------------------------------------------------------------------------
# In-memory doubles
# ---------------------------------------------------------------------------


class InMemoryDocumentStore(IDocumentStore):
    """Dict-backed IDocumentStore with switchable failures.

    Set ``fail_reads`` / ``fail_writes`` / ``fail_config_writes`` to make
    the matching operations raise :class:`StoreError`.
    """

    def __init__(self, documents: Iterable[Document] = ()) -> None:
        self.documents: list[Document] = []
        self.configs: list[ProviderConfig] = []
        self.fail_reads = False
        self.fail_writes = False
        self.fail_config_writes = False
        self.create_calls = 0
        self.update_calls = 0
        self._next_id = 1
        for document in documents:
            self._insert(document)

    def _insert(self, document: Document) -> Document:
        stored = document.model_copy(update={"id": self._next_id})
        self._next_id += 1
        self.documents.append(stored)
        return stored

    async def initialize(self) -> None:
        return None

    async def list_documents(self, topic: str | None = None) -> list[Document]:
        if self.fail_reads:
            raise StoreError("read failed", "memory")
        if topic is None:
            return list(self.documents)
        return [d for d in self.documents if d.topic == topic]

    async def create_document(self, document: Document) -> Document:
        self.create_calls += 1
        if self.fail_writes:
            raise StoreError("write failed", "memory")
        if any(d.path == document.path for d in self.documents):
            raise StoreError(f"document already exists for path {document.path}", "memory")
        return self._insert(document)

    async def update_document(self, document: Document) -> Document:
        self.update_calls += 1
        if self.fail_writes:
            raise StoreError("write failed", "memory")
        for i, existing in enumerate(self.documents):
            if existing.id == document.id:
                self.documents[i] = document
                return document
        raise StoreError(f"document {document.id} not found", "memory")

    async def list_provider_configs(self, key: str | None = None) -> list[ProviderConfig]:
        if self.fail_reads:
            raise StoreError("read failed", "memory")
        return [c for c in self.configs if key is None or c.key == key]

    async def create_provider_config(self, config: ProviderConfig) -> ProviderConfig:
        if self.fail_config_writes:
            raise StoreError("write failed", "memory")
        stored = config.model_copy(update={"id": len(self.configs) + 1})
        self.configs.append(stored)
        return stored

    async def update_provider_config(self, config: ProviderConfig) -> ProviderConfig:
        if self.fail_config_writes:
            raise StoreError("write failed", "memory")
        self.configs = [config if c.id == config.id else c for c in self.configs]
        return config

    def get_provider_name(self) -> str:
        return "memory"


class FakeEmbeddingProvider(IEmbeddingProvider):
    """Deterministic embedding provider that records every call.

    Texts found in ``vectors`` get that vector; anything else gets
    ``default``.  ``fail`` makes every call raise :class:`EmbeddingError`.
    """

    def __init__(
        self,
        name: str = "openai",
        vectors: dict[str, list[float]] | None = None,
        default: list[float] | None = None,
        available: bool = True,
    ) -> None:
        self.name = name
        self.vectors = dict(vectors or {})
        self.default = default if default is not None else [1.0, 0.0, 0.0]
        self.available = available
        self.fail = False
        self.calls: list[str] = []

    async def embed(self, texts: list[str]) -> list[list[float]]:
        self.calls.extend(texts)
        if self.fail:
            raise EmbeddingError("embedding backend down", self.name)
        return [list(self.vectors.get(t, self.default)) for t in texts]

    async def embed_single(self, text: str) -> list[float]:
        return (await self.embed([text]))[0]

    def get_dimension(self) -> int:
        return len(self.default)

    def get_provider_name(self) -> str:
        return self.name

    def is_available(self) -> bool:
        return self.available


class StubS3Client:
    """Just enough of a boto3 S3 client for the source backend."""

    def __init__(self, objects: dict[str, bytes] | None = None) -> None:
        self.objects: dict[str, bytes] = dict(objects or {})
        self.put_keys: list[str] = []
        self.fail_listing = False

    def get_paginator(self, operation: str) -> "StubS3Client._Paginator":
        assert operation == "list_objects_v2"
        return StubS3Client._Paginator(self)

    def get_object(self, Bucket: str, Key: str) -> dict[str, Any]:  # noqa: N803
        if Key not in self.objects:
            raise ClientError(
                {"Error": {"Code": "NoSuchKey", "Message": "missing"}},
                "GetObject",
            )
        return {"Body": io.BytesIO(self.objects[Key])}

    def put_object(self, Bucket: str, Key: str, Body: bytes) -> dict[str, Any]:  # noqa: N803
        self.put_keys.append(Key)
        self.objects[Key] = Body
        return {}

    class _Paginator:
        def __init__(self, client: StubS3Client) -> None:
            self._client = client

        def paginate(self, Bucket: str, Prefix: str) -> list[dict[str, Any]]:  # noqa: N803
            if self._client.fail_listing:
                raise ClientError(
                    {"Error": {"Code": "AccessDenied", "Message": "denied"}},
                    "ListObjectsV2",
                )
            contents = [
                {"Key": key, "Size": len(body)}
                for key, body in sorted(self._client.objects.items())
                if key.startswith(Prefix)
            ]
            # Two pages so pagination is exercised.
            half = len(contents) // 2
            return [{"Contents": contents[:half]}, {"Contents": contents[half:]}]


def make_source(
    path: str,
    text: str,
    filename: str | None = None,
    topic: str | None = None,
    format_hint: str = ".txt",
) -> SourceDescriptor:
    """Build a SourceDescriptor whose loader returns *text*."""

    async def _loader() -> str:
        return text

    return SourceDescriptor(
        source_path=path,
        filename=filename or path.rsplit("/", 1)[-1],
        topic=topic,
        format_hint=format_hint,
        text_loader=_loader,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def fake_embedding_provider() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider(name="openai")


@pytest.fixture
def stub_s3_client() -> StubS3Client:
    return StubS3Client()


@pytest.fixture
def local_docs(tmp_path):  # noqa: ANN001, ANN201
    """A corpus root with one file per predefined topic plus a loose file."""
    root = tmp_path / "local_docs"
    (root / "forensics").mkdir(parents=True)
    (root / "designer_genes" / "notes").mkdir(parents=True)
    (root / "scioly_results").mkdir(parents=True)

    (root / "forensics" / "fibers.txt").write_text(
        "Fiber burn test: cotton smells like burning paper.", encoding="utf-8"
    )
    (root / "designer_genes" / "notes" / "mitosis.txt").write_text(
        "Mitosis produces two identical daughter cells.", encoding="utf-8"
    )
    (root / "scioly_results" / "2024-02-10_golden_gate_invitational_c.csv").write_text(
        'school,team,rank,total,state\n"Lincoln HS","A",1,120,"CA"\n"Lincoln HS","B",4,310,"CA"\n',
        encoding="utf-8",
    )
    (root / "README.txt").write_text("corpus root readme", encoding="utf-8")
    return root
