"""Integration tests for CorpusSynchronizer.

Exercises create-or-update by canonical path, skip accounting and provider
pairing with in-memory doubles (no real API calls).
"""

from __future__ import annotations

import os

import pytest

from sciorag.models.document import Document, SourceDescriptor
from sciorag.providers.store.sqlite_document_store import SQLiteDocumentStore
from sciorag.services.embedding_service import EmbeddingService
from sciorag.services.ingestion.corpus_sync import CorpusSynchronizer, PathIndex
from sciorag.services.ingestion.tabular_normalizer import TABULAR_TOPIC
from tests.conftest import FakeEmbeddingProvider, InMemoryDocumentStore, make_source

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _synchronizer(
    store,
    provider: FakeEmbeddingProvider | None = None,
    concurrency: int = 1,
) -> CorpusSynchronizer:
    embeddings = EmbeddingService([provider or FakeEmbeddingProvider("openai")])
    return CorpusSynchronizer(store=store, embeddings=embeddings, concurrency=concurrency)


def _sources():
    return [
        make_source("/corpus/forensics/a.txt", "Fiber burn test", "forensics/a.txt", "forensics"),
        make_source("/corpus/forensics/b.txt", "Hair medulla", "forensics/b.txt", "forensics"),
    ]


# ---------------------------------------------------------------------------
# Idempotence and deduplication
# ---------------------------------------------------------------------------


class TestIdempotence:
    @pytest.mark.asyncio
    async def test_second_import_updates_only(self, tmp_path) -> None:
        store = SQLiteDocumentStore(db_path=tmp_path / "documents.db")
        await store.initialize()
        sync = _synchronizer(store)

        first = await sync.sync(_sources(), "openai")
        before = await store.list_documents()
        second = await sync.sync(_sources(), "openai")
        after = await store.list_documents()

        assert (first.added, first.updated, first.skipped, first.total) == (2, 0, 0, 2)
        assert (second.added, second.updated, second.skipped, second.total) == (0, 2, 0, 2)
        assert [d.id for d in after] == [d.id for d in before]
        assert [d.text for d in after] == [d.text for d in before]

    @pytest.mark.asyncio
    async def test_same_path_different_filename_in_one_run(self, memory_store) -> None:
        sources = [
            make_source("/corpus/forensics/a.txt", "first", "forensics/a.txt", "forensics"),
            make_source("/corpus/forensics/a.txt", "second", "renamed.txt", "forensics"),
        ]
        result = await _synchronizer(memory_store).sync(sources, "openai")

        assert (result.added, result.updated) == (1, 1)
        [doc] = memory_store.documents
        assert doc.filename == "renamed.txt"
        assert doc.text == "second"

    @pytest.mark.asyncio
    async def test_unnormalized_local_path_matches_existing(self, tmp_path) -> None:
        real = tmp_path / "forensics" / "a.txt"
        real.parent.mkdir()
        real.write_text("x", encoding="utf-8")
        store = InMemoryDocumentStore(
            [Document(filename="forensics/a.txt", path=os.path.realpath(real), topic="forensics")]
        )
        detour = str(tmp_path / "forensics" / ".." / "forensics" / "a.txt")

        result = await _synchronizer(store).sync([make_source(detour, "new text")], None)

        assert (result.added, result.updated) == (0, 1)
        assert len(store.documents) == 1

    @pytest.mark.asyncio
    async def test_s3_and_local_same_display_name_are_distinct(self, memory_store) -> None:
        sources = [
            make_source("/corpus/forensics/a.txt", "local", "forensics/a.txt"),
            make_source("s3://bucket/local_docs/forensics/a.txt", "remote", "forensics/a.txt"),
        ]
        result = await _synchronizer(memory_store).sync(sources, None)
        assert result.added == 2

    @pytest.mark.asyncio
    async def test_concurrent_duplicates_create_once(self, memory_store) -> None:
        sources = [make_source("/corpus/a.txt", f"text {i}", f"name{i}.txt") for i in range(5)]
        result = await _synchronizer(memory_store, concurrency=4).sync(sources, "openai")

        assert (result.added, result.updated, result.skipped) == (1, 4, 0)
        assert len(memory_store.documents) == 1
        assert memory_store.create_calls == 1

    @pytest.mark.asyncio
    async def test_explicit_index_is_updated(self, memory_store) -> None:
        index = PathIndex()
        await _synchronizer(memory_store).sync(_sources(), None, index=index)
        assert "/corpus/forensics/a.txt" in index
        assert len(index) == 2


# ---------------------------------------------------------------------------
# Skips
# ---------------------------------------------------------------------------


class TestSkips:
    @pytest.mark.asyncio
    async def test_empty_snippet_skipped(self, memory_store) -> None:
        provider = FakeEmbeddingProvider("openai")
        sources = [make_source("/corpus/empty.txt", "  \n "), *_sources()]

        result = await _synchronizer(memory_store, provider).sync(sources, "openai")

        assert (result.added, result.skipped) == (2, 1)
        assert all(d.path != "/corpus/empty.txt" for d in memory_store.documents)
        assert "  \n " not in provider.calls

    @pytest.mark.asyncio
    async def test_loader_failure_skipped_and_batch_continues(self, memory_store) -> None:
        async def _broken() -> str:
            raise OSError("permission denied")

        broken = SourceDescriptor(
            source_path="/corpus/broken.pdf",
            filename="broken.pdf",
            topic=None,
            format_hint=".pdf",
            text_loader=_broken,
        )

        result = await _synchronizer(memory_store).sync([broken, *_sources()], None)
        assert (result.added, result.skipped) == (2, 1)

    @pytest.mark.asyncio
    async def test_store_write_failure_skipped(self, memory_store) -> None:
        memory_store.fail_writes = True
        result = await _synchronizer(memory_store).sync(_sources(), None)
        assert (result.added, result.updated, result.skipped, result.total) == (0, 0, 2, 0)

    @pytest.mark.asyncio
    async def test_total_counts_existing_documents(self) -> None:
        store = InMemoryDocumentStore(
            [Document(filename="old.txt", path="/corpus/old.txt", topic="forensics")]
        )
        result = await _synchronizer(store).sync(_sources(), None)
        assert result.total == 3


# ---------------------------------------------------------------------------
# Embedding pairing and topics
# ---------------------------------------------------------------------------


class TestEmbeddingPairing:
    @pytest.mark.asyncio
    async def test_embedding_tagged_with_provider(self, memory_store) -> None:
        await _synchronizer(memory_store).sync(_sources(), "openai")
        for doc in memory_store.documents:
            assert doc.embedding == [1.0, 0.0, 0.0]
            assert doc.embedding_provider == "openai"

    @pytest.mark.asyncio
    async def test_generation_only_provider_stores_no_embedding(self, memory_store) -> None:
        provider = FakeEmbeddingProvider("openai")
        await _synchronizer(memory_store, provider).sync(_sources(), "bedrock")
        assert provider.calls == []
        for doc in memory_store.documents:
            assert doc.embedding is None
            assert doc.embedding_provider is None

    @pytest.mark.asyncio
    async def test_no_provider_makes_no_embedding_calls(self, memory_store) -> None:
        provider = FakeEmbeddingProvider("openai")
        await _synchronizer(memory_store, provider).sync(_sources(), None)
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_failed_embedding_stored_without_vector(self, memory_store) -> None:
        provider = FakeEmbeddingProvider("openai")
        provider.fail = True
        result = await _synchronizer(memory_store, provider).sync(_sources(), "openai")
        assert result.added == 2
        assert all(d.embedding is None and d.embedding_provider is None for d in memory_store.documents)

    @pytest.mark.asyncio
    async def test_reimport_without_provider_clears_vector(self, memory_store) -> None:
        sync = _synchronizer(memory_store)
        await sync.sync(_sources(), "openai")
        await sync.sync(_sources(), None)
        assert all(d.embedding is None for d in memory_store.documents)


class TestTopics:
    @pytest.mark.asyncio
    async def test_update_without_topic_keeps_existing(self, memory_store) -> None:
        sync = _synchronizer(memory_store)
        await sync.sync([make_source("/corpus/a.txt", "x", topic="forensics")], None)
        await sync.sync([make_source("/corpus/a.txt", "y", topic=None)], None)
        assert memory_store.documents[0].topic == "forensics"

    @pytest.mark.asyncio
    async def test_update_with_topic_replaces(self, memory_store) -> None:
        sync = _synchronizer(memory_store)
        await sync.sync([make_source("/corpus/a.txt", "x", topic="forensics")], None)
        await sync.sync([make_source("/corpus/a.txt", "y", topic="designer genes")], None)
        assert memory_store.documents[0].topic == "designer genes"

    @pytest.mark.asyncio
    async def test_tabular_source_normalized(self, memory_store) -> None:
        csv_text = 'school,team,rank,total,state\n"Lincoln HS","A",1,120,"CA"'
        source = make_source(
            "/corpus/scioly_results/2024-02-10_golden_gate_invitational_c.csv",
            csv_text,
            "scioly_results/2024-02-10_golden_gate_invitational_c.csv",
            TABULAR_TOPIC,
            ".csv",
        )
        await _synchronizer(memory_store).sync([source], None)
        [doc] = memory_store.documents
        assert doc.text.splitlines()[-1] == (
            "2024-02-10 | golden gate invitational | Lincoln HS Team A | rank=1 | total=120 | state=CA"
        )

    @pytest.mark.asyncio
    async def test_generic_text_truncated(self, memory_store) -> None:
        await _synchronizer(memory_store).sync([make_source("/corpus/long.txt", "z" * 9000)], None)
        assert len(memory_store.documents[0].text) == 4000
