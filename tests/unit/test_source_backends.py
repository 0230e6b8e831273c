"""Unit tests for the local and S3 source backends and the enumerator."""

from __future__ import annotations

import os

import pytest

from sciorag.providers.source.local_source_backend import LocalSourceBackend
from sciorag.providers.source.s3_source_backend import S3SourceBackend
from sciorag.services.ingestion.source_enumerator import SourceEnumerator
from sciorag.utils.errors import SourceError
from tests.conftest import StubS3Client

# ======================================================================
# Local backend
# ======================================================================


class TestLocalSourceBackend:
    @pytest.mark.asyncio
    async def test_enumerate_all_infers_topics(self, local_docs) -> None:
        sources = await LocalSourceBackend(local_docs).enumerate()
        by_name = {s.filename: s for s in sources}

        assert set(by_name) == {
            "README.txt",
            "designer_genes/notes/mitosis.txt",
            "forensics/fibers.txt",
            "scioly_results/2024-02-10_golden_gate_invitational_c.csv",
        }
        assert by_name["README.txt"].topic is None
        assert by_name["designer_genes/notes/mitosis.txt"].topic == "designer genes"
        assert by_name["forensics/fibers.txt"].topic == "forensics"
        assert by_name["scioly_results/2024-02-10_golden_gate_invitational_c.csv"].format_hint == ".csv"

    @pytest.mark.asyncio
    async def test_enumerate_topic_uses_given_label(self, local_docs) -> None:
        sources = await LocalSourceBackend(local_docs).enumerate("Designer Genes")
        assert [s.filename for s in sources] == ["designer_genes/notes/mitosis.txt"]
        assert sources[0].topic == "Designer Genes"

    @pytest.mark.asyncio
    async def test_source_path_is_resolved(self, local_docs) -> None:
        [source] = await LocalSourceBackend(local_docs).enumerate("forensics")
        assert source.source_path == os.path.realpath(local_docs / "forensics" / "fibers.txt")

    @pytest.mark.asyncio
    async def test_loader_reads_lazily(self, local_docs) -> None:
        [source] = await LocalSourceBackend(local_docs).enumerate("forensics")
        (local_docs / "forensics" / "fibers.txt").write_text("updated\x00 text", encoding="utf-8")
        assert await source.text_loader() == "updated text"

    @pytest.mark.asyncio
    async def test_loader_missing_file_raises_source_error(self, local_docs) -> None:
        [source] = await LocalSourceBackend(local_docs).enumerate("forensics")
        (local_docs / "forensics" / "fibers.txt").unlink()
        with pytest.raises(SourceError):
            await source.text_loader()

    @pytest.mark.asyncio
    async def test_missing_root_is_empty(self, tmp_path) -> None:
        assert await LocalSourceBackend(tmp_path / "absent").enumerate() == []

    @pytest.mark.asyncio
    async def test_missing_topic_dir_is_empty(self, local_docs) -> None:
        assert await LocalSourceBackend(local_docs).enumerate("anatomy") == []

    @pytest.mark.asyncio
    async def test_topic_without_slug_is_empty(self, local_docs) -> None:
        assert await LocalSourceBackend(local_docs).enumerate("???") == []

    @pytest.mark.asyncio
    async def test_ensure_topic_folders_is_noop(self, local_docs) -> None:
        await LocalSourceBackend(local_docs).ensure_topic_folders(["anatomy"])
        assert not (local_docs / "anatomy").exists()

    def test_backend_name(self, tmp_path) -> None:
        assert LocalSourceBackend(tmp_path).get_backend_name() == "local"


# ======================================================================
# S3 backend
# ======================================================================


def _s3_objects() -> dict[str, bytes]:
    return {
        "local_docs/": b"",
        "local_docs/forensics/": b"",
        "local_docs/forensics/fibers.txt": b"Cotton burns like paper.",
        "local_docs/designer_genes/mitosis.txt": b"Two daughter cells.",
        "local_docs/loose.txt": b"no topic",
        "other/ignored.txt": b"outside prefix",
    }


class TestS3SourceBackend:
    @pytest.mark.asyncio
    async def test_enumerate_all(self) -> None:
        backend = S3SourceBackend("corpus", "local_docs", client=StubS3Client(_s3_objects()))
        sources = await backend.enumerate()
        by_name = {s.filename: s for s in sources}

        assert set(by_name) == {"forensics/fibers.txt", "designer_genes/mitosis.txt", "loose.txt"}
        assert by_name["forensics/fibers.txt"].source_path == "s3://corpus/local_docs/forensics/fibers.txt"
        assert by_name["designer_genes/mitosis.txt"].topic == "designer genes"
        assert by_name["loose.txt"].topic is None

    @pytest.mark.asyncio
    async def test_enumerate_topic(self) -> None:
        backend = S3SourceBackend("corpus", "local_docs/", client=StubS3Client(_s3_objects()))
        sources = await backend.enumerate("forensics")
        assert [s.filename for s in sources] == ["forensics/fibers.txt"]
        assert await sources[0].text_loader() == "Cotton burns like paper."

    @pytest.mark.asyncio
    async def test_topic_without_slug_is_empty(self) -> None:
        backend = S3SourceBackend("corpus", "local_docs/", client=StubS3Client(_s3_objects()))
        assert await backend.enumerate("???") == []

    @pytest.mark.asyncio
    async def test_no_bucket_is_empty(self) -> None:
        client = StubS3Client(_s3_objects())
        assert await S3SourceBackend("", "local_docs/", client=client).enumerate() == []

    @pytest.mark.asyncio
    async def test_listing_failure_is_empty(self) -> None:
        client = StubS3Client(_s3_objects())
        client.fail_listing = True
        assert await S3SourceBackend("corpus", "local_docs/", client=client).enumerate() == []

    @pytest.mark.asyncio
    async def test_loader_failure_raises_source_error(self) -> None:
        client = StubS3Client(_s3_objects())
        backend = S3SourceBackend("corpus", "local_docs/", client=client)
        [source] = await backend.enumerate("forensics")
        del client.objects["local_docs/forensics/fibers.txt"]
        with pytest.raises(SourceError):
            await source.text_loader()

    @pytest.mark.asyncio
    async def test_ensure_topic_folders(self) -> None:
        client = StubS3Client()
        backend = S3SourceBackend("corpus", "local_docs/", client=client)
        await backend.ensure_topic_folders(["forensics", "designer genes", "scioly results"])
        await backend.ensure_topic_folders(["forensics"])
        assert client.put_keys == [
            "local_docs/forensics/",
            "local_docs/designer_genes/",
            "local_docs/scioly_results/",
            "local_docs/forensics/",
        ]
        # Markers are never enumerated as sources.
        assert await backend.enumerate() == []


# ======================================================================
# Enumerator
# ======================================================================


class TestSourceEnumerator:
    @pytest.mark.asyncio
    async def test_local_then_remote(self, local_docs) -> None:
        enumerator = SourceEnumerator(
            [
                LocalSourceBackend(local_docs),
                S3SourceBackend("corpus", "local_docs/", client=StubS3Client(_s3_objects())),
            ]
        )
        sources = await enumerator.enumerate("forensics")
        assert [s.source_path.startswith("s3://") for s in sources] == [False, True]

    @pytest.mark.asyncio
    async def test_ensure_topic_folders_fans_out(self, local_docs) -> None:
        client = StubS3Client()
        enumerator = SourceEnumerator(
            [LocalSourceBackend(local_docs), S3SourceBackend("corpus", "docs", client=client)]
        )
        await enumerator.ensure_topic_folders(["forensics"])
        assert client.put_keys == ["docs/forensics/"]
