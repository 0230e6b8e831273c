"""Local filesystem source backend.

Walks a corpus root laid out as one sub-directory per topic slug::

    local_docs/
        forensics/fiber_guide.pdf
        designer_genes/notes/mitosis.docx
        scioly_results/2024-02-10_golden_gate_invitational_c.csv

Every regular file becomes one :class:`SourceDescriptor`.  File contents are
only read when the descriptor's loader is awaited.
"""

from __future__ import annotations

import asyncio
import functools
import os
from pathlib import Path

import structlog

from sciorag.interfaces.source_backend import ISourceBackend
from sciorag.models.document import SourceDescriptor
from sciorag.services.ingestion.text_extractor import extract_text_async
from sciorag.utils.errors import SourceError
from sciorag.utils.logging import get_logger
from sciorag.utils.text import slugify_topic, topic_from_slug


class LocalSourceBackend(ISourceBackend):
    """Enumerates files under a local corpus root."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)
        self._logger: structlog.BoundLogger = get_logger(__name__)

    async def enumerate(self, topic: str | None = None) -> list[SourceDescriptor]:
        return await asyncio.to_thread(self._walk, topic)

    def get_backend_name(self) -> str:
        return "local"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _walk(self, topic: str | None) -> list[SourceDescriptor]:
        if not self._root.is_dir():
            self._logger.warning("local_root_missing", root=str(self._root))
            return []

        base = self._root
        if topic:
            slug = slugify_topic(topic)
            if not slug:
                self._logger.info("local_topic_slug_empty", topic=topic)
                return []
            base = self._root / slug
            if not base.is_dir():
                self._logger.info("local_topic_dir_missing", topic=topic, path=str(base))
                return []

        descriptors: list[SourceDescriptor] = []
        # Sorted so repeated runs see files in the same order.
        for file_path in sorted(base.rglob("*")):
            if not file_path.is_file():
                continue
            relative = file_path.relative_to(self._root)
            item_topic = topic if topic else self._infer_topic(relative)
            format_hint = file_path.suffix.lower()
            descriptors.append(
                SourceDescriptor(
                    source_path=os.path.realpath(file_path),
                    filename=relative.as_posix(),
                    topic=item_topic,
                    format_hint=format_hint,
                    text_loader=functools.partial(self._load_text, file_path, format_hint),
                )
            )

        self._logger.info(
            "local_sources_enumerated",
            root=str(self._root),
            topic=topic,
            count=len(descriptors),
        )
        return descriptors

    @staticmethod
    def _infer_topic(relative: Path) -> str | None:
        # Files directly under the root belong to no topic.
        if len(relative.parts) < 2:
            return None
        return topic_from_slug(relative.parts[0])

    @staticmethod
    async def _load_text(file_path: Path, format_hint: str) -> str:
        try:
            data = await asyncio.to_thread(file_path.read_bytes)
        except OSError as exc:
            raise SourceError(f"cannot read {file_path}: {exc}", "local") from exc
        return await extract_text_async(data, format_hint)
