"""Fan-out enumeration over every configured source backend."""

from __future__ import annotations

from typing import Iterable, Sequence

import structlog

from sciorag.interfaces.source_backend import ISourceBackend
from sciorag.models.document import SourceDescriptor

logger = structlog.get_logger(logger_name=__name__)


class SourceEnumerator:
    """Concatenates descriptors from each backend in configured order.

    Local files come first, then remote objects, so within one run a local
    file is always processed before an object with the same display name.
    """

    def __init__(self, backends: Sequence[ISourceBackend]) -> None:
        self._backends = list(backends)

    @property
    def backends(self) -> list[ISourceBackend]:
        return list(self._backends)

    async def enumerate(self, topic: str | None = None) -> list[SourceDescriptor]:
        descriptors: list[SourceDescriptor] = []
        for backend in self._backends:
            items = await backend.enumerate(topic)
            descriptors.extend(items)
        logger.info("sources_enumerated", topic=topic, count=len(descriptors))
        return descriptors

    async def ensure_topic_folders(self, topics: Iterable[str]) -> None:
        topics = list(topics)
        for backend in self._backends:
            await backend.ensure_topic_folders(topics)
