"""S3 object-storage source backend.

Mirrors the local layout under a bucket prefix::

    s3://<bucket>/<prefix><topic_slug>/<key...>

boto3 is synchronous, so every call runs through ``asyncio.to_thread``
(same approach the music-db adapters take with their blocking SDKs).
Objects are only downloaded when a descriptor's loader is awaited.
"""

from __future__ import annotations

import asyncio
import functools
from pathlib import PurePosixPath
from typing import Any, Iterable

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from sciorag.interfaces.source_backend import ISourceBackend
from sciorag.models.document import SourceDescriptor
from sciorag.services.ingestion.text_extractor import extract_text_async
from sciorag.utils.errors import SourceError
from sciorag.utils.logging import get_logger
from sciorag.utils.text import slugify_topic, topic_from_slug


def _normalize_prefix(prefix: str) -> str:
    prefix = (prefix or "").lstrip("/")
    if prefix and not prefix.endswith("/"):
        prefix += "/"
    return prefix


class S3SourceBackend(ISourceBackend):
    """Enumerates objects under ``s3://bucket/prefix``.

    Parameters
    ----------
    bucket:
        Bucket name.  Empty disables the backend (enumeration returns ``[]``).
    prefix:
        Corpus root inside the bucket; a trailing ``/`` is added if missing.
    client:
        Optional pre-built boto3 S3 client (tests inject a stub).  Built
        lazily from *region* otherwise.
    region:
        AWS region used when building the client.
    """

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        client: Any | None = None,
        region: str | None = None,
    ) -> None:
        self._bucket = bucket
        self._prefix = _normalize_prefix(prefix)
        self._client = client
        self._region = region
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def enabled(self) -> bool:
        return bool(self._bucket)

    async def enumerate(self, topic: str | None = None) -> list[SourceDescriptor]:
        if not self.enabled:
            return []

        list_prefix = self._prefix
        if topic:
            slug = slugify_topic(topic)
            if not slug:
                self._logger.info("s3_topic_slug_empty", topic=topic)
                return []
            list_prefix += f"{slug}/"

        try:
            objects = await asyncio.to_thread(self._list_objects, list_prefix)
        except (BotoCoreError, ClientError) as exc:
            self._logger.error("s3_list_failed", bucket=self._bucket, prefix=list_prefix, error=str(exc))
            return []

        descriptors: list[SourceDescriptor] = []
        for obj in objects:
            key: str = obj["Key"]
            if key.endswith("/") and int(obj.get("Size", 0)) == 0:
                continue  # directory marker

            relative = key[len(self._prefix):]
            item_topic = topic if topic else self._infer_topic(relative)
            format_hint = PurePosixPath(key).suffix.lower()
            descriptors.append(
                SourceDescriptor(
                    source_path=f"s3://{self._bucket}/{key}",
                    filename=relative,
                    topic=item_topic,
                    format_hint=format_hint,
                    text_loader=functools.partial(self._load_text, key, format_hint),
                )
            )

        self._logger.info(
            "s3_sources_enumerated",
            bucket=self._bucket,
            prefix=list_prefix,
            topic=topic,
            count=len(descriptors),
        )
        return descriptors

    async def ensure_topic_folders(self, topics: Iterable[str]) -> None:
        """Put a zero-byte ``<prefix><slug>/`` marker for each topic.

        Re-putting an existing marker is harmless, so this is safe to call
        before every run.
        """
        if not self.enabled:
            return
        for topic in topics:
            slug = slugify_topic(topic)
            if not slug:
                continue
            key = f"{self._prefix}{slug}/"
            try:
                await asyncio.to_thread(self._put_marker, key)
            except (BotoCoreError, ClientError) as exc:
                self._logger.warning("s3_topic_folder_failed", bucket=self._bucket, key=key, error=str(exc))

    def get_backend_name(self) -> str:
        return "s3"

    # ------------------------------------------------------------------
    # Internals (blocking; run via asyncio.to_thread)
    # ------------------------------------------------------------------

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = boto3.client("s3", region_name=self._region or None)
        return self._client

    def _list_objects(self, prefix: str) -> list[dict[str, Any]]:
        paginator = self._get_client().get_paginator("list_objects_v2")
        objects: list[dict[str, Any]] = []
        for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
            objects.extend(page.get("Contents", []))
        return objects

    def _get_object_bytes(self, key: str) -> bytes:
        response = self._get_client().get_object(Bucket=self._bucket, Key=key)
        return response["Body"].read()

    def _put_marker(self, key: str) -> None:
        self._get_client().put_object(Bucket=self._bucket, Key=key, Body=b"")

    @staticmethod
    def _infer_topic(relative: str) -> str | None:
        parts = relative.split("/")
        if len(parts) < 2 or not parts[0]:
            return None
        return topic_from_slug(parts[0])

    async def _load_text(self, key: str, format_hint: str) -> str:
        try:
            data = await asyncio.to_thread(self._get_object_bytes, key)
        except (BotoCoreError, ClientError) as exc:
            raise SourceError(f"cannot fetch s3://{self._bucket}/{key}: {exc}", "s3") from exc
        return await extract_text_async(data, format_hint)
