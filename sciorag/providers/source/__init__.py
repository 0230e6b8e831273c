"""Corpus source backends.

LocalSourceBackend walks a directory tree; S3SourceBackend lists a bucket
prefix.  Both lay topics out as ``<root>/<topic_slug>/...``.
"""

from sciorag.providers.source.local_source_backend import LocalSourceBackend
from sciorag.providers.source.s3_source_backend import S3SourceBackend

__all__ = ["LocalSourceBackend", "S3SourceBackend"]
