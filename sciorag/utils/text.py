"""Text helpers shared by the source backends and the ingestion pipeline.

- :func:`sanitize_text` -- strip null bytes and control characters.
- :func:`slugify_topic` / :func:`topic_from_slug` -- map a human topic
  label to the directory/prefix name used in both storage backends and back.
- :func:`canonicalize_path` -- normalise a Document ``path`` so the same
  source always produces the same deduplication key.
"""

from __future__ import annotations

import os
import re

# C0 and C1 control characters except tab, newline and carriage return.
_CONTROL_CHARS = re.compile(r"[\x01-\x08\x0B\x0C\x0E-\x1F\x7F-\x9F]")
_NON_SLUG = re.compile(r"[^a-z0-9]+")


def sanitize_text(text: str | None) -> str:
    """Remove null bytes and control characters, then trim.

    Null bytes are dropped outright; other control characters become a space
    so adjacent words stay separated.
    """
    if not text:
        return ""
    cleaned = text.replace("\x00", "")
    cleaned = _CONTROL_CHARS.sub(" ", cleaned)
    return cleaned.strip()


def slugify_topic(topic: str) -> str:
    """Return the storage slug for a topic label.

    >>> slugify_topic("Designer Genes")
    'designer_genes'
    >>> slugify_topic("  scioly results!! ")
    'scioly_results'
    """
    slug = _NON_SLUG.sub("_", (topic or "").lower())
    return slug.strip("_")


def topic_from_slug(slug: str) -> str:
    """Convert a storage slug back to a human topic label."""
    return slug.replace("_", " ")


def is_uri(path: str) -> bool:
    """Return ``True`` for ``scheme://...`` identities (object storage)."""
    return "://" in path


def canonicalize_path(path: str) -> str:
    """Return the deduplication key for a Document ``path``.

    Local paths are resolved to an absolute, symlink-free form.  Object
    storage URIs are already canonical and are returned unchanged.
    """
    if not path:
        return ""
    if is_uri(path):
        return path
    return os.path.realpath(path)
