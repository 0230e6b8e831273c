"""Document ingestion pipeline.

Modules
-------
- **text_extractor** -- raw bytes -> sanitized text (PDF, Word, plain text)
- **tabular_normalizer** -- snippet building and the results-CSV rewrite
- **source_enumerator** -- fan-out over the configured source backends
- **corpus_sync** -- create-or-update Documents keyed by canonical path
"""

from sciorag.services.ingestion.corpus_sync import CorpusSynchronizer, PathIndex, SyncOutcome
from sciorag.services.ingestion.source_enumerator import SourceEnumerator
from sciorag.services.ingestion.tabular_normalizer import (
    TABULAR_TOPIC,
    build_snippet,
    build_tabular_snippet,
    normalize_school_team_label,
    parse_tournament_meta,
    split_csv_line,
)
from sciorag.services.ingestion.text_extractor import extract_text, extract_text_async

__all__ = [
    "CorpusSynchronizer",
    "PathIndex",
    "SourceEnumerator",
    "SyncOutcome",
    "TABULAR_TOPIC",
    "build_snippet",
    "build_tabular_snippet",
    "extract_text",
    "extract_text_async",
    "normalize_school_team_label",
    "parse_tournament_meta",
    "split_csv_line",
]
