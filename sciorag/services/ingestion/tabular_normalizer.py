"""Snippet building, including the tournament-results CSV normalizer.

Raw CSV dumps retrieve poorly: a row like ``Lincoln HS,A,1,120`` shares no
words with "how did Lincoln Team A place?".  For the reserved tabular topic
each results CSV is rewritten into one self-contained line per team::

    2024-02-10 | Golden Gate Invitational | Lincoln HS Team A | rank=1 | total=120 | state=CA

Everything else is stored as plain truncated text.

Recognized CSV schema (header names are matched case-insensitively):

    required  school, rank, total
    optional  team, state, track

Source filenames are expected to look like
``2024-02-10_golden_gate_invitational_c.csv``; the date and tournament name
are taken from there.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath

import structlog

logger = structlog.get_logger(logger_name=__name__)

TABULAR_TOPIC = "scioly results"
TABULAR_FORMAT = ".csv"

GENERIC_SNIPPET_CHARS = 4000
TABULAR_SNIPPET_CHARS = 24000

_TOURNAMENT_FILENAME = re.compile(r"^(\d{4}-\d{2}-\d{2})_(.+)$")
_DIVISION_SUFFIX = re.compile(r"_c$", re.IGNORECASE)
_UNDERSCORES = re.compile(r"_+")
_TEAM_PREFIX = re.compile(r"^team\s+", re.IGNORECASE)
_LINE_BREAK = re.compile(r"\r?\n")


def split_csv_line(line: str) -> list[str]:
    """Split one CSV line on commas outside double quotes.

    A doubled quote inside a quoted field is an escaped quote.  Fields are
    returned trimmed.

    >>> split_csv_line('"Lincoln, HS", A ,3')
    ['Lincoln, HS', 'A', '3']
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
        i += 1
    fields.append("".join(current).strip())
    return fields


def normalize_school_team_label(school: str, team: str) -> str:
    """Combine school and team into one distinct label.

    >>> normalize_school_team_label("Lincoln HS", "")
    'Lincoln HS Team Unspecified'
    >>> normalize_school_team_label("Lincoln HS", "Team B")
    'Lincoln HS Team B'
    >>> normalize_school_team_label("Lincoln HS", "B")
    'Lincoln HS Team B'
    """
    school_name = (school or "").strip()
    raw_team = (team or "").strip()
    if not school_name:
        return ""
    if not raw_team:
        return f"{school_name} Team Unspecified"
    if _TEAM_PREFIX.match(raw_team):
        return f"{school_name} {raw_team}"
    return f"{school_name} Team {raw_team}"


def parse_tournament_meta(filename: str) -> tuple[str, str]:
    """Return ``(date, tournament)`` parsed from a results filename.

    Falls back to ``("unknown-date", <stem>)`` when the stem does not start
    with ``YYYY-MM-DD_``.
    """
    stem = PurePosixPath(filename.replace("\\", "/")).stem
    match = _TOURNAMENT_FILENAME.match(stem)
    if not match:
        return "unknown-date", stem
    date, raw_tournament = match.groups()
    tournament = _DIVISION_SUFFIX.sub("", raw_tournament)
    tournament = _UNDERSCORES.sub(" ", tournament).strip()
    return date, tournament


def build_tabular_snippet(
    raw_text: str,
    filename: str,
    max_chars: int = TABULAR_SNIPPET_CHARS,
    fallback_chars: int = GENERIC_SNIPPET_CHARS,
) -> str:
    """Rewrite a tournament-results CSV into one fact line per team.

    Returns the plain truncated text when the CSV has fewer than two lines
    or lacks a required column.
    """
    raw_text = raw_text or ""
    lines = [line.strip() for line in _LINE_BREAK.split(raw_text)]
    lines = [line for line in lines if line]
    if len(lines) < 2:
        return raw_text[:fallback_chars]

    headers = [h.lower() for h in split_csv_line(lines[0])]

    def _index(name: str) -> int:
        return headers.index(name) if name in headers else -1

    idx_school = _index("school")
    idx_team = _index("team")
    idx_rank = _index("rank")
    idx_total = _index("total")
    idx_state = _index("state")
    idx_track = _index("track")
    if idx_school < 0 or idx_rank < 0 or idx_total < 0:
        logger.info("tabular_schema_not_recognized", filename=filename, headers=headers)
        return raw_text[:fallback_chars]

    date, tournament = parse_tournament_meta(filename)
    basename = PurePosixPath(filename.replace("\\", "/")).name
    out = [
        f"Scioly results extracted from {basename}.",
        "Treat each team label as distinct (example: Team A vs Team B).",
    ]

    emitted = 0
    for line in lines[1:]:
        cols = split_csv_line(line)

        def _col(idx: int) -> str:
            return cols[idx] if 0 <= idx < len(cols) else ""

        label = normalize_school_team_label(_col(idx_school), _col(idx_team))
        rank = _col(idx_rank)
        total = _col(idx_total)
        if not label or not rank or not total:
            continue

        parts = [date, tournament, label, f"rank={rank}", f"total={total}"]
        state = _col(idx_state)
        track = _col(idx_track)
        if state:
            parts.append(f"state={state}")
        if track:
            parts.append(f"track={track}")
        out.append(" | ".join(parts))
        emitted += 1

    logger.debug("tabular_snippet_built", filename=filename, rows=emitted)
    return "\n".join(out)[:max_chars]


def is_tabular_source(topic: str | None, format_hint: str | None) -> bool:
    """Return ``True`` when the source gets the tabular rewrite."""
    return topic == TABULAR_TOPIC and (format_hint or "").lower() == TABULAR_FORMAT


def build_snippet(
    text: str,
    filename: str,
    topic: str | None,
    format_hint: str | None,
    generic_chars: int = GENERIC_SNIPPET_CHARS,
    tabular_chars: int = TABULAR_SNIPPET_CHARS,
) -> str:
    """Return the text stored for a Document built from this source."""
    text = text or ""
    if is_tabular_source(topic, format_hint):
        return build_tabular_snippet(text, filename, tabular_chars, generic_chars)
    return text[:generic_chars]
