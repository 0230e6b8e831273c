"""Raw bytes -> sanitized plain text.

Dispatches on the format hint (lower-case extension with the leading dot):

    .pdf          PyMuPDF page text, pages joined by newlines
    .docx / .doc  python-docx paragraph text (best effort)
    anything else UTF-8 decode, invalid sequences replaced

Whatever the format, the result goes through
:func:`~sciorag.utils.text.sanitize_text` so snippet length limits apply to
clean text.  Corrupt or unsupported content never raises out of
:func:`extract_text`; the caller gets the best text available, possibly
``""``.
"""

from __future__ import annotations

import asyncio
import io

import docx
import fitz  # PyMuPDF -- the "fitz" import name is a PyMuPDF convention
import structlog

from sciorag.utils.errors import ExtractionError
from sciorag.utils.text import sanitize_text

logger = structlog.get_logger(logger_name=__name__)

PDF_FORMATS = frozenset({".pdf"})
WORD_FORMATS = frozenset({".docx", ".doc"})


def normalize_format_hint(format_hint: str | None) -> str:
    """Return ``".ext"`` in lower case for ``"PDF"``, ``".Pdf"`` or ``"pdf"``."""
    hint = (format_hint or "").strip().lower()
    if hint and not hint.startswith("."):
        hint = f".{hint}"
    return hint


def extract_text(data: bytes, format_hint: str | None) -> str:
    """Convert *data* into sanitized plain text.

    Parameters
    ----------
    data:
        Raw file contents.
    format_hint:
        File extension of the source (``".pdf"``, ``".docx"``, ``".csv"``...).

    Returns
    -------
    str
        Sanitized text; ``""`` when nothing could be extracted.
    """
    hint = normalize_format_hint(format_hint)
    try:
        if hint in PDF_FORMATS:
            raw = _extract_pdf(data)
        elif hint in WORD_FORMATS:
            raw = _extract_word(data)
        else:
            raw = data.decode("utf-8", errors="replace")
    except ExtractionError as exc:
        logger.warning("text_extraction_failed", format=hint, error=str(exc))
        return ""
    return sanitize_text(raw)


async def extract_text_async(data: bytes, format_hint: str | None) -> str:
    """Run :func:`extract_text` in a worker thread.

    PDF parsing is CPU-bound; keeping it off the event loop lets other
    sources' network I/O proceed.
    """
    return await asyncio.to_thread(extract_text, data, format_hint)


# ------------------------------------------------------------------
# Format handlers
# ------------------------------------------------------------------

def _extract_pdf(data: bytes) -> str:
    try:
        pdf = fitz.open(stream=data, filetype="pdf")
    except Exception as exc:  # noqa: BLE001 -- PyMuPDF raises several unrelated types
        raise ExtractionError(f"cannot open PDF: {exc}", "pymupdf") from exc

    try:
        pages = [page.get_text("text") for page in pdf]
    except Exception as exc:  # noqa: BLE001
        raise ExtractionError(f"cannot read PDF pages: {exc}", "pymupdf") from exc
    finally:
        pdf.close()
    return "\n".join(pages)


def _extract_word(data: bytes) -> str:
    # Legacy binary .doc files are not zip archives and fail here; that is
    # reported as empty text like any other Word parse failure.
    try:
        document = docx.Document(io.BytesIO(data))
    except Exception as exc:  # noqa: BLE001
        raise ExtractionError(f"cannot open Word document: {exc}", "python-docx") from exc
    return "\n".join(para.text for para in document.paragraphs)
