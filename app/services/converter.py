# =============================================================================
# Document Converter — Source Formats → Plain Text
# =============================================================================
#
# Template letters are authored as Word documents; supporting material may
# arrive as spreadsheets or delimited text. Everything downstream (embedding,
# prompting) works on plain text, so each source file is converted once and
# the text version is stored next to it under `documents-txt/`.
#
#   docx       → Docling (paragraphs, list items, headings and tables in
#                reading order; tables as markdown)
#   xlsx / xls → pandas.read_excel, one CSV block per sheet
#   csv        → rows joined with ", "
#   txt        → UTF-8 decode, undecodable bytes replaced
#
# Docling keeps list items, headings and tables in reading order, which is
# what the templates rely on for their A/B/C structure. Tables in the
# letters carry invoice and supplier details, so they are kept as text.
# =============================================================================

from __future__ import annotations

import csv
import io
import logging

import pandas as pd
from docling.datamodel.base_models import DocumentStream, InputFormat
from docling.document_converter import DocumentConverter
from docling_core.types.doc.labels import DocItemLabel

from app.services.storage import (
    ObjectStore,
    download,
    file_extension,
    text_key_for,
    upload,
)

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("docx", "xlsx", "xls", "csv", "txt")

_TEXT_LABELS = (
    DocItemLabel.TITLE,
    DocItemLabel.SECTION_HEADER,
    DocItemLabel.PARAGRAPH,
    DocItemLabel.TEXT,
    DocItemLabel.LIST_ITEM,
    DocItemLabel.CAPTION,
    DocItemLabel.FOOTNOTE,
)


class UnsupportedFileTypeError(ValueError):
    """Raised when a file's extension has no converter."""


# ---------------------------------------------------------------------------
# Docling Converter — Lazy Singleton
# ---------------------------------------------------------------------------

_converter: DocumentConverter | None = None


def _get_converter() -> DocumentConverter:
    """Lazily initialize and cache a DOCX-only DocumentConverter."""
    global _converter
    if _converter is None:
        logger.info("Initializing Docling DocumentConverter for DOCX")
        _converter = DocumentConverter(allowed_formats=[InputFormat.DOCX])
    return _converter


# ---------------------------------------------------------------------------
# Per-format extractors
# ---------------------------------------------------------------------------


def _table_to_markdown(table_item: object, document: object) -> str:
    """
    Render a Docling TableItem as a markdown table.

    Falls back to the cell grid, one " | "-joined line per row, when the
    DataFrame export fails or yields no rows.
    """
    try:
        frame = table_item.export_to_dataframe(doc=document)
        if not frame.empty:
            return frame.to_markdown(index=False)
    except Exception as exc:
        logger.warning("Table export to DataFrame failed: %s", exc)

    grid = getattr(getattr(table_item, "data", None), "grid", None) or []
    rows = [" | ".join(cell.text.strip() for cell in row) for row in grid]
    return "\n".join(row for row in rows if row.strip(" |"))


def _docx_to_text(data: bytes, filename: str) -> str:
    source = DocumentStream(name=filename, stream=io.BytesIO(data))
    try:
        result = _get_converter().convert(source)
    except Exception as exc:
        raise RuntimeError(f"Docling failed to parse '{filename}': {exc}") from exc

    paragraphs: list[str] = []
    for item, _level in result.document.iterate_items():
        label = getattr(item, "label", None)
        if label == DocItemLabel.TABLE:
            text = _table_to_markdown(item, result.document)
        elif label in _TEXT_LABELS:
            text = getattr(item, "text", "").strip()
        else:
            continue
        if text:
            paragraphs.append(text)
    return "\n\n".join(paragraphs)


def _spreadsheet_to_text(data: bytes) -> str:
    # sheet_name=None loads every sheet into an ordered {name: DataFrame}
    sheets = pd.read_excel(io.BytesIO(data), sheet_name=None, header=None, dtype=str)

    blocks: list[str] = []
    for name, frame in sheets.items():
        body = frame.fillna("").to_csv(index=False, header=False).strip()
        if len(sheets) > 1:
            blocks.append(f"=== Sheet: {name} ===\n{body}")
        else:
            blocks.append(body)
    return "\n\n".join(blocks)


def _csv_to_text(data: bytes) -> str:
    reader = csv.reader(io.StringIO(data.decode("utf-8-sig", errors="replace")))
    return "\n".join(", ".join(row) for row in reader)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def convert_to_text(data: bytes, filename: str) -> str:
    """
    Extract plain text from a document, dispatching on its extension.

    Raises:
        UnsupportedFileTypeError: extension not in SUPPORTED_EXTENSIONS.
        RuntimeError: the DOCX parser rejected the file.
    """
    ext = file_extension(filename)

    if ext == "docx":
        text = _docx_to_text(data, filename)
    elif ext in ("xlsx", "xls"):
        text = _spreadsheet_to_text(data)
    elif ext == "csv":
        text = _csv_to_text(data)
    elif ext == "txt":
        text = data.decode("utf-8", errors="replace")
    else:
        raise UnsupportedFileTypeError(f"Unsupported file type: {ext or '(none)'}")

    return text.strip()


def process_document(
    key: str,
    store: ObjectStore | None = None,
) -> tuple[str, str]:
    """
    Download a source document, convert it and upload the text version.

    Returns:
        (text, text_key) where text_key is the key the text was stored under.
    """
    logger.info("Processing document: %s", key)
    data = download(key, store)
    text = convert_to_text(data, key)

    text_key = text_key_for(key)
    upload(text_key, text.encode("utf-8"), "text/plain", store)
    logger.info("Stored %d characters of text at %s", len(text), text_key)

    return text, text_key
