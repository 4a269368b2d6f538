# =============================================================================
# Template Corpus — Embedding Cache & Ingestion
# =============================================================================
#
# The corpus is a fixed set of previously successful appeal letters. Each
# request needs all of them with embeddings; computing those is slow, so
# load_corpus() looks in three places, cheapest first:
#
#   1. In-process cache          valid for embeddings_cache_ttl_seconds (24h)
#   2. template_documents table  rows with status=completed and an embedding
#   3. Fresh build               read documents-txt/*.txt from object storage,
#                                embed, store the rows, then cache
#
# process_templates() is the explicit ingestion path (admin endpoint and
# scripts/process_templates.py): convert each source document to text,
# upload the text, embed it and upsert its row. One bad document never
# aborts the batch.
#
# Object storage and the embedding client are synchronous; they run in
# worker threads via asyncio.to_thread().
# =============================================================================

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path, PurePosixPath

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import settings
from app.db.engine import async_session_factory
from app.db.models import EmbeddingStatus, TemplateDocument
from app.services.converter import SUPPORTED_EXTENSIONS, process_document
from app.services.embedder import embed_batch, embed_text
from app.services.ranker import TemplateEntry
from app.services.storage import (
    ObjectStore,
    StorageError,
    file_extension,
    get_object_store,
    text_key_for,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Built-in Template List
# ---------------------------------------------------------------------------

TEMPLATE_FILENAMES: list[str] = [
    "Bianca Boersma Appeal - rev2.docx",
    "BR POA I (1).docx",
    "Copy of Robert Harvey Appeal used sold as new - 7-29-2020.docx",
    "Draft POA I - Maaz Ahmed - Inauthentic ed 1.docx",
    "Draft POA I - Maaz Ahmed - Inauthentic rev ed.docx",
    "Draft POA II- FLOLEAF NATURALS - Restricted product ed.docx",
    "Draft POA II- FLOLEAF NATURALS - Restricted product.docx",
    "Erica Sutton hacked POA (2).docx",
    "Escalation I - Jennifer Smith - KDP ed (2).docx",
    "Escalation I - Saarang Ayaz - Inauthenticity ed (1).docx",
    "Escalation II - Mark Hanson - ODR Listing Removal ed (1).docx",
    "Etsy Appeal I - Heartwood Wands. IP ed (3).docx",
    "Evan Michalski eBay Inauthentic Appeal Draft (2).docx",
    "FINAL Iron Brothers Supplements - Letter to US Legal Dept. ed (1).docx",
    "Funds Appeal I -  Nova777 ed (1) (1).docx",
    "Jan Pohnan fair pricing IV (2).docx",
    "Kindpowers, LLC Appeal - SP III.docx",
    "POA I - Adrian Vizireanu. Brand Registry ed (1) (1).docx",
    "POA I - Believegroup - Cancelled Shipments ed (2).docx",
    "POA I - Botir Rustamov ed (1) (1).docx",
    "POA I - Brillias Boutique. Sales Velocity ed (1).docx",
    "POA I - Carlos Shah - Restricted - 4-1-2024 ed (1).docx",
    "POA I - Dimitri Jesse - Merc ed (3).docx",
    "POA I - GenieMedia ed (10).docx",
    "POA I - Kent Jameson - ACX ed (1).docx",
    "POA I - Paula Guran - Copyright ed (1) (1).docx",
    "POA I - Petru Nedelku - KDP ed (1).docx",
    "POA I - Sandadi Reddy. FBA suspension ed (1) (1).docx",
    "POA I - Tina Perebikosvky Inauthentic - 10-3-2025 ed.docx",
    "POA I - Tina Perebikosvky Inauthentic - 10-3-2025.docx",
    "POA I - Viking Investments - Verification ed.docx",
    "POA I - Zachary Munoz - Review Manipulation ed (1) (2).docx",
    "POA II - AK - Unsuitable inventory ed (5).docx",
    "POA II - SA - Dropshipping ed (1).docx",
    "POA III - FM -  Disease Claims ed (1).docx",
    "POA III -Tina Perebikovsky Trademark Infringement - 8-31-2024 ed (1).docx",
    "POA US.docx",
    "Sanjay Gupta Appeal detail page abuse - 8-31-2020.docx",
    "Template - EU Design POA.docx",
]


def template_keys() -> list[str]:
    """Source keys of the built-in templates under the configured prefix."""
    return [settings.source_prefix + name for name in TEMPLATE_FILENAMES]

# Local files uploaded as templates must have one of these in their name
TEMPLATE_NAME_MARKERS = ("POA", "Appeal", "Escalation")

DOCX_CONTENT_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)


def document_name(key: str) -> str:
    """Base name without extension; what the ranker matches keywords on."""
    return PurePosixPath(key).stem


# ---------------------------------------------------------------------------
# Data Structures
# ---------------------------------------------------------------------------


@dataclass
class ProcessingOutcome:
    """Result of ingesting one template document."""

    source_key: str
    document_name: str
    status: str  # "completed" or "failed"
    text_key: str | None = None
    characters: int = 0
    error: str | None = None


@dataclass
class ProcessingSummary:
    """Result of an ingestion batch."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    outcomes: list[ProcessingOutcome] = field(default_factory=list)


@dataclass
class _CorpusCache:
    entries: list[TemplateEntry]
    loaded_at: float  # time.monotonic()


_cache: _CorpusCache | None = None


def invalidate_cache() -> None:
    """Drop the in-process corpus so the next load re-reads the store."""
    global _cache
    _cache = None


def _cache_is_fresh() -> bool:
    return (
        _cache is not None
        and time.monotonic() - _cache.loaded_at < settings.embeddings_cache_ttl_seconds
    )


# ---------------------------------------------------------------------------
# Record Helpers
# ---------------------------------------------------------------------------


async def _get_record(session: AsyncSession, source_key: str) -> TemplateDocument | None:
    result = await session.execute(
        select(TemplateDocument).where(TemplateDocument.source_key == source_key)
    )
    return result.scalar_one_or_none()


async def _upsert_record(
    session: AsyncSession,
    source_key: str,
    **fields,
) -> TemplateDocument:
    record = await _get_record(session, source_key)
    if record is None:
        record = TemplateDocument(
            source_key=source_key,
            document_name=document_name(source_key),
            file_type=file_extension(source_key),
        )
        session.add(record)
    for name, value in fields.items():
        setattr(record, name, value)
    await session.flush()
    return record


async def _load_from_db(session: AsyncSession) -> list[TemplateEntry]:
    result = await session.execute(
        select(TemplateDocument)
        .where(
            TemplateDocument.embedding_status == EmbeddingStatus.COMPLETED,
            TemplateDocument.embedding.is_not(None),
        )
        .order_by(TemplateDocument.id)
    )
    entries: list[TemplateEntry] = []
    for record in result.scalars().all():
        if not record.text_content:
            continue
        entries.append(TemplateEntry(
            text=record.text_content,
            embedding=[float(x) for x in record.embedding],
            name=record.document_name,
        ))
    return entries


# ---------------------------------------------------------------------------
# Corpus Loading
# ---------------------------------------------------------------------------


async def _build_fresh(
    store: ObjectStore,
    session_factory: async_sessionmaker,
) -> list[TemplateEntry]:
    sources = template_keys()
    keys: list[str] = []
    texts: list[str] = []

    for key in sources:
        text_key = text_key_for(key)
        try:
            data = await asyncio.to_thread(store.get_bytes, text_key)
        except StorageError as exc:
            logger.warning("Skipping template %s: %s", document_name(key), exc)
            continue
        text = data.decode("utf-8", errors="replace").strip()
        if not text:
            logger.warning("Skipping template %s: empty text file", document_name(key))
            continue
        keys.append(key)
        texts.append(text)

    logger.info("Read %d/%d template texts from storage", len(texts), len(sources))
    if not texts:
        return []

    embeddings = await asyncio.to_thread(embed_batch, texts)
    entries = [
        TemplateEntry(text=text, embedding=embedding, name=document_name(key))
        for key, text, embedding in zip(keys, texts, embeddings)
    ]

    try:
        async with session_factory() as session:
            now = datetime.now(UTC)
            for key, text, embedding in zip(keys, texts, embeddings):
                await _upsert_record(
                    session, key,
                    text_key=text_key_for(key),
                    text_content=text,
                    embedding=embedding,
                    embedding_status=EmbeddingStatus.COMPLETED,
                    error_message=None,
                    processed_at=now,
                )
            await session.commit()
    except SQLAlchemyError:
        # The corpus is still usable from memory for this process
        logger.exception("Failed to persist template embeddings")

    return entries


async def load_corpus(
    force_refresh: bool = False,
    store: ObjectStore | None = None,
    session_factory: async_sessionmaker | None = None,
) -> list[TemplateEntry]:
    """
    Return every available template with its embedding.

    An empty list means no templates could be found anywhere; callers
    decide whether that is fatal.
    """
    global _cache

    if not force_refresh and _cache_is_fresh():
        logger.debug("Using in-process template cache (%d entries)", len(_cache.entries))
        return _cache.entries

    session_factory = session_factory or async_session_factory

    entries: list[TemplateEntry] = []
    if not force_refresh:
        try:
            async with session_factory() as session:
                entries = await _load_from_db(session)
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("Could not read template embeddings from database: %s", exc)
        if entries:
            logger.info("Loaded %d template embeddings from database", len(entries))

    if not entries:
        logger.info("Building template embeddings from object storage")
        entries = await _build_fresh(store or get_object_store(), session_factory)

    if entries:
        _cache = _CorpusCache(entries=entries, loaded_at=time.monotonic())
    return entries


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------


async def process_templates(
    keys: list[str] | None = None,
    store: ObjectStore | None = None,
    session_factory: async_sessionmaker | None = None,
) -> ProcessingSummary:
    """
    Convert, upload, embed and record each template document.

    Args:
        keys: Source keys. Defaults to template_keys().

    Each document gets its own transaction, so a failure is recorded on
    that document's row and the batch moves on.
    """
    keys = keys or template_keys()
    store = store or get_object_store()
    session_factory = session_factory or async_session_factory

    summary = ProcessingSummary(total=len(keys))
    logger.info("Processing %d template documents", len(keys))

    for index, key in enumerate(keys, start=1):
        name = document_name(key)
        logger.info("[%d/%d] %s", index, len(keys), name)

        async with session_factory() as session:
            await _upsert_record(session, key, embedding_status=EmbeddingStatus.PROCESSING)
            await session.commit()

            try:
                text, text_key = await asyncio.to_thread(process_document, key, store)
                if not text:
                    raise ValueError("No text could be extracted")
                embedding = await asyncio.to_thread(embed_text, text)
            except Exception as exc:
                logger.exception("Failed to process template %s", name)
                await _upsert_record(
                    session, key,
                    embedding_status=EmbeddingStatus.FAILED,
                    error_message=str(exc),
                    processed_at=datetime.now(UTC),
                )
                await session.commit()
                summary.failed += 1
                summary.outcomes.append(ProcessingOutcome(
                    source_key=key, document_name=name,
                    status=EmbeddingStatus.FAILED.value, error=str(exc),
                ))
                continue

            await _upsert_record(
                session, key,
                text_key=text_key,
                text_content=text,
                embedding=embedding,
                embedding_status=EmbeddingStatus.COMPLETED,
                error_message=None,
                processed_at=datetime.now(UTC),
            )
            await session.commit()

        summary.succeeded += 1
        summary.outcomes.append(ProcessingOutcome(
            source_key=key, document_name=name,
            status=EmbeddingStatus.COMPLETED.value,
            text_key=text_key, characters=len(text),
        ))

    invalidate_cache()
    logger.info(
        "Template processing done: %d succeeded, %d failed",
        summary.succeeded, summary.failed,
    )
    return summary


async def list_template_records(session: AsyncSession) -> list[TemplateDocument]:
    result = await session.execute(
        select(TemplateDocument).order_by(TemplateDocument.document_name)
    )
    return list(result.scalars().all())


def discover_template_keys(store: ObjectStore | None = None) -> list[str]:
    """Convertible source keys currently in storage under the source prefix."""
    store = store or get_object_store()
    return [
        key for key in store.list_keys(settings.source_prefix)
        if file_extension(key) in SUPPORTED_EXTENSIONS
    ]


def upload_templates(directory: str | Path, store: ObjectStore | None = None) -> list[str]:
    """
    Upload local template letters to object storage under documents/.

    Only .docx files whose names contain POA, Appeal or Escalation are
    uploaded. Returns the keys written.
    """
    store = store or get_object_store()
    root = Path(directory)
    if not root.is_dir():
        raise ValueError(f"Not a directory: {root}")

    uploaded: list[str] = []
    for path in sorted(root.glob("*.docx")):
        if not any(marker in path.name for marker in TEMPLATE_NAME_MARKERS):
            logger.debug("Skipping %s (not a template letter)", path.name)
            continue
        key = f"{settings.source_prefix}{path.name}"
        store.put_bytes(key, path.read_bytes(), DOCX_CONTENT_TYPE)
        logger.info("Uploaded %s", key)
        uploaded.append(key)

    logger.info("Uploaded %d template documents from %s", len(uploaded), root)
    return uploaded
