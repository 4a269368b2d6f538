# =============================================================================
# Database Models — SQLAlchemy ORM
# =============================================================================
#
# Two independent tables:
#
# ┌──────────────────────────┐   ┌──────────────────────────────────┐
# │  appeals                 │   │  template_documents              │
# ├──────────────────────────┤   ├──────────────────────────────────┤
# │ id (PK, uuid string)     │   │ id (PK)                          │
# │ seller_name, email       │   │ document_name                    │
# │ appeal_type              │   │ source_key (unique)              │
# │ form_data (jsonb)        │   │ text_key, file_type              │
# │ appeal_text              │   │ embedding_status                 │
# │ status, generation_mode  │   │ text_content                     │
# │ model, token counts      │   │ embedding (vector(1536))         │
# │ estimated_cost_usd       │   │ error_message, processed_at      │
# │ error_message            │   │ created_at, updated_at           │
# │ created_at, updated_at   │   └──────────────────────────────────┘
# └──────────────────────────┘
#
# `appeals` keeps every submission with the exact form data it was drafted
# from, so a letter can be regenerated or audited later.
#
# `template_documents` is the embedding cache for the template corpus. A
# row with embedding_status=COMPLETED and a non-null embedding is ready for
# ranking. Ranking happens in Python over ~40 rows, so the embedding column
# has no ANN index.
# =============================================================================

import enum
import uuid
from datetime import datetime

from pgvector.sqlalchemy import Vector
from sqlalchemy import (
    DateTime,
    Enum,
    Float,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from app.config import settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base class for all ORM models."""

    pass


# ---------------------------------------------------------------------------
# Appeals
# ---------------------------------------------------------------------------


class AppealStatus(str, enum.Enum):
    """
    Outcome recorded with an appeal.

    FAILED means drafting raised and the saved text is the fallback letter;
    error_message holds the cause.
    """

    COMPLETED = "completed"
    FAILED = "failed"


class GenerationMode(str, enum.Enum):
    """How the stored letter text was produced."""

    AI = "ai"                # five-section LLM pipeline on the server
    FALLBACK = "fallback"    # static template after a pipeline failure
    CLIENT = "client"        # assembled by the browser from /appeals/sections


def _new_appeal_id() -> str:
    return str(uuid.uuid4())


class Appeal(Base):
    """One appeal letter and the form data it was drafted from."""

    __tablename__ = "appeals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_appeal_id)

    seller_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    appeal_type: Mapped[str] = mapped_column(String(100), nullable=False)

    # The complete wizard payload (camelCase keys, as the client sent it)
    form_data: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)

    appeal_text: Mapped[str] = mapped_column(Text, nullable=False, default="")

    status: Mapped[AppealStatus] = mapped_column(
        Enum(AppealStatus),
        nullable=False,
        default=AppealStatus.COMPLETED,
    )
    generation_mode: Mapped[GenerationMode] = mapped_column(
        Enum(GenerationMode),
        nullable=False,
        default=GenerationMode.AI,
    )

    # Usage of the five section calls, summed (null for fallback/client)
    model: Mapped[str | None] = mapped_column(String(100), nullable=True)
    input_tokens: Mapped[int | None] = mapped_column(Integer, nullable=True)
    output_tokens: Mapped[int | None] = mapped_column(Integer, nullable=True)
    estimated_cost_usd: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Why the pipeline fell back or failed (null on success)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<Appeal(id={self.id}, type='{self.appeal_type}', "
            f"status={self.status}, mode={self.generation_mode})>"
        )


appeal_created_idx = Index("idx_appeal_created_at", Appeal.created_at)
appeal_type_idx = Index("idx_appeal_type", Appeal.appeal_type)


# ---------------------------------------------------------------------------
# Template Documents (embedding cache)
# ---------------------------------------------------------------------------


class EmbeddingStatus(str, enum.Enum):
    """
    Ingestion state of a template document.

        PENDING → PROCESSING → COMPLETED
                             → FAILED
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class TemplateDocument(Base):
    """A template appeal letter, its extracted text and its embedding."""

    __tablename__ = "template_documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Base name without extension; the ranker matches category keywords on it
    document_name: Mapped[str] = mapped_column(String(500), nullable=False)

    # e.g. "documents/POA I - ... .docx" and "documents-txt/POA I - ... .txt"
    source_key: Mapped[str] = mapped_column(String(1000), nullable=False, unique=True)
    text_key: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    file_type: Mapped[str] = mapped_column(String(20), nullable=False)

    embedding_status: Mapped[EmbeddingStatus] = mapped_column(
        Enum(EmbeddingStatus),
        nullable=False,
        default=EmbeddingStatus.PENDING,
    )

    text_content: Mapped[str | None] = mapped_column(Text, nullable=True)

    embedding: Mapped[list[float] | None] = mapped_column(
        Vector(settings.embedding_dimensions),
        nullable=True,
    )

    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<TemplateDocument(id={self.id}, name='{self.document_name}', "
            f"status={self.embedding_status})>"
        )
