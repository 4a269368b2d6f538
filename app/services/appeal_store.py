# =============================================================================
# Appeal Store — Persistence for Appeal Records
# =============================================================================
#
# put / get / scan over the `appeals` table. Functions take the caller's
# AsyncSession and never commit; the request dependency or the pipeline
# owns the transaction.
# =============================================================================

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Appeal, AppealStatus, GenerationMode
from app.models.requests import AppealFormData

logger = logging.getLogger(__name__)


async def save_appeal(
    session: AsyncSession,
    form: AppealFormData,
    appeal_text: str,
    *,
    status: AppealStatus = AppealStatus.COMPLETED,
    generation_mode: GenerationMode = GenerationMode.AI,
    model: str | None = None,
    input_tokens: int | None = None,
    output_tokens: int | None = None,
    estimated_cost_usd: float | None = None,
    error_message: str | None = None,
) -> Appeal:
    """
    Insert an appeal record and return it with its generated id.

    The form is stored in its wire shape (camelCase keys).
    """
    appeal = Appeal(
        seller_name=form.full_name,
        email=form.email,
        appeal_type=form.appeal_type,
        form_data=form.model_dump(mode="json", by_alias=True),
        appeal_text=appeal_text,
        status=status,
        generation_mode=generation_mode,
        model=model,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        estimated_cost_usd=estimated_cost_usd,
        error_message=error_message,
    )
    session.add(appeal)
    await session.flush()

    logger.info(
        "Saved appeal %s (type=%s, mode=%s, %d chars)",
        appeal.id, appeal.appeal_type, generation_mode.value, len(appeal_text),
    )
    return appeal


async def get_appeal(session: AsyncSession, appeal_id: str) -> Appeal | None:
    return await session.get(Appeal, appeal_id)


async def list_appeals(
    session: AsyncSession,
    limit: int = 50,
    offset: int = 0,
    appeal_type: str | None = None,
) -> list[Appeal]:
    """Newest first, optionally filtered by appeal type."""
    stmt = select(Appeal).order_by(Appeal.created_at.desc())
    if appeal_type:
        stmt = stmt.where(Appeal.appeal_type == appeal_type)
    stmt = stmt.limit(limit).offset(offset)

    result = await session.execute(stmt)
    return list(result.scalars().all())


async def appeal_stats(session: AsyncSession) -> dict:
    """
    Counts for the admin dashboard.

    Returns:
        {"total": int, "by_type": {...}, "by_status": {...}, "by_mode": {...}}
    """

    async def _grouped(column) -> dict[str, int]:
        result = await session.execute(
            select(column, func.count(Appeal.id)).group_by(column)
        )
        counts: dict[str, int] = {}
        for key, count in result.all():
            counts[getattr(key, "value", key)] = count
        return counts

    total = await session.scalar(select(func.count(Appeal.id)))

    return {
        "total": total or 0,
        "by_type": await _grouped(Appeal.appeal_type),
        "by_status": await _grouped(Appeal.status),
        "by_mode": await _grouped(Appeal.generation_mode),
    }
