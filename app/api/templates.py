# =============================================================================
# Templates API — Template Corpus Ingestion (admin)
# =============================================================================
#
# POST /templates/process converts each template letter to text, embeds it
# and records the result; GET /templates shows where every document stands.
# A document that fails is recorded as failed and never aborts the batch.
# =============================================================================

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.db.engine import get_async_session
from app.models.requests import ProcessTemplatesRequest
from app.models.responses import ProcessingSummaryResponse, TemplateRecordResponse
from app.services.corpus import list_template_records, process_templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["Templates"], dependencies=[Depends(require_admin)])


@router.post(
    "/process",
    response_model=ProcessingSummaryResponse,
    summary="Convert and embed template documents",
    description=(
        "Processes the given source keys, or the built-in template list when "
        "no keys are sent. Returns per-document outcomes."
    ),
)
async def process_templates_endpoint(
    request: ProcessTemplatesRequest | None = None,
) -> ProcessingSummaryResponse:
    keys = request.keys if request else None
    try:
        summary = await process_templates(keys)
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        raise HTTPException(
            status_code=503,
            detail=f"Service configuration error: {e}",
        ) from e

    return ProcessingSummaryResponse.model_validate(summary)


@router.get(
    "",
    response_model=list[TemplateRecordResponse],
    summary="List template documents and their processing status",
)
async def list_templates_endpoint(
    session: AsyncSession = Depends(get_async_session),
) -> list[TemplateRecordResponse]:
    records = await list_template_records(session)
    return [TemplateRecordResponse.model_validate(r) for r in records]
