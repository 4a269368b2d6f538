# =============================================================================
# Appeals API — Generation, Storage & Export Endpoints
# =============================================================================
#
# Three ways to draft a letter:
#
#   POST /appeals/generate         full pipeline, one JSON response; falls back
#                                  to the static letter if drafting fails
#   POST /appeals/generate/stream  same pipeline as Server-Sent Events; failures
#                                  are reported as an "error" event
#   POST /appeals/sections         one section at a time, driven by the client,
#                                  which then saves the result via POST /appeals
#
# Records are read back through GET /appeals/{id} (+ /html, /pdf). Listing,
# stats and the per-part breakdown (GET /appeals/{id}/sections) are
# admin-only.
#
# Handlers stay thin: validation is in the request models, the work is in
# app.agents.orchestrator and app.services.*.
# =============================================================================

from __future__ import annotations

import asyncio
import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse, Response, StreamingResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.agents.orchestrator import EmptyCorpusError, generate_appeal, generate_single_section
from app.api.deps import require_access, require_admin
from app.db.engine import get_async_session
from app.db.models import Appeal, GenerationMode
from app.models.requests import (
    AppealFormData,
    GenerateAppealRequest,
    GenerateSectionRequest,
    SaveAppealRequest,
)
from app.models.responses import (
    AppealListResponse,
    AppealResponse,
    AppealSectionsResponse,
    GenerateAppealResponse,
    SaveAppealResponse,
    SectionResponse,
    StatsResponse,
)
from app.services.appeal_store import appeal_stats, get_appeal, list_appeals, save_appeal
from app.services.export import appeal_to_html, appeal_to_pdf, parse_appeal_sections

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appeals", tags=["Appeals"])


# ---------------------------------------------------------------------------
# POST /appeals/generate — Full pipeline, JSON response
# ---------------------------------------------------------------------------


@router.post(
    "/generate",
    response_model=GenerateAppealResponse,
    dependencies=[Depends(require_access)],
    summary="Draft a complete appeal letter",
    description=(
        "Retrieves the most relevant template letters, drafts the five "
        "sections in order and saves the result. If drafting fails the "
        "static fallback letter is saved and returned instead."
    ),
)
async def generate_appeal_endpoint(request: GenerateAppealRequest) -> GenerateAppealResponse:
    form = request.form_data
    logger.info("Generate request: type=%s, store='%s'", form.appeal_type, form.store_name)

    try:
        result = await generate_appeal(form)
    except SQLAlchemyError as e:
        logger.exception("Failed to save appeal: %s", e)
        raise HTTPException(status_code=500, detail="Failed to save appeal") from e

    return GenerateAppealResponse(
        appeal_id=result.appeal_id,
        appeal_text=result.appeal_text,
        generation_mode=result.generation_mode,
        model=result.model,
        input_tokens=result.input_tokens,
        output_tokens=result.output_tokens,
        estimated_cost_usd=result.estimated_cost_usd,
    )


# ---------------------------------------------------------------------------
# POST /appeals/generate/stream — Full pipeline, Server-Sent Events
# ---------------------------------------------------------------------------


def _sse(event: dict) -> str:
    return f"data: {json.dumps(event)}\n\n"


async def _stream_appeal(form: AppealFormData):
    """
    Run the pipeline in a task and relay its events as SSE frames.

    The queue decouples the pipeline from the client: events are produced
    as sections stream in and consumed at whatever pace the client reads.
    """
    queue: asyncio.Queue[dict | None] = asyncio.Queue()

    async def on_event(event: dict) -> None:
        await queue.put(event)

    async def run() -> None:
        try:
            await generate_appeal(form, on_event=on_event, allow_fallback=False)
        except Exception as e:
            logger.exception("Streaming generation failed: %s", e)
            await queue.put({"type": "error", "message": str(e) or "Failed to generate appeal"})
        finally:
            await queue.put(None)

    task = asyncio.create_task(run())
    try:
        while True:
            event = await queue.get()
            if event is None:
                break
            yield _sse(event)
    finally:
        # Client went away mid-stream
        if not task.done():
            task.cancel()


@router.post(
    "/generate/stream",
    dependencies=[Depends(require_access)],
    summary="Draft a complete appeal letter, streaming progress",
    description=(
        "Same pipeline as /appeals/generate, reported as Server-Sent Events "
        "(status, section_start, progress, section_complete, complete, error). "
        "There is no fallback letter on this path."
    ),
)
async def generate_appeal_stream_endpoint(request: GenerateAppealRequest) -> StreamingResponse:
    form = request.form_data
    logger.info("Stream request: type=%s, store='%s'", form.appeal_type, form.store_name)

    return StreamingResponse(
        _stream_appeal(form),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


# ---------------------------------------------------------------------------
# POST /appeals/sections — One section, client-driven
# ---------------------------------------------------------------------------


@router.post(
    "/sections",
    response_model=SectionResponse,
    dependencies=[Depends(require_access)],
    summary="Draft one section of an appeal letter",
)
async def generate_section_endpoint(request: GenerateSectionRequest) -> SectionResponse:
    """
    Error handling:
    - No template documents → 503
    - Missing API key / configuration → 503
    - LLM API errors → 502
    """
    try:
        section = await generate_single_section(
            request.section_id,
            request.form_data,
            request.previous_sections,
        )
    except EmptyCorpusError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        raise HTTPException(
            status_code=503,
            detail=f"Service configuration error: {e}",
        ) from e
    except Exception as e:
        logger.exception("Section %d generation failed: %s", request.section_id, e)
        raise HTTPException(
            status_code=502,
            detail=f"LLM service error: {e}",
        ) from e

    return SectionResponse(
        section_id=section.section_id,
        section_name=section.name,
        section_text=section.text,
        character_count=len(section.text),
        model=section.model,
    )


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=SaveAppealResponse,
    status_code=201,
    dependencies=[Depends(require_access)],
    summary="Save a client-assembled appeal letter",
)
async def save_appeal_endpoint(
    request: SaveAppealRequest,
    session: AsyncSession = Depends(get_async_session),
) -> SaveAppealResponse:
    appeal = await save_appeal(
        session,
        request.form_data,
        request.appeal_text,
        generation_mode=GenerationMode.CLIENT,
    )
    return SaveAppealResponse(appeal_id=appeal.id)


@router.get(
    "",
    response_model=AppealListResponse,
    dependencies=[Depends(require_admin)],
    summary="List saved appeals (admin)",
)
async def list_appeals_endpoint(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    appeal_type: str | None = Query(default=None, alias="appealType"),
    session: AsyncSession = Depends(get_async_session),
) -> AppealListResponse:
    appeals = await list_appeals(session, limit=limit, offset=offset, appeal_type=appeal_type)
    return AppealListResponse(
        appeals=[AppealResponse.model_validate(a) for a in appeals],
        limit=limit,
        offset=offset,
    )


@router.get(
    "/stats",
    response_model=StatsResponse,
    dependencies=[Depends(require_admin)],
    summary="Appeal counts by type, status and mode (admin)",
)
async def stats_endpoint(
    session: AsyncSession = Depends(get_async_session),
) -> StatsResponse:
    return StatsResponse(**await appeal_stats(session))


async def _get_or_404(session: AsyncSession, appeal_id: str) -> Appeal:
    appeal = await get_appeal(session, appeal_id)
    if appeal is None:
        raise HTTPException(status_code=404, detail=f"Appeal {appeal_id} not found")
    return appeal


@router.get(
    "/{appeal_id}",
    response_model=AppealResponse,
    dependencies=[Depends(require_access)],
    summary="Get a saved appeal",
)
async def get_appeal_endpoint(
    appeal_id: str,
    session: AsyncSession = Depends(get_async_session),
) -> AppealResponse:
    return AppealResponse.model_validate(await _get_or_404(session, appeal_id))


@router.get(
    "/{appeal_id}/sections",
    response_model=AppealSectionsResponse,
    dependencies=[Depends(require_admin)],
    summary="Saved appeal split into subject, A/B/C sections and signature (admin)",
)
async def get_appeal_sections(
    appeal_id: str,
    session: AsyncSession = Depends(get_async_session),
) -> AppealSectionsResponse:
    appeal = await _get_or_404(session, appeal_id)
    return AppealSectionsResponse(appeal_id=appeal.id, **parse_appeal_sections(appeal.appeal_text))


@router.get(
    "/{appeal_id}/html",
    response_class=HTMLResponse,
    dependencies=[Depends(require_access)],
    summary="Appeal letter as HTML",
)
async def get_appeal_html(
    appeal_id: str,
    session: AsyncSession = Depends(get_async_session),
) -> HTMLResponse:
    appeal = await _get_or_404(session, appeal_id)
    return HTMLResponse(appeal_to_html(appeal.appeal_text))


@router.get(
    "/{appeal_id}/pdf",
    response_class=Response,
    dependencies=[Depends(require_access)],
    summary="Appeal letter as PDF",
)
async def get_appeal_pdf(
    appeal_id: str,
    session: AsyncSession = Depends(get_async_session),
) -> Response:
    appeal = await _get_or_404(session, appeal_id)
    pdf = await asyncio.to_thread(
        appeal_to_pdf, appeal.appeal_text, f"Appeal Letter - {appeal.seller_name}",
    )
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="appeal-{appeal.id}.pdf"'},
    )
