# =============================================================================
# LangGraph Orchestrator — Appeal Generation Graph
# =============================================================================
#
# Wires retrieval and the five section calls into a LangGraph StateGraph:
#
#   START ──▶ retrieve ──┬──▶ opening ──▶ root_cause ──▶ corrective_actions
#                        │        ──▶ preventive_measures ──▶ closing
#                        │        ──▶ assemble ──▶ END
#                        └──▶ fallback ──▶ END        (no templates available)
#
# Each section node sees every section drafted before it (state["sections"]
# accumulates through an operator.add reducer), so later sections can avoid
# repeating earlier ones.
#
# Persistence happens outside the graph in generate_appeal(): the letter is
# saved whichever way it was produced, including when the graph itself
# raised and the static fallback letter was used instead.
#
# Progress is reported through an optional async callback carried in the
# state (not JSON-serialisable; fine while no checkpointer is configured).
# =============================================================================

from __future__ import annotations

import asyncio
import logging
import operator
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Annotated

from langgraph.graph import END, START, StateGraph
from sqlalchemy.ext.asyncio import async_sessionmaker
from typing_extensions import TypedDict

from app.agents.prompts import APPEAL_SECTIONS, SECTION_SEPARATOR, AppealSection, build_case_summary
from app.agents.writer import GeneratedSection, generate_section
from app.config import settings
from app.db.engine import async_session_factory
from app.db.models import AppealStatus, GenerationMode
from app.models.requests import AppealFormData
from app.services.appeal_store import save_appeal
from app.services.corpus import load_corpus
from app.services.embedder import embed_text
from app.services.fallback import generate_basic_appeal
from app.services.llm import LLMProvider, get_llm_provider
from app.services.pricing import estimate_cost
from app.services.ranker import rank_documents

logger = logging.getLogger(__name__)

# Receives progress events: {"type": "status" | "section_start" | ..., ...}
EventCallback = Callable[[dict], Awaitable[None]]


class EmptyCorpusError(RuntimeError):
    """Raised when no template documents are available to draft from."""


# ---------------------------------------------------------------------------
# Result & Progress
# ---------------------------------------------------------------------------


@dataclass
class AppealResult:
    """A drafted (and saved) appeal."""

    appeal_id: str
    appeal_text: str
    sections: list[GeneratedSection] = field(default_factory=list)
    generation_mode: str = GenerationMode.AI.value
    model: str | None = None
    input_tokens: int = 0
    output_tokens: int = 0
    estimated_cost_usd: float | None = None
    error: str | None = None


class ProgressTracker:
    """
    Turns streamed character counts into throttled percentage events.

    An event is sent only when progress has advanced by at least 5 points,
    and progress never exceeds 95 until the letter is saved.
    """

    STEP = 5
    CAP = 95

    def __init__(self, on_event: EventCallback | None, expected_chars: int) -> None:
        self._on_event = on_event
        self._expected = max(expected_chars, 1)
        self.characters = 0
        self.last_reported = 0

    async def add(self, text: str) -> None:
        self.characters += len(text)
        progress = min(self.CAP, self.characters * 100 // self._expected)
        if progress >= self.last_reported + self.STEP:
            self.last_reported = progress
            if self._on_event:
                await self._on_event({
                    "type": "progress",
                    "chunk": text,
                    "progress": progress,
                    "totalLength": self.characters,
                })


# ---------------------------------------------------------------------------
# Graph State
# ---------------------------------------------------------------------------


class AppealState(TypedDict, total=False):
    """
    State flowing through the appeal graph.

    total=False: nodes return only the keys they update.
    """

    # --- Input ---
    form: AppealFormData
    allow_fallback: bool
    llm_override: LLMProvider | None
    on_event: EventCallback | None
    progress: ProgressTracker

    # --- Retrieval ---
    template_count: int
    references: list[str]

    # --- Generation (accumulates one entry per section node) ---
    sections: Annotated[list[GeneratedSection], operator.add]

    # --- Output ---
    appeal_text: str
    generation_mode: str


async def _emit(state: AppealState, event: dict) -> None:
    callback = state.get("on_event")
    if callback:
        await callback(event)


# ---------------------------------------------------------------------------
# Retrieval
# ---------------------------------------------------------------------------


async def retrieve_references(form: AppealFormData, corpus) -> list[str]:
    """Embed the case summary and return the top-ranked template texts."""
    query = build_case_summary(form)
    query_vector = await asyncio.to_thread(embed_text, query)
    return rank_documents(query_vector, corpus, form.appeal_type)


# ---------------------------------------------------------------------------
# Node Functions
# ---------------------------------------------------------------------------


async def retrieve_node(state: AppealState) -> dict:
    """Load the template corpus and rank it against the seller's case."""
    await _emit(state, {"type": "status", "message": "Loading document templates..."})

    corpus = await load_corpus()
    if not corpus:
        if not state.get("allow_fallback", True):
            raise EmptyCorpusError("No template documents available")
        logger.warning("No template documents available; using fallback letter")
        return {"template_count": 0, "references": []}

    await _emit(state, {
        "type": "status",
        "message": f"Found {len(corpus)} template documents. Generating appeal...",
    })

    references = await retrieve_references(state["form"], corpus)
    logger.info(
        "Selected %d of %d templates for '%s'",
        len(references), len(corpus), state["form"].appeal_type,
    )
    return {"template_count": len(corpus), "references": references}


def _make_section_node(section: AppealSection):
    async def section_node(state: AppealState) -> dict:
        llm = state.get("llm_override") or get_llm_provider()
        previous = [s.text for s in state.get("sections", [])]

        await _emit(state, {
            "type": "section_start",
            "sectionId": section.id,
            "sectionName": section.name,
        })

        tracker = state.get("progress")
        result = await generate_section(
            section.id,
            state["form"],
            state["references"],
            previous,
            llm=llm,
            on_delta=tracker.add if tracker else None,
        )

        await _emit(state, {
            "type": "section_complete",
            "sectionId": section.id,
            "sectionName": section.name,
            "characterCount": len(result.text),
        })
        return {"sections": [result]}

    section_node.__name__ = f"{section.key}_node"
    return section_node


async def assemble_node(state: AppealState) -> dict:
    """Join the five sections with a blank line between each."""
    text = SECTION_SEPARATOR.join(s.text for s in state["sections"])
    logger.info("Assembled appeal: %d sections, %d chars", len(state["sections"]), len(text))
    return {"appeal_text": text, "generation_mode": GenerationMode.AI.value}


async def fallback_node(state: AppealState) -> dict:
    """Static letter built from the form alone."""
    return {
        "appeal_text": generate_basic_appeal(state["form"]),
        "generation_mode": GenerationMode.FALLBACK.value,
    }


def _route_after_retrieve(state: AppealState) -> str:
    return APPEAL_SECTIONS[0].key if state.get("references") else "fallback"


# ---------------------------------------------------------------------------
# Graph Assembly
# ---------------------------------------------------------------------------
# Compiled once at module level and reused across requests.
# ---------------------------------------------------------------------------

_builder = StateGraph(AppealState)
_builder.add_node("retrieve", retrieve_node)
for _section in APPEAL_SECTIONS:
    _builder.add_node(_section.key, _make_section_node(_section))
_builder.add_node("assemble", assemble_node)
_builder.add_node("fallback", fallback_node)

_builder.add_edge(START, "retrieve")
_builder.add_conditional_edges(
    "retrieve",
    _route_after_retrieve,
    {APPEAL_SECTIONS[0].key: APPEAL_SECTIONS[0].key, "fallback": "fallback"},
)
for _current, _next in zip(APPEAL_SECTIONS, APPEAL_SECTIONS[1:]):
    _builder.add_edge(_current.key, _next.key)
_builder.add_edge(APPEAL_SECTIONS[-1].key, "assemble")
_builder.add_edge("assemble", END)
_builder.add_edge("fallback", END)

graph = _builder.compile()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def generate_appeal(
    form: AppealFormData,
    llm: LLMProvider | None = None,
    on_event: EventCallback | None = None,
    allow_fallback: bool = True,
    session_factory: async_sessionmaker | None = None,
) -> AppealResult:
    """
    Draft, save and return a full appeal letter.

    With allow_fallback (the default), an empty corpus or any failure while
    drafting produces the static fallback letter instead of an error. The
    letter is saved either way. Without it, drafting errors propagate and
    nothing is saved.
    """
    initial_state: AppealState = {
        "form": form,
        "allow_fallback": allow_fallback,
        "on_event": on_event,
        "progress": ProgressTracker(on_event, settings.progress_expected_chars),
    }
    if llm is not None:
        initial_state["llm_override"] = llm

    logger.info(
        "Invoking appeal graph: type=%s, store='%s'",
        form.appeal_type, form.store_name,
    )

    error: str | None = None
    try:
        final = await graph.ainvoke(initial_state)
    except Exception as exc:
        if not allow_fallback:
            raise
        logger.exception("Appeal generation failed; using fallback letter")
        error = str(exc) or exc.__class__.__name__
        final = {
            "appeal_text": generate_basic_appeal(form),
            "generation_mode": GenerationMode.FALLBACK.value,
            "sections": [],
        }

    sections: list[GeneratedSection] = final.get("sections", [])
    appeal_text: str = final["appeal_text"]
    mode = GenerationMode(final["generation_mode"])

    model = sections[-1].model if sections else None
    input_tokens = sum(s.input_tokens for s in sections)
    output_tokens = sum(s.output_tokens for s in sections)
    cost = estimate_cost(model, input_tokens, output_tokens) if model else None

    if on_event:
        await on_event({"type": "status", "message": "Saving to database...", "progress": 98})

    async with (session_factory or async_session_factory)() as session:
        appeal = await save_appeal(
            session,
            form,
            appeal_text,
            generation_mode=mode,
            status=AppealStatus.FAILED if error else AppealStatus.COMPLETED,
            model=model,
            input_tokens=input_tokens if sections else None,
            output_tokens=output_tokens if sections else None,
            estimated_cost_usd=cost,
            error_message=error,
        )
        await session.commit()

    if on_event:
        await on_event({
            "type": "complete",
            "appealId": appeal.id,
            "appealText": appeal_text,
            "generationMode": mode.value,
            "progress": 100,
        })

    logger.info(
        "Appeal %s complete: mode=%s, %d chars, tokens=%d+%d",
        appeal.id, mode.value, len(appeal_text), input_tokens, output_tokens,
    )

    return AppealResult(
        appeal_id=appeal.id,
        appeal_text=appeal_text,
        sections=sections,
        generation_mode=mode.value,
        model=model,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        estimated_cost_usd=cost,
        error=error,
    )


async def generate_single_section(
    section_id: int,
    form: AppealFormData,
    previous_sections: list[str] | None = None,
    llm: LLMProvider | None = None,
) -> GeneratedSection:
    """
    Draft one section outside the graph (client-driven generation).

    Raises:
        EmptyCorpusError: No template documents are available.
        ValueError: section_id outside 1..5.
    """
    corpus = await load_corpus()
    if not corpus:
        raise EmptyCorpusError("No template documents available")

    logger.info("Using %d template documents for section %d", len(corpus), section_id)
    references = await retrieve_references(form, corpus)
    return await generate_section(
        section_id, form, references, previous_sections or [], llm=llm,
    )
