# =============================================================================
# Unit Tests — Appeal Orchestrator (LangGraph pipeline)
# =============================================================================
#
# Runs the compiled graph end to end with the corpus, embeddings and the
# appeal store mocked out, and a fake streaming LLM. No API keys or
# database needed.
# =============================================================================

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.agents.orchestrator import (
    AppealResult,
    EmptyCorpusError,
    ProgressTracker,
    generate_appeal,
    generate_single_section,
)
from app.db.models import AppealStatus, GenerationMode
from app.models.requests import AppealFormData
from app.services.llm import LLMResponse
from app.services.ranker import TemplateEntry


def _run(coro):
    """Helper to run async functions in sync tests."""
    return asyncio.run(coro)


def _form() -> AppealFormData:
    return AppealFormData(
        appeal_type="kdp-acx-merch",
        full_name="Jane Doe",
        store_name="Doe Books",
        email="jane@example.com",
        root_causes=["I used a cover image without a licence"],
    )


_CORPUS = [
    TemplateEntry(text="KDP template letter", embedding=[1.0, 0.0], name="POA I - KDP ed"),
    TemplateEntry(text="Hacked template letter", embedding=[0.0, 1.0], name="Erica Sutton hacked POA"),
]


class _FakeLLM:
    """Streams "Section N text" and records the system prompt of each call."""

    def __init__(self, fail_on: int | None = None) -> None:
        self.systems: list[str] = []
        self._fail_on = fail_on

    async def complete(self, messages, system=None, temperature=None, max_tokens=None, on_delta=None):
        self.systems.append(system)
        number = len(self.systems)
        if number == self._fail_on:
            raise RuntimeError("provider unavailable")
        text = f"Section {number} text"
        if on_delta:
            await on_delta(text)
        return LLMResponse(content=text, model="gpt-4o-mini", input_tokens=100, output_tokens=10)


def _session_factory():
    session = AsyncMock()
    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=session)
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    return factory, session


def _patches(corpus=_CORPUS):
    return (
        patch("app.agents.orchestrator.load_corpus", new_callable=AsyncMock, return_value=corpus),
        patch("app.agents.orchestrator.embed_text", return_value=[1.0, 0.0]),
        patch(
            "app.agents.orchestrator.save_appeal",
            new_callable=AsyncMock,
            return_value=SimpleNamespace(id="appeal-123"),
        ),
    )


# ---------------------------------------------------------------------------
# Test: Full Pipeline
# ---------------------------------------------------------------------------


class TestGenerateAppeal:
    def test_five_sections_joined_and_saved(self):
        llm = _FakeLLM()
        factory, session = _session_factory()
        corpus_patch, embed_patch, save_patch = _patches()

        with corpus_patch, embed_patch, save_patch as mock_save:
            result = _run(generate_appeal(_form(), llm=llm, session_factory=factory))

        assert isinstance(result, AppealResult)
        assert result.appeal_id == "appeal-123"
        assert result.appeal_text == "\n\n".join(f"Section {n} text" for n in range(1, 6))
        assert result.generation_mode == "ai"
        assert [s.section_id for s in result.sections] == [1, 2, 3, 4, 5]
        assert (result.input_tokens, result.output_tokens) == (500, 50)
        assert result.model == "gpt-4o-mini"
        assert result.estimated_cost_usd == pytest.approx(0.000105)

        mock_save.assert_awaited_once()
        kwargs = mock_save.call_args.kwargs
        assert kwargs["generation_mode"] == GenerationMode.AI
        assert kwargs["error_message"] is None
        assert kwargs["status"] == AppealStatus.COMPLETED
        session.commit.assert_awaited_once()

    def test_each_section_sees_previous_sections(self):
        llm = _FakeLLM()
        factory, _ = _session_factory()
        corpus_patch, embed_patch, save_patch = _patches()

        with corpus_patch, embed_patch, save_patch:
            _run(generate_appeal(_form(), llm=llm, session_factory=factory))

        assert len(llm.systems) == 5
        assert "(none, this is the first section)" in llm.systems[0]
        assert "Section 1 text\n\nSection 2 text\n\nSection 3 text\n\nSection 4 text" in llm.systems[4]

    def test_category_match_ranked_into_prompt(self):
        llm = _FakeLLM()
        factory, _ = _session_factory()
        corpus_patch, embed_patch, save_patch = _patches()

        with corpus_patch, embed_patch, save_patch:
            _run(generate_appeal(_form(), llm=llm, session_factory=factory))

        prompt = llm.systems[0]
        assert prompt.index("KDP template letter") < prompt.index("Hacked template letter")

    def test_events_in_order(self):
        events: list[dict] = []

        async def on_event(event: dict) -> None:
            events.append(event)

        factory, _ = _session_factory()
        corpus_patch, embed_patch, save_patch = _patches()
        with corpus_patch, embed_patch, save_patch:
            _run(generate_appeal(_form(), llm=_FakeLLM(), on_event=on_event, session_factory=factory))

        types = [e["type"] for e in events]
        assert events[0] == {"type": "status", "message": "Loading document templates..."}
        assert events[1]["message"] == "Found 2 template documents. Generating appeal..."
        assert types.count("section_start") == 5
        assert types.count("section_complete") == 5
        assert events[-2] == {"type": "status", "message": "Saving to database...", "progress": 98}
        assert events[-1]["type"] == "complete"
        assert events[-1]["appealId"] == "appeal-123"
        assert events[-1]["progress"] == 100

    def test_empty_corpus_uses_fallback(self):
        llm = _FakeLLM()
        factory, _ = _session_factory()
        corpus_patch, embed_patch, save_patch = _patches(corpus=[])

        with corpus_patch, embed_patch as mock_embed, save_patch as mock_save:
            result = _run(generate_appeal(_form(), llm=llm, session_factory=factory))

        assert result.generation_mode == "fallback"
        assert result.appeal_text.startswith("Dear Amazon Seller Performance Team,")
        assert result.sections == []
        assert result.estimated_cost_usd is None
        assert llm.systems == []
        mock_embed.assert_not_called()
        assert mock_save.call_args.kwargs["generation_mode"] == GenerationMode.FALLBACK
        assert mock_save.call_args.kwargs["status"] == AppealStatus.COMPLETED

    def test_empty_corpus_without_fallback_raises(self):
        factory, _ = _session_factory()
        corpus_patch, embed_patch, save_patch = _patches(corpus=[])

        with corpus_patch, embed_patch, save_patch as mock_save:
            with pytest.raises(EmptyCorpusError):
                _run(generate_appeal(_form(), llm=_FakeLLM(), allow_fallback=False, session_factory=factory))

        mock_save.assert_not_called()

    def test_llm_failure_falls_back_and_records_error(self):
        factory, _ = _session_factory()
        corpus_patch, embed_patch, save_patch = _patches()

        with corpus_patch, embed_patch, save_patch as mock_save:
            result = _run(generate_appeal(_form(), llm=_FakeLLM(fail_on=3), session_factory=factory))

        assert result.generation_mode == "fallback"
        assert result.error == "provider unavailable"
        assert "A. The root cause of the issue" in result.appeal_text
        assert mock_save.call_args.kwargs["error_message"] == "provider unavailable"
        assert mock_save.call_args.kwargs["status"] == AppealStatus.FAILED

    def test_llm_failure_without_fallback_raises(self):
        factory, _ = _session_factory()
        corpus_patch, embed_patch, save_patch = _patches()

        with corpus_patch, embed_patch, save_patch as mock_save:
            with pytest.raises(RuntimeError, match="provider unavailable"):
                _run(generate_appeal(
                    _form(), llm=_FakeLLM(fail_on=2), allow_fallback=False, session_factory=factory,
                ))

        mock_save.assert_not_called()


# ---------------------------------------------------------------------------
# Test: Progress Tracking
# ---------------------------------------------------------------------------


class TestProgressTracker:
    def _collect(self, expected_chars: int):
        events: list[dict] = []

        async def on_event(event: dict) -> None:
            events.append(event)

        return ProgressTracker(on_event, expected_chars), events

    def test_small_steps_are_throttled(self):
        tracker, events = self._collect(100)
        _run(tracker.add("abc"))  # 3 %
        assert events == []
        _run(tracker.add("abc"))  # 6 %
        assert [e["progress"] for e in events] == [6]
        assert events[0]["totalLength"] == 6

    def test_capped_at_95(self):
        tracker, events = self._collect(10)
        _run(tracker.add("x" * 50))
        assert events[-1]["progress"] == 95
        _run(tracker.add("x" * 50))
        assert len(events) == 1  # no further 5-point step possible

    def test_no_callback(self):
        tracker = ProgressTracker(None, 10)
        _run(tracker.add("hello"))
        assert tracker.characters == 5


# ---------------------------------------------------------------------------
# Test: Single Section (client-driven)
# ---------------------------------------------------------------------------


class TestGenerateSingleSection:
    def test_generates_requested_section(self):
        llm = _FakeLLM()
        corpus_patch, embed_patch, _ = _patches()

        with corpus_patch, embed_patch:
            section = _run(generate_single_section(4, _form(), ["Opening", "Cause", "Actions"], llm=llm))

        assert section.section_id == 4
        assert section.name == "Preventive Measures"
        assert section.text == "Section 1 text"
        assert "Opening\n\nCause\n\nActions" in llm.systems[0]

    def test_empty_corpus_raises(self):
        corpus_patch, embed_patch, _ = _patches(corpus=[])

        with corpus_patch, embed_patch:
            with pytest.raises(EmptyCorpusError):
                _run(generate_single_section(1, _form(), [], llm=_FakeLLM()))
