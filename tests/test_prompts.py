# =============================================================================
# Unit Tests — Section Prompts & Writer Agent
# =============================================================================
#
# Tests prompt construction and single-section generation with a mock LLM.
# No API keys needed.
# =============================================================================

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from app.agents.prompts import (
    APPEAL_SECTIONS,
    TEMPLATE_SEPARATOR,
    build_case_summary,
    build_system_prompt,
    get_section,
    signature_block,
)
from app.agents.writer import GeneratedSection, generate_section
from app.models.requests import AppealFormData, UploadedDocument
from app.services.llm import LLMResponse


def _run(coro):
    """Helper to run async functions in sync tests."""
    return asyncio.run(coro)


def _form(**overrides) -> AppealFormData:
    data = {
        "appeal_type": "inauthenticity-supply-chain",
        "full_name": "Jane Doe",
        "store_name": "Doe Goods",
        "email": "jane@example.com",
        "root_causes": ["I failed to verify my supplier"],
        "corrective_actions_taken": ["I removed the affected listings"],
        "preventive_measures": ["I keep all invoices"],
    }
    data.update(overrides)
    return AppealFormData(**data)


# ---------------------------------------------------------------------------
# Test: Section Definitions
# ---------------------------------------------------------------------------


class TestSections:
    def test_five_sections_in_order(self):
        assert [s.id for s in APPEAL_SECTIONS] == [1, 2, 3, 4, 5]
        assert [s.key for s in APPEAL_SECTIONS] == [
            "opening", "root_cause", "corrective_actions",
            "preventive_measures", "closing",
        ]

    def test_get_section(self):
        assert get_section(3).name == "Corrective Actions"

    @pytest.mark.parametrize("section_id", [0, 6, -1])
    def test_get_section_out_of_range(self, section_id):
        with pytest.raises(ValueError, match="Invalid section id"):
            get_section(section_id)


# ---------------------------------------------------------------------------
# Test: Case Summary
# ---------------------------------------------------------------------------


class TestCaseSummary:
    def test_contains_type_and_guidance(self):
        summary = build_case_summary(_form())
        assert "PRIMARY ISSUE TYPE: inauthenticity-supply-chain" in summary
        assert "KEY FOCUS AREAS FOR THIS APPEAL TYPE: Focus on:" in summary

    def test_seller_information(self):
        summary = build_case_summary(_form(seller_id="A1B2", asins=["B001", "B002"]))
        assert "Full Name/Business: Jane Doe" in summary
        assert "Seller ID/Merchant Token: A1B2" in summary
        assert "Affected ASINs: B001, B002" in summary

    def test_optional_blocks_omitted_when_empty(self):
        summary = build_case_summary(_form(root_causes=[], corrective_actions_taken=[]))
        assert "ROOT CAUSES IDENTIFIED" not in summary
        assert "CORRECTIVE ACTIONS ALREADY TAKEN" not in summary
        assert "SUPPLIER/SOURCE ISSUE" not in summary
        assert "Seller ID" not in summary

    def test_lists_rendered_as_bullets(self):
        summary = build_case_summary(_form())
        assert "• I failed to verify my supplier" in summary
        assert "• I keep all invoices" in summary

    def test_context_fields(self):
        summary = build_case_summary(_form(
            unauthorized_supplier="A wholesale lot",
            detail_page_abuse_area=["Title", "Images"],
        ))
        assert "=== SUPPLIER/SOURCE ISSUE ===\nA wholesale lot" in summary
        assert "- Title" in summary and "- Images" in summary

    def test_supporting_documents(self):
        form = _form(uploaded_documents=[
            UploadedDocument(type="invoice", file_name="inv-001.pdf"),
        ])
        assert "• invoice: inv-001.pdf" in build_case_summary(form)

    def test_ends_with_generation_instructions(self):
        summary = build_case_summary(_form())
        assert "=== GENERATION INSTRUCTIONS ===" in summary
        assert summary.rstrip().endswith("template documents provided.")


# ---------------------------------------------------------------------------
# Test: System Prompt
# ---------------------------------------------------------------------------


class TestSystemPrompt:
    def test_references_joined_with_separator(self):
        prompt = build_system_prompt(get_section(1), _form(), ["Letter one", "Letter two"], [])
        assert f"Letter one{TEMPLATE_SEPARATOR}Letter two" in prompt

    def test_first_section_has_no_previous(self):
        prompt = build_system_prompt(get_section(1), _form(), ["ref"], [])
        assert "(none, this is the first section)" in prompt
        assert "You are writing section 1 of 5: Opening & Introduction." in prompt

    def test_previous_sections_included(self):
        prompt = build_system_prompt(
            get_section(3), _form(), ["ref"], ["Dear Team,", "The root cause was..."],
        )
        assert "PREVIOUSLY GENERATED SECTIONS:\nDear Team,\n\nThe root cause was..." in prompt

    def test_case_summary_included(self):
        prompt = build_system_prompt(get_section(2), _form(), ["ref"], [])
        assert "USER INFORMATION:\n=== APPEAL GENERATION REQUEST ===" in prompt

    def test_brand_rule_always_present(self):
        prompt = build_system_prompt(get_section(2), _form(), ["ref"], [])
        assert "Never name third-party brands" in prompt

    def test_only_closing_has_signature(self):
        form = _form(seller_id="A1B2")
        middle = build_system_prompt(get_section(4), form, ["ref"], [])
        closing = build_system_prompt(get_section(5), form, ["ref"], [])
        assert "Do NOT include a sign-off" in middle
        assert "Seller ID: A1B2" not in middle.split("RULES:")[1]
        assert signature_block(form) in closing

    def test_publishing_rule_for_publishing_types(self):
        kdp = build_system_prompt(get_section(2), _form(appeal_type="kdp-acx-merch"), ["r"], [])
        seller = build_system_prompt(get_section(2), _form(), ["r"], [])
        assert "This is a publishing account" in kdp
        assert "This is a publishing account" not in seller


class TestSignatureBlock:
    def test_without_seller_id(self):
        assert signature_block(_form()) == "Jane Doe\nDoe Goods\njane@example.com"

    def test_with_seller_id(self):
        assert signature_block(_form(seller_id="X9")).endswith("\nSeller ID: X9")


# ---------------------------------------------------------------------------
# Test: Writer with Mock LLM
# ---------------------------------------------------------------------------


class TestGenerateSection:
    def _llm(self, content: str = "  Dear Seller Performance Team,\n\n  ") -> AsyncMock:
        mock_llm = AsyncMock()
        mock_llm.complete.return_value = LLMResponse(
            content=content, model="test-model", input_tokens=1200, output_tokens=150,
        )
        return mock_llm

    def test_returns_stripped_text_and_usage(self):
        result = _run(generate_section(1, _form(), ["ref"], llm=self._llm()))
        assert isinstance(result, GeneratedSection)
        assert result.text == "Dear Seller Performance Team,"
        assert result.section_id == 1
        assert result.name == "Opening & Introduction"
        assert result.model == "test-model"
        assert (result.input_tokens, result.output_tokens) == (1200, 150)

    def test_instruction_is_user_message(self):
        mock_llm = self._llm()
        _run(generate_section(2, _form(), ["ref"], ["Opening"], llm=mock_llm))
        kwargs = mock_llm.complete.call_args.kwargs
        assert kwargs["messages"] == [
            {"role": "user", "content": get_section(2).instruction},
        ]
        assert "PREVIOUSLY GENERATED SECTIONS:\nOpening" in kwargs["system"]

    def test_on_delta_forwarded(self):
        mock_llm = self._llm()

        async def on_delta(text: str) -> None:
            pass

        _run(generate_section(1, _form(), ["ref"], llm=mock_llm, on_delta=on_delta))
        assert mock_llm.complete.call_args.kwargs["on_delta"] is on_delta

    def test_invalid_section_does_not_call_llm(self):
        mock_llm = self._llm()
        with pytest.raises(ValueError):
            _run(generate_section(9, _form(), ["ref"], llm=mock_llm))
        mock_llm.complete.assert_not_called()

    def test_llm_error_propagates(self):
        mock_llm = AsyncMock()
        mock_llm.complete.side_effect = TimeoutError("timed out")
        with pytest.raises(TimeoutError):
            _run(generate_section(1, _form(), ["ref"], llm=mock_llm))
