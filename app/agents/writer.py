# =============================================================================
# Writer Agent — Drafts One Appeal Section
# =============================================================================
#
# Takes a section definition, the seller's form, the ranked template texts
# and everything drafted so far, and streams one completion from the
# configured LLM. The orchestrator calls it five times in order.
#
# The section text is exactly what the model produced, stripped of leading
# and trailing whitespace. Each streamed fragment is forwarded to on_delta
# so callers can report progress while the section is still being written.
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.agents.prompts import build_system_prompt, get_section
from app.models.requests import AppealFormData
from app.services.llm import DeltaCallback, LLMProvider, get_llm_provider

logger = logging.getLogger(__name__)


@dataclass
class GeneratedSection:
    """One drafted section plus the usage of the call that produced it."""

    section_id: int
    name: str
    text: str
    model: str
    input_tokens: int
    output_tokens: int


async def generate_section(
    section_id: int,
    form: AppealFormData,
    references: list[str],
    previous_sections: list[str] | None = None,
    llm: LLMProvider | None = None,
    on_delta: DeltaCallback | None = None,
) -> GeneratedSection:
    """
    Draft section `section_id` (1-5) of the appeal.

    Raises:
        ValueError: section_id outside 1..5, or no LLM key configured.
        Any SDK error raised by the provider (timeouts, API errors).
    """
    section = get_section(section_id)
    previous = previous_sections or []
    llm = llm or get_llm_provider()

    system_prompt = build_system_prompt(section, form, references, previous)

    logger.info(
        "Generating section %d/5: %s (references=%d, previous=%d)",
        section.id, section.name, len(references), len(previous),
    )

    response = await llm.complete(
        messages=[{"role": "user", "content": section.instruction}],
        system=system_prompt,
        on_delta=on_delta,
    )

    text = response.content.strip()
    logger.info(
        "Completed section %d/5: %s (%d chars, tokens=%d+%d)",
        section.id, section.name, len(text),
        response.input_tokens, response.output_tokens,
    )

    return GeneratedSection(
        section_id=section.id,
        name=section.name,
        text=text,
        model=response.model,
        input_tokens=response.input_tokens,
        output_tokens=response.output_tokens,
    )
