# =============================================================================
# Appeal Prompts — Section Definitions, Case Summary, System Prompt
# =============================================================================
#
# A letter is drafted as five separate completions. Every call sees the same
# three blocks of context plus what has been written so far:
#
#   TEMPLATE DOCUMENTS     ranked exemplar letters, separated by
#                          ---TEMPLATE DOCUMENT---
#   USER INFORMATION       build_case_summary(form)
#   PREVIOUSLY GENERATED   sections 1..n-1, verbatim
#   RULES                  scope, separation, brand-name and signature rules
#
# and a section-specific instruction as the user message.
#
# The case summary doubles as the retrieval query: it is what gets embedded
# to rank the templates, so the appeal type and its guidance come first.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass

from app.config import settings
from app.models.requests import AppealFormData
from app.services.reference_data import guidance_for, is_publishing_type
from app.services.tokens import truncate_to_tokens

TEMPLATE_SEPARATOR = "\n\n---TEMPLATE DOCUMENT---\n\n"
SECTION_SEPARATOR = "\n\n"


# ---------------------------------------------------------------------------
# Section Definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AppealSection:
    """One of the five parts of an appeal letter."""

    id: int
    key: str  # graph node name
    name: str
    instruction: str


APPEAL_SECTIONS: tuple[AppealSection, ...] = (
    AppealSection(
        id=1,
        key="opening",
        name="Opening & Introduction",
        instruction=(
            "Generate ONLY the opening section of the appeal letter. Include:\n"
            "- A professional greeting (e.g., \"Dear Seller Performance Team,\")\n"
            "- A brief introduction identifying the account holder and the account\n"
            "- A clear statement of the issue or suspension being appealed\n"
            "- References to any case numbers or ASINs provided\n"
            "Do NOT explain causes, actions or measures yet. "
            "Keep this section concise (2-3 paragraphs)."
        ),
    ),
    AppealSection(
        id=2,
        key="root_cause",
        name="Root Cause Analysis",
        instruction=(
            "Generate ONLY the root cause section of the appeal. Include:\n"
            "- A detailed explanation of WHY the issue happened\n"
            "- Specific examples and a timeline\n"
            "- How the issue was investigated\n"
            "- A clear acknowledgment of responsibility\n"
            "Do NOT describe any fixes or future measures here. "
            "Make this comprehensive (3-4 paragraphs)."
        ),
    ),
    AppealSection(
        id=3,
        key="corrective_actions",
        name="Corrective Actions",
        instruction=(
            "Generate ONLY the corrective actions section. Include:\n"
            "- Specific actions ALREADY taken, written in the past tense\n"
            "- Documentation being provided with the appeal\n"
            "- Systems or processes that were changed\n"
            "- People involved, hired or retrained\n"
            "Do NOT restate the root cause and do NOT describe future measures. "
            "Make this detailed with concrete examples (3-4 paragraphs)."
        ),
    ),
    AppealSection(
        id=4,
        key="preventive_measures",
        name="Preventive Measures",
        instruction=(
            "Generate ONLY the preventive measures section. Include:\n"
            "- 10-15 detailed, forward-looking preventive steps organised under "
            "category headings (e.g., \"Sourcing Quality Control:\", "
            "\"Listings Quality Control:\")\n"
            "- Ongoing monitoring and review commitments\n"
            "Do NOT repeat corrective actions already described and do NOT "
            "write a closing or signature."
        ),
    ),
    AppealSection(
        id=5,
        key="closing",
        name="Closing & Signature",
        instruction=(
            "Generate ONLY the closing section of the appeal. Include:\n"
            "- A short statement of commitment to compliance\n"
            "- Thanks for the reviewer's time and consideration\n"
            "- A sign-off (e.g., \"Sincerely,\") followed by the full signature "
            "block\n"
            "Keep this section short (1-2 paragraphs plus the signature block)."
        ),
    ),
)

_SECTIONS_BY_ID = {section.id: section for section in APPEAL_SECTIONS}


def get_section(section_id: int) -> AppealSection:
    """Look up a section definition. Raises ValueError outside 1..5."""
    try:
        return _SECTIONS_BY_ID[section_id]
    except KeyError:
        raise ValueError(
            f"Invalid section id {section_id}. Must be between 1 and {len(APPEAL_SECTIONS)}."
        ) from None


# ---------------------------------------------------------------------------
# Case Summary (user information block + retrieval query)
# ---------------------------------------------------------------------------


def _block(parts: list[str], heading: str, lines: list[str]) -> None:
    parts.append(f"=== {heading} ===")
    parts.extend(lines)
    parts.append("")


def build_case_summary(form: AppealFormData) -> str:
    """
    Render the form as the structured case description the model reads.

    Sections without data are omitted entirely.
    """
    parts: list[str] = []

    parts.append("=== APPEAL GENERATION REQUEST ===\n")
    parts.append(f"PRIMARY ISSUE TYPE: {form.appeal_type}")
    parts.append(
        "\nI need a comprehensive, professional Amazon appeal letter for: "
        f"{form.appeal_type}"
    )
    parts.append(
        f"\nKEY FOCUS AREAS FOR THIS APPEAL TYPE: {guidance_for(form.appeal_type)}\n"
    )

    seller = [
        f"Full Name/Business: {form.full_name}",
        f"Store Name: {form.store_name}",
        f"Email: {form.email}",
    ]
    if form.seller_id:
        seller.append(f"Seller ID/Merchant Token: {form.seller_id}")
    if form.asins:
        seller.append(f"Affected ASINs: {', '.join(form.asins)}")
    _block(parts, "SELLER INFORMATION", seller)

    if form.unauthorized_supplier:
        _block(parts, "SUPPLIER/SOURCE ISSUE", [form.unauthorized_supplier])
    if form.related_account_reason:
        _block(parts, "RELATED ACCOUNT DETAILS", [form.related_account_reason])
    if form.category_rejection_reason:
        _block(parts, "CATEGORY/APPROVAL ISSUE", [form.category_rejection_reason])
    if form.detail_page_abuse_area:
        _block(
            parts, "DETAIL PAGE AREAS AFFECTED",
            [f"- {area}" for area in form.detail_page_abuse_area],
        )

    if form.root_causes:
        _block(parts, "ROOT CAUSES IDENTIFIED", [f"• {c}" for c in form.root_causes])
    if form.root_cause_details:
        _block(parts, "ADDITIONAL ROOT CAUSE CONTEXT", [form.root_cause_details])

    if form.corrective_actions_taken:
        _block(
            parts, "CORRECTIVE ACTIONS ALREADY TAKEN",
            [f"• {a}" for a in form.corrective_actions_taken],
        )
    if form.corrective_actions_details:
        _block(parts, "ADDITIONAL CORRECTIVE ACTION DETAILS", [form.corrective_actions_details])

    if form.preventive_measures:
        _block(
            parts, "PREVENTIVE MEASURES TO BE IMPLEMENTED",
            [f"• {m}" for m in form.preventive_measures],
        )
    if form.preventive_measures_details:
        _block(parts, "ADDITIONAL PREVENTIVE MEASURE DETAILS", [form.preventive_measures_details])

    if form.uploaded_documents:
        _block(
            parts, "SUPPORTING DOCUMENTS TO REFERENCE",
            [f"• {doc.type}: {doc.file_name}" for doc in form.uploaded_documents],
        )

    parts.append("\n=== GENERATION INSTRUCTIONS ===")
    parts.append("Create a comprehensive, professional appeal letter that:")
    parts.append(
        "1. Follows the EXACT structure, depth, and formatting of similar "
        f'templates for "{form.appeal_type}"'
    )
    parts.append(
        "2. Includes ALL elements present in similar templates (documentation "
        "lists, supplier details, policy citations, multi-step processes, "
        "performance metrics, etc.)"
    )
    parts.append("3. Uses the professional tone and specific terminology from the templates")
    parts.append(
        "4. Provides the same level of detail - if templates have 10-15 "
        "preventive measures organized by category, match that depth"
    )
    parts.append(
        "5. Includes proper opening address, detailed root cause narrative, "
        "specific actions taken, comprehensive preventive measures, and "
        "professional closing with full contact information"
    )
    parts.append("6. References specific policies, standards, or regulations as shown in similar templates")
    parts.append(
        "7. Organizes preventive measures by category (e.g., \"Sourcing Quality "
        "Control:\", \"Listings Quality Control:\", etc.) as templates do"
    )
    parts.append(
        "\nDo NOT create a generic or simplified appeal. Match the comprehensive "
        "nature of the template documents provided."
    )

    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

_BASE_RULES = (
    "RULES:\n"
    "- Generate ONLY the requested section. Do not repeat, restate or "
    "summarise anything from the previously generated sections.\n"
    "- Keep the sections separate: the root cause explains WHY the issue "
    "happened; corrective actions describe what has ALREADY been done; "
    "preventive measures describe what will keep it from happening again. "
    "Content that belongs to another section must not appear in this one.\n"
    "- Never name third-party brands, manufacturers, or suppliers. Refer to "
    "them generically (\"the brand owner\", \"the supplier\", \"the "
    "manufacturer\").\n"
    "- Match the professional tone and depth of the template documents."
)

_PUBLISHING_RULE = (
    "- This is a publishing account. Write as a publisher/author: refer to "
    "titles, books, content and the catalog. Do not use seller terms such "
    "as store, inventory, products, listings or ASIN sourcing."
)


def signature_block(form: AppealFormData) -> str:
    """The lines the closing section must end with."""
    lines = [form.full_name, form.store_name, form.email]
    if form.seller_id:
        lines.append(f"Seller ID: {form.seller_id}")
    return "\n".join(lines)


def _signature_rule(section: AppealSection, form: AppealFormData) -> str:
    if section.id != APPEAL_SECTIONS[-1].id:
        return (
            "- Do NOT include a sign-off or signature block. Only the final "
            "section is signed."
        )
    return (
        "- End with the signature block exactly as follows, one item per line:\n"
        f"{signature_block(form)}"
    )


# ---------------------------------------------------------------------------
# System Prompt
# ---------------------------------------------------------------------------


def build_system_prompt(
    section: AppealSection,
    form: AppealFormData,
    references: list[str],
    previous_sections: list[str],
) -> str:
    """Assemble the system prompt for one section call."""
    context = TEMPLATE_SEPARATOR.join(
        truncate_to_tokens(text, settings.reference_max_tokens) for text in references
    )

    rules = [_BASE_RULES]
    if is_publishing_type(form.appeal_type):
        rules.append(_PUBLISHING_RULE)
    rules.append(_signature_rule(section, form))

    previous = (
        SECTION_SEPARATOR.join(previous_sections)
        if previous_sections
        else "(none, this is the first section)"
    )

    return (
        "You are an expert Amazon seller appeal writer with deep knowledge of "
        "Amazon's policies and successful appeal strategies.\n\n"
        "You have access to successful Amazon appeal template documents below. "
        "Study their style, depth, and structure.\n\n"
        f"TEMPLATE DOCUMENTS:\n{context}\n\n"
        f"USER INFORMATION:\n{build_case_summary(form)}\n\n"
        f"PREVIOUSLY GENERATED SECTIONS:\n{previous}\n\n"
        f"You are writing section {section.id} of {len(APPEAL_SECTIONS)}: "
        f"{section.name}.\n\n"
        + "\n".join(rules)
    )
