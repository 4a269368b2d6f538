# =============================================================================
# Fallback Appeal — Deterministic Letter Without the LLM
# =============================================================================
#
# Used when the template corpus is empty or the generation pipeline fails.
# The seller still gets a structured A/B/C letter built purely from their
# own answers, and the record is saved with generation_mode=fallback.
# =============================================================================

from __future__ import annotations

from app.models.requests import AppealFormData


def _bullets(items: list[str]) -> list[str]:
    return [f"• {item}\n" for item in items]


def generate_basic_appeal(form: AppealFormData) -> str:
    """Build the static appeal letter for a form."""
    parts: list[str] = []

    parts.append("Dear Amazon Seller Performance Team,\n")
    parts.append(
        f"My name is {form.full_name}, and I am the owner of {form.store_name}. "
        f"I am writing to appeal the {form.appeal_type} issue affecting my "
        f"Amazon seller account ({form.email}).\n"
    )

    # A. Root cause
    parts.append("A. The root cause of the issue\n")
    parts.append(
        "After conducting a thorough review of my account and Amazon's policies, "
        "I have identified the following root causes:\n"
    )
    parts.extend(_bullets(form.root_causes))
    if form.root_cause_details:
        parts.append(f"\n{form.root_cause_details}\n")
    parts.append(
        "\nI take full responsibility for this oversight and understand the "
        "importance of maintaining Amazon's high standards.\n"
    )

    # B. Corrective actions
    parts.append("\nB. The actions I have taken to resolve the issue\n")
    parts.append(
        "To immediately address this issue, I have completed the following "
        "corrective actions:\n"
    )
    parts.extend(_bullets(form.corrective_actions_taken))
    if form.corrective_actions_details:
        parts.append(f"\n{form.corrective_actions_details}\n")

    # C. Preventive measures
    parts.append("\nC. The steps I have taken to prevent this issue going forward\n")
    parts.append(
        "To ensure this issue never occurs again, I have implemented the "
        "following long-term preventive measures:\n"
    )
    parts.extend(_bullets(form.preventive_measures))
    if form.preventive_measures_details:
        parts.append(f"\n{form.preventive_measures_details}\n")

    if form.uploaded_documents:
        parts.append("\nI have attached the following supporting documents for your review:\n")
        parts.extend(_bullets([doc.file_name for doc in form.uploaded_documents]))

    # Closing + signature
    parts.append(
        "\nI am confident that these corrective and preventive actions demonstrate "
        "my commitment to full compliance with Amazon's policies. I greatly value "
        "my ability to sell on Amazon and appreciate your consideration of this "
        "appeal.\n"
    )
    parts.append("\nThank you for your time and attention.\n")
    parts.append("\nSincerely,\n")
    parts.append(f"{form.full_name}\n")
    parts.append(f"{form.store_name}\n")
    parts.append(f"{form.email}\n")
    if form.seller_id:
        parts.append(f"Seller ID: {form.seller_id}\n")

    return "".join(parts)
