# =============================================================================
# Wizard Rules — Step Names & "Can Proceed" Checks
# =============================================================================
#
# The browser renders the wizard; the rules for moving between its steps
# live here so every client enforces the same minimum input before a
# letter is drafted.
#
#   1 Type → 2 Account → 3 Cause → 4 Actions → 5 Prevention
#   → 6 Documents → 7 Review → 8 Appeal
# =============================================================================

from __future__ import annotations

from app.models.requests import AppealFormData

WIZARD_STEPS = [
    "Type",
    "Account",
    "Cause",
    "Actions",
    "Prevention",
    "Documents",
    "Review",
    "Appeal",
]


def _filled(value: str) -> bool:
    return bool(value and value.strip())


def can_proceed(step: int, form: AppealFormData) -> bool:
    """
    Whether the form holds enough to leave the given step.

    Steps 6-8 (documents, review, appeal) never block.
    """
    if step == 1:
        return _filled(form.appeal_type)
    if step == 2:
        return (
            _filled(form.full_name)
            and _filled(form.store_name)
            and _filled(form.email)
        )
    if step == 3:
        return bool(form.root_causes) or _filled(form.root_cause_details)
    if step == 4:
        return bool(form.corrective_actions_taken) or _filled(form.corrective_actions_details)
    if step == 5:
        return bool(form.preventive_measures) or _filled(form.preventive_measures_details)
    return True
