# =============================================================================
# Reference API — Wizard Options & Step Validation
# =============================================================================
#
# Read-only endpoints that feed the browser wizard its checkbox lists,
# plus the server-side "can proceed" check for each step.
# =============================================================================

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import require_access
from app.models.requests import WizardValidateRequest
from app.models.responses import (
    AppealTypeOption,
    OptionsResponse,
    PreventiveGroup,
    StepsResponse,
    StepValidationResponse,
)
from app.services.reference_data import (
    APPEAL_TYPE_VALUES,
    APPEAL_TYPES,
    SUPPORTING_DOCUMENT_TYPES,
    appeal_type_label,
    corrective_actions_for,
    guidance_for,
    preventive_measure_groups_for,
    root_causes_for,
)
from app.services.wizard import WIZARD_STEPS, can_proceed

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Wizard"], dependencies=[Depends(require_access)])


@router.get(
    "/reference/appeal-types",
    response_model=list[AppealTypeOption],
    summary="List appeal types",
)
async def list_appeal_types() -> list[AppealTypeOption]:
    return [AppealTypeOption(**option) for option in APPEAL_TYPES]


@router.get(
    "/reference/steps",
    response_model=StepsResponse,
    summary="List wizard step names",
)
async def list_steps() -> StepsResponse:
    return StepsResponse(steps=list(WIZARD_STEPS))


@router.get(
    "/reference/options/{appeal_type}",
    response_model=OptionsResponse,
    summary="Checkbox options for an appeal type",
    description=(
        "Root causes, corrective actions and preventive measure groups "
        "resolved for the given appeal type, with its guidance text and "
        "the supporting document types."
    ),
)
async def get_options(appeal_type: str) -> OptionsResponse:
    if appeal_type not in APPEAL_TYPE_VALUES:
        raise HTTPException(status_code=404, detail=f"Unknown appeal type '{appeal_type}'")

    return OptionsResponse(
        appeal_type=appeal_type,
        label=appeal_type_label(appeal_type),
        guidance=guidance_for(appeal_type),
        root_causes=root_causes_for(appeal_type),
        corrective_actions=corrective_actions_for(appeal_type),
        preventive_measures=[
            PreventiveGroup(**group) for group in preventive_measure_groups_for(appeal_type)
        ],
        supporting_documents=[dict(doc) for doc in SUPPORTING_DOCUMENT_TYPES],
    )


@router.post(
    "/wizard/validate",
    response_model=StepValidationResponse,
    summary="Check whether the wizard may leave a step",
)
async def validate_step(request: WizardValidateRequest) -> StepValidationResponse:
    allowed = can_proceed(request.step, request.form_data)
    logger.debug("Wizard step %d validation: %s", request.step, allowed)
    return StepValidationResponse(
        step=request.step,
        step_name=WIZARD_STEPS[request.step - 1],
        can_proceed=allowed,
    )
