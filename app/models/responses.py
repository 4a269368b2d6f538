# =============================================================================
# API Response Models — Pydantic V2 Schemas
# =============================================================================
#
# These models define the shape of data coming OUT of the API. Like the
# request models they serialise camelCase (`appealId`, `appealText`, ...)
# for the browser client.
#
# Template records never include the embedding vector: it is large and of
# no use to a client.
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.db.models import AppealStatus, EmbeddingStatus, GenerationMode

_WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)
_ORM_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class HealthResponse(BaseModel):
    """Response for GET /health — confirms the API is running."""

    status: str = "ok"
    version: str
    service: str


# ---------------------------------------------------------------------------
# Reference Data & Wizard
# ---------------------------------------------------------------------------


class AppealTypeOption(BaseModel):
    value: str
    label: str


class PreventiveGroup(BaseModel):
    category: str
    items: list[str]


class OptionsResponse(BaseModel):
    """Checkbox options and guidance resolved for one appeal type."""

    appeal_type: str
    label: str
    guidance: str
    root_causes: list[str]
    corrective_actions: list[str]
    preventive_measures: list[PreventiveGroup]
    supporting_documents: list[dict[str, str]]

    model_config = _WIRE_CONFIG


class StepsResponse(BaseModel):
    steps: list[str]


class StepValidationResponse(BaseModel):
    """Whether the wizard may advance past `step`."""

    step: int
    step_name: str
    can_proceed: bool

    model_config = _WIRE_CONFIG


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


class GenerateAppealResponse(BaseModel):
    """
    Response for POST /appeals/generate.

    generation_mode is "fallback" when the static template was used; the
    letter is saved in both cases.
    """

    success: bool = True
    appeal_id: str
    appeal_text: str
    generation_mode: str
    model: str | None = None
    input_tokens: int = 0
    output_tokens: int = 0
    estimated_cost_usd: float | None = Field(
        default=None,
        description="Estimated cost in USD. Null if model not in pricing registry.",
    )

    model_config = _WIRE_CONFIG


class SectionResponse(BaseModel):
    """Response for POST /appeals/sections — one drafted section."""

    success: bool = True
    section_id: int
    section_name: str
    section_text: str
    character_count: int
    model: str | None = None

    model_config = _WIRE_CONFIG


# ---------------------------------------------------------------------------
# Appeal Records
# ---------------------------------------------------------------------------


class SaveAppealResponse(BaseModel):
    success: bool = True
    appeal_id: str

    model_config = _WIRE_CONFIG


class AppealSectionsResponse(BaseModel):
    """A stored letter split into its conventional parts (admin review)."""

    appeal_id: str
    subject: str
    greeting: str
    introduction: str
    root_causes: str
    corrective_actions: str
    preventive_measures: str
    conclusion: str
    signature: str

    model_config = _WIRE_CONFIG


class AppealResponse(BaseModel):
    """A stored appeal, as returned by GET /appeals/{id}."""

    id: str
    seller_name: str
    email: str
    appeal_type: str
    form_data: dict
    appeal_text: str
    status: AppealStatus
    generation_mode: GenerationMode
    model: str | None = None
    input_tokens: int | None = None
    output_tokens: int | None = None
    estimated_cost_usd: float | None = None
    error_message: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = _ORM_CONFIG


class AppealListResponse(BaseModel):
    appeals: list[AppealResponse]
    limit: int
    offset: int


class StatsResponse(BaseModel):
    """Response for GET /appeals/stats."""

    total: int
    by_type: dict[str, int]
    by_status: dict[str, int]
    by_mode: dict[str, int]

    model_config = _WIRE_CONFIG


# ---------------------------------------------------------------------------
# Template Documents
# ---------------------------------------------------------------------------


class TemplateRecordResponse(BaseModel):
    """Processing state of one template document."""

    id: int
    document_name: str
    source_key: str
    text_key: str | None = None
    file_type: str
    embedding_status: EmbeddingStatus
    error_message: str | None = None
    processed_at: datetime | None = None

    model_config = _ORM_CONFIG


class ProcessingOutcomeResponse(BaseModel):
    source_key: str
    document_name: str
    status: str
    text_key: str | None = None
    characters: int = 0
    error: str | None = None

    model_config = _ORM_CONFIG


class ProcessingSummaryResponse(BaseModel):
    """Response for POST /templates/process."""

    total: int
    succeeded: int
    failed: int
    outcomes: list[ProcessingOutcomeResponse]

    model_config = _ORM_CONFIG
