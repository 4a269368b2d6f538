# =============================================================================
# API Request Models — Pydantic V2 Schemas
# =============================================================================
#
# These models define the shape of data coming INTO the API. The central
# one is AppealFormData: everything the wizard collects, and the only input
# the generation pipeline reads.
#
# Field names are snake_case in Python and camelCase on the wire
# (`appealType`, `fullName`, ...), matching what the browser wizard sends.
# Both spellings are accepted on input (populate_by_name=True).
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

_WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UploadedDocument(BaseModel):
    """A supporting document the seller attached in step 6."""

    type: str = Field(description="Supporting document type value, e.g. 'invoice'")
    file_name: str = Field(description="Original file name")
    file_size: int | None = Field(default=None, ge=0)
    key: str | None = Field(
        default=None,
        description="Object storage key, if the file was uploaded",
    )

    model_config = _WIRE_CONFIG


class AppealFormData(BaseModel):
    """
    The wizard's form state.

    Every field has an empty default so partially filled forms can be
    validated step by step. Generation endpoints additionally require the
    account fields (see required_fields_missing()).
    """

    # Step 1: Type
    appeal_type: str = ""

    # Step 2: Account
    full_name: str = ""
    store_name: str = ""
    email: str = ""
    seller_id: str = ""
    asins: list[str] = Field(default_factory=list)

    # Step 3: Cause (plus type-specific context fields)
    root_causes: list[str] = Field(default_factory=list)
    root_cause_details: str = ""
    unauthorized_supplier: str = ""
    related_account_reason: str = ""
    category_rejection_reason: str = ""
    detail_page_abuse_area: list[str] = Field(default_factory=list)

    # Step 4: Actions
    corrective_actions_taken: list[str] = Field(default_factory=list)
    corrective_actions_details: str = ""

    # Step 5: Prevention
    preventive_measures: list[str] = Field(default_factory=list)
    preventive_measures_details: str = ""

    # Step 6: Documents
    uploaded_documents: list[UploadedDocument] = Field(default_factory=list)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "appealType": "inauthenticity-supply-chain",
                    "fullName": "Jane Doe",
                    "storeName": "Doe Goods",
                    "email": "jane@example.com",
                    "sellerId": "A1B2C3D4E5",
                    "asins": ["B00EXAMPLE"],
                    "rootCauses": [
                        "I failed to verify if my supplier was an authorized distributor",
                    ],
                    "correctiveActionsTaken": [
                        "I have permanently deleted the flagged ASINs from my inventory and listings",
                    ],
                    "preventiveMeasures": [
                        "I keep all invoices and supply chain documentation for all products",
                    ],
                }
            ]
        },
    )

    def required_fields_missing(self) -> list[str]:
        """Names of the fields a letter cannot be drafted without."""
        required = {
            "appealType": self.appeal_type,
            "fullName": self.full_name,
            "storeName": self.store_name,
            "email": self.email,
        }
        return [name for name, value in required.items() if not value.strip()]


def _require_complete_form(form: AppealFormData) -> None:
    missing = form.required_fields_missing()
    if missing:
        raise ValueError(f"formData is missing required fields: {', '.join(missing)}")


class GenerateAppealRequest(BaseModel):
    """
    Request body for POST /appeals/generate and /appeals/generate/stream.

    Runs the full five-section pipeline server-side.
    """

    form_data: AppealFormData

    model_config = _WIRE_CONFIG

    @model_validator(mode="after")
    def _check_form(self):
        _require_complete_form(self.form_data)
        return self


class GenerateSectionRequest(BaseModel):
    """
    Request body for POST /appeals/sections — one section at a time.

    The client calls this five times, passing the text of every section
    generated so far so the model does not repeat itself.
    """

    section_id: int = Field(..., ge=1, le=5, description="Section number 1-5")
    form_data: AppealFormData
    previous_sections: list[str] = Field(default_factory=list)

    model_config = _WIRE_CONFIG

    @model_validator(mode="after")
    def _check_form(self):
        _require_complete_form(self.form_data)
        return self


class SaveAppealRequest(BaseModel):
    """Request body for POST /appeals — persist a client-assembled letter."""

    form_data: AppealFormData
    appeal_text: str = Field(..., min_length=1)

    model_config = _WIRE_CONFIG


class WizardValidateRequest(BaseModel):
    """Request body for POST /wizard/validate."""

    step: int = Field(..., ge=1, le=8)
    form_data: AppealFormData

    model_config = _WIRE_CONFIG


class ProcessTemplatesRequest(BaseModel):
    """
    Request body for POST /templates/process.

    Omit `keys` to (re)process the whole built-in template list.
    """

    keys: list[str] | None = Field(default=None, min_length=1)

    model_config = _WIRE_CONFIG
