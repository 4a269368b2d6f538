# =============================================================================
# Unit Tests — Reference Data, Wizard Rules & Request Models
# =============================================================================

from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.models.requests import (
    AppealFormData,
    GenerateAppealRequest,
    GenerateSectionRequest,
    ProcessTemplatesRequest,
    WizardValidateRequest,
)
from app.services.reference_data import (
    APPEAL_TYPES,
    BUSINESS_SOLUTIONS_AGREEMENT_ACTION,
    CORRECTIVE_ACTIONS,
    SUPPORTING_DOCUMENT_TYPES,
    appeal_type_label,
    corrective_actions_for,
    guidance_for,
    preventive_measure_groups_for,
    root_causes_for,
)
from app.services.wizard import WIZARD_STEPS, can_proceed

# ---------------------------------------------------------------------------
# Test: Reference Data
# ---------------------------------------------------------------------------


class TestReferenceData:
    def test_appeal_type_values_unique(self):
        values = [t["value"] for t in APPEAL_TYPES]
        assert len(values) == len(set(values))
        assert "other" in values

    def test_label_lookup(self):
        assert appeal_type_label("merch-termination") == (
            "Merch by Amazon (MBA) Account Termination"
        )
        assert appeal_type_label("unknown-type") == "unknown-type"

    def test_guidance_default(self):
        assert guidance_for("other").startswith("Focus on: Comprehensive understanding")

    def test_supporting_document_shape(self):
        for doc in SUPPORTING_DOCUMENT_TYPES:
            assert set(doc) == {"value", "label", "category"}


class TestOptionResolution:
    def test_root_causes_known_type(self):
        assert root_causes_for("inauthenticity-supply-chain")

    def test_root_causes_unknown_type_empty(self):
        assert root_causes_for("amazon-relay") == []

    def test_general_actions_for_other(self):
        assert corrective_actions_for("other") == CORRECTIVE_ACTIONS["general"]

    def test_inauthenticity_group_added(self):
        actions = corrective_actions_for("inauthenticity-supply-chain")
        assert actions[: len(CORRECTIVE_ACTIONS["general"])] == CORRECTIVE_ACTIONS["general"]
        assert actions[len(CORRECTIVE_ACTIONS["general"]):] == CORRECTIVE_ACTIONS["inauthenticity"]

    @pytest.mark.parametrize("appeal_type", ["kdp-acx-merch", "amazon-relay"])
    def test_bsa_dropped_for_platform_types(self, appeal_type):
        assert BUSINESS_SOLUTIONS_AGREEMENT_ACTION not in corrective_actions_for(appeal_type)

    def test_bsa_kept_for_seller_types(self):
        assert BUSINESS_SOLUTIONS_AGREEMENT_ACTION in corrective_actions_for("intellectual-property")

    def test_type_group_appended(self):
        actions = corrective_actions_for("merch-termination")
        assert actions[-1] == CORRECTIVE_ACTIONS["merch"][-1]

    def test_resolution_does_not_mutate_tables(self):
        before = list(CORRECTIVE_ACTIONS["general"])
        corrective_actions_for("kdp-acx-merch")
        assert CORRECTIVE_ACTIONS["general"] == before

    def test_seller_preventive_groups(self):
        groups = preventive_measure_groups_for("inauthenticity-supply-chain")
        assert [g["category"] for g in groups] == [
            "Sourcing & Supplier Vetting",
            "Listing, IP & Detail Page Integrity",
            "Review & Sales Rank Compliance",
            "Operations & Monitoring",
        ]
        assert all(g["items"] for g in groups)

    @pytest.mark.parametrize("appeal_type", ["kdp-acx-merch", "merch-termination"])
    def test_publishing_preventive_groups(self, appeal_type):
        groups = preventive_measure_groups_for(appeal_type)
        assert groups[0]["category"] == "Content & Copyright"
        assert len(groups) == 5


# ---------------------------------------------------------------------------
# Test: Wizard Steps
# ---------------------------------------------------------------------------


class TestCanProceed:
    def test_step_names(self):
        assert WIZARD_STEPS == [
            "Type", "Account", "Cause", "Actions", "Prevention", "Documents", "Review", "Appeal",
        ]

    def test_type_required(self):
        assert not can_proceed(1, AppealFormData())
        assert can_proceed(1, AppealFormData(appeal_type="other"))

    def test_account_needs_all_three(self):
        form = AppealFormData(full_name="Jane", store_name="Doe Goods", email="   ")
        assert not can_proceed(2, form)
        form.email = "jane@example.com"
        assert can_proceed(2, form)

    def test_cause_selection_or_details(self):
        assert not can_proceed(3, AppealFormData())
        assert can_proceed(3, AppealFormData(root_causes=["x"]))
        assert can_proceed(3, AppealFormData(root_cause_details="details"))
        assert not can_proceed(3, AppealFormData(root_cause_details="  "))

    def test_actions_and_prevention(self):
        assert not can_proceed(4, AppealFormData())
        assert can_proceed(4, AppealFormData(corrective_actions_details="done"))
        assert not can_proceed(5, AppealFormData())
        assert can_proceed(5, AppealFormData(preventive_measures=["y"]))

    @pytest.mark.parametrize("step", [6, 7, 8])
    def test_later_steps_never_block(self, step):
        assert can_proceed(step, AppealFormData())


# ---------------------------------------------------------------------------
# Test: Request Models
# ---------------------------------------------------------------------------

_COMPLETE_FORM = {
    "appealType": "other",
    "fullName": "Jane Doe",
    "storeName": "Doe Goods",
    "email": "jane@example.com",
}


class TestRequestModels:
    def test_camel_case_input(self):
        form = AppealFormData.model_validate({
            **_COMPLETE_FORM,
            "rootCauses": ["x"],
            "uploadedDocuments": [{"type": "invoice", "fileName": "a.pdf", "fileSize": 10}],
        })
        assert form.full_name == "Jane Doe"
        assert form.uploaded_documents[0].file_name == "a.pdf"

    def test_snake_case_input_also_accepted(self):
        assert AppealFormData(full_name="Jane").full_name == "Jane"

    def test_dumps_camel_case(self):
        dumped = AppealFormData(**{"full_name": "Jane"}).model_dump(by_alias=True)
        assert "fullName" in dumped and "full_name" not in dumped

    def test_generate_requires_account_fields(self):
        with pytest.raises(ValidationError, match="fullName"):
            GenerateAppealRequest.model_validate({"formData": {"appealType": "other"}})

    def test_generate_accepts_complete_form(self):
        request = GenerateAppealRequest.model_validate({"formData": _COMPLETE_FORM})
        assert request.form_data.store_name == "Doe Goods"

    @pytest.mark.parametrize("section_id", [0, 6])
    def test_section_id_range(self, section_id):
        with pytest.raises(ValidationError):
            GenerateSectionRequest.model_validate({"sectionId": section_id, "formData": _COMPLETE_FORM})

    def test_section_request_previous_default(self):
        request = GenerateSectionRequest.model_validate({"sectionId": 2, "formData": _COMPLETE_FORM})
        assert request.previous_sections == []

    def test_wizard_step_range(self):
        with pytest.raises(ValidationError):
            WizardValidateRequest.model_validate({"step": 9, "formData": {}})

    def test_process_keys_optional_but_not_empty(self):
        assert ProcessTemplatesRequest().keys is None
        with pytest.raises(ValidationError):
            ProcessTemplatesRequest(keys=[])
