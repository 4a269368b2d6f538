# =============================================================================
# Unit Tests — Fallback Letter & Export (HTML, PDF, section parsing)
# =============================================================================

from __future__ import annotations

from app.models.requests import AppealFormData, UploadedDocument
from app.services.export import (
    appeal_to_html,
    appeal_to_pdf,
    format_appeal_html,
    parse_appeal_sections,
)
from app.services.fallback import generate_basic_appeal


def _form(**overrides) -> AppealFormData:
    data = {
        "appeal_type": "inauthenticity-supply-chain",
        "full_name": "Jane Doe",
        "store_name": "Doe Goods",
        "email": "jane@example.com",
        "root_causes": ["Unverified supplier"],
        "corrective_actions_taken": ["Removed listings"],
        "preventive_measures": ["Keep invoices"],
    }
    data.update(overrides)
    return AppealFormData(**data)


# ---------------------------------------------------------------------------
# Test: Fallback Letter
# ---------------------------------------------------------------------------


class TestFallbackAppeal:
    def test_structure_in_order(self):
        text = generate_basic_appeal(_form())
        markers = [
            "Dear Amazon Seller Performance Team,",
            "A. The root cause of the issue",
            "B. The actions I have taken to resolve the issue",
            "C. The steps I have taken to prevent this issue going forward",
            "Sincerely,",
        ]
        positions = [text.index(m) for m in markers]
        assert positions == sorted(positions)

    def test_intro_names_seller_and_type(self):
        text = generate_basic_appeal(_form())
        assert (
            "My name is Jane Doe, and I am the owner of Doe Goods. I am writing to "
            "appeal the inauthenticity-supply-chain issue affecting my Amazon "
            "seller account (jane@example.com)."
        ) in text

    def test_bullets_and_details(self):
        text = generate_basic_appeal(_form(root_cause_details="Bought from a liquidator."))
        assert "• Unverified supplier\n" in text
        assert "• Removed listings\n" in text
        assert "• Keep invoices\n" in text
        assert "\nBought from a liquidator.\n" in text
        assert "I take full responsibility" in text

    def test_documents_listed_only_when_present(self):
        assert "supporting documents" not in generate_basic_appeal(_form())
        text = generate_basic_appeal(_form(uploaded_documents=[
            UploadedDocument(type="invoice", file_name="inv-001.pdf"),
        ]))
        assert "I have attached the following supporting documents" in text
        assert "• inv-001.pdf" in text

    def test_signature(self):
        assert generate_basic_appeal(_form()).endswith(
            "Sincerely,\nJane Doe\nDoe Goods\njane@example.com\n"
        )
        assert generate_basic_appeal(_form(seller_id="A1B2")).endswith("Seller ID: A1B2\n")

    def test_deterministic(self):
        assert generate_basic_appeal(_form()) == generate_basic_appeal(_form())


# ---------------------------------------------------------------------------
# Test: HTML
# ---------------------------------------------------------------------------


class TestFormatAppealHtml:
    def test_bold(self):
        assert format_appeal_html("**A. Root Cause**") == "<strong>A. Root Cause</strong>"

    def test_paragraphs_and_line_breaks(self):
        assert format_appeal_html("One\nTwo\n\nThree") == "One<br/>Two</p><p>Three"

    def test_escapes_html_first(self):
        result = format_appeal_html("<script>x</script> & **bold**")
        assert "<script>" not in result
        assert "&lt;script&gt;" in result
        assert "&amp;" in result
        assert "<strong>bold</strong>" in result

    def test_empty(self):
        assert format_appeal_html("") == ""

    def test_wrapped_in_container(self):
        html = appeal_to_html("Hello")
        assert html.startswith("<div style=")
        assert "<p style=\"margin-bottom: 1.5rem;\">Hello</p>" in html


# ---------------------------------------------------------------------------
# Test: Section Parsing
# ---------------------------------------------------------------------------

_LETTER = """Subject: Appeal for Inauthenticity Suspension

Dear Seller Performance Team,

I am writing regarding my account.

**A. Root Cause**
I bought from an unauthorized supplier.

**B. Corrective Actions**
I removed all affected listings.

**C. Preventive Measures**
I will only buy from authorized distributors.

Thank you for reviewing this appeal.

Sincerely,
Jane Doe
Doe Goods"""


class TestParseAppealSections:
    def test_all_parts(self):
        sections = parse_appeal_sections(_LETTER)
        assert sections["subject"] == "Appeal for Inauthenticity Suspension"
        assert sections["greeting"] == "Dear Seller Performance Team,"
        assert sections["introduction"] == "I am writing regarding my account."
        assert sections["root_causes"] == "I bought from an unauthorized supplier."
        assert sections["corrective_actions"] == "I removed all affected listings."
        assert sections["preventive_measures"] == "I will only buy from authorized distributors."
        assert sections["conclusion"] == "Thank you for reviewing this appeal."
        assert sections["signature"] == "Jane Doe\nDoe Goods"

    def test_plain_headers(self):
        text = "A. The root cause\nCause.\nB. The actions\nActions.\nC. Prevention\nMeasures."
        sections = parse_appeal_sections(text)
        assert sections["root_causes"] == "Cause."
        assert sections["corrective_actions"] == "Actions."
        assert sections["preventive_measures"] == "Measures."

    def test_missing_parts_are_empty(self):
        sections = parse_appeal_sections("Just a note.")
        assert set(sections.values()) == {""}


# ---------------------------------------------------------------------------
# Test: PDF
# ---------------------------------------------------------------------------


class TestAppealToPdf:
    def test_produces_pdf_bytes(self):
        data = appeal_to_pdf(_LETTER)
        assert data.startswith(b"%PDF")

    def test_non_latin1_characters_do_not_fail(self):
        text = "“Quoted” — dash • bullet … and 漢字 and emoji 🚀"
        assert appeal_to_pdf(text, title="Appeal – Jane").startswith(b"%PDF")

