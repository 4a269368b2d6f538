# =============================================================================
# Appeal Export — HTML, PDF and Section Parsing
# =============================================================================
#
# Letters are stored as plain text with light markdown (**bold** headings,
# blank lines between paragraphs, "•" bullets). This module renders that
# text for the browser (HTML), for download (PDF via fpdf2), and splits it
# back into its A/B/C parts for the admin view.
#
# The PDF uses fpdf2's core Helvetica font, which only covers Latin-1.
# Typographic characters the model likes to emit (curly quotes, dashes,
# bullets) are mapped to ASCII first; anything else becomes "?".
# =============================================================================

from __future__ import annotations

import html
import logging
import re

from fpdf import FPDF

logger = logging.getLogger(__name__)

_BOLD_RE = re.compile(r"\*\*([^*]+)\*\*")


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------


def format_appeal_html(text: str) -> str:
    """
    Convert letter text to inline HTML.

        **bold**    → <strong>bold</strong>
        blank line  → paragraph break
        newline     → <br/>

    The text is HTML-escaped before any markup is added.
    """
    if not text:
        return ""

    escaped = html.escape(text, quote=False)
    formatted = _BOLD_RE.sub(r"<strong>\1</strong>", escaped)
    formatted = formatted.replace("\n\n", "</p><p>")
    return formatted.replace("\n", "<br/>")


def appeal_to_html(text: str) -> str:
    """Wrap the formatted letter in a styled container."""
    return (
        '<div style="font-family: -apple-system, BlinkMacSystemFont, \'Segoe UI\', '
        "Roboto, 'Helvetica Neue', Arial, sans-serif; line-height: 1.6; "
        'color: #1e293b; max-width: 800px; margin: 0 auto;">'
        f'<p style="margin-bottom: 1.5rem;">{format_appeal_html(text)}</p>'
        "</div>"
    )


# ---------------------------------------------------------------------------
# Section Parsing
# ---------------------------------------------------------------------------

_SUBJECT_RE = re.compile(r"Subject:\s*(.+?)(?:\n|$)")
_GREETING_RE = re.compile(r"Dear\s+.+?,")
_HEADER_RE = {
    letter: re.compile(rf"^[ \t]*(?:\*\*)?{letter}\.[^\n]*$", re.MULTILINE)
    for letter in ("A", "B", "C")
}
_PREVENTIVE_END_RE = re.compile(r"\n\n[A-Z]|Sincerely|Thank you")
_SIGN_OFF_RE = re.compile(r"^[ \t]*(?:Sincerely|Best regards|Respectfully|Regards),?[ \t]*$", re.MULTILINE)


def parse_appeal_sections(text: str) -> dict[str, str]:
    """
    Split a letter into its conventional parts.

    Root causes, corrective actions and preventive measures are found by
    their "A.", "B." and "C." heading lines (bold or plain). Parts that
    cannot be located are returned as empty strings.
    """
    sections = {
        "subject": "",
        "greeting": "",
        "introduction": "",
        "root_causes": "",
        "corrective_actions": "",
        "preventive_measures": "",
        "conclusion": "",
        "signature": "",
    }

    subject = _SUBJECT_RE.search(text)
    if subject:
        sections["subject"] = subject.group(1).strip()

    greeting = _GREETING_RE.search(text)
    if greeting:
        sections["greeting"] = greeting.group(0)

    headers = {letter: pattern.search(text) for letter, pattern in _HEADER_RE.items()}
    a, b, c = headers["A"], headers["B"], headers["C"]

    if greeting and a:
        sections["introduction"] = text[greeting.end():a.start()].strip()

    if a:
        sections["root_causes"] = text[a.end():b.start() if b else len(text)].strip()
    if b:
        sections["corrective_actions"] = text[b.end():c.start() if c else len(text)].strip()

    sign_off = _SIGN_OFF_RE.search(text)
    if c:
        end = _PREVENTIVE_END_RE.search(text, c.end())
        preventive_end = end.start() if end else len(text)
        sections["preventive_measures"] = text[c.end():preventive_end].strip()
        if sign_off and sign_off.start() >= preventive_end:
            sections["conclusion"] = text[preventive_end:sign_off.start()].strip()

    if sign_off:
        sections["signature"] = text[sign_off.end():].strip()

    return sections


# ---------------------------------------------------------------------------
# PDF
# ---------------------------------------------------------------------------

_PDF_REPLACEMENTS = {
    "\u2018": "'", "\u2019": "'",
    "\u201c": "\"", "\u201d": "\"",
    "\u2013": "-", "\u2014": "-",
    "\u2022": "-", "\u2026": "...",
}


def _latin1(text: str) -> str:
    for char, replacement in _PDF_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text.encode("latin-1", errors="replace").decode("latin-1")


class AppealLetterPDF(FPDF):
    """Single-column letter layout with a title header and page numbers."""

    def __init__(self, title: str) -> None:
        super().__init__()
        self._title = _latin1(title)

    def header(self):
        self.set_font("Helvetica", "B", 10)
        self.set_text_color(100, 100, 100)
        self.cell(0, 8, self._title, 0, 1, "C")
        self.line(10, self.get_y(), 200, self.get_y())
        self.ln(4)

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", 0, 0, "C")

    def paragraph(self, text: str):
        self.set_font("Helvetica", "", 10.5)
        self.set_text_color(30, 30, 30)
        self.multi_cell(0, 5.5, text)
        self.ln(3)


def appeal_to_pdf(text: str, title: str = "Appeal Letter") -> bytes:
    """Render the letter as a PDF; bold markers are dropped."""
    pdf = AppealLetterPDF(title)
    pdf.alias_nb_pages()
    pdf.set_auto_page_break(auto=True, margin=20)
    pdf.add_page()

    plain = _latin1(_BOLD_RE.sub(r"\1", text))
    for block in plain.split("\n\n"):
        block = block.strip("\n")
        if block.strip():
            pdf.paragraph(block)

    data = bytes(pdf.output())
    logger.debug("Rendered appeal PDF (%d bytes, %d pages)", len(data), pdf.page_no())
    return data
