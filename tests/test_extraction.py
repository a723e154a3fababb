"""Tests for document text extraction and regex field extraction."""

import io

from docx import Document

from services.document_processor import DocumentProcessor
from services.extraction import extract_fields, parse_deadline_date

SAMPLE_RFP = """\
Call for Proposals: Community Water Resilience Programme in Northern Region
Issued by UNOPS on behalf of the Ministry of Water
Reference: UNOPS/CFP/2025/017
Budget Ceiling: up to USD 170,000
Grant period: 12 months
Language of proposals: English
Submit via Grant+ portal
Partial proposals: not permitted
Request for clarification: 1 October 2025 17:00 CET
Submission of proposals: 15 October 2025 12:00 CET
Expected agreement start date: 1 December 2025
"""


class TestExtractFields:
    def setup_method(self):
        text = DocumentProcessor().process_bytes(SAMPLE_RFP.encode(), "rfp.txt")["text"]
        self.result = extract_fields(text)

    def test_identity_fields(self):
        assert self.result.title.startswith("Community Water Resilience Programme")
        assert self.result.issuer.startswith("UNOPS")
        assert self.result.reference_id == "UNOPS/CFP/2025/017"

    def test_budget_and_duration(self):
        assert self.result.financials.budget_cap.amount == 170000.0
        assert self.result.financials.budget_cap.currency == "USD"
        assert self.result.duration_months == 12

    def test_submission_info(self):
        assert self.result.submission.language == "en"
        assert self.result.submission.channel.startswith("Submit via Grant+")
        assert self.result.submission.partial_proposals_allowed is False

    def test_deadlines(self):
        deadlines = {d.type: d for d in self.result.deadlines}
        assert set(deadlines) == {"clarifications", "submission", "contract_start"}
        assert deadlines["clarifications"].datetime_iso == "2025-10-01T17:00:00"
        assert deadlines["clarifications"].timezone == "CET"
        assert deadlines["submission"].datetime_iso == "2025-10-15T12:00:00"
        assert deadlines["contract_start"].datetime_iso == "2025-12-01T23:59:00"
        assert deadlines["contract_start"].timezone == "UTC"

    def test_confidence(self):
        assert self.result.confidence == 0.6


def test_empty_text_finds_nothing():
    result = extract_fields("")
    assert result.title is None
    assert result.reference_id is None
    assert result.deadlines == []
    assert result.financials.budget_cap.amount is None


def test_partial_proposals_allowed():
    result = extract_fields("Partial proposals: allowed")
    assert result.submission.partial_proposals_allowed is True


def test_parse_deadline_date_default_time():
    assert parse_deadline_date("3 March 2026") == "2026-03-03T23:59:00"


class TestDocumentProcessor:
    def test_plain_text_is_cleaned(self):
        result = DocumentProcessor().process_bytes(b"Line one\n\n\tLine\x07 two  ", "notes.txt")
        assert result["format"] == "text"
        assert result["text"] == "Line one Line two"
        assert result["warnings"] == []

    def test_invalid_pdf_falls_back_to_decode(self):
        result = DocumentProcessor().process_bytes(b"not a pdf", "broken.pdf")
        assert result["format"] == "pdf"
        assert result["text"] == "not a pdf"
        assert result["warnings"]

    def test_docx_paragraphs_and_tables(self):
        document = Document()
        document.add_paragraph("Request for Proposals: School Feeding Programme 2026")
        table = document.add_table(rows=1, cols=2)
        table.rows[0].cells[0].text = "Budget Cap"
        table.rows[0].cells[1].text = "EUR 50,000"
        buffer = io.BytesIO()
        document.save(buffer)

        result = DocumentProcessor().process_bytes(buffer.getvalue(), "rfp.docx")
        assert result["format"] == "docx"
        assert "School Feeding Programme 2026" in result["text"]
        assert "Budget Cap | EUR 50,000" in result["text"]


def test_long_reference_is_cut_to_column_width():
    reference = "UNOPS/CFP/2025/" + "7" * 150
    result = extract_fields(f"Reference: {reference}")
    assert result.reference_id == reference[:100]
    assert len(result.reference_id) == 100
