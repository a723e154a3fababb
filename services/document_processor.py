"""
Document Processor Service

Extracts plain text from uploaded RFP documents (PDF, DOCX, plain text).
"""

import io
import re
from pathlib import Path

# PDF Processing
from PyPDF2 import PdfReader

# DOCX Processing
from docx import Document


CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F-\x9F]")


class DocumentProcessor:
    """
    Processes RFP documents and extracts text.

    - PDF text extraction with PyPDF2
    - DOCX text extraction with python-docx (paragraphs and tables)
    - Anything else is decoded as UTF-8, ignoring undecodable bytes
    """

    def process_bytes(self, file_bytes: bytes, filename: str) -> dict:
        """
        Process document from bytes.

        Args:
            file_bytes: Document content as bytes
            filename: Original filename (for format detection)

        Returns:
            Dict with cleaned text, detected format and warnings
        """
        suffix = Path(filename or "").suffix.lower()

        if suffix == ".pdf":
            result = self._process_pdf_bytes(file_bytes)
        elif suffix == ".docx":
            result = self._process_docx_bytes(file_bytes)
        else:
            result = {"format": "text", "text": self._decode(file_bytes), "warnings": []}

        # Binary formats we failed to parse still get the plain decode
        if not result["text"] and file_bytes:
            result["warnings"].append("No text extracted; falling back to plain decode")
            result["text"] = self._decode(file_bytes)

        result["text"] = self._clean_text(result["text"])
        return result

    def _decode(self, file_bytes: bytes) -> str:
        return file_bytes.decode("utf-8", errors="ignore")

    def _process_pdf_bytes(self, pdf_bytes: bytes) -> dict:
        """Process PDF from bytes."""
        result = {"format": "pdf", "text": "", "page_count": 0, "warnings": []}

        try:
            reader = PdfReader(io.BytesIO(pdf_bytes))
            result["page_count"] = len(reader.pages)
            result["text"] = "\n\n".join(page.extract_text() or "" for page in reader.pages)
        except Exception as e:
            result["warnings"].append(f"PDF processing error: {str(e)}")

        return result

    def _process_docx_bytes(self, docx_bytes: bytes) -> dict:
        """Process DOCX from bytes."""
        result = {"format": "docx", "text": "", "warnings": []}

        try:
            doc = Document(io.BytesIO(docx_bytes))
            paragraphs = [p.text.strip() for p in doc.paragraphs if p.text.strip()]

            for table in doc.tables:
                for row in table.rows:
                    row_text = " | ".join(cell.text.strip() for cell in row.cells)
                    if row_text.strip():
                        paragraphs.append(row_text)

            result["text"] = "\n\n".join(paragraphs)
        except Exception as e:
            result["warnings"].append(f"DOCX processing error: {str(e)}")

        return result

    def _clean_text(self, text: str) -> str:
        """Strip control characters and collapse whitespace."""
        if not text:
            return ""
        text = CONTROL_CHARS.sub("", text)
        return re.sub(r"\s+", " ", text).strip()


# Module-level instance for convenience
_processor = None

def get_processor() -> DocumentProcessor:
    """Get or create the document processor instance."""
    global _processor
    if _processor is None:
        _processor = DocumentProcessor()
    return _processor
