import io
import re

import pdfplumber

from models.responses import ExtractedPdfData, PdfMetadata

PDF_MAGIC = b"%PDF-"
_HEADER_VERSION_RE = re.compile(rb"%PDF-(\d+\.\d+)")

# Collapse runs of blank lines left by page breaks and layout gaps
_BLANK_LINES_RE = re.compile(r"\n\s*\n+")


def is_pdf(content: bytes) -> bool:
    return content.lstrip()[:5] == PDF_MAGIC


def pdf_version(pdf_bytes: bytes) -> str:
    """Version from the %PDF-x.y header, or "" if the header is missing."""
    m = _HEADER_VERSION_RE.search(pdf_bytes[:1024])
    return m.group(1).decode("ascii") if m else ""


def clean_text(text: str) -> str:
    return _BLANK_LINES_RE.sub("\n\n", text).strip()


def extract_text(pdf_bytes: bytes) -> str:
    """Extract all text from a PDF file."""
    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return clean_text("\n".join(pages))


def extract_pdf(pdf_bytes: bytes) -> ExtractedPdfData:
    """Text plus page count and PDF version."""
    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return ExtractedPdfData(
        text=clean_text("\n".join(pages)),
        metadata=PdfMetadata(pages=len(pages), version=pdf_version(pdf_bytes)),
    )
