"""PDF text extraction using pypdf."""

import io
import logging

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from companion_ai.parsing.decoder import DecodedDocument, DocumentDecodeError

logger = logging.getLogger(__name__)

PDF_MAGIC_BYTES = b"%PDF"

_METADATA_FIELDS = {
    "/Title": "title",
    "/Author": "author",
    "/Subject": "subject",
    "/Creator": "creator",
    "/Producer": "producer",
    "/CreationDate": "creation_date",
    "/ModDate": "modification_date",
}


class PDFParseError(DocumentDecodeError):
    """Raised when PDF parsing fails."""

    pass


def _extract_metadata(reader: PdfReader) -> dict[str, str]:
    """Collect the standard document info fields that are present."""
    metadata: dict[str, str] = {}

    try:
        if reader.metadata:
            for key, field in _METADATA_FIELDS.items():
                value = reader.metadata.get(key)
                if value:
                    metadata[field] = str(value)
    except Exception as e:
        logger.warning(f"Failed to extract some metadata: {e}")

    return metadata


def parse_pdf(file_content: bytes) -> DecodedDocument:
    """Extract the text of every page of a PDF.

    Args:
        file_content: Raw bytes of the PDF file.

    Returns:
        DecodedDocument with joined page text, page count and metadata.

    Raises:
        PDFParseError: If the bytes are not a readable PDF.
    """
    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise PDFParseError("Invalid PDF: file does not start with PDF header")

    try:
        reader = PdfReader(io.BytesIO(file_content))
        pages = len(reader.pages)
    except PdfReadError as e:
        raise PDFParseError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFParseError(f"Failed to read PDF: {e}") from e

    if pages == 0:
        raise PDFParseError("PDF contains no pages")

    text_parts: list[str] = []
    for i, page in enumerate(reader.pages):
        try:
            page_text = page.extract_text()
        except Exception as e:
            logger.warning(f"Failed to extract text from page {i + 1}: {e}")
            continue
        if page_text:
            text_parts.append(page_text)

    text = "\n\n".join(text_parts)
    if not text.strip():
        logger.warning("PDF contains no extractable text (may be scanned/image-based)")

    return DecodedDocument(text=text, pages=pages, metadata=_extract_metadata(reader))
