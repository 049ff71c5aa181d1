"""Upload decoding for the attachment registry.

Responsibilities:
    - Size and emptiness checks on raw uploads
    - PDF text extraction with pypdf
    - Plain text and Word uploads decoded as text
    - Metadata extraction (title, author, pages)
"""

from companion_ai.parsing.decoder import (
    MAX_FILE_SIZE,
    DecodedDocument,
    DefaultDocumentDecoder,
    DocumentDecodeError,
    DocumentDecoder,
    split_media_type,
)
from companion_ai.parsing.pdf_parser import PDFParseError, parse_pdf

__all__ = [
    "MAX_FILE_SIZE",
    "DecodedDocument",
    "DefaultDocumentDecoder",
    "DocumentDecodeError",
    "DocumentDecoder",
    "PDFParseError",
    "parse_pdf",
    "split_media_type",
]
