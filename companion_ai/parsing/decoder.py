"""Document decoding for uploads.

Turns raw upload bytes into text the session can ground replies on.
Internal document structure (Word layouts, PDF forms) is not interpreted;
the decoder only needs text plus a little metadata.
"""

import logging
from typing import Protocol

from pydantic import BaseModel, Field

from companion_ai.models.schemas import RawUpload

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB


class DocumentDecodeError(Exception):
    """Raised when an upload cannot be turned into text."""

    pass


class DecodedDocument(BaseModel):
    """Text extracted from an upload.

    Attributes:
        text: Decoded text content.
        pages: Page count for paged formats.
        metadata: Document metadata (title, author, etc.).
    """

    text: str
    pages: int | None = Field(default=None, ge=0)
    metadata: dict[str, str] = Field(default_factory=dict)


class DocumentDecoder(Protocol):
    """Abstraction over upload decoding."""

    def decode(self, upload: RawUpload) -> DecodedDocument:
        """Decode an upload or raise DocumentDecodeError."""
        ...


def split_media_type(media_type: str) -> tuple[str, dict[str, str]]:
    """Split ``text/plain; charset=utf-8`` into the type and its parameters."""
    base, *params = media_type.split(";")
    parsed: dict[str, str] = {}
    for param in params:
        key, sep, value = param.partition("=")
        if sep:
            parsed[key.strip().lower()] = value.strip().strip('"')
    return base.strip().lower(), parsed


class DefaultDocumentDecoder:
    """Decoder used by the app: pypdf for PDFs, text decoding for the rest."""

    def __init__(self, max_file_size: int = MAX_FILE_SIZE) -> None:
        self._max_file_size = max_file_size

    def decode(self, upload: RawUpload) -> DecodedDocument:
        if not upload.data:
            raise DocumentDecodeError("Empty file provided")

        if upload.size_bytes > self._max_file_size:
            size_mb = upload.size_bytes / (1024 * 1024)
            limit_mb = self._max_file_size / (1024 * 1024)
            raise DocumentDecodeError(
                f"File size ({size_mb:.1f}MB) exceeds maximum allowed ({limit_mb:.0f}MB)"
            )

        media_type, params = split_media_type(upload.media_type)
        if media_type == "application/pdf":
            # Imported here to avoid a cycle: pdf_parser builds on this module.
            from companion_ai.parsing.pdf_parser import parse_pdf

            return parse_pdf(upload.data)

        return DecodedDocument(text=self._decode_text(upload.data, params.get("charset")))

    @staticmethod
    def _decode_text(data: bytes, charset: str | None) -> str:
        encoding = charset or "utf-8"
        try:
            return data.decode(encoding, errors="replace")
        except LookupError:
            logger.warning(f"Unknown charset {encoding!r}, falling back to utf-8")
            return data.decode("utf-8", errors="replace")
