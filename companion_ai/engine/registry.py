"""Attachment registry: the documents available to a session."""

import logging

from companion_ai.engine.errors import DocumentDecodeFailed, UnsupportedMediaType
from companion_ai.models.schemas import Attachment, RawUpload
from companion_ai.parsing.decoder import (
    DefaultDocumentDecoder,
    DocumentDecodeError,
    DocumentDecoder,
    split_media_type,
)

logger = logging.getLogger(__name__)

DOCUMENT_MEDIA_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)


def is_document_type(media_type: str) -> bool:
    """Whether a declared media type is accepted for ingestion."""
    base, _ = split_media_type(media_type or "")
    return base.startswith("text/") or base in DOCUMENT_MEDIA_TYPES


class AttachmentRegistry:
    """Ordered store of decoded uploads.

    Duplicate names are allowed; entries are told apart only by position.
    Ingestion is the only way in, and entries are never modified.
    """

    def __init__(self, decoder: DocumentDecoder | None = None) -> None:
        self._decoder = decoder or DefaultDocumentDecoder()
        self._attachments: list[Attachment] = []

    def ingest(self, upload: RawUpload) -> Attachment:
        """Decode and store an upload.

        Args:
            upload: The raw file as received.

        Returns:
            The stored Attachment.

        Raises:
            UnsupportedMediaType: If the declared type is not a document type.
            DocumentDecodeFailed: If the decoder cannot read the upload.
        """
        if not is_document_type(upload.media_type):
            logger.warning(f"Rejected upload {upload.name}: unsupported type {upload.media_type!r}")
            raise UnsupportedMediaType(upload.media_type)

        try:
            decoded = self._decoder.decode(upload)
        except DocumentDecodeError as e:
            logger.warning(f"Failed to decode {upload.name}: {e}")
            raise DocumentDecodeFailed(upload.name, str(e)) from e

        attachment = Attachment(
            name=upload.name,
            media_type=upload.media_type,
            size_bytes=upload.size_bytes,
            content=decoded.text,
            pages=decoded.pages,
            metadata=decoded.metadata,
        )
        self._attachments.append(attachment)
        logger.info(f"Ingested {attachment.name} ({attachment.size_bytes} bytes)")
        return attachment

    def list(self) -> tuple[Attachment, ...]:
        return tuple(self._attachments)

    def names(self) -> tuple[str, ...]:
        return tuple(a.name for a in self._attachments)

    def get(self, name: str) -> Attachment | None:
        """Most recently ingested attachment with this name, if any."""
        for attachment in reversed(self._attachments):
            if attachment.name == name:
                return attachment
        return None

    def remove(self, name: str) -> Attachment | None:
        """Remove the most recent attachment with this name.

        Removing a name that is not present is a no-op.
        """
        for index in range(len(self._attachments) - 1, -1, -1):
            if self._attachments[index].name == name:
                return self._remove_index(index)
        return None

    def remove_at(self, index: int) -> Attachment | None:
        if 0 <= index < len(self._attachments):
            return self._remove_index(index)
        return None

    def _remove_index(self, index: int) -> Attachment:
        attachment = self._attachments.pop(index)
        logger.info(f"Removed attachment {attachment.name}")
        return attachment

    def __len__(self) -> int:
        return len(self._attachments)
