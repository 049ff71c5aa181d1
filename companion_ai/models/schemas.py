"""Pydantic models for the session engine and its HTTP surface.

Engine models are frozen: once a message or attachment exists it never
changes, so snapshots handed to a response generator cannot go stale.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class Sender(str, Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"


class AttachmentRef(BaseModel):
    """Lightweight reference from a message to an ingested document.

    Attributes:
        name: Original file name.
        media_type: Declared media type of the upload.
        size_bytes: Size of the raw upload in bytes.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    media_type: str
    size_bytes: int = Field(ge=0)

    @property
    def size_label(self) -> str:
        """Human readable size, e.g. ``12.3 KB``."""
        return f"{self.size_bytes / 1024:.1f} KB"


class Attachment(BaseModel):
    """A decoded document owned by the attachment registry.

    Attributes:
        name: Original file name.
        media_type: Declared media type of the upload.
        size_bytes: Size of the raw upload in bytes.
        content: Decoded text payload.
        pages: Page count when the format has pages.
        metadata: Decoder-provided metadata (title, author, ...).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    media_type: str
    size_bytes: int = Field(ge=0)
    content: str
    pages: int | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    def ref(self) -> AttachmentRef:
        """Return the message-side reference for this attachment."""
        return AttachmentRef(
            name=self.name,
            media_type=self.media_type,
            size_bytes=self.size_bytes,
        )


class RawUpload(BaseModel):
    """An upload as received from the presentation layer."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    media_type: str
    data: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class Message(BaseModel):
    """One turn of the conversation.

    Attributes:
        id: ``<epoch-ms>-<sequence>``; sequence breaks timestamp ties.
        content: Text body, empty only for document-only turns.
        sender: Who wrote the message.
        timestamp: Creation instant, for display only.
        attachments: References to documents carried by this turn.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    sender: Sender
    timestamp: datetime
    attachments: tuple[AttachmentRef, ...] = ()

    @property
    def display_time(self) -> str:
        return self.timestamp.astimezone().strftime("%I:%M %p")


class GenerationRequest(BaseModel):
    """Immutable input handed to a response generator.

    Attributes:
        content: Latest user text.
        documents: Registry contents when the request was issued.
        turn_attachments: References carried by the triggering user message.
        history: Timeline contents when the request was issued.
    """

    model_config = ConfigDict(frozen=True)

    content: str
    documents: tuple[Attachment, ...] = ()
    turn_attachments: tuple[AttachmentRef, ...] = ()
    history: tuple[Message, ...] = ()

    @property
    def attachment_names(self) -> tuple[str, ...]:
        return tuple(doc.name for doc in self.documents)


class SessionSnapshot(BaseModel):
    """Read view of a session for the HTTP layer.

    Attributes:
        messages: Timeline, oldest first.
        attachments: Registry contents (references only).
        staged: Attachments waiting for the next text turn.
        pending_response: Whether a reply is being composed.
    """

    messages: list[Message]
    attachments: list[AttachmentRef]
    staged: list[AttachmentRef]
    pending_response: bool

    @computed_field
    @property
    def message_count(self) -> int:
        return len(self.messages)


class ChatRequest(BaseModel):
    """Request payload for the chat endpoint.

    Blank text is allowed here; the session decides whether staged
    attachments make it a valid turn.
    """

    message: str = ""

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class TurnResponse(BaseModel):
    """Outcome of a completed turn.

    Attributes:
        user_message: The message appended for the user.
        reply: The assistant message that answered it.
    """

    user_message: Message
    reply: Message


class LoginRequest(BaseModel):
    """Credentials for the simulated authentication gate."""

    email: str
    password: str


class AuthStatus(BaseModel):
    authenticated: bool
