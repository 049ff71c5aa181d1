"""Pydantic models shared by the engine, the API and the UI.

Models:
    - Message / AttachmentRef: timeline entries and their document references
    - Attachment / RawUpload: registry entries and the uploads they come from
    - GenerationRequest: immutable snapshot handed to a response generator
    - SessionSnapshot, ChatRequest, TurnResponse, LoginRequest, AuthStatus:
      HTTP payloads
"""

from companion_ai.models.schemas import (
    Attachment,
    AttachmentRef,
    AuthStatus,
    ChatRequest,
    GenerationRequest,
    LoginRequest,
    Message,
    RawUpload,
    Sender,
    SessionSnapshot,
    TurnResponse,
)

__all__ = [
    "Attachment",
    "AttachmentRef",
    "AuthStatus",
    "ChatRequest",
    "GenerationRequest",
    "LoginRequest",
    "Message",
    "RawUpload",
    "Sender",
    "SessionSnapshot",
    "TurnResponse",
]
