"""Conversational session engine.

Owns the message timeline, the uploaded documents and the reply lifecycle
of one chat session.

Components:
    - registry: documents available to the session
    - timeline: append-only message log
    - scheduler: one asynchronous reply at a time, with a timeout
    - session: controller composing the three
    - gate: authenticated flag and the session it unlocks
"""

from companion_ai.engine.config import EngineConfig, get_engine_config
from companion_ai.engine.errors import (
    AuthenticationRejected,
    DocumentDecodeFailed,
    EmptyInput,
    ResponseAlreadyPending,
    ResponderUnavailable,
    ResponseGenerationFailed,
    SessionEngineError,
    SessionNotAuthenticated,
    UnsupportedMediaType,
)
from companion_ai.engine.registry import AttachmentRegistry, is_document_type
from companion_ai.engine.timeline import MessageTimeline
from companion_ai.engine.scheduler import ResponseScheduler
from companion_ai.engine.session import SessionController, build_response_generator
from companion_ai.engine.gate import SessionGate, get_session_gate, reset_session_gate

__all__ = [
    "AttachmentRegistry",
    "AuthenticationRejected",
    "DocumentDecodeFailed",
    "EmptyInput",
    "EngineConfig",
    "MessageTimeline",
    "ResponseAlreadyPending",
    "ResponderUnavailable",
    "ResponseGenerationFailed",
    "ResponseScheduler",
    "SessionController",
    "SessionEngineError",
    "SessionGate",
    "SessionNotAuthenticated",
    "UnsupportedMediaType",
    "build_response_generator",
    "get_engine_config",
    "get_session_gate",
    "is_document_type",
    "reset_session_gate",
]
