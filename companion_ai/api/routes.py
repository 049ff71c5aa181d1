"""Session endpoints: login gate, chat turns and document uploads.

Engine errors are translated to HTTP errors here; the engine itself knows
nothing about HTTP.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status

from companion_ai.engine import (
    AuthenticationRejected,
    DocumentDecodeFailed,
    EmptyInput,
    ResponderUnavailable,
    ResponseAlreadyPending,
    ResponseGenerationFailed,
    SessionController,
    SessionEngineError,
    SessionNotAuthenticated,
    UnsupportedMediaType,
    get_session_gate,
)
from companion_ai.models.schemas import (
    AttachmentRef,
    AuthStatus,
    ChatRequest,
    LoginRequest,
    RawUpload,
    SessionSnapshot,
    TurnResponse,
)
from companion_ai.parsing.decoder import MAX_FILE_SIZE

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["auth"])
router = APIRouter(tags=["session"])

# 10MB limit matches the decoder constant
MAX_UPLOAD_SIZE = MAX_FILE_SIZE

_ERROR_STATUS: dict[type[SessionEngineError], int] = {
    EmptyInput: status.HTTP_422_UNPROCESSABLE_CONTENT,
    UnsupportedMediaType: status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    DocumentDecodeFailed: status.HTTP_400_BAD_REQUEST,
    ResponseAlreadyPending: status.HTTP_409_CONFLICT,
    ResponseGenerationFailed: status.HTTP_502_BAD_GATEWAY,
    SessionNotAuthenticated: status.HTTP_401_UNAUTHORIZED,
    AuthenticationRejected: status.HTTP_401_UNAUTHORIZED,
    ResponderUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def to_http_error(error: SessionEngineError) -> HTTPException:
    """Map an engine error to the HTTP error reported to the client."""
    code = _ERROR_STATUS.get(type(error), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=code, detail=str(error))


def current_session() -> SessionController:
    """Dependency resolving the logged-in session.

    Raises:
        HTTPException: 401 if nobody is logged in.
    """
    try:
        return get_session_gate().controller
    except SessionNotAuthenticated as e:
        raise to_http_error(e) from e


async def _read_upload(file: UploadFile) -> RawUpload:
    """Read an uploaded file, checking its name and size.

    Raises:
        HTTPException: 400 without a filename, 413 if over the size limit.
    """
    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Filename is required",
        )

    content = await file.read()

    if len(content) > MAX_UPLOAD_SIZE:
        size_mb = len(content) / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)",
        )

    return RawUpload(
        name=file.filename,
        media_type=file.content_type or "application/octet-stream",
        data=content,
    )


@auth_router.post("/login", response_model=AuthStatus)
async def login(credentials: LoginRequest) -> AuthStatus:
    """Start a session. Any non-blank email and password are accepted."""
    try:
        get_session_gate().login(credentials.email, credentials.password)
    except (AuthenticationRejected, ResponderUnavailable) as e:
        raise to_http_error(e) from e
    return AuthStatus(authenticated=True)


@auth_router.post("/logout", response_model=AuthStatus)
async def logout() -> AuthStatus:
    """End the session and discard its conversation."""
    get_session_gate().logout()
    return AuthStatus(authenticated=False)


@router.get("/session", response_model=SessionSnapshot)
async def read_session(session: SessionController = Depends(current_session)) -> SessionSnapshot:
    """Return the timeline, documents and pending flag."""
    return session.snapshot()


@router.post("/chat", response_model=TurnResponse)
async def chat(
    request: ChatRequest,
    session: SessionController = Depends(current_session),
) -> TurnResponse:
    """Submit a text turn and wait for the assistant's reply.

    Raises:
        409: A reply is still being composed.
        422: Blank message with nothing staged.
        502: The response generator failed or timed out.
    """
    try:
        pending = session.submit_user_message(request.message)
    except (EmptyInput, ResponseAlreadyPending) as e:
        raise to_http_error(e) from e

    user_message = session.messages[-1]

    # The cycle outlives this request if the client disconnects.
    try:
        reply = await asyncio.shield(pending)
    except ResponseGenerationFailed as e:
        raise to_http_error(e) from e

    return TurnResponse(user_message=user_message, reply=reply)


@router.post("/upload", response_model=TurnResponse)
async def upload(
    file: UploadFile,
    session: SessionController = Depends(current_session),
) -> TurnResponse:
    """Upload a document as its own turn and wait for the acknowledgement.

    Raises:
        400: Missing filename or unreadable document.
        409: A reply is still being composed.
        413: File exceeds 10MB limit.
        415: Not a text, PDF or Word document.
        502: The response generator failed or timed out.
    """
    raw = await _read_upload(file)

    try:
        pending = session.submit_attachment(raw)
    except (UnsupportedMediaType, DocumentDecodeFailed, ResponseAlreadyPending) as e:
        raise to_http_error(e) from e

    user_message = session.messages[-1]

    try:
        reply = await asyncio.shield(pending)
    except ResponseGenerationFailed as e:
        raise to_http_error(e) from e

    logger.info(f"Upload turn completed for {raw.name}")
    return TurnResponse(user_message=user_message, reply=reply)


@router.post("/attachments", response_model=AttachmentRef)
async def stage_attachment(
    file: UploadFile,
    session: SessionController = Depends(current_session),
) -> AttachmentRef:
    """Upload a document to accompany the next chat message."""
    raw = await _read_upload(file)

    try:
        attachment = session.stage_attachment(raw)
    except (UnsupportedMediaType, DocumentDecodeFailed) as e:
        raise to_http_error(e) from e

    return attachment.ref()


@router.delete("/attachments/{name}", response_model=SessionSnapshot)
async def detach_attachment(
    name: str,
    session: SessionController = Depends(current_session),
) -> SessionSnapshot:
    """Remove a document. Unknown names are ignored."""
    session.detach_attachment(name)
    return session.snapshot()
