"""Errors raised by the session engine.

Every failure is local to one operation: the timeline and the attachment
registry stay valid and usable after any of them.
"""


class SessionEngineError(Exception):
    """Base class for session engine failures."""

    pass


class EmptyInput(SessionEngineError):
    """Raised when a blank turn is submitted with nothing staged."""

    def __init__(self) -> None:
        super().__init__("Message is empty and no attachments are staged")


class UnsupportedMediaType(SessionEngineError):
    """Raised when an upload's declared media type is not a document type."""

    def __init__(self, media_type: str) -> None:
        self.media_type = media_type
        super().__init__(f"Unsupported media type: {media_type or '<none>'}")


class DocumentDecodeFailed(SessionEngineError):
    """Raised when a supported upload cannot be decoded."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Could not read {name}: {reason}")


class ResponseAlreadyPending(SessionEngineError):
    """Raised when a turn is submitted while a reply is being composed."""

    def __init__(self) -> None:
        super().__init__("A response is already being generated")


class ResponseGenerationFailed(SessionEngineError):
    """Raised when the response generator errors out or times out."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Response generation failed: {reason}")


class SessionNotAuthenticated(SessionEngineError):
    """Raised when the session is used before logging in."""

    def __init__(self) -> None:
        super().__init__("Not authenticated")


class AuthenticationRejected(SessionEngineError):
    """Raised when the gate refuses to start a session."""

    pass


class ResponderUnavailable(SessionEngineError):
    """Raised when the configured response generator cannot be built."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Response generator unavailable: {reason}")
