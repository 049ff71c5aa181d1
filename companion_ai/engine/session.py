"""Session controller: the public face of the chat engine.

Composes the attachment registry, the message timeline and the response
scheduler, and owns the one piece of shared state, ``pending_response``.
Only this class writes to the registry and the timeline.
"""

import asyncio
import logging
from collections.abc import Callable

from pydantic import ValidationError

from companion_ai.agent.config import get_agent_config
from companion_ai.agent.responders import UPLOAD_ACKNOWLEDGEMENT, ResponseGenerator, ScriptedResponder
from companion_ai.engine.config import EngineConfig, get_engine_config
from companion_ai.engine.errors import EmptyInput, ResponderUnavailable, ResponseAlreadyPending
from companion_ai.engine.registry import AttachmentRegistry
from companion_ai.engine.scheduler import ResponseScheduler
from companion_ai.engine.state import SessionState
from companion_ai.engine.timeline import MessageTimeline
from companion_ai.models.schemas import (
    Attachment,
    AttachmentRef,
    Message,
    RawUpload,
    Sender,
    SessionSnapshot,
)
from companion_ai.parsing.decoder import DocumentDecoder

logger = logging.getLogger(__name__)


def build_response_generator(config: EngineConfig) -> ResponseGenerator:
    """Create the response generator named by the engine configuration.

    Raises:
        ResponderUnavailable: If the agent is selected but not configured.
    """
    if config.responder == "agent":
        from companion_ai.agent.chat_agent import AgentResponder

        try:
            agent_config = get_agent_config()
        except ValidationError as e:
            reason = "; ".join(err["msg"] for err in e.errors())
            logger.error(f"Agent responder misconfigured: {reason}")
            raise ResponderUnavailable(reason) from e
        return AgentResponder(config=agent_config)
    return ScriptedResponder(delay_seconds=config.scripted_delay_seconds)


class SessionController:
    """One user's conversation: timeline, documents and reply lifecycle.

    Submitting a turn returns an ``asyncio.Task`` that resolves to the
    assistant reply, so a second submission can be attempted (and refused)
    before the first one resolves.
    """

    def __init__(
        self,
        generator: ResponseGenerator | None = None,
        decoder: DocumentDecoder | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        """Initialize a fresh session.

        Args:
            generator: Response generator. Built from config if not provided.
            decoder: Document decoder. Defaults to the pypdf/text decoder.
            config: Engine configuration. Loads from environment if not provided.
        """
        self._config = config or get_engine_config()
        self._state = SessionState()
        self._registry = AttachmentRegistry(decoder)
        self._timeline = MessageTimeline()
        self._staged: list[Attachment] = []
        self._listeners: list[Callable[[], None]] = []
        self._scheduler = ResponseScheduler(
            generator or build_response_generator(self._config),
            self._timeline,
            self._state,
            timeout_seconds=self._config.response_timeout_seconds,
            notify=self._notify,
        )

        if self._config.greeting:
            self._timeline.append(Sender.ASSISTANT, self._config.greeting)

    # --- read views -------------------------------------------------------

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._timeline.all()

    @property
    def attachments(self) -> tuple[Attachment, ...]:
        return self._registry.list()

    @property
    def staged(self) -> tuple[AttachmentRef, ...]:
        return tuple(a.ref() for a in self._staged)

    def is_staged(self, attachment: Attachment) -> bool:
        """Whether this registry entry rides on the next text turn."""
        return any(staged is attachment for staged in self._staged)

    @property
    def pending_response(self) -> bool:
        return self._state.pending_response

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            messages=list(self.messages),
            attachments=[a.ref() for a in self.attachments],
            staged=list(self.staged),
            pending_response=self.pending_response,
        )

    # --- operations -------------------------------------------------------

    def submit_user_message(self, text: str) -> "asyncio.Task[Message]":
        """Append a user turn and start composing the reply.

        Staged attachments ride on this turn and are then cleared.

        Raises:
            EmptyInput: If text is blank and nothing is staged.
            ResponseAlreadyPending: If a reply is still being composed.
        """
        content = text.strip()
        if not content and not self._staged:
            raise EmptyInput()
        self._ensure_idle()

        message = self._timeline.append(Sender.USER, content, self.staged)
        self._staged.clear()
        logger.info(f"User message {message.id} with {len(message.attachments)} attachments")
        return self._scheduler.request_response(
            content, self._registry.list(), message.attachments
        )

    def submit_attachment(self, upload: RawUpload) -> "asyncio.Task[Message]":
        """Ingest an upload as its own conversational turn.

        Raises:
            ResponseAlreadyPending: If a reply is still being composed.
            UnsupportedMediaType: If the upload is not a document.
            DocumentDecodeFailed: If the document cannot be read.
        """
        self._ensure_idle()

        attachment = self._registry.ingest(upload)
        message = self._timeline.append(
            Sender.USER,
            UPLOAD_ACKNOWLEDGEMENT.format(name=attachment.name),
            [attachment.ref()],
        )
        return self._scheduler.request_response(
            message.content, self._registry.list(), message.attachments
        )

    def stage_attachment(self, upload: RawUpload) -> Attachment:
        """Ingest an upload to be sent along with the next text turn."""
        attachment = self._registry.ingest(upload)
        self._staged.append(attachment)
        self._notify()
        return attachment

    def detach_attachment(self, name: str) -> None:
        """Remove a document from the session.

        Messages that referenced it keep their references. Unknown names
        are ignored.
        """
        removed = self._registry.remove(name)
        if removed is not None:
            self._unstage(removed)
            self._notify()

    def detach_attachment_at(self, index: int) -> None:
        removed = self._registry.remove_at(index)
        if removed is not None:
            self._unstage(removed)
            self._notify()

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Call ``listener`` after every state change; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- internals --------------------------------------------------------

    def _ensure_idle(self) -> None:
        if self._state.pending_response:
            raise ResponseAlreadyPending()
        # Fail before mutating anything when there is no loop to run the reply on.
        asyncio.get_running_loop()

    def _unstage(self, attachment: Attachment) -> None:
        # Equal-valued uploads are distinct entries; match the removed object itself.
        for index, staged in enumerate(self._staged):
            if staged is attachment:
                del self._staged[index]
                return

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Session listener failed")
