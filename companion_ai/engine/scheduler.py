"""Response scheduler: one request/response cycle at a time."""

import asyncio
import logging
from collections.abc import Callable, Iterable

from companion_ai.agent.responders import ResponseGenerator
from companion_ai.engine.errors import ResponseAlreadyPending, ResponseGenerationFailed
from companion_ai.engine.state import SessionState
from companion_ai.engine.timeline import MessageTimeline
from companion_ai.models.schemas import Attachment, AttachmentRef, GenerationRequest, Message, Sender

logger = logging.getLogger(__name__)


class ResponseScheduler:
    """Drives the response generator without blocking the caller.

    Cycle: Idle -> Pending -> Idle, whether the generator succeeds, raises
    or times out. There is no queue: a request while pending is refused.
    """

    def __init__(
        self,
        generator: ResponseGenerator,
        timeline: MessageTimeline,
        state: SessionState,
        timeout_seconds: float = 30.0,
        notify: Callable[[], None] | None = None,
    ) -> None:
        self._generator = generator
        self._timeline = timeline
        self._state = state
        self._timeout = timeout_seconds
        self._notify = notify or (lambda: None)

    def request_response(
        self,
        content: str,
        documents: Iterable[Attachment],
        turn_attachments: Iterable[AttachmentRef] = (),
    ) -> "asyncio.Task[Message]":
        """Start a response cycle for the latest user turn.

        Must be called from a running event loop. The returned task resolves
        to the appended assistant message or raises ResponseGenerationFailed.

        Raises:
            ResponseAlreadyPending: If a cycle is already in flight.
        """
        if self._state.pending_response:
            raise ResponseAlreadyPending()

        loop = asyncio.get_running_loop()
        request = GenerationRequest(
            content=content,
            documents=tuple(documents),
            turn_attachments=tuple(turn_attachments),
            history=self._timeline.all(),
        )

        self._state.pending_response = True
        self._notify()
        logger.info(f"Response requested ({len(request.documents)} documents available)")
        return loop.create_task(self._run_cycle(request))

    async def _run_cycle(self, request: GenerationRequest) -> Message:
        try:
            reply = await self._generate(request)
            message = self._timeline.append(Sender.ASSISTANT, reply)
            logger.info(f"Response appended as {message.id}")
            return message
        finally:
            self._state.pending_response = False
            self._notify()

    async def _generate(self, request: GenerationRequest) -> str:
        try:
            reply = await asyncio.wait_for(
                self._generator.generate(request), timeout=self._timeout
            )
        except TimeoutError as e:
            logger.error(f"Response generator timed out after {self._timeout}s")
            raise ResponseGenerationFailed(f"timed out after {self._timeout:g}s") from e
        except Exception as e:
            logger.error(f"Response generator failed: {e}")
            raise ResponseGenerationFailed(str(e) or type(e).__name__) from e

        if not reply or not reply.strip():
            logger.error("Response generator returned an empty reply")
            raise ResponseGenerationFailed("empty reply")
        return reply
