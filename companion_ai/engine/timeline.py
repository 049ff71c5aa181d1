"""Append-only message timeline."""

import itertools
from collections.abc import Iterable
from datetime import datetime, timezone

from companion_ai.models.schemas import AttachmentRef, Message, Sender


class MessageTimeline:
    """Time-ordered log of the conversation.

    Order of ``append`` calls is authoritative; timestamps are for display.
    There is no edit or delete.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._sequence = itertools.count(1)

    def append(
        self,
        sender: Sender,
        content: str,
        attachments: Iterable[AttachmentRef] = (),
    ) -> Message:
        """Create a message and add it to the end of the log."""
        now = datetime.now(timezone.utc)
        message = Message(
            id=f"{int(now.timestamp() * 1000)}-{next(self._sequence):06d}",
            content=content,
            sender=sender,
            timestamp=now,
            attachments=tuple(attachments),
        )
        self._messages.append(message)
        return message

    def all(self) -> tuple[Message, ...]:
        """All messages, oldest first."""
        return tuple(self._messages)

    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)
