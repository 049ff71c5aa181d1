"""Response generator seam and the scripted responder.

The scheduler only knows the ``ResponseGenerator`` protocol, so the scripted
stub and the LLM-backed agent are interchangeable.
"""

import asyncio
from typing import Protocol

from companion_ai.models.schemas import GenerationRequest

UPLOAD_ACKNOWLEDGEMENT = 'I\'ve uploaded "{name}" for analysis.'


class ResponseGenerator(Protocol):
    """Abstraction for producing assistant replies."""

    async def generate(self, request: GenerationRequest) -> str:
        """Return the reply text for the latest user turn."""
        ...


def is_upload_turn(request: GenerationRequest) -> bool:
    """Whether the request answers an upload acknowledgement turn."""
    return any(
        request.content == UPLOAD_ACKNOWLEDGEMENT.format(name=ref.name)
        for ref in request.turn_attachments
    )


class ScriptedResponder:
    """Canned replies after a fixed delay.

    Stands in for a real model during demos and tests.
    """

    def __init__(self, delay_seconds: float = 1.0) -> None:
        self._delay = delay_seconds

    async def generate(self, request: GenerationRequest) -> str:
        if self._delay:
            await asyncio.sleep(self._delay)

        if is_upload_turn(request):
            name = request.turn_attachments[-1].name
            return (
                f'Great! I\'ve received your document "{name}". I can now help you '
                "with questions about this manual or document. What specific "
                "information are you looking for?"
            )

        grounding = ""
        if request.attachment_names:
            grounding = (
                "Based on the documents you've uploaded "
                f"({', '.join(request.attachment_names)}), "
                "I can provide more specific guidance. "
            )
        topic = request.content or ", ".join(ref.name for ref in request.turn_attachments)
        return (
            f'I understand you\'re asking about "{topic}". {grounding}'
            "As your Companion AI, I can help you troubleshoot appliances, provide "
            "maintenance tips, and guide you through repairs. Could you tell me more "
            "about the specific appliance or issue you're experiencing?"
        )
