"""Test doubles and builders shared across test modules."""

import asyncio

from companion_ai.models.schemas import GenerationRequest, RawUpload


class ControlledResponder:
    """Response generator whose replies are released, failed or withheld on demand.

    Attributes:
        requests: Every GenerationRequest received, in order.
        release: Set to let gated calls return.
    """

    def __init__(
        self,
        reply: str = "Check the thermostat.",
        error: Exception | None = None,
        gated: bool = False,
        hang: bool = False,
    ) -> None:
        self.reply = reply
        self.error = error
        self.gated = gated
        self.hang = hang
        self.requests: list[GenerationRequest] = []
        self.release = asyncio.Event()

    async def generate(self, request: GenerationRequest) -> str:
        self.requests.append(request)
        if self.hang:
            await asyncio.Event().wait()
        if self.gated:
            await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.reply


def text_upload(name: str = "manual.txt", text: str = "Reset the compressor.") -> RawUpload:
    """Build a plain text upload."""
    return RawUpload(name=name, media_type="text/plain", data=text.encode())


async def wait_until(predicate, attempts: int = 200) -> None:
    """Yield to the event loop until ``predicate()`` holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0.01)
    raise AssertionError("condition not reached")
