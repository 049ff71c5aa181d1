"""Unit tests for SessionController."""

import pytest
import pytest_check as check

from companion_ai.engine import (
    DocumentDecodeFailed,
    EmptyInput,
    EngineConfig,
    ResponseAlreadyPending,
    ResponseGenerationFailed,
    SessionController,
    UnsupportedMediaType,
)
from companion_ai.models.schemas import RawUpload, Sender
from tests.helpers import ControlledResponder, text_upload


@pytest.fixture
def gated() -> ControlledResponder:
    return ControlledResponder(gated=True)


@pytest.fixture
def gated_session(gated: ControlledResponder, engine_config: EngineConfig) -> SessionController:
    return SessionController(generator=gated, config=engine_config)


class TestSubmitUserMessage:
    """Tests for SessionController.submit_user_message()."""

    async def test_text_turn_round_trip(self, session: SessionController) -> None:
        """A text turn adds one user and one assistant message."""
        check.is_false(session.pending_response)

        pending = session.submit_user_message("fridge not cooling")

        check.is_true(session.pending_response)
        check.equal([m.sender for m in session.messages], [Sender.USER])
        reply = await pending

        check.equal([m.sender for m in session.messages], [Sender.USER, Sender.ASSISTANT])
        check.equal(session.messages[0].content, "fridge not cooling")
        check.equal(session.messages[0].attachments, ())
        check.equal(session.messages[-1], reply)
        check.is_false(session.pending_response)

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_text_rejected(self, session: SessionController, text: str) -> None:
        with pytest.raises(EmptyInput):
            session.submit_user_message(text)

        assert session.messages == ()
        assert session.pending_response is False

    async def test_text_is_stripped(self, session: SessionController) -> None:
        await session.submit_user_message("  ice maker jammed \n")

        assert session.messages[0].content == "ice maker jammed"

    async def test_back_to_back_submission_rejected(
        self, gated: ControlledResponder, gated_session: SessionController
    ) -> None:
        """The second submission fails and the timeline keeps only the first turn."""
        first = gated_session.submit_user_message("first")

        with pytest.raises(ResponseAlreadyPending):
            gated_session.submit_user_message("second")

        check.equal([m.content for m in gated_session.messages], ["first"])
        gated.release.set()
        await first
        check.equal(len(gated_session.messages), 2)
        check.equal(len(gated.requests), 1)

    async def test_failed_cycle_adds_no_message(self, engine_config: EngineConfig) -> None:
        responder = ControlledResponder(error=RuntimeError("model unavailable"))
        session = SessionController(generator=responder, config=engine_config)

        with pytest.raises(ResponseGenerationFailed):
            await session.submit_user_message("hello")

        check.equal(len(session.messages), 1)
        check.is_false(session.pending_response)

    async def test_can_resubmit_after_failure(self, engine_config: EngineConfig) -> None:
        responder = ControlledResponder(error=RuntimeError("model unavailable"))
        session = SessionController(generator=responder, config=engine_config)
        with pytest.raises(ResponseGenerationFailed):
            await session.submit_user_message("hello")

        responder.error = None
        await session.submit_user_message("hello")

        assert [m.sender for m in session.messages] == [Sender.USER, Sender.USER, Sender.ASSISTANT]


class TestSubmitAttachment:
    """Tests for SessionController.submit_attachment()."""

    async def test_upload_turn(self, session: SessionController) -> None:
        """Uploading manual.txt registers it and adds a referencing user turn."""
        reply = await session.submit_attachment(text_upload("manual.txt"))

        check.equal([a.name for a in session.attachments], ["manual.txt"])
        user_message = session.messages[0]
        check.equal(user_message.sender, Sender.USER)
        check.equal(user_message.content, 'I\'ve uploaded "manual.txt" for analysis.')
        check.equal([r.name for r in user_message.attachments], ["manual.txt"])
        check.equal(reply.sender, Sender.ASSISTANT)
        check.is_in('"manual.txt"', reply.content)
        check.equal(len(session.messages), 2)

    async def test_unsupported_type_changes_nothing(self, session: SessionController) -> None:
        upload = RawUpload(name="photo.png", media_type="image/png", data=b"\x89PNG")

        with pytest.raises(UnsupportedMediaType):
            session.submit_attachment(upload)

        check.equal(session.attachments, ())
        check.equal(session.messages, ())
        check.is_false(session.pending_response)

    async def test_decode_failure_changes_nothing(self, session: SessionController) -> None:
        upload = RawUpload(name="empty.txt", media_type="text/plain", data=b"")

        with pytest.raises(DocumentDecodeFailed):
            session.submit_attachment(upload)

        check.equal(session.attachments, ())
        check.equal(session.messages, ())

    async def test_upload_while_pending_rejected_before_ingest(
        self, gated: ControlledResponder, gated_session: SessionController
    ) -> None:
        first = gated_session.submit_user_message("hello")

        with pytest.raises(ResponseAlreadyPending):
            gated_session.submit_attachment(text_upload())

        check.equal(gated_session.attachments, ())
        gated.release.set()
        await first


class TestStagedAttachments:
    """Tests for attachments staged for the next text turn."""

    async def test_staged_attachment_rides_on_next_turn(self, session: SessionController) -> None:
        session.stage_attachment(text_upload("manual.txt"))

        check.equal(len(session.messages), 0)
        check.equal([r.name for r in session.staged], ["manual.txt"])
        await session.submit_user_message("what does page 3 say?")

        check.equal([r.name for r in session.messages[0].attachments], ["manual.txt"])
        check.equal(session.staged, ())

    async def test_blank_text_allowed_with_staged_attachment(
        self, session: SessionController
    ) -> None:
        """A document-only turn has empty content and non-empty attachments."""
        session.stage_attachment(text_upload("manual.txt"))

        await session.submit_user_message("   ")

        user_message = session.messages[0]
        check.equal(user_message.content, "")
        check.equal(len(user_message.attachments), 1)

    async def test_detach_unstages(self, session: SessionController) -> None:
        session.stage_attachment(text_upload("manual.txt"))

        session.detach_attachment("manual.txt")

        check.equal(session.staged, ())
        with pytest.raises(EmptyInput):
            session.submit_user_message("")


class TestDetachAttachment:
    """Tests for SessionController.detach_attachment()."""

    async def test_detach_unknown_name_is_noop(self, session: SessionController) -> None:
        await session.submit_attachment(text_upload("manual.txt"))

        session.detach_attachment("nothing.txt")

        assert [a.name for a in session.attachments] == ["manual.txt"]

    async def test_history_keeps_removed_reference(self, session: SessionController) -> None:
        """Messages still reference a detached document as inert metadata."""
        await session.submit_attachment(text_upload("manual.txt"))

        session.detach_attachment("manual.txt")

        check.equal(session.attachments, ())
        check.equal([r.name for r in session.messages[0].attachments], ["manual.txt"])

    async def test_detach_at_index(self, session: SessionController) -> None:
        session.stage_attachment(text_upload("a.txt"))
        session.stage_attachment(text_upload("b.txt"))

        session.detach_attachment_at(0)

        check.equal([a.name for a in session.attachments], ["b.txt"])
        check.equal([r.name for r in session.staged], ["b.txt"])

    async def test_detach_older_duplicate_keeps_staged_copy(
        self, session: SessionController
    ) -> None:
        """Removing the unstaged copy of a duplicate name leaves the staged one."""
        await session.submit_attachment(text_upload("a.txt", "old"))
        session.stage_attachment(text_upload("a.txt", "new"))

        session.detach_attachment_at(0)

        check.equal([a.content for a in session.attachments], ["new"])
        check.equal([r.name for r in session.staged], ["a.txt"])
        check.is_true(session.is_staged(session.attachments[0]))

    async def test_detach_newer_duplicate_keeps_staged_copy(
        self, session: SessionController
    ) -> None:
        session.stage_attachment(text_upload("a.txt", "staged"))
        await session.submit_attachment(text_upload("a.txt", "turn"))

        session.detach_attachment("a.txt")

        check.equal([a.content for a in session.attachments], ["staged"])
        check.equal([r.name for r in session.staged], ["a.txt"])

    async def test_detach_identical_duplicate_unstages_only_its_entry(
        self, session: SessionController
    ) -> None:
        session.stage_attachment(text_upload("a.txt", "same"))
        session.stage_attachment(text_upload("a.txt", "same"))

        session.detach_attachment_at(1)

        check.equal(len(session.attachments), 1)
        check.equal(len(session.staged), 1)
        await session.submit_user_message("")
        check.equal(len(session.messages[0].attachments), 1)

    async def test_in_flight_request_keeps_its_snapshot(
        self, gated: ControlledResponder, gated_session: SessionController
    ) -> None:
        """Detaching after a request was issued does not change its grounding."""
        gated_session.stage_attachment(text_upload("manual.txt"))
        pending = gated_session.submit_user_message("summarize the manual")

        gated_session.detach_attachment("manual.txt")
        gated.release.set()
        await pending

        check.equal(gated.requests[0].attachment_names, ("manual.txt",))
        check.equal(gated.requests[0].documents[0].content, "Reset the compressor.")
        check.equal(gated_session.attachments, ())


class TestSessionSetup:
    """Tests for session construction, snapshots and listeners."""

    def test_greeting_opens_session(self) -> None:
        config = EngineConfig(greeting="Hi there", scripted_delay_seconds=0)

        session = SessionController(config=config)

        check.equal(len(session.messages), 1)
        check.equal(session.messages[0].sender, Sender.ASSISTANT)
        check.equal(session.messages[0].content, "Hi there")

    async def test_snapshot_reflects_state(self, session: SessionController) -> None:
        await session.submit_attachment(text_upload("manual.txt"))
        session.stage_attachment(text_upload("wiring.txt"))

        snapshot = session.snapshot()

        check.equal(snapshot.message_count, 2)
        check.equal([r.name for r in snapshot.attachments], ["manual.txt", "wiring.txt"])
        check.equal([r.name for r in snapshot.staged], ["wiring.txt"])
        check.is_false(snapshot.pending_response)

    async def test_listeners_follow_state_changes(self, session: SessionController) -> None:
        seen: list[bool] = []
        unsubscribe = session.subscribe(lambda: seen.append(session.pending_response))

        await session.submit_user_message("hello")
        unsubscribe()
        await session.submit_user_message("again")

        assert seen == [True, False]

    async def test_failing_listener_does_not_break_session(
        self, session: SessionController
    ) -> None:
        def broken() -> None:
            raise RuntimeError("render failed")

        session.subscribe(broken)

        reply = await session.submit_user_message("hello")

        assert session.messages[-1] == reply
