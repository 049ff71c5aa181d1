"""NiceGUI pages: login gate, chat, profile and about.

The pages talk to the session engine in-process and redraw from its state;
the engine's timeline is the only thing rendered as conversation.
"""

import asyncio
import logging

from nicegui import app, events, ui

from companion_ai import __version__
from companion_ai.engine import (
    AuthenticationRejected,
    DocumentDecodeFailed,
    EmptyInput,
    ResponderUnavailable,
    ResponseAlreadyPending,
    ResponseGenerationFailed,
    SessionController,
    UnsupportedMediaType,
    get_session_gate,
)
from companion_ai.models.schemas import Message, RawUpload, Sender

logger = logging.getLogger(__name__)

AUTH_STORAGE_KEY = "companion-ai-auth"
ACCEPTED_FILES = ".pdf,.txt,.doc,.docx"

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: linear-gradient(135deg, #0f172a 0%, #1e1b4b 100%); min-height: 100vh; }

    .glass-dark {
        background: rgba(15, 23, 42, 0.6);
        backdrop-filter: blur(12px);
        border: 1px solid rgba(255, 255, 255, 0.12);
    }

    .message-user {
        background: #6366f1;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: rgba(255, 255, 255, 0.08);
        color: white;
        border: 1px solid rgba(255, 255, 255, 0.15);
        border-radius: 18px 18px 18px 4px;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: rgba(255, 255, 255, 0.6);
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.1s; }
    .typing-dot:nth-child(3) { animation-delay: 0.2s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .message-assistant a { color: #a5b4fc; }
</style>
"""

ABOUT_FEATURES = [
    "Diagnosing appliance issues",
    "Providing step-by-step repair guides",
    "Maintenance scheduling and reminders",
    "Safety tips and precautions",
    "Parts identification and sourcing",
    "Analyzing uploaded PDF manuals and documents",
]


def _is_remembered() -> bool:
    return bool(app.storage.user.get(AUTH_STORAGE_KEY))


def _active_session() -> SessionController | None:
    """Session for this browser, restoring it when only the flag survived a restart."""
    gate = get_session_gate()
    if not gate.authenticated and _is_remembered():
        try:
            gate.restore()
        except ResponderUnavailable as e:
            logger.error(f"Could not restore session: {e}")
            return None
    return gate.controller if gate.authenticated else None


@ui.page("/login")
def login_page() -> None:
    """Credential screen; any non-blank email and password are accepted."""
    ui.add_head_html(CUSTOM_CSS)

    if _active_session() is not None:
        ui.navigate.to("/")
        return

    async def submit() -> None:
        submit_btn.disable()
        # Simulated sign-in delay
        await asyncio.sleep(1)
        try:
            get_session_gate().login(email.value or "", password.value or "")
        except (AuthenticationRejected, ResponderUnavailable) as e:
            ui.notify(str(e), type="negative")
            submit_btn.enable()
            return
        app.storage.user[AUTH_STORAGE_KEY] = True
        ui.navigate.to("/")

    with ui.column().classes("w-full min-h-screen items-center justify-center p-4"):
        with ui.column().classes("items-center gap-1 mb-6"):
            ui.icon("smart_toy").classes("text-white text-5xl")
            ui.label("Companion AI").classes("text-4xl font-bold text-white")
            ui.label("Your intelligent assistant for everything").classes("text-white/80")
        with ui.card().classes("glass-dark w-full max-w-md p-6 gap-4"):
            ui.label("Welcome Back").classes("text-2xl text-white self-center")
            email = ui.input("Email").props("dark outlined type=email").classes("w-full")
            password = (
                ui.input("Password", password=True)
                .props("dark outlined")
                .classes("w-full")
                .on("keydown.enter", submit)
            )
            submit_btn = ui.button("Sign In", on_click=submit).classes("w-full")


@ui.page("/")
def chat_page() -> None:
    """Chat, profile and about views behind the login gate."""
    ui.add_head_html(CUSTOM_CSS)

    session = _active_session()
    if session is None:
        ui.navigate.to("/login")
        return

    view = {"page": "chat"}

    messages_container: ui.column
    chips_row: ui.row
    input_field: ui.input
    send_btn: ui.button

    # --- rendering ---------------------------------------------------------

    def render_avatar(is_user: bool) -> None:
        css = "bg-indigo-500" if is_user else "glass-dark"
        with ui.element("div").classes(
            f"w-8 h-8 rounded-full flex items-center justify-center shrink-0 {css}"
        ):
            ui.icon("person" if is_user else "smart_toy").classes("text-white text-base")

    def render_message(msg: Message) -> None:
        is_user = msg.sender == Sender.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align} gap-3 items-start no-wrap"):
            if not is_user:
                render_avatar(False)
            with ui.column().classes(f"max-w-[70%] gap-1 p-4 {bubble}"):
                if is_user:
                    ui.label(msg.content).classes("text-sm whitespace-pre-wrap")
                else:
                    ui.markdown(msg.content).classes("text-sm leading-relaxed")
                if msg.attachments:
                    with ui.column().classes("gap-0 pt-2 border-t border-white/20 w-full"):
                        for ref in msg.attachments:
                            with ui.row().classes("items-center gap-2 text-xs text-white/70"):
                                ui.icon("description").classes("text-xs")
                                ui.label(ref.name)
                                ui.label(f"({ref.size_label})")
                ui.label(msg.display_time).classes("text-[10px] opacity-60")
            if is_user:
                render_avatar(True)

    def render_typing_indicator() -> None:
        with ui.row().classes("w-full justify-start gap-3 items-end"):
            render_avatar(False)
            with ui.element("div").classes("message-assistant px-4 py-3"):
                with ui.row().classes("gap-1"):
                    for _ in range(3):
                        ui.element("div").classes("typing-dot")

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            for msg in session.messages:
                render_message(msg)
            if session.pending_response:
                render_typing_indicator()
        send_btn.set_enabled(not session.pending_response)
        input_field.set_enabled(not session.pending_response)

    def refresh_chips() -> None:
        chips_row.clear()
        with chips_row:
            for index, attachment in enumerate(session.attachments):
                with ui.row().classes("glass-dark rounded-lg px-3 py-1 items-center gap-2"):
                    ui.icon("attach_file").classes("text-white text-sm")
                    ui.label(attachment.name).classes("text-white text-sm")
                    if session.is_staged(attachment):
                        ui.badge("next message").props("color=indigo")
                    ui.button(
                        icon="close", on_click=lambda i=index: session.detach_attachment_at(i)
                    ).props("flat round dense size=xs color=white")
        chips_row.set_visibility(bool(session.attachments))

    def refresh_all() -> None:
        if view["page"] == "chat":
            refresh_messages()
            refresh_chips()

    # --- actions -----------------------------------------------------------

    async def await_reply(pending: "asyncio.Task[Message]") -> None:
        try:
            await asyncio.shield(pending)
        except ResponseGenerationFailed as e:
            ui.notify(f"{e} - please try again.", type="negative")

    async def send_message() -> None:
        try:
            pending = session.submit_user_message(input_field.value or "")
        except EmptyInput:
            return
        except ResponseAlreadyPending as e:
            ui.notify(str(e), type="warning")
            return
        input_field.value = ""
        await await_reply(pending)

    async def handle_upload(e: events.UploadEventArguments) -> None:
        raw = RawUpload(
            name=e.file.name,
            media_type=e.file.content_type or "application/octet-stream",
            data=await e.file.read(),
        )
        try:
            pending = session.submit_attachment(raw)
        except ResponseAlreadyPending:
            # A reply is in flight: keep the document for the next message instead.
            try:
                session.stage_attachment(raw)
            except (UnsupportedMediaType, DocumentDecodeFailed) as error:
                ui.notify(str(error), type="negative")
                return
            logger.info(f"Staged {raw.name} while a reply is pending")
            ui.notify(f"{raw.name} will be sent with your next message")
            return
        except (UnsupportedMediaType, DocumentDecodeFailed) as error:
            ui.notify(str(error), type="negative")
            return
        upload_dialog.close()
        await await_reply(pending)

    def logout() -> None:
        get_session_gate().logout()
        app.storage.user.pop(AUTH_STORAGE_KEY, None)
        ui.navigate.to("/login")

    def show(page: str) -> None:
        view["page"] = page
        content.refresh()
        header_title.set_text(
            {"chat": "Companion AI", "profile": "Profile Settings", "about": "About"}[page]
        )
        upload_btn.set_visibility(page == "chat")

    # --- upload dialog -----------------------------------------------------

    with ui.dialog() as upload_dialog, ui.card().classes("glass-dark w-full max-w-md p-6 gap-4"):
        ui.label("Upload Document").classes("text-lg font-semibold text-white")
        ui.label(
            "Upload PDF manuals, text files, or documents for AI analysis and assistance."
        ).classes("text-white/70 text-sm")
        ui.upload(on_upload=handle_upload, multiple=True, auto_upload=True).props(
            f'accept="{ACCEPTED_FILES}" dark flat bordered'
        ).classes("w-full")
        ui.label("Supported formats: PDF, TXT, DOC, DOCX").classes("text-xs text-white/50")

    # --- layout ------------------------------------------------------------

    @ui.refreshable
    def content() -> None:
        nonlocal messages_container, chips_row, input_field, send_btn

        if view["page"] == "profile":
            with ui.card().classes("glass-dark m-6 p-6 gap-4 max-w-xl"):
                ui.input("Name", value="Demo User").props("dark outlined").classes("w-full")
                ui.input("Email", value="demo@example.com").props("dark outlined").classes(
                    "w-full"
                )
                ui.button("Save Changes", on_click=lambda: ui.notify("Profile saved"))
            return

        if view["page"] == "about":
            with ui.card().classes("glass-dark m-6 p-6 gap-3 max-w-xl text-white/80"):
                ui.label(
                    "Companion AI is your intelligent assistant designed specifically "
                    "for appliance troubleshooting and maintenance."
                )
                ui.label("Our AI can help you with:")
                for feature in ABOUT_FEATURES:
                    ui.label(f"• {feature}").classes("ml-4")
                ui.label(f"Version {__version__}").classes("text-sm text-white/60 mt-4")
            return

        chips_row = ui.row().classes("w-full p-4 gap-2 border-b border-white/10")
        with ui.scroll_area().classes("flex-grow w-full"):
            messages_container = ui.column().classes("w-full p-6 gap-4")
        with ui.row().classes("w-full p-6 gap-3 border-t border-white/10 no-wrap"):
            input_field = (
                ui.input(placeholder="Ask me about your appliances...")
                .props("dark outlined dense")
                .classes("flex-grow")
                .on("keydown.enter", send_message)
            )
            send_btn = ui.button(icon="send", on_click=send_message).props("round unelevated")
        refresh_messages()
        refresh_chips()

    with ui.row().classes("w-full h-screen no-wrap gap-0"):
        with ui.column().classes("glass-dark h-full p-4 gap-2 w-48"):
            for page, icon, label in (
                ("chat", "smart_toy", "Chat"),
                ("profile", "settings", "Profile"),
                ("about", "info", "About"),
            ):
                ui.button(label, icon=icon, on_click=lambda p=page: show(p)).props(
                    "flat align=left color=white"
                ).classes("w-full")
            ui.space()
            ui.button("Logout", icon="logout", on_click=logout).props(
                "flat align=left color=white"
            ).classes("w-full")

        with ui.column().classes("flex-grow h-full gap-0"):
            with ui.row().classes(
                "w-full h-16 glass-dark px-6 items-center justify-between"
            ):
                header_title = ui.label("Companion AI").classes("text-xl font-semibold text-white")
                upload_btn = ui.button(
                    "Upload PDF", icon="description", on_click=upload_dialog.open
                ).props("outline color=white size=sm")
            with ui.column().classes("w-full flex-grow gap-0"):
                content()

    unsubscribe = session.subscribe(refresh_all)
    ui.context.client.on_disconnect(unsubscribe)

