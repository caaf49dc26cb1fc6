"""NiceGUI chat interface with streamed assistant replies."""

import logging
import os

import httpx
from nicegui import ui

from relay_chat.chat.session import ChatMessage, ChatSessionStore, Sender, TurnInProgressError
from relay_chat.chat.turn import ChatTurn
from relay_chat.models.schemas import LoginResponse, UserRecord
from relay_chat.ui.uploads import PendingFiles

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
GREETING = "Hello! I'm the virtual assistant. How can I help you today?"

CUSTOM_CSS = """
<style>
    body { background: #f5f5f5; min-height: 100vh; }
    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }
    .header { background: #1e3a8a; }
    .message-user { background: #1e3a8a; color: white; border-radius: 18px 18px 4px 18px; }
    .message-bot { background: #f3f4f6; color: #1f2937; border-radius: 18px 18px 18px 4px; }
    .message-bot p { margin: 0; }
</style>
"""


def create_api_client() -> httpx.AsyncClient:
    """Client for talking to the relay API from the UI process."""
    return httpx.AsyncClient(
        base_url=API_BASE_URL,
        timeout=httpx.Timeout(120.0, connect=10.0),
    )


async def request_login(pin: str, email: str | None = None) -> UserRecord | None:
    """Ask the relay to resolve a PIN.

    Returns:
        The user on success, None if the credentials were rejected.

    Raises:
        httpx.HTTPError: The relay could not be reached or failed.
    """
    async with create_api_client() as client:
        response = await client.post("/api/login", json={"pin": pin, "email": email})
    if response.status_code == httpx.codes.UNAUTHORIZED:
        return None
    response.raise_for_status()
    return LoginResponse.model_validate(response.json()).user


async def send_files(user: UserRecord, files: PendingFiles) -> None:
    """Post selected files to the relay's upload endpoint.

    Raises:
        httpx.HTTPError: The relay or the files webhook rejected the upload.
    """
    async with create_api_client() as client:
        response = await client.post(
            "/api/files",
            data={"userId": user.id},
            files=files.as_multipart(),
        )
    response.raise_for_status()


def render_login(on_success) -> None:
    """Render the PIN form; calls ``on_success(user)`` after a valid login."""

    async def submit() -> None:
        try:
            user = await request_login(pin_input.value or "", email_input.value or None)
        except httpx.HTTPError as e:
            logger.error(f"Login request failed: {e!r}")
            ui.notify("Could not reach the server", type="negative")
            return
        if user is None:
            pin_input.value = ""
            ui.notify("Invalid PIN", type="negative")
            return
        on_success(user)

    with ui.card().classes("mx-auto mt-24 w-80 items-center gap-4"):
        ui.icon("lock").classes("text-5xl text-gray-400")
        ui.label("Enter your PIN").classes("text-lg font-semibold")
        email_input = ui.input("Email (optional)").classes("w-full")
        pin_input = (
            ui.input("PIN", password=True)
            .classes("w-full")
            .on("keydown.enter", submit)
        )
        ui.button("Log in", on_click=submit).classes("w-full")


def render_message(message: ChatMessage) -> None:
    is_user = message.sender is Sender.USER
    align = "justify-end" if is_user else "justify-start"
    bubble = "message-user" if is_user else "message-bot"

    with ui.row().classes(f"w-full {align}"):
        with ui.column().classes("max-w-[70%] gap-1"):
            with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                if message.is_loading and not message.text:
                    ui.spinner("dots", size="lg")
                elif is_user:
                    ui.label(message.text).classes("text-sm whitespace-pre-wrap")
                else:
                    ui.markdown(message.text).classes("text-sm leading-relaxed")
            ui.label(message.timestamp.strftime("%H:%M")).classes(
                f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
            )


def render_chat(user: UserRecord, on_logout) -> None:
    """Render the chat log, message input and file panel for a logged-in user."""
    store = ChatSessionStore(greeting=GREETING)
    pending_files = PendingFiles()

    @ui.refreshable
    def message_list() -> None:
        for message in store.messages:
            render_message(message)

    async def send_message() -> None:
        text = (input_field.value or "").strip()
        if not text:
            return
        try:
            async with create_api_client() as client:
                turn = ChatTurn(
                    store,
                    client,
                    user,
                    text,
                    on_update=lambda _: message_list.refresh(),
                )
                input_field.value = ""
                send_btn.disable()
                message_list.refresh()
                await turn.run()
        except TurnInProgressError:
            ui.notify("Please wait for the current answer", type="warning")
        finally:
            if not store.is_busy:
                send_btn.enable()

    @ui.refreshable
    def file_list() -> None:
        for pending in pending_files:
            with ui.row().classes("w-full items-center gap-2"):
                ui.icon("description").classes("text-gray-400")
                ui.label(pending.name).classes("text-sm flex-grow truncate")
                ui.label(f"{pending.size / 1024:.1f} KB").classes("text-xs text-gray-500")
                ui.button(
                    icon="close",
                    on_click=lambda _, file_id=pending.id: remove_file(file_id),
                ).props("flat round dense size=sm")
        if pending_files:
            ui.label(f"{len(pending_files)} file(s) ready to send").classes(
                "text-xs text-gray-500"
            )

    def remove_file(file_id: str) -> None:
        pending_files.remove(file_id)
        file_list.refresh()

    async def handle_upload(e) -> None:
        pending_files.add(e.file.name, await e.file.read(), e.file.content_type)
        file_list.refresh()

    async def submit_files() -> None:
        if not pending_files:
            return
        try:
            await send_files(user, pending_files)
        except httpx.HTTPError as e:
            logger.error(f"File upload failed: {e!r}")
            ui.notify("The files could not be sent", type="negative")
            return
        pending_files.clear()
        uploader.reset()
        file_list.refresh()
        ui.notify("Files sent", type="positive")

    def new_chat() -> None:
        try:
            store.clear()
        except TurnInProgressError:
            ui.notify("Please wait for the current answer", type="warning")
            return
        message_list.refresh()

    with ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
        "height: calc(100vh - 4rem)"
    ):
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            ui.label(f"Assistant - {user.name}").classes("text-lg font-semibold text-white")
            with ui.row().classes("gap-2"):
                ui.button(icon="add", on_click=new_chat).props("flat round color=white")
                ui.button(icon="logout", on_click=on_logout).props("flat round color=white")

        with ui.scroll_area().classes("flex-grow w-full bg-gray-50"):
            with ui.column().classes("w-full p-5 gap-4"):
                message_list()

        with ui.expansion("Send files", icon="attach_file").classes("w-full px-4"):
            uploader = ui.upload(on_upload=handle_upload, multiple=True, auto_upload=True)
            file_list()
            ui.button("Send files", on_click=submit_files)

        with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
            input_field = (
                ui.textarea(placeholder="Type a message...")
                .props("autogrow borderless dense rows=1")
                .classes("flex-grow")
                .on("keydown.enter.prevent", send_message)
            )
            send_btn = ui.button(icon="send", on_click=send_message).props("round unelevated")


@ui.page("/")
def chat_page() -> None:
    """Main page: login form until a user is known, then the chat."""
    ui.add_head_html(CUSTOM_CSS)
    container = ui.column().classes("w-full p-4 md:p-8")

    def show_login() -> None:
        container.clear()
        with container:
            render_login(show_chat)

    def show_chat(user: UserRecord) -> None:
        container.clear()
        with container:
            render_chat(user, show_login)

    show_login()


def main() -> None:
    ui.run(title="Relay Chat", port=8080, reload=False)


if __name__ == "__main__":
    main()
