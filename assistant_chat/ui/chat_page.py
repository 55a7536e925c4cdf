"""NiceGUI chat interface backed by ChatClient."""

import os

from nicegui import ui

from assistant_chat.models.schemas import Role, Turn
from assistant_chat.ui.chat_client import ChatClient

APP_TITLE = os.getenv("APP_TITLE", "Assistant Chat")
CHAT_GREETING = os.getenv("CHAT_GREETING") or None

CUSTOM_CSS = """
<style>
    body { background: #F3F4F6; min-height: 100vh; }

    .header { background: #111827; }

    .message-user {
        background: #2563EB;
        color: white;
        border-radius: 12px;
    }

    .message-assistant {
        background: white;
        color: black;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: #9ca3af;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }
</style>
"""


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)

    messages_container: ui.column
    input_field: ui.textarea
    send_btn: ui.button

    def render_message(turn: Turn) -> None:
        is_user = turn.role is Role.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align}"):
            with ui.element("div").classes(f"max-w-[75%] shadow-sm p-4 {bubble}"):
                ui.label(turn.content).classes("whitespace-pre-wrap")

    def render_thinking() -> None:
        with ui.row().classes("w-full justify-start"):
            with ui.element("div").classes("message-assistant shadow-sm p-4"):
                with ui.row().classes("items-center gap-2"):
                    with ui.row().classes("gap-1"):
                        for _ in range(3):
                            ui.element("div").classes("typing-dot")
                    ui.label("Bot is thinking...").classes("text-gray-500")

    def refresh() -> None:
        messages_container.clear()
        with messages_container:
            # Empty-content turns are kept in history but not shown
            for turn in client.messages:
                if turn.content:
                    render_message(turn)
            if client.awaiting_reply:
                render_thinking()
        if client.awaiting_reply:
            input_field.disable()
            send_btn.disable()
        else:
            input_field.enable()
            send_btn.enable()
        scroll_area.scroll_to(percent=1.0)

    client = ChatClient(greeting=CHAT_GREETING, on_change=refresh)

    async def send_message() -> None:
        text = input_field.value or ""
        if not text.strip() or client.awaiting_reply:
            return
        input_field.value = ""
        await client.send(text)

    # === UI Layout ===
    with ui.row().classes("w-full header h-[60px] items-center justify-center shadow-md"):
        ui.label(APP_TITLE).classes("text-xl font-bold text-white")
        ui.button(icon="add", on_click=client.reset).props("flat round color=white")

    with ui.column().classes("w-full max-w-[800px] mx-auto").style(
        "height: calc(100vh - 80px)"
    ):
        with ui.scroll_area().classes("flex-grow w-full") as scroll_area:
            messages_container = ui.column().classes("w-full gap-4 px-4 py-6")

        with ui.row().classes("w-full bg-white rounded-xl shadow-md p-4 gap-3 items-end"):
            input_field = (
                ui.textarea(placeholder="Type your message...")
                .props("autogrow outlined dense rows=1")
                .classes("flex-grow")
                .on("keydown.enter.exact.prevent", send_message)
            )
            send_btn = ui.button("Send", on_click=send_message).props("unelevated color=primary")

    refresh()

