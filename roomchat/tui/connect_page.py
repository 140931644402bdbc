"""The page that asks for the server address and connects to it."""

from __future__ import annotations

import asyncio

from .canvas import (
    Color,
    Component,
    Frame,
    KeyCode,
    KeyEvent,
    KeyEventKind,
    KeyModifiers,
    Line,
    Modifier,
    Span,
    Style,
    split_horizontal,
    split_vertical,
)
from .input_box import InputBox
from .state import ConnectionPhase, ConnectToServerRequest, Exit, State

DEFAULT_SERVER_ADDR = "localhost:8080"

_CENTERED = [("ratio", 1, 3), ("min", 1), ("ratio", 1, 3)]
_ERROR_STYLE = Style(fg=Color.RED, modifiers=Modifier.SLOW_BLINK | Modifier.ITALIC)


def _error_message(state: State) -> str | None:
    status = state.server_connection_status
    if status.phase is ConnectionPhase.ERRORED:
        return status.detail
    return None


class ConnectPage(Component):
    """Edits the server address and requests a connection on Enter."""

    def __init__(self, state: State, action_queue: asyncio.Queue) -> None:
        self.action_queue = action_queue
        self.input_box = InputBox(state, action_queue)
        self.input_box.set_text(DEFAULT_SERVER_ADDR)
        self.error_message = _error_message(state)

    @property
    def name(self) -> str:
        return "Connect Page"

    def update_state(self, state: State) -> None:
        self.error_message = _error_message(state)

    def _connect_to_server(self) -> None:
        if self.input_box.is_empty():
            return
        self.action_queue.put_nowait(ConnectToServerRequest(addr=self.input_box.text))

    def handle_key_event(self, key: KeyEvent) -> None:
        self.input_box.handle_key_event(key)

        if key.kind is not KeyEventKind.PRESS:
            return

        match key.code:
            case KeyCode.ENTER:
                self._connect_to_server()
            case KeyCode.CHAR if key.char == "q":
                self.action_queue.put_nowait(Exit())
            case KeyCode.CHAR if key.char == "c" and KeyModifiers.CONTROL in key.modifiers:
                self.action_queue.put_nowait(Exit())
            case _:
                pass

    def render(self, frame: Frame) -> None:
        _, vertical_centered, _ = split_vertical(frame.area, _CENTERED)
        _, both_centered, _ = split_horizontal(vertical_centered, _CENTERED)
        container_addr_input, container_help_text, container_error_message = split_vertical(
            both_centered, [("length", 3), ("length", 3), ("min", 1)]
        )

        self.input_box.render(
            frame, "Server Host and Port", container_addr_input, Color.YELLOW, True
        )

        frame.draw_lines(
            container_help_text,
            [
                Line(
                    "Press ",
                    Span("<Enter>", Style(modifiers=Modifier.BOLD)),
                    " to connect",
                )
            ],
        )

        text = f"Error: {self.error_message}" if self.error_message is not None else ""
        frame.draw_lines(
            container_error_message, [Line(Span(text.strip(), _ERROR_STYLE))], wrap=True
        )