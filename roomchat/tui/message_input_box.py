"""The chat page's message input, which sends its text to the active room."""

from __future__ import annotations

import asyncio

from .canvas import Color, Component, Frame, KeyCode, KeyEvent, KeyEventKind, Rect
from .input_box import InputBox
from .state import SendMessage, State
from .usage import UsageInfo, UsageInfoLine


class MessageInputBox(Component):
    """Collects a message and submits it on Enter while a room is active."""

    def __init__(self, state: State, action_queue: asyncio.Queue) -> None:
        self._action_queue = action_queue
        self._active_room = state.active_room
        self.input_box = InputBox(state, action_queue)

    @property
    def name(self) -> str:
        return "Message Input"

    def update_state(self, state: State) -> None:
        self._active_room = state.active_room

    def _submit_message(self) -> None:
        if self.input_box.is_empty():
            return
        self._action_queue.put_nowait(SendMessage(content=self.input_box.text))
        self.input_box.reset()

    def handle_key_event(self, key: KeyEvent) -> None:
        if key.kind is not KeyEventKind.PRESS:
            return
        if self._active_room is not None:
            self.input_box.handle_key_event(key)
            if key.code is KeyCode.ENTER:
                self._submit_message()

    def activate(self) -> None:
        """Nothing to prepare when the input gains focus."""

    def deactivate(self) -> None:
        self.input_box.reset()

    def render(self, frame: Frame, area: Rect, border_color: Color, show_cursor: bool) -> None:
        self.input_box.render(frame, "Message Input", area, border_color, show_cursor)

    def usage_info(self) -> UsageInfo:
        if self._active_room is None:
            return UsageInfo(
                description="You can not send a message until you enter a room.",
                lines=[UsageInfoLine(keys=["Esc"], description="to cancel")],
            )
        return UsageInfo(
            description="Type your message to send a message to the active room",
            lines=[
                UsageInfoLine(keys=["Esc"], description="to cancel"),
                UsageInfoLine(keys=["Enter"], description="to send your message"),
            ],
        )