"""A single-line text input with a movable cursor."""

from __future__ import annotations

import asyncio
from typing import Any

from .canvas import Color, Component, Frame, KeyCode, KeyEvent, KeyEventKind, Line, Rect, Span, Style


class InputBox(Component):
    """Editable text with a cursor measured in characters."""

    def __init__(self, state: Any = None, action_queue: asyncio.Queue | None = None) -> None:
        self._text = ""
        self._cursor = 0

    @property
    def name(self) -> str:
        return "Input Box"

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor_position(self) -> int:
        return self._cursor

    def set_text(self, text: str) -> None:
        """Replace the text and put the cursor at its end."""
        self._text = text
        self._cursor = len(text)

    def reset(self) -> None:
        self._cursor = 0
        self._text = ""

    def is_empty(self) -> bool:
        return not self._text

    def update_state(self, state: Any) -> None:
        """The input box keeps its own text; state changes do not touch it."""

    def _clamp(self, position: int) -> int:
        return min(max(position, 0), len(self._text))

    def _move_left(self) -> None:
        self._cursor = self._clamp(self._cursor - 1)

    def _move_right(self) -> None:
        self._cursor = self._clamp(self._cursor + 1)

    def _enter_char(self, char: str) -> None:
        self._text = self._text[: self._cursor] + char + self._text[self._cursor :]
        self._move_right()

    def _delete_char(self) -> None:
        if self._cursor == 0:
            return
        self._text = self._text[: self._cursor - 1] + self._text[self._cursor :]
        self._move_left()

    def handle_key_event(self, key: KeyEvent) -> None:
        if key.kind is not KeyEventKind.PRESS:
            return
        match key.code:
            case KeyCode.CHAR if key.char:
                self._enter_char(key.char)
            case KeyCode.BACKSPACE:
                self._delete_char()
            case KeyCode.LEFT:
                self._move_left()
            case KeyCode.RIGHT:
                self._move_right()
            case _:
                pass

    def render(
        self,
        frame: Frame,
        title: str,
        area: Rect,
        border_color: Color,
        show_cursor: bool,
    ) -> None:
        """Draw the bordered box and, when asked, place the cursor on the input line."""
        frame.draw_block(area, title, Style(fg=border_color))
        frame.draw_lines(area.inner(), [Line(Span(self._text, Style(fg=Color.YELLOW)))])
        if show_cursor:
            frame.set_cursor_position(area.x + self._cursor + 1, area.y + 1)