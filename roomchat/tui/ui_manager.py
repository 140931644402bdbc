"""Drives the terminal: reads keys, follows state updates and redraws the screen."""

from __future__ import annotations

import asyncio
import itertools
from typing import Any

import blessed

from .canvas import Color, Frame, KeyCode, KeyEvent, KeyModifiers, Modifier, Style
from .router import AppRouter
from .state import State
from .termination import Interrupted

KEY_POLL_SECONDS = 0.05

_NAMED_KEYS = {
    "KEY_ENTER": KeyCode.ENTER,
    "KEY_BACKSPACE": KeyCode.BACKSPACE,
    "KEY_LEFT": KeyCode.LEFT,
    "KEY_RIGHT": KeyCode.RIGHT,
    "KEY_UP": KeyCode.UP,
    "KEY_DOWN": KeyCode.DOWN,
    "KEY_ESCAPE": KeyCode.ESC,
    "KEY_TAB": KeyCode.TAB,
}

_RAW_KEYS = {
    "\r": KeyCode.ENTER,
    "\n": KeyCode.ENTER,
    "\x7f": KeyCode.BACKSPACE,
    "\x08": KeyCode.BACKSPACE,
    "\x1b": KeyCode.ESC,
    "\t": KeyCode.TAB,
}


def translate_key(keystroke: Any) -> KeyEvent | None:
    """Turn a terminal keystroke into a key event; None when no key was read."""
    if not keystroke:
        return None
    name = getattr(keystroke, "name", None)
    if name in _NAMED_KEYS:
        return KeyEvent(_NAMED_KEYS[name])
    text = str(keystroke)
    if text in _RAW_KEYS:
        return KeyEvent(_RAW_KEYS[text])
    if len(text) == 1:
        code = ord(text)
        if 1 <= code <= 26:
            return KeyEvent(KeyCode.CHAR, chr(code + ord("a") - 1), modifiers=KeyModifiers.CONTROL)
        if text.isprintable():
            return KeyEvent(KeyCode.CHAR, text)
    return KeyEvent(KeyCode.OTHER)


def _color(term: blessed.Terminal, color: Color | None, background: bool) -> str:
    match color:
        case Color.YELLOW:
            return term.on_yellow if background else term.yellow
        case Color.BLUE:
            return term.on_blue if background else term.blue
        case Color.RED:
            return term.on_red if background else term.red
        case Color.HIGHLIGHT:
            return term.on_color_rgb(255, 223, 102) if background else term.color_rgb(255, 223, 102)
        case _:
            return ""


def _style_codes(term: blessed.Terminal, style: Style) -> str:
    codes = [term.normal, _color(term, style.fg, False), _color(term, style.bg, True)]
    if Modifier.BOLD in style.modifiers:
        codes.append(term.bold)
    if Modifier.ITALIC in style.modifiers:
        codes.append(term.italic)
    if Modifier.SLOW_BLINK in style.modifiers:
        codes.append(term.blink)
    return "".join(codes)


def _frame_to_text(term: blessed.Terminal, frame: Frame) -> str:
    parts = []
    for y, row in enumerate(frame.rows()):
        parts.append(term.move_xy(0, y))
        styles = (frame.style_at(x, y) for x in range(len(row)))
        for style, cells in itertools.groupby(zip(row, styles), key=lambda cell: cell[1]):
            parts.append(_style_codes(term, style))
            parts.append("".join(char for char, _ in cells))
    parts.append(term.normal)
    if frame.cursor is not None:
        parts.append(term.move_xy(*frame.cursor))
        parts.append(term.normal_cursor)
    else:
        parts.append(term.hide_cursor)
    return "".join(parts)


class UiManager:
    """Owns the terminal while the client runs; actions go out on action_queue."""

    def __init__(self, terminal: blessed.Terminal | None = None) -> None:
        self.action_queue: asyncio.Queue = asyncio.Queue()
        self._terminal = terminal
        self._last_output: str | None = None

    @property
    def terminal(self) -> blessed.Terminal:
        if self._terminal is None:
            self._terminal = blessed.Terminal()
        return self._terminal

    def _draw(self, router: AppRouter) -> None:
        term = self.terminal
        frame = Frame(term.width, term.height)
        router.render(frame)
        output = _frame_to_text(term, frame)
        if output != self._last_output:
            term.stream.write(output)
            term.stream.flush()
            self._last_output = output

    async def main_loop(
        self,
        state_queue: asyncio.Queue[State],
        interrupts: asyncio.Queue[Interrupted],
    ) -> Interrupted:
        """Render until an interrupt arrives and return its reason."""
        router = AppRouter(await state_queue.get(), self.action_queue)
        term = self.terminal
        state_task = asyncio.create_task(state_queue.get())
        interrupt_task = asyncio.create_task(interrupts.get())
        try:
            with term.fullscreen(), term.raw(), term.hidden_cursor():
                while True:
                    self._draw(router)
                    done, _ = await asyncio.wait(
                        {state_task, interrupt_task},
                        timeout=KEY_POLL_SECONDS,
                        return_when=asyncio.FIRST_COMPLETED,
                    )
                    if interrupt_task in done:
                        return interrupt_task.result()
                    if state_task in done:
                        router.update_state(state_task.result())
                        state_task = asyncio.create_task(state_queue.get())
                    while keystroke := term.inkey(timeout=0):
                        key = translate_key(keystroke)
                        if key is not None:
                            router.handle_key_event(key)
        finally:
            for task in (state_task, interrupt_task):
                task.cancel()
            self._last_output = None