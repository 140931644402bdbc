"""The chat page's list of rooms, used to pick the room to talk in."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from .canvas import Color, Component, Frame, KeyCode, KeyEvent, KeyEventKind, Line, Modifier, Rect, Style
from .state import SelectRoom, State
from .usage import UsageInfo, UsageInfoLine

HIGHLIGHT_SYMBOL = ">"
HIGHLIGHT_STYLE = Style(bg=Color.HIGHLIGHT, modifiers=Modifier.BOLD)


@dataclass(frozen=True)
class RoomState:
    """How one room appears in the list."""

    name: str
    description: str
    has_joined: bool
    has_unread: bool


def _rooms_from(state: State) -> list[RoomState]:
    rooms = [
        RoomState(
            name=name,
            description=room_data.description,
            has_joined=room_data.has_joined,
            has_unread=room_data.has_unread,
        )
        for name, room_data in state.room_data_map.items()
    ]
    rooms.sort(key=lambda room: room.name)
    return rooms


class RoomList(Component):
    """Rooms sorted by name with an optional selection and scroll offset."""

    def __init__(self, state: State, action_queue: asyncio.Queue) -> None:
        self._action_queue = action_queue
        self._rooms = _rooms_from(state)
        self._active_room = state.active_room
        self.selected: int | None = None
        self.offset = 0

    @property
    def name(self) -> str:
        return "Room List"

    @property
    def rooms(self) -> list[RoomState]:
        return list(self._rooms)

    def update_state(self, state: State) -> None:
        self._rooms = _rooms_from(state)
        self._active_room = state.active_room

    def _next(self) -> None:
        if self.selected is None or self.selected >= len(self._rooms) - 1:
            self.selected = 0
        else:
            self.selected += 1

    def _previous(self) -> None:
        if self.selected is None:
            self.selected = 0
        elif self.selected == 0:
            self.selected = max(len(self._rooms) - 1, 0)
        else:
            self.selected -= 1

    def _room_index(self, name: str) -> int | None:
        return next((i for i, room in enumerate(self._rooms) if room.name == name), None)

    def handle_key_event(self, key: KeyEvent) -> None:
        if key.kind is not KeyEventKind.PRESS:
            return
        match key.code:
            case KeyCode.UP:
                self._previous()
            case KeyCode.DOWN:
                self._next()
            case KeyCode.ENTER if self.selected is not None:
                room = self._rooms[self.selected]
                self._action_queue.put_nowait(SelectRoom(room=room.name))
            case _:
                pass

    def activate(self) -> None:
        """Select the active room, or the first room when none is active."""
        index = None
        if self._active_room is not None:
            index = self._room_index(self._active_room)
        self.offset = 0
        self.selected = index if index is not None else 0

    def deactivate(self) -> None:
        self.offset = 0
        self.selected = None

    def _visible_offset(self, height: int) -> int:
        offset = self.offset
        if self.selected is not None and height > 0:
            if self.selected < offset:
                offset = self.selected
            elif self.selected >= offset + height:
                offset = self.selected - height + 1
        return offset

    def _item_style(self, room: RoomState) -> Style:
        if self.selected is None and self._active_room == room.name:
            modifiers = Modifier.BOLD
        elif room.has_unread:
            modifiers = Modifier.SLOW_BLINK | Modifier.ITALIC
        else:
            modifiers = Modifier.NONE
        return Style(bg=Color.RESET, modifiers=modifiers)

    def render(self, frame: Frame, area: Rect, border_color: Color) -> None:
        """Draw the list; the scroll offset used here does not change the list's own."""
        frame.draw_block(area, "Rooms", Style(fg=border_color))
        inner = area.inner()
        offset = self._visible_offset(inner.height)
        lines = []
        for index, room in enumerate(self._rooms[offset : offset + inner.height], start=offset):
            tag = f"#{room.name}{'*' if room.has_unread else ''}"
            style = self._item_style(room)
            if self.selected is None:
                lines.append(Line(tag, style=style))
            elif index == self.selected:
                lines.append(Line(HIGHLIGHT_SYMBOL + tag, style=style.patch(HIGHLIGHT_STYLE)))
            else:
                lines.append(Line(" " * len(HIGHLIGHT_SYMBOL) + tag, style=style))
        frame.draw_lines(inner, lines)

    def usage_info(self) -> UsageInfo:
        return UsageInfo(
            description="Select the room to talk in",
            lines=[
                UsageInfoLine(keys=["Esc"], description="to cancel"),
                UsageInfoLine(keys=["↑", "↓"], description="to navigate"),
                UsageInfoLine(keys=["Enter"], description="to join room"),
            ],
        )