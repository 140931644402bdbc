"""The chat page: room list, messages, message input, room users and key usage."""

from __future__ import annotations

import asyncio
from enum import Enum

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
from .message_input_box import MessageInputBox
from .room_list import RoomList
from .state import Exit, Message, RoomData, State
from .usage import UsageInfo, UsageInfoLine, widget_usage_to_text

NO_ROOM_SELECTED_MESSAGE = "Join at least one room to start chatting!"


class Section(Enum):
    """The widgets of the chat page that can take the keyboard."""

    MESSAGE_INPUT = 0
    ROOM_LIST = 1

    def next(self) -> Section:
        members = list(Section)
        return members[(members.index(self) + 1) % len(members)]

    def previous(self) -> Section:
        members = list(Section)
        return members[(members.index(self) - 1) % len(members)]


DEFAULT_HOVERED_SECTION = Section.MESSAGE_INPUT


def calculate_list_offset(height: int, items_len: int) -> int:
    """How many items to skip so the newest fit in a bordered box of the given height."""
    return max(items_len - (height - 2), 0)


class ChatPage(Component):
    """Lays out the chat widgets and routes keys to the active section."""

    def __init__(self, state: State, action_queue: asyncio.Queue) -> None:
        self.action_queue = action_queue
        self.active_section: Section | None = None
        self.last_hovered_section = DEFAULT_HOVERED_SECTION
        self.room_list = RoomList(state, action_queue)
        self.message_input_box = MessageInputBox(state, action_queue)
        self._take_props(state)

    def _take_props(self, state: State) -> None:
        self._user_id = state.user_id
        self._active_room = state.active_room
        self._timer = state.timer
        self._room_data_map = state.room_data_map
        self._connection_status = state.server_connection_status

    @property
    def name(self) -> str:
        return "Chat Page"

    def update_state(self, state: State) -> None:
        self._take_props(state)
        self.room_list.update_state(state)
        self.message_input_box.update_state(state)

    def _component(self, section: Section) -> RoomList | MessageInputBox:
        if section is Section.ROOM_LIST:
            return self.room_list
        return self.message_input_box

    def _room_data(self, name: str) -> RoomData | None:
        return self._room_data_map.get(name)

    def _active_room_data(self) -> RoomData | None:
        if self._active_room is None:
            return None
        return self._room_data(self._active_room)

    def _disable_section(self, section: Section) -> None:
        self._component(section).deactivate()
        self.active_section = None

    def handle_key_event(self, key: KeyEvent) -> None:
        if key.kind is not KeyEventKind.PRESS:
            return

        section = self.active_section
        if section is None:
            match key.code:
                case KeyCode.ENTER:
                    self.active_section = self.last_hovered_section
                    self._component(self.last_hovered_section).activate()
                case KeyCode.LEFT:
                    self.last_hovered_section = self.last_hovered_section.previous()
                case KeyCode.RIGHT:
                    self.last_hovered_section = self.last_hovered_section.next()
                case KeyCode.CHAR if key.char == "q":
                    self.action_queue.put_nowait(Exit())
                case KeyCode.CHAR if key.char == "c" and KeyModifiers.CONTROL in key.modifiers:
                    self.action_queue.put_nowait(Exit())
                case _:
                    pass
            return

        self._component(section).handle_key_event(key)
        # Escape leaves any section; Enter on the room list leaves it after selecting.
        if section is Section.ROOM_LIST and key.code is KeyCode.ENTER:
            self._disable_section(section)
        elif key.code is KeyCode.ESC:
            self._disable_section(section)

    def border_color(self, section: Section) -> Color:
        """Yellow for the active section, blue for the hovered one, otherwise the default."""
        if self.active_section is not None and self.active_section is section:
            return Color.YELLOW
        if self.last_hovered_section is section:
            return Color.BLUE
        return Color.RESET

    def render(self, frame: Frame) -> None:
        left, middle, right = split_horizontal(
            frame.area, [("percentage", 20), ("percentage", 60), ("percentage", 20)]
        )

        container_room_list, container_user_info = split_vertical(
            left, [("min", 1), ("length", 6)]
        )
        self.room_list.render(
            frame, container_room_list, self.border_color(Section.ROOM_LIST)
        )
        frame.draw_block(container_user_info, "User Information")
        frame.draw_lines(
            container_user_info.inner(),
            [
                Line(f"User: @{self._user_id}"),
                Line(f"Chatting for: {self._timer} secs"),
                Line(f"Server: {self._connection_status}"),
            ],
            wrap=True,
        )

        container_highlight, container_messages, container_input = split_vertical(
            middle, [("length", 3), ("min", 1), ("length", 3)]
        )

        room_data = self._active_room_data()
        if room_data is not None:
            top_line = Line(
                "on ",
                Span(f"#{room_data.name}", Style(modifiers=Modifier.BOLD)),
                " for ",
                Span(f'"{room_data.description}"', Style(modifiers=Modifier.ITALIC)),
            )
        else:
            top_line = Line(NO_ROOM_SELECTED_MESSAGE)
        frame.draw_block(container_highlight, "Active Room Information")
        frame.draw_lines(container_highlight.inner(), [top_line])

        frame.draw_block(container_messages, "Messages")
        frame.draw_lines(container_messages.inner(), self._message_lines(container_messages.height))

        self.message_input_box.render(
            frame,
            container_input,
            self.border_color(Section.MESSAGE_INPUT),
            self.active_section is Section.MESSAGE_INPUT,
        )

        container_room_users, container_usage = split_vertical(
            right, [("min", 1), ("length", 10)]
        )
        user_lines: list[Line] = []
        users_count = 0
        if room_data is not None:
            users = sorted(room_data.users)
            users_count = len(users)
            offset = calculate_list_offset(container_room_users.height, users_count)
            user_lines = [Line(f"@{user_id}") for user_id in users[offset:]]
        frame.draw_block(container_room_users, f"Room Users ({users_count})")
        frame.draw_lines(container_room_users.inner(), user_lines)

        frame.draw_block(container_usage, "Usage")
        frame.draw_lines(
            container_usage.inner(), widget_usage_to_text(self.usage_info()), wrap=True
        )

    def _message_lines(self, height: int) -> list[Line]:
        if self._active_room is None:
            return [Line(NO_ROOM_SELECTED_MESSAGE)]
        room_data = self._room_data(self._active_room)
        if room_data is None:
            return []
        items = list(room_data.messages)
        offset = calculate_list_offset(height, len(items))
        lines = []
        for item in items[offset:]:
            if isinstance(item, Message):
                lines.append(Line(f"@{item.user_id}: {item.content}"))
            else:
                lines.append(Line(Span(item.text, Style(modifiers=Modifier.ITALIC))))
        return lines

    def usage_info(self) -> UsageInfo:
        if self.active_section is not None:
            return self._component(self.active_section).usage_info()
        hovered = self._component(self.last_hovered_section)
        return UsageInfo(
            description="Select a widget",
            lines=[
                UsageInfoLine(keys=["q"], description="to exit"),
                UsageInfoLine(keys=["←", "→"], description="to hover widgets"),
                UsageInfoLine(keys=["Enter"], description=f"to activate {hovered.name}"),
            ],
        )