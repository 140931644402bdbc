"""Client application state, the actions the UI emits, and server event handling."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from ..events import (
    Event,
    HistoryResponseEvent,
    LoginSuccessfulReplyEvent,
    RoomParticipationBroadcastEvent,
    RoomParticipationStatus,
    UserJoinedRoomReplyEvent,
    UserMessageBroadcastEvent,
)

MAX_MESSAGES_TO_STORE_PER_ROOM = 100


@dataclass(frozen=True)
class ConnectToServerRequest:
    addr: str


@dataclass(frozen=True)
class SendMessage:
    content: str


@dataclass(frozen=True)
class SelectRoom:
    room: str


@dataclass(frozen=True)
class Exit:
    pass


Action = Union[ConnectToServerRequest, SendMessage, SelectRoom, Exit]


@dataclass(frozen=True)
class Message:
    user_id: str
    content: str


@dataclass(frozen=True)
class Notification:
    text: str


MessageBoxItem = Union[Message, Notification]


def _message_queue() -> deque[MessageBoxItem]:
    return deque(maxlen=MAX_MESSAGES_TO_STORE_PER_ROOM)


@dataclass
class RoomData:
    """What the client knows about one room."""

    name: str = ""
    description: str = ""
    users: set[str] = field(default_factory=set)
    messages: deque[MessageBoxItem] = field(default_factory=_message_queue)
    has_joined: bool = False
    has_unread: bool = False
    first_time: bool = True


class ConnectionPhase(Enum):
    UNINITIALIZED = "uninitialized"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERRORED = "errored"


@dataclass(frozen=True)
class ServerConnectionStatus:
    """Connection phase plus the address (connected) or error text (errored)."""

    phase: ConnectionPhase
    detail: str = ""

    @staticmethod
    def uninitialized() -> ServerConnectionStatus:
        return ServerConnectionStatus(ConnectionPhase.UNINITIALIZED)

    @staticmethod
    def connecting() -> ServerConnectionStatus:
        return ServerConnectionStatus(ConnectionPhase.CONNECTING)

    @staticmethod
    def connected(addr: str) -> ServerConnectionStatus:
        return ServerConnectionStatus(ConnectionPhase.CONNECTED, addr)

    @staticmethod
    def errored(err: str) -> ServerConnectionStatus:
        return ServerConnectionStatus(ConnectionPhase.ERRORED, err)

    def __str__(self) -> str:
        match self.phase:
            case ConnectionPhase.UNINITIALIZED:
                return "Uninitialized"
            case ConnectionPhase.CONNECTING:
                return "Connecting"
            case ConnectionPhase.CONNECTED:
                return f"Connected to {self.detail}"
            case _:
                return f"Errored: {self.detail}"


@dataclass
class State:
    """The whole client state rendered by the UI."""

    server_connection_status: ServerConnectionStatus = field(
        default_factory=ServerConnectionStatus.uninitialized
    )
    active_room: str | None = None
    user_id: str = ""
    room_data_map: dict[str, RoomData] = field(default_factory=dict)
    timer: int = 0

    def handle_server_event(self, event: Event) -> None:
        """Apply an event from the server; events for unknown rooms raise KeyError
        where a room is required."""
        match event:
            case LoginSuccessfulReplyEvent():
                self.user_id = event.user_id
                self.room_data_map = {
                    room.name: RoomData(name=room.name, description=room.description)
                    for room in event.rooms
                }
            case RoomParticipationBroadcastEvent():
                room_data = self.room_data_map.get(event.room)
                if room_data is None:
                    return
                is_self = event.user_id == self.user_id
                if event.status is RoomParticipationStatus.JOINED:
                    room_data.users.add(event.user_id)
                    if is_self:
                        room_data.has_joined = True
                    verb = "joined"
                else:
                    room_data.users.discard(event.user_id)
                    if is_self:
                        room_data.has_joined = False
                    verb = "left"
                room_data.messages.append(
                    Notification(f"{event.user_id} has {verb} the room")
                )
            case UserJoinedRoomReplyEvent():
                self.room_data_map[event.room].users = set(event.users)
            case UserMessageBroadcastEvent():
                room_data = self.room_data_map[event.room]
                room_data.messages.append(Message(event.user_id, event.content))
                if self.active_room is not None and self.active_room != event.room:
                    room_data.has_unread = True
            case HistoryResponseEvent():
                room_data = self.room_data_map.get(event.room)
                if room_data is not None:
                    room_data.messages.extend(
                        Message(user_id, content) for user_id, content in event.history
                    )
                    room_data.first_time = False

    def mark_connection_request_start(self) -> None:
        self.server_connection_status = ServerConnectionStatus.connecting()

    def process_connection_request_result(self, result: str | BaseException) -> None:
        """Record a connection outcome: an address on success, an exception on failure."""
        if isinstance(result, BaseException):
            self.server_connection_status = ServerConnectionStatus.errored(str(result))
        else:
            self.server_connection_status = ServerConnectionStatus.connected(result)

    def try_set_active_room(self, room: str) -> RoomData | None:
        """Make the room active and clear its unread mark; None if it is unknown."""
        room_data = self.room_data_map.get(room)
        if room_data is None:
            return None
        room_data.has_unread = False
        self.active_room = room
        return room_data

    def is_room_first_time(self, room: str) -> bool | None:
        room_data = self.room_data_map.get(room)
        return None if room_data is None else room_data.first_time

    def tick_timer(self) -> None:
        self.timer += 1