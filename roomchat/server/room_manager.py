"""Registry of the server's chat rooms and the operations sessions perform on them."""

from __future__ import annotations

from collections.abc import Iterable

from .chat_room import ChatRoom, ChatRoomMetadata
from .session_handle import SessionAndUserId, Subscriber, UserSessionHandle


class RoomNotFoundError(LookupError):
    """Raised when a room name does not belong to any known room."""

    def __init__(self, room: str) -> None:
        super().__init__(f"room '{room}' not found")
        self.room = room


class DuplicateRoomError(ValueError):
    """Raised when two rooms are given the same name."""


class RoomManagerBuilder:
    """Collects rooms, in order, before building a RoomManager."""

    def __init__(self) -> None:
        self._rooms: list[tuple[ChatRoomMetadata, ChatRoom]] = []

    def create_room(self, metadata: ChatRoomMetadata) -> RoomManagerBuilder:
        """Add a room; raises DuplicateRoomError if the name is already taken."""
        if any(existing.name == metadata.name for existing, _ in self._rooms):
            raise DuplicateRoomError("room with the same name already exists")
        self._rooms.append((metadata, ChatRoom(metadata)))
        return self

    def build(self) -> RoomManager:
        return RoomManager(self._rooms)


class RoomManager:
    """Looks rooms up by name on behalf of user sessions."""

    def __init__(self, rooms: Iterable[tuple[ChatRoomMetadata, ChatRoom]]) -> None:
        rooms = list(rooms)
        self._metadata = [metadata for metadata, _ in rooms]
        self._rooms = {metadata.name: room for metadata, room in rooms}

    @property
    def chat_room_metadata(self) -> list[ChatRoomMetadata]:
        """Metadata of every room, in the order the rooms were created."""
        return list(self._metadata)

    def _room(self, name: str) -> ChatRoom:
        try:
            return self._rooms[name]
        except KeyError:
            raise RoomNotFoundError(name) from None

    def join_room(
        self, room_name: str, ids: SessionAndUserId
    ) -> tuple[Subscriber, UserSessionHandle, list[str]]:
        """Join a room; returns its event subscriber, a session handle and the users present."""
        room = self._room(room_name)
        subscriber, handle = room.join(ids)
        return subscriber, handle, room.unique_user_ids()

    def drop_user_session_handle(self, handle: UserSessionHandle) -> None:
        """Take the handle's session out of its room."""
        self._room(handle.room).leave(handle)

    def add_room_history(self, handle: UserSessionHandle, content: str) -> None:
        """Record a message from the handle's user in the handle's room."""
        self._room(handle.room).add_message_to_history(handle.user_id, content)

    def get_room_history(self, handle: UserSessionHandle) -> list[tuple[str, str]]:
        """Recent (user id, content) pairs of the handle's room, oldest first."""
        return self._room(handle.room).message_history()