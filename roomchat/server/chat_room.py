"""A chat room: its participants, broadcast channel and recent message history."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from ..events import Event, RoomParticipationBroadcastEvent, RoomParticipationStatus
from .session_handle import (
    BroadcastChannel,
    ChannelClosedError,
    SessionAndUserId,
    Subscriber,
    UserSessionHandle,
)
from .user_registry import UserRegistry

BROADCAST_CHANNEL_CAPACITY = 100
MESSAGE_HISTORY_LIMIT = 10


@dataclass(frozen=True)
class ChatRoomMetadata:
    """The name and description that identify a chat room."""

    name: str
    description: str


class ChatRoom:
    """Keeps track of a room's participants and hands out session handles on join."""

    def __init__(self, metadata: ChatRoomMetadata) -> None:
        self.metadata = metadata
        self._channel = BroadcastChannel(BROADCAST_CHANNEL_CAPACITY)
        self._registry = UserRegistry()
        self._history: deque[tuple[str, str]] = deque(maxlen=MESSAGE_HISTORY_LIMIT)

    @property
    def name(self) -> str:
        return self.metadata.name

    def unique_user_ids(self) -> list[str]:
        """Ids of the users in the room, each once."""
        return self._registry.unique_user_ids()

    def join(self, ids: SessionAndUserId) -> tuple[Subscriber, UserSessionHandle]:
        """Add a session to the room.

        Returns a subscriber for the room's events and a handle for sending
        to the room. Other participants are told only when the user is new,
        not when they open another session.
        """
        subscriber = self._channel.subscribe()
        handle = UserSessionHandle(self.metadata.name, self._channel, ids)
        if self._registry.insert(handle):
            self._broadcast(
                RoomParticipationBroadcastEvent(
                    room=self.metadata.name,
                    user_id=ids.user_id,
                    status=RoomParticipationStatus.JOINED,
                )
            )
        return subscriber, handle

    def leave(self, handle: UserSessionHandle) -> None:
        """Remove a session; announce the departure once the user's last session goes."""
        if self._registry.remove(handle):
            self._broadcast(
                RoomParticipationBroadcastEvent(
                    room=self.metadata.name,
                    user_id=handle.user_id,
                    status=RoomParticipationStatus.LEFT,
                )
            )

    def add_message_to_history(self, user_id: str, content: str) -> None:
        """Record a message, keeping only the most recent ones."""
        self._history.append((user_id, content))

    def message_history(self) -> list[tuple[str, str]]:
        """The recorded (user id, content) pairs, oldest first."""
        return list(self._history)

    def _broadcast(self, event: Event) -> None:
        try:
            self._channel.send(event)
        except ChannelClosedError:
            pass

    def __repr__(self) -> str:
        return f"ChatRoom(name={self.metadata.name!r}, users={len(self._registry)})"