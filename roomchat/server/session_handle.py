"""Broadcast channel and the per-session handle used to talk to a room."""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass
from typing import Any

from ..events import UserMessageBroadcastEvent

DEFAULT_CAPACITY = 100


class ChannelClosedError(Exception):
    """Raised when sending with no subscribers, or receiving on a closed subscriber."""


@dataclass(frozen=True)
class SessionAndUserId:
    """A session id together with the id of the user owning it."""

    session_id: str
    user_id: str


class BroadcastChannel:
    """Fan-out channel: every subscriber receives every event sent after it subscribed.

    Each subscriber buffers at most ``capacity`` events; when a slow subscriber
    falls behind, its oldest buffered events are dropped.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._subscribers: list[Subscriber] = []

    @property
    def receiver_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> Subscriber:
        subscriber = Subscriber(self)
        self._subscribers.append(subscriber)
        return subscriber

    def send(self, event: Any) -> int:
        """Deliver an event to all subscribers and return how many there were."""
        if not self._subscribers:
            raise ChannelClosedError("channel has no active subscribers")
        for subscriber in self._subscribers:
            subscriber._push(event)
        return len(self._subscribers)

    def _unsubscribe(self, subscriber: Subscriber) -> None:
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)


class Subscriber:
    """Receiving end of a BroadcastChannel."""

    def __init__(self, channel: BroadcastChannel) -> None:
        self._channel = channel
        self._buffer: deque[Any] = deque(maxlen=channel.capacity)
        self._ready = asyncio.Event()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _push(self, event: Any) -> None:
        self._buffer.append(event)
        self._ready.set()

    async def recv(self) -> Any:
        """Wait for and return the next event."""
        while True:
            if self._closed:
                raise ChannelClosedError("subscriber is closed")
            if self._buffer:
                return self._buffer.popleft()
            self._ready.clear()
            await self._ready.wait()

    def close(self) -> None:
        """Stop receiving; pending and future recv calls raise ChannelClosedError."""
        if self._closed:
            return
        self._closed = True
        self._buffer.clear()
        self._channel._unsubscribe(self)
        self._ready.set()


class UserSessionHandle:
    """Lets one user session send messages to one room's broadcast channel."""

    def __init__(self, room: str, channel: BroadcastChannel, ids: SessionAndUserId) -> None:
        self._room = room
        self._channel = channel
        self._ids = ids

    @property
    def room(self) -> str:
        return self._room

    @property
    def session_id(self) -> str:
        return self._ids.session_id

    @property
    def user_id(self) -> str:
        return self._ids.user_id

    @property
    def ids(self) -> SessionAndUserId:
        return self._ids

    def send_message(self, content: str) -> int:
        """Broadcast a message from this user to the room."""
        event = UserMessageBroadcastEvent(room=self._room, user_id=self.user_id, content=content)
        try:
            return self._channel.send(event)
        except ChannelClosedError as exc:
            raise ChannelClosedError("could not write to the broadcast channel") from exc

    def __repr__(self) -> str:
        return (
            f"UserSessionHandle(room={self._room!r}, session_id={self.session_id!r}, "
            f"user_id={self.user_id!r})"
        )