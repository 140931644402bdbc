"""One user's participation in any number of rooms, merged into a single event queue."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from ..commands import (
    GetHistoryCommand,
    JoinRoomCommand,
    LeaveRoomCommand,
    SendMessageCommand,
    UserCommand,
)
from ..events import Event, HistoryResponseEvent, UserJoinedRoomReplyEvent
from .room_manager import RoomManager
from .session_handle import ChannelClosedError, SessionAndUserId, Subscriber, UserSessionHandle

EVENT_QUEUE_CAPACITY = 100


class AlreadyJoinedError(Exception):
    """Raised when a session asks to join a room it is already in."""


@dataclass
class _Membership:
    handle: UserSessionHandle
    subscriber: Subscriber
    forwarder: asyncio.Task[None]


class ChatSession:
    """Handles room commands for one session and gathers events from its rooms.

    Use as an async context manager so that forwarding tasks are stopped
    when the session ends.
    """

    def __init__(self, session_id: str, user_id: str, room_manager: RoomManager) -> None:
        self.ids = SessionAndUserId(session_id=session_id, user_id=user_id)
        self._room_manager = room_manager
        self._joined: dict[str, _Membership] = {}
        self._events: asyncio.Queue[Event] = asyncio.Queue(maxsize=EVENT_QUEUE_CAPACITY)

    @property
    def joined_rooms(self) -> list[str]:
        return list(self._joined)

    async def __aenter__(self) -> ChatSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        for membership in self._joined.values():
            membership.forwarder.cancel()
            membership.subscriber.close()

    async def handle_user_command(self, command: UserCommand) -> None:
        """Apply a join, leave, send-message or history command; others are ignored."""
        match command:
            case JoinRoomCommand(room=room):
                await self._join(room)
            case SendMessageCommand(room=room, content=content):
                membership = self._joined.get(room)
                if membership is not None:
                    self._room_manager.add_room_history(membership.handle, content)
                    try:
                        membership.handle.send_message(content)
                    except ChannelClosedError:
                        pass
            case LeaveRoomCommand(room=room):
                membership = self._joined.pop(room, None)
                if membership is not None:
                    self._cleanup(membership)
            case GetHistoryCommand(room=room):
                membership = self._joined.get(room)
                if membership is not None:
                    history = self._room_manager.get_room_history(membership.handle)
                    await self._events.put(HistoryResponseEvent(room=room, history=history))
            case _:
                pass

    async def _join(self, room: str) -> None:
        if room in self._joined:
            raise AlreadyJoinedError(f"already joined room '{room}'")
        subscriber, handle, user_ids = self._room_manager.join_room(room, self.ids)
        await self._events.put(UserJoinedRoomReplyEvent(room=room, users=user_ids))
        forwarder = asyncio.create_task(self._forward(subscriber))
        self._joined[room] = _Membership(handle, subscriber, forwarder)

    async def _forward(self, subscriber: Subscriber) -> None:
        while True:
            try:
                event = await subscriber.recv()
            except ChannelClosedError:
                return
            await self._events.put(event)

    async def leave_all_rooms(self) -> None:
        """Leave every room the session is in, telling the other participants."""
        for room in list(self._joined):
            membership = self._joined.pop(room, None)
            if membership is not None:
                self._cleanup(membership)

    def _cleanup(self, membership: _Membership) -> None:
        self._room_manager.drop_user_session_handle(membership.handle)
        membership.forwarder.cancel()
        membership.subscriber.close()

    async def recv(self) -> Event:
        """Wait for the next event from any joined room, or a reply to this session."""
        return await self._events.get()