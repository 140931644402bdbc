import asyncio

import pytest

from roomchat.events import (
    RoomParticipationBroadcastEvent,
    RoomParticipationStatus,
    UserMessageBroadcastEvent,
)
from roomchat.server.chat_room import MESSAGE_HISTORY_LIMIT, ChatRoom, ChatRoomMetadata
from roomchat.server.session_handle import SessionAndUserId

TIMEOUT = 2.0


def make_room(name="general"):
    return ChatRoom(ChatRoomMetadata(name=name, description="talk about anything"))


def test_join_returns_handle_for_room_and_session():
    room = make_room()
    ids = SessionAndUserId(session_id="s1", user_id="alice")
    _, handle = room.join(ids)
    assert handle.room == "general"
    assert handle.session_id == "s1"
    assert handle.user_id == "alice"
    assert room.unique_user_ids() == ["alice"]


def test_second_session_of_same_user_counts_once():
    room = make_room()
    room.join(SessionAndUserId("s1", "alice"))
    room.join(SessionAndUserId("s2", "alice"))
    assert room.unique_user_ids() == ["alice"]


@pytest.mark.asyncio
async def test_join_broadcasts_participation_to_subscribers():
    room = make_room()
    watcher, _ = room.join(SessionAndUserId("s0", "bob"))
    own = await asyncio.wait_for(watcher.recv(), TIMEOUT)
    assert own == RoomParticipationBroadcastEvent("general", "bob", RoomParticipationStatus.JOINED)

    room.join(SessionAndUserId("s1", "alice"))
    event = await asyncio.wait_for(watcher.recv(), TIMEOUT)
    assert event == RoomParticipationBroadcastEvent(
        "general", "alice", RoomParticipationStatus.JOINED
    )


@pytest.mark.asyncio
async def test_leave_announces_only_after_last_session():
    room = make_room()
    watcher, _ = room.join(SessionAndUserId("s0", "bob"))
    await asyncio.wait_for(watcher.recv(), TIMEOUT)
    _, first = room.join(SessionAndUserId("s1", "alice"))
    _, second = room.join(SessionAndUserId("s2", "alice"))
    await asyncio.wait_for(watcher.recv(), TIMEOUT)

    room.leave(first)
    assert "alice" in room.unique_user_ids()
    room.leave(second)
    assert room.unique_user_ids() == ["bob"]
    event = await asyncio.wait_for(watcher.recv(), TIMEOUT)
    assert event == RoomParticipationBroadcastEvent("general", "alice", RoomParticipationStatus.LEFT)


@pytest.mark.asyncio
async def test_handle_sends_messages_to_room_subscribers():
    room = make_room()
    subscriber, handle = room.join(SessionAndUserId("s1", "alice"))
    await asyncio.wait_for(subscriber.recv(), TIMEOUT)
    handle.send_message("hi there")
    event = await asyncio.wait_for(subscriber.recv(), TIMEOUT)
    assert event == UserMessageBroadcastEvent("general", "alice", "hi there")


def test_history_keeps_insertion_order():
    room = make_room()
    room.add_message_to_history("alice", "first")
    room.add_message_to_history("bob", "second")
    assert room.message_history() == [("alice", "first"), ("bob", "second")]


def test_history_drops_oldest_beyond_limit():
    room = make_room()
    messages = [("alice", f"message {n}") for n in range(MESSAGE_HISTORY_LIMIT + 2)]
    for user_id, content in messages:
        room.add_message_to_history(user_id, content)
    assert room.message_history() == messages[2:]
    assert len(room.message_history()) == MESSAGE_HISTORY_LIMIT