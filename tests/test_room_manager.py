import pytest

from roomchat.server.chat_room import MESSAGE_HISTORY_LIMIT, ChatRoomMetadata
from roomchat.server.room_manager import (
    DuplicateRoomError,
    RoomManagerBuilder,
    RoomNotFoundError,
)
from roomchat.server.session_handle import SessionAndUserId

GENERAL = ChatRoomMetadata("general", "talk about anything")
RANDOM = ChatRoomMetadata("random", "off topic")


def make_manager():
    return RoomManagerBuilder().create_room(GENERAL).create_room(RANDOM).build()


def test_metadata_keeps_creation_order():
    manager = RoomManagerBuilder().create_room(RANDOM).create_room(GENERAL).build()
    assert manager.chat_room_metadata == [RANDOM, GENERAL]


def test_duplicate_room_name_is_rejected():
    builder = RoomManagerBuilder().create_room(GENERAL)
    with pytest.raises(DuplicateRoomError):
        builder.create_room(ChatRoomMetadata("general", "another description"))


def test_join_unknown_room_raises():
    manager = make_manager()
    with pytest.raises(RoomNotFoundError) as info:
        manager.join_room("nope", SessionAndUserId("s1", "alice"))
    assert str(info.value) == "'room \\'nope\\' not found'" or "room 'nope' not found" in str(
        info.value
    )
    assert info.value.room == "nope"


def test_join_room_returns_users_present():
    manager = make_manager()
    manager.join_room("general", SessionAndUserId("s1", "alice"))
    _, handle, users = manager.join_room("general", SessionAndUserId("s2", "bob"))
    assert handle.room == "general"
    assert sorted(users) == ["alice", "bob"]


def test_rooms_are_independent():
    manager = make_manager()
    manager.join_room("general", SessionAndUserId("s1", "alice"))
    _, _, users = manager.join_room("random", SessionAndUserId("s2", "bob"))
    assert users == ["bob"]


def test_dropping_handle_removes_user():
    manager = make_manager()
    _, handle, _ = manager.join_room("general", SessionAndUserId("s1", "alice"))
    manager.drop_user_session_handle(handle)
    _, _, users = manager.join_room("general", SessionAndUserId("s2", "bob"))
    assert users == ["bob"]


def test_history_round_trip():
    manager = make_manager()
    _, handle, _ = manager.join_room("general", SessionAndUserId("s1", "alice"))
    manager.add_room_history(handle, "hello")
    manager.add_room_history(handle, "again")
    assert manager.get_room_history(handle) == [("alice", "hello"), ("alice", "again")]


def test_history_is_bounded():
    manager = make_manager()
    _, handle, _ = manager.join_room("general", SessionAndUserId("s1", "alice"))
    for n in range(MESSAGE_HISTORY_LIMIT * 2):
        manager.add_room_history(handle, str(n))
    history = manager.get_room_history(handle)
    assert len(history) == MESSAGE_HISTORY_LIMIT
    assert history[-1] == ("alice", str(MESSAGE_HISTORY_LIMIT * 2 - 1))


def test_handle_of_foreign_room_is_rejected():
    other = RoomManagerBuilder().create_room(ChatRoomMetadata("elsewhere", "x")).build()
    _, handle, _ = other.join_room("elsewhere", SessionAndUserId("s1", "alice"))
    manager = make_manager()
    with pytest.raises(RoomNotFoundError):
        manager.add_room_history(handle, "hello")
    with pytest.raises(RoomNotFoundError):
        manager.get_room_history(handle)
    with pytest.raises(RoomNotFoundError):
        manager.drop_user_session_handle(handle)