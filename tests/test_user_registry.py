from roomchat.server.session_handle import BroadcastChannel, SessionAndUserId, UserSessionHandle
from roomchat.server.user_registry import UserRegistry


def handle(user, session):
    return UserSessionHandle("room", BroadcastChannel(), SessionAndUserId(session_id=session, user_id=user))


def test_first_session_is_new_user():
    registry = UserRegistry()
    assert registry.insert(handle("alice", "s1")) is True
    assert registry.unique_user_ids() == ["alice"]


def test_second_session_of_same_user_is_not_new():
    registry = UserRegistry()
    registry.insert(handle("alice", "s1"))
    assert registry.insert(handle("alice", "s2")) is False
    assert registry.unique_user_ids() == ["alice"]
    assert len(registry) == 1


def test_user_leaves_only_when_last_session_removed():
    registry = UserRegistry()
    registry.insert(handle("alice", "s1"))
    registry.insert(handle("alice", "s2"))
    assert registry.remove(handle("alice", "s1")) is False
    assert "alice" in registry
    assert registry.remove(handle("alice", "s2")) is True
    assert "alice" not in registry
    assert registry.unique_user_ids() == []


def test_remove_unknown_user_returns_false():
    registry = UserRegistry()
    assert registry.remove(handle("ghost", "s1")) is False
    assert len(registry) == 0


def test_unique_ids_cover_all_users():
    registry = UserRegistry()
    for user, session in [("a", "1"), ("b", "2"), ("a", "3"), ("c", "4")]:
        registry.insert(handle(user, session))
    assert sorted(registry.unique_user_ids()) == ["a", "b", "c"]


def test_reinserting_same_session_counts_as_new():
    registry = UserRegistry()
    registry.insert(handle("alice", "s1"))
    assert registry.insert(handle("alice", "s1")) is True
    assert registry.remove(handle("alice", "s1")) is True