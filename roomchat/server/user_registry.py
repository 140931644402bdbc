"""Tracks which unique users are in a room across their sessions."""

from __future__ import annotations

from .session_handle import UserSessionHandle


class UserRegistry:
    """Maps each user in a room to the set of their sessions present there."""

    def __init__(self) -> None:
        self._sessions_by_user: dict[str, set[str]] = {}

    def insert(self, handle: UserSessionHandle) -> bool:
        """Add the handle's session; return True if its user has just one session now."""
        sessions = self._sessions_by_user.setdefault(handle.user_id, set())
        sessions.add(handle.session_id)
        return len(sessions) == 1

    def remove(self, handle: UserSessionHandle) -> bool:
        """Remove the handle's session; return True if its user has left the room."""
        sessions = self._sessions_by_user.get(handle.user_id)
        if sessions is None:
            return False
        sessions.discard(handle.session_id)
        if sessions:
            return False
        del self._sessions_by_user[handle.user_id]
        return True

    def unique_user_ids(self) -> list[str]:
        """Ids of the users currently present, each once."""
        return list(self._sessions_by_user)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._sessions_by_user

    def __len__(self) -> int:
        return len(self._sessions_by_user)