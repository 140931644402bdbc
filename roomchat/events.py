"""Events the server sends to a chat client, with their JSON wire form."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

TAG_KEY = "_et"


class EventDecodeError(ValueError):
    """Raised when a payload does not hold a valid event."""


@dataclass(frozen=True)
class RoomDetail:
    """Name and description of a room."""

    name: str
    description: str


@dataclass(frozen=True)
class LoginSuccessfulReplyEvent:
    """Sent once to a new session with its ids and the rooms on offer."""

    session_id: str
    user_id: str
    rooms: list[RoomDetail]


class RoomParticipationStatus(Enum):
    """Whether a user has joined or left a room."""

    JOINED = "joined"
    LEFT = "left"


@dataclass(frozen=True)
class RoomParticipationBroadcastEvent:
    """A user has joined or left a room."""

    room: str
    user_id: str
    status: RoomParticipationStatus


@dataclass(frozen=True)
class UserJoinedRoomReplyEvent:
    """Reply to a join with the users currently in the room."""

    room: str
    users: list[str]


@dataclass(frozen=True)
class UserMessageBroadcastEvent:
    """A user has sent a message to a room."""

    room: str
    user_id: str
    content: str


@dataclass(frozen=True)
class HistoryResponseEvent:
    """Reply to a history request: (user id, content) pairs, oldest first."""

    room: str
    history: list[tuple[str, str]]


Event = Union[
    LoginSuccessfulReplyEvent,
    RoomParticipationBroadcastEvent,
    UserJoinedRoomReplyEvent,
    UserMessageBroadcastEvent,
    HistoryResponseEvent,
]


def encode_event(event: Event) -> str:
    """Serialize an event to its compact JSON form."""
    match event:
        case LoginSuccessfulReplyEvent(session_id=session_id, user_id=user_id, rooms=rooms):
            payload: dict[str, Any] = {
                TAG_KEY: "login_successful",
                "s": session_id,
                "u": user_id,
                "rs": [{"n": room.name, "d": room.description} for room in rooms],
            }
        case RoomParticipationBroadcastEvent(room=room, user_id=user_id, status=status):
            payload = {TAG_KEY: "room_participation", "r": room, "u": user_id, "s": status.value}
        case UserJoinedRoomReplyEvent(room=room, users=users):
            payload = {TAG_KEY: "user_joined_room", "r": room, "us": list(users)}
        case UserMessageBroadcastEvent(room=room, user_id=user_id, content=content):
            payload = {TAG_KEY: "user_message", "r": room, "u": user_id, "c": content}
        case HistoryResponseEvent(room=room, history=history):
            payload = {
                TAG_KEY: "history_response",
                "r": room,
                "h": [[user_id, content] for user_id, content in history],
            }
        case _:
            raise TypeError(f"not an event: {event!r}")
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def _field(obj: dict[str, Any], key: str) -> Any:
    if key not in obj:
        raise EventDecodeError(f"missing field `{key}`")
    return obj[key]


def _string(obj: dict[str, Any], key: str) -> str:
    value = _field(obj, key)
    if not isinstance(value, str):
        raise EventDecodeError(f"field `{key}` must be a string")
    return value


def _array(obj: dict[str, Any], key: str) -> list[Any]:
    value = _field(obj, key)
    if not isinstance(value, list):
        raise EventDecodeError(f"field `{key}` must be an array")
    return value


def _room_detail(item: Any) -> RoomDetail:
    if not isinstance(item, dict):
        raise EventDecodeError("a room detail must be an object")
    return RoomDetail(name=_string(item, "n"), description=_string(item, "d"))


def _plain_string(item: Any) -> str:
    if not isinstance(item, str):
        raise EventDecodeError("expected a string")
    return item


def _history_entry(item: Any) -> tuple[str, str]:
    if (
        not isinstance(item, list)
        or len(item) != 2
        or not all(isinstance(part, str) for part in item)
    ):
        raise EventDecodeError("a history entry must be a pair of strings")
    return item[0], item[1]


def _status(value: str) -> RoomParticipationStatus:
    try:
        return RoomParticipationStatus(value)
    except ValueError as exc:
        raise EventDecodeError(f"unknown participation status {value!r}") from exc


def decode_event(data: str | bytes) -> Event:
    """Parse an event from its JSON form; unknown fields are ignored."""
    try:
        obj = json.loads(data)
    except ValueError as exc:
        raise EventDecodeError(f"invalid JSON: {exc}") from exc
    if not isinstance(obj, dict):
        raise EventDecodeError("an event must be a JSON object")
    if TAG_KEY not in obj:
        raise EventDecodeError(f"missing field `{TAG_KEY}`")

    match obj[TAG_KEY]:
        case "login_successful":
            return LoginSuccessfulReplyEvent(
                session_id=_string(obj, "s"),
                user_id=_string(obj, "u"),
                rooms=[_room_detail(item) for item in _array(obj, "rs")],
            )
        case "room_participation":
            return RoomParticipationBroadcastEvent(
                room=_string(obj, "r"),
                user_id=_string(obj, "u"),
                status=_status(_string(obj, "s")),
            )
        case "user_joined_room":
            return UserJoinedRoomReplyEvent(
                room=_string(obj, "r"),
                users=[_plain_string(item) for item in _array(obj, "us")],
            )
        case "user_message":
            return UserMessageBroadcastEvent(
                room=_string(obj, "r"),
                user_id=_string(obj, "u"),
                content=_string(obj, "c"),
            )
        case "history_response":
            return HistoryResponseEvent(
                room=_string(obj, "r"),
                history=[_history_entry(item) for item in _array(obj, "h")],
            )
        case tag:
            raise EventDecodeError(f"unknown event tag {tag!r}")