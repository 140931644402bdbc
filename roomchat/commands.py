"""Commands a chat client sends to the server, with their JSON wire form."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

TAG_KEY = "_ct"


class CommandDecodeError(ValueError):
    """Raised when a payload does not hold a valid user command."""


@dataclass(frozen=True)
class JoinRoomCommand:
    """Join the named room."""

    room: str


@dataclass(frozen=True)
class LeaveRoomCommand:
    """Leave the named room."""

    room: str


@dataclass(frozen=True)
class SendMessageCommand:
    """Send a message to the named room."""

    room: str
    content: str


@dataclass(frozen=True)
class GetHistoryCommand:
    """Ask for the recent message history of the named room."""

    room: str


@dataclass(frozen=True)
class QuitCommand:
    """End the whole chat session."""


UserCommand = Union[
    JoinRoomCommand,
    LeaveRoomCommand,
    SendMessageCommand,
    GetHistoryCommand,
    QuitCommand,
]


def encode_command(command: UserCommand) -> str:
    """Serialize a command to its compact JSON form."""
    match command:
        case JoinRoomCommand(room=room):
            payload: dict[str, Any] = {TAG_KEY: "join_room", "r": room}
        case LeaveRoomCommand(room=room):
            payload = {TAG_KEY: "leave_room", "r": room}
        case SendMessageCommand(room=room, content=content):
            payload = {TAG_KEY: "send_message", "r": room, "c": content}
        case GetHistoryCommand(room=room):
            payload = {TAG_KEY: "get_history", "r": room}
        case QuitCommand():
            payload = {TAG_KEY: "quit"}
        case _:
            raise TypeError(f"not a user command: {command!r}")
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def _string(obj: dict[str, Any], key: str) -> str:
    if key not in obj:
        raise CommandDecodeError(f"missing field `{key}`")
    value = obj[key]
    if not isinstance(value, str):
        raise CommandDecodeError(f"field `{key}` must be a string")
    return value


def decode_command(data: str | bytes) -> UserCommand:
    """Parse a command from its JSON form; unknown fields are ignored."""
    try:
        obj = json.loads(data)
    except ValueError as exc:
        raise CommandDecodeError(f"invalid JSON: {exc}") from exc
    if not isinstance(obj, dict):
        raise CommandDecodeError("a command must be a JSON object")
    if TAG_KEY not in obj:
        raise CommandDecodeError(f"missing field `{TAG_KEY}`")

    match obj[TAG_KEY]:
        case "join_room":
            return JoinRoomCommand(room=_string(obj, "r"))
        case "leave_room":
            return LeaveRoomCommand(room=_string(obj, "r"))
        case "send_message":
            return SendMessageCommand(room=_string(obj, "r"), content=_string(obj, "c"))
        case "get_history":
            return GetHistoryCommand(room=_string(obj, "r"))
        case "quit":
            return QuitCommand()
        case tag:
            raise CommandDecodeError(f"unknown command tag {tag!r}")