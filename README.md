# roomchat

Building blocks for a multi-room chat system on asyncio:

- a JSON wire format for the commands a client sends and the events a server
  sends back,
- in-process chat rooms with participants, broadcasting and a short message
  history, plus a per-user session that merges events from all joined rooms,
- the state and widgets of a terminal chat client, drawn with `blessed`.

## Installing

```
pip install .
```

## The wire format

`roomchat.commands` holds the commands `JoinRoomCommand`, `LeaveRoomCommand`,
`SendMessageCommand`, `GetHistoryCommand` and `QuitCommand`, with
`encode_command` and `decode_command`. The kind of command is carried in the
`_ct` field:

```python
from roomchat.commands import JoinRoomCommand, decode_command, encode_command

encode_command(JoinRoomCommand(room="lobby"))
# '{"_ct":"join_room","r":"lobby"}'
decode_command('{"_ct":"quit"}')
# QuitCommand()
```

`roomchat.events` holds `LoginSuccessfulReplyEvent`,
`RoomParticipationBroadcastEvent`, `UserJoinedRoomReplyEvent`,
`UserMessageBroadcastEvent` and `HistoryResponseEvent`, with `encode_event` and
`decode_event`; their kind is carried in the `_et` field. Malformed input raises
`CommandDecodeError` or `EventDecodeError`, both subclasses of `ValueError`.

## Chat rooms

`roomchat.server.room_manager` builds a set of named rooms:

```python
import asyncio

from roomchat.commands import JoinRoomCommand, SendMessageCommand
from roomchat.server.chat_room import ChatRoomMetadata
from roomchat.server.chat_session import ChatSession
from roomchat.server.room_manager import RoomManagerBuilder


async def demo() -> None:
    manager = (
        RoomManagerBuilder()
        .create_room(ChatRoomMetadata(name="lobby", description="General talk"))
        .build()
    )
    async with ChatSession("session-1", "alice", manager) as alice:
        await alice.handle_user_command(JoinRoomCommand(room="lobby"))
        await alice.handle_user_command(SendMessageCommand(room="lobby", content="hello"))
        for _ in range(3):
            print(await alice.recv())
        await alice.leave_all_rooms()


asyncio.run(demo())
```

This prints the `UserJoinedRoomReplyEvent`, the `RoomParticipationBroadcastEvent`
announcing that `alice` joined, and the `UserMessageBroadcastEvent` for
`hello`.

- Creating two rooms with the same name raises `DuplicateRoomError`; naming an
  unknown room raises `RoomNotFoundError`.
- Joining a room the session is already in raises `AlreadyJoinedError`.
- A user who has several sessions in a room is announced once on the first
  join and once when the last session leaves.
- Each room keeps its last ten messages; `GetHistoryCommand` answers with a
  `HistoryResponseEvent` holding them, oldest first.

## Terminal client pieces

`roomchat.tui.state.State` holds what the client knows and applies server
events with `handle_server_event`. The UI emits the actions
`ConnectToServerRequest`, `SendMessage`, `SelectRoom` and `Exit` onto an
asyncio queue.

`roomchat.tui.ui_manager.UiManager` takes over the terminal:
`main_loop(state_queue, interrupts)` renders the first `State` from
`state_queue`, redraws on every later one, turns keystrokes into key events
and returns the `Interrupted` reason that arrives on `interrupts`. Actions
appear on `UiManager.action_queue`. `roomchat.tui.termination.create_termination`
gives a `Terminator` and an interrupt queue, and routes SIGINT to it when the
event loop allows.

While the state is not connected the connect page is shown, prefilled with
`localhost:8080`; once connected, the chat page shows the room list, the
messages of the active room, a message input, the room's users and a usage
panel.

| Where          | Key          | Does                                 |
|----------------|--------------|--------------------------------------|
| connect page   | Enter        | request a connection to the address  |
| both pages     | `q`, Ctrl+C  | request exit                         |
| chat page      | `←` `→`      | move between the room list and input |
| chat page      | Enter        | activate the highlighted widget      |
| room list      | `↑` `↓`      | move through the rooms               |
| room list      | Enter        | select the highlighted room          |
| message input  | Enter        | send the message to the active room  |
| active widget  | Esc          | leave the widget                     |

Rooms with unread messages are marked with `*` in the room list.

## What this package does not do

- It has no network transport: nothing reads or writes commands and events on
  sockets.
- It has no server that listens on a port, and no per-connection session loop.
- The terminal client has no store that consumes the UI's actions, connects to
  a server or feeds states to `UiManager.main_loop`; that wiring is left to the
  caller.
- It installs no commands.

## Running the tests

```
pip install ".[test]"
pytest
```