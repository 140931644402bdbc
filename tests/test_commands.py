import pytest

from roomchat.commands import (
    CommandDecodeError,
    GetHistoryCommand,
    JoinRoomCommand,
    LeaveRoomCommand,
    QuitCommand,
    SendMessageCommand,
    decode_command,
    encode_command,
)


def assert_command_serialization(command, expected):
    serialized = encode_command(command)
    assert serialized == expected
    assert decode_command(serialized) == command


def test_join_command():
    assert_command_serialization(JoinRoomCommand(room="test"), '{"_ct":"join_room","r":"test"}')


def test_leave_command():
    assert_command_serialization(LeaveRoomCommand(room="test"), '{"_ct":"leave_room","r":"test"}')


def test_message_command():
    assert_command_serialization(
        SendMessageCommand(room="test", content="test"),
        '{"_ct":"send_message","r":"test","c":"test"}',
    )


def test_quit_command():
    assert_command_serialization(QuitCommand(), '{"_ct":"quit"}')


def test_get_history_command():
    assert_command_serialization(GetHistoryCommand(room="test"), '{"_ct":"get_history","r":"test"}')


def test_non_ascii_content_round_trips_unescaped():
    command = SendMessageCommand(room="café", content="héllo ✓")
    encoded = encode_command(command)
    assert "héllo ✓" in encoded
    assert decode_command(encoded.encode("utf-8")) == command


def test_unknown_fields_are_ignored():
    assert decode_command('{"_ct":"quit","extra":1}') == QuitCommand()
    assert decode_command('{"r":"lobby","_ct":"join_room","z":[]}') == JoinRoomCommand(room="lobby")


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        "[1, 2]",
        '{"r":"test"}',
        '{"_ct":"dance","r":"test"}',
        '{"_ct":"join_room"}',
        '{"_ct":"join_room","r":5}',
        '{"_ct":"send_message","r":"test"}',
        b"\xff\xfe",
    ],
)
def test_invalid_payloads_raise(payload):
    with pytest.raises(CommandDecodeError):
        decode_command(payload)


def test_encode_rejects_foreign_objects():
    with pytest.raises(TypeError):
        encode_command("join")