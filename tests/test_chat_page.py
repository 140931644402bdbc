import asyncio

import pytest

from roomchat.tui.canvas import Color, Frame, KeyCode, KeyEvent, KeyEventKind, KeyModifiers
from roomchat.tui.chat_page import (
    NO_ROOM_SELECTED_MESSAGE,
    ChatPage,
    Section,
    calculate_list_offset,
)
from roomchat.tui.state import (
    Exit,
    Message,
    RoomData,
    SelectRoom,
    SendMessage,
    ServerConnectionStatus,
    State,
)


def key(code, char=None, kind=KeyEventKind.PRESS, modifiers=KeyModifiers.NONE):
    return KeyEvent(code=code, char=char, kind=kind, modifiers=modifiers)


def make_state(active_room=None, messages=()):
    general = RoomData(name="general", description="General chat", users={"alice", "bob"})
    general.messages.extend(messages)
    random_room = RoomData(name="random", description="Anything goes")
    return State(
        server_connection_status=ServerConnectionStatus.connected("localhost:8080"),
        active_room=active_room,
        user_id="alice",
        room_data_map={"general": general, "random": random_room},
    )


def drain(queue):
    items = []
    while not queue.empty():
        items.append(queue.get_nowait())
    return items


@pytest.fixture
def queue():
    return asyncio.Queue()


def test_list_offset_zero_when_items_fit():
    assert calculate_list_offset(10, 5) == 0
    assert calculate_list_offset(10, 8) == 0


def test_list_offset_leaves_exactly_visible_items():
    height, items = 10, 25
    offset = calculate_list_offset(height, items)
    assert items - offset == height - 2


def test_hover_cycles_through_sections(queue):
    page = ChatPage(make_state(), queue)
    assert page.last_hovered_section is Section.MESSAGE_INPUT
    page.handle_key_event(key(KeyCode.RIGHT))
    assert page.last_hovered_section is Section.ROOM_LIST
    page.handle_key_event(key(KeyCode.RIGHT))
    assert page.last_hovered_section is Section.MESSAGE_INPUT
    page.handle_key_event(key(KeyCode.LEFT))
    assert page.last_hovered_section is Section.ROOM_LIST


def test_border_colors_follow_hover_and_activation(queue):
    page = ChatPage(make_state(), queue)
    assert page.border_color(Section.MESSAGE_INPUT) is Color.BLUE
    assert page.border_color(Section.ROOM_LIST) is Color.RESET
    page.handle_key_event(key(KeyCode.RIGHT))
    page.handle_key_event(key(KeyCode.ENTER))
    assert page.active_section is Section.ROOM_LIST
    assert page.border_color(Section.ROOM_LIST) is Color.YELLOW
    assert page.border_color(Section.MESSAGE_INPUT) is Color.RESET


def test_activating_room_list_selects_first_room(queue):
    page = ChatPage(make_state(), queue)
    page.handle_key_event(key(KeyCode.RIGHT))
    page.handle_key_event(key(KeyCode.ENTER))
    assert page.room_list.selected == 0


def test_enter_on_room_list_selects_room_and_leaves_section(queue):
    page = ChatPage(make_state(), queue)
    page.handle_key_event(key(KeyCode.RIGHT))
    page.handle_key_event(key(KeyCode.ENTER))
    page.handle_key_event(key(KeyCode.DOWN))
    page.handle_key_event(key(KeyCode.ENTER))
    assert drain(queue) == [SelectRoom(room="random")]
    assert page.active_section is None
    assert page.room_list.selected is None


def test_q_and_ctrl_c_exit(queue):
    page = ChatPage(make_state(), queue)
    page.handle_key_event(key(KeyCode.CHAR, "q"))
    page.handle_key_event(key(KeyCode.CHAR, "c", modifiers=KeyModifiers.CONTROL))
    assert drain(queue) == [Exit(), Exit()]


def test_plain_c_and_released_keys_do_nothing(queue):
    page = ChatPage(make_state(), queue)
    page.handle_key_event(key(KeyCode.CHAR, "c"))
    page.handle_key_event(key(KeyCode.CHAR, "q", kind=KeyEventKind.RELEASE))
    page.handle_key_event(key(KeyCode.ENTER, kind=KeyEventKind.RELEASE))
    assert drain(queue) == []
    assert page.active_section is None


def test_message_input_sends_message_to_active_room(queue):
    page = ChatPage(make_state(active_room="general"), queue)
    page.handle_key_event(key(KeyCode.ENTER))
    for char in "hi":
        page.handle_key_event(key(KeyCode.CHAR, char))
    page.handle_key_event(key(KeyCode.ENTER))
    assert drain(queue) == [SendMessage(content="hi")]
    assert page.active_section is Section.MESSAGE_INPUT


def test_escape_leaves_section_and_clears_input(queue):
    page = ChatPage(make_state(active_room="general"), queue)
    page.handle_key_event(key(KeyCode.ENTER))
    page.handle_key_event(key(KeyCode.CHAR, "x"))
    assert page.message_input_box.input_box.text == "x"
    page.handle_key_event(key(KeyCode.ESC))
    assert page.active_section is None
    assert page.message_input_box.input_box.is_empty()


def test_usage_info_without_active_section_names_hovered_widget(queue):
    page = ChatPage(make_state(), queue)
    info = page.usage_info()
    assert info.description == "Select a widget"
    assert info.lines[-1].description == "to activate Message Input"
    page.handle_key_event(key(KeyCode.RIGHT))
    assert page.usage_info().lines[-1].description == "to activate Room List"


def test_usage_info_delegates_to_active_section(queue):
    page = ChatPage(make_state(), queue)
    page.handle_key_event(key(KeyCode.RIGHT))
    page.handle_key_event(key(KeyCode.ENTER))
    assert page.usage_info() == page.room_list.usage_info()


def test_render_without_active_room(queue):
    page = ChatPage(make_state(), queue)
    frame = Frame(200, 40)
    page.render(frame)
    text = "\n".join(frame.rows())
    assert NO_ROOM_SELECTED_MESSAGE in text
    assert "User: @alice" in text
    assert "Room Users (0)" in text
    assert "#general" in text
    assert frame.cursor is None


def test_render_with_active_room(queue):
    state = make_state(active_room="general", messages=[Message("bob", "hi")])
    page = ChatPage(state, queue)
    frame = Frame(200, 40)
    page.render(frame)
    text = "\n".join(frame.rows())
    assert 'on #general for "General chat"' in text
    assert "@bob: hi" in text
    assert "Room Users (2)" in text
    assert "@alice" in text
    assert NO_ROOM_SELECTED_MESSAGE not in text


def test_render_shows_only_newest_messages(queue):
    messages = [Message("bob", f"msg-{i:02d}") for i in range(50)]
    page = ChatPage(make_state(active_room="general", messages=messages), queue)
    frame = Frame(200, 40)
    page.render(frame)
    text = "\n".join(frame.rows())
    assert "msg-49" in text
    assert "msg-00" not in text


def test_render_places_cursor_on_input_line_when_active(queue):
    page = ChatPage(make_state(active_room="general"), queue)
    page.handle_key_event(key(KeyCode.ENTER))
    frame = Frame(200, 40)
    page.render(frame)
    assert frame.cursor[1] == frame.height - 2


def test_update_state_reaches_children(queue):
    page = ChatPage(make_state(), queue)
    page.update_state(make_state(active_room="general"))
    page.handle_key_event(key(KeyCode.ENTER))
    page.handle_key_event(key(KeyCode.CHAR, "y"))
    page.handle_key_event(key(KeyCode.ENTER))
    assert drain(queue) == [SendMessage(content="y")]