"""Chooses which page is shown and routes keys and drawing to it."""

from __future__ import annotations

import asyncio
from enum import Enum

from .canvas import Component, Frame, KeyEvent
from .chat_page import ChatPage
from .connect_page import ConnectPage
from .state import ConnectionPhase, State


class ActivePage(Enum):
    CHAT_PAGE = "chat_page"
    CONNECT_PAGE = "connect_page"


def _active_page_for(state: State) -> ActivePage:
    if state.server_connection_status.phase is ConnectionPhase.CONNECTED:
        return ActivePage.CHAT_PAGE
    return ActivePage.CONNECT_PAGE


class AppRouter(Component):
    """Shows the chat page while connected and the connect page otherwise."""

    def __init__(self, state: State, action_queue: asyncio.Queue) -> None:
        self.chat_page = ChatPage(state, action_queue)
        self.connect_page = ConnectPage(state, action_queue)
        self.active_page = _active_page_for(state)

    @property
    def _active(self) -> ChatPage | ConnectPage:
        if self.active_page is ActivePage.CHAT_PAGE:
            return self.chat_page
        return self.connect_page

    @property
    def name(self) -> str:
        return self._active.name

    def update_state(self, state: State) -> None:
        self.active_page = _active_page_for(state)
        self.chat_page.update_state(state)
        self.connect_page.update_state(state)

    def handle_key_event(self, key: KeyEvent) -> None:
        self._active.handle_key_event(key)

    def render(self, frame: Frame) -> None:
        self._active.render(frame)