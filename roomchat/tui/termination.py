"""Application-wide interrupt signalling for the terminal client."""

from __future__ import annotations

import asyncio
import signal
from enum import Enum


class Interrupted(Enum):
    """Why the application is stopping."""

    OS_SIG_INT = "os_sig_int"
    USER_INT = "user_int"


class Terminator:
    """Broadcasts an interrupt reason to every subscribed queue."""

    def __init__(self) -> None:
        self._queues: list[asyncio.Queue[Interrupted]] = []

    def subscribe(self) -> asyncio.Queue[Interrupted]:
        """A fresh queue that receives every later interrupt."""
        queue: asyncio.Queue[Interrupted] = asyncio.Queue()
        self._queues.append(queue)
        return queue

    def terminate(self, interrupted: Interrupted) -> None:
        """Deliver the reason to all subscribers; raises RuntimeError if there are none."""
        if not self._queues:
            raise RuntimeError("no subscribers to receive the interrupt")
        for queue in self._queues:
            queue.put_nowait(interrupted)


def create_termination() -> tuple[Terminator, asyncio.Queue[Interrupted]]:
    """Create a terminator and a subscribed queue; SIGINT is routed to it when possible."""
    terminator = Terminator()
    interrupts = terminator.subscribe()
    try:
        loop = asyncio.get_running_loop()
        loop.add_signal_handler(
            signal.SIGINT, terminator.terminate, Interrupted.OS_SIG_INT
        )
    except (RuntimeError, NotImplementedError, ValueError):
        pass
    return terminator, interrupts