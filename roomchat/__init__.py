"""Multi-room chat: wire format, in-process chat rooms and terminal client widgets."""

__version__ = "0.1.0"