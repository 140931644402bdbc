"""Terminal-independent drawing primitives: keys, styles, text, layout and a cell frame.

Layout constraints are tuples: ("length", n), ("min", n), ("percentage", p)
and ("ratio", numerator, denominator).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum, Flag, auto
from typing import Any, Union


class KeyCode(Enum):
    CHAR = auto()
    ENTER = auto()
    BACKSPACE = auto()
    LEFT = auto()
    RIGHT = auto()
    UP = auto()
    DOWN = auto()
    ESC = auto()
    TAB = auto()
    OTHER = auto()


class KeyEventKind(Enum):
    PRESS = auto()
    RELEASE = auto()
    REPEAT = auto()


class KeyModifiers(Flag):
    NONE = 0
    SHIFT = auto()
    CONTROL = auto()
    ALT = auto()


@dataclass(frozen=True)
class KeyEvent:
    """A key press; char is set when code is CHAR."""

    code: KeyCode
    char: str | None = None
    kind: KeyEventKind = KeyEventKind.PRESS
    modifiers: KeyModifiers = KeyModifiers.NONE


class Color(Enum):
    RESET = auto()
    YELLOW = auto()
    BLUE = auto()
    RED = auto()
    HIGHLIGHT = auto()


class Modifier(Flag):
    NONE = 0
    BOLD = auto()
    ITALIC = auto()
    SLOW_BLINK = auto()


@dataclass(frozen=True)
class Style:
    fg: Color | None = None
    bg: Color | None = None
    modifiers: Modifier = Modifier.NONE

    def add_modifier(self, modifier: Modifier) -> Style:
        return replace(self, modifiers=self.modifiers | modifier)

    def patch(self, other: Style) -> Style:
        """Overlay another style: its colours win where set, modifiers combine."""
        return Style(
            fg=other.fg if other.fg is not None else self.fg,
            bg=other.bg if other.bg is not None else self.bg,
            modifiers=self.modifiers | other.modifiers,
        )


@dataclass(frozen=True)
class Span:
    text: str
    style: Style = field(default_factory=Style)


class Line:
    """A row of styled spans; plain strings become unstyled spans."""

    def __init__(self, *parts: Union[str, Span], style: Style | None = None) -> None:
        self.spans = tuple(Span(p) if isinstance(p, str) else p for p in parts)
        self.style = style or Style()

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)

    def cells(self) -> list[tuple[str, Style]]:
        return [
            (char, self.style.patch(span.style)) for span in self.spans for char in span.text
        ]

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Line) and self.spans == other.spans and self.style == other.style
        )

    def __repr__(self) -> str:
        return f"Line({self.text!r})"


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    def inner(self) -> Rect:
        """The area inside a one-cell border."""
        return Rect(self.x + 1, self.y + 1, max(self.width - 2, 0), max(self.height - 2, 0))


def _split_sizes(total: int, constraints: list[tuple[Any, ...]]) -> list[int]:
    sizes: list[int | None] = []
    for constraint in constraints:
        kind = constraint[0]
        if kind == "length":
            sizes.append(constraint[1])
        elif kind == "percentage":
            sizes.append(total * constraint[1] // 100)
        elif kind == "ratio":
            sizes.append(total * constraint[1] // constraint[2])
        elif kind == "min":
            sizes.append(None)
        else:
            raise ValueError(f"unknown constraint {constraint!r}")
    fixed = sum(s for s in sizes if s is not None)
    flexible = [i for i, s in enumerate(sizes) if s is None]
    remaining = max(total - fixed, 0)
    for position, i in enumerate(flexible):
        share = remaining // len(flexible)
        if position == len(flexible) - 1:
            share = remaining - share * (len(flexible) - 1)
        sizes[i] = max(constraints[i][1], share)
    result = []
    used = 0
    for size in sizes:
        clipped = max(min(size or 0, total - used), 0)
        result.append(clipped)
        used += clipped
    return result


def split_horizontal(area: Rect, constraints: list[tuple[Any, ...]]) -> list[Rect]:
    """Split an area into side-by-side columns."""
    rects, x = [], area.x
    for width in _split_sizes(area.width, constraints):
        rects.append(Rect(x, area.y, width, area.height))
        x += width
    return rects


def split_vertical(area: Rect, constraints: list[tuple[Any, ...]]) -> list[Rect]:
    """Split an area into stacked rows."""
    rects, y = [], area.y
    for height in _split_sizes(area.height, constraints):
        rects.append(Rect(area.x, y, area.width, height))
        y += height
    return rects


class Frame:
    """A grid of styled cells that widgets draw into."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._cells = [[(" ", Style()) for _ in range(width)] for _ in range(height)]
        self.cursor: tuple[int, int] | None = None

    @property
    def area(self) -> Rect:
        return Rect(0, 0, self.width, self.height)

    def _put(self, x: int, y: int, char: str, style: Style) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self._cells[y][x] = (char, style)

    def style_at(self, x: int, y: int) -> Style:
        return self._cells[y][x][1]

    def draw_block(self, area: Rect, title: str = "", border_style: Style | None = None) -> None:
        """Draw a bordered box with an optional title on its top edge."""
        if area.width < 2 or area.height < 2:
            return
        style = border_style or Style()
        right, bottom = area.x + area.width - 1, area.y + area.height - 1
        for x in range(area.x + 1, right):
            self._put(x, area.y, "─", style)
            self._put(x, bottom, "─", style)
        for y in range(area.y + 1, bottom):
            self._put(area.x, y, "│", style)
            self._put(right, y, "│", style)
        self._put(area.x, area.y, "┌", style)
        self._put(right, area.y, "┐", style)
        self._put(area.x, bottom, "└", style)
        self._put(right, bottom, "┘", style)
        for offset, char in enumerate(title[: area.width - 2]):
            self._put(area.x + 1 + offset, area.y, char, style)

    def draw_lines(
        self, area: Rect, lines: list[Union[Line, str]], wrap: bool = False
    ) -> None:
        """Write lines top-down into the area, wrapping or clipping long ones."""
        if area.width <= 0:
            return
        rows: list[list[tuple[str, Style]]] = []
        for line in lines:
            cells = (Line(line) if isinstance(line, str) else line).cells()
            if wrap and cells:
                rows.extend(cells[i : i + area.width] for i in range(0, len(cells), area.width))
            else:
                rows.append(cells[: area.width])
        for dy, row in enumerate(rows[: area.height]):
            for dx, (char, style) in enumerate(row):
                self._put(area.x + dx, area.y + dy, char, style)

    def set_cursor_position(self, x: int, y: int) -> None:
        self.cursor = (x, y)

    def rows(self) -> list[str]:
        """The frame's text, one string per row."""
        return ["".join(char for char, _ in row) for row in self._cells]


class Component(ABC):
    """A UI element that follows the state and reacts to keys."""

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def update_state(self, state: Any) -> None: ...

    @abstractmethod
    def handle_key_event(self, key: KeyEvent) -> None: ...