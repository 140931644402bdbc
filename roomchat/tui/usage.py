"""Key usage hints shown for the active widget."""

from __future__ import annotations

from dataclasses import dataclass, field

from .canvas import Line, Modifier, Span, Style


@dataclass(frozen=True)
class UsageInfoLine:
    keys: list[str]
    description: str


@dataclass(frozen=True)
class UsageInfo:
    description: str | None = None
    lines: list[UsageInfoLine] = field(default_factory=list)


def _key_span(key: str) -> Span:
    return Span(f"({key})", Style().add_modifier(Modifier.BOLD))


def widget_usage_to_text(usage: UsageInfo) -> list[Line]:
    """Render usage info as lines: the description, then one line per key binding."""
    lines: list[Line] = []
    if usage.description is not None:
        lines.append(Line(usage.description))
    for entry in usage.lines:
        keys = entry.keys
        bindings: list[str | Span]
        if not keys:
            bindings = []
        elif len(keys) == 1:
            bindings = [_key_span(keys[0])]
        elif len(keys) == 2:
            bindings = [_key_span(keys[0]), " or ", _key_span(keys[1])]
        else:
            bindings = []
            for key in keys[:-1]:
                bindings += [_key_span(key), ", "]
            bindings += ["or", _key_span(keys[-1])]
        bindings.append(f" {entry.description}")
        lines.append(Line(*bindings))
    return lines