"""Pretty-printer for API responses (the result of a GET request).

Values are classified once into a ValueKind and rendered as indented,
JSON-like text. Depth is bounded by the caller: containers at or beyond
`max_depth` collapse to a count, which is the only guard needed since the
input is acyclic JSON.
"""

import enum
import json
from typing import Any

from klb_describe.config import DEFAULT_MAX_DEPTH
from klb_describe.parser.base import companion_of
from .style import RenderOptions

MAX_ARRAY_ITEMS = 5
INDENT = "  "

TIMESTAMP_KEYS = frozenset({"unix", "iso", "tz"})


class ValueKind(enum.Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    TIMESTAMP = "timestamp"
    EMPTY_ARRAY = "empty_array"
    EMPTY_OBJECT = "empty_object"
    ARRAY = "array"
    OBJECT = "object"


PRIMITIVE_KINDS = frozenset({ValueKind.NULL, ValueKind.BOOLEAN, ValueKind.NUMBER, ValueKind.STRING})


class KeyRole(enum.Enum):
    PLAIN = "plain"
    TEXT_ID = "text_id"
    TEXT = "text"


def classify(value: Any) -> ValueKind:
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, dict):
        if not value:
            return ValueKind.EMPTY_OBJECT
        if TIMESTAMP_KEYS <= value.keys():
            return ValueKind.TIMESTAMP
        return ValueKind.OBJECT
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY if value else ValueKind.EMPTY_ARRAY
    return ValueKind.STRING


def _count(n: int, singular: str, plural: str) -> str:
    return f"{n} {singular if n == 1 else plural}"


def ordered_keys(obj: dict) -> list[tuple[str, KeyRole]]:
    """Alphabetical keys, with each `X_Text__` key directly followed by `X`."""
    keys = sorted(obj, key=str)
    paired = {companion_of(str(k)) for k in keys} & set(obj)

    result = []
    for key in keys:
        if key in paired:
            continue
        base = companion_of(str(key))
        if base is None:
            result.append((key, KeyRole.PLAIN))
            continue
        result.append((key, KeyRole.TEXT_ID))
        if base in obj:
            result.append((base, KeyRole.TEXT))
    return result


class _Printer:
    def __init__(self, options: RenderOptions, max_depth: int):
        self.options = options
        self.max_depth = max_depth

    def primitive(self, value: Any, kind: ValueKind) -> str:
        style = self.options.style
        if kind is ValueKind.NULL:
            return style("null", dim=True)
        if kind is ValueKind.BOOLEAN:
            return style("true" if value else "false", fg="magenta")
        if kind is ValueKind.NUMBER:
            return style(str(value), fg="yellow")
        text = value if isinstance(value, str) else str(value)
        return style(json.dumps(text, ensure_ascii=False), fg="green")

    def lines(self, value: Any, kind: ValueKind, depth: int) -> list[str]:
        """Render a value; the first line carries no indentation."""
        if kind in PRIMITIVE_KINDS:
            return [self.primitive(value, kind)]
        if kind is ValueKind.TIMESTAMP:
            iso = value.get("iso")
            if iso is not None:
                return [self.options.style(json.dumps(str(iso), ensure_ascii=False), fg="cyan")]
            unix = value.get("unix")
            unix_kind = classify(unix)
            if unix_kind in PRIMITIVE_KINDS:
                return [self.primitive(unix, unix_kind)]
            return [self.primitive(None, ValueKind.NULL)]
        if kind is ValueKind.EMPTY_ARRAY:
            return ["[]"]
        if kind is ValueKind.EMPTY_OBJECT:
            return ["{}"]
        if depth >= self.max_depth:
            if kind is ValueKind.ARRAY:
                return [self.options.muted(f"[{_count(len(value), 'item', 'items')}]")]
            return [self.options.muted(f"{{{_count(len(value), 'property', 'properties')}}}")]
        if kind is ValueKind.ARRAY:
            return self.array(value, depth)
        return self.object(value, depth)

    def array(self, items: list, depth: int) -> list[str]:
        kinds = [classify(item) for item in items]
        if len(items) <= MAX_ARRAY_ITEMS and all(k in PRIMITIVE_KINDS for k in kinds):
            return ["[" + ", ".join(self.primitive(v, k) for v, k in zip(items, kinds)) + "]"]

        pad = INDENT * (depth + 1)
        shown = list(zip(items, kinds))[:MAX_ARRAY_ITEMS]
        hidden = len(items) - len(shown)
        out = ["["]
        for i, (item, kind) in enumerate(shown):
            child = self.lines(item, kind, depth + 1)
            out.append(pad + child[0])
            out.extend(child[1:])
            if i < len(shown) - 1 or hidden:
                out[-1] += ","
        if hidden:
            out.append(pad + self.options.muted(f"... {_count(hidden, 'more item', 'more items')}"))
        out.append(INDENT * depth + "]")
        return out

    def object(self, obj: dict, depth: int) -> list[str]:
        pad = INDENT * (depth + 1)
        entries = ordered_keys(obj)
        out = ["{"]
        for i, (key, role) in enumerate(entries):
            item = obj[key]
            child = self.lines(item, classify(item), depth + 1)
            head = f"{pad}{self.options.style(str(key), fg='cyan')}: {child[0]}"

            followed_by_text = i + 1 < len(entries) and entries[i + 1][1] is KeyRole.TEXT
            if i == len(entries) - 1 or (role is KeyRole.TEXT_ID and followed_by_text):
                comma = ""
            else:
                comma = ","
            note = ""
            if role is KeyRole.TEXT_ID:
                note = self.options.muted("  // Translatable ID")
            elif role is KeyRole.TEXT:
                note = self.options.muted("  // Translated text")

            if len(child) == 1:
                out.append(head + comma + note)
            else:
                out.append(head + note)
                out.extend(child[1:])
                out[-1] += comma
        out.append(INDENT * depth + "}")
        return out


def render_value(value: Any, options: RenderOptions, depth: int = 0, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    """Write a JSON value to the options sink."""
    lines = _Printer(options, max_depth).lines(value, classify(value), depth)
    options.emit(INDENT * depth + lines[0])
    for line in lines[1:]:
        options.emit(line)
