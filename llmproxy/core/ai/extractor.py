"""Flatten loosely typed provider message content into a single string."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Union


@dataclass(frozen=True, slots=True)
class Text:
    value: str


@dataclass(frozen=True, slots=True)
class Items:
    items: tuple["Node", ...]


@dataclass(frozen=True, slots=True)
class Keyed:
    text: str | None
    content: "Node | None"
    raw: Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class Opaque:
    raw: Any


Node = Union[Text, Items, Keyed, Opaque]


def decode(value: Any) -> Node:
    """Decode a raw JSON value once into the content sum type."""

    if isinstance(value, str):
        return Text(value)
    if isinstance(value, (list, tuple)):
        return Items(tuple(decode(item) for item in value))
    if isinstance(value, Mapping):
        text = value.get("text")
        content = value.get("content")
        return Keyed(
            text=text if isinstance(text, str) else None,
            content=decode(content) if isinstance(content, (str, list, tuple)) else None,
            raw=value,
        )
    return Opaque(value)


def _render_block(node: Node) -> str:
    if isinstance(node, Text):
        return node.value
    if isinstance(node, Keyed):
        return _render_keyed(node) or ""
    return ""


def _render_keyed(node: Keyed) -> str | None:
    """Return the text a keyed node carries, or ``None`` when it has none."""

    if node.text is not None:
        return node.text
    if isinstance(node.content, Text):
        return node.content.value
    if isinstance(node.content, Items):
        return _render_items(node.content)
    return None


def _render_items(node: Items) -> str:
    parts = [_render_block(item) for item in node.items]
    return "\n".join(part for part in parts if part).strip()


def _stringify(raw: Any) -> str:
    try:
        return json.dumps(raw, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return ""


def render(node: Node) -> str:
    if isinstance(node, Text):
        return node.value
    if isinstance(node, Items):
        return _render_items(node)
    if isinstance(node, Keyed):
        text = _render_keyed(node)
        return text if text is not None else _stringify(node.raw)
    if node.raw is None:
        return ""
    return _stringify(node.raw)


def extract_text(value: Any) -> str:
    """Return the text carried by *value*; never raises for any JSON shape."""

    return render(decode(value))


__all__ = ("Items", "Keyed", "Node", "Opaque", "Text", "decode", "extract_text", "render")
