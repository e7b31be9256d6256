"""
Content tree consumed by the layout engine.

Nodes carry explicit, validated attributes (float side, margins, intrinsic
size) instead of looking them up from a rendering environment. A tree is
built once, read during layout and thrown away afterwards.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional

from ..exceptions import ContentError

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


class NodeKind(Enum):
    """Content node kinds."""
    TEXT = "text"
    HEADING_1 = "heading-1"
    HEADING_2 = "heading-2"
    HEADING_3 = "heading-3"
    PARAGRAPH = "paragraph"
    LIST = "list"
    IMAGE = "image"
    CONTAINER = "container"

    @property
    def is_heading(self) -> bool:
        return self in (NodeKind.HEADING_1, NodeKind.HEADING_2, NodeKind.HEADING_3)


class FloatMode(Enum):
    NONE = "none"
    LEFT = "left"
    RIGHT = "right"


# Aliases accepted by ContentNode.from_dict; value is (kind, ordered)
KIND_ALIASES: Dict[str, tuple] = {
    "text": (NodeKind.TEXT, False),
    "#text": (NodeKind.TEXT, False),
    "heading-1": (NodeKind.HEADING_1, False),
    "h1": (NodeKind.HEADING_1, False),
    "heading-2": (NodeKind.HEADING_2, False),
    "h2": (NodeKind.HEADING_2, False),
    "heading-3": (NodeKind.HEADING_3, False),
    "h3": (NodeKind.HEADING_3, False),
    "paragraph": (NodeKind.PARAGRAPH, False),
    "p": (NodeKind.PARAGRAPH, False),
    "list": (NodeKind.LIST, False),
    "unordered-list": (NodeKind.LIST, False),
    "ul": (NodeKind.LIST, False),
    "ordered-list": (NodeKind.LIST, True),
    "ol": (NodeKind.LIST, True),
    "image": (NodeKind.IMAGE, False),
    "img": (NodeKind.IMAGE, False),
    "container": (NodeKind.CONTAINER, False),
    "generic-container": (NodeKind.CONTAINER, False),
    "div": (NodeKind.CONTAINER, False),
    "span": (NodeKind.CONTAINER, False),
    "section": (NodeKind.CONTAINER, False),
    "li": (NodeKind.CONTAINER, False),
}


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def _optional_number(data: Mapping[str, Any], *keys: str) -> Optional[float]:
    for key in keys:
        if key in data and data[key] is not None:
            value = data[key]
            try:
                number = float(value)
            except (TypeError, ValueError):
                raise ContentError(f"Attribute '{key}' must be numeric", repr(value)) from None
            return number
    return None


@dataclass
class ContentNode:
    """Single element of the input document tree.

    Image attributes (``source``, ``width``, ``height``, margins) are in
    pixels and only meaningful for :attr:`NodeKind.IMAGE`. ``ordered``
    only applies to lists; list items are the list's children.
    """

    kind: NodeKind
    text: str = ""
    children: List["ContentNode"] = field(default_factory=list)
    ordered: bool = False
    source: Optional[str] = None
    width: Optional[float] = None
    height: Optional[float] = None
    float_side: FloatMode = FloatMode.NONE
    margin_left: Optional[float] = None
    margin_right: Optional[float] = None
    margin_bottom: Optional[float] = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, NodeKind):
            raise ContentError("Node kind must be a NodeKind", repr(self.kind))
        if isinstance(self.float_side, str):
            try:
                self.float_side = FloatMode(self.float_side.lower())
            except ValueError:
                raise ContentError("Invalid float side", repr(self.float_side)) from None
        for name in ("width", "height", "margin_left", "margin_right", "margin_bottom"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ContentError(f"Attribute '{name}' must not be negative", str(value))
        if self.kind is NodeKind.TEXT and self.children:
            raise ContentError("Text nodes cannot have children")
        if self.kind is NodeKind.IMAGE and self.children:
            raise ContentError("Image nodes cannot have children")

    # Convenience constructors -------------------------------------------------

    @classmethod
    def text_node(cls, text: str) -> "ContentNode":
        return cls(NodeKind.TEXT, text=text)

    @classmethod
    def heading(cls, level: int, text: str) -> "ContentNode":
        kinds = {1: NodeKind.HEADING_1, 2: NodeKind.HEADING_2, 3: NodeKind.HEADING_3}
        if level not in kinds:
            raise ContentError("Heading level must be 1, 2 or 3", str(level))
        return cls(kinds[level], text=text)

    @classmethod
    def paragraph(cls, text: str) -> "ContentNode":
        return cls(NodeKind.PARAGRAPH, text=text)

    @classmethod
    def list_of(cls, items: List[str], ordered: bool = False) -> "ContentNode":
        return cls(
            NodeKind.LIST,
            ordered=ordered,
            children=[cls.text_node(item) for item in items],
        )

    @classmethod
    def image(cls, source: str, width: Optional[float] = None, height: Optional[float] = None,
              float_side: str = "none", **margins: Optional[float]) -> "ContentNode":
        return cls(
            NodeKind.IMAGE,
            source=source,
            width=width,
            height=height,
            float_side=float_side,
            margin_left=margins.get("margin_left"),
            margin_right=margins.get("margin_right"),
            margin_bottom=margins.get("margin_bottom"),
        )

    @classmethod
    def container(cls, *children: "ContentNode") -> "ContentNode":
        return cls(NodeKind.CONTAINER, children=list(children))

    @classmethod
    def from_dict(cls, data: Any) -> "ContentNode":
        """Build a tree from plain data (e.g. decoded JSON).

        A bare string becomes a text node and a list becomes a container.
        Dicts use ``kind`` (or ``type`` / ``tag``) with the aliases in
        :data:`KIND_ALIASES`.
        """
        if isinstance(data, str):
            return cls.text_node(data)
        if isinstance(data, list):
            return cls.container(*(cls.from_dict(item) for item in data))
        if not isinstance(data, Mapping):
            raise ContentError("Content node must be a mapping, list or string", type(data).__name__)

        raw_kind = data.get("kind") or data.get("type") or data.get("tag")
        if not raw_kind:
            raise ContentError("Content node is missing 'kind'", repr(dict(data))[:80])
        alias = KIND_ALIASES.get(str(raw_kind).strip().lower())
        if alias is None:
            raise ContentError(f"Unknown content kind '{raw_kind}'")
        kind, ordered = alias
        if kind is NodeKind.LIST and "ordered" in data:
            ordered = bool(data["ordered"])

        children_data = data.get("children") or []
        if not isinstance(children_data, list):
            raise ContentError("'children' must be a list", type(children_data).__name__)

        float_value = data.get("float") or data.get("float_side") or "none"
        return cls(
            kind=kind,
            text=str(data.get("text") or ""),
            children=[cls.from_dict(child) for child in children_data],
            ordered=ordered,
            source=data.get("src") or data.get("source"),
            width=_optional_number(data, "width", "intrinsic_width"),
            height=_optional_number(data, "height", "intrinsic_height"),
            float_side=str(float_value),
            margin_left=_optional_number(data, "margin_left", "margin-left"),
            margin_right=_optional_number(data, "margin_right", "margin-right"),
            margin_bottom=_optional_number(data, "margin_bottom", "margin-bottom"),
        )

    # Queries ------------------------------------------------------------------

    def iter_tree(self) -> Iterator["ContentNode"]:
        """Depth-first, pre-order traversal including ``self``."""
        yield self
        for child in self.children:
            yield from child.iter_tree()

    def text_content(self) -> str:
        """Text of this node and all descendants, whitespace collapsed."""
        parts = [node.text for node in self.iter_tree() if node.text]
        return collapse_whitespace(" ".join(parts))
