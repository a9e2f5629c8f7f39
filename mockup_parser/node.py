"""
Visual Node: read-only view of the host's design tree.

The host supplies one root node with full descendant access. Nodes are
built once (usually through VisualNode.from_dict) and never mutated by
the extraction pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from functools import cmp_to_key
from typing import Any, Callable, Dict, Iterator, List, Optional


class NodeKind(str, Enum):
    """Coarse node kind."""

    CONTAINER = "container"
    TEXT = "text"
    SHAPE = "shape"
    INSTANCE = "instance"


# Host type -> NodeKind
HOST_TYPE_KINDS = {
    "TEXT": NodeKind.TEXT,
    "FRAME": NodeKind.CONTAINER,
    "GROUP": NodeKind.CONTAINER,
    "COMPONENT": NodeKind.CONTAINER,
    "COMPONENT_SET": NodeKind.CONTAINER,
    "SECTION": NodeKind.CONTAINER,
    "INSTANCE": NodeKind.INSTANCE,
}


@dataclass(frozen=True)
class Geometry:
    """Axis-aligned bounding box."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2


@dataclass(eq=False)
class VisualNode:
    """Single positioned node of the design tree.

    Equality is identity; two nodes with the same fields are still two nodes.
    """

    id: str
    name: str
    kind: NodeKind
    geometry: Geometry = field(default_factory=Geometry)
    visible: bool = True
    text: Optional[str] = None
    font_size: Optional[float] = None
    has_fill: bool = False
    has_stroke: bool = False
    children: List["VisualNode"] = field(default_factory=list)
    properties: Dict[str, Any] = field(default_factory=dict)
    overrides: Dict[str, Any] = field(default_factory=dict)
    parent: Optional["VisualNode"] = field(default=None, repr=False)

    def __post_init__(self):
        for child in self.children:
            child.parent = self

    @property
    def x(self) -> float:
        return self.geometry.x

    @property
    def y(self) -> float:
        return self.geometry.y

    @property
    def width(self) -> float:
        return self.geometry.width

    @property
    def height(self) -> float:
        return self.geometry.height

    @property
    def is_text(self) -> bool:
        return self.kind == NodeKind.TEXT

    @property
    def is_container(self) -> bool:
        """Containers and component instances may hold children."""
        return self.kind in (NodeKind.CONTAINER, NodeKind.INSTANCE)

    @property
    def characters(self) -> str:
        """Text content, empty for non-text nodes."""
        if self.kind != NodeKind.TEXT:
            return ""
        return self.text or ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any], _path: str = "0") -> "VisualNode":
        """
        Build a node tree from a host payload.

        Args:
            data: Mapping with Figma-style keys (type, name, x, y, width,
                height, visible, characters, fontSize, fills, strokes,
                children, componentProperties, overrides)

        Returns:
            Root VisualNode with parent links set on every descendant

        Raises:
            ValueError: If the payload or its children list is malformed
        """
        if not isinstance(data, dict):
            raise ValueError(f"Node payload must be a mapping, got {type(data).__name__}")

        raw_children = data.get("children", [])
        if raw_children is None:
            raw_children = []
        if not isinstance(raw_children, list):
            raise ValueError(f"Node {data.get('name', _path)!r} has non-list children")

        children = [
            cls.from_dict(child, f"{_path}.{index}")
            for index, child in enumerate(raw_children)
        ]

        font_size = data.get("fontSize")
        if font_size is not None:
            try:
                font_size = float(font_size)
            except (TypeError, ValueError):
                font_size = None

        return cls(
            id=str(data.get("id") or _path),
            name=str(data.get("name") or ""),
            kind=_kind_from_type(data.get("type") or data.get("kind")),
            geometry=Geometry(
                x=float(data.get("x") or 0),
                y=float(data.get("y") or 0),
                width=float(data.get("width") or 0),
                height=float(data.get("height") or 0),
            ),
            visible=bool(data.get("visible", True)),
            text=data.get("characters", data.get("text")),
            font_size=font_size,
            has_fill=bool(data.get("fills")) or bool(data.get("hasFill")),
            has_stroke=bool(data.get("strokes")) or bool(data.get("hasStroke")),
            children=children,
            properties=dict(data.get("componentProperties") or data.get("properties") or {}),
            overrides=dict(data.get("overrides") or {}),
        )


def _kind_from_type(node_type: Any) -> NodeKind:
    if isinstance(node_type, NodeKind):
        return node_type
    value = str(node_type or "")
    if value in HOST_TYPE_KINDS:
        return HOST_TYPE_KINDS[value]
    try:
        return NodeKind(value.lower())
    except ValueError:
        return NodeKind.SHAPE


# ==============================================================================
# TREE HELPERS
# ==============================================================================


def visible_children(node: VisualNode) -> List[VisualNode]:
    """Visible direct children, in host order."""
    return [child for child in node.children if child.visible]


def find_one_child(
    node: VisualNode, predicate: Callable[[VisualNode], bool]
) -> Optional[VisualNode]:
    for child in node.children:
        if predicate(child):
            return child
    return None


def sort_by_position(nodes: List[VisualNode], tolerance: float = 10.0) -> List[VisualNode]:
    """Reading order: top to bottom, left to right within a row tolerance."""

    def compare(a: VisualNode, b: VisualNode) -> int:
        if abs(a.y - b.y) > tolerance:
            return -1 if a.y < b.y else 1
        if a.x == b.x:
            return 0
        return -1 if a.x < b.x else 1

    return sorted(nodes, key=cmp_to_key(compare))


def iter_descendants(
    node: VisualNode, max_depth: int, visible_only: bool = True
) -> Iterator[VisualNode]:
    """Depth-first pre-order walk below ``node``, bounded by ``max_depth``."""
    if max_depth <= 0:
        return
    for child in node.children:
        if visible_only and not child.visible:
            continue
        yield child
        yield from iter_descendants(child, max_depth - 1, visible_only)


def contains_text(node: VisualNode) -> bool:
    """True for text nodes and containers with a direct text child."""
    if node.is_text:
        return True
    if node.is_container:
        return find_one_child(node, lambda n: n.is_text) is not None
    return False
