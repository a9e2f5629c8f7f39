"""
Layout Protocol: relationships between nodes from bounding boxes alone.

Every predicate fails closed (returns False or an empty result) on
insufficient input and never raises.
"""

from typing import List, Optional, Sequence, Tuple

from mockup_parser.config import DEFAULT_CONFIG, ExtractionConfig
from mockup_parser.node import Geometry, NodeKind, VisualNode


class LayoutProtocol:
    """Geometric predicates over axis-aligned boxes."""

    def __init__(self, config: ExtractionConfig = DEFAULT_CONFIG):
        self.config = config

    # --------------------------------------------------------------------------
    # Pairwise relations
    # --------------------------------------------------------------------------

    def is_horizontally_aligned(self, a: VisualNode, b: VisualNode) -> bool:
        """Vertical centres within the alignment threshold."""
        diff = abs(a.geometry.center_y - b.geometry.center_y)
        return diff < self.config.alignment_threshold

    def is_vertically_aligned(self, a: VisualNode, b: VisualNode) -> bool:
        """Horizontal centres within the alignment threshold."""
        diff = abs(a.geometry.center_x - b.geometry.center_x)
        return diff < self.config.alignment_threshold

    def same_row(self, a: VisualNode, b: VisualNode) -> bool:
        return abs(a.y - b.y) < self.config.row_threshold

    def same_column(self, a: VisualNode, b: VisualNode) -> bool:
        return abs(a.x - b.x) < self.config.alignment_threshold

    def horizontal_distance(self, a: VisualNode, b: VisualNode) -> float:
        """Gap between the boxes along x, 0 when they overlap."""
        if a.geometry.right <= b.x:
            return b.x - a.geometry.right
        if b.geometry.right <= a.x:
            return a.x - b.geometry.right
        return 0.0

    def vertical_distance(self, a: VisualNode, b: VisualNode) -> float:
        """Gap between the boxes along y, 0 when they overlap."""
        if a.geometry.bottom <= b.y:
            return b.y - a.geometry.bottom
        if b.geometry.bottom <= a.y:
            return a.y - b.geometry.bottom
        return 0.0

    def is_label_input_pair(self, label: VisualNode, input_node: VisualNode) -> bool:
        """
        Text label beside a form control.

        All three must hold: horizontal gap <= 20, vertical centres within 5
        (inclusive) and vertical gap <= 10. The control must not be text.
        """
        if label.kind != NodeKind.TEXT or input_node.kind == NodeKind.TEXT:
            return False

        gap_ok = (
            self.horizontal_distance(label, input_node)
            <= self.config.label_input_distance
        )
        centre_diff = abs(label.geometry.center_y - input_node.geometry.center_y)
        aligned = centre_diff <= self.config.alignment_threshold
        vertical_ok = (
            self.vertical_distance(label, input_node)
            <= self.config.label_input_vertical_distance
        )
        return gap_ok and aligned and vertical_ok

    # --------------------------------------------------------------------------
    # Groups
    # --------------------------------------------------------------------------

    def can_form_button_group(self, a: VisualNode, b: VisualNode) -> bool:
        similar_size = (
            abs(a.width - b.width) < self.config.button_width_tolerance
            and abs(a.height - b.height) < self.config.button_height_tolerance
        )
        return similar_size and (self.same_row(a, b) or self.same_column(a, b))

    def identify_button_groups(self, nodes: Sequence[VisualNode]) -> List[List[VisualNode]]:
        """
        Greedy partition into groups of mutually compatible buttons.

        Each group is seeded by the next unprocessed node and grows with
        every later node compatible with all current members. Nodes that
        end up alone are dropped.
        """
        groups: List[List[VisualNode]] = []
        processed = set()

        for seed in nodes:
            if id(seed) in processed:
                continue
            group = [seed]
            for candidate in nodes:
                if candidate is seed or id(candidate) in processed:
                    continue
                if all(self.can_form_button_group(member, candidate) for member in group):
                    group.append(candidate)
            if len(group) >= 2:
                groups.append(group)
                processed.update(id(member) for member in group)

        return groups

    def is_button_group(self, nodes: Sequence[VisualNode]) -> bool:
        """Same row or column with roughly even spacing."""
        if len(nodes) < 2:
            return False

        first = nodes[0]
        in_row = all(self.same_row(first, node) for node in nodes[1:])
        in_column = all(self.same_column(first, node) for node in nodes[1:])
        if not in_row and not in_column:
            return False

        distances = [
            self.horizontal_distance(a, b) if in_row else self.vertical_distance(a, b)
            for a, b in zip(nodes, nodes[1:])
        ]
        mean = sum(distances) / len(distances)
        variance = sum((d - mean) ** 2 for d in distances) / len(distances)
        return variance < self.config.button_spacing_variance

    def group_by_rows(self, nodes: Sequence[VisualNode]) -> List[List[VisualNode]]:
        """
        Cluster nodes into rows.

        Each row is seeded by the next unprocessed node (input order) and
        collects every unprocessed node on the same row, sorted by x. Rows
        are then sorted by the y of their first member.
        """
        rows: List[List[VisualNode]] = []
        processed = set()

        for seed in nodes:
            if id(seed) in processed:
                continue
            row = [
                node for node in nodes
                if id(node) not in processed and self.same_row(seed, node)
            ]
            row.sort(key=lambda n: n.x)
            rows.append(row)
            processed.update(id(node) for node in row)

        rows.sort(key=lambda r: r[0].y)
        return rows

    def is_table_structure(self, nodes: Sequence[VisualNode]) -> bool:
        """At least two rows, equal cells per row, x-aligned columns."""
        if len(nodes) < 3:
            return False

        rows = self.group_by_rows(nodes)
        if len(rows) < 2:
            return False

        width = len(rows[0])
        if any(len(row) != width for row in rows):
            return False

        return self._columns_aligned(rows)

    def _columns_aligned(self, rows: List[List[VisualNode]]) -> bool:
        for col in range(len(rows[0])):
            xs = [row[col].x for row in rows]
            mean_x = sum(xs) / len(xs)
            if any(abs(x - mean_x) >= self.config.alignment_threshold for x in xs):
                return False
        return True

    # --------------------------------------------------------------------------
    # Areas
    # --------------------------------------------------------------------------

    def bounding_box(self, nodes: Sequence[VisualNode]) -> Geometry:
        if not nodes:
            return Geometry()
        min_x = min(n.x for n in nodes)
        min_y = min(n.y for n in nodes)
        max_x = max(n.geometry.right for n in nodes)
        max_y = max(n.geometry.bottom for n in nodes)
        return Geometry(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)

    def is_inside_area(self, node: VisualNode, area: Geometry) -> bool:
        tolerance = self.config.position_tolerance
        return (
            node.x >= area.x - tolerance
            and node.y >= area.y - tolerance
            and node.geometry.right <= area.right + tolerance
            and node.geometry.bottom <= area.bottom + tolerance
        )

    def is_visually_like_input(self, node: VisualNode) -> bool:
        """Box with a fill or stroke and the proportions of a form control."""
        if node.kind == NodeKind.TEXT:
            return False
        if (
            node.width < self.config.input_min_width
            or node.height < self.config.input_min_height
            or node.height > self.config.input_max_height
        ):
            return False
        return node.has_fill or node.has_stroke

    # --------------------------------------------------------------------------
    # Button group presentation
    # --------------------------------------------------------------------------

    def infer_button_layout(self, nodes: Sequence[VisualNode]) -> str:
        if not nodes:
            return "horizontal"
        first = nodes[0]
        if all(self.same_row(first, node) for node in nodes[1:]):
            return "horizontal"
        return "vertical"

    def infer_button_align(
        self, nodes: Sequence[VisualNode], container: Optional[Geometry] = None
    ) -> str:
        """Alignment of a button cluster inside its container box."""
        if not nodes or container is None or container.width <= 0:
            return "left"

        box = self.bounding_box(nodes)
        left_gap = box.x - container.x
        right_gap = container.right - box.right
        if abs(left_gap - right_gap) < self.config.align_center_tolerance:
            return "center"
        return "right" if left_gap > right_gap else "left"

    def split_by_side(
        self, groups: Sequence[Sequence[VisualNode]], container: Geometry
    ) -> Tuple[List[VisualNode], List[VisualNode]]:
        """
        Assign each group to the left or right half of the container.

        A group straddling the centre line is split member by member.
        """
        left: List[VisualNode] = []
        right: List[VisualNode] = []
        middle = container.center_x
        for group in groups:
            if not group:
                continue
            box = self.bounding_box(group)
            if box.x < middle < box.right:
                for node in group:
                    (left if node.geometry.center_x < middle else right).append(node)
            elif box.center_x < middle:
                left.extend(group)
            else:
                right.extend(group)
        return left, right
