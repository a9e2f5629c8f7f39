"""
Column Discovery: find the data-grid column headers.

Strategies are tried in order at each node until one yields at least one
column:

- Explicit "columns" sub-container
- Header-named row (one column per cell)
- Column components ("列" / "column" named children)
- Grid geometry (first row of an aligned grid)
- First-child heuristic
- Root-level text-row fallback

When none apply the search descends depth-first into the children and the
first non-empty result wins.
"""

import logging
import re
from typing import Callable, List, Optional

from mockup_parser.config import DEFAULT_CONFIG, ExtractionConfig
from mockup_parser.dictionary import (
    COLUMN_COMPONENT_PATTERN,
    COLUMN_TYPE_HINTS,
    EXPLICIT_COLUMNS_PATTERN,
    LAYOUT_WRAPPER_PATTERN,
    PAGE_TITLE_PATTERNS,
    SEARCH_TEXT_KEYWORDS,
    TITLE_NAME_PATTERN,
)
from mockup_parser.intelligence import IntelligenceEngine
from mockup_parser.layout import LayoutProtocol
from mockup_parser.naming import NamingProtocol, has_hint, to_key
from mockup_parser.node import (
    VisualNode,
    contains_text,
    find_one_child,
    iter_descendants,
    sort_by_position,
    visible_children,
)
from mockup_parser.schema import ColumnAlign, ColumnType, TableColumn

logger = logging.getLogger(__name__)

Strategy = Callable[[VisualNode, int], List[TableColumn]]

NUMERIC_TEXT = re.compile(r"^[\d.,%]+$")


def infer_column_type(title: str) -> ColumnType:
    """Column data type from title keywords; ASCII hints match whole words."""
    for type_name, hints in COLUMN_TYPE_HINTS.items():
        if has_hint(title, hints):
            return ColumnType(type_name)
    return ColumnType.TEXT


def make_column(
    title: str, width: Optional[float] = None, align: ColumnAlign = ColumnAlign.LEFT
) -> TableColumn:
    title = title.strip()
    return TableColumn(
        title=title,
        data_index=to_key(title),
        width=width or None,
        align=align,
        type=infer_column_type(title),
    )


def cell_title(cell: VisualNode) -> str:
    """Text of a header cell: its own characters or its first direct text child."""
    if cell.is_text:
        return cell.characters.strip()
    text = find_one_child(cell, lambda n: n.is_text and n.visible and bool(n.characters.strip()))
    return text.characters.strip() if text else ""


class ColumnDiscovery:
    """
    Ordered column-discovery strategies.

    Args:
        naming: Name classifier
        layout: Geometry classifier
        intelligence: Used to withhold operation columns
        config: Depth caps and ratios
    """

    def __init__(
        self,
        naming: NamingProtocol,
        layout: LayoutProtocol,
        intelligence: IntelligenceEngine,
        config: ExtractionConfig = DEFAULT_CONFIG,
    ):
        self.naming = naming
        self.layout = layout
        self.intelligence = intelligence
        self.config = config

    def strategies(self) -> List[Strategy]:
        return [
            self.from_explicit_columns,
            self.from_header_row,
            self.from_column_components,
            self.from_grid_geometry,
            self.from_first_child,
            self.from_text_rows,
        ]

    def discover(self, node: VisualNode, depth: int = 0) -> List[TableColumn]:
        """
        Discover columns below ``node``.

        Returns:
            De-duplicated columns, empty when nothing was recognized
        """
        if depth > self.config.column_max_depth or not node.visible:
            return []

        for strategy in self.strategies():
            columns = self._dedupe(strategy(node, depth))
            if columns:
                logger.debug(
                    f"{strategy.__name__} found {len(columns)} columns in '{node.name}'"
                )
                return columns

        for child in sort_by_position(visible_children(node)):
            if not child.is_container:
                continue
            columns = self.discover(child, depth + 1)
            if columns:
                return columns
        return []

    # --------------------------------------------------------------------------
    # Strategies
    # --------------------------------------------------------------------------

    def from_explicit_columns(self, node: VisualNode, depth: int) -> List[TableColumn]:
        """Recurse into a child named like a column definition."""
        explicit = find_one_child(
            node,
            lambda n: n.visible and n.is_container and bool(EXPLICIT_COLUMNS_PATTERN.search(n.name)),
        )
        if explicit is None:
            return []
        return self.discover(explicit, depth + 1)

    def from_header_row(self, node: VisualNode, depth: int) -> List[TableColumn]:
        """One column per cell of a header-named row."""
        if not node.is_container or not self.naming.is_header(node.name):
            return []

        columns = []
        for cell in sorted(visible_children(node), key=lambda n: n.x):
            if cell.is_text:
                title = cell.characters.strip()
                align = ColumnAlign.LEFT
            elif cell.is_container:
                title = cell_title(cell)
                align = self._cell_align(cell)
            else:
                continue
            if title:
                columns.append(make_column(title, cell.width, align))

        limit = node.width * self.config.header_cell_width_ratio
        if node.width > 0 and len(columns) == 1 and (columns[0].width or 0) > limit:
            logger.debug(f"Header '{node.name}' looks like one merged cell, skipped")
            return []
        return columns

    def from_column_components(self, node: VisualNode, depth: int) -> List[TableColumn]:
        """
        Column components, each titled by its best-scoring text.

        Inside an explicit columns container every container or text child
        is a column; elsewhere only children named as columns count.
        """
        container = node
        if EXPLICIT_COLUMNS_PATTERN.search(node.name):
            children = visible_children(node)
            if len(children) == 1 and children[0].is_container:
                container = children[0]
            components = self._flatten_layout_groups(visible_children(container))
        else:
            components = [
                c for c in visible_children(node) if COLUMN_COMPONENT_PATTERN.search(c.name)
            ]

        candidates = [c for c in components if c.is_container or c.is_text]
        if not candidates:
            return []

        columns = []
        limit = container.width * self.config.header_cell_width_ratio
        for candidate in sort_by_position(candidates):
            if container.width > 0 and candidate.width > limit:
                logger.debug(f"Column '{candidate.name}' wider than its parent, skipped")
                continue
            if self.naming.is_action(candidate.name):
                logger.debug(f"Operation column '{candidate.name}' withheld")
                continue
            title = candidate.characters.strip() if candidate.is_text else self._best_title(candidate)
            if not title:
                continue
            if self.intelligence.is_operation_title(title):
                logger.debug(f"Operation column '{title}' withheld")
                continue
            columns.append(make_column(title, candidate.width))
        return columns

    def from_grid_geometry(self, node: VisualNode, depth: int) -> List[TableColumn]:
        """First row of an aligned grid, when every cell carries text."""
        children = visible_children(node)
        if not self.layout.is_table_structure(children):
            return []

        header = self.layout.group_by_rows(children)[0]
        if not all(contains_text(cell) for cell in header):
            return []
        return [
            make_column(title, cell.width)
            for cell in header
            for title in [cell_title(cell)]
            if title
        ]

    def from_first_child(self, node: VisualNode, depth: int) -> List[TableColumn]:
        """First child looks like a header row: several cells, mostly text."""
        children = sort_by_position(visible_children(node))
        if not children or not children[0].is_container:
            return []

        cells = visible_children(children[0])
        if len(cells) <= 1:
            return []
        with_text = sum(1 for cell in cells if contains_text(cell))
        if with_text * 2 <= len(cells):
            return []

        return [
            make_column(title, cell.width)
            for cell in sorted(cells, key=lambda n: n.x)
            for title in [cell_title(cell)]
            if title
        ]

    def from_text_rows(self, node: VisualNode, depth: int) -> List[TableColumn]:
        """Root-level fallback: the most populated row of loose texts."""
        if depth != 0:
            return []

        texts = [
            n for n in iter_descendants(node, self.config.bfs_max_depth)
            if n.is_text and n.characters.strip() and self._is_header_text(n.characters)
        ]
        if len(texts) < 2:
            return []

        rows: List[List[VisualNode]] = []
        for text in sort_by_position(texts):
            for row in rows:
                if abs(row[0].y - text.y) <= self.config.layout_row_tolerance:
                    row.append(text)
                    break
            else:
                rows.append([text])

        best: List[VisualNode] = []
        for row in rows:
            if len(row) > len(best):
                best = row
        if len(best) < 2:
            return []

        return [
            make_column(text.characters, text.width)
            for text in sorted(best, key=lambda n: n.x)
        ]

    # --------------------------------------------------------------------------
    # Helpers
    # --------------------------------------------------------------------------

    def _flatten_layout_groups(self, children: List[VisualNode]) -> List[VisualNode]:
        flattened: List[VisualNode] = []
        for child in children:
            if (
                child.is_container
                and LAYOUT_WRAPPER_PATTERN.search(child.name)
                and not COLUMN_COMPONENT_PATTERN.search(child.name)
            ):
                flattened.extend(visible_children(child))
            else:
                flattened.append(child)
        return flattened

    def _dedupe(self, columns: List[TableColumn]) -> List[TableColumn]:
        seen = set()
        unique = []
        for column in columns:
            if column.title in seen:
                logger.debug(f"Duplicate column '{column.title}' skipped")
                continue
            seen.add(column.title)
            unique.append(column)
        return unique

    def _cell_align(self, cell: VisualNode) -> ColumnAlign:
        text = find_one_child(cell, lambda n: n.is_text and n.visible)
        if text is None:
            return ColumnAlign.LEFT
        diff = text.geometry.center_x - cell.geometry.center_x
        if abs(diff) < self.config.cell_center_tolerance:
            return ColumnAlign.CENTER
        return ColumnAlign.RIGHT if diff > 0 else ColumnAlign.LEFT

    def _best_title(self, node: VisualNode) -> str:
        best_text = ""
        best_score = None
        for child in iter_descendants(node, self.config.title_max_depth):
            if not child.is_text:
                continue
            text = child.characters.strip()
            if not text:
                continue
            score = self._title_score(child.name, text)
            if best_score is None or score > best_score:
                best_text, best_score = text, score
        return best_text

    def _title_score(self, name: str, text: str) -> int:
        score = 1
        if TITLE_NAME_PATTERN.search(name or ""):
            score += 10
        if (name or "").strip().lower() in ("title", "标题"):
            score += 5
        if len(text) > 20:
            score -= 5
        if NUMERIC_TEXT.match(text):
            score -= 2
        return score

    def _is_header_text(self, text: str) -> bool:
        content = text.strip()
        lowered = content.lower()
        if len(content) >= self.config.max_header_text_length:
            return False
        if any(keyword in lowered for keyword in SEARCH_TEXT_KEYWORDS):
            return False
        return not any(pattern.match(content) for pattern in PAGE_TITLE_PATTERNS)
