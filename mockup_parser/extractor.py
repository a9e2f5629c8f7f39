"""
Table Extractor: build a TablePageModel from a design tree.

Runs a best-effort pipeline over the naming, layout and intelligence
layers. Stages always run in order and most have a fallback:

- Header (HeaderArea role only; absent when no node carries it)
- Search fields (SearchArea role, then a degraded whole-tree scan)
- Data grid columns (DataGrid role with sibling rescue, then the root)
- Operation column (operation-named nodes inside the grid)
- Toolbar (ActionGroup role anywhere in the tree)
- Assembly with fixed row-selection and pagination defaults
"""

import asyncio
import logging
from collections import deque
from typing import Any, Dict, Iterator, List, Optional, Sequence, Set, Tuple, Union

from mockup_parser.columns import ColumnDiscovery
from mockup_parser.config import DEFAULT_CONFIG, ExtractionConfig
from mockup_parser.dictionary import (
    COUNTER_PATTERN,
    DELETE_CONFIRM_CONTENT,
    DELETE_CONFIRM_TITLE,
    FIELD_TYPE_HINTS,
    PLACEHOLDER_PATTERNS,
    SEARCH_BUTTON_KEYWORDS,
    SEARCH_TOGGLE_LABELS,
    SEMANTIC_DICTIONARY,
    TITLE_LIKE_GRID_PATTERN,
    SemanticEntry,
    StructuralRole,
)
from mockup_parser.intelligence import IntelligenceEngine
from mockup_parser.layout import LayoutProtocol
from mockup_parser.naming import NamingProtocol, has_hint, to_key
from mockup_parser.node import (
    NodeKind,
    VisualNode,
    iter_descendants,
    sort_by_position,
    visible_children,
)
from mockup_parser.schema import (
    ActionButton,
    ActionButtonType,
    ActionColumn,
    BodyArea,
    ButtonGroup,
    ButtonGroupType,
    ButtonLayout,
    ColumnAlign,
    ConfirmPrompt,
    FieldType,
    FixedSide,
    HeaderArea,
    PaginationBar,
    SearchArea,
    SearchButton,
    SearchButtonType,
    SearchField,
    TableArea,
    TableColumn,
    TablePageModel,
    ToolbarArea,
    ToolbarButton,
    ToolbarButtonType,
    default_action_column,
)
from mockup_parser.text_recovery import TextRecovery

logger = logging.getLogger(__name__)

# Font size lower bounds for heading levels 1..5; anything smaller is level 6
HEADING_LEVELS = ((24, 1), (20, 2), (18, 3), (16, 4), (14, 5))

MIN_TITLE_FONT_SIZE = 14


def heading_level(font_size: Optional[float]) -> int:
    size = font_size or 0
    for threshold, level in HEADING_LEVELS:
        if size >= threshold:
            return level
    return 6


class TableExtractor:
    """
    Structural extractor for list/table pages.

    Holds only immutable configuration; one instance can serve any number
    of calls.

    Args:
        config: Thresholds and depth caps
        dictionary: Semantic dictionary driving role resolution
    """

    def __init__(
        self,
        config: ExtractionConfig = DEFAULT_CONFIG,
        dictionary: Sequence[SemanticEntry] = SEMANTIC_DICTIONARY,
    ):
        self.config = config
        self.naming = NamingProtocol()
        self.layout = LayoutProtocol(config)
        self.intelligence = IntelligenceEngine(dictionary, config)
        self.text_recovery = TextRecovery(config)
        self.columns = ColumnDiscovery(self.naming, self.layout, self.intelligence, config)

    def extract(self, root: Union[VisualNode, Dict[str, Any]]) -> TablePageModel:
        """
        Extract the page model from a design tree.

        Args:
            root: Root node, or a host payload accepted by VisualNode.from_dict

        Returns:
            TablePageModel; ``body.table`` is always present

        Raises:
            ValueError: If a host payload is malformed
        """
        if isinstance(root, dict):
            root = VisualNode.from_dict(root)

        found: List[StructuralRole] = []

        header = self.extract_header(root, found)
        search = self.extract_search(root, found)

        grid = self.find_data_grid(root)
        if grid is not None:
            found.append(StructuralRole.DATA_GRID)
            logger.info(f"Found data grid '{grid.name}'")
        scope = grid or root

        columns = self.columns.discover(scope)
        action_column = self.extract_action_column(scope, found)
        columns = self.drop_action_columns(columns)
        logger.info(f"Extracted {len(columns)} columns")

        toolbar = self.extract_toolbar(root, found)

        validation = self.intelligence.validate_structure(found)
        if not validation.valid:
            missing = ", ".join(role.value for role in validation.missing)
            logger.warning(f"Page structure incomplete, missing: {missing}")

        return TablePageModel(
            header=header,
            body=BodyArea(
                search=search,
                toolbar=toolbar,
                table=TableArea(columns=columns, action_column=action_column),
                pagination=PaginationBar(page_size=self.config.page_size),
            ),
        )

    # --------------------------------------------------------------------------
    # Role search
    # --------------------------------------------------------------------------

    def find_by_role(
        self, root: VisualNode, role: StructuralRole
    ) -> Optional[VisualNode]:
        """Shallowest visible node with ``role``; first in level order wins."""
        queue = deque([(root, 0)])
        visited: Set[int] = set()

        while queue:
            node, depth = queue.popleft()
            if id(node) in visited or not node.visible:
                continue
            visited.add(id(node))

            if self.intelligence.has_role(node, role):
                return node
            if depth < self.config.bfs_max_depth:
                queue.extend((child, depth + 1) for child in node.children)
        return None

    def find_data_grid(self, root: VisualNode) -> Optional[VisualNode]:
        """DataGrid node, preferring a sibling when the match is only a caption."""
        grid = self.find_by_role(root, StructuralRole.DATA_GRID)
        if grid is None or grid.parent is None:
            return grid
        if not TITLE_LIKE_GRID_PATTERN.search(grid.name):
            return grid

        for sibling in visible_children(grid.parent):
            if sibling is grid or TITLE_LIKE_GRID_PATTERN.search(sibling.name):
                continue
            if self.intelligence.has_role(sibling, StructuralRole.DATA_GRID):
                logger.debug(f"Grid '{grid.name}' looks like a caption, using '{sibling.name}'")
                return sibling
        return grid

    # --------------------------------------------------------------------------
    # Header
    # --------------------------------------------------------------------------

    def extract_header(
        self, root: VisualNode, found: List[StructuralRole]
    ) -> Optional[HeaderArea]:
        area = self.find_by_role(root, StructuralRole.HEADER_AREA)
        if area is None:
            logger.debug("No header area found")
            return None

        found.append(StructuralRole.HEADER_AREA)
        texts = [area] if area.is_text else [
            n for n in iter_descendants(area, self.config.search_max_depth) if n.is_text
        ]
        title = self._large_text(texts)
        if title is None:
            logger.debug(f"Header area '{area.name}' has no title text")
            return None

        logger.info(f"Found header '{title.characters.strip()}'")
        return HeaderArea(
            title=title.characters.strip(),
            level=heading_level(title.font_size),
            subtitle=self._subtitle(title),
            extra=self._counter(texts),
        )

    def _large_text(self, nodes: Sequence[VisualNode]) -> Optional[VisualNode]:
        for node in nodes:
            if (
                node.is_text
                and node.visible
                and node.characters.strip()
                and (node.font_size or 0) > MIN_TITLE_FONT_SIZE
            ):
                return node
        return None

    def _subtitle(self, title: VisualNode) -> Optional[str]:
        if title.parent is None:
            return None
        siblings = visible_children(title.parent)
        for sibling in siblings[siblings.index(title) + 1:]:
            text = sibling.characters.strip()
            if sibling.is_text and text and not COUNTER_PATTERN.search(text):
                return text
        return None

    def _counter(self, texts: Sequence[VisualNode]) -> Optional[str]:
        for node in texts:
            text = node.characters.strip()
            if text and COUNTER_PATTERN.search(text):
                return text
        return None

    # --------------------------------------------------------------------------
    # Search
    # --------------------------------------------------------------------------

    def extract_search(
        self, root: VisualNode, found: List[StructuralRole]
    ) -> SearchArea:
        area = self.find_by_role(root, StructuralRole.SEARCH_AREA)
        if area is None:
            logger.debug("No search area found, scanning the whole tree")
            return SearchArea(fields=self.scan_fields(root))

        found.append(StructuralRole.SEARCH_AREA)
        fields = self.scan_fields(area)
        logger.info(f"Found search area '{area.name}' with {len(fields)} fields")
        return SearchArea(fields=fields, buttons=self.extract_search_buttons(area))

    def scan_fields(self, node: VisualNode, depth: int = 0) -> List[SearchField]:
        """Adjacent label/input pairs, recursing into non-input containers."""
        if depth > self.config.search_max_depth:
            return []

        fields: List[SearchField] = []
        children = sort_by_position(visible_children(node))
        index = 0
        while index < len(children):
            current = children[index]
            following = children[index + 1] if index + 1 < len(children) else None
            paired = following is not None and self.layout.is_label_input_pair(current, following)

            if current.is_text and self._is_toggle_label(current.characters):
                index += 2 if paired else 1
                continue

            if paired:
                fields.append(self._make_field(current, following))
                index += 2
                continue

            if current.is_container and not self._is_input_like(current):
                fields.extend(self.scan_fields(current, depth + 1))
            index += 1

        return fields

    def _is_toggle_label(self, text: str) -> bool:
        content = text.strip().lower()
        return any(label in content for label in SEARCH_TOGGLE_LABELS)

    def _is_input_like(self, node: VisualNode) -> bool:
        return self.naming.is_input_like(node.name) or self.layout.is_visually_like_input(node)

    def _make_field(self, label: VisualNode, control: VisualNode) -> SearchField:
        text = label.characters.strip().rstrip(":：").strip()
        return SearchField(
            label=text,
            key=to_key(text, default="field"),
            type=self.infer_field_type(text, control),
            placeholder=self._placeholder(control),
        )

    def infer_field_type(self, label: str, control: VisualNode) -> FieldType:
        """Label keywords first, then the control's name, then its kind and shape."""
        for type_name, hints in FIELD_TYPE_HINTS.items():
            if has_hint(label, hints):
                return FieldType(type_name)

        if self.naming.is_date(control.name):
            return FieldType.DATE
        if self.naming.is_select(control.name):
            return FieldType.SELECT
        if self.naming.is_input(control.name):
            return FieldType.INPUT
        if control.kind == NodeKind.INSTANCE:
            return FieldType.INPUT
        if self.layout.is_visually_like_input(control):
            return FieldType.INPUT
        return FieldType.UNKNOWN

    def _placeholder(self, control: VisualNode) -> Optional[str]:
        for node in iter_descendants(control, self.config.search_max_depth):
            text = node.characters.strip()
            if text and any(pattern.search(text) for pattern in PLACEHOLDER_PATTERNS):
                return text
        return None

    def extract_search_buttons(self, area: VisualNode) -> Optional[ButtonGroup]:
        nodes = list(self._named_buttons(area, 0))
        buttons: List[SearchButton] = []
        kept: List[VisualNode] = []
        for node in sort_by_position(nodes):
            label = self.text_recovery.recover(node, "search")
            if not label:
                continue
            buttons.append(
                SearchButton(
                    type=self._search_button_type(label),
                    label=label,
                    key=to_key(label, default="button"),
                )
            )
            kept.append(node)

        if not buttons:
            return None
        return ButtonGroup(
            type=ButtonGroupType.SEARCH,
            buttons=buttons,
            layout=ButtonLayout(self.layout.infer_button_layout(kept)),
            align=ColumnAlign(self.layout.infer_button_align(kept, area.geometry)),
        )

    def _named_buttons(self, node: VisualNode, depth: int) -> Iterator[VisualNode]:
        if depth > self.config.search_max_depth:
            return
        for child in visible_children(node):
            if self.naming.is_button(child.name):
                yield child
            elif child.is_container:
                yield from self._named_buttons(child, depth + 1)

    def _search_button_type(self, label: str) -> SearchButtonType:
        content = label.lower()
        for type_name, keywords in SEARCH_BUTTON_KEYWORDS.items():
            if any(keyword in content for keyword in keywords):
                return SearchButtonType(type_name)
        return SearchButtonType.CUSTOM

    # --------------------------------------------------------------------------
    # Operation column
    # --------------------------------------------------------------------------

    def extract_action_column(
        self, scope: VisualNode, found: List[StructuralRole]
    ) -> Optional[ActionColumn]:
        """Row-level buttons from operation-named nodes below ``scope``."""
        queue = deque([(scope, 0)])
        visited: Set[int] = set()
        buttons: List[ActionButton] = []
        keys: Set[str] = set()

        while queue:
            node, depth = queue.popleft()
            if id(node) in visited or not node.visible:
                continue
            visited.add(id(node))

            if self._is_operation_node(node):
                if self._is_suspected_wrapper(node):
                    logger.debug(f"'{node.name}' looks like a wrapper, searching inside")
                else:
                    self._collect_action_buttons(node, buttons, keys)
                    continue

            if depth < self.config.bfs_max_depth:
                queue.extend((child, depth + 1) for child in node.children)

        if not buttons:
            return None

        found.append(StructuralRole.OPERATION_GROUP)
        logger.info(f"Found {len(buttons)} row actions")
        return ActionColumn(
            column=default_action_column(self.config.action_column_width),
            buttons=buttons,
        )

    def _is_operation_node(self, node: VisualNode) -> bool:
        if self.naming.is_action(node.name) and not self.naming.is_toolbar(node.name):
            return True
        return self.intelligence.has_role(node, StructuralRole.OPERATION_GROUP)

    def _is_suspected_wrapper(self, node: VisualNode) -> bool:
        return (
            node.width > self.config.wrapper_min_width
            and len(visible_children(node)) > self.config.wrapper_min_children
        )

    def _collect_action_buttons(
        self, node: VisualNode, buttons: List[ActionButton], keys: Set[str]
    ):
        candidates = visible_children(node) if node.children else [node]
        for candidate in candidates:
            label = self.text_recovery.recover(candidate, "action")
            if not label:
                continue
            if self.intelligence.should_exclude(label):
                continue
            if not self.intelligence.has_action_keyword(label):
                continue

            button_type = ActionButtonType(
                self.intelligence.infer_row_action(label, candidate.name)
            )
            key = (
                to_key(label, default="action")
                if button_type == ActionButtonType.CUSTOM
                else button_type.value
            )
            if key in keys:
                continue
            keys.add(key)
            buttons.append(self.make_action_button(button_type, label, key))

    def make_action_button(
        self, button_type: ActionButtonType, label: str, key: str
    ) -> ActionButton:
        if button_type == ActionButtonType.DELETE:
            return ActionButton(
                type=button_type,
                label=label,
                key=key,
                danger=True,
                confirm=ConfirmPrompt(
                    title=DELETE_CONFIRM_TITLE, content=DELETE_CONFIRM_CONTENT
                ),
            )
        return ActionButton(type=button_type, label=label, key=key)

    def drop_action_columns(self, columns: List[TableColumn]) -> List[TableColumn]:
        """Remove plain columns that duplicate the operation column."""
        kept = []
        for column in columns:
            if column.data_index == "actions" or self.intelligence.is_operation_title(column.title):
                logger.debug(f"Plain operation column '{column.title}' removed")
                continue
            kept.append(column)
        return kept

    # --------------------------------------------------------------------------
    # Toolbar
    # --------------------------------------------------------------------------

    def extract_toolbar(
        self, root: VisualNode, found: List[StructuralRole]
    ) -> Optional[ToolbarArea]:
        area = self.find_by_role(root, StructuralRole.ACTION_GROUP)
        if area is None:
            logger.debug("No toolbar found")
            return None

        found.append(StructuralRole.ACTION_GROUP)
        labelled: List[Tuple[VisualNode, str]] = []
        for node in self._toolbar_candidates(area, 0):
            label = self.text_recovery.recover(node, "toolbar")
            if label and not self.intelligence.should_exclude(label):
                labelled.append((node, label))

        if not labelled:
            logger.debug(f"Toolbar '{area.name}' has no usable buttons")
            return None

        nodes = [node for node, _ in labelled]
        labels = {id(node): label for node, label in labelled}
        groups = self.layout.identify_button_groups(nodes)
        grouped = {id(member) for group in groups for member in group}
        groups.extend([node] for node in nodes if id(node) not in grouped)

        left, right = self.layout.split_by_side(groups, area.geometry)
        keys: Set[str] = set()
        toolbar = ToolbarArea(
            left=self._toolbar_group(left, FixedSide.LEFT, labels, keys, area),
            right=self._toolbar_group(right, FixedSide.RIGHT, labels, keys, area),
        )
        logger.info(f"Found toolbar '{area.name}' with {len(keys)} buttons")
        return toolbar if keys else None

    def _toolbar_candidates(self, node: VisualNode, depth: int) -> Iterator[VisualNode]:
        if depth > self.config.button_max_depth:
            return
        for child in visible_children(node):
            if (
                self.naming.is_button(child.name)
                or child.kind == NodeKind.INSTANCE
                or child.is_text
            ):
                yield child
            elif child.is_container:
                yield from self._toolbar_candidates(child, depth + 1)

    def _toolbar_group(
        self,
        nodes: List[VisualNode],
        side: FixedSide,
        labels: Dict[int, str],
        keys: Set[str],
        area: VisualNode,
    ) -> Optional[ButtonGroup]:
        buttons: List[ToolbarButton] = []
        kept: List[VisualNode] = []
        for node in sort_by_position(nodes):
            label = labels[id(node)]
            button_type = ToolbarButtonType(
                self.intelligence.infer_toolbar_action(label, node.name)
            )
            key = (
                to_key(label, default="button")
                if button_type == ToolbarButtonType.CUSTOM
                else button_type.value
            )
            if key in keys:
                continue
            keys.add(key)
            buttons.append(
                ToolbarButton(
                    type=button_type,
                    label=label,
                    key=key,
                    position=side,
                    danger=True if self.intelligence.is_danger(label) else None,
                )
            )
            kept.append(node)

        if not buttons:
            return None
        return ButtonGroup(
            type=ButtonGroupType.TOOLBAR,
            buttons=buttons,
            layout=ButtonLayout(self.layout.infer_button_layout(kept)),
            align=ColumnAlign(self.layout.infer_button_align(kept, area.geometry)),
        )


# Singleton
_extractor: Optional[TableExtractor] = None


def get_extractor() -> TableExtractor:
    """Get or create the singleton TableExtractor instance."""
    global _extractor
    if _extractor is None:
        _extractor = TableExtractor()
    return _extractor


def extract_table_page(root: Union[VisualNode, Dict[str, Any]]) -> TablePageModel:
    """
    Extract a table page model from a design tree (synchronous).

    Args:
        root: Root VisualNode or host payload

    Returns:
        TablePageModel
    """
    extractor = get_extractor()
    return extractor.extract(root)


async def extract_table_page_async(
    root: Union[VisualNode, Dict[str, Any]]
) -> TablePageModel:
    """
    Extract a table page model from a design tree (async).

    Runs the extraction in a thread pool to avoid blocking the event loop.

    Args:
        root: Root VisualNode or host payload

    Returns:
        TablePageModel
    """
    extractor = get_extractor()
    return await asyncio.to_thread(extractor.extract, root)
