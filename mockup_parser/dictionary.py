"""
Semantic Dictionary: keyword tables driving role resolution and naming.

Built once at import time and never mutated. To customize recognition,
build a new tuple of SemanticEntry objects and pass it to a new
IntelligenceEngine instead of editing these tables.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple


# ==============================================================================
# ROLES
# ==============================================================================


class StructuralRole(str, Enum):
    """Structural role of a node inside a list/table page."""

    TABLE_CONTAINER = "TableContainer"
    HEADER_AREA = "HeaderArea"
    BODY_AREA = "BodyArea"
    SEARCH_AREA = "SearchArea"
    ACTION_GROUP = "ActionGroup"
    OPERATION_GROUP = "OperationGroup"
    DATA_GRID = "DataGrid"
    PAGINATION_BAR = "PaginationBar"


# Expected parent -> children. Advisory only, never enforced.
TABLE_HIERARCHY: Mapping[StructuralRole, Tuple[StructuralRole, ...]] = MappingProxyType(
    {
        StructuralRole.TABLE_CONTAINER: (
            StructuralRole.HEADER_AREA,
            StructuralRole.BODY_AREA,
        ),
        StructuralRole.BODY_AREA: (
            StructuralRole.SEARCH_AREA,
            StructuralRole.ACTION_GROUP,
            StructuralRole.DATA_GRID,
            StructuralRole.PAGINATION_BAR,
        ),
        StructuralRole.DATA_GRID: (StructuralRole.OPERATION_GROUP,),
    }
)

REQUIRED_ROLES: Tuple[StructuralRole, ...] = (StructuralRole.DATA_GRID,)


# ==============================================================================
# SEMANTIC ENTRIES
# ==============================================================================


def _intent(**groups: Tuple[str, ...]) -> Mapping[str, Tuple[str, ...]]:
    return MappingProxyType(dict(groups))


@dataclass(frozen=True)
class SemanticEntry:
    """Matcher/exclude keywords for one role, plus optional intent vocabularies."""

    key: str
    role: Optional[StructuralRole]
    matchers: Tuple[str, ...]
    excludes: Tuple[str, ...] = ()
    weight: float = 1.0
    intent: Mapping[str, Tuple[str, ...]] = field(default_factory=_intent)

    def intent_words(self) -> Tuple[str, ...]:
        """All intent keywords, in group registration order."""
        words = []
        for group in self.intent.values():
            words.extend(group)
        return tuple(words)


HEADER_ENTRY = SemanticEntry(
    key="header",
    role=StructuralRole.HEADER_AREA,
    matchers=("header", "title", "caption", "heading", "top-bar", "标题", "页头"),
    excludes=("table", "row", "column", "cell", "表头", "thead"),
    weight=0.8,
)

SEARCH_ENTRY = SemanticEntry(
    key="search",
    role=StructuralRole.SEARCH_AREA,
    matchers=("search", "filter", "query", "搜索", "查询", "筛选", "过滤"),
    excludes=("button", "btn", "icon"),
    weight=0.9,
)

TOOLBAR_ENTRY = SemanticEntry(
    key="toolbar",
    role=StructuralRole.ACTION_GROUP,
    matchers=(
        "toolbar",
        "tool-bar",
        "tools",
        "buttongroup",
        "button-group",
        "buttons",
        "工具栏",
        "按钮组",
    ),
    weight=0.85,
    intent=_intent(
        primary=("add", "new", "create", "新增", "添加", "新建", "创建"),
        batch=("export", "import", "download", "upload", "导出", "导入", "批量"),
        system=("refresh", "reload", "sync", "刷新", "重新加载"),
    ),
)

OPERATIONS_ENTRY = SemanticEntry(
    key="operations",
    role=StructuralRole.OPERATION_GROUP,
    matchers=("operation", "actions", "action", "操作"),
    excludes=("toolbar", "tool-bar"),
    weight=0.85,
    intent=_intent(
        danger=("delete", "remove", "删除", "移除"),
        edit=("edit", "modify", "update", "编辑", "修改"),
        view=("view", "detail", "查看", "详情"),
    ),
)

GRID_ENTRY = SemanticEntry(
    key="grid",
    role=StructuralRole.DATA_GRID,
    matchers=("table", "grid", "list", "data", "columns", "数据表", "列表", "表格"),
    excludes=("container", "wrapper", "search", "filter", "toolbar", "pagination"),
    weight=1.2,
)

PAGINATION_ENTRY = SemanticEntry(
    key="pagination",
    role=StructuralRole.PAGINATION_BAR,
    matchers=("pagination", "pager", "page-control", "分页", "翻页", "页码"),
    weight=0.9,
)

BODY_ENTRY = SemanticEntry(
    key="body",
    role=StructuralRole.BODY_AREA,
    matchers=("body", "content", "main", "主体", "内容区"),
    excludes=("table", "grid"),
)

CONTAINER_ENTRY = SemanticEntry(
    key="container",
    role=StructuralRole.TABLE_CONTAINER,
    matchers=("table-container", "table-wrapper", "table-box", "grid-container"),
)

# Registration order is the tie-break order for role resolution.
SEMANTIC_DICTIONARY: Tuple[SemanticEntry, ...] = (
    HEADER_ENTRY,
    SEARCH_ENTRY,
    TOOLBAR_ENTRY,
    OPERATIONS_ENTRY,
    GRID_ENTRY,
    PAGINATION_ENTRY,
    BODY_ENTRY,
    CONTAINER_ENTRY,
)

# Batch-intent words that mean "import" rather than "export"
IMPORT_KEYWORDS: Tuple[str, ...] = ("import", "upload", "导入")


# ==============================================================================
# NAMING KEYWORDS
# ==============================================================================

NAMING_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "row": ("row", "record", "行", "记录"),
    "column": ("cell", "column", "col-", "列", "单元格"),
    "input": ("input", "text", "field", "输入框"),
    "select": ("select", "dropdown", "picker", "选择器", "下拉"),
    "date": ("date", "time", "calendar", "日期", "时间"),
    "button": ("button", "btn", "按钮"),
    "header": ("header", "thead", "表头"),
    "content": ("content", "body", "main", "内容", "主体"),
    "container": ("container", "wrapper", "box", "area", "容器", "区域"),
}

NAME_SEPARATORS: Tuple[str, ...] = ("-", "_", " ")


# ==============================================================================
# TEXT PATTERNS
# ==============================================================================

# Text that is never a row action label
EXCLUSION_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(
        r"^(active|inactive|enabled|disabled|online|offline|success|failed|pending|"
        r"启用|禁用|正常|异常|成功|失败|待审核)$",
        re.IGNORECASE,
    ),
    re.compile(r"(共|total).*(\d+|条|rows|items)", re.IGNORECASE),
    re.compile(r"(第|page).*(\d+|页)", re.IGNORECASE),
    re.compile(r"^\d+(/\d+)?$"),
    re.compile(r"^.{25,}$", re.DOTALL),
)

COUNTER_PATTERN = re.compile(r"(共|total).*(\d+|条|rows|items)", re.IGNORECASE)

# Labels in a search area that toggle the panel instead of naming a field
SEARCH_TOGGLE_LABELS: Tuple[str, ...] = (
    "收起",
    "展开",
    "高级搜索",
    "更多",
    "expand",
    "collapse",
    "advanced",
    "more filters",
)

FIELD_TYPE_HINTS: Dict[str, Tuple[str, ...]] = {
    "date": ("日期", "时间", "年份", "月份", "date", "time", "period"),
    "select": ("下拉", "选择", "类型", "状态", "select", "choose", "type", "status"),
}

PLACEHOLDER_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"^请输入"),
    re.compile(r"^请选择"),
    re.compile(r"^输入"),
    re.compile(r"^选择"),
    re.compile(r"^please\s+(enter|select|input|choose)", re.IGNORECASE),
    re.compile(r"^(enter|select|choose|search)\b", re.IGNORECASE),
    re.compile(r"placeholder", re.IGNORECASE),
    re.compile(r"hint", re.IGNORECASE),
)

# Column-discovery name patterns
EXPLICIT_COLUMNS_PATTERN = re.compile(r"columns|表头|列定义", re.IGNORECASE)
COLUMN_COMPONENT_PATTERN = re.compile(r"列|column", re.IGNORECASE)
LAYOUT_WRAPPER_PATTERN = re.compile(r"group|left|right|center|middle|layout|auto", re.IGNORECASE)
TITLE_NAME_PATTERN = re.compile(r"title|header|name|label|caption|text|标题|名称|文字", re.IGNORECASE)
TITLE_LIKE_GRID_PATTERN = re.compile(r"title|header|caption|标题|表头", re.IGNORECASE)

SEARCH_TEXT_KEYWORDS: Tuple[str, ...] = (
    "搜索",
    "查询",
    "筛选",
    "关键字",
    "keyword",
    "search",
    "filter",
    "query",
)

PAGE_TITLE_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"^.*列表$"),
    re.compile(r"^.*管理$"),
    re.compile(r"^.*信息$"),
    re.compile(r"^用户.*$"),
    re.compile(r"^.*页面$"),
    re.compile(r"^.+\s(list|management|overview)$", re.IGNORECASE),
)

# Column title keyword -> column data type
COLUMN_TYPE_HINTS: Dict[str, Tuple[str, ...]] = {
    "date": ("date", "time", "created", "updated", "日期", "时间"),
    "number": (
        "amount",
        "count",
        "qty",
        "quantity",
        "price",
        "total",
        "age",
        "数量",
        "金额",
        "价格",
        "年龄",
    ),
}

# Search-area button intents
SEARCH_BUTTON_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "reset": ("reset", "clear", "重置", "清空"),
    "search": ("search", "query", "filter", "搜索", "查询", "筛选"),
}

# Confirmation prompt attached to every delete button
DELETE_CONFIRM_TITLE = "Confirm delete"
DELETE_CONFIRM_CONTENT = "Are you sure you want to delete this record?"
