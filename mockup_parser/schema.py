"""
Table Page Schema: Pydantic models for the extracted list/table page.

Field names are snake_case in Python and serialize to camelCase
(``dataIndex``, ``rowSelection``, ``actionColumn``) via ``to_dict``.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from mockup_parser.dictionary import StructuralRole


class CamelModel(BaseModel):
    """Base model serializing to camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==============================================================================
# ENUMS
# ==============================================================================


class FieldType(str, Enum):
    """Search field control type."""

    INPUT = "input"
    SELECT = "select"
    DATE = "date"
    UNKNOWN = "unknown"


class ColumnAlign(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class ColumnType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    ACTION = "action"


class FixedSide(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class ButtonGroupType(str, Enum):
    SEARCH = "search"
    TOOLBAR = "toolbar"
    ACTION = "action"


class ButtonLayout(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class SearchButtonType(str, Enum):
    SEARCH = "search"
    RESET = "reset"
    CUSTOM = "custom"


class ToolbarButtonType(str, Enum):
    """Page-level toolbar button intent."""

    ADD = "add"
    EXPORT = "export"
    IMPORT = "import"
    REFRESH = "refresh"
    CUSTOM = "custom"


class ActionButtonType(str, Enum):
    """Row-level operation button intent."""

    EDIT = "edit"
    DELETE = "delete"
    VIEW = "view"
    CUSTOM = "custom"


# ==============================================================================
# BUTTONS
# ==============================================================================


class ConfirmPrompt(CamelModel):
    title: str
    content: Optional[str] = None


class Button(CamelModel):
    label: str = Field(..., min_length=1)
    key: str = Field(..., min_length=1)
    danger: Optional[bool] = None


class SearchButton(Button):
    type: SearchButtonType = SearchButtonType.CUSTOM


class ToolbarButton(Button):
    type: ToolbarButtonType = ToolbarButtonType.CUSTOM
    position: Optional[FixedSide] = None


class ActionButton(Button):
    """Row-level button. Delete buttons always carry danger and a confirm prompt."""

    type: ActionButtonType = ActionButtonType.CUSTOM
    confirm: Optional[ConfirmPrompt] = None


class ButtonGroup(CamelModel):
    """Ordered buttons plus their geometrically inferred layout."""

    type: ButtonGroupType
    buttons: List[Union[ToolbarButton, ActionButton, SearchButton]] = Field(
        default_factory=list
    )
    layout: ButtonLayout = ButtonLayout.HORIZONTAL
    align: ColumnAlign = ColumnAlign.LEFT


# ==============================================================================
# AREAS
# ==============================================================================


class HeaderArea(CamelModel):
    role: StructuralRole = StructuralRole.HEADER_AREA
    title: str
    level: int = Field(1, ge=1, le=6)
    subtitle: Optional[str] = None
    extra: Optional[str] = None


class SearchField(CamelModel):
    """Label/input pair inside the search area."""

    label: str
    key: str
    type: FieldType = FieldType.INPUT
    placeholder: Optional[str] = None


class SearchArea(CamelModel):
    role: StructuralRole = StructuralRole.SEARCH_AREA
    fields: List[SearchField] = Field(default_factory=list)
    buttons: Optional[ButtonGroup] = None


class ToolbarArea(CamelModel):
    role: StructuralRole = StructuralRole.ACTION_GROUP
    left: Optional[ButtonGroup] = None
    right: Optional[ButtonGroup] = None


class TableColumn(CamelModel):
    """Plain data column."""

    title: str
    data_index: str
    width: Optional[float] = None
    align: ColumnAlign = ColumnAlign.LEFT
    type: Optional[ColumnType] = None
    fixed: Optional[FixedSide] = None

    @field_validator("data_index")
    @classmethod
    def validate_data_index(cls, v):
        """dataIndex must be a non-empty slug."""
        if not v or not v.strip():
            raise ValueError("dataIndex must not be empty")
        return v


def default_action_column(width: float = 150.0) -> TableColumn:
    return TableColumn(
        title="Actions",
        data_index="actions",
        type=ColumnType.ACTION,
        width=width,
        align=ColumnAlign.CENTER,
        fixed=FixedSide.RIGHT,
    )


class ActionColumn(CamelModel):
    column: TableColumn = Field(default_factory=default_action_column)
    buttons: List[ActionButton] = Field(default_factory=list)


class RowSelection(CamelModel):
    type: str = "checkbox"
    show_select_all: bool = True


class TableArea(CamelModel):
    role: StructuralRole = StructuralRole.DATA_GRID
    columns: List[TableColumn] = Field(default_factory=list)
    row_selection: RowSelection = Field(default_factory=RowSelection)
    action_column: Optional[ActionColumn] = None


class PaginationBar(CamelModel):
    role: StructuralRole = StructuralRole.PAGINATION_BAR
    enabled: bool = True
    page_size: int = Field(20, gt=0)
    show_size_changer: bool = True
    show_quick_jumper: bool = True


class BodyArea(CamelModel):
    role: StructuralRole = StructuralRole.BODY_AREA
    search: Optional[SearchArea] = None
    toolbar: Optional[ToolbarArea] = None
    table: TableArea = Field(default_factory=TableArea)
    pagination: Optional[PaginationBar] = None


class TablePageModel(CamelModel):
    """Complete list/table page model."""

    type: str = "table-page"
    role: StructuralRole = StructuralRole.TABLE_CONTAINER
    header: Optional[HeaderArea] = None
    body: BodyArea = Field(default_factory=BodyArea)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "type": "table-page",
                "role": "TableContainer",
                "header": {"role": "HeaderArea", "title": "Users", "level": 1},
                "body": {
                    "role": "BodyArea",
                    "search": {
                        "role": "SearchArea",
                        "fields": [{"label": "Name", "key": "name", "type": "input"}],
                    },
                    "table": {
                        "role": "DataGrid",
                        "columns": [
                            {"title": "Name", "dataIndex": "name", "align": "left", "type": "text"}
                        ],
                        "rowSelection": {"type": "checkbox", "showSelectAll": True},
                    },
                    "pagination": {
                        "role": "PaginationBar",
                        "enabled": True,
                        "pageSize": 20,
                        "showSizeChanger": True,
                        "showQuickJumper": True,
                    },
                },
            }
        },
    )


def to_dict(model: BaseModel) -> Dict[str, Any]:
    """JSON-ready dict with camelCase keys and unset optionals omitted."""
    return model.model_dump(by_alias=True, exclude_none=True, mode="json")


# ==============================================================================
# VALIDATION
# ==============================================================================


class PageValidationResult(BaseModel):
    """Result of page model validation."""

    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    def add_error(self, error: str):
        self.errors.append(error)
        self.valid = False

    def add_warning(self, warning: str):
        self.warnings.append(warning)


def validate_page_model(model: TablePageModel) -> PageValidationResult:
    """
    Advisory consistency checks on an extracted page.

    Returns:
        PageValidationResult with errors and warnings
    """
    result = PageValidationResult(valid=True)
    table = model.body.table

    seen = set()
    for column in table.columns:
        if column.data_index in seen:
            result.add_error(f"Duplicate dataIndex: {column.data_index}")
        seen.add(column.data_index)

    if table.action_column and table.action_column.buttons and "actions" in seen:
        result.add_error("Plain 'actions' column duplicates the action column")

    if not table.columns:
        result.add_warning("No table columns recognized")

    if model.body.search is None or not model.body.search.fields:
        result.add_warning("No search fields recognized")

    if model.header is None:
        result.add_warning("No page header recognized")

    return result
