"""Tests for the structural table-page extractor."""

import pytest

from mockup_parser.dictionary import StructuralRole
from mockup_parser.extractor import (
    TableExtractor,
    extract_table_page,
    extract_table_page_async,
    get_extractor,
    heading_level,
)
from mockup_parser.schema import (
    ActionButtonType,
    ColumnType,
    FieldType,
    SearchButtonType,
    ToolbarButtonType,
    to_dict,
)


@pytest.fixture
def extractor():
    return TableExtractor()


class TestUserListScenario:
    def test_search_field(self, extractor, user_list_page):
        model = extractor.extract(user_list_page)
        fields = model.body.search.fields
        assert len(fields) == 1
        assert fields[0].label == "Name"
        assert fields[0].key == "name"
        assert fields[0].type == FieldType.INPUT

    def test_plain_columns(self, extractor, user_list_page):
        model = extractor.extract(user_list_page)
        columns = model.body.table.columns
        assert [c.title for c in columns] == ["Name", "Age"]
        assert [c.data_index for c in columns] == ["name", "age"]
        assert columns[1].type == ColumnType.NUMBER

    def test_action_column(self, extractor, user_list_page):
        model = extractor.extract(user_list_page)
        action_column = model.body.table.action_column
        assert action_column is not None
        assert [(b.type, b.label) for b in action_column.buttons] == [
            (ActionButtonType.EDIT, "Edit")
        ]
        assert action_column.column.data_index == "actions"
        assert action_column.column.width == 150

    def test_no_actions_among_plain_columns(self, extractor, user_list_page):
        model = extractor.extract(user_list_page)
        assert all(c.data_index != "actions" for c in model.body.table.columns)

    def test_no_header_or_toolbar(self, extractor, user_list_page):
        model = extractor.extract(user_list_page)
        assert model.header is None
        assert model.body.toolbar is None


class TestScatteredTextsScenario:
    def test_empty_model(self, extractor, scattered_texts_page):
        model = extractor.extract(scattered_texts_page)
        assert model.header is None
        assert model.body.search.fields == []
        assert model.body.table.columns == []
        assert model.body.table.action_column is None

    def test_table_always_present(self, extractor, scattered_texts_page):
        data = to_dict(extractor.extract(scattered_texts_page))
        assert data["body"]["table"]["columns"] == []

    def test_large_unnamed_text_is_not_a_header(self, extractor, nodes):
        texts = [
            nodes.text(word, x=i * 150, y=i * 50, name="", font_size=16)
            for i, word in enumerate(["Lorem", "Ipsum", "Dolor", "Sit", "Amet"])
        ]
        root = nodes.frame("", texts, width=800, height=300)
        assert extractor.extract(root).header is None


class TestFullPage:
    def test_header(self, extractor, full_page):
        header = extractor.extract(full_page).header
        assert header.title == "User Management"
        assert header.level == 1
        assert header.subtitle == "Manage all accounts"
        assert header.extra == "Total 20 rows"

    def test_search_fields_and_buttons(self, extractor, full_page):
        search = extractor.extract(full_page).body.search
        assert [(f.label, f.type) for f in search.fields] == [
            ("Created Date", FieldType.DATE),
            ("Status", FieldType.SELECT),
        ]
        assert [b.type for b in search.buttons.buttons] == [
            SearchButtonType.SEARCH,
            SearchButtonType.RESET,
        ]
        assert search.buttons.align.value == "right"

    def test_toolbar_sides(self, extractor, full_page):
        toolbar = extractor.extract(full_page).body.toolbar
        assert [b.type for b in toolbar.left.buttons] == [ToolbarButtonType.ADD]
        assert [b.type for b in toolbar.right.buttons] == [
            ToolbarButtonType.EXPORT,
            ToolbarButtonType.IMPORT,
        ]
        assert toolbar.left.buttons[0].label == "Add User"
        assert toolbar.right.align.value == "right"

    def test_columns(self, extractor, full_page):
        columns = extractor.extract(full_page).body.table.columns
        assert [c.title for c in columns] == ["Name", "Amount", "Created At"]
        assert [c.type for c in columns] == [ColumnType.TEXT, ColumnType.NUMBER, ColumnType.DATE]

    def test_row_actions(self, extractor, full_page):
        buttons = extractor.extract(full_page).body.table.action_column.buttons
        assert [b.type for b in buttons] == [ActionButtonType.VIEW, ActionButtonType.DELETE]
        delete = buttons[1]
        assert delete.danger is True
        assert delete.confirm is not None
        assert buttons[0].danger is None

    def test_fixed_defaults(self, extractor, full_page):
        data = to_dict(extractor.extract(full_page))
        assert data["type"] == "table-page"
        assert data["body"]["table"]["rowSelection"] == {"type": "checkbox", "showSelectAll": True}
        assert data["body"]["pagination"] == {
            "role": "PaginationBar",
            "enabled": True,
            "pageSize": 20,
            "showSizeChanger": True,
            "showQuickJumper": True,
        }


class TestProperties:
    def test_idempotent(self, extractor, full_page):
        assert to_dict(extractor.extract(full_page)) == to_dict(extractor.extract(full_page))

    def test_duplicate_action_buttons_collapse(self, extractor, nodes):
        rows = [
            nodes.frame(
                f"row-{i}",
                [nodes.frame("operation", [nodes.text("Edit")], x=600, y=i * 40, width=100)],
                y=i * 40,
            )
            for i in range(3)
        ]
        root = nodes.frame("page", [nodes.frame("table", rows, width=800, height=200)])
        buttons = extractor.extract(root).body.table.action_column.buttons
        assert [b.key for b in buttons] == ["edit"]

    def test_wrapper_guard_descends(self, extractor, nodes):
        cells = [nodes.text(t, x=i * 120) for i, t in enumerate(["Name", "Email", "Phone", "Role"])]
        wrapper = nodes.frame(
            "actions-wrapper",
            cells + [nodes.frame("operation", [nodes.text("Delete", x=600)], x=600, width=100)],
            width=800,
        )
        root = nodes.frame("page", [nodes.frame("table", [wrapper], width=800)])
        buttons = extractor.extract(root).body.table.action_column.buttons
        assert [b.type for b in buttons] == [ActionButtonType.DELETE]

    def test_sibling_rescue(self, extractor, nodes):
        caption = nodes.frame("table-title", [nodes.text("Orders")], width=800)
        body = nodes.frame(
            "table-body",
            [nodes.frame("thead", [nodes.text("Order No", x=0), nodes.text("Price", x=200)], width=800)],
            width=800,
        )
        root = nodes.frame("page", [caption, body], width=800)
        grid = extractor.find_data_grid(root)
        assert grid is body
        columns = extractor.extract(root).body.table.columns
        assert [c.title for c in columns] == ["Order No", "Price"]

    def test_degraded_search_scan(self, extractor, nodes):
        root = nodes.frame(
            "page",
            [
                nodes.frame(
                    "form-row",
                    [
                        nodes.text("Keyword", x=0, y=0, width=60, height=20),
                        nodes.instance("Field", x=70, y=0, width=200, height=20),
                    ],
                    width=400,
                ),
            ],
        )
        assert extractor.find_by_role(root, StructuralRole.SEARCH_AREA) is None
        fields = extractor.extract(root).body.search.fields
        assert [(f.label, f.type) for f in fields] == [("Keyword", FieldType.INPUT)]

    def test_toggle_labels_skipped(self, extractor, nodes):
        area = nodes.frame(
            "search",
            [
                nodes.text("Expand", x=0, y=0, width=50, height=20),
                nodes.shape("chevron", x=55, y=0, width=60, height=20, has_fill=True),
            ],
            width=400,
        )
        root = nodes.frame("page", [area])
        assert extractor.extract(root).body.search.fields == []

    def test_host_payload_accepted(self, extractor):
        payload = {
            "name": "page",
            "type": "FRAME",
            "children": [
                {
                    "name": "table",
                    "type": "FRAME",
                    "width": 600,
                    "children": [
                        {
                            "name": "header",
                            "type": "FRAME",
                            "width": 600,
                            "children": [
                                {"type": "TEXT", "characters": "Title", "x": 0, "width": 100},
                                {"type": "TEXT", "characters": "Author", "x": 200, "width": 100},
                            ],
                        }
                    ],
                }
            ],
        }
        columns = extractor.extract(payload).body.table.columns
        assert [c.data_index for c in columns] == ["title", "author"]

    def test_cyclic_tree_stays_bounded(self, extractor, user_list_page):
        table = user_list_page.children[1]
        table.children[1].children.append(user_list_page)
        model = extractor.extract(user_list_page)
        assert [c.title for c in model.body.table.columns] == ["Name", "Age"]
        assert [b.key for b in model.body.table.action_column.buttons] == ["edit"]

    def test_malformed_payload_propagates(self, extractor):
        with pytest.raises(ValueError):
            extractor.extract({"type": "FRAME", "children": "oops"})


class TestFieldType:
    @pytest.mark.parametrize(
        "label,expected",
        [
            ("Status", FieldType.SELECT),
            ("Order Type", FieldType.SELECT),
            ("Start Time", FieldType.DATE),
            ("订单状态", FieldType.SELECT),
            ("Prototype", FieldType.INPUT),
            ("Timeline", FieldType.INPUT),
        ],
    )
    def test_label_hints_match_whole_words(self, extractor, nodes, label, expected):
        control = nodes.shape("Rectangle", width=200, height=32, has_stroke=True)
        assert extractor.infer_field_type(label, control) == expected


class TestModuleFunctions:
    def test_heading_levels(self):
        assert heading_level(32) == 1
        assert heading_level(20) == 2
        assert heading_level(18) == 3
        assert heading_level(16) == 4
        assert heading_level(14) == 5
        assert heading_level(12) == 6
        assert heading_level(None) == 6

    def test_singleton(self):
        assert get_extractor() is get_extractor()

    def test_extract_table_page(self, user_list_page):
        model = extract_table_page(user_list_page)
        assert [c.title for c in model.body.table.columns] == ["Name", "Age"]

    @pytest.mark.asyncio
    async def test_extract_table_page_async(self, user_list_page):
        model = await extract_table_page_async(user_list_page)
        assert model.body.table.action_column.buttons[0].label == "Edit"
