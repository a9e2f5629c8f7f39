"""Shared fixtures for tests."""

import itertools

import pytest

from mockup_parser.node import Geometry, NodeKind, VisualNode


class NodeFactory:
    """Builds VisualNode trees with sequential ids."""

    def __init__(self):
        self._ids = itertools.count(1)

    def _node(self, kind, name, x, y, width, height, **kwargs):
        return VisualNode(
            id=f"n{next(self._ids)}",
            name=name,
            kind=kind,
            geometry=Geometry(x=x, y=y, width=width, height=height),
            **kwargs,
        )

    def text(self, characters, x=0, y=0, width=40, height=20, name=None, **kwargs):
        return self._node(
            NodeKind.TEXT,
            characters if name is None else name,
            x, y, width, height,
            text=characters,
            **kwargs,
        )

    def frame(self, name, children=(), x=0, y=0, width=100, height=40, **kwargs):
        return self._node(
            NodeKind.CONTAINER, name, x, y, width, height, children=list(children), **kwargs
        )

    def shape(self, name="Rectangle", x=0, y=0, width=100, height=30, **kwargs):
        return self._node(NodeKind.SHAPE, name, x, y, width, height, **kwargs)

    def instance(self, name, children=(), x=0, y=0, width=80, height=32, **kwargs):
        return self._node(
            NodeKind.INSTANCE, name, x, y, width, height, children=list(children), **kwargs
        )


@pytest.fixture
def nodes():
    return NodeFactory()


@pytest.fixture
def user_list_page(nodes):
    """
    Search area with one labelled input, and a table whose header row
    ends in an "Actions" column with one "Edit" button per row.
    """
    search = nodes.frame(
        "search-container",
        [
            nodes.text("Name", x=0, y=20, width=40, height=20),
            nodes.shape("Rectangle", x=50, y=15, width=200, height=30, has_stroke=True),
        ],
        x=0, y=0, width=1000, height=60,
    )
    header_row = nodes.frame(
        "header-row",
        [
            nodes.text("Name", x=0, y=80, width=100, height=20),
            nodes.text("Age", x=300, y=80, width=100, height=20),
            nodes.text("Actions", x=600, y=80, width=100, height=20),
        ],
        x=0, y=80, width=1000, height=30,
    )
    row = nodes.frame(
        "row",
        [
            nodes.text("Alice", x=0, y=120, width=100, height=20),
            nodes.text("30", x=300, y=120, width=40, height=20),
            nodes.frame(
                "operation",
                [nodes.text("Edit", x=600, y=120, width=40, height=20)],
                x=600, y=120, width=120, height=20,
            ),
        ],
        x=0, y=120, width=1000, height=30,
    )
    table = nodes.frame("table", [header_row, row], x=0, y=80, width=1000, height=400)
    return nodes.frame("page", [search, table], x=0, y=0, width=1200, height=800)


@pytest.fixture
def scattered_texts_page(nodes):
    """Five unnamed texts with no geometric relationship."""
    texts = [
        nodes.text("Lorem", x=0, y=0, name=""),
        nodes.text("Ipsum", x=137, y=50, name=""),
        nodes.text("Dolor", x=311, y=100, name=""),
        nodes.text("Sit", x=460, y=150, name=""),
        nodes.text("Amet", x=602, y=200, name=""),
    ]
    return nodes.frame("", texts, x=0, y=0, width=800, height=300)


@pytest.fixture
def full_page(nodes):
    """Header, search with buttons, toolbar, table with delete and view actions."""
    header = nodes.frame(
        "page-header",
        [
            nodes.text("User Management", x=0, y=0, width=200, height=32, font_size=24),
            nodes.text("Manage all accounts", x=0, y=36, width=200, height=16, font_size=12),
            nodes.text("Total 20 rows", x=900, y=36, width=100, height=16, font_size=12),
        ],
        x=0, y=0, width=1000, height=60,
    )
    search = nodes.frame(
        "search-area",
        [
            nodes.text("Created Date", x=0, y=80, width=80, height=20),
            nodes.instance("DatePicker", x=90, y=75, width=200, height=30),
            nodes.text("Status", x=320, y=80, width=40, height=20),
            nodes.instance("Select", x=370, y=75, width=200, height=30),
            nodes.instance(
                "search-button",
                [nodes.text("Search", x=810, y=80, width=50, height=20)],
                x=800, y=75, width=80, height=30,
            ),
            nodes.instance(
                "reset-button",
                [nodes.text("Reset", x=900, y=80, width=50, height=20)],
                x=890, y=75, width=80, height=30,
            ),
        ],
        x=0, y=70, width=1000, height=40,
    )
    toolbar = nodes.frame(
        "toolbar",
        [
            nodes.instance(
                "btn-add",
                [nodes.text("Add User", x=10, y=130, width=60, height=20)],
                x=0, y=125, width=80, height=32,
            ),
            nodes.instance(
                "btn-export",
                [nodes.text("Export", x=830, y=130, width=50, height=20)],
                x=820, y=125, width=80, height=32,
            ),
            nodes.instance(
                "btn-import",
                [nodes.text("Import", x=920, y=130, width=50, height=20)],
                x=910, y=125, width=80, height=32,
            ),
        ],
        x=0, y=120, width=1000, height=40,
    )
    header_row = nodes.frame(
        "thead",
        [
            nodes.text("Name", x=0, y=180, width=200, height=20),
            nodes.text("Amount", x=250, y=180, width=200, height=20),
            nodes.text("Created At", x=500, y=180, width=200, height=20),
            nodes.text("操作", x=800, y=180, width=150, height=20),
        ],
        x=0, y=180, width=1000, height=30,
    )
    row = nodes.frame(
        "row-1",
        [
            nodes.text("Alice", x=0, y=220, width=100, height=20),
            nodes.frame(
                "actions",
                [
                    nodes.text("View", x=800, y=220, width=30, height=20),
                    nodes.text("Delete", x=840, y=220, width=40, height=20),
                ],
                x=800, y=220, width=150, height=20,
            ),
        ],
        x=0, y=220, width=1000, height=30,
    )
    table = nodes.frame("data-table", [header_row, row], x=0, y=170, width=1000, height=300)
    return nodes.frame(
        "page", [header, search, toolbar, table], x=0, y=0, width=1000, height=600
    )
