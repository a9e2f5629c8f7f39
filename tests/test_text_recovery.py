"""Tests for button label recovery."""

import pytest

from mockup_parser.text_recovery import Candidate, TextRecovery, is_icon_like, is_placeholder_text


@pytest.fixture
def recovery():
    return TextRecovery()


class TestPlaceholders:
    @pytest.mark.parametrize(
        "value", ["text", "Text", "true", "FALSE", "primary", "small", "12:34", "12:34;5:6", "icon-plus", "deadbeef00"]
    )
    def test_placeholder(self, value):
        assert is_placeholder_text(value)

    @pytest.mark.parametrize("value", ["Add User", "删除", "Export"])
    def test_real_label(self, value):
        assert not is_placeholder_text(value)

    def test_icon_like(self):
        assert is_icon_like(Candidate(text="+", source="label"))
        assert is_icon_like(Candidate(text="🗑", source="label"))
        assert is_icon_like(Candidate(text="Plus", source="icon/plus"))
        assert not is_icon_like(Candidate(text="Add", source="label"))


class TestRecover:
    def test_text_node_itself(self, recovery, nodes):
        assert recovery.recover(nodes.text("Edit")) == "Edit"

    def test_nested_text(self, recovery, nodes):
        button = nodes.frame("btn", [nodes.frame("inner", [nodes.text("Delete")])])
        assert recovery.recover(button) == "Delete"

    def test_hidden_text_ignored(self, recovery, nodes):
        button = nodes.frame("btn", [nodes.text("Hidden", visible=False), nodes.text("Shown")])
        assert recovery.recover(button) == "Shown"

    def test_longest_wins(self, recovery, nodes):
        button = nodes.frame("btn", [nodes.text("Add"), nodes.text("Add User")])
        assert recovery.recover(button) == "Add User"

    def test_icon_children_dropped(self, recovery, nodes):
        button = nodes.frame("btn", [nodes.text("+", name="icon"), nodes.text("New")])
        assert recovery.recover(button) == "New"

    def test_instance_properties(self, recovery, nodes):
        button = nodes.instance(
            "Button",
            properties={
                "Label#12:0": {"type": "TEXT", "value": "Export"},
                "Type#12:1": {"type": "VARIANT", "value": "primary"},
            },
        )
        assert recovery.recover(button) == "Export"

    def test_nested_property_value(self, recovery, nodes):
        button = nodes.instance("Button", properties={"text": {"value": {"value": "Import"}}})
        assert recovery.recover(button) == "Import"

    def test_instance_overrides(self, recovery, nodes):
        button = nodes.instance("Button", overrides={"1:2": {"characters": "Refresh"}})
        assert recovery.recover(button) == "Refresh"

    def test_placeholder_properties_skipped(self, recovery, nodes):
        button = nodes.instance(
            "Button", [nodes.text("View")], properties={"label": "text", "size": "small"}
        )
        assert recovery.recover(button) == "View"

    def test_raw_override_fallback(self, recovery, nodes):
        button = nodes.instance("Button", overrides={"label": "+"})
        assert recovery.recover(button) == "+"

    def test_placeholder_only_in_toolbar(self, recovery, nodes):
        button = nodes.instance("Button", properties={"label": "Button"})
        assert recovery.recover(button, "action") is None
        assert recovery.recover(button, "toolbar") == "Button"

    def test_nothing_found(self, recovery, nodes):
        assert recovery.recover(nodes.shape()) is None
