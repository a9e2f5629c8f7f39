"""Tests for the name-based classifier."""

import pytest

from mockup_parser.naming import NamingProtocol, has_hint, matches, to_key


class TestMatching:
    def test_case_insensitive_substring(self):
        assert matches("User-SEARCH-Panel", ["search"])
        assert not matches("userPanel", ["search"])

    def test_empty_name(self):
        assert not matches("", ["search"])

    def test_hints_match_whole_ascii_words(self):
        assert has_hint("Order Type", ["type"])
        assert not has_hint("Prototype", ["type"])
        assert not has_hint("Status code", ["stat"])

    def test_cjk_hints_match_substrings(self):
        assert has_hint("订单状态", ["状态"])
        assert not has_hint("", ["状态"])


class TestClassify:
    @pytest.fixture
    def naming(self):
        return NamingProtocol()

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("table-search", "table-search"),
            ("search-container", "search"),
            ("user-list", "table"),
            ("row-1", "table-row"),
            ("name-column", "table-column"),
            ("keyword-input", "input"),
            ("status-dropdown", "select"),
            ("calendar", "date"),
            ("submit-btn", "button"),
            ("thead", "header"),
            ("page-title", "title"),
            ("action", "action"),
            ("toolbar", "toolbar"),
            ("pagination", "pagination"),
            ("delete", "operation"),
            ("main", "content"),
            ("wrapper", "container"),
            ("Rectangle 12", "unknown"),
            ("", "unknown"),
        ],
    )
    def test_classify(self, naming, name, expected):
        assert naming.classify(name) == expected

    def test_table_search_needs_both(self, naming):
        assert naming.is_table_search_area("table-search")
        assert not naming.is_table_search_area("search")

    def test_chinese_names(self, naming):
        assert naming.classify("搜索区域") == "search"
        assert naming.classify("数据表格") == "table"


class TestCompoundNames:
    @pytest.fixture
    def naming(self):
        return NamingProtocol()

    def test_parse(self, naming):
        parsed = naming.parse_compound_name("user-search-panel")
        assert parsed.prefix == "user"
        assert parsed.type == "search"
        assert parsed.suffix == "panel"
        assert parsed.parts == ["user", "search", "panel"]

    def test_mixed_separators(self, naming):
        parsed = naming.parse_compound_name("my_keyword input")
        assert parsed.parts == ["my", "keyword", "input"]
        assert parsed.type == "input"

    def test_unmatched(self, naming):
        parsed = naming.parse_compound_name("foo-bar")
        assert parsed.type == "unknown"
        assert parsed.prefix == ""

    def test_empty(self, naming):
        parsed = naming.parse_compound_name("")
        assert parsed.type == ""
        assert parsed.parts == []

    def test_validate_empty(self, naming):
        result = naming.validate_name("  ")
        assert not result.is_valid
        assert "Name is empty" in result.issues

    def test_validate_unknown_type(self, naming):
        result = naming.validate_name("foo-bar")
        assert not result.is_valid
        assert "Unrecognized component type" in result.issues

    def test_validate_single_part_suggests_compound(self, naming):
        result = naming.validate_name("input")
        assert result.is_valid
        assert any("compound" in s for s in result.suggestions)


class TestToKey:
    def test_slug(self):
        assert to_key("User Name") == "user_name"
        assert to_key("  Created--At!! ") == "created_at"

    def test_chinese_kept(self):
        assert to_key("用户 名称") == "用户_名称"

    def test_empty_uses_default(self):
        assert to_key("!!!") == "column"
        assert to_key("", default="field") == "field"
