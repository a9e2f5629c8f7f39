"""
Naming Protocol: classify nodes from their layer names.

Matching is case-insensitive substring containment against keyword
tables from the semantic dictionary. Nothing here looks at geometry.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, List

from mockup_parser.dictionary import (
    GRID_ENTRY,
    HEADER_ENTRY,
    NAME_SEPARATORS,
    NAMING_KEYWORDS,
    OPERATIONS_ENTRY,
    PAGINATION_ENTRY,
    SEARCH_ENTRY,
    TOOLBAR_ENTRY,
)

UNKNOWN = "unknown"

_KEY_SEPARATOR = re.compile(r"[^a-z0-9一-龥]+")
_ASCII_WORD = re.compile(r"[a-z]+")


@dataclass
class CompoundName:
    """Parsed parts of a compound layer name like ``user-search-input``."""

    prefix: str
    type: str
    suffix: str
    parts: List[str] = field(default_factory=list)


@dataclass
class NameValidation:
    """Advisory naming-convention check."""

    is_valid: bool
    issues: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)


def to_key(text: str, default: str = "column") -> str:
    """Slug used for dataIndex and field keys: ``"User Name"`` -> ``"user_name"``."""
    key = _KEY_SEPARATOR.sub("_", (text or "").strip().lower()).strip("_")
    return key or default


def matches(name: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring containment against any keyword."""
    if not name:
        return False
    normalized = name.lower()
    return any(keyword.lower() in normalized for keyword in keywords)


def has_hint(text: str, hints: Iterable[str]) -> bool:
    """Keyword hint lookup in free text; ASCII hints match whole words only."""
    content = (text or "").lower()
    words = set(_ASCII_WORD.findall(content))
    return any(hint in words if hint.isascii() else hint in content for hint in hints)


class NamingProtocol:
    """Name-based component classification."""

    def is_search_area(self, name: str) -> bool:
        return matches(name, SEARCH_ENTRY.matchers)

    def is_table_search_area(self, name: str) -> bool:
        return self.is_search_area(name) and self.is_table_area(name)

    def is_table_area(self, name: str) -> bool:
        return matches(name, GRID_ENTRY.matchers)

    def is_table_row(self, name: str) -> bool:
        return matches(name, NAMING_KEYWORDS["row"])

    def is_table_column(self, name: str) -> bool:
        return matches(name, NAMING_KEYWORDS["column"])

    def is_input(self, name: str) -> bool:
        return matches(name, NAMING_KEYWORDS["input"])

    def is_select(self, name: str) -> bool:
        return matches(name, NAMING_KEYWORDS["select"])

    def is_date(self, name: str) -> bool:
        return matches(name, NAMING_KEYWORDS["date"])

    def is_button(self, name: str) -> bool:
        return matches(name, NAMING_KEYWORDS["button"])

    def is_header(self, name: str) -> bool:
        """Column-header row (not the page header)."""
        return matches(name, NAMING_KEYWORDS["header"])

    def is_title(self, name: str) -> bool:
        return matches(name, HEADER_ENTRY.matchers)

    def is_action(self, name: str) -> bool:
        return matches(name, OPERATIONS_ENTRY.matchers)

    def is_toolbar(self, name: str) -> bool:
        return matches(name, TOOLBAR_ENTRY.matchers)

    def is_pagination(self, name: str) -> bool:
        return matches(name, PAGINATION_ENTRY.matchers)

    def is_operation_button(self, name: str) -> bool:
        return matches(name, OPERATIONS_ENTRY.intent_words())

    def is_content_area(self, name: str) -> bool:
        return matches(name, NAMING_KEYWORDS["content"])

    def is_container(self, name: str) -> bool:
        return matches(name, NAMING_KEYWORDS["container"])

    def is_input_like(self, name: str) -> bool:
        """Named as any form control (input, select or date)."""
        return self.is_input(name) or self.is_select(name) or self.is_date(name)

    def classify(self, name: str) -> str:
        """
        Business type of a name, most specific kind first.

        Returns:
            One of table-search, search, table, table-row, table-column,
            input, select, date, button, header, title, action, toolbar,
            pagination, operation, content, container or ``unknown``
        """
        checks = (
            ("table-search", self.is_table_search_area),
            ("search", self.is_search_area),
            ("table", self.is_table_area),
            ("table-row", self.is_table_row),
            ("table-column", self.is_table_column),
            ("input", self.is_input),
            ("select", self.is_select),
            ("date", self.is_date),
            ("button", self.is_button),
            ("header", self.is_header),
            ("title", self.is_title),
            ("action", self.is_action),
            ("toolbar", self.is_toolbar),
            ("pagination", self.is_pagination),
            ("operation", self.is_operation_button),
            ("content", self.is_content_area),
            ("container", self.is_container),
        )
        for business_type, check in checks:
            if check(name):
                return business_type
        return UNKNOWN

    def parse_compound_name(self, name: str) -> CompoundName:
        """
        Split a compound name and locate its type part.

        "user-search-input" -> prefix "user", type "search", suffix "input".
        """
        if not name:
            return CompoundName(prefix="", type="", suffix="", parts=[])

        parts = [name]
        for separator in NAME_SEPARATORS:
            parts = [piece for part in parts for piece in part.split(separator)]
        parts = [part for part in parts if part.strip()]

        if not parts:
            return CompoundName(prefix="", type="", suffix="", parts=[])

        for index, part in enumerate(parts):
            business_type = self.classify(part)
            if business_type != UNKNOWN:
                return CompoundName(
                    prefix="-".join(parts[:index]),
                    type=business_type,
                    suffix="-".join(parts[index + 1:]),
                    parts=parts,
                )

        return CompoundName(prefix="", type=UNKNOWN, suffix="", parts=parts)

    def validate_name(self, name: str) -> NameValidation:
        """Check a layer name against the naming convention. Never raises."""
        result = NameValidation(is_valid=True)

        if not name or not name.strip():
            result.issues.append("Name is empty")
            result.suggestions.append('Use a descriptive name such as "search-input"')
            result.is_valid = False
            return result

        parsed = self.parse_compound_name(name)
        if parsed.type == UNKNOWN:
            result.issues.append("Unrecognized component type")
            result.suggestions.append(
                'Include a component type in the name, e.g. "input", "button" or "table"'
            )

        if len(parsed.parts) == 1:
            result.suggestions.append(
                'Consider a compound name for readability, e.g. "user-search-input"'
            )

        result.is_valid = not result.issues
        return result
