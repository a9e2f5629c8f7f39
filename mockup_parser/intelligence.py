"""
Intelligence Engine: role resolution and action inference.

Confidence is binary: a name containing any matcher keyword of an entry
scores the fixed base confidence (0.8), anything else scores 0. Scores
are not weighted.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional, Sequence

from mockup_parser.config import DEFAULT_CONFIG, ExtractionConfig
from mockup_parser.dictionary import (
    EXCLUSION_PATTERNS,
    IMPORT_KEYWORDS,
    REQUIRED_ROLES,
    SEMANTIC_DICTIONARY,
    TABLE_HIERARCHY,
    SemanticEntry,
    StructuralRole,
)
from mockup_parser.node import VisualNode


@dataclass(frozen=True)
class RoleResolution:
    """Best role for a node and its confidence."""

    role: Optional[StructuralRole]
    confidence: float


NO_ROLE = RoleResolution(role=None, confidence=0.0)


@dataclass
class StructureValidation:
    valid: bool
    missing: List[StructuralRole] = field(default_factory=list)


class IntelligenceEngine:
    """
    Semantic-dictionary driven recognition.

    Args:
        dictionary: Ordered semantic entries; earlier entries win ties
        config: Confidence thresholds
    """

    def __init__(
        self,
        dictionary: Sequence[SemanticEntry] = SEMANTIC_DICTIONARY,
        config: ExtractionConfig = DEFAULT_CONFIG,
    ):
        self.dictionary = tuple(dictionary)
        self.config = config
        self._entries = {entry.key: entry for entry in self.dictionary}

    def entry(self, key: str) -> Optional[SemanticEntry]:
        return self._entries.get(key)

    def resolve_role(self, node: VisualNode) -> RoleResolution:
        """Highest-scoring role for the node's name, or no role below 0.6."""
        name = (node.name or "").lower()
        best = NO_ROLE

        for entry in self.dictionary:
            if entry.role is None:
                continue
            if any(exclude.lower() in name for exclude in entry.excludes):
                continue
            if any(matcher.lower() in name for matcher in entry.matchers):
                confidence = self.config.base_confidence
                if confidence > best.confidence:
                    best = RoleResolution(role=entry.role, confidence=confidence)

        if best.confidence < self.config.min_confidence:
            return NO_ROLE
        return best

    def has_role(self, node: VisualNode, role: StructuralRole) -> bool:
        resolution = self.resolve_role(node)
        return resolution.role == role and resolution.confidence > self.config.min_confidence

    def infer_toolbar_action(self, text: str, name: Optional[str] = None) -> str:
        """add / import / export / refresh / custom, checked in that priority."""
        content = (text or name or "").lower()
        intent = self._intent("toolbar")

        if _contains_any(content, intent.get("primary", ())):
            return "add"
        if _contains_any(content, intent.get("batch", ())):
            if _contains_any(content, IMPORT_KEYWORDS):
                return "import"
            return "export"
        if _contains_any(content, intent.get("system", ())):
            return "refresh"
        return "custom"

    def infer_row_action(self, text: str, name: Optional[str] = None) -> str:
        """delete / edit / view / custom. Destructive intent always wins."""
        content = (text or name or "").lower()
        intent = self._intent("operations")

        if _contains_any(content, intent.get("danger", ())):
            return "delete"
        if _contains_any(content, intent.get("edit", ())):
            return "edit"
        if _contains_any(content, intent.get("view", ())):
            return "view"
        return "custom"

    def is_danger(self, text: str) -> bool:
        return _contains_any((text or "").lower(), self._intent("operations").get("danger", ()))

    def should_exclude(self, text: str) -> bool:
        """Text that can never be an action label (column titles, counters, numbers)."""
        content = (text or "").strip().lower()
        if not content:
            return True

        operations = self.entry("operations")
        if operations is not None and any(m.lower() == content for m in operations.matchers):
            return True

        return any(pattern.search(content) for pattern in EXCLUSION_PATTERNS)

    def is_operation_title(self, text: str) -> bool:
        """Bare operation-column caption such as "Actions" or "操作"."""
        content = (text or "").strip().lower()
        operations = self.entry("operations")
        if not content or operations is None:
            return False
        return any(m.lower() == content for m in operations.matchers)

    def has_action_keyword(self, text: str) -> bool:
        content = (text or "").strip().lower()
        keywords: List[str] = []
        for key in ("toolbar", "operations"):
            entry = self.entry(key)
            if entry is None:
                continue
            keywords.extend(entry.matchers)
            keywords.extend(entry.intent_words())
        return _contains_any(content, keywords)

    def validate_structure(self, found_roles: Iterable[StructuralRole]) -> StructureValidation:
        """Valid iff every required role was found."""
        found = set(found_roles)
        missing = [role for role in REQUIRED_ROLES if role not in found]
        return StructureValidation(valid=not missing, missing=missing)

    def expected_parent(self, role: StructuralRole) -> Optional[StructuralRole]:
        for parent, children in TABLE_HIERARCHY.items():
            if role in children:
                return parent
        return None

    def _intent(self, key: str) -> Mapping:
        entry = self.entry(key)
        return entry.intent if entry is not None else {}


def _contains_any(content: str, keywords: Iterable[str]) -> bool:
    return any(keyword.lower() in content for keyword in keywords)
