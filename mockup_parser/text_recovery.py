"""
Text Recovery: find the label of a suspected button.

Labels hide behind nested frames, hidden layers and component-instance
indirection. Recovery runs an ordered list of independent strategies,
each ``(node) -> Optional[str]``, and returns the first non-empty result.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional

from mockup_parser.config import DEFAULT_CONFIG, ExtractionConfig
from mockup_parser.node import NodeKind, VisualNode, iter_descendants

logger = logging.getLogger(__name__)

# Property keys whose values carry visible text
TEXT_PROPERTY_HINTS = ("text", "label", "title", "content", "name", "value", "文字", "文本", "标题")

# Keys that wrap the real value inside a property or override container
VALUE_KEYS = ("value", "characters", "text", "defaultValue")

BOOLEAN_STRINGS = {"true", "false", "yes", "no", "on", "off"}

STYLE_KEYWORDS = {
    "primary",
    "secondary",
    "default",
    "small",
    "medium",
    "large",
    "ghost",
    "link",
    "dashed",
    "outline",
    "filled",
    "disabled",
    "hover",
    "normal",
    "active",
    "solid",
}

PLACEHOLDER_WORDS = {"text", "label", "button", "文本", "文字", "按钮"}

ICON_ID_PATTERN = re.compile(r"^(\d+:\d+(;\d+:\d+)*|[0-9a-f]{8,}|icon[-_/].*|.*[-_/]icon)$", re.IGNORECASE)
ICON_NAME_PATTERN = re.compile(r"icon|图标|svg|vector", re.IGNORECASE)
EMOJI_PATTERN = re.compile(
    "^[\U0001F000-\U0001FAFF☀-➿⬀-⯿️‍\\s]+$"
)

Strategy = Callable[[VisualNode], Optional[str]]


@dataclass(frozen=True)
class Candidate:
    """Recovered string plus the name of the layer it came from."""

    text: str
    source: str


def is_placeholder_text(value: str) -> bool:
    """Template values a designer never meant as the label."""
    content = value.strip().lower()
    if not content:
        return True
    if content in PLACEHOLDER_WORDS or content in BOOLEAN_STRINGS:
        return True
    if content in STYLE_KEYWORDS:
        return True
    return bool(ICON_ID_PATTERN.match(content))


def is_icon_like(candidate: Candidate) -> bool:
    text = candidate.text.strip()
    if len(text) <= 1:
        return True
    if EMOJI_PATTERN.match(text):
        return True
    return bool(ICON_NAME_PATTERN.search(candidate.source or ""))


class TextRecovery:
    """Ordered label-recovery strategies for button-like nodes."""

    def __init__(self, config: ExtractionConfig = DEFAULT_CONFIG):
        self.config = config

    def strategies(self, context: str) -> List[Strategy]:
        chain: List[Strategy] = [self.from_candidates, self.from_raw_overrides]
        if context == "toolbar":
            chain.append(self.from_placeholders)
        return chain

    def recover(self, node: VisualNode, context: str = "action") -> Optional[str]:
        """
        Recover the label of a button-like node.

        Args:
            node: Suspected button
            context: "toolbar", "search" or "action"; only toolbar buttons
                fall back to placeholder-looking labels

        Returns:
            Label text, or None when nothing usable was found
        """
        for strategy in self.strategies(context):
            label = strategy(node)
            if label:
                return label
        logger.debug(f"No label recovered for '{node.name}' ({context})")
        return None

    # --------------------------------------------------------------------------
    # Strategies
    # --------------------------------------------------------------------------

    def from_candidates(self, node: VisualNode) -> Optional[str]:
        """Longest non-placeholder, non-icon string from leaves, properties and overrides."""
        candidates = list(self._text_leaves(node))
        if node.kind == NodeKind.INSTANCE:
            candidates.extend(self._property_texts(node))
            candidates.extend(self._override_texts(node))

        usable = [
            c for c in candidates
            if not is_placeholder_text(c.text) and not is_icon_like(c)
        ]
        return _longest(usable)

    def from_raw_overrides(self, node: VisualNode) -> Optional[str]:
        """Unfiltered override strings, longest first."""
        raw = [
            Candidate(text=value.strip(), source=node.name)
            for value in self._override_values(node.overrides, 0)
            if value.strip()
        ]
        return _longest(raw)

    def from_placeholders(self, node: VisualNode) -> Optional[str]:
        """Anything at all, even template text, rather than no label."""
        candidates = list(self._text_leaves(node))
        candidates.extend(self._property_texts(node, keep_placeholders=True))
        candidates.extend(
            Candidate(text=value.strip(), source=node.name)
            for value in self._override_values(node.overrides, 0)
            if value.strip()
        )
        return _longest(candidates)

    # --------------------------------------------------------------------------
    # Harvesting
    # --------------------------------------------------------------------------

    def _text_leaves(self, node: VisualNode) -> Iterator[Candidate]:
        if node.kind == NodeKind.TEXT:
            if node.visible and node.characters.strip():
                yield Candidate(text=node.characters.strip(), source=node.name)
            return
        for child in iter_descendants(node, self.config.text_recovery_max_depth):
            if child.kind == NodeKind.TEXT and child.characters.strip():
                yield Candidate(text=child.characters.strip(), source=child.name)

    def _property_texts(
        self, node: VisualNode, keep_placeholders: bool = False
    ) -> Iterator[Candidate]:
        for key in sorted(node.properties, key=str):
            if not any(hint in str(key).lower() for hint in TEXT_PROPERTY_HINTS):
                continue
            for value in self._unwrap(node.properties[key], 0):
                text = value.strip()
                if not text:
                    continue
                if not keep_placeholders and is_placeholder_text(text):
                    continue
                yield Candidate(text=text, source=str(key))

    def _override_texts(self, node: VisualNode) -> Iterator[Candidate]:
        for value in self._override_values(node.overrides, 0):
            text = value.strip()
            if text and not is_placeholder_text(text):
                yield Candidate(text=text, source=node.name)

    def _override_values(self, overrides: Any, depth: int) -> Iterator[str]:
        if depth > self.config.property_unwrap_depth:
            return
        if isinstance(overrides, str):
            yield overrides
        elif isinstance(overrides, dict):
            for key in sorted(overrides, key=str):
                yield from self._override_values(overrides[key], depth + 1)
        elif isinstance(overrides, (list, tuple)):
            for item in overrides:
                yield from self._override_values(item, depth + 1)

    def _unwrap(self, value: Any, depth: int) -> Iterator[str]:
        """Dig a string out of nested ``{"value": ...}`` containers."""
        if depth > self.config.property_unwrap_depth:
            return
        if isinstance(value, str):
            yield value
        elif isinstance(value, dict):
            for key in VALUE_KEYS:
                if key in value:
                    yield from self._unwrap(value[key], depth + 1)
                    return
        elif isinstance(value, (list, tuple)):
            for item in value:
                yield from self._unwrap(item, depth + 1)


def _longest(candidates: List[Candidate]) -> Optional[str]:
    """Longest string; the first one seen wins a tie."""
    best: Optional[Candidate] = None
    for candidate in candidates:
        if best is None or len(candidate.text) > len(best.text):
            best = candidate
    return best.text if best else None
