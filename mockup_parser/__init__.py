"""
Mockup Parser - Extract structured list/table page models from design trees.

Standalone library that recognizes the header, search filters, data-grid
columns, row actions and toolbar of a list page mockup from layer names,
text and geometry, tolerating mockups that follow no strict schema.

Usage:
    from mockup_parser import VisualNode, extract_table_page, to_dict

    root = VisualNode.from_dict(figma_payload)
    model = extract_table_page(root)
    print(to_dict(model))

Custom thresholds:
    from dataclasses import replace
    from mockup_parser import DEFAULT_CONFIG, TableExtractor

    extractor = TableExtractor(config=replace(DEFAULT_CONFIG, row_threshold=12))
    model = extractor.extract(root)
"""

from mockup_parser.config import DEFAULT_CONFIG, ExtractionConfig
from mockup_parser.dictionary import SEMANTIC_DICTIONARY, SemanticEntry, StructuralRole
from mockup_parser.extractor import (
    TableExtractor,
    extract_table_page,
    extract_table_page_async,
    get_extractor,
)
from mockup_parser.intelligence import IntelligenceEngine, RoleResolution
from mockup_parser.layout import LayoutProtocol
from mockup_parser.naming import NamingProtocol
from mockup_parser.node import Geometry, NodeKind, VisualNode
from mockup_parser.schema import (
    ActionButton,
    ActionColumn,
    ButtonGroup,
    HeaderArea,
    PageValidationResult,
    SearchField,
    TableColumn,
    TablePageModel,
    ToolbarButton,
    to_dict,
    validate_page_model,
)

__version__ = "0.1.0"

__all__ = [
    # Core extraction
    "extract_table_page",
    "extract_table_page_async",
    "get_extractor",
    "TableExtractor",
    # Input tree
    "VisualNode",
    "Geometry",
    "NodeKind",
    # Recognition layers
    "NamingProtocol",
    "LayoutProtocol",
    "IntelligenceEngine",
    "RoleResolution",
    # Configuration
    "ExtractionConfig",
    "DEFAULT_CONFIG",
    "SemanticEntry",
    "SEMANTIC_DICTIONARY",
    "StructuralRole",
    # Schema & validation
    "TablePageModel",
    "HeaderArea",
    "SearchField",
    "TableColumn",
    "ActionColumn",
    "ActionButton",
    "ToolbarButton",
    "ButtonGroup",
    "PageValidationResult",
    "validate_page_model",
    "to_dict",
]
