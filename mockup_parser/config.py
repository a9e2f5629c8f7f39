"""Extraction configuration: every threshold and depth cap in one place."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ExtractionConfig:
    """Thresholds used by the protocols and the structural extractor.

    Instances are immutable; derive variants with ``dataclasses.replace``.
    """

    # Geometry (design units)
    alignment_threshold: float = 5.0
    row_threshold: float = 10.0
    label_input_distance: float = 20.0
    label_input_vertical_distance: float = 10.0
    position_tolerance: float = 2.0
    input_min_width: float = 60.0
    input_min_height: float = 20.0
    input_max_height: float = 60.0
    button_width_tolerance: float = 20.0
    button_height_tolerance: float = 10.0
    button_spacing_variance: float = 100.0
    align_center_tolerance: float = 20.0
    cell_center_tolerance: float = 2.5

    # Role resolution
    base_confidence: float = 0.8
    min_confidence: float = 0.6

    # Column discovery
    header_cell_width_ratio: float = 0.8
    layout_row_tolerance: float = 10.0
    max_header_text_length: int = 50

    # Operation column wrapper guard
    wrapper_min_width: float = 400.0
    wrapper_min_children: int = 3

    # Depth caps
    search_max_depth: int = 3
    column_max_depth: int = 4
    title_max_depth: int = 10
    bfs_max_depth: int = 10
    button_max_depth: int = 4
    text_recovery_max_depth: int = 4
    property_unwrap_depth: int = 3

    # Fixed output defaults
    action_column_width: float = 150.0
    page_size: int = 20


DEFAULT_CONFIG = ExtractionConfig()
