"""Hold usage heatmap computation.

This package turns per-hold usage counts into a coloured heatmap over
the board layout.

Modules:
    models: Record types for layouts and usage counts, lenient JSON coercion
    aggregator: Usage per hold for an (angle, grade) filter
    classifier: Quantile cutoffs and five-bucket colour classification
    geometry: Projection of wall coordinates onto the board image
    tooltip: Hover text for a single hold
    pipeline: Full recomputation for one filter selection
    renderer: SVG and HTML output
    loader: Cached loading of the two JSON datasets
"""

from src.heatmap.aggregator import (
    available_angles,
    available_grades,
    count_matching_boulders,
    merge_angles,
    merge_boulders,
    select_active_map,
    usage_per_hold,
)
from src.heatmap.classifier import (
    DEFAULT_PALETTE,
    ColorBand,
    Palette,
    color_for,
    compute_quantiles,
    nonzero_values,
)
from src.heatmap.exceptions import DatasetLoadError, HeatmapError
from src.heatmap.geometry import BoardGeometry, PlacedHold, place_holds
from src.heatmap.loader import BoardData, load_board_data, reset_board_data_cache
from src.heatmap.models import (
    AngleData,
    AngleUsageMap,
    BoulderInfo,
    FilterSelection,
    HoldLayout,
    HoldLayoutEntry,
    QuantileCutoffs,
)
from src.heatmap.pipeline import Heatmap, HeatmapMarker, build_heatmap
from src.heatmap.renderer import render_page, render_svg
from src.heatmap.tooltip import hover_lines, hover_text

__all__ = [
    "AngleData",
    "AngleUsageMap",
    "BoardData",
    "BoardGeometry",
    "BoulderInfo",
    "ColorBand",
    "DEFAULT_PALETTE",
    "DatasetLoadError",
    "FilterSelection",
    "Heatmap",
    "HeatmapError",
    "HeatmapMarker",
    "HoldLayout",
    "HoldLayoutEntry",
    "Palette",
    "PlacedHold",
    "QuantileCutoffs",
    "available_angles",
    "available_grades",
    "build_heatmap",
    "color_for",
    "compute_quantiles",
    "count_matching_boulders",
    "hover_lines",
    "hover_text",
    "load_board_data",
    "merge_angles",
    "merge_boulders",
    "nonzero_values",
    "place_holds",
    "render_page",
    "render_svg",
    "reset_board_data_cache",
    "select_active_map",
    "usage_per_hold",
]
