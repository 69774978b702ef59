"""Full heatmap recomputation for one filter selection.

Each call runs the whole chain from scratch:

    active map -> usage per hold -> cutoffs from nonzero usage
    -> colour per placed hold -> hover text -> boulder count

Nothing is carried over between calls, so the same inputs always yield
the same :class:`Heatmap`.
"""

from pydantic import BaseModel, ConfigDict

from src.heatmap.aggregator import (
    count_matching_boulders,
    select_active_map,
    usage_per_hold,
)
from src.heatmap.classifier import (
    DEFAULT_PALETTE,
    Palette,
    color_for,
    compute_quantiles,
    legend,
    nonzero_values,
)
from src.heatmap.geometry import BoardGeometry, place_holds
from src.heatmap.models import AngleUsageMap, FilterSelection, HoldLayout, QuantileCutoffs
from src.heatmap.tooltip import hover_text
from src.logging_config import get_logger

logger = get_logger(__name__)

# Markers are drawn only for holds used more than this many times
VISIBLE_USAGE_MIN = 1

MARKER_FILL_OPACITY = 0.7
MARKER_STROKE = "black"
MARKER_STROKE_OPACITY = 0.5
MARKER_STROKE_WIDTH = 2


class HeatmapMarker(BaseModel):
    """One hold marker, ready to draw.

    Attributes:
        hold_id: Hold identifier.
        cx: Marker centre x in image pixels.
        cy: Marker centre y in image pixels.
        radius: Marker radius in image pixels.
        usage: Usage under the current filter.
        color: Fill colour token from the classifier.
        visible: Whether the marker is drawn with fill and stroke.
        hover: Hover detail text, None when the hold has no usage data.
    """

    model_config = ConfigDict(frozen=True)

    hold_id: str
    cx: float
    cy: float
    radius: float
    usage: int
    color: str
    visible: bool
    hover: str | None = None

    @property
    def fill_opacity(self) -> float:
        return MARKER_FILL_OPACITY if self.visible else 0

    @property
    def stroke(self) -> str:
        return MARKER_STROKE if self.visible else "transparent"

    @property
    def stroke_opacity(self) -> float:
        return MARKER_STROKE_OPACITY if self.visible else 0


class LegendEntry(BaseModel):
    """A colour bucket and the smallest usage that falls into it."""

    color: str
    min_usage: int


class Heatmap(BaseModel):
    """Everything the shell needs to draw one filter selection."""

    selection: FilterSelection
    cutoffs: QuantileCutoffs
    legend: list[LegendEntry]
    markers: list[HeatmapMarker]
    boulder_count: int
    usage: dict[str, int]


def build_heatmap(
    layout: HoldLayout,
    usage_map: AngleUsageMap,
    selection: FilterSelection,
    geometry: BoardGeometry,
    palette: Palette = DEFAULT_PALETTE,
) -> Heatmap:
    """Compute the heatmap for one filter selection.

    Args:
        layout: Holds per board image.
        usage_map: Usage counts and boulders per angle.
        selection: Angle and grade filter.
        geometry: Board projection.
        palette: Colour bucket table.

    Returns:
        The markers for every drawable hold, in layout order, together
        with the cutoffs, legend and matching boulder count. The legend
        is empty when no hold is used under the selection.
    """
    active_map = select_active_map(usage_map, selection.angle)
    usage = usage_per_hold(active_map, selection.grade)
    used_values = nonzero_values(usage)
    cutoffs = compute_quantiles(used_values)
    radius = geometry.marker_radius

    markers: list[HeatmapMarker] = []
    for placed in place_holds(layout, geometry):
        hold_id = placed.hold.hold_id
        hold_usage = usage.get(hold_id, 0)
        markers.append(
            HeatmapMarker(
                hold_id=hold_id,
                cx=placed.x_pixel,
                cy=placed.y_pixel,
                radius=radius,
                usage=hold_usage,
                color=color_for(hold_usage, cutoffs, palette),
                visible=hold_usage > VISIBLE_USAGE_MIN,
                hover=hover_text(active_map.get(hold_id), selection.grade),
            )
        )

    boulder_count = count_matching_boulders(usage_map, selection.grade, selection.angle)

    logger.debug(
        "Heatmap computed",
        extra={
            "angle": selection.angle,
            "grade": selection.grade,
            "markers": len(markers),
            "used_holds": sum(1 for value in usage.values() if value > 0),
            "boulders": boulder_count,
        },
    )

    return Heatmap(
        selection=selection,
        cutoffs=cutoffs,
        legend=(
            [
                LegendEntry(color=color, min_usage=bound)
                for color, bound in legend(cutoffs, palette)
            ]
            if used_values
            else []
        ),
        markers=markers,
        boulder_count=boulder_count,
        usage=usage,
    )
