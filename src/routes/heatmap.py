"""Heatmap endpoints.

Every request recomputes the heatmap from the loaded datasets for the
requested (angle, grade) filter. Unknown angle or grade labels are not
errors: they select no usage and yield an empty heatmap.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status
from pydantic import BaseModel

from src.constants import ALL
from src.heatmap.aggregator import (
    available_angles,
    available_grades,
    merge_boulders,
    select_active_map,
)
from src.heatmap.classifier import Palette
from src.heatmap.geometry import BoardGeometry
from src.heatmap.loader import BoardData
from src.heatmap.models import FilterSelection
from src.heatmap.pipeline import Heatmap, build_heatmap
from src.heatmap.renderer import render_svg
from src.heatmap.tooltip import hover_lines
from src.logging_config import get_logger
from src.routes.deps import get_board_data, get_geometry, get_palette
from src.routes.shared import AngleParam, ErrorResponse, GradeParam

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["heatmap"])

_UNAVAILABLE = {
    503: {"model": ErrorResponse, "description": "Board data not loaded"},
}


class FilterOptionsResponse(BaseModel):
    """Values available for the angle and grade filters.

    Attributes:
        angles: Angle labels in natural order.
        grades: Grade labels in natural order.
        boulder_total: Distinct boulders across all angles.
    """

    angles: list[str]
    grades: list[str]
    boulder_total: int


class HoverResponse(BaseModel):
    """Hover detail for one hold under a filter.

    Attributes:
        hold_id: Hold identifier.
        lines: ``"<grade>: <count>"`` lines.
        text: The lines joined by newlines.
    """

    hold_id: str
    lines: list[str]
    text: str


@router.get(
    "/heatmap",
    response_model=Heatmap,
    responses=_UNAVAILABLE,
    summary="Heatmap data",
)
async def get_heatmap(
    board_data: Annotated[BoardData, Depends(get_board_data)],
    geometry: Annotated[BoardGeometry, Depends(get_geometry)],
    palette: Annotated[Palette, Depends(get_palette)],
    angle: AngleParam = ALL,
    grade: GradeParam = ALL,
) -> Heatmap:
    """Return the markers, cutoffs, legend and boulder count for a filter.

    Example:
        ```bash
        curl "http://localhost:8000/api/v1/heatmap?angle=40&grade=V4"
        ```
    """
    return build_heatmap(
        board_data.layout,
        board_data.usage_map,
        FilterSelection(angle=angle, grade=grade),
        geometry,
        palette,
    )


@router.get(
    "/heatmap.svg",
    response_class=Response,
    responses={
        200: {"content": {"image/svg+xml": {}}, "description": "SVG heatmap"},
        **_UNAVAILABLE,
    },
    summary="Heatmap SVG",
)
async def get_heatmap_svg(
    board_data: Annotated[BoardData, Depends(get_board_data)],
    geometry: Annotated[BoardGeometry, Depends(get_geometry)],
    palette: Annotated[Palette, Depends(get_palette)],
    angle: AngleParam = ALL,
    grade: GradeParam = ALL,
) -> Response:
    """Return the heatmap drawn over the board images as SVG."""
    heatmap = build_heatmap(
        board_data.layout,
        board_data.usage_map,
        FilterSelection(angle=angle, grade=grade),
        geometry,
        palette,
    )
    svg = render_svg(heatmap, board_data.image_urls, geometry)
    return Response(content=svg, media_type="image/svg+xml")


@router.get(
    "/filters",
    response_model=FilterOptionsResponse,
    responses=_UNAVAILABLE,
    summary="Filter options",
)
async def get_filters(
    board_data: Annotated[BoardData, Depends(get_board_data)],
) -> FilterOptionsResponse:
    """Return the angles and grades present in the usage data."""
    usage_map = board_data.usage_map
    return FilterOptionsResponse(
        angles=available_angles(usage_map),
        grades=available_grades(usage_map),
        boulder_total=len(merge_boulders(usage_map)),
    )


@router.get(
    "/holds/{hold_id}/hover",
    response_model=HoverResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Hold has no usage data"},
        **_UNAVAILABLE,
    },
    summary="Hold hover detail",
)
async def get_hold_hover(
    hold_id: Annotated[str, Path(description="Hold identifier", examples=["1133"])],
    board_data: Annotated[BoardData, Depends(get_board_data)],
    angle: AngleParam = ALL,
    grade: GradeParam = ALL,
) -> HoverResponse:
    """Return the per-grade usage lines shown when hovering a hold.

    Raises:
        HTTPException: 404 if the hold has no entry under the selected angle.
    """
    active_map = select_active_map(board_data.usage_map, angle)
    lines = hover_lines(active_map.get(hold_id), grade)
    if lines is None:
        logger.debug(
            "No usage data for hovered hold",
            extra={"hold_id": hold_id, "angle": angle},
        )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Hold has no usage data for this angle",
        )
    return HoverResponse(hold_id=hold_id, lines=lines, text="\n".join(lines))
