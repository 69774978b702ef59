"""Interactive heatmap page."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from src.constants import ALL
from src.heatmap.aggregator import available_angles, available_grades
from src.heatmap.classifier import Palette
from src.heatmap.geometry import BoardGeometry
from src.heatmap.loader import BoardData
from src.heatmap.models import FilterSelection
from src.heatmap.pipeline import build_heatmap
from src.heatmap.renderer import render_page
from src.routes.deps import get_board_data, get_geometry, get_palette
from src.routes.shared import AngleParam, GradeParam

router = APIRouter(tags=["page"])


@router.get("/", response_class=HTMLResponse, summary="Heatmap page")
async def heatmap_page(
    request: Request,
    board_data: Annotated[BoardData, Depends(get_board_data)],
    geometry: Annotated[BoardGeometry, Depends(get_geometry)],
    palette: Annotated[Palette, Depends(get_palette)],
    angle: AngleParam = ALL,
    grade: GradeParam = ALL,
) -> HTMLResponse:
    """Render the heatmap with its angle and grade selects.

    Changing a select reloads this page with the new filter.
    """
    usage_map = board_data.usage_map
    heatmap = build_heatmap(
        board_data.layout,
        usage_map,
        FilterSelection(angle=angle, grade=grade),
        geometry,
        palette,
    )
    html = render_page(
        heatmap,
        board_data.image_urls,
        geometry,
        angles=available_angles(usage_map),
        grades=available_grades(usage_map),
        title=request.app.title,
    )
    return HTMLResponse(content=html)
