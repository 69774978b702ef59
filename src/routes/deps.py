"""Request dependencies giving route handlers the loaded board state.

The application lifespan stores the datasets, geometry and palette on
``app.state``; handlers receive them through these dependencies instead
of reaching into module globals.
"""

from fastapi import HTTPException, Request, status

from src.heatmap.classifier import DEFAULT_PALETTE, Palette
from src.heatmap.geometry import BoardGeometry
from src.heatmap.loader import BoardData


def get_board_data(request: Request) -> BoardData:
    """Return the loaded board datasets.

    Raises:
        HTTPException: 503 if the datasets have not been loaded.
    """
    board_data: BoardData | None = getattr(request.app.state, "board_data", None)
    if board_data is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Board data not loaded",
        )
    return board_data


def get_geometry(request: Request) -> BoardGeometry:
    """Return the configured board geometry, or the default board."""
    geometry: BoardGeometry | None = getattr(request.app.state, "geometry", None)
    return geometry if geometry is not None else BoardGeometry()


def get_palette(request: Request) -> Palette:
    """Return the configured colour palette, or the default colours."""
    palette: Palette | None = getattr(request.app.state, "palette", None)
    return palette if palette is not None else DEFAULT_PALETTE
