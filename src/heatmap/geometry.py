"""Projection of wall coordinates onto the board image.

Holds are stored in wall units with the origin at the bottom-left of the
board. The board image has its origin at the top-left, so the y axis is
flipped during projection. Holds outside the configured edges, on the
left or right image border, or on one of the excluded pixel rows are not
placed.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.constants import (
    DEFAULT_EDGE_BOTTOM,
    DEFAULT_EDGE_LEFT,
    DEFAULT_EDGE_RIGHT,
    DEFAULT_EDGE_TOP,
    DEFAULT_EXCLUDED_Y_PIXELS,
    DEFAULT_IMAGE_HEIGHT,
    DEFAULT_IMAGE_WIDTH,
)
from src.heatmap.models import HoldLayout, HoldLayoutEntry


class BoardGeometry(BaseModel):
    """Board image size and the wall-unit edges it covers.

    Attributes:
        image_width: Board image width in pixels.
        image_height: Board image height in pixels.
        edge_left: Leftmost wall x drawn on the image.
        edge_right: Rightmost wall x drawn on the image.
        edge_bottom: Lowest wall y drawn on the image.
        edge_top: Highest wall y drawn on the image.
        excluded_y_pixels: Pixel rows on which holds are never drawn.
        marker_scale: Marker radius in multiples of the x spacing.
    """

    model_config = ConfigDict(frozen=True)

    image_width: int = Field(default=DEFAULT_IMAGE_WIDTH, gt=0)
    image_height: int = Field(default=DEFAULT_IMAGE_HEIGHT, gt=0)
    edge_left: float = DEFAULT_EDGE_LEFT
    edge_right: float = DEFAULT_EDGE_RIGHT
    edge_bottom: float = DEFAULT_EDGE_BOTTOM
    edge_top: float = DEFAULT_EDGE_TOP
    excluded_y_pixels: frozenset[float] = frozenset(DEFAULT_EXCLUDED_Y_PIXELS)
    marker_scale: float = Field(default=1.5, gt=0)

    @model_validator(mode="after")
    def _check_edges(self) -> "BoardGeometry":
        if self.edge_right <= self.edge_left:
            raise ValueError("edge_right must be greater than edge_left")
        if self.edge_top <= self.edge_bottom:
            raise ValueError("edge_top must be greater than edge_bottom")
        return self

    @property
    def x_spacing(self) -> float:
        """Pixels per wall unit horizontally."""
        return self.image_width / (self.edge_right - self.edge_left)

    @property
    def y_spacing(self) -> float:
        """Pixels per wall unit vertically."""
        return self.image_height / (self.edge_top - self.edge_bottom)

    @property
    def marker_radius(self) -> float:
        return self.x_spacing * self.marker_scale

    def in_bounds(self, x: float, y: float) -> bool:
        """Return True if the wall position lies within the board edges."""
        return self.edge_left <= x <= self.edge_right and self.edge_bottom <= y <= self.edge_top

    def to_pixels(self, x: float, y: float) -> tuple[float, float]:
        """Project a wall position to image pixels (y axis flipped)."""
        x_pixel = (x - self.edge_left) * self.x_spacing
        y_pixel = self.image_height - (y - self.edge_bottom) * self.y_spacing
        return x_pixel, y_pixel


class PlacedHold(BaseModel):
    """A hold with its position on the board image."""

    model_config = ConfigDict(frozen=True)

    hold: HoldLayoutEntry
    x_pixel: float
    y_pixel: float


def place_hold(entry: HoldLayoutEntry, geometry: BoardGeometry) -> PlacedHold | None:
    """Project one hold, or return None if it is not drawn."""
    if not geometry.in_bounds(entry.x, entry.y):
        return None
    x_pixel, y_pixel = geometry.to_pixels(entry.x, entry.y)
    if x_pixel <= 0 or x_pixel >= geometry.image_width:
        return None
    if y_pixel in geometry.excluded_y_pixels:
        return None
    return PlacedHold(hold=entry, x_pixel=x_pixel, y_pixel=y_pixel)


def place_holds(layout: HoldLayout, geometry: BoardGeometry) -> list[PlacedHold]:
    """Project every drawable hold, images in layout order."""
    placed: list[PlacedHold] = []
    for entries in layout.values():
        for entry in entries:
            position = place_hold(entry, geometry)
            if position is not None:
                placed.append(position)
    return placed
