"""
Constants module for the kilter heatmap application.

This module contains shared constants used across the application,
including the filter sentinel and the default board geometry.
"""

from typing import Final

# Filter value that selects every angle or every grade
ALL: Final[str] = "all"

# Colour token for holds with no usage under the current filter
TRANSPARENT: Final[str] = "transparent"

# Default board image size in pixels
DEFAULT_IMAGE_WIDTH: Final[int] = 1080
DEFAULT_IMAGE_HEIGHT: Final[int] = 1350

# Default board edges in wall units
DEFAULT_EDGE_LEFT: Final[float] = 0.0
DEFAULT_EDGE_RIGHT: Final[float] = 144.0
DEFAULT_EDGE_BOTTOM: Final[float] = 0.0
DEFAULT_EDGE_TOP: Final[float] = 180.0

# Pixel rows that carry no real holds on the default board image
DEFAULT_EXCLUDED_Y_PIXELS: Final[tuple[float, ...]] = (30.0, 90.0, 150.0)
