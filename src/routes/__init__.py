"""API routes package.

This package contains all FastAPI route modules organized by domain.
"""

from src.routes.health import router as health_router
from src.routes.heatmap import router as heatmap_router
from src.routes.page import router as page_router

__all__ = ["health_router", "heatmap_router", "page_router"]
