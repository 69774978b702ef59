"""Loading of the hold layout and usage map datasets.

Both datasets are JSON files read once at application startup. A missing
or unparsable file is an upstream failure and raises
:class:`DatasetLoadError`; malformed content inside a parsable file is
coerced leniently by :mod:`src.heatmap.models`.

Example::

    >>> data = load_board_data("data/full-hold-map.json",
    ...                        "data/angle-hold-boulder-grade-map.json")
    >>> sorted(data.usage_map)
    ['20', '40']
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from src.heatmap.cache import _BoardDataCache
from src.heatmap.exceptions import DatasetLoadError
from src.heatmap.models import (
    AngleUsageMap,
    HoldLayout,
    parse_hold_layout,
    parse_usage_map,
)
from src.logging_config import get_logger

logger = get_logger(__name__)


class BoardData(BaseModel):
    """The two read-only board datasets.

    Attributes:
        layout: Holds per board image.
        usage_map: Hold usage and boulders per angle.
    """

    model_config = ConfigDict(frozen=True)

    layout: HoldLayout
    usage_map: AngleUsageMap

    @property
    def image_urls(self) -> list[str]:
        """Board background images, in layout order."""
        return list(self.layout)

    @property
    def hold_count(self) -> int:
        return sum(len(entries) for entries in self.layout.values())


_board_data_cache: _BoardDataCache[BoardData] = _BoardDataCache()


def _read_json(path: Path, description: str) -> Any:
    """Read and parse one JSON file.

    Raises:
        DatasetLoadError: If the file is missing, unreadable or not JSON.
    """
    if not path.exists():
        raise DatasetLoadError(f"{description} not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise DatasetLoadError(f"Invalid JSON in {description.lower()} {path}: {exc}") from exc
    except OSError as exc:
        raise DatasetLoadError(f"Error reading {description.lower()} {path}: {exc}") from exc


def _load_uncached(paths: tuple[Path, ...]) -> BoardData:
    hold_map_path, usage_map_path = paths
    data = BoardData(
        layout=parse_hold_layout(_read_json(hold_map_path, "Hold layout")),
        usage_map=parse_usage_map(_read_json(usage_map_path, "Usage map")),
    )
    logger.info(
        "Board data loaded",
        extra={
            "hold_map_path": str(hold_map_path),
            "usage_map_path": str(usage_map_path),
            "images": len(data.layout),
            "holds": data.hold_count,
            "angles": len(data.usage_map),
        },
    )
    return data


def load_board_data(hold_map_path: Path | str, usage_map_path: Path | str) -> BoardData:
    """Load both board datasets, reusing a previous load of the same files.

    Args:
        hold_map_path: JSON file mapping image urls to hold entries.
        usage_map_path: JSON file mapping angles to hold usage and boulders.

    Returns:
        The parsed :class:`BoardData`.

    Raises:
        DatasetLoadError: If either file is missing or not valid JSON.
    """
    return _board_data_cache.load_or_store((hold_map_path, usage_map_path), _load_uncached)


def reset_board_data_cache() -> None:
    """Forget every loaded dataset (for testing)."""
    _board_data_cache.clear()
