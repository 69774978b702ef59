"""Data model for hold layouts and usage counts.

The two board datasets arrive as dynamically shaped JSON. This module
gives them explicit record types and coerces raw JSON into those types
leniently: malformed entries are skipped (and logged) rather than raised,
so a partially broken dataset still renders whatever is usable.

Raw shapes::

    hold layout:  {image_url: [[hold_id, mirrored_hold_id, x, y], ...]}
    usage map:    {angle: {"holds": {hold_id: {grade: count}},
                           "boulders": {uuid: {"grade": grade, ...}}}}
"""

from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from src.constants import ALL
from src.logging_config import get_logger

logger = get_logger(__name__)

# grade label -> non-negative usage count
GradeCounts = dict[str, int]


class HoldLayoutEntry(BaseModel):
    """A physical hold on the board.

    Attributes:
        hold_id: Hold identifier, normalised to a string.
        mirrored_hold_id: Identifier of the mirrored counterpart, if any.
        x: Horizontal position in wall units.
        y: Vertical position in wall units.
    """

    model_config = ConfigDict(frozen=True)

    hold_id: str
    mirrored_hold_id: str | None = None
    x: float
    y: float


class BoulderInfo(BaseModel):
    """A boulder climb set at one angle.

    Only ``grade`` is used; any other fields in the source record are
    ignored. ``grade`` is None when the source record carries none.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    grade: str | None = None


class AngleData(BaseModel):
    """Hold usage and boulders recorded at one wall angle.

    Attributes:
        holds: Hold id -> per-grade usage counts.
        boulders: Boulder uuid -> boulder record.
    """

    model_config = ConfigDict(frozen=True)

    holds: dict[str, GradeCounts] = Field(default_factory=dict)
    boulders: dict[str, BoulderInfo] = Field(default_factory=dict)


# angle label -> data for that angle
AngleUsageMap = dict[str, AngleData]

# image url -> holds drawn over that image, in layout order
HoldLayout = dict[str, list[HoldLayoutEntry]]


class QuantileCutoffs(NamedTuple):
    """Usage thresholds at the 0th, 30th, 50th, 85th and 95th percentiles."""

    p0: int = 0
    p30: int = 0
    p50: int = 0
    p85: int = 0
    p95: int = 0


class FilterSelection(BaseModel):
    """An (angle, grade) filter, each a label or ``"all"``."""

    model_config = ConfigDict(frozen=True)

    angle: str = ALL
    grade: str = ALL


def grade_count(grade_counts: GradeCounts | None, grade: str) -> int:
    """Return the count for ``grade``, or 0 when absent."""
    if not grade_counts:
        return 0
    return grade_counts.get(grade, 0)


def angle_holds(usage_map: AngleUsageMap, angle: str) -> dict[str, GradeCounts]:
    """Return the hold counts recorded at ``angle``, or an empty mapping."""
    data = usage_map.get(angle)
    if data is None:
        return {}
    return data.holds


def angle_boulders(usage_map: AngleUsageMap, angle: str) -> dict[str, BoulderInfo]:
    """Return the boulders set at ``angle``, or an empty mapping."""
    data = usage_map.get(angle)
    if data is None:
        return {}
    return data.boulders


# ---------------------------------------------------------------------------
# Lenient coercion from raw JSON
# ---------------------------------------------------------------------------


def _coerce_count(value: Any) -> int | None:
    """Return ``value`` as a non-negative int, or None if it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float) and value.is_integer() and value >= 0:
        return int(value)
    return None


def _coerce_coordinate(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def parse_grade_counts(raw: Any) -> GradeCounts:
    """Coerce a raw ``{grade: count}`` object, dropping invalid counts."""
    if not isinstance(raw, dict):
        return {}

    counts: GradeCounts = {}
    for grade, value in raw.items():
        count = _coerce_count(value)
        if count is None:
            logger.warning(
                "Skipping invalid grade count",
                extra={"grade": str(grade), "value": repr(value)},
            )
            continue
        counts[str(grade)] = count
    return counts


def parse_angle_data(raw: Any) -> AngleData:
    """Coerce the raw record for one angle.

    A missing or malformed ``holds`` or ``boulders`` section becomes an
    empty mapping. Boulder records without a string grade are kept with
    ``grade=None`` so they still count towards the all-grades total.
    """
    if not isinstance(raw, dict):
        return AngleData()

    holds: dict[str, GradeCounts] = {}
    raw_holds = raw.get("holds")
    if isinstance(raw_holds, dict):
        for hold_id, raw_counts in raw_holds.items():
            holds[str(hold_id)] = parse_grade_counts(raw_counts)

    boulders: dict[str, BoulderInfo] = {}
    raw_boulders = raw.get("boulders")
    if isinstance(raw_boulders, dict):
        for uuid, info in raw_boulders.items():
            grade = info.get("grade") if isinstance(info, dict) else None
            boulders[str(uuid)] = BoulderInfo(
                grade=grade if isinstance(grade, str) else None
            )

    return AngleData(holds=holds, boulders=boulders)


def parse_usage_map(raw: Any) -> AngleUsageMap:
    """Coerce the raw angle usage map; anything but an object is empty."""
    if not isinstance(raw, dict):
        logger.warning(
            "Usage map is not an object; treating as empty",
            extra={"type": type(raw).__name__},
        )
        return {}
    return {str(angle): parse_angle_data(data) for angle, data in raw.items()}


def _normalise_hold_id(value: Any) -> str:
    """Return the usage-map key for a layout id (``1090.0`` -> ``"1090"``)."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def _parse_layout_entry(raw: Any) -> HoldLayoutEntry | None:
    if not isinstance(raw, (list, tuple)) or len(raw) < 4:
        return None
    hold_id, mirrored, raw_x, raw_y = raw[:4]
    x = _coerce_coordinate(raw_x)
    y = _coerce_coordinate(raw_y)
    if hold_id is None or x is None or y is None:
        return None
    return HoldLayoutEntry(
        hold_id=_normalise_hold_id(hold_id),
        mirrored_hold_id=None if mirrored is None else _normalise_hold_id(mirrored),
        x=x,
        y=y,
    )


def parse_hold_layout(raw: Any) -> HoldLayout:
    """Coerce the raw hold layout, skipping malformed hold entries.

    Hold ids are normalised to strings so that integer ids in the layout
    match the string keys of the usage map.
    """
    if not isinstance(raw, dict):
        logger.warning(
            "Hold layout is not an object; treating as empty",
            extra={"type": type(raw).__name__},
        )
        return {}

    layout: HoldLayout = {}
    for image_url, raw_entries in raw.items():
        entries: list[HoldLayoutEntry] = []
        if isinstance(raw_entries, list):
            for raw_entry in raw_entries:
                entry = _parse_layout_entry(raw_entry)
                if entry is None:
                    logger.warning(
                        "Skipping malformed hold layout entry",
                        extra={"image_url": str(image_url), "entry": repr(raw_entry)},
                    )
                    continue
                entries.append(entry)
        layout[str(image_url)] = entries
    return layout
