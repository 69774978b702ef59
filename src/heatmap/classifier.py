"""Percentile colour classification for hold usage.

Usage values are binned into five colour buckets using population
quantiles of the nonzero usage under the current filter:

    >= p95   top 5%       #bd0026
    >= p85   next 10%     #fd8d3c
    >= p50   next 35%     #fecc5c
    >= p30   next 20%     #ffffb2
    else     bottom 30%   #d4f7b2

Zero usage is always ``"transparent"``. Cutoffs are taken by rank from
the sorted values (no interpolation), so ties at a cutoff pull the whole
tie group into the higher bucket.
"""

import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Final, NamedTuple

from src.constants import TRANSPARENT
from src.heatmap.models import QuantileCutoffs

QUANTILES: Final[tuple[float, ...]] = (0.0, 0.3, 0.5, 0.85, 0.95)


class ColorBand(NamedTuple):
    """A bucket reached when ``value >= cutoffs[threshold_index]``."""

    threshold_index: int
    color: str


class Palette(NamedTuple):
    """Ordered bucket table, evaluated top-down, plus the bottom colour."""

    bands: tuple[ColorBand, ...]
    bottom: str

    @classmethod
    def from_colors(cls, colors: Sequence[str]) -> "Palette":
        """Build a palette from five colours, top bucket first.

        Raises:
            ValueError: If ``colors`` does not hold exactly five entries.
        """
        if len(colors) != 5:
            raise ValueError(f"Palette needs exactly 5 colours, got {len(colors)}")
        top, second, third, fourth, bottom = colors
        return cls(
            bands=(
                ColorBand(4, top),
                ColorBand(3, second),
                ColorBand(2, third),
                ColorBand(1, fourth),
            ),
            bottom=bottom,
        )

    @property
    def colors(self) -> tuple[str, ...]:
        """All five colours, top bucket first."""
        return tuple(band.color for band in self.bands) + (self.bottom,)


DEFAULT_PALETTE: Final[Palette] = Palette.from_colors(
    ("#bd0026", "#fd8d3c", "#fecc5c", "#ffffb2", "#d4f7b2")
)


def nonzero_values(usage: Mapping[str, int]) -> list[int]:
    """Return the positive usage values, sorted ascending."""
    return sorted(value for value in usage.values() if value > 0)


def compute_quantiles(values: Iterable[int]) -> QuantileCutoffs:
    """Compute the five usage cutoffs by rank.

    Args:
        values: Usage values; order does not matter.

    Returns:
        ``(p0, p30, p50, p85, p95)`` where each cutoff is
        ``sorted(values)[floor(q * n)]``. All zeros for empty input.

    Example:
        >>> compute_quantiles([1, 2, 3, 4, 5, 6, 7, 8, 9, 10])
        QuantileCutoffs(p0=1, p30=4, p50=6, p85=9, p95=10)
    """
    ordered = sorted(values)
    if not ordered:
        return QuantileCutoffs()
    n = len(ordered)
    return QuantileCutoffs(*(ordered[math.floor(q * n)] for q in QUANTILES))


def color_for(
    value: int,
    cutoffs: Sequence[int],
    palette: Palette = DEFAULT_PALETTE,
) -> str:
    """Return the colour token for one usage value."""
    if value == 0:
        return TRANSPARENT
    for band in palette.bands:
        if value >= cutoffs[band.threshold_index]:
            return band.color
    return palette.bottom


def legend(cutoffs: QuantileCutoffs, palette: Palette = DEFAULT_PALETTE) -> list[tuple[str, int]]:
    """Return ``(colour, lower bound)`` per bucket, top bucket first.

    The bottom bucket starts at 1, the smallest usage that is drawn.
    """
    entries = [(band.color, cutoffs[band.threshold_index]) for band in palette.bands]
    entries.append((palette.bottom, 1))
    return entries
