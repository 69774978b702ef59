"""SVG and HTML rendering of a computed heatmap.

The renderer is a pure string builder: every input (heatmap, image urls,
geometry, filter options) is passed in explicitly and the output is a
complete document. Each render starts from an empty document, so a new
filter selection always produces a fresh drawing.
"""

from collections.abc import Sequence
from html import escape

from src.constants import ALL
from src.heatmap.geometry import BoardGeometry
from src.heatmap.pipeline import Heatmap, HeatmapMarker, MARKER_STROKE_WIDTH

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"


def esc(value: object) -> str:
    """Escape a value for use in XML text or a quoted attribute."""
    return escape(str(value), quote=True)


def _num(value: float) -> str:
    """Format a number compactly (at most three decimals)."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return text or "0"


def _render_marker(marker: HeatmapMarker) -> str:
    attrs = (
        f'id="hold-{esc(marker.hold_id)}" '
        f'cx="{_num(marker.cx)}" cy="{_num(marker.cy)}" r="{_num(marker.radius)}" '
        f'fill="{esc(marker.color)}" fill-opacity="{_num(marker.fill_opacity)}" '
        f'stroke="{marker.stroke}" stroke-opacity="{_num(marker.stroke_opacity)}" '
        f'stroke-width="{MARKER_STROKE_WIDTH}" data-usage="{marker.usage}"'
    )
    if marker.hover is None:
        return f"  <circle {attrs}/>"
    return f"  <circle {attrs}><title>{esc(marker.hover)}</title></circle>"


def render_svg(heatmap: Heatmap, image_urls: Sequence[str], geometry: BoardGeometry) -> str:
    """Render the heatmap as a standalone SVG document.

    Args:
        heatmap: Result of :func:`src.heatmap.pipeline.build_heatmap`.
        image_urls: Board background images, drawn first in this order.
        geometry: Board geometry providing the view box size.

    Returns:
        SVG markup with one ``<image>`` per background and one
        ``<circle id="hold-...">`` per marker.
    """
    width, height = geometry.image_width, geometry.image_height
    lines = [
        f'<svg xmlns="{SVG_NS}" xmlns:xlink="{XLINK_NS}" '
        f'viewBox="0 0 {width} {height}" class="board-heatmap">'
    ]
    for url in image_urls:
        lines.append(
            f'  <image href="{esc(url)}" xlink:href="{esc(url)}" '
            f'width="{width}" height="{height}"/>'
        )
    lines.extend(_render_marker(marker) for marker in heatmap.markers)
    lines.append("</svg>")
    return "\n".join(lines)


def _render_select(name: str, label: str, options: Sequence[str], selected: str) -> str:
    lines = [
        f'  <label for="{name}-filter">{esc(label)}</label>',
        f'  <select id="{name}-filter" name="{name}" onchange="this.form.submit()">',
    ]
    for option in [ALL, *options]:
        marker = " selected" if option == selected else ""
        lines.append(f'    <option value="{esc(option)}"{marker}>{esc(option)}</option>')
    lines.append("  </select>")
    return "\n".join(lines)


def _render_legend(heatmap: Heatmap) -> str:
    if not heatmap.legend:
        return '<p class="legend">No hold usage for this selection</p>'
    items = [
        f'  <li><span class="swatch" style="background:{esc(entry.color)}"></span>'
        f" &ge; {entry.min_usage}</li>"
        for entry in heatmap.legend
    ]
    return '<ul class="legend">\n' + "\n".join(items) + "\n</ul>"


def render_page(
    heatmap: Heatmap,
    image_urls: Sequence[str],
    geometry: BoardGeometry,
    angles: Sequence[str],
    grades: Sequence[str],
    title: str = "Hold usage heatmap",
) -> str:
    """Render the interactive HTML page around the SVG heatmap.

    Changing either filter resubmits the page with the new selection.
    """
    selection = heatmap.selection
    form = "\n".join(
        [
            '<form method="get" action="/" class="filters">',
            _render_select("angle", "Angle", angles, selection.angle),
            _render_select("grade", "Grade", grades, selection.grade),
            "</form>",
        ]
    )
    return "\n".join(
        [
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            '<meta charset="utf-8">',
            f"<title>{esc(title)}</title>",
            "<style>",
            ".board-heatmap { max-height: 90vh; }",
            ".legend { list-style: none; padding: 0; }",
            ".swatch { display: inline-block; width: 1em; height: 1em; }",
            "</style>",
            "</head>",
            "<body>",
            f"<h1>{esc(title)}</h1>",
            form,
            f'<p>Boulders: <span id="boulder-number">{heatmap.boulder_count}</span></p>',
            _render_legend(heatmap),
            render_svg(heatmap, image_urls, geometry),
            "</body>",
            "</html>",
        ]
    )
