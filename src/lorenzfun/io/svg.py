from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from lorenzfun.core.constants import ENCODING, SVG_PRECISION, SVG_STROKE_WIDTH, SVG_VIEWBOX


def format_points(points: Iterable[Sequence[float]], precision: int = SVG_PRECISION) -> str:
    return " ".join(f"{float(x):.{precision}f},{float(y):.{precision}f}" for x, y in points)


def render_svg(points: Iterable[Sequence[float]]) -> str:
    """Wrap an (x, y) sequence in a single black polyline SVG document."""
    return (
        f'<svg viewBox="{SVG_VIEWBOX}" xmlns="http://www.w3.org/2000/svg">\n'
        f'  <polyline stroke="black" fill="none" stroke-width="{SVG_STROKE_WIDTH}" '
        f'points="{format_points(points)}"/>\n'
        "</svg>\n"
    )


def write_svg(path: Path, document: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document, encoding=ENCODING)
