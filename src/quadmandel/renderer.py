"""Boundary-uniform recursive subdivision renderer.

A rectangle's perimeter is evaluated first. When every perimeter pixel lands
in the same colour band the interior is filled with that colour without
evaluating it; otherwise the interior is split into four quadrants (inset by
one pixel from the evaluated border) and each is rendered the same way.
Small rectangles, and rectangles at the depth cap, are evaluated in full.
Evaluation runs in compiled blocks that release the GIL; only the
recursion itself is Python.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, NamedTuple, Optional

import numpy as np

from .computation import PALETTE, band_block, band_color
from .viewport import Frame

__all__ = ["MIN_TILE", "MAX_DEPTH", "Rect", "RenderStats", "render_rect"]

MIN_TILE = 4
MAX_DEPTH = 10


class Rect(NamedTuple):
    """Half-open pixel region ``[x0, x1) x [y0, y1)``."""

    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def area(self) -> int:
        return 0 if self.is_empty else self.width * self.height

    def interior(self) -> "Rect":
        return Rect(self.x0 + 1, self.y0 + 1, self.x1 - 1, self.y1 - 1)

    def quadrants(self) -> List["Rect"]:
        """Split the interior at the midpoint into four disjoint rectangles."""
        xm = self.x0 + self.width // 2
        ym = self.y0 + self.height // 2
        inner = self.interior()
        return [
            Rect(inner.x0, inner.y0, xm, ym),
            Rect(xm, inner.y0, inner.x1, ym),
            Rect(inner.x0, ym, xm, inner.y1),
            Rect(xm, ym, inner.x1, inner.y1),
        ]


@dataclass
class RenderStats:
    """Counters for one tile; never shared between threads."""

    evaluated: int = 0
    filled: int = 0
    uniform_hits: int = 0
    exhaustive_rects: int = 0
    subdivisions: int = 0
    max_depth: int = 0
    on_fill: Optional[Callable[[Rect, int], None]] = field(default=None, repr=False)

    def to_dict(self) -> dict:
        return {
            "evaluated": self.evaluated,
            "filled": self.filled,
            "uniform_hits": self.uniform_hits,
            "exhaustive_rects": self.exhaustive_rects,
            "subdivisions": self.subdivisions,
            "max_depth": self.max_depth,
        }


def _evaluate(frame: Frame, target, stats: RenderStats, x0: int, y0: int, x1: int, y1: int) -> np.ndarray:
    """Evaluate and draw the block ``[x0, x1) x [y0, y1)``; return its bands."""
    bands = band_block(frame, x0, y0, x1, y1)
    target.blit(x0, y0, PALETTE[bands])
    stats.evaluated += bands.size
    return bands


def _render_border(frame: Frame, target, rect: Rect, stats: RenderStats):
    """Evaluate each perimeter pixel once; return ``(band, uniform)``."""
    x0, y0, x1, y1 = rect
    sides = [_evaluate(frame, target, stats, x0, y0, x1, y0 + 1)]
    if y1 - 1 > y0:
        sides.append(_evaluate(frame, target, stats, x0, y1 - 1, x1, y1))
    if y1 - y0 > 2:
        sides.append(_evaluate(frame, target, stats, x0, y0 + 1, x0 + 1, y1 - 1))
        if x1 - 1 > x0:
            sides.append(_evaluate(frame, target, stats, x1 - 1, y0 + 1, x1, y1 - 1))
    # Reference is the top-left corner.
    band = int(sides[0][0, 0])
    uniform = all((side == band).all() for side in sides)
    return band, uniform


def _render_exhaustive(frame: Frame, target, rect: Rect, stats: RenderStats) -> None:
    stats.exhaustive_rects += 1
    _evaluate(frame, target, stats, *rect)


def render_rect(
    frame: Frame,
    target,
    rect: Rect,
    depth: int = 0,
    *,
    min_tile: int = MIN_TILE,
    max_depth: int = MAX_DEPTH,
    stats: Optional[RenderStats] = None,
) -> RenderStats:
    """Render ``rect`` of ``frame`` into ``target``.

    ``target`` is anything with ``blit(x, y, block)`` and
    ``fill(x0, y0, x1, y1, r, g, b)`` (a surface or one of its views).
    Every pixel of ``rect`` is written exactly once.
    """
    if stats is None:
        stats = RenderStats()
    rect = Rect(*rect)
    if rect.is_empty:
        return stats
    stats.max_depth = max(stats.max_depth, depth)

    band, uniform = _render_border(frame, target, rect, stats)
    inner = rect.interior()
    if inner.is_empty:
        return stats

    if uniform:
        target.fill(inner.x0, inner.y0, inner.x1, inner.y1, *band_color(band))
        stats.uniform_hits += 1
        stats.filled += inner.area
        if stats.on_fill is not None:
            stats.on_fill(inner, band)
    elif rect.width >= min_tile and rect.height >= min_tile and depth < max_depth:
        stats.subdivisions += 1
        for quadrant in rect.quadrants():
            render_rect(
                frame,
                target,
                quadrant,
                depth + 1,
                min_tile=min_tile,
                max_depth=max_depth,
                stats=stats,
            )
    else:
        _render_exhaustive(frame, target, inner, stats)
    return stats
