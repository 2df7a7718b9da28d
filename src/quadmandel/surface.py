"""RGB pixel raster written by the renderer."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

import numpy as np

__all__ = ["PixelSurface", "SurfaceView"]

Bounds = Tuple[int, int, int, int]


def _overlaps(a: Bounds, b: Bounds) -> bool:
    return a[0] < b[2] and b[0] < a[2] and a[1] < b[3] and b[1] < a[3]


def _blit(pixels: np.ndarray, bounds: Bounds, x: int, y: int, block: np.ndarray) -> None:
    h, w = block.shape[:2]
    x0, y0 = max(x, bounds[0]), max(y, bounds[1])
    x1, y1 = min(x + w, bounds[2]), min(y + h, bounds[3])
    if x0 < x1 and y0 < y1:
        pixels[y0:y1, x0:x1] = block[y0 - y:y1 - y, x0 - x:x1 - x]


class PixelSurface:
    """Row-major ``height x width`` RGB byte raster.

    Writes outside the raster are ignored; recursion near the edges may
    produce such coordinates.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self._pixels = np.zeros((self.height, self.width, 3), dtype=np.uint8)

    @property
    def pixels(self) -> np.ndarray:
        """Read-only view of the raster for presentation."""
        view = self._pixels.view()
        view.setflags(write=False)
        return view

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def set(self, x: int, y: int, r: int, g: int, b: int) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self._pixels[y, x] = (r, g, b)

    def fill(self, x0: int, y0: int, x1: int, y1: int, r: int, g: int, b: int) -> None:
        x0, x1 = max(x0, 0), min(x1, self.width)
        y0, y1 = max(y0, 0), min(y1, self.height)
        if x0 < x1 and y0 < y1:
            self._pixels[y0:y1, x0:x1] = (r, g, b)

    def blit(self, x: int, y: int, block: np.ndarray) -> None:
        """Copy an ``(h, w, 3)`` RGB block with its top-left pixel at ``(x, y)``."""
        _blit(self._pixels, (0, 0, self.width, self.height), x, y, block)

    def to_bytes(self) -> bytes:
        return self._pixels.tobytes()

    def view(self, x0: int, y0: int, x1: int, y1: int) -> "SurfaceView":
        return SurfaceView(self, x0, y0, x1, y1)

    def partition(self, rects: Iterable[Sequence[int]]) -> List["SurfaceView"]:
        """One view per rectangle; the rectangles must not overlap."""
        bounds = [tuple(int(v) for v in rect) for rect in rects]
        for i, a in enumerate(bounds):
            for b in bounds[i + 1:]:
                if _overlaps(a, b):
                    raise ValueError(f"Partitions {a} and {b} overlap")
        return [self.view(*rect) for rect in bounds]


class SurfaceView:
    """Disjoint sub-region of a :class:`PixelSurface`.

    Coordinates stay global; writes outside the view's extent are dropped
    so one tile can never touch a neighbour's pixels.
    """

    def __init__(self, surface: PixelSurface, x0: int, y0: int, x1: int, y1: int):
        self.surface = surface
        self.x0 = max(x0, 0)
        self.y0 = max(y0, 0)
        self.x1 = min(x1, surface.width)
        self.y1 = min(y1, surface.height)

    @property
    def extent(self) -> Bounds:
        return self.x0, self.y0, self.x1, self.y1

    def set(self, x: int, y: int, r: int, g: int, b: int) -> None:
        if self.x0 <= x < self.x1 and self.y0 <= y < self.y1:
            self.surface._pixels[y, x] = (r, g, b)

    def fill(self, x0: int, y0: int, x1: int, y1: int, r: int, g: int, b: int) -> None:
        x0, x1 = max(x0, self.x0), min(x1, self.x1)
        y0, y1 = max(y0, self.y0), min(y1, self.y1)
        if x0 < x1 and y0 < y1:
            self.surface._pixels[y0:y1, x0:x1] = (r, g, b)

    def blit(self, x: int, y: int, block: np.ndarray) -> None:
        _blit(self.surface._pixels, self.extent, x, y, block)
