"""Escape-time evaluation, colour bands and the palette."""

from __future__ import annotations

from typing import Tuple

import numpy as np
from numba import njit, prange

__all__ = [
    "ITER_MAX",
    "CONTRAST",
    "BAND_WIDTH",
    "PALETTE",
    "escape_intensity",
    "quantize",
    "band_at",
    "band_color",
    "band_block",
    "band_grid",
]

ITER_MAX = 255
CONTRAST = 15
BAND_WIDTH = 16


@njit(nogil=True)
def escape_intensity(cx: float, cy: float) -> int:
    """Iterate ``v <- v*v + z0`` and turn the escape iteration into a byte.

    Returns ``255 - CONTRAST * n`` (clamped at 0) for the first iteration ``n``
    where ``|v| > 2``, and 0 when ``z0`` never escapes within ``ITER_MAX``.
    """
    z0 = complex(cx, cy)
    v = 0j
    for n in range(ITER_MAX):
        v = v * v + z0
        if abs(v) > 2.0:
            value = 255 - CONTRAST * n
            if value < 0:
                return 0
            return value
    return 0


@njit(nogil=True)
def quantize(value: int) -> int:
    return value // BAND_WIDTH * BAND_WIDTH


@njit(nogil=True)
def band_at(cx: float, cy: float) -> int:
    return quantize(escape_intensity(cx, cy))


def _build_palette() -> np.ndarray:
    palette = np.zeros((256, 3), dtype=np.uint8)
    for m in range(1, 256):
        # Channel sums wrap at 256 before the modulo, as in byte arithmetic.
        palette[m] = (m, (m + 85) % 256 % 255, (m + 170) % 256 % 255)
    return palette


PALETTE = _build_palette()
PALETTE.setflags(write=False)


def band_color(band: int) -> Tuple[int, int, int]:
    """RGB triple for a quantised band; band 0 is black."""
    r, g, b = PALETTE[band]
    return int(r), int(g), int(b)


@njit(nogil=True)
def _band_block(
    width: int,
    height: int,
    x_min: float,
    x_span: float,
    y_min: float,
    y_span: float,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
) -> np.ndarray:
    bands = np.zeros((y1 - y0, x1 - x0), dtype=np.uint8)
    for py in range(y0, y1):
        y = y_min + py / height * y_span
        for px in range(x0, x1):
            x = x_min + px / width * x_span
            bands[py - y0, px - x0] = band_at(x, y)
    return bands


def band_block(frame, x0: int, y0: int, x1: int, y1: int) -> np.ndarray:
    """Bands of the pixel block ``[x0, x1) x [y0, y1)``, shape ``(y1 - y0, x1 - x0)``.

    Runs without the GIL, so tiles rendered on different threads evaluate
    concurrently.
    """
    return _band_block(
        frame.width,
        frame.height,
        float(frame.x_min),
        float(frame.x_span),
        float(frame.y_min),
        float(frame.y_span),
        int(x0),
        int(y0),
        max(int(x1), int(x0)),
        max(int(y1), int(y0)),
    )


@njit(parallel=True)
def _band_grid(
    width: int,
    height: int,
    x_min: float,
    x_span: float,
    y_min: float,
    y_span: float,
) -> np.ndarray:
    bands = np.zeros((height, width), dtype=np.uint8)
    for py in prange(height):
        y = y_min + py / height * y_span
        for px in range(width):
            x = x_min + px / width * x_span
            bands[py, px] = band_at(x, y)
    return bands


def band_grid(frame) -> np.ndarray:
    """Quantised band of every pixel of ``frame``, shape ``(height, width)``."""
    return _band_grid(
        frame.width,
        frame.height,
        float(frame.x_min),
        float(frame.x_span),
        float(frame.y_min),
        float(frame.y_span),
    )
