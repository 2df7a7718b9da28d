"""Baseline exhaustive Mandelbrot rendering: one evaluation per pixel."""

from __future__ import annotations

import numpy as np

from .computation import PALETTE, band_grid
from .viewport import Frame


def compute_bands(frame: Frame) -> np.ndarray:
    """Quantised band of every pixel, shape ``(height, width)``."""
    return band_grid(frame)


def compute_image(frame: Frame) -> np.ndarray:
    """RGB image, shape ``(height, width, 3)``, as the renderer would draw it."""
    return PALETTE[compute_bands(frame)]
