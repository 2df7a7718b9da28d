"""Visible region of the complex plane and the navigation commands acting on it."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

__all__ = ["DEFAULT_CENTER", "DEFAULT_HALF_WIDTH", "Command", "Frame", "Viewport"]

DEFAULT_CENTER = (-0.5, 0.0)
DEFAULT_HALF_WIDTH = 2.0


class Command(str, Enum):
    """Discrete navigation commands a host can issue between frames."""

    PAN_LEFT = "pan-left"
    PAN_RIGHT = "pan-right"
    PAN_UP = "pan-up"
    PAN_DOWN = "pan-down"
    ZOOM_IN = "zoom-in"
    ZOOM_OUT = "zoom-out"
    RESET = "reset"


@dataclass(frozen=True)
class Frame:
    """Immutable pixel-to-plane mapping taken from a viewport for one render pass."""

    width: int
    height: int
    x_min: float
    y_min: float
    x_span: float
    y_span: float

    def map(self, px: int, py: int) -> Tuple[float, float]:
        # Same expression as the numba kernels; keep them in sync.
        x = self.x_min + px / self.width * self.x_span
        y = self.y_min + py / self.height * self.y_span
        return x, y

    @property
    def pixel_step(self) -> Tuple[float, float]:
        return self.x_span / self.width, self.y_span / self.height


@dataclass
class Viewport:
    """Centre, half-width and output resolution of the explored region.

    The y half-extent follows from the aspect ratio, so only ``half_width``
    is stored. Pan and zoom mutate the viewport in place; renders work on a
    :class:`Frame` snapshot.
    """

    pixel_width: int
    pixel_height: int
    center_x: float = DEFAULT_CENTER[0]
    center_y: float = DEFAULT_CENTER[1]
    half_width: float = DEFAULT_HALF_WIDTH

    def __post_init__(self) -> None:
        if int(self.pixel_width) <= 0 or int(self.pixel_height) <= 0:
            raise ValueError(
                f"Resolution must be positive, got {self.pixel_width}x{self.pixel_height}"
            )
        if not self.half_width > 0:
            raise ValueError(f"half_width must be positive, got {self.half_width}")
        self.pixel_width = int(self.pixel_width)
        self.pixel_height = int(self.pixel_height)

    @property
    def half_height(self) -> float:
        return self.half_width * (self.pixel_height / self.pixel_width)

    @property
    def resolution(self) -> Tuple[int, int]:
        return self.pixel_width, self.pixel_height

    def frame(self) -> Frame:
        half_height = self.half_height
        return Frame(
            width=self.pixel_width,
            height=self.pixel_height,
            x_min=self.center_x - self.half_width,
            y_min=self.center_y - half_height,
            x_span=self.half_width * 2.0,
            y_span=half_height * 2.0,
        )

    def map_pixel_to_plane(self, px: int, py: int) -> Tuple[float, float]:
        return self.frame().map(px, py)

    def pan(self, frac_dx: float, frac_dy: float) -> None:
        """Shift the centre by a fraction of the current half-width."""
        self.center_x += self.half_width * frac_dx
        self.center_y += self.half_width * frac_dy

    def zoom(self, factor: float) -> None:
        """Scale the half-width; ``factor < 1`` zooms in."""
        if not factor > 0:
            raise ValueError(f"Zoom factor must be positive, got {factor}")
        self.half_width *= factor

    def reset(self) -> None:
        self.center_x, self.center_y = DEFAULT_CENTER
        self.half_width = DEFAULT_HALF_WIDTH
