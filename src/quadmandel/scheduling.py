"""Tile partitioning and parallel execution of a render pass."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .renderer import MAX_DEPTH, MIN_TILE, Rect, render_rect
from .surface import PixelSurface
from .viewport import Frame

__all__ = ["REMAINDER_MODES", "TileScheduler", "render_tiles"]

REMAINDER_MODES = ("extend", "drop")


@dataclass
class TileScheduler:
    """Static ``N x N`` partition of the image into disjoint tiles.

    With ``remainder="extend"`` the last tile column and row absorb the
    pixels left over by integer division; ``"drop"`` leaves them unrendered.
    """

    width: int
    height: int
    grid_size: int = 4
    remainder: str = "extend"
    tiles: List[Rect] = field(init=False)

    def __post_init__(self) -> None:
        if self.grid_size < 1:
            raise ValueError(f"grid_size must be at least 1, got {self.grid_size}")
        if self.remainder not in REMAINDER_MODES:
            raise ValueError(f"Unknown remainder mode {self.remainder!r}")
        n = self.grid_size
        dw = self.width // n
        dh = self.height // n
        last = n - 1
        self.tiles = []
        for i in range(n):
            for j in range(n):
                x1 = (i + 1) * dw
                y1 = (j + 1) * dh
                if self.remainder == "extend":
                    if i == last:
                        x1 = self.width
                    if j == last:
                        y1 = self.height
                self.tiles.append(Rect(i * dw, j * dh, x1, y1))

    @property
    def covered(self) -> int:
        return sum(tile.area for tile in self.tiles)


def _render_tile(
    tile_id: int,
    frame: Frame,
    target,
    tile: Rect,
    min_tile: int,
    max_depth: int,
) -> Dict:
    start = time.perf_counter()
    stats = render_rect(frame, target, tile, 0, min_tile=min_tile, max_depth=max_depth)
    record = {
        "tile_id": tile_id,
        "x0": tile.x0,
        "y0": tile.y0,
        "x1": tile.x1,
        "y1": tile.y1,
        "comp_time": time.perf_counter() - start,
    }
    record.update(stats.to_dict())
    return record


def render_tiles(
    frame: Frame,
    surface: PixelSurface,
    scheduler: TileScheduler,
    *,
    max_workers: Optional[int] = None,
    min_tile: int = MIN_TILE,
    max_depth: int = MAX_DEPTH,
) -> List[Dict]:
    """Render every tile concurrently and wait for all of them.

    Each worker writes through its own disjoint view of ``surface``, so the
    writes need no locking. Returns one record per tile, in tile order.
    """
    views = surface.partition(scheduler.tiles)
    workers = max_workers or len(scheduler.tiles)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="tile") as pool:
        futures = [
            pool.submit(_render_tile, tile_id, frame, view, tile, min_tile, max_depth)
            for tile_id, (tile, view) in enumerate(zip(scheduler.tiles, views))
        ]
        return [future.result() for future in futures]
