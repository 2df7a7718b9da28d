"""Structured results returned from a render pass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .viewport import Frame


@dataclass(frozen=True)
class RenderReport:
    """Container for the outputs produced by ``render``."""

    frame: Frame
    timing: Dict[str, Any]
    tiles: Optional[List[Dict[str, Any]]]

    def copy_tiles(self) -> Optional[List[Dict[str, Any]]]:
        if self.tiles is None:
            return None
        return [record.copy() for record in self.tiles]

    def totals(self) -> Dict[str, float]:
        """Aggregate tile counters, plus the fraction of pixels never evaluated."""
        keys = ("evaluated", "filled", "uniform_hits", "exhaustive_rects", "subdivisions")
        totals: Dict[str, float] = {key: 0 for key in keys}
        for record in self.tiles or []:
            for key in keys:
                totals[key] += record.get(key, 0)
        written = totals["evaluated"] + totals["filled"]
        totals["saved_fraction"] = totals["filled"] / written if written else 0.0
        return totals
