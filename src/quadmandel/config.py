"""Configuration objects and YAML loading for render runs and sweeps."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from itertools import product
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import yaml

from .renderer import MAX_DEPTH, MIN_TILE
from .viewport import DEFAULT_CENTER, DEFAULT_HALF_WIDTH, Command, Viewport


@dataclass(frozen=True)
class RenderConfig:
    """Resolution, framing and engine knobs for a single render run."""

    width: int
    height: int
    grid_size: int = 4
    remainder: str = "extend"  # 'extend' or 'drop'
    center: Tuple[float, float] = DEFAULT_CENTER
    half_width: float = DEFAULT_HALF_WIDTH
    pan_step: float = 0.2
    zoom_factor: float = 1.5
    min_tile: int = MIN_TILE
    max_depth: int = MAX_DEPTH
    workers: Optional[int] = None
    commands: Tuple[str, ...] = ()

    @property
    def run_name(self) -> str:
        """Generate unique run name embedding the framing and grid."""
        name = (
            f"g{self.grid_size}_{self.remainder}_{self.image_size}_"
            f"c{self.center[0]:g}:{self.center[1]:g}_hw{self.half_width:g}"
        )
        if self.commands:
            name += f"_{len(self.commands)}cmd"
        return name

    @property
    def image_size(self) -> str:
        return f"{self.width}x{self.height}"

    def to_dict(self) -> dict:
        """Convert to dictionary for MLflow logging."""
        data = asdict(self)
        data["commands"] = ",".join(self.commands)
        return data

    def to_cli_args(self) -> List[str]:
        """Convert config to CLI arguments."""
        args = [
            f"--image-size={self.image_size}",
            f"--grid={self.grid_size}",
            f"--remainder={self.remainder}",
            f"--center={self.center[0]}:{self.center[1]}",
            f"--half-width={self.half_width}",
        ]
        if self.commands:
            args.append(f"--commands={','.join(self.commands)}")
        return args

    def make_viewport(self) -> Viewport:
        return Viewport(
            self.width,
            self.height,
            center_x=float(self.center[0]),
            center_y=float(self.center[1]),
            half_width=float(self.half_width),
        )


DEFAULT_RENDER_CONFIG = RenderConfig(width=320, height=240)


def default_render_config(**overrides: object) -> RenderConfig:
    """Return the canonical default config optionally overridden with kwargs."""
    return _build_render_config({**asdict(DEFAULT_RENDER_CONFIG), **overrides})


def load_sweep_configs(yaml_path: str | Path) -> List[RenderConfig]:
    """Load YAML config and generate all parameter sweep combinations.

    Supports a top-level ``sweep`` as well as several named experiments
    nested under ``experiments``.
    """
    with open(yaml_path) as f:
        cfg = yaml.safe_load(f) or {}

    global_defaults: Dict[str, object] = cfg.get("defaults", {}) or {}

    if "experiments" in cfg:
        configs: List[RenderConfig] = []
        for exp in cfg.get("experiments") or []:
            sweep = exp.get("sweep")
            if not sweep:
                continue
            exp_defaults = {**global_defaults, **(exp.get("defaults", {}) or {})}
            configs.extend(_expand_sweep(exp_defaults, sweep))
        return configs

    sweep: Dict[str, object] = cfg.get("sweep", {}) or {}
    return _expand_sweep(global_defaults, sweep)


def load_named_sweep_configs(
    yaml_path: str | Path,
    suite: str | None = None,
) -> List[tuple[str, List[RenderConfig]]]:
    with open(yaml_path) as f:
        cfg = yaml.safe_load(f) or {}

    defaults: Dict[str, object] = cfg.get("defaults", {}) or {}
    experiments = cfg.get("experiments")
    results: List[tuple[str, List[RenderConfig]]] = []

    if experiments:
        for exp in experiments:
            name = exp.get("name")
            if not name:
                continue
            if suite and name != suite:
                continue
            sweep = exp.get("sweep") or {}
            exp_defaults = {**defaults, **(exp.get("defaults", {}) or {})}
            results.append((name, _expand_sweep(exp_defaults, sweep)))
        if suite and not results:
            raise ValueError(f"Suite '{suite}' not found in {yaml_path}")
        return results

    sweep: Dict[str, object] = cfg.get("sweep", {}) or {}
    label = cfg.get("name") or Path(yaml_path).stem
    return [(label, _expand_sweep(defaults, sweep))]


def parse_image_size(value: str) -> Tuple[int, int]:
    width_str, height_str = value.lower().split("x")
    return int(width_str.strip()), int(height_str.strip())


def parse_pair(value: str) -> Tuple[float, float]:
    """Parse ``"a:b"`` into a float pair."""
    first, second = value.split(":")
    return float(first), float(second)


def parse_commands(value: str | Iterable[str] | None) -> Tuple[str, ...]:
    """Normalise a comma-separated string or list into command values."""
    if not value:
        return ()
    items = value.split(",") if isinstance(value, str) else list(value)
    return tuple(
        Command(str(item).strip().lower().replace("_", "-")).value
        for item in items
        if str(item).strip()
    )


def _build_render_config(raw_data: Dict[str, object]) -> RenderConfig:
    data = _coerce_dimensions(dict(raw_data))
    if "center" in data:
        center = data["center"]
        data["center"] = parse_pair(center) if isinstance(center, str) else tuple(map(float, center))
    for key in ("half_width", "pan_step", "zoom_factor"):
        if key in data:
            data[key] = float(data[key])
    for key in ("grid_size", "min_tile", "max_depth"):
        if key in data:
            data[key] = int(data[key])
    if data.get("workers") is not None:
        data["workers"] = int(data["workers"])
    if "commands" in data:
        data["commands"] = parse_commands(data["commands"])
    return RenderConfig(**data)  # type: ignore[arg-type]


def _expand_sweep(defaults: Dict[str, object], sweep: Dict[str, object]) -> List[RenderConfig]:
    """Expand sweep definition into RenderConfig instances."""
    configs: List[RenderConfig] = []

    framings = sweep.get("framings")
    param_grid = {k: sweep[k] for k in sweep if k not in {"framings", "image_shape"}}
    shape_options = sweep.get("image_shape")
    keys = list(param_grid.keys())

    for framing in framings or [{}]:
        combos = product(*[param_grid[k] for k in keys]) if keys else [()]
        for combo in combos:
            data = {**defaults, **dict(zip(keys, combo)), **framing}
            configs.extend(_expand_shapes(data, shape_options))

    return configs


def _coerce_dimensions(data: Dict[str, object]) -> Dict[str, object]:
    result = dict(data)
    image = result.pop("image_size", None)
    if image is not None:
        width, height = _normalize_shape_entry(image)
        result["width"] = width
        result["height"] = height
    shape = result.pop("image_shape", None)
    if shape is not None:
        width, height = _normalize_shape_entry(shape)
        result.setdefault("width", width)
        result.setdefault("height", height)
    if "width" in result:
        result["width"] = int(result["width"])
    if "height" in result:
        result["height"] = int(result["height"])
    return result


def _normalize_shape_entry(entry: object) -> Tuple[int, int]:
    if isinstance(entry, dict):
        width = entry.get("width")
        height = entry.get("height")
        if width is None or height is None:
            raise ValueError("image_shape dict must include 'width' and 'height'")
        return int(width), int(height)
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return int(entry[0]), int(entry[1])
    if isinstance(entry, str):
        return parse_image_size(entry)
    raise ValueError(f"Unsupported image shape specification: {entry!r}")


def _expand_shapes(base: Dict[str, object], shape_options: object) -> List[RenderConfig]:
    if not shape_options:
        return [_build_render_config(base)]

    shapes: Iterable[Tuple[int, int]]
    if isinstance(shape_options, (list, tuple)):
        shapes = [_normalize_shape_entry(opt) for opt in shape_options]
    else:
        shapes = [_normalize_shape_entry(shape_options)]

    configs = []
    for width, height in shapes:
        data = {**base, "width": width, "height": height}
        configs.append(_build_render_config(data))
    return configs
