"""Engine entry points and CLI render workflows."""

from __future__ import annotations

import os
import sys
import time
from typing import Optional, Union

from .config import DEFAULT_RENDER_CONFIG, RenderConfig
from .logging import log_to_mlflow
from .report import RenderReport
from .scheduling import TileScheduler, render_tiles
from .surface import PixelSurface
from .viewport import Command, Viewport


def render(
    viewport: Viewport,
    surface: PixelSurface,
    config: Optional[RenderConfig] = None,
) -> RenderReport:
    """Render the current viewport into ``surface`` and block until every tile is done."""
    config = config or DEFAULT_RENDER_CONFIG
    if surface.size != viewport.resolution:
        raise ValueError(
            f"Surface is {surface.width}x{surface.height} but viewport is "
            f"{viewport.pixel_width}x{viewport.pixel_height}"
        )

    frame = viewport.frame()
    scheduler = TileScheduler(
        frame.width,
        frame.height,
        grid_size=config.grid_size,
        remainder=config.remainder,
    )

    start = time.perf_counter()
    tiles = render_tiles(
        frame,
        surface,
        scheduler,
        max_workers=config.workers,
        min_tile=config.min_tile,
        max_depth=config.max_depth,
    )
    wall_time = time.perf_counter() - start

    timing = {
        "wall_time": wall_time,
        "comp_total": sum(record["comp_time"] for record in tiles),
        "tiles": len(tiles),
        "covered": scheduler.covered,
    }
    return RenderReport(frame, timing, tiles)


def apply_command(
    viewport: Viewport,
    command: Union[Command, str],
    config: Optional[RenderConfig] = None,
) -> None:
    """Mutate ``viewport`` for one navigation command; call between renders only."""
    config = config or DEFAULT_RENDER_CONFIG
    command = Command(command)
    step = config.pan_step

    if command is Command.PAN_LEFT:
        viewport.pan(-step, 0.0)
    elif command is Command.PAN_RIGHT:
        viewport.pan(step, 0.0)
    elif command is Command.PAN_UP:
        viewport.pan(0.0, -step)
    elif command is Command.PAN_DOWN:
        viewport.pan(0.0, step)
    elif command is Command.ZOOM_IN:
        viewport.zoom(1.0 / config.zoom_factor)
    elif command is Command.ZOOM_OUT:
        viewport.zoom(config.zoom_factor)
    elif command is Command.RESET:
        viewport.reset()


def prepare_viewport(config: RenderConfig) -> Viewport:
    """Build the configured viewport and replay its navigation commands."""
    viewport = config.make_viewport()
    for command in config.commands:
        apply_command(viewport, command, config)
    return viewport


def run_single_experiment(
    config: RenderConfig,
    suite_name: Optional[str],
) -> RenderReport:
    """Render a single configuration, print its timings and log it."""
    print(
        f"[Render] Starting '{config.run_name}' "
        f"(grid={config.grid_size}x{config.grid_size}, remainder={config.remainder}, "
        f"size={config.image_size})",
        flush=True,
    )

    viewport = prepare_viewport(config)
    surface = PixelSurface(config.width, config.height)
    report = render(viewport, surface, config)

    suite = suite_name or os.environ.get("QUADMANDEL_SUITE") or "default"

    if os.environ.get("SKIP_MLFLOW"):
        print("[Render] SKIP_MLFLOW set - skipping MLflow logging.", flush=True)
    else:
        print("[Render] Render finished, logging to MLflow...", flush=True)

    log_to_mlflow(config, report, suite)

    totals = report.totals()
    print(
        f"[Timing] Total: {report.timing['wall_time']:.4f}s "
        f"(evaluated={int(totals['evaluated'])}, filled={int(totals['filled'])}, "
        f"saved={totals['saved_fraction']:.1%})"
    )
    return report


def run_sweep(
    configs: list[RenderConfig],
    task_id: Optional[int] = None,
    suite_name: Optional[str] = None,
    descriptor: Optional[str] = None,
) -> int:
    """Render every configuration of a sweep, or only ``task_id``."""
    descriptor = descriptor or "sweep"

    if not configs:
        print("ERROR: No configurations found in sweep", file=sys.stderr)
        return 1

    if task_id is not None:
        if task_id < 0 or task_id >= len(configs):
            print(f"ERROR: task-id {task_id} out of range [0, {len(configs) - 1}]", file=sys.stderr)
            return 1
        config = configs[task_id]
        print(f"[Task {task_id}] Running: {config.run_name}")
        run_single_experiment(config, suite_name)
        return 0

    print("=" * 70)
    print(f"Running {len(configs)} configurations from {descriptor}")
    print("=" * 70)

    failures: list[tuple[int, str]] = []
    for idx, cfg in enumerate(configs):
        print(f"\n[{idx + 1}/{len(configs)}] {cfg.run_name}")
        try:
            run_single_experiment(cfg, suite_name)
        except ValueError as exc:
            print(f"    ✗ FAILED: {exc}", file=sys.stderr)
            failures.append((idx, cfg.run_name))
            continue
        print("    ✓ Completed")

    print("\n" + "=" * 70)
    print("Summary")
    print("=" * 70)
    print(f"Total:      {len(configs)}")
    print(f"Successful: {len(configs) - len(failures)}")
    print(f"Failed:     {len(failures)}")

    if failures:
        print("\nFailed configurations:")
        for idx, name in failures:
            print(f"  [{idx}] {name}")
        return 1

    return 0
