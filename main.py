from __future__ import annotations

import argparse
import sys
from pathlib import Path

from quadmandel.config import default_render_config, load_named_sweep_configs, parse_pair
from quadmandel.execution import run_single_experiment, run_sweep


def parse_args():
    parser = argparse.ArgumentParser(description="Render the Mandelbrot set with tiled subdivision.")
    parser.add_argument("--sweep", type=str, help="Path to sweep YAML file")
    parser.add_argument("--suite", type=str, help="Name of suite/experiment within sweep file")
    parser.add_argument("--list-suites", action="store_true", help="List suites in sweep file")
    parser.add_argument("--task-id", type=int, help="Run specific config index within a suite")
    parser.add_argument("--view", action="store_true", help="Open the interactive viewer")

    parser.add_argument("--image-size", type=str, default="320x240", help="Resolution as WIDTHxHEIGHT")
    parser.add_argument("--grid", type=int, default=4, help="Tiles per side")
    parser.add_argument("--remainder", choices=("extend", "drop"), default="extend")
    parser.add_argument("--center", type=str, default="-0.5:0", help="Centre as X:Y")
    parser.add_argument("--half-width", type=float, default=2.0)
    parser.add_argument("--workers", type=int, help="Thread pool size (defaults to one per tile)")
    parser.add_argument("--commands", type=str, help="Comma-separated navigation commands to apply first")

    return parser.parse_args()


def main():
    args = parse_args()

    if args.sweep:
        sweep_path = Path(args.sweep)

        if args.list_suites:
            for name, configs in load_named_sweep_configs(sweep_path):
                print(f"{name or sweep_path.stem}: {len(configs)} configurations")
            return 0

        if args.task_id is not None and args.suite is None:
            sys.exit("ERROR: --task-id requires --suite")

        suites = load_named_sweep_configs(sweep_path, args.suite)

        exit_code = 0
        for suite_name, configs in suites:
            descriptor = f"{sweep_path}::{suite_name}" if suite_name else str(sweep_path)
            rc = run_sweep(configs, args.task_id, suite_name, descriptor)
            exit_code = exit_code or rc
        return exit_code

    if args.suite or args.list_suites:
        sys.exit("ERROR: --suite and --list-suites require --sweep")

    try:
        config = default_render_config(
            image_size=args.image_size,
            grid_size=args.grid,
            remainder=args.remainder,
            center=parse_pair(args.center),
            half_width=args.half_width,
            workers=args.workers,
            commands=args.commands,
        )
        if args.view:
            from quadmandel.viewer import MandelViewer

            MandelViewer(config).show()
        else:
            run_single_experiment(config, None)
    except ValueError as exc:
        sys.exit(f"ERROR: {exc}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
