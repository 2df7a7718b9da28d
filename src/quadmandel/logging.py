"""MLflow logging for render runs."""

from __future__ import annotations

import os
import platform
from typing import Any, Dict, List, Sequence

import mlflow
import pandas as pd

from .config import RenderConfig
from .report import RenderReport

DEFAULT_TRACKING_URI = "file:./mlruns"
EXPERIMENT_NAME = "quadmandel"


def log_to_mlflow(
    config: RenderConfig,
    report: RenderReport,
    suite_name: str = "default",
) -> None:
    """Log a render run with its parameters, totals and per-tile table.

    If MLFLOW_RUN_ID is set in the environment the existing run is continued,
    otherwise a new run is created.

    Args:
        config: Run configuration
        report: Timing and per-tile counters from ``render``
        suite_name: Name of the suite (TESTS, zoom, ...) for tagging/filtering
    """
    # Skip logging in test mode
    if os.environ.get("SKIP_MLFLOW"):
        return

    mlflow.set_tracking_uri(_resolve_tracking_uri())
    mlflow.set_experiment(os.environ.get("MLFLOW_EXPERIMENT_NAME") or EXPERIMENT_NAME)

    existing_run_id = os.environ.get("MLFLOW_RUN_ID")
    if existing_run_id:
        run_context = mlflow.start_run(run_id=existing_run_id)
    else:
        run_context = mlflow.start_run(run_name=config.run_name)

    with run_context as run:
        mlflow.set_tags({"node_name": platform.node(), "suite": suite_name})

        tile_records = report.copy_tiles()
        if tile_records:
            mlflow.log_table(_records_to_table(tile_records), "tiles.json")

        mlflow.log_params(config.to_dict())

        metrics = {
            "wall_time": float(report.timing.get("wall_time", 0.0)),
            "comp_total": float(report.timing.get("comp_total", 0.0)),
            "covered": float(report.timing.get("covered", 0)),
        }
        metrics.update({key: float(value) for key, value in report.totals().items()})
        mlflow.log_metrics(metrics)

        print(f"[MLflow] Logged run: {config.run_name} (suite: {suite_name})")
        print(f"[MLflow] Run ID: {run.info.run_id}")


def _records_to_table(tile_records: Sequence[Dict[str, Any]]) -> Dict[str, List[Any]]:
    """Convert row-wise tile records into MLflow table format."""
    frame = pd.DataFrame.from_records(tile_records)
    return frame.to_dict(orient="list")


def _resolve_tracking_uri() -> str:
    return os.environ.get("MLFLOW_TRACKING_URI") or DEFAULT_TRACKING_URI
