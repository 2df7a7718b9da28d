"""MLflow logging helpers."""

import mlflow

from quadmandel import logging as render_logging
from quadmandel.config import default_render_config
from quadmandel.execution import render
from quadmandel.surface import PixelSurface


def _report():
    config = default_render_config(image_size="16x12", grid_size=2)
    return config, render(config.make_viewport(), PixelSurface(16, 12), config)


def test_skip_mlflow_does_not_touch_tracking(monkeypatch):
    def _fail(*args, **kwargs):
        raise AssertionError("MLflow should not be called")

    monkeypatch.setattr(mlflow, "set_tracking_uri", _fail)
    config, report = _report()
    render_logging.log_to_mlflow(config, report, "TESTS")


def test_records_to_table_is_column_oriented():
    _, report = _report()
    table = render_logging._records_to_table(report.copy_tiles())
    assert len(table["tile_id"]) == 4
    assert set(table) >= {"evaluated", "filled", "comp_time", "x0", "y1"}


def test_logs_run_to_local_store(tmp_path, monkeypatch):
    monkeypatch.delenv("SKIP_MLFLOW", raising=False)
    monkeypatch.delenv("MLFLOW_RUN_ID", raising=False)
    monkeypatch.setenv("MLFLOW_TRACKING_URI", tmp_path.as_uri())
    config, report = _report()

    render_logging.log_to_mlflow(config, report, "TESTS")

    runs = mlflow.search_runs(experiment_names=[render_logging.EXPERIMENT_NAME])
    assert len(runs) == 1
    assert runs.iloc[0]["params.grid_size"] == "2"
    assert runs.iloc[0]["tags.suite"] == "TESTS"
