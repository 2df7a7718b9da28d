"""Tiled renders against the exhaustive baseline."""

from pathlib import Path

import numpy as np
import pytest

from quadmandel.baseline import compute_image
from quadmandel.computation import band_color
from quadmandel.config import default_render_config, load_sweep_configs
from quadmandel.execution import prepare_viewport, render
from quadmandel.surface import PixelSurface
from quadmandel.viewport import Viewport

TEST_CONFIGS_PATH = Path(__file__).parent / "test_configs.yaml"

TEST_CONFIGS = load_sweep_configs(TEST_CONFIGS_PATH)


def _render(viewport, config):
    surface = PixelSurface(*viewport.resolution)
    report = render(viewport, surface, config)
    return surface.pixels.copy(), report


@pytest.mark.parametrize("config", TEST_CONFIGS, ids=lambda c: c.run_name)
def test_render_matches_baseline(config):
    viewport = prepare_viewport(config)
    image, report = _render(viewport, config)

    baseline = compute_image(viewport.frame())
    np.testing.assert_array_equal(image, baseline, err_msg=f"Mismatch: {config.run_name}")
    assert report.timing["tiles"] == config.grid_size**2
    assert report.timing["covered"] == config.width * config.height


@pytest.mark.parametrize("framing", [((1.1, 0.0), 0.5), ((-0.75, 0.1), 0.25)])
def test_render_is_deterministic(framing):
    (cx, cy), half_width = framing
    config = default_render_config(image_size="40x30")
    viewport = Viewport(40, 30, cx, cy, half_width)
    first, _ = _render(viewport, config)
    second, _ = _render(viewport, config)
    np.testing.assert_array_equal(first, second)


def test_grid_size_does_not_change_image():
    viewport = Viewport(30, 22, 1.1, 0.0, 0.5)
    images = [
        _render(viewport, default_render_config(image_size="30x22", grid_size=n))[0]
        for n in (1, 2, 4)
    ]
    np.testing.assert_array_equal(images[0], images[1])
    np.testing.assert_array_equal(images[0], images[2])


def test_surface_size_must_match_viewport():
    with pytest.raises(ValueError):
        render(Viewport(16, 16), PixelSurface(16, 8))


def test_drop_mode_leaves_strip_black():
    config = default_render_config(image_size="18x10", remainder="drop")
    viewport = Viewport(18, 10, 4.0, 3.0, 1.0)
    image, report = _render(viewport, config)
    assert (image[:8, :16] == band_color(240)).all()
    assert image[8:, :].sum() == 0
    assert image[:, 16:].sum() == 0
    assert report.timing["covered"] == 16 * 8


def test_default_framing_scenario():
    config = default_render_config(image_size="16x16")
    viewport = Viewport(16, 16)
    image, report = _render(viewport, config)

    black = (image == 0).all(axis=2)
    assert black[6:10, 6:10].sum() >= 10
    assert black[8, 8]
    for y, x in [(0, 0), (0, 15), (15, 0), (15, 15)]:
        assert tuple(image[y, x]) == band_color(240)
    totals = report.totals()
    assert totals["evaluated"] + totals["filled"] == 16 * 16

    viewport.zoom(0.5)
    viewport.zoom(0.5)
    zoomed, _ = _render(viewport, config)
    assert not np.array_equal(zoomed, image)

    viewport.zoom(2.0)
    viewport.zoom(2.0)
    restored, _ = _render(viewport, config)
    np.testing.assert_array_equal(restored, image)
