"""Pixel surface writes, views and partitions."""

import numpy as np
import pytest

from quadmandel.surface import PixelSurface


def test_set_writes_rgb_triple():
    surface = PixelSurface(4, 3)
    surface.set(2, 1, 10, 20, 30)
    assert tuple(surface.pixels[1, 2]) == (10, 20, 30)
    assert surface.pixels.sum() == 60


@pytest.mark.parametrize("point", [(-1, 0), (0, -1), (4, 0), (0, 3), (100, 100)])
def test_out_of_range_writes_are_ignored(point):
    surface = PixelSurface(4, 3)
    surface.set(*point, 255, 255, 255)
    assert surface.pixels.sum() == 0


def test_fill_is_clipped():
    surface = PixelSurface(5, 4)
    surface.fill(-2, 2, 10, 10, 1, 2, 3)
    assert (surface.pixels[2:, :] == (1, 2, 3)).all()
    assert surface.pixels[:2].sum() == 0
    surface.fill(3, 3, 3, 4, 9, 9, 9)
    assert surface.pixels.max() == 3


def test_to_bytes_is_row_major_rgb():
    surface = PixelSurface(3, 2)
    surface.set(1, 0, 1, 2, 3)
    surface.set(0, 1, 4, 5, 6)
    data = surface.to_bytes()
    assert len(data) == 3 * 2 * 3
    assert data[3:6] == bytes((1, 2, 3))
    assert data[9:12] == bytes((4, 5, 6))


def test_pixels_are_read_only():
    surface = PixelSurface(2, 2)
    with pytest.raises(ValueError):
        surface.pixels[0, 0] = (1, 1, 1)


def test_rejects_empty_surface():
    with pytest.raises(ValueError):
        PixelSurface(0, 5)


def test_view_clips_to_its_extent():
    surface = PixelSurface(6, 6)
    view = surface.view(2, 2, 4, 4)
    view.set(1, 1, 7, 7, 7)
    view.set(3, 3, 8, 8, 8)
    view.fill(0, 0, 6, 6, 5, 5, 5)
    expected = np.zeros((6, 6, 3), dtype=np.uint8)
    expected[2:4, 2:4] = 5
    np.testing.assert_array_equal(surface.pixels, expected)


def test_partition_rejects_overlap():
    surface = PixelSurface(8, 8)
    with pytest.raises(ValueError):
        surface.partition([(0, 0, 4, 4), (3, 3, 8, 8)])


def test_partition_returns_views_in_order():
    surface = PixelSurface(8, 8)
    rects = [(0, 0, 4, 8), (4, 0, 8, 8), (8, 0, 8, 8)]
    views = surface.partition(rects)
    assert [view.extent for view in views] == rects
    views[1].fill(0, 0, 8, 8, 1, 1, 1)
    assert surface.pixels[:, :4].sum() == 0
    assert (surface.pixels[:, 4:] == 1).all()


def test_blit_copies_block_clipped_to_raster():
    surface = PixelSurface(4, 3)
    block = np.arange(2 * 3 * 3, dtype=np.uint8).reshape(2, 3, 3)
    surface.blit(2, 2, block)
    np.testing.assert_array_equal(surface.pixels[2, 2:4], block[0, :2])
    assert surface.pixels[:2].sum() == 0
    assert surface.pixels[2, :2].sum() == 0


def test_view_blit_stays_inside_extent():
    surface = PixelSurface(6, 6)
    view = surface.view(2, 2, 4, 4)
    view.blit(1, 1, np.full((4, 4, 3), 9, dtype=np.uint8))
    expected = np.zeros((6, 6, 3), dtype=np.uint8)
    expected[2:4, 2:4] = 9
    np.testing.assert_array_equal(surface.pixels, expected)
