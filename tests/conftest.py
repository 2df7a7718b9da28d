import numpy as np
import pytest

from quadmandel.surface import PixelSurface


class CountingSurface(PixelSurface):
    """Surface that counts how many times each pixel is written."""

    def __init__(self, width: int, height: int):
        super().__init__(width, height)
        self.counts = np.zeros((height, width), dtype=np.int64)

    def _count(self, x0, y0, x1, y1):
        cx0, cx1 = max(x0, 0), min(x1, self.width)
        cy0, cy1 = max(y0, 0), min(y1, self.height)
        if cx0 < cx1 and cy0 < cy1:
            self.counts[cy0:cy1, cx0:cx1] += 1

    def set(self, x, y, r, g, b):
        self._count(x, y, x + 1, y + 1)
        super().set(x, y, r, g, b)

    def fill(self, x0, y0, x1, y1, r, g, b):
        self._count(x0, y0, x1, y1)
        super().fill(x0, y0, x1, y1, r, g, b)

    def blit(self, x, y, block):
        self._count(x, y, x + block.shape[1], y + block.shape[0])
        super().blit(x, y, block)


@pytest.fixture(autouse=True)
def _skip_mlflow(monkeypatch):
    monkeypatch.setenv("SKIP_MLFLOW", "1")
    monkeypatch.setenv("MLFLOW_ALLOW_FILE_STORE", "true")


@pytest.fixture
def counting_surface():
    return CountingSurface
