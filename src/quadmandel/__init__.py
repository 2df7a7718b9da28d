"""quadmandel - tiled boundary-uniform Mandelbrot renderer."""

__version__ = "1.0.0"

# Core engine - lightweight, no MLflow or matplotlib import
from .computation import escape_intensity, quantize
from .config import RenderConfig, default_render_config
from .report import RenderReport
from .surface import PixelSurface
from .viewport import Command, Viewport


# Conditional imports - only loaded when needed
def __getattr__(name):
    """Lazy loading of heavy modules."""
    if name in ("render", "apply_command"):
        from . import execution

        return getattr(execution, name)
    elif name == "load_sweep_configs":
        from .config import load_sweep_configs

        return load_sweep_configs
    elif name == "MandelViewer":
        from .viewer import MandelViewer

        return MandelViewer
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Command",
    "PixelSurface",
    "RenderConfig",
    "RenderReport",
    "Viewport",
    "apply_command",
    "default_render_config",
    "escape_intensity",
    "load_sweep_configs",
    "quantize",
    "render",
    "MandelViewer",
]
