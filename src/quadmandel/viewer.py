"""Interactive matplotlib window: keys become navigation commands."""

from __future__ import annotations

from typing import Dict, Optional

from .config import RenderConfig
from .execution import apply_command, prepare_viewport, render
from .report import RenderReport
from .surface import PixelSurface
from .viewport import Command

KEY_COMMANDS: Dict[str, Command] = {
    "left": Command.PAN_LEFT,
    "right": Command.PAN_RIGHT,
    "up": Command.PAN_UP,
    "down": Command.PAN_DOWN,
    "+": Command.ZOOM_IN,
    "=": Command.ZOOM_IN,
    "-": Command.ZOOM_OUT,
    "f": Command.RESET,
    "F": Command.RESET,
}
QUIT_KEYS = ("q", "Q")


def command_for_key(key: Optional[str]) -> Optional[Command]:
    if key is None:
        return None
    return KEY_COMMANDS.get(key)


class MandelViewer:
    """Owns the session viewport and surface; re-renders after every command."""

    def __init__(self, config: RenderConfig):
        self.config = config
        self.viewport = prepare_viewport(config)
        self.surface = PixelSurface(config.width, config.height)
        self.last_report: Optional[RenderReport] = None
        self._figure = None
        self._image = None

    def refresh(self) -> RenderReport:
        self.last_report = render(self.viewport, self.surface, self.config)
        print(f"[Render] {self.last_report.timing['wall_time']:.4f}s", flush=True)
        if self._image is not None:
            self._image.set_data(self.surface.pixels)
            self._figure.canvas.draw_idle()
        return self.last_report

    def handle_key(self, key: Optional[str]) -> bool:
        """Apply the command bound to ``key``; return False once the viewer should close."""
        if key in QUIT_KEYS:
            if self._figure is not None:
                import matplotlib.pyplot as plt

                plt.close(self._figure)
            return False
        command = command_for_key(key)
        if command is None:
            print(f"[Viewer] Unbound key {key!r}", flush=True)
            return True
        apply_command(self.viewport, command, self.config)
        self.refresh()
        return True

    def _on_key(self, event) -> None:
        self.handle_key(event.key)

    def show(self) -> None:
        import matplotlib.pyplot as plt

        _release_default_keymaps(plt.rcParams)
        self.refresh()
        dpi = 100
        self._figure = plt.figure(
            figsize=(self.config.width / dpi, self.config.height / dpi), dpi=dpi
        )
        ax = self._figure.add_axes((0, 0, 1, 1))
        ax.axis("off")
        self._image = ax.imshow(self.surface.pixels, origin="upper", interpolation="nearest")
        self._figure.canvas.mpl_connect("key_press_event", self._on_key)
        self._figure.canvas.manager.set_window_title("quadmandel")
        plt.show()


def _release_default_keymaps(rc_params) -> None:
    """Drop matplotlib's built-in bindings for the keys the viewer uses."""
    taken = set(KEY_COMMANDS) | set(QUIT_KEYS)
    for name in list(rc_params.keys()):
        if name.startswith("keymap."):
            rc_params[name] = [key for key in rc_params[name] if key not in taken]
