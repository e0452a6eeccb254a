"""PNG canvas for the editor — a static image inside an Output widget."""
from __future__ import annotations

import io
import time

import ipywidgets as widgets
from matplotlib.figure import Figure


def figure_png(fig: Figure, dpi: int = 100) -> bytes:
    """Render ``fig`` to PNG bytes, keeping the legend inside the crop."""
    fig.tight_layout()
    legends = [ax.get_legend() for ax in fig.get_axes()]
    buf = io.BytesIO()
    fig.savefig(buf, format="png", bbox_inches="tight",
                bbox_extra_artists=[leg for leg in legends if leg] or None,
                pad_inches=0.15, facecolor=fig.get_facecolor(),
                edgecolor="none", dpi=dpi)
    return buf.getvalue()


class CanvasManager:
    """Shows the editor's figure as a PNG.

    Slider drags call ``redraw()``, which skips frames closer together than
    ``min_interval`` seconds; every other change calls ``force_redraw()``.
    """

    def __init__(self, fig: Figure, dpi: int = 100, min_interval: float = 0.08):
        self._fig = fig
        self._dpi = dpi
        self._min_interval = min_interval
        self._last_draw = 0.0
        self._output = widgets.Output()
        self.force_redraw()

    @property
    def widget(self) -> widgets.Widget:
        return self._output

    def _render(self) -> None:
        from IPython.display import Image, display
        png = figure_png(self._fig, self._dpi)
        self._output.clear_output(wait=True)
        with self._output:
            display(Image(data=png))

    def redraw(self) -> None:
        now = time.monotonic()
        if now - self._last_draw < self._min_interval:
            return
        self._last_draw = now
        self._render()

    def force_redraw(self) -> None:
        self._last_draw = time.monotonic()
        self._render()
