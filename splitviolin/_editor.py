"""SplitViolinEditor — ipywidgets controls over a split violin plot."""
from __future__ import annotations

from typing import Any, Iterable

import ipywidgets as widgets
import matplotlib.pyplot as plt

from ._commands import BatchCommand, Command, CommandStack
from ._config import (
    RenderConfig, StyleConfig, list_profiles, load_profile, save_profile,
)
from ._draw import draw_primitives, group_colors
from ._geometry import render
from ._types import ConfigurationError, as_sample

_BANDWIDTHS = [("Scott", "scott"), ("Silverman", "silverman"),
               ("0.2", 0.2), ("0.5", 0.5), ("1.0", 1.0)]
_SN = {"description_width": "90px"}


def _parse_quantiles(text: str) -> list[float] | None:
    text = text.strip()
    if not text:
        return None
    try:
        return [float(part) for part in text.replace(";", ",").split(",")
                if part.strip()]
    except ValueError:
        raise ConfigurationError(f"Cannot parse quantiles: {text!r}") from None


def _format_quantiles(qs) -> str:
    return ", ".join(f"{q:g}" for q in qs) if qs else ""


class SplitViolinEditor:
    """Interactive split violin plot for Jupyter.

    Every control change is pushed onto a ``CommandStack`` so it can be
    undone; the figure is re-rendered from the samples after each change.
    """

    def __init__(self, samples: Iterable[Any],
                 config: RenderConfig | None = None,
                 style: StyleConfig | None = None,
                 figsize: tuple[float, float] = (6, 4),
                 canvas=None):
        self._samples = [as_sample(s) for s in samples]
        # edits stay local to the editor; callers keep their own configs
        self.config = (config or RenderConfig()).evolve()
        self.style = (style or StyleConfig()).evolve()
        self._fig, self._ax = plt.subplots(figsize=figsize)
        plt.close(self._fig)
        self._stack = CommandStack(on_change=self._on_stack_change)
        self._syncing = False
        self._live = False
        self._redraw_plot()
        if canvas is None:
            from ._renderer import CanvasManager
            canvas = CanvasManager(self._fig)
        self._canvas = canvas
        self._widget: widgets.Widget | None = None

    @property
    def figure(self):
        return self._fig

    @property
    def stack(self) -> CommandStack:
        return self._stack

    @property
    def widget(self) -> widgets.Widget:
        if self._widget is None:
            self._widget = self.build()
        return self._widget

    def display(self) -> None:
        from IPython.display import display
        display(self.widget)

    # -- drawing -----------------------------------------------------------

    def _redraw_plot(self) -> None:
        self._ax.clear()
        primitives = render(self._samples, config=self.config)
        draw_primitives(self._ax, primitives, self.style,
                        categories=self.config.order,
                        groups=self.config.hue_order)

    def _refresh(self, live: bool = False) -> None:
        try:
            self._redraw_plot()
        except Exception:
            import traceback, sys
            traceback.print_exc(file=sys.stderr)
        if live:
            self._canvas.redraw()
        else:
            self._canvas.force_redraw()

    def _execute(self, cmd: Command | BatchCommand, live: bool = False) -> None:
        """Push ``cmd``; ``live`` marks a slider drag (merged, throttled)."""
        if self._syncing:
            return
        self._live = live
        try:
            self._stack.execute(cmd, merge=live)
        finally:
            self._live = False

    def _on_stack_change(self) -> None:
        if self._widget is not None:
            self._sync_controls()
            self._undo_btn.disabled = not self._stack.can_undo
            self._redo_btn.disabled = not self._stack.can_redo
        self._refresh(live=self._live)

    # -- widgets -----------------------------------------------------------

    def _field_cb(self, target, name: str, description: str,
                  live: bool = False):
        def _cb(change):
            self._execute(Command(target, name, getattr(target, name),
                                  change["new"], description=description),
                          live=live)
        return _cb

    def build(self) -> widgets.Widget:
        cfg, style = self.config, self.style

        self._width_sl = widgets.FloatSlider(
            value=cfg.half_width_scale, min=0.05, max=0.5, step=0.01,
            description="Half width:", style=_SN)
        self._width_sl.observe(
            self._field_cb(cfg, "half_width_scale", "Half width", live=True),
            names="value")

        self._trim_cb = widgets.Checkbox(value=cfg.trim, description="Trim tails")
        self._trim_cb.observe(self._field_cb(cfg, "trim", "Trim"), names="value")

        bw_values = [v for _, v in _BANDWIDTHS]
        self._bw_dd = widgets.Dropdown(
            options=_BANDWIDTHS,
            value=cfg.bw_method if cfg.bw_method in bw_values else "scott",
            description="Bandwidth:", style=_SN)
        self._bw_dd.observe(
            self._field_cb(cfg, "bw_method", "Bandwidth"), names="value")

        self._quant_txt = widgets.Text(
            value=_format_quantiles(cfg.quantiles),
            placeholder="e.g. 0.25, 0.5, 0.75",
            description="Quantiles:", style=_SN, continuous_update=False)
        self._status = widgets.HTML("")

        def _quant_cb(change):
            try:
                qs = _parse_quantiles(change["new"])
                cfg.evolve(quantiles=qs).validate()
            except ConfigurationError as exc:
                self._status.value = f"<span style='color:#c00'>{exc}</span>"
                return
            self._status.value = ""
            self._execute(Command(cfg, "quantiles", cfg.quantiles, qs,
                                  description="Quantiles"))
        self._quant_txt.observe(_quant_cb, names="value")

        self._means_cb = widgets.Checkbox(value=cfg.show_means,
                                          description="Show means")
        self._means_cb.observe(
            self._field_cb(cfg, "show_means", "Show means"), names="value")

        colors = group_colors(style)
        self._color_pickers = []
        for i in range(2):
            picker = widgets.ColorPicker(value=colors[i],
                                         description=f"Group {i + 1}:",
                                         style=_SN)

            def _color_cb(change, i=i):
                old = style.colors
                new = list(group_colors(style))
                new[i] = change["new"]
                self._execute(Command(style, "colors", old, new,
                                      description=f"Group {i + 1} color"))
            picker.observe(_color_cb, names="value")
            self._color_pickers.append(picker)

        self._alpha_sl = widgets.FloatSlider(
            value=style.alpha, min=0, max=1, step=0.05,
            description="Alpha:", style=_SN)
        self._alpha_sl.observe(
            self._field_cb(style, "alpha", "Violin alpha", live=True), names="value")

        self._undo_btn = widgets.Button(description="Undo", icon="undo",
                                        disabled=True)
        self._redo_btn = widgets.Button(description="Redo", icon="repeat",
                                        disabled=True)
        self._undo_btn.on_click(lambda _b: self._stack.undo())
        self._redo_btn.on_click(lambda _b: self._stack.redo())

        controls = widgets.VBox([
            widgets.HTML("<b>Density</b>"),
            self._width_sl, self._trim_cb, self._bw_dd, self._quant_txt,
            self._status, self._means_cb,
            widgets.HTML("<b>Style</b>"),
            *self._color_pickers, self._alpha_sl,
            widgets.HBox([self._undo_btn, self._redo_btn]),
            self._build_profiles(),
        ], layout=widgets.Layout(width="320px"))
        return widgets.HBox([controls, self._canvas.widget])

    def _build_profiles(self) -> widgets.Widget:
        self._profile_name = widgets.Text(placeholder="profile name",
                                          layout=widgets.Layout(width="140px"))
        save_btn = widgets.Button(description="Save", icon="save",
                                  layout=widgets.Layout(width="70px"))
        self._profile_dd = widgets.Dropdown(options=list_profiles(),
                                            layout=widgets.Layout(width="140px"))
        load_btn = widgets.Button(description="Load", icon="folder-open",
                                  layout=widgets.Layout(width="70px"))

        def _save(_btn):
            name = self._profile_name.value.strip()
            try:
                save_profile(name, self.config, self.style)
            except ValueError as exc:
                self._status.value = f"<span style='color:#c00'>{exc}</span>"
                return
            self._profile_dd.options = list_profiles()

        def _load(_btn):
            if self._profile_dd.value:
                self.apply_profile(self._profile_dd.value)

        save_btn.on_click(_save)
        load_btn.on_click(_load)
        return widgets.VBox([
            widgets.HTML("<b>Profiles</b>"),
            widgets.HBox([self._profile_name, save_btn]),
            widgets.HBox([self._profile_dd, load_btn]),
        ])

    def apply_profile(self, name: str) -> None:
        """Load a saved profile as a single undoable step."""
        render_cfg, style_cfg = load_profile(name)
        label = f"Profile {name}"
        batch = BatchCommand.from_diff(self.config, render_cfg, label).extend(
            BatchCommand.from_diff(self.style, style_cfg, label))
        if batch:
            self._execute(batch)

    def _sync_controls(self) -> None:
        """Push config values back into the widgets without new commands."""
        cfg, style = self.config, self.style
        self._syncing = True
        try:
            self._width_sl.value = cfg.half_width_scale
            self._trim_cb.value = cfg.trim
            bw_values = [v for _, v in _BANDWIDTHS]
            self._bw_dd.value = (cfg.bw_method if cfg.bw_method in bw_values
                                 else "scott")
            self._quant_txt.value = _format_quantiles(cfg.quantiles)
            self._means_cb.value = cfg.show_means
            for picker, color in zip(self._color_pickers, group_colors(style)):
                picker.value = color
            self._alpha_sl.value = style.alpha
        finally:
            self._syncing = False
