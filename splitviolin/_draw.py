"""Matplotlib adapter — turns split-violin primitives into artists."""
from __future__ import annotations

from typing import Any, Sequence

import matplotlib
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection, PolyCollection
from matplotlib.colors import ListedColormap, to_hex
from matplotlib.patches import Patch

from ._config import RenderConfig, StyleConfig
from ._data import samples_from_columns
from ._geometry import render
from ._types import MeanMarker, Primitive, QuantileSegment, ViolinPolygon


def _cmap_color(cmap, i, n):
    """Sample color i of n: discrete for small qualitative maps, else spread."""
    if isinstance(cmap, ListedColormap) and cmap.N <= 20:
        return cmap(i % cmap.N)
    return cmap(i / max(n - 1, 1))


def get_palette_colors(cmap_name: str, n: int = 2) -> list[str]:
    """Get n hex colors from a colormap, falling back to tab10."""
    try:
        cmap = matplotlib.colormaps.get_cmap(cmap_name)
    except (KeyError, ValueError):
        cmap = matplotlib.colormaps.get_cmap("tab10")
    return [to_hex(_cmap_color(cmap, i, n)) for i in range(n)]


def group_colors(style: StyleConfig) -> list[str]:
    colors = list(style.colors or [])
    if len(colors) < 2:
        colors += get_palette_colors(style.palette, 2)[len(colors):]
    return colors[:2]


def draw_primitives(ax, primitives: Sequence[Primitive],
                    style: StyleConfig | None = None,
                    categories: Sequence[Any] | None = None,
                    groups: Sequence[Any] | None = None) -> dict[str, Any]:
    """Add primitives to ``ax``; returns artists keyed like ``violinplot``.

    ``"bodies"`` holds one PolyCollection per half violin, ``"quantiles"``
    a single LineCollection (or None) and ``"means"`` one scatter per group.

    ``categories`` labels the ticks at 0, 1, 2, ... (the centers ``render``
    assigns), including categories that drew nothing.  ``groups`` names the
    two legend entries in left, right order.  Both default to what the
    primitives carry.
    """
    style = style or StyleConfig()
    colors = group_colors(style)
    result: dict[str, Any] = {"bodies": [], "quantiles": None, "means": []}

    ticks: dict[float, Any] = {}
    seen_groups: dict[int, Any] = {}
    segments, seg_colors = [], []
    means: dict[int, list[tuple[float, float]]] = {}

    for prim in primitives:
        seen_groups.setdefault(prim.group_index, prim.group)
        if isinstance(prim, ViolinPolygon):
            ticks.setdefault(prim.center, prim.category)
            body = PolyCollection(
                [prim.vertices],
                facecolors=colors[prim.group_index],
                edgecolors=style.edgecolor,
                linewidths=style.linewidth,
                alpha=style.alpha)
            body._splitviolin_tag = (prim.category, prim.group)
            ax.add_collection(body)
            result["bodies"].append(body)
        elif isinstance(prim, QuantileSegment):
            segments.append([prim.start, prim.end])
            seg_colors.append(style.quantile_color or style.edgecolor)
        elif isinstance(prim, MeanMarker):
            means.setdefault(prim.group_index, []).append((prim.x, prim.y))

    if segments:
        lc = LineCollection(segments, colors=seg_colors,
                            linestyles=style.quantile_linestyle,
                            linewidths=style.linewidth)
        ax.add_collection(lc)
        result["quantiles"] = lc

    for index, points in sorted(means.items()):
        xs, ys = zip(*points)
        sc = ax.scatter(xs, ys, marker=style.mean_marker,
                        s=style.mean_size ** 2, c=style.mean_color,
                        zorder=3, label="_nolegend_")
        result["means"].append(sc)

    if categories is not None:
        ticks = {float(i): c for i, c in enumerate(categories)}
    if ticks:
        centers = sorted(ticks)
        ax.set_xticks(centers)
        ax.set_xticklabels([str(ticks[c]) for c in centers])
    ax.autoscale_view()

    if groups is not None:
        seen_groups = dict(enumerate(list(groups)[:2]))
    if style.legend and seen_groups:
        handles = [Patch(facecolor=colors[i], edgecolor=style.edgecolor,
                         alpha=style.alpha, label=str(seen_groups[i]))
                   for i in sorted(seen_groups)]
        ax.legend(handles=handles)
    return result


def splitviolinplot(data=None, *, x: str, hue: str, y: str, ax=None,
                    config: RenderConfig | None = None,
                    style: StyleConfig | None = None):
    """Draw a split violin plot of ``y`` by ``x`` with halves by ``hue``.

    Example::

        ax = splitviolinplot(df, x="treatment", hue="sex", y="marks",
                             config=RenderConfig(quantiles=[0.25, 0.5, 0.75]))
    """
    samples = samples_from_columns(data, x, hue, y)
    config = config or RenderConfig()
    primitives = render(samples, config=config)
    if ax is None:
        ax = plt.gca()
    draw_primitives(ax, primitives, style, categories=config.order,
                    groups=config.hue_order)
    ax.set_xlabel(x)
    ax.set_ylabel(y)
    return ax
