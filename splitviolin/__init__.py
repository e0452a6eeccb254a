"""splitviolin — mirrored two-group violin plots.

Usage:
    from splitviolin import render, splitviolinplot, RenderConfig

    # Pure geometry: (category, group, value) samples -> primitives
    prims = render(samples, trim=True, quantiles=[0.25, 0.5, 0.75])

    # Straight onto a matplotlib Axes
    splitviolinplot(df, x="treatment", hue="sex", y="marks")

    # Jupyter editor with undo/redo
    SplitViolinEditor(samples).display()
"""
from __future__ import annotations

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "DensityGeometryBuilder",
    "MeanMarker",
    "QuantileSegment",
    "RenderConfig",
    "Sample",
    "Side",
    "SplitViolinEditor",
    "StyleConfig",
    "ViolinPolygon",
    "delete_profile",
    "draw_primitives",
    "list_profiles",
    "load_profile",
    "render",
    "samples_from_columns",
    "save_profile",
    "splitviolinplot",
]

from ._config import (
    RenderConfig, StyleConfig, delete_profile, list_profiles, load_profile,
    save_profile,
)
from ._data import samples_from_columns
from ._draw import draw_primitives, splitviolinplot
from ._geometry import DensityGeometryBuilder, render
from ._types import (
    ConfigurationError, MeanMarker, QuantileSegment, Sample, Side,
    ViolinPolygon,
)


def __getattr__(name):
    # ipywidgets is only pulled in when the editor is requested
    if name == "SplitViolinEditor":
        from ._editor import SplitViolinEditor
        return SplitViolinEditor
    raise AttributeError(f"module 'splitviolin' has no attribute {name!r}")
