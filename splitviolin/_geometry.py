"""Split-violin geometry — samples in, mirrored half-violin primitives out.

Each x-axis category carries exactly two groups.  The first group (in
``hue_order`` or stable sorted order) is drawn to the left of the category
center, the second to the right; both halves are scaled against the
largest density anywhere on the plot so their areas compare directly.
"""
from __future__ import annotations

import logging
from typing import Any, Hashable, Iterable, Sequence

import numpy as np

from ._config import RenderConfig
from ._density import density_quantiles, empirical_quantiles, estimate_density
from ._types import (
    ConfigurationError, DensityCurve, MeanMarker, Primitive, QuantileSegment,
    Sample, Side, ViolinPolygon, as_sample,
)

logger = logging.getLogger(__name__)


def _stable_order(labels: Iterable[Hashable]) -> list[Hashable]:
    """Unique labels, sorted when comparable, else by first appearance."""
    seen = list(dict.fromkeys(labels))
    try:
        return sorted(seen)
    except TypeError:
        return seen


def _explicit_order(explicit: Sequence[Any] | None, present: list[Hashable],
                    what: str) -> list[Hashable]:
    if explicit is None:
        return _stable_order(present)
    order = list(dict.fromkeys(explicit))
    missing = [p for p in present if p not in order]
    if missing:
        raise ConfigurationError(f"{what} does not list {missing}")
    return order


class DensityGeometryBuilder:
    """Builds split-violin primitives for one plot from a ``RenderConfig``."""

    def __init__(self, config: RenderConfig | None = None):
        self._config = config or RenderConfig()

    @property
    def config(self) -> RenderConfig:
        return self._config

    def build(self, samples: Iterable[Any]) -> list[Primitive]:
        cfg = self._config
        cfg.validate()
        samples = [as_sample(s) for s in samples]
        if not samples:
            raise ConfigurationError("samples must not be empty")

        categories, groups, values = self._partition(samples)
        curves = {key: estimate_density(vals, cfg)
                  for key, vals in values.items()}
        max_density = max((float(c.density.max()) for c in curves.values()
                           if c.density.size), default=0.0)
        logger.debug("Rendering %d categories x groups %s (max density %g)",
                     len(categories), groups, max_density)

        primitives: list[Primitive] = []
        for center, category in enumerate(categories):
            for index, group in enumerate(groups):
                key = (category, group)
                if key not in values:
                    logger.debug("No observations for %r/%r; skipping",
                                 category, group)
                    continue
                primitives.extend(self._half_violin(
                    category, group, index, float(center),
                    values[key], curves[key], max_density))
        return primitives

    # -- helpers -----------------------------------------------------------

    def _partition(self, samples: list[Sample]):
        """Group values by (category, group), enforcing two groups."""
        cfg = self._config
        values: dict[tuple[Hashable, Hashable], list[float]] = {}
        per_category: dict[Hashable, list[Hashable]] = {}
        for s in samples:
            values.setdefault((s.category, s.group), []).append(s.value)
            seen = per_category.setdefault(s.category, [])
            if s.group not in seen:
                seen.append(s.group)

        for category, seen in per_category.items():
            if len(seen) > 2:
                raise ConfigurationError(
                    f"Category {category!r} has {len(seen)} groups {seen}; "
                    "split violins need exactly two")

        present = list(dict.fromkeys(s.group for s in samples))
        if len(present) != 2:
            raise ConfigurationError(
                f"Expected exactly two groups, got {len(present)}: {present}")
        groups = _explicit_order(cfg.hue_order, present, "hue_order")
        categories = _explicit_order(
            cfg.order, list(per_category), "order")
        return categories, groups, values

    def _half_violin(self, category, group, index: int, center: float,
                     values: list[float], curve: DensityCurve,
                     max_density: float) -> list[Primitive]:
        cfg = self._config
        side = Side.LEFT if index == 0 else Side.RIGHT
        if max_density > 0:
            widths = curve.density / max_density * cfg.half_width_scale
        else:
            widths = np.zeros_like(curve.density)

        xs = center + side.value * widths
        ys = curve.values
        if side is Side.RIGHT:
            xs, ys = xs[::-1], ys[::-1]
        outline = np.column_stack([xs, ys])
        vertices = np.vstack([outline[:1], outline, outline[-1:], outline[:1]])
        vertices[[0, -2, -1], 0] = center

        out: list[Primitive] = [ViolinPolygon(
            category, group, index, side, center, vertices)]

        if cfg.quantiles and not curve.is_degenerate:
            if cfg.quantile_method == "density":
                qys = density_quantiles(curve, cfg.quantiles)
            else:
                qys = empirical_quantiles(values, cfg.quantiles)
            qwidths = np.interp(qys, curve.values, widths)
            for q, y, w in zip(cfg.quantiles, qys, qwidths):
                out.append(QuantileSegment(
                    category, group, index, side, float(q),
                    (center, float(y)),
                    (center + side.value * float(w), float(y))))

        if cfg.show_means:
            offset = cfg.mean_offset * cfg.half_width_scale
            out.append(MeanMarker(
                category, group, index, side,
                center + side.value * offset, float(np.mean(values))))
        return out


def render(samples: Iterable[Any], half_width_scale: float | None = None,
           trim: bool | None = None, quantiles: Sequence[float] | None = None,
           config: RenderConfig | None = None) -> list[Primitive]:
    """Compute split-violin primitives for ``(category, group, value)`` samples.

    Parameters
    ----------
    samples : iterable of Sample or (category, group, value) tuples
        Must carry exactly two distinct groups overall and at most two
        per category.
    half_width_scale : float, optional
        Half-width reached by the widest density on the plot.
    trim : bool, optional
        Restrict each curve to its subgroup's observed range.
    quantiles : sequence of float, optional
        Ascending values in [0, 1]; one horizontal segment each per
        non-degenerate subgroup.
    config : RenderConfig, optional
        Base configuration; explicit keyword arguments override it.

    Raises
    ------
    ConfigurationError
        On invalid options, when the samples do not carry exactly two
        groups overall, or when one category carries more than two.  Raised
        before any geometry is built.

    Notes
    -----
    A category that holds only one of the two groups is not an error: the
    missing side is an empty subgroup and emits no primitives, so that
    category renders as a single half violin.
    """
    cfg = config or RenderConfig()
    changes: dict[str, Any] = {}
    if half_width_scale is not None:
        changes["half_width_scale"] = half_width_scale
    if trim is not None:
        changes["trim"] = trim
    if quantiles is not None:
        changes["quantiles"] = list(quantiles)
    if changes:
        cfg = cfg.evolve(**changes)
    return DensityGeometryBuilder(cfg).build(samples)
