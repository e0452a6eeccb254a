"""Tests for split-violin geometry: seams, mirroring, quantiles, failures.

Run:  python -m pytest tests/test_geometry.py -v
"""
from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from splitviolin import (
    ConfigurationError, DensityGeometryBuilder, MeanMarker, QuantileSegment,
    RenderConfig, Sample, Side, ViolinPolygon, render,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _polygons(prims):
    return [p for p in prims if isinstance(p, ViolinPolygon)]


def _segments(prims):
    return [p for p in prims if isinstance(p, QuantileSegment)]


def _by_group(prims, group):
    return [p for p in _polygons(prims) if p.group == group][0]


def _two_group_samples(seed=0):
    rng = np.random.RandomState(seed)
    samples = []
    for cat in ("control", "scent"):
        for group, shift in (("female", 0.0), ("male", 1.5)):
            for v in rng.randn(40) + shift:
                samples.append((cat, group, float(v)))
    return samples


# ---------------------------------------------------------------------------
# Structural invariants
# ---------------------------------------------------------------------------

class TestInvariants:

    @pytest.fixture(autouse=True)
    def setup(self):
        self.samples = _two_group_samples()
        self.prims = render(self.samples, quantiles=[0.25, 0.5, 0.75])

    def test_seam_points_on_center(self):
        for poly in _polygons(self.prims):
            v = poly.vertices
            assert v[0, 0] == poly.center
            assert v[-2, 0] == poly.center
            assert v[-1, 0] == poly.center

    def test_polygon_closes(self):
        for poly in _polygons(self.prims):
            assert np.array_equal(poly.vertices[0], poly.vertices[-1])

    def test_sides_stay_on_their_half(self):
        for poly in _polygons(self.prims):
            xs = poly.vertices[:, 0]
            if poly.side is Side.LEFT:
                assert np.all(xs <= poly.center)
            else:
                assert np.all(xs >= poly.center)

    def test_first_group_left(self):
        for poly in _polygons(self.prims):
            expected = Side.LEFT if poly.group == "female" else Side.RIGHT
            assert poly.side is expected
            assert poly.group_index == (0 if poly.group == "female" else 1)

    def test_two_polygons_per_category(self):
        polys = _polygons(self.prims)
        assert len(polys) == 4
        assert sorted(p.center for p in polys) == [0.0, 0.0, 1.0, 1.0]

    def test_quantile_segment_count(self):
        assert len(_segments(self.prims)) == 4 * 3

    def test_widest_point_reaches_scale(self):
        widest = max(np.abs(p.vertices[:, 0] - p.center).max()
                     for p in _polygons(self.prims))
        assert widest == pytest.approx(0.4)

    def test_custom_half_width_scale(self):
        prims = render(self.samples, half_width_scale=0.25)
        widest = max(np.abs(p.vertices[:, 0] - p.center).max()
                     for p in _polygons(prims))
        assert widest == pytest.approx(0.25)

    def test_idempotent(self):
        again = render(self.samples, quantiles=[0.25, 0.5, 0.75])
        assert len(again) == len(self.prims)
        for a, b in zip(self.prims, again):
            assert type(a) is type(b)
            if isinstance(a, ViolinPolygon):
                assert np.array_equal(a.vertices, b.vertices)
            else:
                assert a == b


class TestMirror:

    def test_identical_groups_mirror_exactly(self):
        values = [1.0, 2.0, 2.5, 3.0, 4.5]
        samples = ([("A", "f", v) for v in values]
                   + [("A", "m", v) for v in values])
        left, right = _polygons(render(samples))
        assert left.side is Side.LEFT and right.side is Side.RIGHT
        l_out = left.vertices[1:-2]
        r_out = right.vertices[1:-2][::-1]
        np.testing.assert_allclose(l_out[:, 1], r_out[:, 1])
        np.testing.assert_allclose(2 * left.center - l_out[:, 0], r_out[:, 0])
        assert left.y_range == right.y_range

    def test_right_side_descends(self):
        samples = [("A", "f", v) for v in (1, 2, 3)] + \
                  [("A", "m", v) for v in (1, 2, 3)]
        left, right = _polygons(render(samples))
        assert np.all(np.diff(left.vertices[1:-2, 1]) >= 0)
        assert np.all(np.diff(right.vertices[1:-2, 1]) <= 0)


# ---------------------------------------------------------------------------
# Trimming and degenerate subgroups
# ---------------------------------------------------------------------------

class TestTrimAndDegenerate:

    SAMPLES = [("catA", "g1", 1.0), ("catA", "g1", 2.0), ("catA", "g1", 3.0),
               ("catA", "g2", 1.0), ("catA", "g2", 1.0), ("catA", "g2", 1.0)]

    def test_trimmed_range(self):
        prims = render(self.SAMPLES, trim=True)
        assert len(_polygons(prims)) == 2
        assert _by_group(prims, "g1").y_range == (1.0, 3.0)

    def test_zero_variance_collapses(self):
        g2 = _by_group(render(self.SAMPLES, trim=True), "g2")
        assert g2.y_range == (1.0, 1.0)
        assert np.all(g2.vertices[:, 0] == g2.center)

    def test_untrimmed_extends_tails(self):
        g1 = _by_group(render(self.SAMPLES, trim=False), "g1")
        lo, hi = g1.y_range
        assert lo < 1.0
        assert hi > 3.0

    def test_single_point_subgroup(self):
        samples = [("A", "f", 2.0), ("A", "m", 1.0), ("A", "m", 4.0)]
        f = _by_group(render(samples), "f")
        assert f.y_range == (2.0, 2.0)
        assert np.all(f.vertices[:, 0] == f.center)

    def test_missing_group_in_category_skipped(self):
        samples = [("A", "f", 1.0), ("A", "f", 2.0),
                   ("A", "m", 1.0), ("A", "m", 3.0),
                   ("B", "f", 0.5), ("B", "f", 1.5)]
        polys = _polygons(render(samples))
        assert len(polys) == 3
        b = [p for p in polys if p.category == "B"]
        assert len(b) == 1 and b[0].side is Side.LEFT

    def test_all_degenerate_gives_zero_width(self):
        samples = [("A", "f", 1.0), ("A", "m", 2.0)]
        for poly in _polygons(render(samples)):
            assert np.all(poly.vertices[:, 0] == poly.center)

    def test_no_quantiles_for_degenerate(self):
        prims = render(self.SAMPLES, quantiles=[0.5])
        segs = _segments(prims)
        assert len(segs) == 1
        assert segs[0].group == "g1"


# ---------------------------------------------------------------------------
# Quantiles and means
# ---------------------------------------------------------------------------

class TestQuantiles:

    @pytest.fixture(autouse=True)
    def setup(self):
        self.samples = ([("A", "g1", v) for v in (1, 2, 3, 4, 5)]
                        + [("A", "g2", v) for v in (2, 4, 6)])

    def test_median_segment(self):
        segs = _segments(render(self.samples, quantiles=[0.5]))
        g1 = [s for s in segs if s.group == "g1"]
        assert len(g1) == 1
        seg = g1[0]
        assert seg.quantile == 0.5
        assert seg.start == (0.0, 3.0)
        assert seg.end[1] == 3.0
        assert seg.end[0] < 0.0  # left half

    def test_right_group_segment_points_right(self):
        segs = _segments(render(self.samples, quantiles=[0.5]))
        g2 = [s for s in segs if s.group == "g2"][0]
        assert g2.start == (0.0, 4.0)
        assert g2.end[0] > 0.0

    def test_segment_ends_on_outline(self):
        prims = render(self.samples, quantiles=[0.25, 0.75])
        g1 = _by_group(prims, "g1")
        outline = g1.vertices[1:-2]
        for seg in [s for s in _segments(prims) if s.group == "g1"]:
            x = np.interp(seg.end[1], outline[:, 1], outline[:, 0])
            assert seg.end[0] == pytest.approx(x)

    def test_density_method_median(self):
        cfg = RenderConfig(quantiles=[0.5], quantile_method="density")
        segs = _segments(render(self.samples, config=cfg))
        g1 = [s for s in segs if s.group == "g1"][0]
        assert g1.start[1] == pytest.approx(3.0, abs=1e-3)

    def test_show_means(self):
        cfg = RenderConfig(show_means=True)
        means = [p for p in render(self.samples, config=cfg)
                 if isinstance(p, MeanMarker)]
        assert len(means) == 2
        by_group = {m.group: m for m in means}
        assert by_group["g1"].y == pytest.approx(3.0)
        assert by_group["g2"].y == pytest.approx(4.0)
        assert by_group["g1"].x == pytest.approx(-0.1)
        assert by_group["g2"].x == pytest.approx(0.1)


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

class TestOrdering:

    SAMPLES = [("B", "m", 1.0), ("B", "m", 2.0), ("B", "f", 1.0),
               ("B", "f", 3.0), ("A", "m", 0.0), ("A", "m", 2.0),
               ("A", "f", 1.0), ("A", "f", 4.0)]

    def test_sorted_categories(self):
        centers = {p.category: p.center for p in _polygons(render(self.SAMPLES))}
        assert centers == {"A": 0.0, "B": 1.0}

    def test_explicit_order(self):
        cfg = RenderConfig(order=["B", "A"])
        centers = {p.category: p.center
                   for p in _polygons(render(self.SAMPLES, config=cfg))}
        assert centers == {"B": 0.0, "A": 1.0}

    def test_hue_order_swaps_sides(self):
        cfg = RenderConfig(hue_order=["m", "f"])
        for p in _polygons(render(self.SAMPLES, config=cfg)):
            assert p.side is (Side.LEFT if p.group == "m" else Side.RIGHT)

    def test_unsortable_groups_use_first_appearance(self):
        samples = [("A", 2, 1.0), ("A", 2, 2.0), ("A", "x", 1.0), ("A", "x", 3.0)]
        polys = _polygons(render(samples))
        assert _by_group(polys, 2).side is Side.LEFT

    def test_accepts_sample_objects(self):
        samples = [Sample("A", "f", 1.0), Sample("A", "f", 2.0),
                   Sample("A", "m", 1.0), Sample("A", "m", 2.0)]
        builder = DensityGeometryBuilder(RenderConfig(trim=True))
        assert len(_polygons(builder.build(samples))) == 2


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class TestConfigurationErrors:

    def test_three_groups_in_category(self):
        samples = [("A", "g1", 1.0), ("A", "g2", 2.0), ("A", "g3", 3.0)]
        with pytest.raises(ConfigurationError):
            render(samples)

    def test_three_groups_across_categories(self):
        samples = [("A", "g1", 1.0), ("A", "g2", 2.0),
                   ("B", "g2", 1.0), ("B", "g3", 2.0)]
        with pytest.raises(ConfigurationError):
            render(samples)

    def test_single_group(self):
        with pytest.raises(ConfigurationError):
            render([("A", "g1", 1.0), ("A", "g1", 2.0)])

    def test_empty_samples(self):
        with pytest.raises(ConfigurationError):
            render([])

    @pytest.mark.parametrize("kwargs", [
        {"half_width_scale": 0},
        {"half_width_scale": -0.3},
        {"quantiles": [0.5, 1.5]},
        {"quantiles": [0.75, 0.25]},
    ])
    def test_invalid_options(self, kwargs):
        samples = [("A", "f", 1.0), ("A", "m", 2.0)]
        with pytest.raises(ConfigurationError):
            render(samples, **kwargs)

    def test_hue_order_missing_group(self):
        samples = [("A", "f", 1.0), ("A", "m", 2.0)]
        with pytest.raises(ConfigurationError):
            render(samples, config=RenderConfig(hue_order=["f", "x"]))

    def test_hue_order_cannot_supply_missing_group(self):
        samples = [("A", "a", 1.0), ("A", "a", 2.0), ("B", "a", 3.0)]
        with pytest.raises(ConfigurationError, match="exactly two groups"):
            render(samples, config=RenderConfig(hue_order=["a", "b"]))

    def test_hue_order_with_both_groups_present(self):
        samples = [("A", "a", 1.0), ("A", "a", 2.0), ("B", "b", 3.0),
                   ("B", "b", 4.0)]
        polys = _polygons(render(samples, config=RenderConfig(hue_order=["b", "a"])))
        assert {p.group: p.side for p in polys} == {"b": Side.LEFT,
                                                     "a": Side.RIGHT}

    def test_is_value_error(self):
        assert issubclass(ConfigurationError, ValueError)
