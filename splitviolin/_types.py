"""Sample and drawable primitive data structures."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Hashable, Union

import numpy as np


class ConfigurationError(ValueError):
    """Raised when the input or configuration cannot form split violins."""


class Side(Enum):
    LEFT = -1
    RIGHT = 1


@dataclass(frozen=True)
class Sample:
    """One observation tagged with its x-axis category and its group."""

    category: Hashable
    group: Hashable
    value: float


@dataclass(frozen=True)
class DensityCurve:
    """KDE evaluated over one subgroup; ``values`` ascending."""

    values: np.ndarray
    density: np.ndarray

    @property
    def is_degenerate(self) -> bool:
        return len(self.values) == 0 or self.values[-1] <= self.values[0]


@dataclass(frozen=True, eq=False)
class ViolinPolygon:
    """Closed half-violin outline for one (category, group) pair."""

    category: Hashable
    group: Hashable
    group_index: int
    side: Side
    center: float
    vertices: np.ndarray  # (N, 2) of (x, y)

    @property
    def y_range(self) -> tuple[float, float]:
        ys = self.vertices[:, 1]
        return float(ys.min()), float(ys.max())


@dataclass(frozen=True)
class QuantileSegment:
    """Horizontal tick from the center line to the violin edge."""

    category: Hashable
    group: Hashable
    group_index: int
    side: Side
    quantile: float
    start: tuple[float, float]
    end: tuple[float, float]


@dataclass(frozen=True)
class MeanMarker:
    category: Hashable
    group: Hashable
    group_index: int
    side: Side
    x: float
    y: float


Primitive = Union[ViolinPolygon, QuantileSegment, MeanMarker]


def as_sample(item: Any) -> Sample:
    """Accept a ``Sample`` or a plain ``(category, group, value)`` triple."""
    if isinstance(item, Sample):
        return item
    category, group, value = item
    return Sample(category, group, float(value))
