"""Column-oriented input — DataFrames or plain dicts of sequences."""
from __future__ import annotations

import math
from typing import Any, Mapping

from ._types import Sample


def _column(data: Mapping[str, Any], name: str) -> list:
    try:
        col = data[name]
    except KeyError:
        raise KeyError(f"Column {name!r} not found") from None
    # DataFrame columns are Series; .tolist() gives plain Python scalars
    if hasattr(col, "tolist"):
        return col.tolist()
    return list(col)


def _is_missing(v: Any) -> bool:
    return v is None or (isinstance(v, float) and math.isnan(v))


def samples_from_columns(data: Mapping[str, Any], x: str, hue: str,
                         y: str) -> list[Sample]:
    """Build samples from the ``x`` (category), ``hue`` (group) and ``y``
    (value) columns of ``data``.

    The caller is expected to have cleaned the table already; any missing or
    non-numeric entry is reported rather than dropped.
    """
    cats, hues, vals = _column(data, x), _column(data, hue), _column(data, y)
    if not len(cats) == len(hues) == len(vals):
        raise ValueError(
            f"Columns differ in length: {x}={len(cats)}, {hue}={len(hues)}, "
            f"{y}={len(vals)}")

    samples = []
    for row, (c, h, v) in enumerate(zip(cats, hues, vals)):
        if _is_missing(c) or _is_missing(h) or _is_missing(v):
            raise ValueError(f"Missing value in row {row}")
        try:
            value = float(v)
        except (TypeError, ValueError):
            raise ValueError(
                f"Non-numeric {y!r} value in row {row}: {v!r}") from None
        if not math.isfinite(value):
            raise ValueError(f"Non-finite {y!r} value in row {row}: {v!r}")
        samples.append(Sample(c, h, value))
    return samples
