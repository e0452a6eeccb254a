"""Render/style configuration and reusable JSON profiles."""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, Sequence, Union

from ._types import ConfigurationError

PROFILES_DIR = Path.home() / ".splitviolin" / "profiles"

QUANTILE_METHODS = ("empirical", "density")
BW_METHODS = ("scott", "silverman")

BandwidthSpec = Union[None, str, float, Callable[[Any], float]]


@dataclass
class RenderConfig:
    """Geometry options threaded through every render call."""

    half_width_scale: float = 0.4
    trim: bool = True
    quantiles: Sequence[float] | None = None
    quantile_method: str = "empirical"
    bw_method: BandwidthSpec = None
    gridsize: int = 100
    cut: float = 3.0
    order: Sequence[Any] | None = None
    hue_order: Sequence[Any] | None = None
    show_means: bool = False
    mean_offset: float = 0.25

    def validate(self) -> None:
        if not self.half_width_scale > 0:
            raise ConfigurationError(
                f"half_width_scale must be positive, got {self.half_width_scale!r}")
        if self.gridsize < 2:
            raise ConfigurationError(
                f"gridsize must be at least 2, got {self.gridsize!r}")
        if self.cut < 0:
            raise ConfigurationError(f"cut must be >= 0, got {self.cut!r}")
        if self.quantile_method not in QUANTILE_METHODS:
            raise ConfigurationError(
                f"Unknown quantile_method: {self.quantile_method!r}")
        if isinstance(self.bw_method, str) and self.bw_method not in BW_METHODS:
            raise ConfigurationError(f"Unknown bw_method: {self.bw_method!r}")
        if self.quantiles is not None:
            qs = list(self.quantiles)
            if any(not 0.0 <= q <= 1.0 for q in qs):
                raise ConfigurationError(
                    f"quantiles must lie in [0, 1], got {qs}")
            if any(b < a for a, b in zip(qs, qs[1:])):
                raise ConfigurationError(
                    f"quantiles must be ascending, got {qs}")
        if self.hue_order is not None and len(set(self.hue_order)) != 2:
            raise ConfigurationError(
                f"hue_order must name exactly two groups, got {list(self.hue_order)}")

    def to_dict(self) -> dict:
        data = asdict(self)
        if callable(data["bw_method"]):
            data["bw_method"] = None
        for key in ("quantiles", "order", "hue_order"):
            if data[key] is not None:
                data[key] = list(data[key])
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "RenderConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def evolve(self, **changes) -> "RenderConfig":
        return replace(self, **changes)


@dataclass
class StyleConfig:
    """How primitives are colored and stroked by the matplotlib adapter."""

    palette: str = "tab10"
    colors: list[str] | None = None
    alpha: float = 0.7
    edgecolor: str = "#000000"
    linewidth: float = 1.0
    quantile_linestyle: str = "--"
    quantile_color: str | None = None
    mean_marker: str = "o"
    mean_size: float = 5.0
    mean_color: str = "#000000"
    legend: bool = True

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "StyleConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def evolve(self, **changes) -> "StyleConfig":
        return replace(self, **changes)


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

def _ensure_dir() -> None:
    PROFILES_DIR.mkdir(parents=True, exist_ok=True)


def _profile_path(name: str) -> Path:
    """Path of profile ``name``; rejects names that leave PROFILES_DIR."""
    if (not name or name != name.strip() or name.startswith(".")
            or any(sep in name for sep in ("/", "\\", ":"))):
        raise ValueError(f"Invalid profile name: {name!r}")
    return PROFILES_DIR / f"{name}.json"


def list_profiles() -> list[str]:
    """Return sorted list of saved profile names (without .json)."""
    _ensure_dir()
    return sorted(p.stem for p in PROFILES_DIR.glob("*.json"))


def save_profile(name: str, render: RenderConfig | None = None,
                 style: StyleConfig | None = None) -> Path:
    path = _profile_path(name)
    _ensure_dir()
    data = {
        "render": (render or RenderConfig()).to_dict(),
        "style": (style or StyleConfig()).to_dict(),
    }
    path.write_text(json.dumps(data, indent=2))
    return path


def load_profile(name: str) -> tuple[RenderConfig, StyleConfig]:
    """Read a saved profile; missing sections fall back to defaults."""
    path = _profile_path(name)
    data = json.loads(path.read_text())
    return (RenderConfig.from_dict(data.get("render", {})),
            StyleConfig.from_dict(data.get("style", {})))


def delete_profile(name: str) -> None:
    path = _profile_path(name)
    if path.exists():
        path.unlink()
