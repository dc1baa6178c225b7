from __future__ import annotations

from pathlib import Path
import tomllib
from typing import Any, Mapping

from anomaly_rangebar.errors import OptionError


DEFAULT_OPTIONS: dict[str, Any] = {
    "show_range_selector": False,
    "range_selector_height": 40,
    "range_selector_plot_line_width": 1.5,
    "draw_x_axis": True,
    "x_axis_height": None,
    "axis_label_font_size": 14.0,
    "axis_tick_size": 3.0,
}


class ChartOptions:
    """Chart-wide option values with optional per-series overrides.

    Lookups fall back from the series override to the chart value to the
    built-in default, the same order a host chart applies when a plugin asks
    for an option on behalf of one series.
    """

    def __init__(
        self,
        values: Mapping[str, Any] | None = None,
        *,
        series: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> None:
        self._values: dict[str, Any] = dict(DEFAULT_OPTIONS)
        self._series: dict[str, dict[str, Any]] = {}
        if values:
            self.update(**values)
        for label, overrides in (series or {}).items():
            self.set_series_options(label, **overrides)

    @classmethod
    def from_toml(cls, path: str | Path) -> "ChartOptions":
        options_path = Path(path)
        if not options_path.exists():
            raise FileNotFoundError(f"options file not found: {options_path}")
        with options_path.open("rb") as f:
            raw = tomllib.load(f)
        chart = raw.get("chart", {})
        series = raw.get("series", {})
        if not isinstance(chart, dict) or not isinstance(series, dict):
            raise ValueError("options file must use [chart] and [series.<label>] tables")
        return cls(chart, series=series)

    def get(self, name: str, series: str | None = None) -> Any:
        _require_known(name)
        if series is not None:
            overrides = self._series.get(series)
            if overrides is not None and name in overrides:
                return overrides[name]
        return self._values[name]

    def update(self, **values: Any) -> "ChartOptions":
        for name in values:
            _require_known(name)
        self._values.update(values)
        return self

    def set_series_options(self, label: str, **values: Any) -> "ChartOptions":
        for name in values:
            _require_known(name)
        self._series.setdefault(label, {}).update(values)
        return self

    def as_dict(self) -> dict[str, Any]:
        return dict(self._values)


def _require_known(name: str) -> None:
    if name not in DEFAULT_OPTIONS:
        raise OptionError(f"unknown option: {name}")
