from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Protocol, Sequence

import numpy as np

from anomaly_rangebar.adapters import normalize_rows
from anomaly_rangebar.display import resolve_device_pixel_ratio
from anomaly_rangebar.errors import ChartDataError
from anomaly_rangebar.events import LayoutEvent, PluginHooks, PredrawEvent
from anomaly_rangebar.geometry import PlotArea, x_axis_label_height
from anomaly_rangebar.options import ChartOptions
from anomaly_rangebar.raster import RGBA, RenderSurface, blit, draw_polyline, new_canvas
from anomaly_rangebar.scales import padded_range, series_pixels
from anomaly_rangebar.scheduling import DeferredCall, DeferredQueue

LOGGER = logging.getLogger(__name__)


class HostChart(Protocol):
    raw_data: Sequence[Sequence[Any]]
    container: list[RenderSurface]
    device_pixel_ratio: float
    width: int

    def get_option(self, name: str, series: str | None = None) -> Any:
        ...

    def x_axis_extremes(self) -> tuple[float, float]:
        ...

    def plot_area(self) -> PlotArea:
        ...

    def axis_enabled(self, axis: str) -> bool:
        ...

    def resize(self, width: int | None = None, height: int | None = None) -> None:
        ...

    def call_later(self, callback: Callable[[], None]) -> DeferredCall:
        ...


class ChartPlugin(Protocol):
    def activate(self, host: HostChart) -> PluginHooks:
        ...

    def destroy(self) -> None:
        ...


@dataclass(frozen=True)
class ChartStyle:
    background: RGBA = (12, 16, 23, 255)
    plot_bg_color: RGBA = (20, 26, 36, 255)
    series_color: RGBA = (62, 149, 255, 255)
    series_width: int = 1


class TimeSeriesChart:
    """Minimal host chart that renders one time series into RGBA frames.

    Rows are ``(timestamp, value, ...)``; ``value_column`` picks the plotted
    column. Plugins take part in each ``render()`` through their layout and
    predraw hooks and layer their surfaces through ``container``.
    """

    _gutter_left = 64
    _gutter_right = 16
    _gutter_top = 24
    _gutter_bottom = 8

    def __init__(
        self,
        width: int,
        height: int,
        *,
        data: Any = (),
        options: ChartOptions | Mapping[str, Any] | None = None,
        device_pixel_ratio: float | None = None,
        plugins: Iterable[ChartPlugin] = (),
        value_column: int = 1,
        style: ChartStyle | None = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        if value_column < 1:
            raise ValueError("value_column must be >= 1")
        self.width = int(width)
        self.height = int(height)
        self._container_width = self.width
        self._container_height = self.height
        self.options = options if isinstance(options, ChartOptions) else ChartOptions(options)
        if device_pixel_ratio is None:
            device_pixel_ratio = resolve_device_pixel_ratio()
        if device_pixel_ratio <= 0:
            raise ValueError("device_pixel_ratio must be > 0")
        self.device_pixel_ratio = float(device_pixel_ratio)
        self.value_column = value_column
        self.style = style or ChartStyle()
        self.raw_data: list[Sequence[Any]] = []
        self.container: list[RenderSurface] = []
        self.last_frame: np.ndarray | None = None
        self._deferred = DeferredQueue()
        self._date_window: tuple[float, float] | None = None
        self._plot_area: PlotArea | None = None
        self._plugins: list[ChartPlugin] = []
        self._hooks: list[PluginHooks] = []
        self.set_data(data)
        for plugin in plugins:
            self.add_plugin(plugin)

    def add_plugin(self, plugin: ChartPlugin) -> PluginHooks:
        hooks = plugin.activate(self)
        self._plugins.append(plugin)
        self._hooks.append(hooks)
        LOGGER.debug("activated plugin %s", plugin)
        return hooks

    def get_option(self, name: str, series: str | None = None) -> Any:
        return self.options.get(name, series)

    def update_options(self, **values: Any) -> "TimeSeriesChart":
        self.options.update(**values)
        return self

    def set_data(
        self,
        rows: Any,
        *,
        timestamp: str | None = None,
        columns: Sequence[str] | None = None,
    ) -> "TimeSeriesChart":
        data = normalize_rows(rows, timestamp=timestamp, columns=columns)
        if data:
            width = len(data[0])
            if width == 0:
                raise ChartDataError("rows must contain a timestamp")
            for i, row in enumerate(data):
                if len(row) != width:
                    raise ChartDataError(f"row {i} has {len(row)} columns, expected {width}")
        self.raw_data = data
        return self

    def axis_enabled(self, axis: str) -> bool:
        if axis == "x":
            return bool(self.get_option("draw_x_axis"))
        if axis == "y":
            return True
        raise ValueError(f"unknown axis: {axis}")

    def x_axis_extremes(self) -> tuple[float, float]:
        ts = [float(row[0]) for row in self.raw_data if row[0] is not None]
        if not ts:
            raise ChartDataError("chart has no data")
        return (min(ts), max(ts))

    def set_date_window(self, xmin: float, xmax: float) -> "TimeSeriesChart":
        left = float(min(xmin, xmax))
        right = float(max(xmin, xmax))
        if right - left <= 1e-12:
            raise ValueError("date window span must be > 0")
        self._date_window = (left, right)
        return self

    def clear_date_window(self) -> "TimeSeriesChart":
        self._date_window = None
        return self

    def date_window(self) -> tuple[float, float]:
        xmin, xmax = self.x_axis_extremes()
        if self._date_window is None:
            return (xmin, xmax)
        left, right = self._date_window
        return (max(xmin, left), min(xmax, right))

    def plot_area(self) -> PlotArea:
        if self._plot_area is None:
            self._plot_area = self._layout()
        return self._plot_area

    def call_later(self, callback: Callable[[], None]) -> DeferredCall:
        return self._deferred.call_later(callback)

    def tick(self) -> int:
        return self._deferred.advance()

    def pending_calls(self) -> int:
        return self._deferred.pending_count()

    def resize(self, width: int | None = None, height: int | None = None) -> None:
        if width is not None:
            self.width = self._container_width = int(width)
        elif self.width <= 0:
            self.width = self._container_width
        if height is not None:
            self.height = self._container_height = int(height)
        elif self.height <= 0:
            self.height = self._container_height
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be > 0")
        self.render()

    def render(self) -> np.ndarray:
        self._plot_area = self._layout()
        event = PredrawEvent(chart=self)
        for hooks in list(self._hooks):
            hooks.predraw(event)

        s = self.device_pixel_ratio
        frame = new_canvas(int(self.width * s), int(self.height * s), color=self.style.background)
        self._draw_plot(frame)
        for surface in sorted(self.container, key=lambda item: item.z_index):
            x, y = surface.position
            blit(frame, surface.pixels, int(x * s), int(y * s))
        self.last_frame = frame
        return frame

    def save_png(self, path: str | Path) -> Path:
        from PIL import Image

        frame = self.last_frame if self.last_frame is not None else self.render()
        out = Path(path)
        Image.fromarray(frame).save(out)
        return out

    def destroy(self) -> None:
        for plugin in self._plugins:
            plugin.destroy()
        self._plugins.clear()
        self._hooks.clear()
        self.container.clear()

    def _layout(self) -> PlotArea:
        event = LayoutEvent(chart=self)
        for hooks in self._hooks:
            hooks.layout(event)
        axis_h = x_axis_label_height(
            draw_x_axis=self.axis_enabled("x"),
            x_axis_height=self.get_option("x_axis_height"),
            axis_label_font_size=self.get_option("axis_label_font_size"),
            axis_tick_size=self.get_option("axis_tick_size"),
        )
        w = self.width - self._gutter_left - self._gutter_right
        h = self.height - self._gutter_top - self._gutter_bottom - axis_h - event.reserved_bottom
        if w <= 1 or h <= 1:
            raise ChartDataError("chart too small for plot area")
        return PlotArea(x=self._gutter_left, y=self._gutter_top, w=w, h=h)

    def _draw_plot(self, frame: np.ndarray) -> None:
        area = self._plot_area
        assert area is not None
        s = self.device_pixel_ratio
        x0, y0 = int(area.x * s), int(area.y * s)
        w, h = int(area.w * s), int(area.h * s)
        panel = frame[y0 : y0 + h, x0 : x0 + w]
        panel[:, :] = np.asarray(self.style.plot_bg_color, dtype=np.uint8)

        ts, values = self._series_arrays()
        if ts.size == 0 or w <= 1 or h <= 1:
            return
        xmin, xmax = self.date_window()
        mask = np.isfinite(ts) & np.isfinite(values) & (ts >= xmin) & (ts <= xmax)
        if not np.any(mask):
            return
        y_range = padded_range(values[mask])
        for start, stop in _true_runs(mask):
            px, py = series_pixels(
                ts[start:stop],
                values[start:stop],
                x_range=(xmin, xmax),
                y_range=y_range,
                width=w,
                height=h,
            )
            draw_polyline(panel, px, py, self.style.series_color, width=max(1, int(round(self.style.series_width * s))))

    def _series_arrays(self) -> tuple[np.ndarray, np.ndarray]:
        col = self.value_column
        ts = np.asarray([_as_float(row[0]) for row in self.raw_data], dtype=np.float64)
        values = np.asarray(
            [_as_float(row[col]) if col < len(row) else np.nan for row in self.raw_data],
            dtype=np.float64,
        )
        return ts, values


def _as_float(value: Any) -> float:
    return np.nan if value is None else float(value)


def _true_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return []
    breaks = np.flatnonzero(np.diff(idx) > 1)
    starts = np.concatenate(([idx[0]], idx[breaks + 1]))
    stops = np.concatenate((idx[breaks] + 1, [idx[-1] + 1]))
    return [(int(a), int(b)) for a, b in zip(starts, stops)]
