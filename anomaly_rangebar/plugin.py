from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Any, Literal

from anomaly_rangebar.colors import ColorMapper, map_anomaly_color
from anomaly_rangebar.downsample import has_defined_values, select_bucket_peaks
from anomaly_rangebar.events import LayoutEvent, PluginHooks, PredrawEvent
from anomaly_rangebar.geometry import CanvasRect, compute_canvas_rect, reserved_bottom_space, x_axis_label_height
from anomaly_rangebar.host import HostChart
from anomaly_rangebar.raster import RenderSurface
from anomaly_rangebar.scales import x_factor_for, x_value_to_pixel
from anomaly_rangebar.scheduling import DeferredCall

LOGGER = logging.getLogger(__name__)

OverlayState = Literal["detached", "attached-hidden", "attached-visible", "destroyed"]

ANOMALY_THRESHOLD = 0.25
# Half-pixel inset so the last timestamp and the bar bottoms stay on the buffer.
DRAW_MARGIN_PX = 0.5
SURFACE_CLASS_NAME = "rangebar-canvas"
SURFACE_Z_INDEX = 100


@dataclass
class _Liveness:
    alive: bool = True


class RangeSelectorBarChart:
    """Anomaly bar chart drawn under a host chart's plot area.

    Each bar summarizes one pixel-wide bucket of the full series by its
    largest anomaly score, so spikes stay visible while the main chart is
    zoomed into a sub-range.
    """

    def __init__(self, *, series_index: int = 2, color_mapper: ColorMapper = map_anomaly_color) -> None:
        if series_index < 1:
            raise ValueError("series_index must be >= 1")
        self.series_index = series_index
        self._color_mapper = color_mapper
        self._host: HostChart | None = None
        self._surface: RenderSurface | None = None
        self._canvas_rect: CanvasRect | None = None
        self._attached = False
        self._destroyed = False
        self._liveness = _Liveness()
        self._pending_resize: DeferredCall | None = None

    def __str__(self) -> str:
        return "RangeSelector BarChart Plugin"

    @property
    def state(self) -> OverlayState:
        if self._destroyed:
            return "destroyed"
        if self._host is None:
            return "detached"
        if self._attached:
            return "attached-visible"
        return "attached-hidden"

    @property
    def surface(self) -> RenderSurface | None:
        return self._surface

    @property
    def canvas_rect(self) -> CanvasRect | None:
        return self._canvas_rect

    def activate(self, host: HostChart) -> PluginHooks:
        if self._destroyed:
            raise RuntimeError("plugin has been destroyed")
        if self._host is not None:
            raise RuntimeError("plugin is already active")
        self._host = host
        self._liveness = _Liveness()
        if self._get_option("show_range_selector"):
            self._create_interface()
        return PluginHooks(layout=self._reserve_space, predraw=self._render_static_layer)

    def destroy(self) -> None:
        self._liveness.alive = False
        if self._pending_resize is not None:
            self._pending_resize.cancel()
            self._pending_resize = None
        if self._attached and self._host is not None:
            self._remove_from_graph()
        self._surface = None
        self._canvas_rect = None
        self._host = None
        self._attached = False
        self._destroyed = True

    def _get_option(self, name: str, series: str | None = None) -> Any:
        assert self._host is not None
        return self._host.get_option(name, series)

    def _create_interface(self) -> None:
        assert self._host is not None
        self._surface = RenderSurface(
            pixel_ratio=self._host.device_pixel_ratio,
            class_name=SURFACE_CLASS_NAME,
            z_index=SURFACE_Z_INDEX,
        )
        self._add_to_graph()

    def _add_to_graph(self) -> None:
        assert self._host is not None and self._surface is not None
        self._host.container.append(self._surface)
        self._attached = True
        LOGGER.debug("range selector bar chart attached")

    def _remove_from_graph(self) -> None:
        assert self._host is not None and self._surface is not None
        if self._surface in self._host.container:
            self._host.container.remove(self._surface)
        self._attached = False
        LOGGER.debug("range selector bar chart detached")

    def _reserve_space(self, event: LayoutEvent) -> None:
        if self._host is None:
            return
        if self._get_option("show_range_selector"):
            event.reserve_space_bottom(reserved_bottom_space(self._get_option("range_selector_height")))

    def _render_static_layer(self, event: PredrawEvent) -> bool:
        if self._host is None:
            return False
        visible = False
        try:
            visible = self._update_visibility()
            if visible:
                self._resize()
                self._draw_static_layer()
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("range selector bar chart draw failed: %s", exc, exc_info=True)
            if self._surface is not None:
                self._surface.clear()
        return visible

    def _update_visibility(self) -> bool:
        assert self._host is not None
        enabled = bool(self._get_option("show_range_selector"))
        if enabled:
            if self._surface is None:
                self._create_interface()
            elif not self._attached and has_defined_values(self._host.raw_data, self.series_index):
                self._add_to_graph()
        elif self._attached:
            self._remove_from_graph()
            self._schedule_host_resize()
        return enabled

    def _schedule_host_resize(self) -> None:
        # Let the host's own layout settle for one tick before it re-measures.
        assert self._host is not None
        host = self._host
        liveness = self._liveness

        def force_resize() -> None:
            if not liveness.alive:
                return
            self._pending_resize = None
            host.width = 0
            host.resize()

        if self._pending_resize is not None:
            self._pending_resize.cancel()
        self._pending_resize = host.call_later(force_resize)

    def _resize(self) -> None:
        assert self._host is not None and self._surface is not None
        axis_h = x_axis_label_height(
            draw_x_axis=self._host.axis_enabled("x"),
            x_axis_height=self._get_option("x_axis_height"),
            axis_label_font_size=self._get_option("axis_label_font_size"),
            axis_tick_size=self._get_option("axis_tick_size"),
        )
        self._canvas_rect = compute_canvas_rect(
            self._host.plot_area(),
            range_selector_height=self._get_option("range_selector_height"),
            x_axis_label_height=axis_h,
        )
        self._surface.resize(self._canvas_rect)

    def _draw_static_layer(self) -> None:
        assert self._surface is not None and self._canvas_rect is not None
        self._surface.clear(0, 0, self._canvas_rect.w, self._canvas_rect.h)
        self._draw_mini_plot()

    def _draw_mini_plot(self) -> None:
        assert self._host is not None and self._surface is not None and self._canvas_rect is not None
        rect = self._canvas_rect
        rows = self._host.raw_data
        if not rows:
            return
        x_min, x_max = self._host.x_axis_extremes()
        x_factor = x_factor_for(x_min, x_max, rect.w - DRAW_MARGIN_PX)
        bar_height = rect.h - DRAW_MARGIN_PX
        stroke_width = self._get_option("range_selector_plot_line_width")
        y_range = 1.0

        for peak in select_bucket_peaks(rows, column=self.series_index, canvas_width=rect.w):
            if peak.value is None:
                continue
            x = x_value_to_pixel(peak.timestamp, x_min, x_factor)
            if math.isfinite(x) and peak.value >= ANOMALY_THRESHOLD:
                color = self._color_mapper(peak.value, y_range)
                self._surface.stroke_vline(x, bar_height, 0, color, stroke_width)
