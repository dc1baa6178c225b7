from __future__ import annotations

from dataclasses import dataclass


RANGE_SELECTOR_MARGIN_PX = 4


@dataclass(frozen=True)
class PlotArea:
    x: float
    y: float
    w: float
    h: float


@dataclass(frozen=True)
class CanvasRect:
    x: float
    y: float
    w: float
    h: float


def x_axis_label_height(
    *,
    draw_x_axis: bool,
    x_axis_height: float | None,
    axis_label_font_size: float,
    axis_tick_size: float,
) -> float:
    if not draw_x_axis:
        return 0
    if x_axis_height:
        return x_axis_height
    return (axis_label_font_size + 2) * axis_tick_size


def compute_canvas_rect(
    plot_area: PlotArea,
    *,
    range_selector_height: float,
    x_axis_label_height: float = 0,
) -> CanvasRect:
    """Place the overlay directly beneath the plot area and its x-axis labels.

    ``range_selector_height`` must be >= 0; it is not checked here.
    """
    return CanvasRect(
        x=plot_area.x,
        y=plot_area.y + plot_area.h + x_axis_label_height + RANGE_SELECTOR_MARGIN_PX,
        w=plot_area.w,
        h=range_selector_height,
    )


def reserved_bottom_space(range_selector_height: float) -> float:
    return range_selector_height + RANGE_SELECTOR_MARGIN_PX
