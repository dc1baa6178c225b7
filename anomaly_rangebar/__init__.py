from anomaly_rangebar.colors import map_anomaly_color
from anomaly_rangebar.errors import ChartDataError, OptionError
from anomaly_rangebar.events import LayoutEvent, PluginHooks, PredrawEvent
from anomaly_rangebar.geometry import CanvasRect, PlotArea, compute_canvas_rect
from anomaly_rangebar.host import ChartPlugin, HostChart, TimeSeriesChart
from anomaly_rangebar.options import ChartOptions
from anomaly_rangebar.plugin import ANOMALY_THRESHOLD, RangeSelectorBarChart
from anomaly_rangebar.raster import RenderSurface
from anomaly_rangebar.scales import x_value_to_pixel, y_value_to_pixel

__all__ = [
    "ANOMALY_THRESHOLD",
    "CanvasRect",
    "ChartDataError",
    "ChartOptions",
    "ChartPlugin",
    "HostChart",
    "LayoutEvent",
    "OptionError",
    "PlotArea",
    "PluginHooks",
    "PredrawEvent",
    "RangeSelectorBarChart",
    "RenderSurface",
    "TimeSeriesChart",
    "compute_canvas_rect",
    "map_anomaly_color",
    "x_value_to_pixel",
    "y_value_to_pixel",
]
