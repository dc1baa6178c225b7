from __future__ import annotations

from typing import Callable

from anomaly_rangebar.raster.canvas import RGBA


ColorMapper = Callable[[float, float], RGBA]

# Amber at the significance threshold, red at full intensity.
COOL_ANOMALY_RGB = (255, 196, 0)
HOT_ANOMALY_RGB = (220, 20, 20)
MIN_ANOMALY_ALPHA = 0.4


def map_anomaly_color(value: float, y_range: float = 1.0) -> RGBA:
    """Return a stroke color that gets hotter and more opaque as ``value`` grows."""
    span = y_range if y_range > 0 else 1.0
    t = max(0.0, min(1.0, value / span))
    r, g, b = (int(round(c0 + (c1 - c0) * t)) for c0, c1 in zip(COOL_ANOMALY_RGB, HOT_ANOMALY_RGB))
    alpha = MIN_ANOMALY_ALPHA + (1.0 - MIN_ANOMALY_ALPHA) * t
    return (r, g, b, int(round(alpha * 255)))
