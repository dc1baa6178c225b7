from __future__ import annotations

import math

import numpy as np


MIN_X_RANGE = 1.0e-30


def x_factor_for(x_min: float, x_max: float, width: float) -> float:
    x_range = max(x_max - x_min, MIN_X_RANGE)
    return width / x_range


def x_value_to_pixel(x: float | None, x_min: float, x_factor: float) -> float:
    """Map a timestamp to a pixel column, truncating toward zero.

    Returns NaN for a missing timestamp so callers can skip the element.
    """
    if x is None:
        return math.nan
    scaled = (x - x_min) * x_factor
    if not math.isfinite(scaled):
        return math.nan
    return float(int(scaled))


def y_value_to_pixel(y: float | None, y_min: float, y_max: float, y_factor: float) -> float:
    if y is None:
        return math.nan
    scaled = y_max - ((y - y_min) * y_factor)
    if not math.isfinite(scaled):
        return math.nan
    return float(int(scaled))


def padded_range(values: np.ndarray, pad_ratio: float = 0.05) -> tuple[float, float]:
    lo, hi = float(np.min(values)), float(np.max(values))
    if lo == hi:
        pad = max(1.0, abs(lo) * pad_ratio)
    else:
        pad = (hi - lo) * pad_ratio
    return (lo - pad, hi + pad)


def series_pixels(
    ts: np.ndarray,
    values: np.ndarray,
    *,
    x_range: tuple[float, float],
    y_range: tuple[float, float],
    width: int,
    height: int,
) -> tuple[np.ndarray, np.ndarray]:
    """Map points into a ``width`` x ``height`` panel, y growing downward, clipped to the panel."""
    if width <= 1 or height <= 1:
        raise ValueError("panel width/height must be > 1")
    x0, x1 = x_range
    if x1 <= x0:
        x0, x1 = x0 - 1.0, x0 + 1.0
    y0, y1 = y_range
    px = np.rint((ts - x0) * ((width - 1) / (x1 - x0)))
    py = (height - 1) - np.rint((values - y0) * ((height - 1) / (y1 - y0)))
    return (
        np.clip(px, 0, width - 1).astype(np.int32),
        np.clip(py, 0, height - 1).astype(np.int32),
    )
