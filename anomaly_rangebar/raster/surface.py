from __future__ import annotations

import math

import numpy as np

from anomaly_rangebar.geometry import CanvasRect
from anomaly_rangebar.raster.canvas import RGBA, clear_rect, fill_columns, new_canvas


class RenderSurface:
    """An RGBA pixel buffer layered over a host chart.

    Draw calls take logical (rect-space) coordinates; the surface applies its
    context scale so strokes land on device pixels. The buffer holds
    ``int(rect.w * pixel_ratio)`` x ``int(rect.h * pixel_ratio)`` pixels while
    the display size stays ``rect.w`` x ``rect.h``.
    """

    def __init__(self, *, pixel_ratio: float = 1.0, class_name: str = "", z_index: int = 0) -> None:
        if pixel_ratio <= 0:
            raise ValueError("pixel_ratio must be > 0")
        self.pixel_ratio = float(pixel_ratio)
        self.class_name = class_name
        self.z_index = z_index
        self.rect: CanvasRect | None = None
        self.scale = 1.0
        self.pixels = new_canvas(0, 0)

    @property
    def display_size(self) -> tuple[float, float]:
        if self.rect is None:
            return (0, 0)
        return (self.rect.w, self.rect.h)

    @property
    def buffer_size(self) -> tuple[int, int]:
        return (int(self.pixels.shape[1]), int(self.pixels.shape[0]))

    @property
    def position(self) -> tuple[float, float]:
        if self.rect is None:
            return (0, 0)
        return (self.rect.x, self.rect.y)

    def resize(self, rect: CanvasRect) -> None:
        # A fresh buffer also resets the context scale, so repeated resizes never compound it.
        self.rect = rect
        self.pixels = new_canvas(int(rect.w * self.pixel_ratio), int(rect.h * self.pixel_ratio))
        self.scale = self.pixel_ratio if self.pixel_ratio != 1 else 1.0

    def clear(self, x: float = 0, y: float = 0, width: float | None = None, height: float | None = None) -> None:
        if width is None or height is None:
            self.pixels[:, :] = 0
            return
        s = self.scale
        clear_rect(
            self.pixels,
            int(math.floor(x * s)),
            int(math.floor(y * s)),
            int(math.ceil(width * s)),
            int(math.ceil(height * s)),
        )

    def stroke_vline(self, x: float, y0: float, y1: float, color: RGBA, line_width: float = 1.0) -> None:
        """Stroke a vertical line centered on ``x`` spanning ``y0``..``y1``."""
        s = self.scale
        columns = max(1, int(round(line_width * s)))
        left = int(math.floor(x * s - columns / 2.0 + 0.5))
        fill_columns(self.pixels, left, left + columns, int(y0 * s), int(y1 * s), color)
