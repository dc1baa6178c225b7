from .canvas import RGBA, blit, clear_rect, draw_polyline, fill_columns, new_canvas
from .surface import RenderSurface

__all__ = [
    "RGBA",
    "RenderSurface",
    "blit",
    "clear_rect",
    "draw_polyline",
    "fill_columns",
    "new_canvas",
]
