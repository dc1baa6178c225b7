from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]
TRANSPARENT: RGBA = (0, 0, 0, 0)


def new_canvas(width: int, height: int, color: RGBA = TRANSPARENT) -> np.ndarray:
    canvas = np.empty((max(0, height), max(0, width), 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def clear_rect(dst: np.ndarray, x: int, y: int, width: int, height: int) -> None:
    x0, y0 = max(0, x), max(0, y)
    x1 = min(dst.shape[1], x + width)
    y1 = min(dst.shape[0], y + height)
    if x0 >= x1 or y0 >= y1:
        return
    dst[y0:y1, x0:x1] = 0


def fill_columns(dst: np.ndarray, x0: int, x1: int, y0: int, y1: int, color: RGBA) -> None:
    """Alpha-blend ``color`` over columns ``[x0, x1)`` and rows ``[y0, y1]``."""
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1], max(x0, x1))
    ya = max(0, min(y0, y1))
    yb = min(dst.shape[0] - 1, max(y0, y1))
    if xa >= xb or ya > yb:
        return
    _blend(dst[ya : yb + 1, xa:xb], color)


def blit(dst: np.ndarray, src: np.ndarray, x0: int = 0, y0: int = 0) -> None:
    h, w, _ = src.shape
    sx0, sy0 = max(0, -x0), max(0, -y0)
    dx0, dy0 = max(0, x0), max(0, y0)
    dx1 = min(dst.shape[1], x0 + w)
    dy1 = min(dst.shape[0], y0 + h)
    if dx0 >= dx1 or dy0 >= dy1:
        return

    patch = src[sy0 : sy0 + (dy1 - dy0), sx0 : sx0 + (dx1 - dx0)]
    _over(
        dst[dy0:dy1, dx0:dx1],
        patch[:, :, :3].astype(np.float32),
        patch[:, :, 3:4].astype(np.float32) / 255.0,
    )


def draw_polyline(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: int = 1) -> None:
    if xs.size < 2:
        return
    for i in range(xs.size - 1):
        _draw_segment(dst, int(xs[i]), int(ys[i]), int(xs[i + 1]), int(ys[i + 1]), color, width)


def _draw_segment(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA, width: int) -> None:
    # Bresenham; every step stamps a square brush of ``width`` pixels.
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    radius = max(0, width // 2)
    while True:
        ya, yb = max(0, y0 - radius), min(dst.shape[0], y0 + radius + 1)
        xa, xb = max(0, x0 - radius), min(dst.shape[1], x0 + radius + 1)
        if xa < xb and ya < yb:
            _blend(dst[ya:yb, xa:xb], color)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _blend(region: np.ndarray, color: RGBA) -> None:
    _over(region, np.asarray(color[0:3], dtype=np.float32), np.float32(color[3] / 255.0))


def _over(region: np.ndarray, rgb: np.ndarray, alpha: np.ndarray | np.float32) -> None:
    # Straight (non-premultiplied) alpha on both sides.
    dst_a = region[:, :, 3:4].astype(np.float32) / 255.0
    out_a = alpha + dst_a * (1.0 - alpha)
    weighted = rgb * alpha + region[:, :, :3].astype(np.float32) * dst_a * (1.0 - alpha)
    out_rgb = np.divide(weighted, out_a, out=np.zeros_like(weighted), where=out_a > 0)
    region[:, :, :3] = np.clip(np.rint(out_rgb), 0, 255).astype(np.uint8)
    region[:, :, 3:4] = np.clip(np.rint(out_a * 255.0), 0, 255).astype(np.uint8)
