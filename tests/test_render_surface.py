from __future__ import annotations

import unittest

import numpy as np

from anomaly_rangebar.geometry import CanvasRect
from anomaly_rangebar.raster.canvas import blit, fill_columns, new_canvas
from anomaly_rangebar.raster.surface import RenderSurface


RED = (255, 0, 0, 255)


class RenderSurfaceTests(unittest.TestCase):
    def test_buffer_scales_with_device_pixel_ratio(self) -> None:
        surface = RenderSurface(pixel_ratio=2.0)
        surface.resize(CanvasRect(x=10, y=109, w=300, h=40))
        self.assertEqual(surface.buffer_size, (600, 80))
        self.assertEqual(surface.display_size, (300, 40))
        self.assertEqual(surface.position, (10, 109))
        self.assertEqual(surface.scale, 2.0)

    def test_unit_ratio_keeps_identity_scale(self) -> None:
        surface = RenderSurface(pixel_ratio=1.0)
        surface.resize(CanvasRect(x=0, y=0, w=300, h=40))
        self.assertEqual(surface.buffer_size, (300, 40))
        self.assertEqual(surface.scale, 1.0)

    def test_repeated_resize_does_not_compound_scale(self) -> None:
        surface = RenderSurface(pixel_ratio=1.5)
        for _ in range(3):
            surface.resize(CanvasRect(x=0, y=0, w=100, h=20))
        self.assertEqual(surface.scale, 1.5)
        self.assertEqual(surface.buffer_size, (150, 30))

    def test_resize_starts_transparent(self) -> None:
        surface = RenderSurface()
        surface.resize(CanvasRect(x=0, y=0, w=8, h=4))
        surface.stroke_vline(2, 3.5, 0, RED)
        surface.resize(CanvasRect(x=0, y=0, w=8, h=4))
        self.assertFalse(np.any(surface.pixels))

    def test_stroke_vline_maps_logical_to_device_columns(self) -> None:
        surface = RenderSurface(pixel_ratio=2.0)
        surface.resize(CanvasRect(x=0, y=0, w=10, h=5))
        surface.stroke_vline(3, 4.5, 0, RED, line_width=1)
        painted = np.flatnonzero(surface.pixels[:, :, 3].max(axis=0))
        self.assertEqual(painted.tolist(), [5, 6])
        self.assertEqual(int(surface.pixels[0, 5, 3]), 255)
        self.assertEqual(int(surface.pixels[9, 5, 3]), 255)

    def test_clear_region_only_touches_that_region(self) -> None:
        surface = RenderSurface()
        surface.resize(CanvasRect(x=0, y=0, w=6, h=3))
        for x in range(6):
            surface.stroke_vline(x, 2.5, 0, RED)
        surface.clear(0, 0, 3, 3)
        self.assertFalse(np.any(surface.pixels[:, :3, 3]))
        self.assertTrue(np.all(surface.pixels[:, 3:, 3] == 255))
        surface.clear()
        self.assertFalse(np.any(surface.pixels))

    def test_rejects_non_positive_ratio(self) -> None:
        with self.assertRaises(ValueError):
            RenderSurface(pixel_ratio=0.0)


class CanvasTests(unittest.TestCase):
    def test_fill_columns_clips_to_canvas(self) -> None:
        canvas = new_canvas(4, 4)
        fill_columns(canvas, -2, 1, -5, 10, RED)
        self.assertTrue(np.all(canvas[:, 0, 3] == 255))
        self.assertFalse(np.any(canvas[:, 1:, 3]))

    def test_blit_skips_transparent_pixels_and_clips(self) -> None:
        dst = new_canvas(4, 4, color=(10, 20, 30, 255))
        src = new_canvas(3, 3)
        src[1, 1] = RED
        blit(dst, src, x0=-1, y0=-1)
        self.assertEqual(tuple(int(v) for v in dst[0, 0]), (255, 0, 0, 255))
        self.assertEqual(tuple(int(v) for v in dst[1, 1]), (10, 20, 30, 255))

    def test_translucent_stroke_keeps_its_color_until_composited(self) -> None:
        surface = RenderSurface()
        surface.resize(CanvasRect(x=0, y=0, w=4, h=4))
        surface.stroke_vline(1, 3.5, 0, (255, 0, 0, 128))
        self.assertEqual(tuple(int(v) for v in surface.pixels[0, 1]), (255, 0, 0, 128))

        frame = new_canvas(4, 4, color=(0, 0, 0, 255))
        blit(frame, surface.pixels)
        self.assertEqual(tuple(int(v) for v in frame[0, 1]), (128, 0, 0, 255))
        self.assertEqual(tuple(int(v) for v in frame[0, 0]), (0, 0, 0, 255))

    def test_overlapping_translucent_fills_accumulate_alpha(self) -> None:
        canvas = new_canvas(2, 2)
        fill_columns(canvas, 0, 1, 0, 1, (255, 0, 0, 128))
        fill_columns(canvas, 0, 1, 0, 1, (255, 0, 0, 128))
        self.assertEqual(tuple(int(v) for v in canvas[0, 0]), (255, 0, 0, 192))


if __name__ == "__main__":
    unittest.main()
