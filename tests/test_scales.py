from __future__ import annotations

import math
import unittest

import numpy as np

from anomaly_rangebar.scales import (
    padded_range,
    series_pixels,
    x_factor_for,
    x_value_to_pixel,
    y_value_to_pixel,
)


class CoordinateTransformTests(unittest.TestCase):
    def test_x_transform_truncates_toward_zero(self) -> None:
        self.assertEqual(x_value_to_pixel(1.0, 0.0, 1.25), 1.0)
        self.assertEqual(x_value_to_pixel(1.9, 0.0, 1.0), 1.0)
        # Truncation, not floor: -0.75 becomes 0.
        self.assertEqual(x_value_to_pixel(-0.75, 0.0, 1.0), 0.0)

    def test_x_transform_is_monotonic_for_positive_factor(self) -> None:
        x_min, x_factor = 100.0, 0.37
        pixels = [x_value_to_pixel(t, x_min, x_factor) for t in np.linspace(100.0, 900.0, 257)]
        self.assertTrue(all(a <= b for a, b in zip(pixels, pixels[1:])))

    def test_transforms_return_nan_for_missing_input(self) -> None:
        self.assertTrue(math.isnan(x_value_to_pixel(None, 0.0, 1.0)))
        self.assertTrue(math.isnan(x_value_to_pixel(float("nan"), 0.0, 1.0)))
        self.assertTrue(math.isnan(y_value_to_pixel(None, 0.0, 1.0, 10.0)))
        self.assertTrue(math.isnan(y_value_to_pixel(float("nan"), 0.0, 1.0, 10.0)))

    def test_x_transform_overflow_is_non_finite_instead_of_raising(self) -> None:
        self.assertTrue(math.isnan(x_value_to_pixel(1.0e300, 0.0, 1.0e300)))

    def test_y_transform_counts_down_from_y_max(self) -> None:
        self.assertEqual(y_value_to_pixel(0.0, 0.0, 40.0, 40.0), 40.0)
        self.assertEqual(y_value_to_pixel(1.0, 0.0, 40.0, 40.0), 0.0)
        self.assertEqual(y_value_to_pixel(0.5, 0.0, 40.0, 40.0), 20.0)

    def test_x_factor_guards_zero_range(self) -> None:
        self.assertEqual(x_factor_for(0.0, 2.0, 3.0), 1.5)
        factor = x_factor_for(5.0, 5.0, 100.0)
        self.assertTrue(math.isfinite(factor))
        self.assertGreater(factor, 0.0)


class HostScaleTests(unittest.TestCase):
    def test_padded_range_pads_flat_and_spread_values(self) -> None:
        lo, hi = padded_range(np.asarray([0.0, 10.0]))
        self.assertAlmostEqual(lo, -0.5)
        self.assertAlmostEqual(hi, 10.5)
        self.assertEqual(padded_range(np.asarray([3.0, 3.0])), (2.0, 4.0))

    def test_series_pixels_flips_y_and_clips(self) -> None:
        px, py = series_pixels(
            np.asarray([0.0, 10.0, 20.0]),
            np.asarray([0.0, 10.0, -5.0]),
            x_range=(0.0, 10.0),
            y_range=(0.0, 10.0),
            width=11,
            height=11,
        )
        self.assertEqual(px.tolist(), [0, 10, 10])
        self.assertEqual(py.tolist(), [10, 0, 10])

    def test_series_pixels_widens_single_timestamp_window(self) -> None:
        px, _ = series_pixels(
            np.asarray([5.0]),
            np.asarray([1.0]),
            x_range=(5.0, 5.0),
            y_range=(0.0, 2.0),
            width=11,
            height=11,
        )
        self.assertEqual(px.tolist(), [5])

    def test_series_pixels_rejects_tiny_panel(self) -> None:
        with self.assertRaises(ValueError):
            series_pixels(np.zeros(2), np.zeros(2), x_range=(0.0, 1.0), y_range=(0.0, 1.0), width=1, height=10)


if __name__ == "__main__":
    unittest.main()
