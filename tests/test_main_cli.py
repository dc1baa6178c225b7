from __future__ import annotations

import io
from pathlib import Path
import tempfile
import unittest
from unittest import mock

from PIL import Image

import main


class RenderCommandTests(unittest.TestCase):
    def test_render_writes_png_of_requested_size(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "chart.png"
            argv = ["anomaly-rangebar", "render", "--out", str(out), "--points", "300", "--width", "320", "--height", "200", "--dpr", "1"]
            with mock.patch("sys.argv", argv), mock.patch("sys.stdout", new_callable=io.StringIO) as stdout:
                main.main()
            self.assertTrue(out.exists())
            with Image.open(out) as image:
                self.assertEqual(image.size, (320, 200))
                self.assertEqual(image.mode, "RGBA")
        self.assertIn("320x200", stdout.getvalue())

    def test_render_accepts_window_and_hidden_selector(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "zoomed.png"
            argv = [
                "anomaly-rangebar", "render", "--out", str(out), "--points", "200",
                "--width", "300", "--height", "180", "--dpr", "2",
                "--window", "600", "6000", "--hide-range-selector",
            ]
            with mock.patch("sys.argv", argv), mock.patch("sys.stdout", new_callable=io.StringIO):
                main.main()
            with Image.open(out) as image:
                self.assertEqual(image.size, (600, 360))


if __name__ == "__main__":
    unittest.main()
