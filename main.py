from __future__ import annotations

import argparse
import logging
from pathlib import Path

from anomaly_rangebar import ChartOptions, RangeSelectorBarChart, TimeSeriesChart
from anomaly_rangebar.synthetic import synthetic_anomaly_series


def main() -> None:
    parser = argparse.ArgumentParser(prog="anomaly-rangebar")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a synthetic anomaly chart with its range selector to PNG.")
    render.add_argument("--out", type=Path, required=True)
    render.add_argument("--points", type=int, default=5000)
    render.add_argument("--seed", type=int, default=7)
    render.add_argument("--width", type=int, default=960)
    render.add_argument("--height", type=int, default=360)
    render.add_argument(
        "--dpr",
        type=float,
        default=None,
        help="Device pixel ratio. Default: ANOMALY_RANGEBAR_DEVICE_PIXEL_RATIO or the detected display ratio.",
    )
    render.add_argument(
        "--window",
        type=float,
        nargs=2,
        metavar=("XMIN", "XMAX"),
        default=None,
        help="Zoom the main plot to this timestamp range; the range selector keeps the full series.",
    )
    render.add_argument("--options", type=Path, default=None, help="TOML file with [chart] option values.")
    render.add_argument("--hide-range-selector", action="store_true")
    render.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "render":
        options = ChartOptions.from_toml(args.options) if args.options is not None else ChartOptions()
        options.update(show_range_selector=not args.hide_range_selector)
        chart = TimeSeriesChart(
            args.width,
            args.height,
            data=synthetic_anomaly_series(args.points, seed=args.seed),
            options=options,
            device_pixel_ratio=args.dpr,
            plugins=[RangeSelectorBarChart(series_index=2)],
        )
        if args.window is not None:
            chart.set_date_window(args.window[0], args.window[1])
        try:
            frame = chart.render()
            out = chart.save_png(args.out)
        finally:
            chart.destroy()
        print(f"wrote {out} ({frame.shape[1]}x{frame.shape[0]})")
        return

    raise RuntimeError(f"unsupported command: {args.command}")


if __name__ == "__main__":
    main()
