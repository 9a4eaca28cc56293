"""Run the marker-correlation detector over a grid of widths and thresholds."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from meanshift import read_series
from meanshift.detectors import MarkerCorrelationDetector
from meanshift.reporting import render_markdown_report, write_plot


def main() -> None:
    parser = argparse.ArgumentParser(description="Sweep marker widths and correlation thresholds")
    parser.add_argument("series", type=Path, help="Series file (text, CSV, JSON, JSONL)")
    parser.add_argument("--widths", type=int, nargs="+", default=[3, 7, 15, 31])
    parser.add_argument("--thresholds", type=float, nargs="+", default=[0.1, 0.3, 0.6, 0.8])
    parser.add_argument("--output", type=Path, default=Path("sweep"), help="Directory for per-run reports")
    args = parser.parse_args()

    series = read_series(args.series)
    summary = []
    for width in args.widths:
        if width > len(series):
            print(f"Skipping width {width}: longer than the series")
            continue
        for threshold in args.thresholds:
            detector = MarkerCorrelationDetector(marker_width=width, min_correlation=threshold)
            matches = detector.scan(series)
            run_dir = args.output / f"w{width}-c{threshold}"
            write_plot(series, [m.index for m in matches], run_dir / "series.png")
            render_markdown_report(
                {
                    "title": f"Marker width {width}, correlation {threshold}",
                    "source": str(args.series),
                    "n_samples": len(series),
                    "detector": detector.describe(),
                    "matches": [m.as_dict() for m in matches],
                    "plot": "series.png",
                },
                run_dir / "report.md",
            )
            summary.append({"width": width, "threshold": threshold, "matches": len(matches)})
            print(f"Marker width: {width}; Correlation: {threshold}; matches={len(matches)}")

    args.output.mkdir(parents=True, exist_ok=True)
    (args.output / "summary.json").write_text(json.dumps(summary, indent=2), encoding="utf-8")


if __name__ == "__main__":
    main()
