"""Command line interface for meanshift."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from . import __version__
from .config import DetectorConfig, load_config
from .detectors import MarkerCorrelationDetector, build_detector
from .ingest import read_series
from .logging_utils import configure_logging, log_event
from .reporting import render_markdown_report, write_plot
from .simulate import generate_step_series
from .streaming import FileSource, IterableSource, Stream, StreamingService

logger = logging.getLogger(__name__)


def _print_result(result: Any, as_json: bool) -> None:
    if as_json:
        print(json.dumps(result, indent=2))
    else:
        print(result)


def _resolve_config(args: argparse.Namespace) -> DetectorConfig:
    config = load_config(args.config)
    overrides = {
        key: getattr(args, key)
        for key in ("window_size", "block_size", "min_sample_size", "min_confidence", "marker_width", "min_correlation")
        if getattr(args, key, None) is not None
    }
    if getattr(args, "detector", None):
        overrides["detector"] = args.detector
    return replace(config, **overrides).validate() if overrides else config


def _write_report(
    report_dir: Path,
    series: Sequence[float],
    detector: Mapping[str, Any],
    source: str,
    *,
    changes: Iterable[Mapping[str, Any]] = (),
    matches: Iterable[Mapping[str, Any]] = (),
    ymin: float | None = None,
) -> Path:
    changes, matches = list(changes), list(matches)
    indices = [c["index"] for c in changes] + [m["index"] for m in matches]
    plot = write_plot(series, indices, report_dir / "series.png", ymin=ymin)
    return render_markdown_report(
        {
            "title": "Change Point Report",
            "source": source,
            "n_samples": len(series),
            "detector": detector,
            "changes": changes,
            "matches": matches,
            "plot": plot.name,
        },
        report_dir / "report.md",
    )


def _add_series_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("series", nargs="?", default="-", help="Series file (text, CSV, JSON, JSONL); '-' for stdin")
    parser.add_argument("--value-column", help="Column or key holding the values for CSV/JSON inputs")
    parser.add_argument("--json", action="store_true", help="Emit results as JSON")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meanshift",
        description="Detect mean shifts in numeric time series, offline or over a sliding window.",
    )
    parser.add_argument("--config", type=Path, help="Detector configuration (YAML or JSON)")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON logs")

    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Check a whole series for a single change point")
    _add_series_argument(check)
    check.add_argument("--detector", choices=["scatter", "correlation"], help="Detector strategy")
    check.add_argument("--min-sample-size", type=int, help="Minimum values on each side of a split (0 = 30)")
    check.add_argument("--min-confidence", type=float, help="Welch t-test confidence required")
    check.add_argument("--marker-width", type=int, help="Odd marker width for the correlation detector")
    check.add_argument("--min-correlation", type=float, help="Correlation threshold for the correlation detector")
    check.add_argument("--report", type=Path, help="Directory for a Markdown report and plot")
    check.add_argument("--ymin", type=float, help="Lower y-axis bound for the plot")

    stream = subparsers.add_parser("stream", help="Push a series through a sliding window detector")
    _add_series_argument(stream)
    stream.add_argument("--window-size", type=int, help="Lookback window length")
    stream.add_argument("--block-size", type=int, help="Values per window advance")
    stream.add_argument("--min-sample-size", type=int, help="Minimum values on each side of a split (0 = 30)")
    stream.add_argument("--min-confidence", type=float, help="Welch t-test confidence required")
    stream.add_argument("--follow", action="store_true", help="Keep reading as the file grows")

    correlate = subparsers.add_parser("correlate", help="List every position matching the change marker")
    _add_series_argument(correlate)
    correlate.add_argument("--marker-width", type=int, help="Odd marker width")
    correlate.add_argument("--min-correlation", type=float, help="Absolute correlation threshold")
    correlate.add_argument("--report", type=Path, help="Directory for a Markdown report and plot")
    correlate.add_argument("--ymin", type=float, help="Lower y-axis bound for the plot")

    simulate = subparsers.add_parser("simulate", help="Generate a synthetic step series")
    simulate.add_argument(
        "--segment",
        action="append",
        nargs=2,
        metavar=("LENGTH", "MEAN"),
        type=float,
        help="Segment length and mean. Repeat to add segments.",
    )
    simulate.add_argument("--noise-std", type=float, default=0.1, help="Noise standard deviation")
    simulate.add_argument("--seed", type=int, help="Random seed")
    simulate.add_argument("--output", type=Path, help="Write values to this file (one per line, or .json)")

    subparsers.add_parser("version", help="Display the installed version")

    return parser


def cmd_check(args: argparse.Namespace) -> None:
    config = _resolve_config(args)
    series = read_series(args.series, value_column=args.value_column)
    log_event(logger, "series_loaded", source=str(args.series), n_samples=len(series))
    detector = build_detector(config.detector_options())
    change = detector.check(series)
    result = {
        "n_samples": len(series),
        "detector": dict(detector.describe()),
        "change_point": change.as_dict() if change else None,
    }
    if args.report:
        changes = [result["change_point"]] if change else []
        report = _write_report(
            args.report, series, result["detector"], str(args.series), changes=changes, ymin=args.ymin
        )
        result["report"] = str(report)
    if args.json:
        _print_result(result, as_json=True)
    elif change:
        print(f"Found change at index={change.index} difference={change.difference:.4f} confidence={change.confidence:.4f}")
    else:
        print(f"No change found in {len(series)} values")


def cmd_stream(args: argparse.Namespace) -> None:
    config = _resolve_config(args)
    stream = Stream(config.window_size, config.block_size, detector=build_detector(config.detector_options()))
    if args.follow and args.series != "-":
        source = lambda: FileSource(args.series, batch_size=config.block_size, follow=True)  # noqa: E731
    else:
        series = read_series(args.series, value_column=args.value_column)
        source = lambda: IterableSource(series, batch_size=config.block_size)  # noqa: E731
    service = StreamingService(source, stream)
    events = service.run()
    if args.json:
        _print_result(
            {"observed": stream.observed, "config": config.as_dict(), "events": [e.as_dict() for e in events]},
            as_json=True,
        )
    else:
        for event in events:
            cp = event.change_point
            print(
                f"observed={event.observed} position={event.position} "
                f"difference={cp.difference:.4f} confidence={cp.confidence:.4f}"
            )
        print(f"Processed {stream.observed} values, {len(events)} changes")


def cmd_correlate(args: argparse.Namespace) -> None:
    config = _resolve_config(args)
    series = read_series(args.series, value_column=args.value_column)
    detector = MarkerCorrelationDetector(marker_width=config.marker_width, min_correlation=config.min_correlation)
    matches = detector.scan(series)
    for match in matches:
        logger.info("Found change at pos=%d with corr=%.4f", match.index, match.correlation)
    result = {
        "n_samples": len(series),
        "detector": dict(detector.describe()),
        "matches": [m.as_dict() for m in matches],
    }
    if args.report:
        report = _write_report(
            args.report, series, result["detector"], str(args.series), matches=result["matches"], ymin=args.ymin
        )
        result["report"] = str(report)
    if args.json:
        _print_result(result, as_json=True)
    else:
        print(f"{len(matches)} positions above |corr|={detector.threshold}: {[m.index for m in matches]}")


def cmd_simulate(args: argparse.Namespace) -> None:
    segments = [(int(length), mean) for length, mean in args.segment] if args.segment else None
    series = generate_step_series(segments, noise_std=args.noise_std, seed=args.seed)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        if args.output.suffix.lower() == ".json":
            args.output.write_text(json.dumps(series), encoding="utf-8")
        else:
            args.output.write_text("".join(f"{v}\n" for v in series), encoding="utf-8")
        print(f"Wrote {len(series)} values to {args.output}")
    else:
        for value in series:
            print(value)


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=args.log_level, json_logs=args.json_logs or None)

    handlers = {
        "check": cmd_check,
        "stream": cmd_stream,
        "correlate": cmd_correlate,
        "simulate": cmd_simulate,
        "version": lambda _args: print(__version__),
    }
    try:
        handlers[args.command](args)
    except Exception as exc:  # pragma: no cover - CLI surface
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
