from __future__ import annotations

from pathlib import Path

from meanshift import ScatterDetector
from meanshift.reporting import render_markdown_report, write_plot


def test_markdown_report_lists_changes(tmp_path: Path) -> None:
    detector = ScatterDetector(min_sample_size=5)
    series = [1.0] * 10 + [2.0] * 10
    change = detector.check(series)
    assert change is not None

    path = render_markdown_report(
        {
            "title": "Step",
            "n_samples": len(series),
            "detector": detector.describe(),
            "changes": [change.as_dict()],
        },
        tmp_path / "out" / "report.md",
    )

    text = path.read_text(encoding="utf-8")
    assert text.startswith("# Step")
    assert "| 10 | 1.0000 | 1.0000 | 1.0000 | 2.0000 |" in text
    assert "scatter" in text


def test_markdown_report_without_changes(tmp_path: Path) -> None:
    path = render_markdown_report(
        {"title": "Flat", "n_samples": 5, "detector": {"name": "scatter"}, "changes": []},
        tmp_path / "report.md",
    )
    assert "No change detected" in path.read_text(encoding="utf-8")


def test_plot_is_written(tmp_path: Path) -> None:
    output = write_plot([0.0, 1.0, 0.5, 3.0], [2], tmp_path / "plot.png", ymin=-1.0)
    assert output.exists()
    assert output.stat().st_size > 0
