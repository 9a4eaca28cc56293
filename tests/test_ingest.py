from __future__ import annotations

import io
import json
from pathlib import Path

import pandas as pd
import pytest

from meanshift import read_series


def test_plain_text_skips_unparseable_lines(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "series.txt"
    path.write_text("1\n2.5\noops\n\n# comment\n-3e2\n", encoding="utf-8")
    assert read_series(path) == [1.0, 2.5, -300.0]
    assert "oops" in caplog.text


def test_csv_prefers_value_column(tmp_path: Path) -> None:
    path = tmp_path / "series.csv"
    pd.DataFrame({"timestamp": pd.date_range("2024-01-01", periods=3, freq="1s"), "value": [1, 2, 3]}).to_csv(
        path, index=False
    )
    assert read_series(path) == [1.0, 2.0, 3.0]


def test_csv_explicit_column(tmp_path: Path) -> None:
    path = tmp_path / "series.csv"
    pd.DataFrame({"a": [1.0, 2.0], "b": [5.0, 6.0]}).to_csv(path, index=False)
    assert read_series(path, value_column="b") == [5.0, 6.0]
    with pytest.raises(ValueError):
        read_series(path, value_column="missing")


def test_json_and_jsonl(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    json_path = tmp_path / "series.json"
    json_path.write_text(json.dumps([1, 2.5, 4]), encoding="utf-8")
    jsonl_path = tmp_path / "series.jsonl"
    jsonl_path.write_text('1\n{"v": 2}\nbroken\n{"w": 9}\n3\n', encoding="utf-8")

    assert read_series(json_path) == [1.0, 2.5, 4.0]
    assert read_series(jsonl_path, value_column="v") == [1.0, 2.0, 3.0]
    assert "line 3" in caplog.text and "broken" in caplog.text
    assert "line 4" in caplog.text


@pytest.mark.parametrize("entries", [[1, "x", 4], ["1.5", None], [1.0, True]])
def test_json_rejects_non_numeric_entries(tmp_path: Path, entries: list) -> None:
    path = tmp_path / "series.json"
    path.write_text(json.dumps(entries), encoding="utf-8")
    with pytest.raises(ValueError, match="non-numeric"):
        read_series(path)


def test_json_requires_list(tmp_path: Path) -> None:
    path = tmp_path / "series.json"
    path.write_text(json.dumps({"values": 3}), encoding="utf-8")
    with pytest.raises(ValueError):
        read_series(path)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_series(tmp_path / "nope.txt")


def test_stdin(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("4\n5\n"))
    assert read_series("-") == [4.0, 5.0]
