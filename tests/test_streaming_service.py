from __future__ import annotations

from itertools import islice
from pathlib import Path

import pytest

from meanshift import Stream, StreamingService
from meanshift.streaming import FileSource, IterableSource, SimulatedSource, build_source

STEP = [1.0] * 30 + [2.0] * 10


def test_service_maps_changes_to_absolute_positions() -> None:
    stream = Stream(window_size=20, block_size=5, min_sample_size=5)
    service = StreamingService(lambda: IterableSource(STEP, batch_size=7), stream)

    events = service.run()

    assert [e.position for e in events] == [30, 30]
    assert [e.observed for e in events] == [35, 40]
    assert events[0].as_dict()["change_point"]["index"] == 15


def test_service_from_config_with_value_source() -> None:
    cfg = {
        "stream": {"window_size": 20, "block_size": 5},
        "detector": {"type": "scatter", "min_sample_size": 5, "min_confidence": 0.8},
        "source": {"type": "values", "values": STEP, "batch_size": 10},
    }
    service = StreamingService.create_from_config(cfg)
    events = service.run()
    assert len(events) == 2
    assert service.stream.observed == len(STEP)


def test_service_run_respects_max_batches() -> None:
    stream = Stream(window_size=20, block_size=5, min_sample_size=5)
    service = StreamingService(lambda: IterableSource(STEP, batch_size=10), stream)
    assert service.run(max_batches=3) == []
    assert stream.observed == 30


def test_simulated_source_batches_whole_series() -> None:
    batches = list(SimulatedSource([(30, 0.0), (20, 5.0)], noise_std=0.0, batch_size=16))
    assert [len(b) for b in batches] == [16, 16, 16, 2]
    assert batches[-1] == [5.0, 5.0]


def test_file_source_skips_bad_lines(tmp_path: Path) -> None:
    path = tmp_path / "series.txt"
    path.write_text("1.0\nnot-a-number\n2.5\n\n3.0,extra\n", encoding="utf-8")
    batches = list(FileSource(path, batch_size=2))
    assert batches == [[1.0, 2.5], [3.0]]


def test_build_source_defaults_to_simulated() -> None:
    source = build_source({"type": "simulated", "segments": [[10, 0.0]], "noise_std": 0.0, "batch_size": 4})()
    assert isinstance(source, SimulatedSource)
    assert sum(len(b) for b in source) == 10


def test_follow_mode_waits_for_complete_lines(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "live.txt"
    path.write_text("1.5\n2.", encoding="utf-8")
    writes = iter(["75\n", "3\n"])

    def finish_writing(_seconds: float) -> None:
        with path.open("a", encoding="utf-8") as handle:
            handle.write(next(writes, ""))

    monkeypatch.setattr("meanshift.streaming.sources.time.sleep", finish_writing)
    source = FileSource(path, batch_size=1, follow=True, poll_interval=0.01)
    assert list(islice(iter(source), 3)) == [[1.5], [2.75], [3.0]]


def test_partial_last_line_is_read_without_follow(tmp_path: Path) -> None:
    path = tmp_path / "done.txt"
    path.write_text("1\n2.5", encoding="utf-8")
    assert list(FileSource(path, batch_size=10)) == [[1.0, 2.5]]
