"""Batch sources feeding the streaming service."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Iterable, Iterator, Mapping, Sequence

from ..ingest import iter_values
from ..simulate import generate_step_series

logger = logging.getLogger(__name__)


class StreamingSource:
    """Iterable source contract."""

    def __iter__(self) -> Iterator[Sequence[float]]:  # pragma: no cover - interface only
        raise NotImplementedError


def _batched(values: Iterable[float], batch_size: int) -> Iterator[list[float]]:
    batch: list[float] = []
    for value in values:
        batch.append(value)
        if len(batch) >= batch_size:
            yield batch
            batch = []
    if batch:
        yield batch


class IterableSource(StreamingSource):
    """Wraps an in-memory sequence or generator of values."""

    def __init__(self, values: Iterable[float], batch_size: int = 128) -> None:
        self.values = values
        self.batch_size = batch_size

    def __iter__(self) -> Iterator[Sequence[float]]:
        return _batched((float(v) for v in self.values), self.batch_size)


class FileSource(StreamingSource):
    """Reads a text file of numbers (first CSV field per line), optionally tailing it."""

    def __init__(
        self,
        path: str | Path,
        batch_size: int = 128,
        *,
        follow: bool = False,
        poll_interval: float = 0.5,
    ) -> None:
        self.path = Path(path)
        self.batch_size = batch_size
        self.follow = follow
        self.poll_interval = poll_interval

    def _lines(self) -> Iterator[str]:
        with self.path.open("r", encoding="utf-8") as handle:
            while True:
                pos = handle.tell()
                line = handle.readline()
                # a line without its newline may still be mid-write while following
                if line.endswith("\n") or (line and not self.follow):
                    yield line
                    continue
                if not self.follow:
                    return
                time.sleep(self.poll_interval)
                handle.seek(pos)

    def __iter__(self) -> Iterator[Sequence[float]]:
        if not self.path.exists():
            raise FileNotFoundError(self.path)
        return _batched(iter_values(self._lines()), self.batch_size)


class SimulatedSource(StreamingSource):
    """Emits a synthetic step series in batches."""

    def __init__(
        self,
        segments: Sequence[tuple[int, float]] | None = None,
        noise_std: float = 0.1,
        batch_size: int = 128,
        seed: int | None = None,
    ) -> None:
        self.segments = segments
        self.noise_std = noise_std
        self.batch_size = batch_size
        self.seed = seed

    def __iter__(self) -> Iterator[Sequence[float]]:
        series = generate_step_series(self.segments, noise_std=self.noise_std, seed=self.seed)
        return _batched(series, self.batch_size)


def build_source(cfg: Mapping[str, object] | Callable[[], Iterable[Sequence[float]]] | None) -> Callable[[], Iterable[Sequence[float]]]:
    """Factory for batch sources based on a config mapping."""

    if cfg is None:
        return lambda: SimulatedSource()

    if callable(cfg):
        return cfg  # type: ignore[return-value]

    kind = str(cfg.get("type", "simulated")).lower()
    batch_size = int(cfg.get("batch_size", 128))  # type: ignore[arg-type]
    if kind == "file":
        path = cfg.get("path")
        if not path:
            raise ValueError("File source requires a 'path'")
        follow = bool(cfg.get("follow", False))
        poll = float(cfg.get("poll_interval", 0.5))  # type: ignore[arg-type]
        return lambda: FileSource(str(path), batch_size=batch_size, follow=follow, poll_interval=poll)
    if kind == "values":
        values = list(cfg.get("values", []))  # type: ignore[arg-type]
        return lambda: IterableSource(values, batch_size=batch_size)
    if kind == "simulated":
        segments = cfg.get("segments")
        parsed = [(int(length), float(mean)) for length, mean in segments] if segments else None  # type: ignore[union-attr]
        noise = float(cfg.get("noise_std", 0.1))  # type: ignore[arg-type]
        seed = cfg.get("seed")
        return lambda: SimulatedSource(parsed, noise_std=noise, batch_size=batch_size, seed=seed)  # type: ignore[arg-type]

    logger.warning("Unknown source type '%s', using simulated data", kind)
    return lambda: SimulatedSource(batch_size=batch_size)
