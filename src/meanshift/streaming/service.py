"""Streaming loop that feeds a Stream from a batch source."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Sequence

from ..config import DetectorConfig
from ..detectors import build_detector
from ..logging_utils import log_change
from ..models import ChangePoint
from .sources import build_source
from .stream import Stream

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreamEvent:
    """A change reported by the stream, located in absolute series coordinates."""

    position: int
    observed: int
    change_point: ChangePoint

    def as_dict(self) -> dict[str, Any]:
        return {
            "position": self.position,
            "observed": self.observed,
            "change_point": self.change_point.as_dict(),
        }


class StreamingService:
    """Runs a stream over a source end-to-end."""

    def __init__(
        self,
        source: Callable[[], Iterable[Sequence[float]]],
        stream: Stream,
        *,
        interval_ms: int = 0,
    ) -> None:
        self.source = source
        self.stream = stream
        self.interval_ms = interval_ms
        self._running = False

    @classmethod
    def create_from_config(
        cls,
        cfg: Mapping[str, Any],
        *,
        source: Callable[[], Iterable[Sequence[float]]] | None = None,
    ) -> "StreamingService":
        """Wire a service from a mapping holding detector/stream keys and an optional ``source``."""

        raw = dict(cfg)
        source_cfg = raw.pop("source", None)
        interval_ms = int(raw.pop("interval_ms", 0))
        config = DetectorConfig.from_mapping(raw)
        stream = Stream(
            config.window_size,
            config.block_size,
            detector=build_detector(config.detector_options()),
        )
        return cls(source or build_source(source_cfg), stream, interval_ms=interval_ms)

    def process_samples(self, samples: Sequence[float]) -> List[StreamEvent]:
        events: list[StreamEvent] = []
        for value in samples:
            change = self.stream.push(value)
            if change is None:
                continue
            event = StreamEvent(
                position=self.stream.offset + change.index,
                observed=self.stream.observed,
                change_point=change,
            )
            events.append(event)
            log_change(logger, change, position=event.position, observed=event.observed)
        return events

    def run(self, *, max_batches: int | None = None) -> List[StreamEvent]:
        """Consume the source until it is exhausted, stopped, or ``max_batches`` is reached."""

        self._running = True
        events: list[StreamEvent] = []
        for idx, samples in enumerate(self.source()):
            if not self._running:
                break
            events.extend(self.process_samples(samples))
            if max_batches is not None and idx + 1 >= max_batches:
                break
            if self.interval_ms:
                time.sleep(self.interval_ms / 1000.0)
        self._running = False
        logger.info("Stream finished after %d values with %d changes", self.stream.observed, len(events))
        return events

    def stop(self) -> None:
        self._running = False
