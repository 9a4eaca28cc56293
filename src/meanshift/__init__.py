"""Single mean-shift change point detection for numeric time series."""

from importlib import metadata

from .config import DEFAULT_MIN_SAMPLE_SIZE, DetectorConfig, load_config
from .detectors import ChangeDetector, MarkerCorrelationDetector, ScatterDetector, build_detector
from .errors import ConfigurationError
from .ingest import read_series
from .models import ChangePoint, SampleSummary
from .simulate import generate_step_series
from .streaming import Stream, StreamEvent, StreamingService, StreamState

try:
    __version__ = metadata.version("meanshift")
except metadata.PackageNotFoundError:  # pragma: no cover - fallback for source checkouts
    __version__ = "0.1.0"

__all__ = [
    "DEFAULT_MIN_SAMPLE_SIZE",
    "ChangeDetector",
    "ChangePoint",
    "ConfigurationError",
    "DetectorConfig",
    "MarkerCorrelationDetector",
    "SampleSummary",
    "ScatterDetector",
    "Stream",
    "StreamEvent",
    "StreamState",
    "StreamingService",
    "build_detector",
    "generate_step_series",
    "load_config",
    "read_series",
    "__version__",
]
