from .service import StreamEvent, StreamingService
from .sources import FileSource, IterableSource, SimulatedSource, StreamingSource, build_source
from .stream import Stream, StreamState

__all__ = [
    "Stream",
    "StreamState",
    "StreamEvent",
    "StreamingService",
    "StreamingSource",
    "IterableSource",
    "FileSource",
    "SimulatedSource",
    "build_source",
]
