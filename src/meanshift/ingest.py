"""Load numeric series from files or stdin."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Iterable, Iterator, List, TextIO

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


def iter_values(lines: Iterable[str]) -> Iterator[float]:
    """Yield one float per line; blank lines are ignored, bad lines logged and skipped."""

    for lineno, line in enumerate(lines, start=1):
        text = line.strip()
        if not text or text.startswith("#"):
            continue
        try:
            yield float(text.split(",")[0])
        except ValueError:
            logger.warning("Skipping line %d: cannot parse %r as a number", lineno, text)


def _read_csv(path: Path, value_column: str | None) -> List[float]:
    df = pd.read_csv(path)
    if df.empty:
        return []
    if value_column is None:
        if "value" in df.columns:
            value_column = "value"
        else:
            numeric_cols = df.select_dtypes(include=[np.number]).columns
            if numeric_cols.empty:
                raise ValueError("CSV must contain at least one numeric column")
            value_column = numeric_cols[0]
    if value_column not in df.columns:
        raise ValueError(f"Column '{value_column}' not found in {path}")
    return df[value_column].astype(float).tolist()


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _iter_jsonl(path: Path, value_column: str | None) -> Iterator[float]:
    with path.open("r", encoding="utf-8") as handle:
        for lineno, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                obj = None
            if isinstance(obj, dict) and value_column:
                obj = obj.get(value_column)
            if not _is_number(obj):
                logger.warning("Skipping line %d of %s: no numeric value in %r", lineno, path.name, line.strip())
                continue
            yield float(obj)


def read_stream(handle: TextIO) -> List[float]:
    return list(iter_values(handle))


def read_series(path: str | Path | None = None, value_column: str | None = None) -> List[float]:
    """Load a series from CSV, JSON list, JSONL or plain text (one value per line).

    ``None`` or ``"-"`` reads plain text from stdin.
    """

    if path is None or str(path) == "-":
        logger.info("reading series from stdin")
        return read_stream(sys.stdin)

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Series file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        loaded = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(loaded, dict) and value_column:
            loaded = loaded.get(value_column)
        if not isinstance(loaded, list):
            raise ValueError("JSON series file must contain a list of numbers")
        bad = [i for i, x in enumerate(loaded) if not _is_number(x)]
        if bad:
            raise ValueError(f"JSON series file has non-numeric entries at positions {bad[:10]}")
        return [float(x) for x in loaded]
    if suffix == ".jsonl":
        return list(_iter_jsonl(path, value_column))
    if suffix == ".csv":
        return _read_csv(path, value_column)

    with path.open("r", encoding="utf-8") as handle:
        return read_stream(handle)
