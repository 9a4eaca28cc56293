"""Structured logging helpers for detector and stream events."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Mapping

import numpy as np

from .models import ChangePoint

JSON_LOGS_ENV_VAR = "MEANSHIFT_JSON_LOGS"
TEXT_FORMAT = "%(levelname)s:%(name)s:%(message)s"

# matplotlib logs font discovery at DEBUG; keep it out of detector logs
_NOISY_LOGGERS = ("matplotlib", "PIL")


def _json_logs_from_env() -> bool:
    return os.getenv(JSON_LOGS_ENV_VAR, "false").lower() in {"1", "true", "yes"}


def _plain(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    return value


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record; event fields are merged at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {"level": record.levelname, "logger": record.name}
        fields = getattr(record, "event_fields", None)
        if fields:
            payload.update(fields)
        else:
            payload["message"] = record.getMessage()
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO", json_logs: bool | None = None) -> None:
    """Configure root logging. ``json_logs=None`` defers to MEANSHIFT_JSON_LOGS."""

    if json_logs is None:
        json_logs = _json_logs_from_env()

    handler = logging.StreamHandler()
    handler.setFormatter(JsonLineFormatter() if json_logs else logging.Formatter(TEXT_FORMAT))
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), handlers=[handler])
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def format_fields(fields: Mapping[str, Any]) -> str:
    return " ".join(f"{key}={value}" for key, value in fields.items())


def log_event(logger: logging.Logger, event: str, *, level: int = logging.INFO, **fields: Any) -> None:
    """Emit ``event`` with its fields.

    Text handlers see ``event key=value ...``; :class:`JsonLineFormatter`
    renders the same fields as a JSON object.
    """

    payload = {"event": event, **{key: _plain(value) for key, value in fields.items()}}
    logger.log(level, "%s %s", event, format_fields(fields), extra={"event_fields": payload})


def log_change(logger: logging.Logger, change: ChangePoint, **context: Any) -> None:
    """Log a detected change point with its location context (e.g. stream position)."""

    log_event(
        logger,
        "change_detected",
        **context,
        index=change.index,
        difference=round(change.difference, 6),
        confidence=round(change.confidence, 6),
        mean_before=round(change.before.mean, 6),
        mean_after=round(change.after.mean, 6),
    )
