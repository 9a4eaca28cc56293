"""Configuration loading and validation for detectors and streams."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_MIN_SAMPLE_SIZE = 30

# Conventional two-sided t-test confidence levels.
CONF80 = 0.80
CONF90 = 0.90
CONF95 = 0.95
CONF98 = 0.98
CONF99 = 0.99
CONF99P5 = 0.995

DEFAULT_MIN_CONFIDENCE = CONF80

CONFIG_ENV_VAR = "MEANSHIFT_CONFIG"

_SECTIONS = ("detector", "stream", "correlation")


def resolve_min_sample_size(value: int | None) -> int:
    """Map an unset or zero minimum sample size to the default."""

    if value is None or int(value) == 0:
        return DEFAULT_MIN_SAMPLE_SIZE
    return int(value)


@dataclass
class DetectorConfig:
    """Parameters shared by the offline detectors and the streaming window."""

    detector: str = "scatter"
    window_size: int = 120
    block_size: int = 10
    min_sample_size: int = 0
    min_confidence: float = DEFAULT_MIN_CONFIDENCE
    marker_width: int = 1
    min_correlation: float = 0.6

    @property
    def effective_min_sample_size(self) -> int:
        return resolve_min_sample_size(self.min_sample_size)

    def errors(self) -> list[str]:
        """Return human-readable problems; empty when the config is usable."""

        problems: list[str] = []
        if self.detector not in {"scatter", "correlation"}:
            problems.append(f"Unknown detector '{self.detector}' (expected 'scatter' or 'correlation')")
        if self.window_size <= 0:
            problems.append(f"window_size must be positive (got {self.window_size})")
        if self.block_size <= 0:
            problems.append(f"block_size must be positive (got {self.block_size})")
        elif self.window_size > 0 and self.block_size > self.window_size:
            problems.append(f"block_size ({self.block_size}) cannot exceed window_size ({self.window_size})")
        if self.min_sample_size < 0:
            problems.append(f"min_sample_size cannot be negative (got {self.min_sample_size})")
        if not 0.0 <= self.min_confidence < 1.0:
            problems.append(f"min_confidence must be in [0, 1) (got {self.min_confidence})")
        if self.marker_width <= 0 or self.marker_width % 2 == 0:
            problems.append(f"marker_width must be a positive odd number (got {self.marker_width})")
        if not 0.0 <= self.min_correlation <= 1.0:
            problems.append(f"min_correlation must be in [0, 1] (got {self.min_correlation})")
        return problems

    def validate(self) -> "DetectorConfig":
        problems = self.errors()
        if problems:
            raise ConfigurationError("; ".join(problems))
        return self

    def detector_options(self) -> Dict[str, Any]:
        """Mapping accepted by :func:`meanshift.detectors.build_detector`."""

        if self.detector == "correlation":
            return {
                "type": "correlation",
                "marker_width": self.marker_width,
                "min_correlation": self.min_correlation,
            }
        return {
            "type": "scatter",
            "min_sample_size": self.min_sample_size,
            "min_confidence": self.min_confidence,
        }

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any]) -> "DetectorConfig":
        """Build from flat keys or ``detector``/``stream``/``correlation`` sections.

        Unknown keys are ignored with a warning. Values are coerced to the
        field types; the result is validated.
        """

        flat: Dict[str, Any] = {}
        for key, value in cfg.items():
            if key in _SECTIONS and isinstance(value, Mapping):
                for inner_key, inner_value in value.items():
                    flat["detector" if inner_key == "type" else inner_key] = inner_value
            else:
                flat[key] = value

        known = {f.name: f for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in flat.items():
            if key not in known:
                logger.warning("Ignoring unknown config key '%s'", key)
                continue
            caster = {"int": int, "float": float, "str": str}.get(str(known[key].type), str)
            try:
                kwargs[key] = caster(value)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"Config key '{key}' has invalid value {value!r}") from exc
        return cls(**kwargs).validate()

    @classmethod
    def from_file(cls, path: str | Path) -> "DetectorConfig":
        raw = Path(path)
        if not raw.exists():
            raise FileNotFoundError(f"Configuration file not found: {raw}")
        text = raw.read_text(encoding="utf-8")
        loaded = json.loads(text) if raw.suffix.lower() == ".json" else yaml.safe_load(text)
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, Mapping):
            raise ConfigurationError("Config file must contain a mapping/object at the top level")
        return cls.from_mapping(loaded)


def load_config(path: str | Path | None = None) -> DetectorConfig:
    """Resolve configuration from ``path``, then ``$MEANSHIFT_CONFIG``, then defaults."""

    if path:
        return DetectorConfig.from_file(path)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        logger.debug("Loading config from $%s=%s", CONFIG_ENV_VAR, env_path)
        return DetectorConfig.from_file(env_path)
    return DetectorConfig()
