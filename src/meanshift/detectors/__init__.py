"""Detector strategies and a small registry to build them from config."""

from __future__ import annotations

from typing import Any, Callable, Mapping, MutableMapping

from ..errors import ConfigurationError
from .base import ChangeDetector
from .correlation import MarkerCorrelationDetector, MarkerMatch
from .scatter import ScatterDetector

_REGISTRY: MutableMapping[str, Callable[[Mapping[str, Any]], ChangeDetector]] = {
    "scatter": ScatterDetector.from_config,
    "correlation": MarkerCorrelationDetector.from_config,
}


def register_detector(name: str, factory: Callable[[Mapping[str, Any]], ChangeDetector]) -> None:
    _REGISTRY[name.lower()] = factory


def build_detector(cfg: Mapping[str, Any] | None = None) -> ChangeDetector:
    """Build a detector from ``cfg['type']`` (``scatter`` when absent)."""

    cfg = cfg or {}
    det_type = str(cfg.get("type") or "scatter").lower()
    factory = _REGISTRY.get(det_type)
    if factory is None:
        raise ConfigurationError(f"Unknown detector type '{det_type}'. Registered detectors: {sorted(_REGISTRY)}")
    return factory(cfg)


__all__ = [
    "ChangeDetector",
    "MarkerCorrelationDetector",
    "MarkerMatch",
    "ScatterDetector",
    "build_detector",
    "register_detector",
]
