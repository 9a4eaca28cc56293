"""Exceptions raised by meanshift."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when detector, stream or config parameters cannot produce a result."""
