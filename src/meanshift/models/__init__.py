"""Pydantic models shared by detectors, streams and reports."""

from .change import ChangePoint, SampleSummary

__all__ = ["ChangePoint", "SampleSummary"]
