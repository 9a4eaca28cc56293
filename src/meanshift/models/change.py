"""Change point representations returned by detectors."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SampleSummary(BaseModel):
    """Sufficient statistics of a contiguous segment of a window.

    ``variance`` is the unbiased sample variance and is left unset for
    segments holding a single value.
    """

    model_config = ConfigDict(frozen=True)

    mean: float
    variance: Optional[float] = None
    count: int = Field(ge=1)

    @field_validator("variance")
    @classmethod
    def _non_negative(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value < 0:
            raise ValueError("variance cannot be negative")
        return value


class ChangePoint(BaseModel):
    """A significant shift in mean found inside a window."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    difference: float
    confidence: float = Field(ge=0.0, le=1.0)
    before: SampleSummary
    after: SampleSummary

    def as_dict(self) -> Dict[str, Any]:
        return self.model_dump()
