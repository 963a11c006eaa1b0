"""Pydantic models for raw and derived candidate assessment records."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

import pendulum
from pydantic import BaseModel, ConfigDict, Field, field_validator


class AssessmentStatus(str, Enum):
    """Closed lifecycle variant; anything unrecognised maps to UNKNOWN."""

    WELCOME = "WELCOME"
    WORKING = "WORKING"
    COMPLETED = "COMPLETED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | None) -> "AssessmentStatus":
        if not value:
            return cls.UNKNOWN
        try:
            status = cls(value.strip().upper())
        except ValueError:
            return cls.UNKNOWN
        return status


class StrengthTier(str, Enum):
    """Four-level banding of the overall score."""

    EXCEPTIONAL = "Exceptional"
    STRONG = "Strong"
    PROFICIENT = "Proficient"
    DEVELOPING = "Developing"


class ConfidenceLevel(str, Enum):
    """Evaluation confidence bucket."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def parse(cls, value: str | None) -> "ConfidenceLevel":
        normalized = (value or "").strip().lower()
        if normalized == cls.HIGH.value:
            return cls.HIGH
        if normalized == cls.MEDIUM.value:
            return cls.MEDIUM
        return cls.LOW


class DimensionScore(BaseModel):
    """Score on a single competency dimension."""

    name: str
    score: float

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)


class DimensionFindings(BaseModel):
    """Upstream findings attached to a dimension."""

    dimension: str | None = None
    red_flags: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @field_validator("red_flags", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class RawCandidateRecord(BaseModel):
    """Source-neutral assessment record for one candidate in one simulation."""

    assessment_id: str
    name: str | None = None
    email: str | None = None
    status: str = AssessmentStatus.UNKNOWN.value
    dimension_scores: list[DimensionScore] = Field(default_factory=list)
    summary: str | None = None
    completed_at: datetime | None = None
    percentile: float | None = None
    findings: list[DimensionFindings] | None = None
    evaluation_confidence: str | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("completed_at", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            return pendulum.instance(value)
        try:
            return pendulum.parse(str(value))
        except (ValueError, pendulum.parsing.exceptions.ParserError):
            return None

    @property
    def lifecycle(self) -> AssessmentStatus:
        return AssessmentStatus.parse(self.status)


class DerivedCandidateRecord(RawCandidateRecord):
    """Raw record enriched with derived metrics. Immutable once built."""

    overall_score: float | None = None
    strength_tier: StrengthTier | None = None
    top_dimension: DimensionScore | None = None
    mid_dimension: DimensionScore | None = None
    bottom_dimension: DimensionScore | None = None
    red_flag_count: int = 0
    red_flags: list[str] = Field(default_factory=list)
    confidence: ConfidenceLevel = ConfidenceLevel.LOW

    model_config = ConfigDict(extra="ignore", frozen=True)

    @property
    def is_eligible_for_compare(self) -> bool:
        return (
            self.lifecycle is AssessmentStatus.COMPLETED
            and self.overall_score is not None
        )
