"""Pydantic schema definitions for source-neutral assessment data."""

from __future__ import annotations

from .candidate import (
    AssessmentStatus,
    ConfidenceLevel,
    DerivedCandidateRecord,
    DimensionFindings,
    DimensionScore,
    RawCandidateRecord,
    StrengthTier,
)

__all__ = [
    "AssessmentStatus",
    "ConfidenceLevel",
    "DerivedCandidateRecord",
    "DimensionFindings",
    "DimensionScore",
    "RawCandidateRecord",
    "StrengthTier",
]
