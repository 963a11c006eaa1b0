"""Seniority-relative expectations for dimension scores.

Scores use the 1-4 rubric scale (Foundational, Competent, Advanced, Expert).
The same expected score applies to every dimension of a target level.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal


class TargetLevel(str, Enum):
    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"
    STAFF = "staff"


@dataclass(frozen=True, slots=True)
class LevelExpectation:
    label: str
    years_range: str
    expected_score: float


LEVEL_EXPECTATIONS: dict[TargetLevel, LevelExpectation] = {
    TargetLevel.JUNIOR: LevelExpectation("Junior", "0-2 years", 2.0),
    TargetLevel.MID: LevelExpectation("Mid-Level", "2-5 years", 2.5),
    TargetLevel.SENIOR: LevelExpectation("Senior", "5-8 years", 3.0),
    TargetLevel.STAFF: LevelExpectation("Staff", "8+ years", 3.5),
}

FitStatus = Literal["super_exceeds", "exceeds", "meets", "below"]

FIT_LABELS: dict[str, str] = {
    "super_exceeds": "Exceptional",
    "exceeds": "Exceeds",
    "meets": "Meets",
    "below": "Below",
}


def expected_score(level: TargetLevel | str) -> float:
    return LEVEL_EXPECTATIONS[TargetLevel(level)].expected_score


def dimension_fit(score: float, level: TargetLevel | str) -> FitStatus:
    """Classify a dimension score against the target level's expectation."""
    diff = score - expected_score(level)
    if diff >= 1.5:
        return "super_exceeds"
    if diff >= 0.5:
        return "exceeds"
    if diff >= -0.5:
        return "meets"
    return "below"
