"""Per-candidate metric derivation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

import structlog

from ..schemas import (
    AssessmentStatus,
    ConfidenceLevel,
    DerivedCandidateRecord,
    DimensionFindings,
    DimensionScore,
    RawCandidateRecord,
    StrengthTier,
)


@dataclass
class DeriverConfig:
    """Tier thresholds (1-4 scale) and summary truncation settings."""

    exceptional_threshold: float = 3.5
    strong_threshold: float = 2.5
    proficient_threshold: float = 1.5
    summary_max_length: int = 120
    ellipsis: str = "..."


@dataclass(slots=True)
class Highlights:
    top: DimensionScore | None = None
    mid: DimensionScore | None = None
    bottom: DimensionScore | None = None


def is_scored(record: RawCandidateRecord) -> bool:
    """Return True when the record carries a completed, non-empty evaluation."""
    return (
        record.lifecycle is AssessmentStatus.COMPLETED
        and len(record.dimension_scores) > 0
    )


class MetricDeriver:
    """Turn raw dimension scores into overall score, tier and highlights."""

    def __init__(self, *, config: DeriverConfig | None = None) -> None:
        self._config = config or DeriverConfig()
        self._logger = structlog.get_logger(__name__)

    def derive(self, raw: RawCandidateRecord) -> DerivedCandidateRecord:
        red_flags = self._collect_red_flags(raw.findings)
        base = raw.model_dump(mode="python", include=set(RawCandidateRecord.model_fields))
        base["summary"] = self._truncate_summary(raw.summary)
        base.update(
            red_flags=red_flags,
            red_flag_count=len(red_flags),
            confidence=ConfidenceLevel.parse(raw.evaluation_confidence),
        )

        if not is_scored(raw):
            self._logger.debug(
                "metrics.unscored",
                assessment_id=raw.assessment_id,
                status=raw.status,
                dimension_count=len(raw.dimension_scores),
            )
            return DerivedCandidateRecord.model_validate(base)

        overall = self._mean(raw.dimension_scores)
        highlights = self._highlights(raw.dimension_scores)
        base.update(
            overall_score=overall,
            strength_tier=self.tier_for(overall),
            top_dimension=highlights.top,
            mid_dimension=highlights.mid,
            bottom_dimension=highlights.bottom,
        )
        return DerivedCandidateRecord.model_validate(base)

    def derive_many(self, records: Iterable[RawCandidateRecord]) -> list[DerivedCandidateRecord]:
        return [self.derive(record) for record in records]

    def tier_for(self, score: float) -> StrengthTier:
        if score >= self._config.exceptional_threshold:
            return StrengthTier.EXCEPTIONAL
        if score >= self._config.strong_threshold:
            return StrengthTier.STRONG
        if score >= self._config.proficient_threshold:
            return StrengthTier.PROFICIENT
        return StrengthTier.DEVELOPING

    @staticmethod
    def _mean(scores: list[DimensionScore]) -> float:
        # exactly rounded sum, independent of dimension order
        return math.fsum(item.score for item in scores) / len(scores)

    @staticmethod
    def _highlights(scores: list[DimensionScore]) -> Highlights:
        # sorted() is stable, so equal scores keep input order
        ordered = sorted(scores, key=lambda item: item.score, reverse=True)
        count = len(ordered)
        return Highlights(
            top=ordered[0],
            mid=ordered[count // 2] if count > 2 else None,
            bottom=ordered[-1],
        )

    @staticmethod
    def _collect_red_flags(findings: list[DimensionFindings] | None) -> list[str]:
        if not findings:
            return []
        flags: list[str] = []
        for finding in findings:
            flags.extend(finding.red_flags)
        return flags

    def _truncate_summary(self, summary: str | None) -> str | None:
        if summary is None:
            return None
        limit = self._config.summary_max_length
        if len(summary) <= limit:
            return summary
        return summary[:limit] + self._config.ellipsis
