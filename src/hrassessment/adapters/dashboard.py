"""Adapter for assessment exports produced by the recruiter dashboard database."""

from __future__ import annotations

from typing import Any

from ..schemas import (
    DimensionFindings,
    DimensionScore,
    RawCandidateRecord,
)
from ._base import load_payload, matches_source

_COMPLETED = "COMPLETED"


class DashboardExportAdapter:
    """Convert camelCase assessment rows (with nested video assessment) into records.

    Dimension scores from a video assessment that has not finished are
    discarded, so the record is treated as not yet evaluated.
    """

    source = "dashboard"

    def can_handle(self, blob: bytes | str, metadata: dict[str, Any]) -> bool:
        return matches_source(blob, metadata, self.source)

    def parse_record(self, section: str | dict[str, Any]) -> dict[str, Any]:
        data = load_payload(section, source=self.source)
        payload = data.get("payload", data)

        user = payload.get("user") or {}
        video = payload.get("videoAssessment") or {}
        summary_block = video.get("summary") or {}
        raw_ai = summary_block.get("rawAiResponse") or {}
        report = payload.get("report") or {}

        record = RawCandidateRecord(
            assessment_id=str(payload.get("assessmentId") or payload.get("id") or ""),
            name=user.get("name", payload.get("name")),
            email=user.get("email", payload.get("email")),
            status=payload.get("status") or "",
            dimension_scores=self._scores(payload, video),
            summary=summary_block.get("overallSummary", payload.get("summary")),
            completed_at=payload.get("completedAt"),
            percentile=(report.get("percentiles") or {}).get("overall"),
            findings=self._findings(raw_ai),
            evaluation_confidence=raw_ai.get(
                "evaluationConfidence", payload.get("evaluationConfidence")
            ),
        )
        return record.model_dump(mode="python")

    @staticmethod
    def _scores(payload: dict[str, Any], video: dict[str, Any]) -> list[DimensionScore]:
        if video:
            if str(video.get("status", "")).upper() != _COMPLETED:
                return []
            return [
                DimensionScore(name=item["dimension"], score=float(item["score"]))
                for item in video.get("scores") or []
            ]
        flat = payload.get("dimensionScores") or {}
        return [
            DimensionScore(name=name, score=float(score))
            for name, score in flat.items()
        ]

    @staticmethod
    def _findings(raw_ai: dict[str, Any]) -> list[DimensionFindings] | None:
        entries = raw_ai.get("dimensionScores")
        if not entries:
            return None
        return [
            DimensionFindings(
                dimension=entry.get("dimension"),
                red_flags=entry.get("redFlags") or [],
            )
            for entry in entries
        ]
