from __future__ import annotations

import pytest
from pydantic import ValidationError

from hrassessment.schemas import AssessmentStatus, RawCandidateRecord


def test_raw_record_defaults():
    record = RawCandidateRecord(assessment_id="A-001")

    assert record.name is None
    assert record.email is None
    assert record.dimension_scores == []
    assert record.findings is None
    assert record.completed_at is None
    assert record.lifecycle is AssessmentStatus.UNKNOWN


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("COMPLETED", AssessmentStatus.COMPLETED),
        ("working", AssessmentStatus.WORKING),
        (" WELCOME ", AssessmentStatus.WELCOME),
        ("ARCHIVED", AssessmentStatus.UNKNOWN),
        ("", AssessmentStatus.UNKNOWN),
    ],
)
def test_status_parsed_into_closed_variant(raw: str, expected: AssessmentStatus):
    record = RawCandidateRecord(assessment_id="A", status=raw)

    assert record.lifecycle is expected
    assert record.status == raw


def test_completed_at_parsing():
    aware = RawCandidateRecord(assessment_id="A", completed_at="2024-05-01T12:00:00+02:00")
    naive = RawCandidateRecord(assessment_id="B", completed_at="2024-05-01T10:00:00")
    garbage = RawCandidateRecord(assessment_id="C", completed_at="yesterday-ish")

    assert aware.completed_at.timestamp() == naive.completed_at.timestamp()
    assert garbage.completed_at is None


def test_raw_record_requires_identifier():
    with pytest.raises(ValidationError):
        RawCandidateRecord(name="Nobody")  # type: ignore[call-arg]


def test_dimension_score_requires_numeric():
    with pytest.raises(ValidationError):
        RawCandidateRecord(assessment_id="A", dimension_scores=[{"name": "X", "score": "high"}])


@pytest.mark.parametrize("score", [float("nan"), float("inf"), float("-inf")])
def test_dimension_score_rejects_non_finite(score: float):
    with pytest.raises(ValidationError):
        RawCandidateRecord(assessment_id="A", dimension_scores=[{"name": "X", "score": score}])
