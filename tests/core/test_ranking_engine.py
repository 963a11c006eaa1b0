from __future__ import annotations

from typing import Any

import pytest

from hrassessment.core import FilterSet, MetricDeriver, RankingEngine, SortKey
from hrassessment.schemas import DerivedCandidateRecord, RawCandidateRecord


def derived(assessment_id: str, score: float | None = None, **kwargs: Any) -> DerivedCandidateRecord:
    """Build a derived record whose overall score equals ``score``."""
    payload: dict[str, Any] = {"assessment_id": assessment_id, "name": assessment_id}
    if score is not None:
        payload["status"] = "COMPLETED"
        payload["dimension_scores"] = [{"name": "Overall", "score": score}]
    else:
        payload.setdefault("status", "WORKING")
    payload.update(kwargs)
    return MetricDeriver().derive(RawCandidateRecord(**payload))


def ids(records: list[DerivedCandidateRecord]) -> list[str]:
    return [record.assessment_id for record in records]


def test_default_sort_puts_unscored_last():
    engine = RankingEngine()
    records = [derived("high", 4.0), derived("none"), derived("low", 2.0)]

    ranked = engine.rank(records)

    assert [r.overall_score for r in ranked] == [4.0, 2.0, None]


def test_score_ties_broken_by_recency():
    engine = RankingEngine()
    records = [
        derived("old", 3.0, completed_at="2024-01-01T10:00:00Z"),
        derived("undated", 3.0),
        derived("new", 3.0, completed_at="2024-06-01T10:00:00Z"),
    ]

    assert ids(engine.rank(records, sort_by="score")) == ["new", "old", "undated"]


def test_unscored_ordered_by_recency_too():
    engine = RankingEngine()
    records = [
        derived("w1", status="WORKING"),
        derived("w2", status="COMPLETED", completed_at="2024-03-01T00:00:00Z"),
        derived("scored", 1.0),
    ]

    assert ids(engine.rank(records)) == ["scored", "w2", "w1"]


def test_recent_sort_missing_timestamp_last():
    engine = RankingEngine()
    records = [
        derived("none", 4.0),
        derived("jan", 1.0, completed_at="2024-01-15T00:00:00+00:00"),
        derived("mar", 2.0, completed_at="2024-03-15T00:00:00+00:00"),
    ]

    assert ids(engine.rank(records, sort_by=SortKey.RECENT)) == ["mar", "jan", "none"]


def test_name_sort_case_insensitive_missing_first():
    engine = RankingEngine()
    records = [
        derived("1", 3.0, name="bob"),
        derived("2", 3.0, name=None),
        derived("3", 3.0, name="Alice"),
        derived("4", 3.0, name="carol"),
    ]

    assert ids(engine.rank(records, sort_by="name")) == ["2", "3", "1", "4"]


@pytest.mark.parametrize("sort_by", list(SortKey))
def test_fully_tied_records_keep_input_order(sort_by: SortKey):
    engine = RankingEngine()
    records = [derived(f"c{i}", 2.0, name="Same") for i in range(6)]

    assert ids(engine.rank(records, sort_by=sort_by)) == [f"c{i}" for i in range(6)]


def test_rank_is_deterministic_and_stable_under_unrelated_change():
    engine = RankingEngine()
    records = [
        derived("a", 3.0),
        derived("b", 3.0),
        derived("c", 2.0),
        derived("d"),
    ]
    first = ids(engine.rank(records))
    second = ids(engine.rank(records))

    changed = list(records)
    changed[1] = derived("b", 3.0, email="b@example.com")

    assert first == second == ["a", "b", "c", "d"]
    assert ids(engine.rank(changed)) == first


def test_status_filter_exact_match():
    engine = RankingEngine()
    records = [derived("done", 3.0), derived("busy", status="WORKING"), derived("new", status="WELCOME")]

    ranked = engine.rank(records, FilterSet.build(status="WORKING"))

    assert ids(ranked) == ["busy"]


def test_status_filter_follows_lifecycle_parsing():
    engine = RankingEngine()
    lower = derived("lower", status="completed", dimension_scores=[{"name": "Overall", "score": 3.0}])
    records = [lower, derived("busy", status="WORKING")]

    assert lower.overall_score == 3.0
    assert FilterSet.build(status=" completed ").status == "COMPLETED"
    assert ids(engine.rank(records, FilterSet.build(status="COMPLETED"))) == ["lower"]
    assert ids(engine.rank(records, FilterSet(status="COMPLETED"))) == ["lower"]


def test_status_filter_on_unrecognised_statuses():
    engine = RankingEngine()
    records = [derived("done", 3.0), derived("arch", status="ARCHIVED"), derived("gone", status="DELETED")]

    assert ids(engine.rank(records, FilterSet.build(status="ARCHIVED"))) == ["arch"]
    assert ids(engine.rank(records, FilterSet.build(status="UNKNOWN"))) == ["arch", "gone"]


def test_strength_filter_exact_match():
    engine = RankingEngine()
    records = [derived("x", 3.8), derived("y", 3.0), derived("z", 2.9), derived("u")]

    ranked = engine.rank(records, FilterSet.build(strength="Strong"))

    assert ids(ranked) == ["y", "z"]


def test_min_score_filter_excludes_unscored():
    engine = RankingEngine()
    records = [derived("a", 3.0), derived("b", 1.0), derived("c")]

    assert ids(engine.rank(records, FilterSet(min_score=2.0))) == ["a"]
    assert ids(engine.rank(records, FilterSet(min_score=0.0))) == ["a", "b"]
    assert ids(engine.rank(records, FilterSet())) == ["a", "b", "c"]


def test_filters_combine_with_and():
    engine = RankingEngine()
    records = [
        derived("a", 3.9),
        derived("b", 3.0),
        derived("c", 3.1, status="COMPLETED"),
        derived("d", status="COMPLETED"),
    ]

    ranked = engine.rank(
        records,
        FilterSet.build(status="COMPLETED", strength="Strong", min_score=3.05),
    )

    assert ids(ranked) == ["c"]


@pytest.mark.parametrize(
    "filters",
    [FilterSet(), FilterSet(status="COMPLETED"), FilterSet(min_score=1.0), FilterSet(strength="Proficient")],
)
def test_unscored_after_scored_under_any_filter(filters: FilterSet):
    engine = RankingEngine()
    records = [
        derived("u1", status="COMPLETED"),
        derived("s1", 1.6),
        derived("u2"),
        derived("s2", 2.2),
    ]

    ranked = engine.rank(records, filters, "score")
    seen_unscored = False
    for record in ranked:
        if record.overall_score is None:
            seen_unscored = True
        else:
            assert not seen_unscored


def test_empty_input_and_no_matches():
    engine = RankingEngine()

    assert engine.rank([]) == []
    view = engine.view([derived("a", 1.0)], FilterSet(min_score=4.0))
    assert view.shown == 0
    assert view.total == 1
    assert view.records == ()


def test_view_reports_shown_and_total():
    engine = RankingEngine()
    records = [derived("a", 3.0), derived("b"), derived("c", 1.0)]

    view = engine.view(records, FilterSet(min_score=0.5))

    assert (view.shown, view.total) == (2, 3)
    assert view.ids == ["a", "c"]


def test_unknown_strength_filter_rejected():
    with pytest.raises(ValueError):
        FilterSet.build(strength="Legendary")


def test_unknown_sort_key_rejected():
    with pytest.raises(ValueError):
        RankingEngine().rank([], sort_by="salary")


def test_engine_defaults_apply_when_not_given():
    engine = RankingEngine(default_sort="name", default_filters=FilterSet(min_score=2.0))
    records = [derived("zed", 3.0), derived("amy", 2.5), derived("bob", 1.0)]

    assert ids(engine.rank(records)) == ["amy", "zed"]
