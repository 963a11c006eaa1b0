"""Filtering and deterministic ordering of derived candidate records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import cmp_to_key
from typing import Callable, Iterable, Sequence

import structlog

from ..schemas import AssessmentStatus, DerivedCandidateRecord, StrengthTier

ALL = "all"

Rule = Callable[[DerivedCandidateRecord, DerivedCandidateRecord], int]


class SortKey(str, Enum):
    """Available orderings for the ranked view."""

    SCORE = "score"
    RECENT = "recent"
    NAME = "name"


@dataclass(frozen=True, slots=True)
class FilterSet:
    """AND-combined filters; ``"all"`` or ``None`` disables a filter."""

    status: str = ALL
    strength: str = ALL
    min_score: float | None = None

    @classmethod
    def build(
        cls,
        *,
        status: str | None = None,
        strength: str | None = None,
        min_score: float | None = None,
    ) -> "FilterSet":
        if status and status != ALL:
            lifecycle = AssessmentStatus.parse(status)
            status = status.strip() if lifecycle is AssessmentStatus.UNKNOWN else lifecycle.value
        if strength and strength != ALL:
            # raises ValueError for tiers that do not exist
            strength = StrengthTier(strength).value
        return cls(status=status or ALL, strength=strength or ALL, min_score=min_score)

    def matches(self, record: DerivedCandidateRecord) -> bool:
        if self.status != ALL and not self._matches_status(record):
            return False
        if self.strength != ALL:
            tier = record.strength_tier.value if record.strength_tier else None
            if tier != self.strength:
                return False
        if self.min_score is not None:
            if record.overall_score is None or record.overall_score < self.min_score:
                return False
        return True

    def _matches_status(self, record: DerivedCandidateRecord) -> bool:
        wanted = AssessmentStatus.parse(self.status)
        if wanted is not AssessmentStatus.UNKNOWN:
            return record.lifecycle is wanted
        if record.lifecycle is not AssessmentStatus.UNKNOWN:
            return False
        # "UNKNOWN" selects every unrecognised status, anything else its raw value
        return self.status.strip().upper() == wanted.value or record.status.strip() == self.status.strip()

    def describe(self) -> dict[str, object]:
        return {"status": self.status, "strength": self.strength, "min_score": self.min_score}


@dataclass(frozen=True, slots=True)
class RankedView:
    """Filtered, ordered projection together with the unfiltered total."""

    records: tuple[DerivedCandidateRecord, ...] = field(default_factory=tuple)
    total: int = 0

    @property
    def shown(self) -> int:
        return len(self.records)

    @property
    def ids(self) -> list[str]:
        return [record.assessment_id for record in self.records]


def _compare(left: float, right: float) -> int:
    return (left > right) - (left < right)


def _timestamp(record: DerivedCandidateRecord) -> float:
    if record.completed_at is None:
        return float("-inf")
    return record.completed_at.timestamp()


def scored_first(a: DerivedCandidateRecord, b: DerivedCandidateRecord) -> int:
    return _compare(a.overall_score is None, b.overall_score is None)


def score_descending(a: DerivedCandidateRecord, b: DerivedCandidateRecord) -> int:
    if a.overall_score is None or b.overall_score is None:
        return 0
    return _compare(b.overall_score, a.overall_score)


def recency_descending(a: DerivedCandidateRecord, b: DerivedCandidateRecord) -> int:
    return _compare(_timestamp(b), _timestamp(a))


def name_ascending(a: DerivedCandidateRecord, b: DerivedCandidateRecord) -> int:
    return _compare((a.name or "").casefold(), (b.name or "").casefold())


SORT_RULES: dict[SortKey, tuple[Rule, ...]] = {
    SortKey.SCORE: (scored_first, score_descending, recency_descending),
    SortKey.RECENT: (recency_descending,),
    SortKey.NAME: (name_ascending,),
}


def compose(rules: Sequence[Rule]) -> Rule:
    """Chain comparator rules, returning the first non-zero result."""

    def comparator(a: DerivedCandidateRecord, b: DerivedCandidateRecord) -> int:
        for rule in rules:
            result = rule(a, b)
            if result:
                return result
        return 0

    return comparator


class RankingEngine:
    """Apply filters and a sort order to derived records."""

    def __init__(
        self,
        *,
        default_sort: SortKey | str = SortKey.SCORE,
        default_filters: FilterSet | None = None,
    ) -> None:
        self._default_sort = SortKey(default_sort)
        self._default_filters = default_filters or FilterSet()
        self._logger = structlog.get_logger(__name__)

    @property
    def default_sort(self) -> SortKey:
        return self._default_sort

    @property
    def default_filters(self) -> FilterSet:
        return self._default_filters

    def rank(
        self,
        records: Iterable[DerivedCandidateRecord],
        filters: FilterSet | None = None,
        sort_by: SortKey | str | None = None,
    ) -> list[DerivedCandidateRecord]:
        active_filters = filters or self._default_filters
        key = SortKey(sort_by) if sort_by is not None else self._default_sort
        filtered = [record for record in records if active_filters.matches(record)]
        # list.sort is stable, fully tied records keep their input order
        filtered.sort(key=cmp_to_key(compose(SORT_RULES[key])))
        return filtered

    def view(
        self,
        records: Sequence[DerivedCandidateRecord],
        filters: FilterSet | None = None,
        sort_by: SortKey | str | None = None,
    ) -> RankedView:
        key = SortKey(sort_by) if sort_by is not None else self._default_sort
        ranked = self.rank(records, filters, key)
        view = RankedView(records=tuple(ranked), total=len(records))
        self._logger.info(
            "ranking.view",
            shown=view.shown,
            total=view.total,
            sort_by=key.value,
        )
        return view
