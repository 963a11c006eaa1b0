"""Core derivation, ranking and selection components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .expectations import LEVEL_EXPECTATIONS, TargetLevel, dimension_fit
from .metrics import DeriverConfig, MetricDeriver, is_scored
from .ranking import FilterSet, RankedView, RankingEngine, SortKey
from .selection import (
    ComparisonSelector,
    InMemoryQueryStore,
    Navigator,
    QueryStore,
    QueryStringStore,
    SelectionState,
    ToggleResult,
    deserialize,
    serialize,
)

__all__ = [
    "ComparisonSelector",
    "DeriverConfig",
    "FilterSet",
    "InMemoryQueryStore",
    "LEVEL_EXPECTATIONS",
    "MetricDeriver",
    "Navigator",
    "QueryStore",
    "QueryStringStore",
    "RankedView",
    "RankingEngine",
    "SelectionState",
    "SortKey",
    "TargetLevel",
    "ToggleResult",
    "deserialize",
    "dimension_fit",
    "is_scored",
    "serialize",
]
