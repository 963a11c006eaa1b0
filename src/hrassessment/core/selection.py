"""Bounded compare-mode selection with query-string persistence."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Protocol, runtime_checkable
from urllib.parse import parse_qsl, urlencode

import structlog

from ..schemas import DerivedCandidateRecord

MODE_KEY = "compareMode"
SELECTED_KEY = "selectedIds"

MAX_SELECTED = 4
MIN_SELECTED = 2


@dataclass(frozen=True, slots=True)
class SelectionState:
    """Compare-mode flag plus the ordered set of selected identifiers."""

    mode: bool = False
    selected: tuple[str, ...] = ()

    @property
    def active(self) -> bool:
        return self.mode


class ToggleResult(str, Enum):
    """Advisory outcome of a toggle; rejected toggles leave state untouched."""

    ADDED = "added"
    REMOVED = "removed"
    INACTIVE = "inactive"
    INELIGIBLE = "ineligible"
    FULL = "full"


def serialize(state: SelectionState) -> dict[str, str]:
    """Flatten state into query parameters. Inactive state has no keys."""
    if not state.mode:
        return {}
    params = {MODE_KEY: "true"}
    if state.selected:
        params[SELECTED_KEY] = ",".join(state.selected)
    return params


def deserialize(params: Mapping[str, object] | None, *, limit: int = MAX_SELECTED) -> SelectionState:
    """Rebuild state from query parameters.

    Never raises: anything other than a ``"true"`` mode flag yields the
    inactive default. Unknown identifiers are kept; eligibility is checked
    when toggling, not here.
    """
    if not isinstance(params, Mapping):
        return SelectionState()
    mode = params.get(MODE_KEY)
    if not isinstance(mode, str) or mode.strip().lower() != "true":
        return SelectionState()

    raw_ids = params.get(SELECTED_KEY)
    if not isinstance(raw_ids, str):
        return SelectionState(mode=True)

    selected: list[str] = []
    for part in raw_ids.split(","):
        identifier = part.strip()
        if identifier and identifier not in selected:
            selected.append(identifier)
    return SelectionState(mode=True, selected=tuple(selected[:limit]))


@runtime_checkable
class QueryStore(Protocol):
    """Read/write primitive for the persisted query representation."""

    def read(self) -> Mapping[str, str]:
        """Return the current flat key/value mapping."""

    def write(self, params: Mapping[str, str]) -> None:
        """Replace the selection keys with ``params``."""


@runtime_checkable
class Navigator(Protocol):
    """Collaborator that routes to the comparison view."""

    def navigate(self, assessment_ids: list[str]) -> None:
        """Open the comparison view for the given identifiers."""


class InMemoryQueryStore:
    """Query store backed by a dict, useful for servers and tests."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._params: dict[str, str] = dict(initial or {})

    def read(self) -> Mapping[str, str]:
        return dict(self._params)

    def write(self, params: Mapping[str, str]) -> None:
        self._params.pop(MODE_KEY, None)
        self._params.pop(SELECTED_KEY, None)
        self._params.update(params)


class QueryStringStore(InMemoryQueryStore):
    """Query store that round-trips through a URL query string.

    Unrelated parameters already present in the query string are preserved.
    """

    def __init__(self, query: str = "") -> None:
        super().__init__(dict(parse_qsl(query.lstrip("?"), keep_blank_values=True)))

    @property
    def query(self) -> str:
        return urlencode(self._params, safe=",")


class ComparisonSelector:
    """State machine managing compare mode on top of a ranked view."""

    def __init__(
        self,
        *,
        store: QueryStore | None = None,
        candidates: Iterable[DerivedCandidateRecord] = (),
        navigator: Navigator | None = None,
        max_selected: int = MAX_SELECTED,
        min_selected: int = MIN_SELECTED,
    ) -> None:
        self._store = store or InMemoryQueryStore()
        self._navigator = navigator
        # bounds stay within 2..4 whatever the caller passes
        self._max = min(max(max_selected, MIN_SELECTED), MAX_SELECTED)
        self._min = min(max(min_selected, MIN_SELECTED), self._max)
        self._logger = structlog.get_logger(__name__)
        self._candidates: dict[str, DerivedCandidateRecord] = {}
        self.update_candidates(candidates)
        self._state = deserialize(self._store.read(), limit=self._max)

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def selected(self) -> list[str]:
        return list(self._state.selected)

    def update_candidates(self, candidates: Iterable[DerivedCandidateRecord]) -> None:
        self._candidates = {record.assessment_id: record for record in candidates}

    def enter_compare_mode(self) -> None:
        if self._state.mode:
            return
        self._transition(SelectionState(mode=True))

    def exit_compare_mode(self) -> None:
        self._transition(SelectionState())

    def toggle(self, assessment_id: str) -> ToggleResult:
        if not self._state.mode:
            return self._reject(assessment_id, ToggleResult.INACTIVE)

        selected = list(self._state.selected)
        if assessment_id in selected:
            selected.remove(assessment_id)
            self._transition(SelectionState(mode=True, selected=tuple(selected)))
            return ToggleResult.REMOVED

        record = self._candidates.get(assessment_id)
        if record is None or not record.is_eligible_for_compare:
            return self._reject(assessment_id, ToggleResult.INELIGIBLE)
        if len(selected) >= self._max:
            return self._reject(assessment_id, ToggleResult.FULL)

        selected.append(assessment_id)
        self._transition(SelectionState(mode=True, selected=tuple(selected)))
        return ToggleResult.ADDED

    def can_compare(self) -> bool:
        return self._min <= len(self._state.selected) <= self._max

    def commit(self) -> list[str] | None:
        """Hand the selection to the navigator. State is left unchanged."""
        if not self.can_compare():
            self._logger.warning(
                "selection.commit_rejected",
                selected=len(self._state.selected),
            )
            return None
        ids = list(self._state.selected)
        if self._navigator is not None:
            self._navigator.navigate(ids)
        self._logger.info("selection.commit", assessment_ids=ids)
        return ids

    def _transition(self, state: SelectionState) -> None:
        self._state = state
        self._store.write(serialize(state))

    def _reject(self, assessment_id: str, reason: ToggleResult) -> ToggleResult:
        self._logger.info(
            "selection.toggle_rejected",
            assessment_id=assessment_id,
            reason=reason.value,
            selected=len(self._state.selected),
        )
        return reason
