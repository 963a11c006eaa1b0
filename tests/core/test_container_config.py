from __future__ import annotations

import pytest
from pydantic import ValidationError

from hrassessment.container import create_container
from hrassessment.core import InMemoryQueryStore, SortKey
from hrassessment.schemas.config import AppConfig, load_config


def test_create_container_with_overrides():
    container = create_container(
        settings={
            "deriver": {"exceptional_threshold": 3.8, "summary_max_length": 80},
            "ranking": {"sort_by": "recent", "strength": "Strong", "min_score": 2.0},
            "selection": {"max_selected": 3},
        }
    )

    deriver = container.deriver()
    ranking = container.ranking()
    selector = container.selector(store=InMemoryQueryStore())
    pipeline = container.pipeline()

    assert deriver._config.exceptional_threshold == 3.8
    assert deriver._config.summary_max_length == 80
    assert ranking.default_sort is SortKey.RECENT
    assert ranking.default_filters.strength == "Strong"
    assert ranking.default_filters.min_score == 2.0
    assert selector._max == 3
    assert pipeline._deriver is deriver
    assert pipeline._ranking is ranking


def test_create_container_defaults():
    container = create_container()

    assert container.ranking().default_sort is SortKey.SCORE
    assert container.deriver()._config.summary_max_length == 120
    assert container.adapter_registry().sources() == ["native", "dashboard"]


def test_load_config_validation():
    data = {
        "deriver": {"strong_threshold": 2.6},
        "ranking": {"sort_by": "name"},
    }
    app_config = load_config(data)
    assert isinstance(app_config, AppConfig)
    settings = app_config.to_settings()
    assert settings == {"deriver": {"strong_threshold": 2.6}, "ranking": {"sort_by": "name"}}


@pytest.mark.parametrize(
    "raw",
    [
        ["not", "a", "mapping"],
        {"ranking": {"sort_by": "salary"}},
        {"deriver": {"unknown_knob": 1}},
        {"selection": {"max_selected": 0}},
        {"selection": {"max_selected": 6}},
        {"selection": {"min_selected": 1}},
        {"selection": {"min_selected": 4, "max_selected": 3}},
    ],
)
def test_load_config_rejects_invalid(raw):
    with pytest.raises(ValidationError):
        load_config(raw)
