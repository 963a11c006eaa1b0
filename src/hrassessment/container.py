"""Dependency injection container for the assessment dashboard engine."""

from __future__ import annotations

from dependency_injector import containers, providers

from .adapters import DashboardExportAdapter, NativeRecordAdapter
from .core import ComparisonSelector, FilterSet, MetricDeriver, RankingEngine
from .core.metrics import DeriverConfig
from .pipeline import AdapterRegistry, DashboardPipeline


class DashboardContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    native_adapter = providers.Singleton(NativeRecordAdapter)
    dashboard_adapter = providers.Singleton(DashboardExportAdapter)

    adapter_registry = providers.Singleton(
        AdapterRegistry,
        adapters=providers.List(native_adapter, dashboard_adapter),
    )

    deriver = providers.Singleton(MetricDeriver)

    ranking = providers.Singleton(RankingEngine)

    selector = providers.Factory(ComparisonSelector)

    pipeline = providers.Factory(
        DashboardPipeline,
        deriver=deriver,
        ranking=ranking,
        registry=adapter_registry,
    )


def create_container(*, settings: dict | None = None) -> DashboardContainer:
    """Instantiate container with optional overrides."""

    container = DashboardContainer()

    if not settings:
        return container

    deriver_settings = settings.get("deriver", {}) if isinstance(settings, dict) else {}
    if deriver_settings:
        deriver_config = DeriverConfig(**deriver_settings)
        container.deriver.override(providers.Singleton(MetricDeriver, config=deriver_config))

    ranking_settings = settings.get("ranking", {}) if isinstance(settings, dict) else {}
    if ranking_settings:
        default_filters = FilterSet.build(
            status=ranking_settings.get("status"),
            strength=ranking_settings.get("strength"),
            min_score=ranking_settings.get("min_score"),
        )
        container.ranking.override(
            providers.Singleton(
                RankingEngine,
                default_sort=ranking_settings.get("sort_by", "score"),
                default_filters=default_filters,
            )
        )

    selection_settings = settings.get("selection", {}) if isinstance(settings, dict) else {}
    if selection_settings:
        container.selector.override(
            providers.Factory(ComparisonSelector, **selection_settings)
        )

    return container
