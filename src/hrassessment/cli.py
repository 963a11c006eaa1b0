"""Typer CLI entrypoint for ranking and comparison selection."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

import typer
import yaml
from pydantic import ValidationError

from .container import DashboardContainer, create_container
from .core import FilterSet, QueryStringStore, SortKey
from .core.expectations import TargetLevel
from .logging import configure_logging
from .pipeline import AuditLogger
from .schemas import StrengthTier
from .schemas.config import load_config

app = typer.Typer(help="Candidate assessment ranking and comparison CLI.")


class EchoNavigator:
    """Navigator that prints the comparison route."""

    def __init__(self, simulation_id: str | None = None) -> None:
        self._simulation_id = simulation_id

    def navigate(self, assessment_ids: list[str]) -> None:
        prefix = f"/recruiter/assessments/{self._simulation_id}" if self._simulation_id else ""
        typer.echo(f"{prefix}/compare?ids={','.join(assessment_ids)}")


def _build_container(config: Optional[Path], log_level: str) -> DashboardContainer:
    settings: dict[str, Any] = {}
    if config:
        with config.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        try:
            settings = load_config(loaded).to_settings()
        except ValidationError as exc:
            raise typer.BadParameter(str(exc), param_name="config") from exc

    configure_logging(log_level)
    return create_container(settings=settings)


@app.command()
def rank(
    records: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Assessment records JSONL path."),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    sort: Optional[SortKey] = typer.Option(None, case_sensitive=False, help="Sort order."),
    status: Optional[str] = typer.Option(None, help="Lifecycle status filter (or 'all')."),
    strength: Optional[StrengthTier] = typer.Option(None, help="Strength tier filter."),
    min_score: Optional[float] = typer.Option(None, help="Minimum overall score."),
    export: Optional[Path] = typer.Option(None, dir_okay=False, help="CSV export path."),
    target_level: TargetLevel = typer.Option(TargetLevel.MID, case_sensitive=False, help="Target seniority for dimension fit."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    audit_log: Optional[Path] = typer.Option(None, dir_okay=False, help="Audit log output (JSONL)."),
) -> None:
    """Derive metrics, filter and rank one simulation's candidates."""
    container = _build_container(config, log_level)
    pipeline = container.pipeline()
    defaults = container.ranking().default_filters

    filters = None
    if status is not None or strength is not None or min_score is not None:
        filters = FilterSet.build(
            status=status if status is not None else defaults.status,
            strength=strength.value if strength is not None else defaults.strength,
            min_score=min_score if min_score is not None else defaults.min_score,
        )

    view = pipeline.run(
        records_path=records,
        output_path=output,
        filters=filters,
        sort_by=sort,
        export_path=export,
        target_level=target_level,
        audit_logger=AuditLogger(audit_log) if audit_log else None,
    )
    typer.echo(f"Showing {view.shown} of {view.total} candidates. Results saved to {output}.")


@app.command()
def select(
    records: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Assessment records JSONL path."),
    query: str = typer.Option("", help="Current query string holding the compare state."),
    enter: bool = typer.Option(False, "--enter", help="Enter compare mode."),
    exit_mode: bool = typer.Option(False, "--exit", help="Exit compare mode and clear the selection."),
    toggle: List[str] = typer.Option([], help="Assessment id to toggle; repeatable."),
    commit: bool = typer.Option(False, "--commit", help="Open the comparison for the selection."),
    simulation: Optional[str] = typer.Option(None, help="Simulation id used in the comparison route."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Apply compare-mode transitions and print the resulting query string."""
    container = _build_container(config, log_level)
    pipeline = container.pipeline()
    derived, _ = pipeline.load(records)

    store = QueryStringStore(query)
    selector = container.selector(
        store=store,
        candidates=derived,
        navigator=EchoNavigator(simulation),
    )

    if exit_mode:
        selector.exit_compare_mode()
    if enter:
        selector.enter_compare_mode()
    for assessment_id in toggle:
        result = selector.toggle(assessment_id)
        typer.echo(f"{assessment_id}: {result.value}")

    typer.echo(f"query={store.query}")

    if commit and selector.commit() is None:
        typer.echo("Select between 2 and 4 completed candidates to compare.", err=True)
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
