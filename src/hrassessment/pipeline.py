"""Assessment dashboard pipeline assembly and execution."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Iterable, List

import pendulum
import structlog

from .adapters import DashboardExportAdapter, NativeRecordAdapter, RecordAdapter
from .core import FilterSet, MetricDeriver, RankedView, RankingEngine, SortKey
from .core.expectations import TargetLevel
from .export import build_export_rows
from .schemas import DerivedCandidateRecord, RawCandidateRecord
from . import __version__


class AdapterRegistry:
    """Registry mapping sources to record adapters."""

    def __init__(self, adapters: Iterable[RecordAdapter]):
        self._adapters = {adapter.source: adapter for adapter in adapters}

    def get(self, source: str) -> RecordAdapter:
        try:
            return self._adapters[source]
        except KeyError as exc:
            raise KeyError(f"Unsupported source: {source!r}") from exc

    def sources(self) -> List[str]:
        return list(self._adapters.keys())


class RecordLoadError(ValueError):
    """Raised when record loading encounters invalid lines."""

    def __init__(self, errors: list[str], partial: list[RawCandidateRecord]):
        super().__init__("Record loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Record loading failed: {self.errors}"


class RecordLoader:
    """Load raw assessment records from JSONL through adapters."""

    def __init__(self, registry: AdapterRegistry, *, default_source: str = "native"):
        self._registry = registry
        self._default_source = default_source

    def load(self, path: Path) -> list[RawCandidateRecord]:
        records: list[RawCandidateRecord] = []
        errors: list[str] = []
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    entry = json.loads(raw)
                except json.JSONDecodeError as exc:
                    errors.append(f"line {idx}: invalid JSON ({exc})")
                    continue
                if not isinstance(entry, dict):
                    errors.append(f"line {idx}: expected a JSON object")
                    continue
                source = entry.get("source") or self._default_source
                try:
                    adapter = self._registry.get(source)
                except KeyError:
                    errors.append(f"line {idx}: unsupported source '{source}'")
                    continue
                try:
                    record = RawCandidateRecord.model_validate(adapter.parse_record(entry))
                except Exception as exc:  # noqa: BLE001
                    errors.append(f"line {idx}: {exc}")
                    continue
                records.append(record)
        if errors:
            raise RecordLoadError(errors, records)
        return records


class OutputWriter:
    """Persist ranked views."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

    def write_table(self, path: Path, columns: list[str], rows: list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=columns)
            writer.writeheader()
            writer.writerows(rows)


class AuditLogger:
    """Append-only audit logger writing JSON lines."""

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: dict) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False))
            handle.write("\n")


class DashboardPipeline:
    """Load, derive, rank and write one simulation's candidates."""

    def __init__(
        self,
        *,
        deriver: MetricDeriver,
        ranking: RankingEngine,
        registry: AdapterRegistry,
        loader: RecordLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._deriver = deriver
        self._ranking = ranking
        self._registry = registry
        self._loader = loader or RecordLoader(registry)
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def load(self, path: Path) -> tuple[list[DerivedCandidateRecord], list[str]]:
        load_errors: list[str] = []
        try:
            records = self._loader.load(path)
        except RecordLoadError as exc:
            records = exc.partial
            load_errors.extend(exc.errors)
            self._logger.warning("records.partial_load", errors=exc.errors)
        return self._deriver.derive_many(records), load_errors

    def run(
        self,
        *,
        records_path: Path,
        output_path: Path,
        filters: FilterSet | None = None,
        sort_by: SortKey | str | None = None,
        export_path: Path | None = None,
        target_level: TargetLevel | str = TargetLevel.MID,
        audit_logger: AuditLogger | None = None,
    ) -> RankedView:
        derived, load_errors = self.load(records_path)
        active_filters = filters or self._ranking.default_filters
        key = SortKey(sort_by) if sort_by is not None else self._ranking.default_sort
        view = self._ranking.view(derived, active_filters, key)

        results = [record.model_dump(mode="json") for record in view.records]

        if audit_logger:
            for record in derived:
                audit_logger.append(
                    {
                        "assessment_id": record.assessment_id,
                        "status": record.status,
                        "overall_score": record.overall_score,
                        "strength_tier": record.strength_tier.value if record.strength_tier else None,
                        "red_flag_count": record.red_flag_count,
                        "shown": record.assessment_id in view.ids,
                    }
                )

        for position, record in enumerate(view.records, start=1):
            self._logger.debug(
                "ranking.result",
                position=position,
                assessment_id=record.assessment_id,
                overall_score=record.overall_score,
                strength_tier=record.strength_tier.value if record.strength_tier else None,
            )

        metadata = {
            "shown": view.shown,
            "total": view.total,
            "sort_by": key.value,
            "filters": active_filters.describe(),
            "errors": load_errors,
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
        }
        self._writer.write(output_path, {"metadata": metadata, "results": results})

        if export_path is not None:
            columns, rows = build_export_rows(view.records, target_level=target_level)
            self._writer.write_table(export_path, columns, rows)

        return view


def default_registry() -> AdapterRegistry:
    """Return the default adapter registry."""
    return AdapterRegistry(adapters=[NativeRecordAdapter(), DashboardExportAdapter()])
