"""Helpers for flattening ranked records into spreadsheet rows."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from .core.expectations import FIT_LABELS, TargetLevel, dimension_fit
from .schemas import DerivedCandidateRecord

BASE_COLUMNS = ["Name", "Email", "Status", "Score", "Strength"]
TAIL_COLUMNS = [
    "Flags",
    "Percentile",
    "Summary",
    "Confidence",
    "Completed Date",
    "Flag Details",
]


def dimension_columns(records: Iterable[DerivedCandidateRecord]) -> list[str]:
    """Dimension names in first-seen order across the batch."""
    seen: dict[str, None] = {}
    for record in records:
        for item in record.dimension_scores:
            seen.setdefault(item.name, None)
    return list(seen)


def build_export_row(
    record: DerivedCandidateRecord,
    *,
    dimensions: Sequence[str],
    target_level: TargetLevel | str = TargetLevel.MID,
) -> dict[str, Any]:
    """Construct a flat row for one candidate."""

    scores = {item.name: item.score for item in record.dimension_scores}
    row: dict[str, Any] = {
        "Name": record.name or "Anonymous",
        "Email": record.email or "",
        "Status": record.status,
        "Score": round(record.overall_score, 1) if record.overall_score is not None else None,
        "Strength": record.strength_tier.value if record.strength_tier else "",
    }

    for name in dimensions:
        score = scores.get(name)
        if score is None or record.overall_score is None:
            row[name] = ""
        else:
            row[name] = FIT_LABELS[dimension_fit(score, target_level)]

    row["Flags"] = record.red_flag_count
    row["Percentile"] = _format_percentile(record.percentile)
    row["Summary"] = record.summary or ""
    row["Confidence"] = record.evaluation_confidence or ""
    row["Completed Date"] = (
        record.completed_at.strftime("%b %d, %Y") if record.completed_at else ""
    )
    row["Flag Details"] = "; ".join(record.red_flags)
    return row


def build_export_rows(
    records: Sequence[DerivedCandidateRecord],
    *,
    target_level: TargetLevel | str = TargetLevel.MID,
) -> tuple[list[str], list[dict[str, Any]]]:
    dimensions = dimension_columns(records)
    rows = [
        build_export_row(record, dimensions=dimensions, target_level=target_level)
        for record in records
    ]
    return BASE_COLUMNS + dimensions + TAIL_COLUMNS, rows


def _format_percentile(value: float | None) -> str:
    if value is None:
        return ""
    if float(value).is_integer():
        return f"Top {int(value)}%"
    return f"Top {value}%"
