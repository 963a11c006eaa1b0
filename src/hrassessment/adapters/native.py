"""Adapter for records already in the source-neutral shape."""

from __future__ import annotations

from typing import Any

from ..schemas import RawCandidateRecord
from ._base import load_payload, matches_source


class NativeRecordAdapter:
    """Validate snake_case payloads that mirror ``RawCandidateRecord``."""

    source = "native"

    def can_handle(self, blob: bytes | str, metadata: dict[str, Any]) -> bool:
        return matches_source(blob, metadata, self.source)

    def parse_record(self, section: str | dict[str, Any]) -> dict[str, Any]:
        data = load_payload(section, source=self.source)
        payload = data.get("payload", data)
        scores = payload.get("dimension_scores") or []
        if isinstance(scores, dict):
            payload = {
                **payload,
                "dimension_scores": [
                    {"name": name, "score": score} for name, score in scores.items()
                ],
            }
        return RawCandidateRecord.model_validate(payload).model_dump(mode="python")
