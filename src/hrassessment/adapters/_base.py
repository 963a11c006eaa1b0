from __future__ import annotations

import json
from typing import Any


def load_payload(blob: bytes | str | dict[str, Any], *, source: str) -> dict[str, Any]:
    if isinstance(blob, dict):
        return blob
    if isinstance(blob, bytes):
        blob = blob.decode("utf-8")
    try:
        data = json.loads(blob)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid {source} payload") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Invalid {source} payload: expected an object")
    return data


def matches_source(blob: bytes | str, metadata: dict[str, Any], source: str) -> bool:
    declared = metadata.get("source")
    if declared and str(declared).lower() == source:
        return True
    try:
        data = load_payload(blob, source=source)
    except ValueError:
        return False
    return str(data.get("source", "")).lower() == source
