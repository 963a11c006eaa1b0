"""Source-specific assessment record adapters."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .dashboard import DashboardExportAdapter
from .native import NativeRecordAdapter


@runtime_checkable
class RecordAdapter(Protocol):
    """Source-specific record adapter contract.

    Implementations transform source-native assessment payloads into
    source-neutral dictionaries that validate as ``RawCandidateRecord``.
    """

    source: str

    def can_handle(self, blob: bytes | str, metadata: dict) -> bool:
        """Return True when the adapter can parse the given payload."""

    def parse_record(self, section: str | dict) -> dict:
        """Parse a single payload and return a source-neutral dictionary."""


__all__ = ["RecordAdapter", "DashboardExportAdapter", "NativeRecordAdapter"]
