"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator


class DeriverSection(BaseModel):
    exceptional_threshold: float | None = None
    strong_threshold: float | None = None
    proficient_threshold: float | None = None
    summary_max_length: int | None = Field(default=None, ge=0)
    ellipsis: str | None = None

    model_config = ConfigDict(extra="forbid")


class RankingSection(BaseModel):
    sort_by: str | None = None
    status: str | None = None
    strength: str | None = None
    min_score: float | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("sort_by")
    @classmethod
    def _known_sort(cls, value: str | None) -> str | None:
        if value is not None and value not in {"score", "recent", "name"}:
            raise ValueError(f"unknown sort key {value!r}")
        return value


class SelectionSection(BaseModel):
    max_selected: int | None = Field(default=None, ge=2, le=4)
    min_selected: int | None = Field(default=None, ge=2, le=4)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _ordered_bounds(self) -> "SelectionSection":
        low = self.min_selected if self.min_selected is not None else 2
        high = self.max_selected if self.max_selected is not None else 4
        if low > high:
            raise ValueError("min_selected must not exceed max_selected")
        return self


class AppConfig(BaseModel):
    deriver: DeriverSection = Field(default_factory=DeriverSection)
    ranking: RankingSection = Field(default_factory=RankingSection)
    selection: SelectionSection = Field(default_factory=SelectionSection)

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        for section in ("deriver", "ranking", "selection"):
            values = getattr(self, section).model_dump(exclude_none=True)
            if values:
                settings[section] = values
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
