"""Pydantic schemas for special rules and adjustments."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from reconciler.core.enums import AdjustmentType, RuleType
from reconciler.utils.timeutils import normalize_hhmm, parse_date

_SCOPE_PREFIXES = ("dept:", "sector:", "emp:")
_SHIFT_PARAMS = ("shiftStart", "shiftEnd")


def _check_date(v: str) -> str:
    try:
        return parse_date(v).isoformat()
    except ValueError as exc:
        raise ValueError("Date must be YYYY-MM-DD") from exc


class _DateRange(BaseModel):
    start_date: str
    end_date: str

    @field_validator("start_date", "end_date")
    @classmethod
    def _date(cls, v: str) -> str:
        return _check_date(v)

    @model_validator(mode="after")
    def _ordered(self):
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


# ── Special rules ──────────────────────────────────────────────────
class SpecialRuleCreate(_DateRange):
    name: str
    rule_type: RuleType
    scope: str = "all"
    priority: int = 0
    params: dict[str, Any] = Field(default_factory=dict)

    @field_validator("scope")
    @classmethod
    def _scope(cls, v: str) -> str:
        v = v.strip()
        if v == "all":
            return v
        if not v.startswith(_SCOPE_PREFIXES) or not v.partition(":")[2]:
            raise ValueError("Scope must be 'all', 'dept:<X>', 'sector:<X>' or 'emp:<code>'")
        return v

    @model_validator(mode="after")
    def _shift_params(self):
        if self.rule_type != RuleType.CUSTOM_SHIFT:
            return self
        for key in _SHIFT_PARAMS:
            if self.params.get(key) is None:
                continue
            try:
                self.params[key] = normalize_hhmm(self.params[key])
            except ValueError as exc:
                raise ValueError(f"params.{key} must be HH:MM") from exc
        return self


class SpecialRuleRead(BaseModel):
    id: int
    name: str
    rule_type: str
    scope: str
    start_date: str
    end_date: str
    priority: int | None
    params: dict[str, Any]

    model_config = {"from_attributes": True}


# ── Adjustments ────────────────────────────────────────────────────
class AdjustmentCreate(_DateRange):
    employee_code: str
    type: AdjustmentType
    notes: str | None = None


class AdjustmentRead(BaseModel):
    id: int
    employee_code: str
    type: str
    start_date: str
    end_date: str
    notes: str | None
    created_at: datetime | None

    model_config = {"from_attributes": True}


class DeleteResponse(BaseModel):
    success: bool
    message: str
