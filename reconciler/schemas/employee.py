"""Pydantic schemas for employees and the import boundary."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, field_validator

from reconciler.utils.timeutils import normalize_hhmm, parse_offset_minutes

_CODE_RE = re.compile(r"^[A-Za-z0-9._:/-]{1,64}$")


def _check_hhmm(v: str) -> str:
    try:
        return normalize_hhmm(v)
    except ValueError as exc:
        raise ValueError("Time must be HH:MM") from exc


# ── Employee ────────────────────────────────────────────────────────
class EmployeeCreate(BaseModel):
    code: str
    name: str
    department: str | None = None
    sector: str | None = None
    branch: str | None = None
    shift_start: str = "09:00"

    @field_validator("code")
    @classmethod
    def _code(cls, v: str) -> str:
        v = v.strip()
        if not _CODE_RE.match(v):
            raise ValueError("Code must be 1-64 characters without spaces")
        return v

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        if len(v) > 200:
            raise ValueError("Name must not exceed 200 characters")
        return v

    @field_validator("shift_start")
    @classmethod
    def _shift_start(cls, v: str) -> str:
        return _check_hhmm(v)


class EmployeeUpdate(BaseModel):
    name: str | None = None
    department: str | None = None
    sector: str | None = None
    branch: str | None = None
    shift_start: str | None = None

    @field_validator("shift_start")
    @classmethod
    def _shift_start(cls, v: str | None) -> str | None:
        return _check_hhmm(v) if v is not None else None


class EmployeeRead(BaseModel):
    id: int
    code: str
    name: str
    department: str | None
    sector: str | None
    branch: str | None
    shift_start: str
    created_at: datetime | None

    model_config = {"from_attributes": True}


# ── Import ─────────────────────────────────────────────────────────
class PunchImportItem(BaseModel):
    employee_code: str
    punch_datetime: str  # local YYYY-MM-DDTHH:MM:SS, or ISO with an explicit offset


class PunchImportRequest(BaseModel):
    timezone_offset_minutes: int = 0
    punches: list[PunchImportItem]

    @field_validator("timezone_offset_minutes", mode="before")
    @classmethod
    def _offset(cls, v: object) -> int:
        return parse_offset_minutes(v)


class ImportResponse(BaseModel):
    message: str
    count: int
    skipped: int = 0
