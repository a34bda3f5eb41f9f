"""Pydantic schemas for attendance records and processing runs."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

from reconciler.utils.timeutils import parse_offset_minutes


# ── Processing ─────────────────────────────────────────────────────
class ProcessAttendanceRequest(BaseModel):
    start_date: str
    end_date: str
    timezone_offset_minutes: int = 0

    @field_validator("timezone_offset_minutes", mode="before")
    @classmethod
    def _offset(cls, v: object) -> int:
        return parse_offset_minutes(v)


class ProcessAttendanceResponse(BaseModel):
    message: str = "Processing completed"
    processed_count: int


# ── Records ────────────────────────────────────────────────────────
class Penalty(BaseModel):
    type: str
    value: float
    extra: dict = {}


class AttendanceRead(BaseModel):
    id: int
    employee_code: str
    date: str
    check_in: datetime | None
    check_out: datetime | None
    total_hours: float
    overtime_hours: float
    status: str
    penalties: list[Penalty]
    is_overnight: bool
    friday_comp_leave: bool
    friday_comp_leave_manual: bool
    friday_comp_leave_note: str | None = None
    friday_comp_leave_updated_by: str | None = None

    model_config = {"from_attributes": True}


class AttendancePage(BaseModel):
    data: list[AttendanceRead]
    total: int
    page: int
    limit: int


# ── Friday compensatory leave toggle ───────────────────────────────
class FridayCompLeaveToggle(BaseModel):
    enabled: bool
    note: str | None = None
    updated_by: str | None = None

    @field_validator("note", "updated_by")
    @classmethod
    def _trim(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if len(v) > 500:
            raise ValueError("Must not exceed 500 characters")
        return v or None
