"""
Attendance day evaluation: the per-employee, per-day state machine.

``evaluate_day`` is pure: everything it needs (rules, adjustment, punches,
the latest stored record and the policy constants) is handed in, and it
returns the field values to upsert.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional

from reconciler.core.config import Settings
from reconciler.core.enums import AttendanceStatus, PenaltyType
from reconciler.models.attendance import AttendanceRecord
from reconciler.models.employee import Employee
from reconciler.models.rules import Adjustment
from reconciler.services.punches import DayPunches
from reconciler.services.rules import RuleResolution
from reconciler.utils.timeutils import local_time_to_utc

FRIDAY = 4  # date.weekday()


@dataclass(frozen=True)
class DayPolicy:
    collection_sector: str = "collection"
    default_shift_start: str = "09:00"
    default_shift_end: str = "17:00"
    grace_minutes: int = 15
    standard_hours: float = 8.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "DayPolicy":
        return cls(
            collection_sector=settings.COLLECTION_SECTOR,
            default_shift_start=settings.DEFAULT_SHIFT_START,
            default_shift_end=settings.DEFAULT_SHIFT_END,
            grace_minutes=settings.LATE_GRACE_MINUTES,
            standard_hours=settings.STANDARD_WORK_HOURS,
        )


@dataclass(frozen=True)
class DayEvaluation:
    employee_code: str
    date: str
    status: str
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    total_hours: float = 0.0
    overtime_hours: float = 0.0
    penalties: list[dict] = field(default_factory=list)
    is_overnight: bool = False
    friday_comp_leave: bool = False
    friday_comp_leave_manual: bool = False
    friday_comp_leave_note: Optional[str] = None
    friday_comp_leave_updated_by: Optional[str] = None

    def as_record_fields(self) -> dict:
        return asdict(self)


def absence_penalty() -> dict:
    return {"type": PenaltyType.ABSENCE.value, "value": 1, "extra": {}}


def late_minutes(diff: timedelta) -> int:
    """Whole minutes late, rounded up."""
    return max(0, math.ceil(diff.total_seconds() / 60))


def lateness_penalty_value(minutes: int) -> float:
    if minutes > 60:
        return 1.0
    if minutes > 30:
        return 0.5
    return 0.25


def worked_hours(check_in: Optional[datetime], check_out: Optional[datetime]) -> float:
    if check_in is None or check_out is None:
        return 0.0
    return round(max(0.0, (check_out - check_in).total_seconds() / 3600), 2)


def resolve_friday_comp_leave(
    employee: Employee,
    day: date,
    existing: Optional[AttendanceRecord],
    policy: DayPolicy,
) -> bool:
    """A manual override wins until toggled again; otherwise collection-sector Fridays are excused."""
    if existing is not None and existing.friday_comp_leave_manual:
        return bool(existing.friday_comp_leave)
    return day.weekday() == FRIDAY and (employee.sector or "") == policy.collection_sector


def evaluate_day(
    *,
    employee: Employee,
    day: date,
    resolution: RuleResolution,
    adjustment: Optional[Adjustment],
    punches: DayPunches,
    existing: Optional[AttendanceRecord],
    policy: DayPolicy,
    offset_minutes: int = 0,
) -> DayEvaluation:
    friday_comp_leave = resolve_friday_comp_leave(employee, day, existing, policy)
    total_hours = worked_hours(punches.check_in, punches.check_out)
    overtime_hours = round(max(0.0, total_hours - policy.standard_hours), 2)

    penalties: list[dict] = []
    if friday_comp_leave or adjustment is not None or resolution.is_exempt:
        status = AttendanceStatus.EXCUSED
    elif punches.check_in is None:
        status = AttendanceStatus.ABSENT
        penalties.append(absence_penalty())
    else:
        shift_start = local_time_to_utc(day, resolution.shift.start, offset_minutes)
        diff = punches.check_in - shift_start
        if diff > timedelta(minutes=policy.grace_minutes):
            status = AttendanceStatus.LATE
            minutes = late_minutes(diff)
            penalties.append(
                {
                    "type": PenaltyType.LATE.value,
                    "value": lateness_penalty_value(minutes),
                    "extra": {"minutes": minutes},
                }
            )
        else:
            status = AttendanceStatus.PRESENT

    return DayEvaluation(
        employee_code=employee.code,
        date=day.isoformat(),
        status=status.value,
        check_in=punches.check_in,
        check_out=punches.check_out,
        total_hours=total_hours,
        overtime_hours=overtime_hours,
        penalties=penalties,
        is_overnight=resolution.is_overnight,
        friday_comp_leave=friday_comp_leave,
        friday_comp_leave_manual=bool(existing and existing.friday_comp_leave_manual),
        friday_comp_leave_note=existing.friday_comp_leave_note if existing else None,
        friday_comp_leave_updated_by=existing.friday_comp_leave_updated_by if existing else None,
    )
