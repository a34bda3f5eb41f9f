"""String enums shared by models, schemas and the engine."""

from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"
    EXCUSED = "Excused"


class RuleType(str, Enum):
    ATTENDANCE_EXEMPT = "attendance_exempt"
    CUSTOM_SHIFT = "custom_shift"
    OVERTIME_OVERNIGHT = "overtime_overnight"
    # Friday policy evidence
    OFFICIAL_HOLIDAY = "official_holiday"
    WEEKLY_REST = "weekly_rest"


class AdjustmentType(str, Enum):
    ANNUAL = "annual"
    SICK = "sick"
    UNPAID = "unpaid"
    MISSION = "mission"
    PERMISSION = "permission"


LEAVE_ADJUSTMENT_TYPES = frozenset(
    {AdjustmentType.ANNUAL.value, AdjustmentType.SICK.value, AdjustmentType.UNPAID.value}
)


class PenaltyType(str, Enum):
    ABSENCE = "absence"
    LATE = "late"
