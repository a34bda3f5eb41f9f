"""
Friday compensatory-leave policy.

Employees of the included sectors earn credit by working Fridays of the
previous month and spend it on the allowed off-days at the start of the
report month. Usage beyond the credit becomes a deduction. The report is
read-only; ``toggle_friday_comp_leave`` is the one targeted mutation.
"""

from __future__ import annotations

import calendar
import logging
import re
from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from typing import Optional

from reconciler.core.enums import (
    LEAVE_ADJUSTMENT_TYPES,
    AdjustmentType,
    AttendanceStatus,
    RuleType,
)
from reconciler.core.exceptions import NotFoundError, ValidationError
from reconciler.db.storage import AttendanceStorage
from reconciler.models.attendance import AttendanceRecord
from reconciler.models.employee import Employee
from reconciler.models.rules import Adjustment, SpecialRule
from reconciler.schemas.friday_policy import (
    EmployeeFridayPolicy,
    FridayDetail,
    FridayPolicyConfig,
    FridayPolicyReport,
    UsageDetail,
)
from reconciler.services.adjustments import AdjustmentMatcher
from reconciler.services.evaluator import FRIDAY, absence_penalty
from reconciler.services.punches import EmployeeDay
from reconciler.services.rules import active_rules

logger = logging.getLogger(__name__)

_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")


# ── Settings ───────────────────────────────────────────────────────
async def get_settings(storage: AttendanceStorage) -> FridayPolicyConfig:
    return await storage.get_friday_policy_settings()


async def update_settings(storage: AttendanceStorage, payload: dict) -> FridayPolicyConfig:
    """Replace the whole configuration; missing or invalid values take defaults."""
    config = FridayPolicyConfig.model_validate(payload)
    saved = await storage.save_friday_policy_settings(config)
    logger.info("Friday policy settings updated: %s", saved.model_dump())
    return saved


# ── Calendar helpers ───────────────────────────────────────────────
def parse_month(month: str) -> date:
    """First day of a ``YYYY-MM`` month."""
    match = _MONTH_RE.match((month or "").strip())
    if not match or not 1 <= int(match.group(2)) <= 12:
        raise ValidationError(f"Invalid month '{month}', expected YYYY-MM")
    return date(int(match.group(1)), int(match.group(2)), 1)


def month_end(first: date) -> date:
    _, days_in_month = calendar.monthrange(first.year, first.month)
    return first.replace(day=days_in_month)


def previous_month(first: date) -> date:
    return (first - timedelta(days=1)).replace(day=1)


def fridays_of_month(first: date) -> list[date]:
    offset = (FRIDAY - first.weekday()) % 7
    current = first + timedelta(days=offset)
    last = month_end(first)
    fridays = []
    while current <= last:
        fridays.append(current)
        current += timedelta(days=7)
    return fridays


# ── Eligibility ────────────────────────────────────────────────────
def compute_credit(eligible_worked_fridays: int, config: FridayPolicyConfig) -> int:
    earned = eligible_worked_fridays - config.monthly_minimum_fridays_required + config.credit_baseline
    return min(config.max_credit_per_month, max(0, earned))


def friday_worked_reason(
    record: Optional[AttendanceRecord],
    adjustment: Optional[Adjustment],
    rules: Sequence[SpecialRule],
    config: FridayPolicyConfig,
) -> Optional[str]:
    """Name the first enabled piece of evidence that the Friday was worked."""
    adj_type = adjustment.type if adjustment is not None else None
    rule_types = {r.rule_type for r in rules}

    if config.count_biometric_as_worked_friday and record is not None and record.check_in is not None:
        return "biometric_punch"
    if config.count_mission_as_worked_friday and adj_type == AdjustmentType.MISSION.value:
        return "mission"
    if config.count_permission_only_as_worked_friday and adj_type == AdjustmentType.PERMISSION.value:
        return "permission"
    if config.count_leave_as_worked_friday and adj_type in LEAVE_ADJUSTMENT_TYPES:
        return f"leave:{adj_type}"
    if config.official_holiday_friday_counts and RuleType.OFFICIAL_HOLIDAY.value in rule_types:
        return "official_holiday"
    if config.weekly_rest_friday_counts and RuleType.WEEKLY_REST.value in rule_types:
        return "weekly_rest"
    return None


def usage_reason(record: Optional[AttendanceRecord]) -> Optional[str]:
    """Why an allowed off-day consumed credit, or None when it did not.

    Only days carrying Friday compensatory leave draw on the credit; a plain
    absence is handled by the absence penalty instead.
    """
    if record is not None and record.friday_comp_leave:
        return "friday_comp_leave"
    return None


def build_report(
    month: str,
    *,
    employees: Iterable[Employee],
    records: Iterable[AttendanceRecord],
    adjustments: Iterable[Adjustment],
    rules: Sequence[SpecialRule],
    config: FridayPolicyConfig,
) -> FridayPolicyReport:
    current_first = parse_month(month)
    current_last = month_end(current_first)
    prior_first = previous_month(current_first)
    prior_fridays = fridays_of_month(prior_first)
    off_days = [
        current_first.replace(day=d)
        for d in config.allowed_off_days_next_month
        if d <= current_last.day
    ]

    by_key: dict[EmployeeDay, AttendanceRecord] = {
        EmployeeDay(r.employee_code, date.fromisoformat(r.date)): r for r in records
    }
    matcher = AdjustmentMatcher(adjustments)
    included = set(config.included_sectors)

    rows: list[EmployeeFridayPolicy] = []
    for emp in employees:
        if emp.sector not in included:
            continue

        friday_details: list[FridayDetail] = []
        eligible = 0
        for friday in prior_fridays:
            reason = friday_worked_reason(
                by_key.get(EmployeeDay(emp.code, friday)),
                matcher.find(emp.code, friday),
                active_rules(rules, emp, friday),
                config,
            )
            if reason is not None:
                eligible += 1
            friday_details.append(
                FridayDetail(date=friday.isoformat(), counted=reason is not None, reason=reason or "not_worked")
            )

        credit = compute_credit(eligible, config)

        usage_details: list[UsageDetail] = []
        for day in off_days:
            reason = usage_reason(by_key.get(EmployeeDay(emp.code, day)))
            if reason is None:
                continue
            action = "credit_used" if len(usage_details) < credit else "deducted"
            usage_details.append(UsageDetail(date=day.isoformat(), action=action, reason=reason))

        used = len(usage_details)
        rows.append(
            EmployeeFridayPolicy(
                employee_code=emp.code,
                employee_name=emp.name,
                sector=emp.sector,
                department=emp.department,
                eligible_worked_fridays=eligible,
                credit_granted=credit,
                used_days_count=used,
                remaining_credit=max(0, credit - used),
                total_friday_policy_deduction_days=max(0, used - credit),
                friday_details=friday_details,
                usage_details=usage_details,
            )
        )

    return FridayPolicyReport(
        month=current_first.strftime("%Y-%m"),
        previous_month=prior_first.strftime("%Y-%m"),
        records=rows,
    )


async def build_friday_report(storage: AttendanceStorage, month: str) -> FridayPolicyReport:
    current_first = parse_month(month)
    config = await storage.get_friday_policy_settings()
    records = await storage.get_attendance_by_range(
        previous_month(current_first).isoformat(), month_end(current_first).isoformat()
    )
    return build_report(
        month,
        employees=await storage.get_employees(),
        records=records,
        adjustments=await storage.get_adjustments(),
        rules=await storage.get_rules(),
        config=config,
    )


# ── Manual toggle ──────────────────────────────────────────────────
def toggle_changes(
    record: AttendanceRecord,
    enabled: bool,
    note: Optional[str] = None,
    updated_by: Optional[str] = None,
) -> dict:
    """Field changes for a manual toggle; applying them twice changes nothing."""
    if enabled:
        status = AttendanceStatus.EXCUSED.value
        penalties: list = []
    elif record.status == AttendanceStatus.EXCUSED.value:
        if record.check_in is not None:
            status = AttendanceStatus.PRESENT.value
            penalties = []
        else:
            status = AttendanceStatus.ABSENT.value
            penalties = [absence_penalty()]
    else:
        status = record.status
        penalties = list(record.penalties or [])

    return {
        "friday_comp_leave": enabled,
        "friday_comp_leave_manual": True,
        "friday_comp_leave_note": note if note is not None else record.friday_comp_leave_note,
        "friday_comp_leave_updated_by": (
            updated_by if updated_by is not None else record.friday_comp_leave_updated_by
        ),
        "status": status,
        "penalties": penalties,
    }


async def toggle_friday_comp_leave(
    storage: AttendanceStorage,
    record_id: int,
    enabled: bool,
    note: Optional[str] = None,
    updated_by: Optional[str] = None,
) -> AttendanceRecord:
    record = await storage.get_attendance_record(record_id)
    if record is None:
        raise NotFoundError("Attendance record not found")

    updated = await storage.update_attendance_record(
        record_id, toggle_changes(record, enabled, note, updated_by)
    )
    logger.info(
        "Friday comp leave %s for %s on %s (by %s)",
        "enabled" if enabled else "disabled",
        updated.employee_code,
        updated.date,
        updated_by or "-",
    )
    return updated
