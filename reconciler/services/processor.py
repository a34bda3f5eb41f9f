"""
Attendance processing run: evaluates every employee x local day in a range.

Reference data (employees, rules, adjustments, punches) is fetched once;
the stored record of each day is re-read right before it is evaluated so a
manual Friday toggle applied meanwhile is respected.
"""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from reconciler.core.exceptions import ProcessingError, ValidationError
from reconciler.db.storage import AttendanceStorage
from reconciler.services.adjustments import AdjustmentMatcher
from reconciler.services.evaluator import DayPolicy, evaluate_day
from reconciler.services.punches import NO_PUNCHES, EmployeeDay, group_punches
from reconciler.services.rules import resolve_rules
from reconciler.utils.timeutils import iter_days, parse_date, utc_window

logger = logging.getLogger(__name__)


def parse_range(start_date: object, end_date: object) -> tuple[date, date]:
    try:
        start = parse_date(start_date)  # type: ignore[arg-type]
        end = parse_date(end_date)  # type: ignore[arg-type]
    except ValueError as exc:
        raise ValidationError(f"Invalid date range: {exc}") from exc
    if start > end:
        raise ValidationError("start_date must not be after end_date")
    return start, end


async def process_attendance(
    storage: AttendanceStorage,
    *,
    start_date: object,
    end_date: object,
    offset_minutes: int,
    policy: DayPolicy,
) -> int:
    """Upsert one attendance record per employee and day; return how many were written."""
    start, end = parse_range(start_date, end_date)
    logger.info("Processing attendance %s..%s (offset %d min)", start, end, offset_minutes)

    processed = 0
    try:
        employees = await storage.get_employees()
        rules = await storage.get_rules()
        matcher = AdjustmentMatcher(await storage.get_adjustments())
        punches = group_punches(
            await storage.get_punches(*utc_window(start, end, offset_minutes)),
            offset_minutes,
        )

        for employee in employees:
            for day in iter_days(start, end):
                resolution = resolve_rules(
                    rules,
                    employee,
                    day,
                    default_start=policy.default_shift_start,
                    default_end=policy.default_shift_end,
                )
                existing = await storage.get_attendance_for_day(employee.code, day)
                evaluation = evaluate_day(
                    employee=employee,
                    day=day,
                    resolution=resolution,
                    adjustment=matcher.find(employee.code, day),
                    punches=punches.get(EmployeeDay(employee.code, day), NO_PUNCHES),
                    existing=existing,
                    policy=policy,
                    offset_minutes=offset_minutes,
                )
                await storage.upsert_attendance_record(evaluation.as_record_fields())
                processed += 1
    except (SQLAlchemyError, ValueError) as exc:
        logger.error("Processing aborted after %d records", processed, exc_info=True)
        raise ProcessingError(str(exc), processed_count=processed) from exc

    logger.info("Processed %d attendance records", processed)
    return processed
