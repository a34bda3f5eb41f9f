"""Tests for the per-day attendance state machine."""

from datetime import date, datetime, timedelta, timezone

import pytest

from reconciler.models.attendance import AttendanceRecord
from reconciler.models.employee import Employee
from reconciler.models.rules import Adjustment, SpecialRule
from reconciler.services.evaluator import DayPolicy, evaluate_day
from reconciler.services.punches import DayPunches
from reconciler.services.rules import resolve_rules

MONDAY = date(2024, 3, 4)
FRIDAY = date(2024, 3, 1)
POLICY = DayPolicy(collection_sector="collection")


def _employee(sector="operations", shift_start="09:00") -> Employee:
    return Employee(code="E1", name="Karim", department="Field", sector=sector, shift_start=shift_start)


def _at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


def _evaluate(day=MONDAY, employee=None, rules=(), adjustment=None, punches=(), existing=None, offset=0):
    employee = employee or _employee()
    return evaluate_day(
        employee=employee,
        day=day,
        resolution=resolve_rules(list(rules), employee, day, default_start="09:00", default_end="17:00"),
        adjustment=adjustment,
        punches=DayPunches.from_instants(list(punches)),
        existing=existing,
        policy=POLICY,
        offset_minutes=offset,
    )


def test_present_day_with_overtime():
    result = _evaluate(punches=[_at(MONDAY, 9, 5), _at(MONDAY, 17, 30)])
    assert result.status == "Present"
    assert result.penalties == []
    assert result.total_hours == pytest.approx(8.42)
    assert result.overtime_hours == pytest.approx(0.42)


def test_no_punches_is_absent_with_penalty():
    result = _evaluate()
    assert result.status == "Absent"
    assert result.penalties == [{"type": "absence", "value": 1, "extra": {}}]
    assert result.total_hours == 0
    assert result.overtime_hours == 0


def test_single_punch_has_zero_hours():
    result = _evaluate(punches=[_at(MONDAY, 9, 0)])
    assert result.status == "Present"
    assert result.check_out is None
    assert result.total_hours == 0


@pytest.mark.parametrize(
    "minutes_late,status,value",
    [(15, "Present", None), (16, "Late", 0.25), (30, "Late", 0.25), (31, "Late", 0.5),
     (60, "Late", 0.5), (61, "Late", 1.0)],
)
def test_lateness_tiers(minutes_late, status, value):
    check_in = _at(MONDAY, 9) + timedelta(minutes=minutes_late)
    result = _evaluate(punches=[check_in, _at(MONDAY, 17)])
    assert result.status == status
    if value is None:
        assert result.penalties == []
    else:
        assert result.penalties == [{"type": "late", "value": value, "extra": {"minutes": minutes_late}}]


def test_lateness_uses_offset_adjusted_shift_start():
    # 09:10 local at UTC+02:00 is 07:10 UTC
    result = _evaluate(punches=[_at(MONDAY, 7, 10), _at(MONDAY, 15, 0)], offset=-120)
    assert result.status == "Present"


def test_custom_shift_rule_moves_the_start():
    rules = [
        SpecialRule(name="early", rule_type="custom_shift", scope="all", priority=5,
                    params={"shiftStart": "07:00"}, start_date="2024-03-01", end_date="2024-03-31"),
        SpecialRule(name="late", rule_type="custom_shift", scope="all", priority=10,
                    params={"shiftStart": "10:00"}, start_date="2024-03-01", end_date="2024-03-31"),
    ]
    result = _evaluate(rules=rules, punches=[_at(MONDAY, 10, 10), _at(MONDAY, 18)])
    assert result.status == "Present"


def test_collection_sector_friday_is_excused():
    result = _evaluate(day=FRIDAY, employee=_employee(sector="collection"))
    assert result.friday_comp_leave is True
    assert result.friday_comp_leave_manual is False
    assert result.status == "Excused"
    assert result.penalties == []


def test_other_sector_friday_is_not_comp_leave():
    result = _evaluate(day=FRIDAY)
    assert result.friday_comp_leave is False
    assert result.status == "Absent"


def test_manual_override_is_preserved():
    existing = AttendanceRecord(
        employee_code="E1",
        date=FRIDAY.isoformat(),
        status="Absent",
        friday_comp_leave=False,
        friday_comp_leave_manual=True,
        friday_comp_leave_note="worked this Friday",
        friday_comp_leave_updated_by="hr.admin",
    )
    result = _evaluate(day=FRIDAY, employee=_employee(sector="collection"), existing=existing)
    assert result.friday_comp_leave is False
    assert result.friday_comp_leave_manual is True
    assert result.status == "Absent"
    assert result.friday_comp_leave_note == "worked this Friday"
    assert result.friday_comp_leave_updated_by == "hr.admin"


def test_manual_enable_on_a_weekday_is_preserved():
    existing = AttendanceRecord(
        employee_code="E1", date=MONDAY.isoformat(), status="Excused",
        friday_comp_leave=True, friday_comp_leave_manual=True,
    )
    result = _evaluate(existing=existing, punches=[_at(MONDAY, 11), _at(MONDAY, 17)])
    assert result.friday_comp_leave is True
    assert result.status == "Excused"
    assert result.penalties == []


def test_adjustment_excuses_the_day():
    adj = Adjustment(employee_code="E1", type="sick", start_date="2024-03-04", end_date="2024-03-04")
    result = _evaluate(adjustment=adj, punches=[_at(MONDAY, 11)])
    assert result.status == "Excused"
    assert result.penalties == []


def test_exempt_rule_excuses_the_day():
    rule = SpecialRule(name="exempt", rule_type="attendance_exempt", scope="emp:E1", priority=0,
                       params={}, start_date="2024-03-01", end_date="2024-03-31")
    result = _evaluate(rules=[rule])
    assert result.status == "Excused"
    assert result.penalties == []


def test_overnight_flag_is_carried():
    rule = SpecialRule(name="night", rule_type="overtime_overnight", scope="all", priority=0,
                       params={}, start_date="2024-03-01", end_date="2024-03-31")
    result = _evaluate(rules=[rule], punches=[_at(MONDAY, 9), _at(MONDAY, 20)])
    assert result.is_overnight is True
    assert result.overtime_hours == pytest.approx(3.0)


def test_record_fields_cover_the_upsert():
    fields = _evaluate().as_record_fields()
    assert fields["employee_code"] == "E1"
    assert fields["date"] == "2024-03-04"
    assert set(fields) >= {"status", "penalties", "check_in", "check_out", "friday_comp_leave_manual"}
