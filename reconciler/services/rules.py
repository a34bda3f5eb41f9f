"""
Special-rule resolution for one employee on one local day.

Every matching rule contributes its flags; only the highest-priority
``custom_shift`` rule contributes shift times.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date

from reconciler.core.enums import RuleType
from reconciler.models.employee import Employee
from reconciler.models.rules import SpecialRule
from reconciler.utils.timeutils import parse_date

# scope prefix -> Employee attribute it is compared with
_SCOPE_ATTRIBUTES = {
    "dept": "department",
    "sector": "sector",
    "emp": "code",
}


@dataclass(frozen=True)
class Shift:
    start: str  # HH:MM
    end: str  # HH:MM


@dataclass(frozen=True)
class RuleResolution:
    rules: tuple[SpecialRule, ...]
    shift: Shift

    def has(self, rule_type: RuleType | str) -> bool:
        wanted = RuleType(rule_type).value
        return any(r.rule_type == wanted for r in self.rules)

    @property
    def is_exempt(self) -> bool:
        return self.has(RuleType.ATTENDANCE_EXEMPT)

    @property
    def is_overnight(self) -> bool:
        return self.has(RuleType.OVERTIME_OVERNIGHT)


def scope_matches(scope: str | None, employee: Employee) -> bool:
    scope = (scope or "").strip()
    if scope == "all":
        return True
    kind, sep, value = scope.partition(":")
    attribute = _SCOPE_ATTRIBUTES.get(kind)
    if not sep or attribute is None:
        return False
    return getattr(employee, attribute) == value


def covers(rule: SpecialRule, day: date) -> bool:
    return parse_date(rule.start_date) <= day <= parse_date(rule.end_date)


def active_rules(rules: Iterable[SpecialRule], employee: Employee, day: date) -> list[SpecialRule]:
    """Rules applying to the employee on the day, highest priority first."""
    matching = [r for r in rules if covers(r, day) and scope_matches(r.scope, employee)]
    # sorted() is stable, so equal priorities keep their stored order
    return sorted(matching, key=lambda r: r.priority or 0, reverse=True)


def resolve_rules(
    rules: Sequence[SpecialRule],
    employee: Employee,
    day: date,
    *,
    default_start: str,
    default_end: str,
) -> RuleResolution:
    matched = active_rules(rules, employee, day)

    start = employee.shift_start or default_start
    end = default_end
    shift_rule = next((r for r in matched if r.rule_type == RuleType.CUSTOM_SHIFT.value), None)
    if shift_rule is not None:
        params = shift_rule.params or {}
        start = params.get("shiftStart") or start
        end = params.get("shiftEnd") or end

    return RuleResolution(rules=tuple(matched), shift=Shift(start=start, end=end))
