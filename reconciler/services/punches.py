"""
Punch aggregation: groups raw punches by employee and local day.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import NamedTuple, Optional

from reconciler.models.employee import BiometricPunch
from reconciler.utils.timeutils import ensure_utc, local_date


class EmployeeDay(NamedTuple):
    employee_code: str
    day: date


@dataclass(frozen=True)
class DayPunches:
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    count: int = 0

    @classmethod
    def from_instants(cls, instants: Sequence[datetime]) -> "DayPunches":
        """First punch is the check-in; the last one is the check-out when there are two or more."""
        if not instants:
            return cls()
        ordered = sorted(instants)
        return cls(
            check_in=ordered[0],
            check_out=ordered[-1] if len(ordered) > 1 else None,
            count=len(ordered),
        )


NO_PUNCHES = DayPunches()


def group_punches(
    punches: Iterable[BiometricPunch], offset_minutes: int
) -> dict[EmployeeDay, DayPunches]:
    by_day: dict[EmployeeDay, list[datetime]] = defaultdict(list)
    for punch in punches:
        instant = ensure_utc(punch.punch_datetime)
        by_day[EmployeeDay(punch.employee_code, local_date(instant, offset_minutes))].append(instant)

    return {key: DayPunches.from_instants(instants) for key, instants in by_day.items()}
