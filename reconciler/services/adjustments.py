"""
Adjustment lookup: the approved leave / mission covering an employee's day.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import date
from typing import Optional

from reconciler.models.rules import Adjustment
from reconciler.utils.timeutils import parse_date


class AdjustmentMatcher:
    """Index adjustments per employee, keeping insertion order.

    Overlapping adjustments are not ranked: the first one stored wins.
    """

    def __init__(self, adjustments: Iterable[Adjustment]):
        self._by_employee: dict[str, list[tuple[date, date, Adjustment]]] = defaultdict(list)
        for adj in adjustments:
            self._by_employee[adj.employee_code].append(
                (parse_date(adj.start_date), parse_date(adj.end_date), adj)
            )

    def find(self, employee_code: str, day: date) -> Optional[Adjustment]:
        for start, end, adj in self._by_employee.get(employee_code, ()):
            if start <= day <= end:
                return adj
        return None
