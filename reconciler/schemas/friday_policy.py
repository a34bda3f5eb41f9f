"""Pydantic schemas for the Friday compensatory-leave policy."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

DEFAULT_MINIMUM_FRIDAYS = 2
DEFAULT_MAX_CREDIT = 3
DEFAULT_OFF_DAYS = [1, 2, 3]

_TRUE_STRINGS = {"1", "true", "yes", "on"}


# ── Settings ───────────────────────────────────────────────────────
class FridayPolicyConfig(BaseModel):
    """Explicit configuration object handed to the policy engine.

    Only type coercion is applied: a value that cannot be coerced falls
    back to the field default instead of failing the request.
    """

    included_sectors: list[str] = Field(default_factory=list)
    monthly_minimum_fridays_required: int = DEFAULT_MINIMUM_FRIDAYS
    max_credit_per_month: int = DEFAULT_MAX_CREDIT
    credit_baseline: int = 0
    allowed_off_days_next_month: list[int] = Field(default_factory=lambda: list(DEFAULT_OFF_DAYS))
    count_biometric_as_worked_friday: bool = True
    count_mission_as_worked_friday: bool = True
    count_permission_only_as_worked_friday: bool = False
    count_leave_as_worked_friday: bool = False
    official_holiday_friday_counts: bool = False
    weekly_rest_friday_counts: bool = False

    model_config = {"from_attributes": True}

    @classmethod
    def _default_for(cls, field_name: str) -> Any:
        return cls.model_fields[field_name].get_default(call_default_factory=True)

    @field_validator("included_sectors", mode="before")
    @classmethod
    def _sectors(cls, v: object) -> list[str]:
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, (list, tuple, set)):
            return []
        seen: list[str] = []
        for item in v:
            if item is None:
                continue
            name = str(item).strip()
            if name and name not in seen:
                seen.append(name)
        return seen

    @field_validator(
        "monthly_minimum_fridays_required",
        "max_credit_per_month",
        "credit_baseline",
        mode="before",
    )
    @classmethod
    def _count(cls, v: object, info: ValidationInfo) -> int:
        try:
            parsed = int(float(v))  # type: ignore[arg-type]
        except (TypeError, ValueError, OverflowError):
            return cls._default_for(info.field_name)
        if isinstance(v, bool) or parsed < 0:
            return cls._default_for(info.field_name)
        return parsed

    @field_validator("allowed_off_days_next_month", mode="before")
    @classmethod
    def _off_days(cls, v: object) -> list[int]:
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, (list, tuple, set)):
            return list(DEFAULT_OFF_DAYS)
        days: set[int] = set()
        for item in v:
            try:
                day = int(str(item).strip())
            except ValueError:
                continue
            if 1 <= day <= 31:
                days.add(day)
        return sorted(days) or list(DEFAULT_OFF_DAYS)

    @field_validator(
        "count_biometric_as_worked_friday",
        "count_mission_as_worked_friday",
        "count_permission_only_as_worked_friday",
        "count_leave_as_worked_friday",
        "official_holiday_friday_counts",
        "weekly_rest_friday_counts",
        mode="before",
    )
    @classmethod
    def _flag(cls, v: object, info: ValidationInfo) -> bool:
        if v is None:
            return cls._default_for(info.field_name)
        if isinstance(v, str):
            return v.strip().lower() in _TRUE_STRINGS
        return bool(v)


# ── Report ─────────────────────────────────────────────────────────
class FridayDetail(BaseModel):
    date: str
    counted: bool
    reason: str


class UsageDetail(BaseModel):
    date: str
    action: str  # credit_used | deducted
    reason: str


class EmployeeFridayPolicy(BaseModel):
    employee_code: str
    employee_name: str
    sector: str | None
    department: str | None
    eligible_worked_fridays: int
    credit_granted: int
    used_days_count: int
    remaining_credit: int
    total_friday_policy_deduction_days: int
    friday_details: list[FridayDetail]
    usage_details: list[UsageDetail]


class FridayPolicyReport(BaseModel):
    month: str  # YYYY-MM
    previous_month: str  # YYYY-MM
    records: list[EmployeeFridayPolicy]
