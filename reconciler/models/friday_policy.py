"""
Friday policy settings model: singleton table for the credit rules.

Only one row should ever exist. It is loaded once per operation and handed
to the policy engine as an explicit configuration object.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer

from reconciler.db.base import Base


class FridayPolicySettings(Base):
    __tablename__ = "friday_policy_settings"

    id: int = Column(Integer, primary_key=True, default=1)  # type: ignore[assignment]
    included_sectors: list = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]
    monthly_minimum_fridays_required: int = Column(Integer, nullable=False, default=2)  # type: ignore[assignment]
    max_credit_per_month: int = Column(Integer, nullable=False, default=3)  # type: ignore[assignment]
    credit_baseline: int = Column(Integer, nullable=False, default=0)  # type: ignore[assignment]
    allowed_off_days_next_month: list = Column(  # type: ignore[assignment]
        JSON, nullable=False, default=lambda: [1, 2, 3]
    )
    count_biometric_as_worked_friday: bool = Column(Boolean, nullable=False, default=True)  # type: ignore[assignment]
    count_mission_as_worked_friday: bool = Column(Boolean, nullable=False, default=True)  # type: ignore[assignment]
    count_permission_only_as_worked_friday: bool = Column(Boolean, nullable=False, default=False)  # type: ignore[assignment]
    count_leave_as_worked_friday: bool = Column(Boolean, nullable=False, default=False)  # type: ignore[assignment]
    official_holiday_friday_counts: bool = Column(Boolean, nullable=False, default=False)  # type: ignore[assignment]
    weekly_rest_friday_counts: bool = Column(Boolean, nullable=False, default=False)  # type: ignore[assignment]
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
