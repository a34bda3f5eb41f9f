"""
AttendanceRecord model: one reconciled row per employee and local day.

Rows are upserted by the processing run and mutated in place by the
manual Friday compensatory-leave toggle.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    Integer,
    String,
    UniqueConstraint,
)

from reconciler.db.base import Base


class AttendanceRecord(Base):
    __tablename__ = "attendance_records"
    __table_args__ = (
        UniqueConstraint("employee_code", "date", name="uq_attendance_emp_date"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_code: str = Column(String(64), nullable=False, index=True)  # type: ignore[assignment]
    date: str = Column(String(10), nullable=False, index=True)  # type: ignore[assignment]  # YYYY-MM-DD
    check_in: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    check_out: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    total_hours: float = Column(Float, nullable=False, default=0.0)  # type: ignore[assignment]
    overtime_hours: float = Column(Float, nullable=False, default=0.0)  # type: ignore[assignment]
    status: str = Column(String(20), nullable=False)  # type: ignore[assignment]
    # Present | Absent | Late | Excused
    penalties: list = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]
    is_overnight: bool = Column(Boolean, nullable=False, default=False)  # type: ignore[assignment]
    friday_comp_leave: bool = Column(Boolean, nullable=False, default=False)  # type: ignore[assignment]
    friday_comp_leave_manual: bool = Column(Boolean, nullable=False, default=False)  # type: ignore[assignment]
    friday_comp_leave_note: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    friday_comp_leave_updated_by: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
