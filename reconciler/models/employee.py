"""
Employee & BiometricPunch models: the raw inputs of reconciliation.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, Integer, String

from reconciler.db.base import Base


class Employee(Base):
    __tablename__ = "employees"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    code: str = Column(String(64), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    department: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    sector: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    branch: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    shift_start: str = Column(String(5), nullable=False, default="09:00")  # type: ignore[assignment]  # HH:MM
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )


class BiometricPunch(Base):
    __tablename__ = "biometric_punches"
    __table_args__ = (Index("ix_punch_employee_datetime", "employee_code", "punch_datetime"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_code: str = Column(String(64), nullable=False)  # type: ignore[assignment]
    # Absolute UTC instant; wall-clock readings are converted at import time
    punch_datetime: datetime = Column(DateTime(timezone=True), nullable=False, index=True)  # type: ignore[assignment]
