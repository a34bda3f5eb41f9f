"""
SpecialRule & Adjustment models: schedule overrides and approved absences.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String

from reconciler.db.base import Base


class SpecialRule(Base):
    __tablename__ = "special_rules"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    rule_type: str = Column(String(40), nullable=False)  # type: ignore[assignment]
    # all | dept:<X> | sector:<X> | emp:<code>
    scope: str = Column(String(200), nullable=False, default="all")  # type: ignore[assignment]
    start_date: str = Column(String(10), nullable=False)  # type: ignore[assignment]  # YYYY-MM-DD
    end_date: str = Column(String(10), nullable=False)  # type: ignore[assignment]  # YYYY-MM-DD
    priority: int | None = Column(Integer, nullable=True, default=0)  # type: ignore[assignment]
    params: dict = Column(JSON, nullable=False, default=dict)  # type: ignore[assignment]


class Adjustment(Base):
    __tablename__ = "adjustments"
    __table_args__ = (Index("ix_adjustment_employee_start", "employee_code", "start_date"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_code: str = Column(String(64), nullable=False)  # type: ignore[assignment]
    type: str = Column(String(20), nullable=False)  # type: ignore[assignment]
    # annual | sick | unpaid | mission | permission
    start_date: str = Column(String(10), nullable=False)  # type: ignore[assignment]
    end_date: str = Column(String(10), nullable=False)  # type: ignore[assignment]
    notes: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
