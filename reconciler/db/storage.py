"""
Storage collaborator used by the reconciliation engine.

``AttendanceStorage`` is the contract the engine codes against;
``SqlAlchemyStorage`` fulfils it over one ``AsyncSession``. Every
attendance write commits on its own, so a failing run keeps the days it
already wrote.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime
from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reconciler.models.attendance import AttendanceRecord
from reconciler.models.employee import BiometricPunch, Employee
from reconciler.models.friday_policy import FridayPolicySettings
from reconciler.models.rules import Adjustment, SpecialRule
from reconciler.schemas.friday_policy import FridayPolicyConfig


class AttendanceStorage(Protocol):
    async def get_employees(self) -> Sequence[Employee]:
        raise NotImplementedError

    async def get_rules(self) -> Sequence[SpecialRule]:
        raise NotImplementedError

    async def get_adjustments(self) -> Sequence[Adjustment]:
        raise NotImplementedError

    async def get_punches(self, utc_start: datetime, utc_end: datetime) -> Sequence[BiometricPunch]:
        raise NotImplementedError

    async def get_attendance_by_range(
        self, start_date: str, end_date: str, employee_code: Optional[str] = None
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    async def get_attendance_for_day(self, employee_code: str, day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    async def get_attendance_record(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    async def upsert_attendance_record(self, fields: dict) -> AttendanceRecord:
        """Insert or overwrite the record keyed by (employee_code, date)."""

        raise NotImplementedError

    async def update_attendance_record(self, record_id: int, changes: dict) -> AttendanceRecord:
        raise NotImplementedError

    async def get_friday_policy_settings(self) -> FridayPolicyConfig:
        raise NotImplementedError

    async def save_friday_policy_settings(self, config: FridayPolicyConfig) -> FridayPolicyConfig:
        raise NotImplementedError


class SqlAlchemyStorage:
    def __init__(self, session: AsyncSession):
        self._db = session

    # ── Reference data ──────────────────────────────────────────────
    async def get_employees(self) -> Sequence[Employee]:
        result = await self._db.execute(select(Employee).order_by(Employee.id))
        return list(result.scalars().all())

    async def get_rules(self) -> Sequence[SpecialRule]:
        result = await self._db.execute(select(SpecialRule).order_by(SpecialRule.id))
        return list(result.scalars().all())

    async def get_adjustments(self) -> Sequence[Adjustment]:
        result = await self._db.execute(select(Adjustment).order_by(Adjustment.id))
        return list(result.scalars().all())

    async def get_punches(self, utc_start: datetime, utc_end: datetime) -> Sequence[BiometricPunch]:
        result = await self._db.execute(
            select(BiometricPunch)
            .where(
                BiometricPunch.punch_datetime >= utc_start,
                BiometricPunch.punch_datetime <= utc_end,
            )
            .order_by(BiometricPunch.employee_code, BiometricPunch.punch_datetime.asc())
        )
        return list(result.scalars().all())

    # ── Attendance records ──────────────────────────────────────────
    async def get_attendance_by_range(
        self, start_date: str, end_date: str, employee_code: Optional[str] = None
    ) -> Sequence[AttendanceRecord]:
        stmt = select(AttendanceRecord).where(
            AttendanceRecord.date >= start_date, AttendanceRecord.date <= end_date
        )
        if employee_code:
            stmt = stmt.where(AttendanceRecord.employee_code == employee_code)
        result = await self._db.execute(
            stmt.order_by(AttendanceRecord.date, AttendanceRecord.employee_code)
        )
        return list(result.scalars().all())

    async def get_attendance_for_day(self, employee_code: str, day: date) -> Optional[AttendanceRecord]:
        result = await self._db.execute(
            select(AttendanceRecord)
            .where(
                AttendanceRecord.employee_code == employee_code,
                AttendanceRecord.date == day.isoformat(),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_attendance_record(self, record_id: int) -> Optional[AttendanceRecord]:
        result = await self._db.execute(
            select(AttendanceRecord)
            .where(AttendanceRecord.id == record_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def upsert_attendance_record(self, fields: dict) -> AttendanceRecord:
        # Lock the row so a concurrent manual toggle is serialised with this write
        result = await self._db.execute(
            select(AttendanceRecord)
            .where(
                AttendanceRecord.employee_code == fields["employee_code"],
                AttendanceRecord.date == fields["date"],
            )
            .with_for_update()
        )
        record = result.scalar_one_or_none()

        if record is None:
            record = AttendanceRecord(**fields)
            self._db.add(record)
        else:
            for name, value in fields.items():
                setattr(record, name, value)

        await self._db.commit()
        await self._db.refresh(record)
        return record

    async def update_attendance_record(self, record_id: int, changes: dict) -> AttendanceRecord:
        result = await self._db.execute(
            select(AttendanceRecord).where(AttendanceRecord.id == record_id).with_for_update()
        )
        record = result.scalar_one()
        for name, value in changes.items():
            setattr(record, name, value)

        await self._db.commit()
        await self._db.refresh(record)
        return record

    # ── Friday policy settings (singleton row) ──────────────────────
    async def _get_or_create_settings_row(self) -> FridayPolicySettings:
        result = await self._db.execute(select(FridayPolicySettings).limit(1))
        row = result.scalar_one_or_none()
        if row is None:
            row = FridayPolicySettings(id=1, **FridayPolicyConfig().model_dump())
            self._db.add(row)
            await self._db.commit()
            await self._db.refresh(row)
        return row

    async def get_friday_policy_settings(self) -> FridayPolicyConfig:
        row = await self._get_or_create_settings_row()
        return FridayPolicyConfig.model_validate(row)

    async def save_friday_policy_settings(self, config: FridayPolicyConfig) -> FridayPolicyConfig:
        row = await self._get_or_create_settings_row()
        for name, value in config.model_dump().items():
            setattr(row, name, value)

        await self._db.commit()
        await self._db.refresh(row)
        return FridayPolicyConfig.model_validate(row)
