"""
Attendance endpoints: processing runs, record listing, Friday leave toggle.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from reconciler.api.v1.deps import get_db, get_storage
from reconciler.core.config import settings
from reconciler.db.storage import SqlAlchemyStorage
from reconciler.models.attendance import AttendanceRecord
from reconciler.schemas.attendance import (
    AttendancePage,
    AttendanceRead,
    FridayCompLeaveToggle,
    ProcessAttendanceRequest,
    ProcessAttendanceResponse,
)
from reconciler.services.evaluator import DayPolicy
from reconciler.services.friday_policy import toggle_friday_comp_leave
from reconciler.services.processor import parse_range, process_attendance

router = APIRouter(tags=["attendance"])
logger = logging.getLogger(__name__)


@router.get("/attendance", response_model=AttendancePage)
async def list_attendance(
    start_date: str = Query(...),
    end_date: str = Query(...),
    employee_code: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=0, le=1000),
    db: AsyncSession = Depends(get_db),
) -> AttendancePage:
    """Stored records in a date range; ``limit=0`` returns every row."""
    start, end = parse_range(start_date, end_date)
    conditions = [AttendanceRecord.date >= start.isoformat(), AttendanceRecord.date <= end.isoformat()]
    if employee_code:
        conditions.append(AttendanceRecord.employee_code == employee_code)

    total = (await db.execute(select(func.count(AttendanceRecord.id)).where(*conditions))).scalar() or 0

    stmt = (
        select(AttendanceRecord)
        .where(*conditions)
        .order_by(AttendanceRecord.date, AttendanceRecord.employee_code)
    )
    if limit > 0:
        stmt = stmt.offset((page - 1) * limit).limit(limit)
    result = await db.execute(stmt)

    return AttendancePage(
        data=[AttendanceRead.model_validate(r) for r in result.scalars().all()],
        total=total,
        page=page,
        limit=limit,
    )


@router.post("/attendance/process", response_model=ProcessAttendanceResponse)
async def process(
    body: ProcessAttendanceRequest,
    storage: SqlAlchemyStorage = Depends(get_storage),
) -> ProcessAttendanceResponse:
    """Reconcile every employee x local day of the range into attendance records."""
    processed = await process_attendance(
        storage,
        start_date=body.start_date,
        end_date=body.end_date,
        offset_minutes=body.timezone_offset_minutes,
        policy=DayPolicy.from_settings(settings),
    )
    return ProcessAttendanceResponse(processed_count=processed)


@router.patch("/attendance/{record_id}/friday-comp-leave", response_model=AttendanceRead)
async def toggle_friday_leave(
    record_id: int,
    body: FridayCompLeaveToggle,
    storage: SqlAlchemyStorage = Depends(get_storage),
) -> AttendanceRecord:
    """Manually set Friday compensatory leave; the choice survives reprocessing."""
    return await toggle_friday_comp_leave(
        storage, record_id, body.enabled, note=body.note, updated_by=body.updated_by
    )


@router.get("/health")
async def health(db: AsyncSession = Depends(get_db)) -> dict:
    """Database connectivity check."""
    try:
        await db.execute(select(1))
        return {"db": True}
    except Exception as e:
        logger.error("Health check DB failure: %s", e)
        return {"db": False}
