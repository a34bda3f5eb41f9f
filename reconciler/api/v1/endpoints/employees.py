"""
Employee CRUD + import boundary (employees and biometric punches).

Imports arrive already normalised into canonical rows; this module only
drops duplicates and rows whose timestamp cannot be read.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reconciler.api.v1.deps import get_db
from reconciler.models.employee import BiometricPunch, Employee
from reconciler.schemas.employee import (
    EmployeeCreate,
    EmployeeRead,
    EmployeeUpdate,
    ImportResponse,
    PunchImportRequest,
)
from reconciler.utils.timeutils import local_to_utc

router = APIRouter(tags=["employees"])
logger = logging.getLogger(__name__)


def _parse_punch_datetime(value: str, offset_minutes: int) -> datetime | None:
    """UTC instant of an imported reading, or None when it cannot be parsed.

    A naive value is a local wall-clock reading taken with the client offset.
    """
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        return parsed.astimezone(timezone.utc)
    return local_to_utc(parsed, offset_minutes)


# ── Employee CRUD ───────────────────────────────────────────────────
@router.get("/employees", response_model=list[EmployeeRead])
async def list_employees(
    skip: int = 0,
    limit: int = Query(default=50, le=500),
    search: str | None = None,
    db: AsyncSession = Depends(get_db),
) -> list[Employee]:
    query = select(Employee).order_by(Employee.code).offset(skip).limit(limit)
    if search:
        # Escape SQL LIKE metacharacters to prevent wildcard injection
        safe_search = search.replace("%", r"\%").replace("_", r"\_")
        query = query.where(Employee.name.ilike(f"%{safe_search}%", escape="\\"))
    result = await db.execute(query)
    return list(result.scalars().all())


@router.post("/employees", response_model=EmployeeRead, status_code=201)
async def create_employee(
    body: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
) -> Employee:
    existing = await db.execute(select(Employee).where(Employee.code == body.code))
    if existing.scalar_one_or_none():
        raise HTTPException(
            status_code=400,
            detail=f"Employee code '{body.code}' already registered",
        )

    employee = Employee(**body.model_dump())
    db.add(employee)
    await db.commit()
    await db.refresh(employee)
    logger.info("Created employee %s (%s)", employee.code, employee.name)
    return employee


@router.get("/employees/{employee_id}", response_model=EmployeeRead)
async def get_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
) -> Employee:
    result = await db.execute(select(Employee).where(Employee.id == employee_id))
    emp = result.scalar_one_or_none()
    if emp is None:
        raise HTTPException(status_code=404, detail="Employee not found")
    return emp


@router.put("/employees/{employee_id}", response_model=EmployeeRead)
async def update_employee(
    employee_id: int,
    body: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
) -> Employee:
    result = await db.execute(select(Employee).where(Employee.id == employee_id))
    emp = result.scalar_one_or_none()
    if emp is None:
        raise HTTPException(status_code=404, detail="Employee not found")

    for field, value in body.model_dump(exclude_unset=True).items():
        if field == "shift_start" and value is None:
            continue
        setattr(emp, field, value)

    await db.commit()
    await db.refresh(emp)
    logger.info("Updated employee %d", employee_id)
    return emp


# ── Import ──────────────────────────────────────────────────────────
@router.post("/import/employees", response_model=ImportResponse)
async def import_employees(
    body: list[EmployeeCreate],
    db: AsyncSession = Depends(get_db),
) -> ImportResponse:
    """Bulk insert employees; codes already stored (or repeated in the batch) are ignored."""
    codes = {e.code for e in body}
    existing = await db.execute(select(Employee.code).where(Employee.code.in_(codes)))
    seen = set(existing.scalars().all())

    created = 0
    for item in body:
        if item.code in seen:
            continue
        seen.add(item.code)
        db.add(Employee(**item.model_dump()))
        created += 1

    await db.commit()
    logger.info("Imported %d employees (%d ignored)", created, len(body) - created)
    return ImportResponse(message="Imported employees", count=created, skipped=len(body) - created)


@router.post("/import/punches", response_model=ImportResponse)
async def import_punches(
    body: PunchImportRequest,
    db: AsyncSession = Depends(get_db),
) -> ImportResponse:
    """Bulk insert punches converted to UTC instants with the client offset."""
    rows = []
    for item in body.punches:
        instant = _parse_punch_datetime(item.punch_datetime, body.timezone_offset_minutes)
        if instant is None or not item.employee_code.strip():
            continue
        rows.append(BiometricPunch(employee_code=item.employee_code.strip(), punch_datetime=instant))

    db.add_all(rows)
    await db.commit()
    skipped = len(body.punches) - len(rows)
    logger.info("Imported %d punches (%d skipped)", len(rows), skipped)
    return ImportResponse(message="Imported punches", count=len(rows), skipped=skipped)
