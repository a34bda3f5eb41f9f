"""Tests for employee CRUD and the import endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from reconciler.models.employee import BiometricPunch


@pytest.mark.asyncio
async def test_create_employee(async_client: AsyncClient):
    """POST /employees should create a new employee."""
    resp = await async_client.post("/api/v1/employees", json={
        "code": "E-001",
        "name": "Bob Jones",
        "department": "Engineering",
        "sector": "operations",
        "shift_start": "8:30",
    })
    assert resp.status_code == 201
    data = resp.json()
    assert data["code"] == "E-001"
    assert data["name"] == "Bob Jones"
    assert data["shift_start"] == "08:30"
    assert data["id"] is not None


@pytest.mark.asyncio
async def test_default_shift_start(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/employees", json={"code": "E-002", "name": "Dina"})
    assert resp.json()["shift_start"] == "09:00"


@pytest.mark.asyncio
async def test_create_duplicate_code_rejected(async_client: AsyncClient):
    """Creating two employees with the same code should fail."""
    await async_client.post("/api/v1/employees", json={"code": "DUP-001", "name": "Emp1"})
    resp = await async_client.post("/api/v1/employees", json={"code": "DUP-001", "name": "Emp2"})
    assert resp.status_code == 400
    assert "already registered" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_invalid_shift_start_rejected(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/employees", json={"code": "BAD-1", "name": "X", "shift_start": "25:99"}
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_list_employees_pagination(async_client: AsyncClient):
    """GET /employees with skip/limit should paginate."""
    for i in range(5):
        await async_client.post("/api/v1/employees", json={"code": f"PAGE-{i:03d}", "name": f"P{i}"})
    resp = await async_client.get("/api/v1/employees?skip=2&limit=2")
    assert resp.status_code == 200
    assert [e["code"] for e in resp.json()] == ["PAGE-002", "PAGE-003"]


@pytest.mark.asyncio
async def test_search_employees(async_client: AsyncClient):
    await async_client.post("/api/v1/employees", json={"code": "S-1", "name": "Nour Adel"})
    await async_client.post("/api/v1/employees", json={"code": "S-2", "name": "Omar Saleh"})
    resp = await async_client.get("/api/v1/employees?search=nour")
    assert [e["code"] for e in resp.json()] == ["S-1"]


@pytest.mark.asyncio
async def test_get_employee_not_found(async_client: AsyncClient):
    """Requesting a non-existent employee should return 404."""
    resp = await async_client.get("/api/v1/employees/9999")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update_employee(async_client: AsyncClient):
    """PUT /employees/{id} should update employee details."""
    create = await async_client.post("/api/v1/employees", json={"code": "UPD-001", "name": "Old Name"})
    eid = create.json()["id"]
    resp = await async_client.put(
        f"/api/v1/employees/{eid}", json={"name": "New Name", "sector": "collection"}
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "New Name"
    assert data["sector"] == "collection"
    assert data["shift_start"] == "09:00"


# ── Import ─────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_import_employees_ignores_duplicates(async_client: AsyncClient):
    await async_client.post("/api/v1/employees", json={"code": "IMP-1", "name": "Existing"})
    resp = await async_client.post("/api/v1/import/employees", json=[
        {"code": "IMP-1", "name": "Again"},
        {"code": "IMP-2", "name": "New"},
        {"code": "IMP-2", "name": "Repeated"},
    ])
    assert resp.status_code == 200
    assert resp.json()["count"] == 1
    assert resp.json()["skipped"] == 2

    listed = await async_client.get("/api/v1/employees")
    names = {e["code"]: e["name"] for e in listed.json()}
    assert names == {"IMP-1": "Existing", "IMP-2": "New"}


@pytest.mark.asyncio
async def test_import_punches_converts_to_utc(async_client: AsyncClient, db_session):
    resp = await async_client.post("/api/v1/import/punches", json={
        "timezone_offset_minutes": -120,
        "punches": [
            {"employee_code": "E1", "punch_datetime": "2024-03-04T09:10:00"},
            {"employee_code": "E1", "punch_datetime": "2024-03-04T15:00:00+00:00"},
            {"employee_code": "E1", "punch_datetime": "not a date"},
            {"employee_code": " ", "punch_datetime": "2024-03-04T09:10:00"},
        ],
    })
    assert resp.status_code == 200
    assert resp.json()["count"] == 2
    assert resp.json()["skipped"] == 2

    result = await db_session.execute(select(BiometricPunch).order_by(BiometricPunch.punch_datetime))
    stamps = [(p.punch_datetime.hour, p.punch_datetime.minute) for p in result.scalars().all()]
    assert stamps == [(7, 10), (15, 0)]
