"""Tests for the special-rule and adjustment endpoints."""

import pytest
from httpx import AsyncClient

RULE = {
    "name": "Ramadan hours",
    "rule_type": "custom_shift",
    "scope": "sector:collection",
    "start_date": "2024-03-01",
    "end_date": "2024-03-31",
    "priority": 5,
}


@pytest.mark.asyncio
async def test_create_and_list_rules(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/rules", json={**RULE, "params": {"shiftStart": "8:00", "shiftEnd": "14:30"}}
    )
    assert resp.status_code == 201
    assert resp.json()["params"] == {"shiftStart": "08:00", "shiftEnd": "14:30"}

    listed = await async_client.get("/api/v1/rules")
    assert [r["name"] for r in listed.json()] == ["Ramadan hours"]


@pytest.mark.asyncio
@pytest.mark.parametrize("shift_start", [8, "8am", "25:00", ""])
async def test_custom_shift_with_bad_time_is_rejected(async_client: AsyncClient, shift_start):
    resp = await async_client.post("/api/v1/rules", json={**RULE, "params": {"shiftStart": shift_start}})
    assert resp.status_code == 422
    assert (await async_client.get("/api/v1/rules")).json() == []


@pytest.mark.asyncio
async def test_shift_params_only_checked_on_custom_shift(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/rules",
        json={**RULE, "rule_type": "attendance_exempt", "params": {"shiftStart": 8}},
    )
    assert resp.status_code == 201


@pytest.mark.asyncio
async def test_rejected_rule_does_not_break_processing(async_client: AsyncClient):
    await async_client.post(
        "/api/v1/employees", json={"code": "C1", "name": "Laila", "sector": "collection"}
    )
    await async_client.post("/api/v1/rules", json={**RULE, "params": {"shiftStart": 8}})
    await async_client.post("/api/v1/rules", json={**RULE, "params": {"shiftStart": "10:00"}})
    await async_client.post("/api/v1/import/punches", json={"punches": [
        {"employee_code": "C1", "punch_datetime": "2024-03-04T10:10:00"},
        {"employee_code": "C1", "punch_datetime": "2024-03-04T16:00:00"},
    ]})

    resp = await async_client.post(
        "/api/v1/attendance/process", json={"start_date": "2024-03-04", "end_date": "2024-03-04"}
    )
    assert resp.status_code == 200
    assert resp.json()["processed_count"] == 1

    records = await async_client.get(
        "/api/v1/attendance", params={"start_date": "2024-03-04", "end_date": "2024-03-04"}
    )
    assert records.json()["data"][0]["status"] == "Present"


@pytest.mark.asyncio
async def test_delete_rule(async_client: AsyncClient):
    created = await async_client.post("/api/v1/rules", json={**RULE, "params": {}})
    rule_id = created.json()["id"]
    resp = await async_client.delete(f"/api/v1/rules/{rule_id}")
    assert resp.json()["success"] is True
    missing = await async_client.delete(f"/api/v1/rules/{rule_id}")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_rule_with_inverted_dates_is_rejected(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/rules", json={**RULE, "start_date": "2024-03-31", "end_date": "2024-03-01"}
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_create_and_filter_adjustments(async_client: AsyncClient):
    for code in ("E1", "E2"):
        resp = await async_client.post("/api/v1/adjustments", json={
            "employee_code": code, "type": "sick", "start_date": "2024-03-04", "end_date": "2024-03-05",
        })
        assert resp.status_code == 201
    listed = await async_client.get("/api/v1/adjustments", params={"employee_code": "E2"})
    assert [a["employee_code"] for a in listed.json()] == ["E2"]


@pytest.mark.asyncio
async def test_unknown_adjustment_type_is_rejected(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/adjustments", json={
        "employee_code": "E1", "type": "vacation", "start_date": "2024-03-04", "end_date": "2024-03-04",
    })
    assert resp.status_code == 422
