"""
Friday policy endpoints: singleton settings and the monthly credit report.

GET returns the settings row, creating it with defaults on first use;
PUT replaces it and echoes back the normalised values.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from reconciler.api.v1.deps import get_storage
from reconciler.db.storage import SqlAlchemyStorage
from reconciler.schemas.friday_policy import FridayPolicyConfig, FridayPolicyReport
from reconciler.services import friday_policy

router = APIRouter(prefix="/friday-policy", tags=["friday-policy"])


@router.get("/settings", response_model=FridayPolicyConfig)
async def get_settings(
    storage: SqlAlchemyStorage = Depends(get_storage),
) -> FridayPolicyConfig:
    return await friday_policy.get_settings(storage)


@router.put("/settings", response_model=FridayPolicyConfig)
async def update_settings(
    payload: dict[str, Any] = Body(...),
    storage: SqlAlchemyStorage = Depends(get_storage),
) -> FridayPolicyConfig:
    """Replace the policy settings; values that cannot be coerced take their defaults."""
    return await friday_policy.update_settings(storage, payload)


@router.get("/report", response_model=FridayPolicyReport)
async def report(
    month: str = Query(..., description="Report month, YYYY-MM"),
    storage: SqlAlchemyStorage = Depends(get_storage),
) -> FridayPolicyReport:
    """Prior-month Friday credit and current-month usage per included employee."""
    return await friday_policy.build_friday_report(storage, month)
